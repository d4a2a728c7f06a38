"""aiohttp server for Cratesite.

Application factory, error handling middleware and route registration.
"""

import logging

from aiohttp import web
from aiohttp.typedefs import Handler

from cratesite.api.about import create_about_routes
from cratesite.api.sitemap import create_sitemap_routes
from cratesite.app_keys import base_url_key, database_key, limits_key, templates_key
from cratesite.config import Config
from cratesite.core.about import ErrorPage
from cratesite.database import Database
from cratesite.errors import InternalError, NotFoundError
from cratesite.render import TemplateRenderer

logger = logging.getLogger(__name__)

INTERNAL_ERROR_TITLE = "Internal server error"
INTERNAL_ERROR_MESSAGE = "An error occurred while handling your request."


@web.middleware
async def error_middleware(
    request: web.Request, handler: Handler
) -> web.StreamResponse:
    """Render cratesite errors as HTML error pages.

    Internal errors are logged with their cause, but the response only
    carries a generic message.
    """
    try:
        return await handler(request)
    except NotFoundError as e:
        page = ErrorPage.from_error(e)
    except InternalError:
        logger.exception(f"Internal error while handling {request.path}")
        page = ErrorPage(
            title=INTERNAL_ERROR_TITLE,
            message=INTERNAL_ERROR_MESSAGE,
            status=500,
        )

    html = request.app[templates_key].render_error(page)
    return web.Response(text=html, status=page.status, content_type="text/html")


def create_app(config: Config, *, database: Database | None = None) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        database: Database handle to use instead of config.database.path

    Returns:
        Configured aiohttp application
    """
    app = web.Application(middlewares=[error_middleware])

    app[database_key] = database or Database(config.database.path)
    app[templates_key] = TemplateRenderer()
    app[limits_key] = config.limits
    app[base_url_key] = config.site.base_url

    app.router.add_routes(create_sitemap_routes())
    app.router.add_routes(create_about_routes())

    return app


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
