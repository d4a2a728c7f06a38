"""About page endpoints."""

import asyncio

from aiohttp import web

from cratesite.app_keys import database_key, limits_key, templates_key
from cratesite.core.about import resolve_about_page
from cratesite.database import RUSTC_VERSION, Database
from cratesite.errors import ConfigLookupError, WorkerError


def create_about_routes() -> list[web.RouteDef]:
    # /about/builds must be registered before the catch-all name route
    return [
        web.get("/about", get_about_page),
        web.get("/about/builds", get_about_builds),
        web.get("/about/{name}", get_about_page),
    ]


async def get_about_page(request: web.Request) -> web.Response:
    name = request.match_info.get("name", "about")
    page = resolve_about_page(name)
    html = request.app[templates_key].render(page.template, active_tab=page.active_tab)
    return web.Response(text=html, content_type="text/html")


async def get_about_builds(request: web.Request) -> web.Response:
    rustc_version = await _fetch_rustc_version(request.app[database_key])
    html = request.app[templates_key].render(
        "core/about/builds.html",
        rustc_version=rustc_version,
        limits=request.app[limits_key].for_display(),
        active_tab="builds",
    )
    return web.Response(text=html, content_type="text/html")


def _read_rustc_version(database: Database) -> str | None:
    try:
        return database.get_config(RUSTC_VERSION)
    except Exception as e:
        raise ConfigLookupError(f"failed to read {RUSTC_VERSION!r}") from e


async def _fetch_rustc_version(database: Database) -> str | None:
    try:
        return await asyncio.to_thread(_read_rustc_version, database)
    except ConfigLookupError:
        raise
    except Exception as e:
        raise WorkerError("failed to join config worker") from e
