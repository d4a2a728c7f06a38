"""Sitemap endpoints.

Serves the sitemap index, one sitemap per crate-name initial and robots.txt.
"""

from aiohttp import web

from cratesite.app_keys import base_url_key, database_key
from cratesite.core.sitemap import (
    build_shard_sitemap,
    build_sitemap_index,
    validate_shard_key,
)
from cratesite.render import render_robots_txt, render_sitemap, render_sitemap_index


def create_sitemap_routes() -> list[web.RouteDef]:
    return [
        web.get("/sitemap.xml", get_sitemap_index),
        web.get("/sitemap-index", get_sitemap_index),
        web.get("/-/sitemap/{letter}/sitemap.xml", get_sitemap),
        web.get("/sitemap/{letter}", get_sitemap),
        web.get("/robots.txt", get_robots_txt),
    ]


async def get_sitemap_index(request: web.Request) -> web.Response:
    document = build_sitemap_index()
    return web.Response(
        text=render_sitemap_index(document, request.app[base_url_key]),
        content_type="application/xml",
    )


async def get_sitemap(request: web.Request) -> web.Response:
    key = validate_shard_key(request.match_info["letter"])
    document = await build_shard_sitemap(key, request.app[database_key])
    return web.Response(
        text=render_sitemap(document, request.app[base_url_key]),
        content_type="application/xml",
    )


async def get_robots_txt(request: web.Request) -> web.Response:
    return web.Response(text=render_robots_txt(request.app[base_url_key]))
