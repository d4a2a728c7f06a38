"""Application keys for type-safe app configuration access."""

from aiohttp import web

from cratesite.core.limits import Limits
from cratesite.database import Database
from cratesite.render import TemplateRenderer

database_key = web.AppKey("database", Database)
templates_key = web.AppKey("templates", TemplateRenderer)
limits_key = web.AppKey("limits", Limits)
base_url_key = web.AppKey("base_url", str)
