"""Serialization of sitemap documents and about pages.

Sitemaps follow the sitemaps.org 0.9 schema. HTML pages are rendered
from Jinja templates bundled with the package.
"""

from typing import Any
from xml.etree import ElementTree as ET

from jinja2 import Environment, PackageLoader, select_autoescape

from cratesite.core.about import ErrorPage
from cratesite.core.types import SitemapDocument, SitemapIndexDocument

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

ET.register_namespace("", SITEMAP_NS)


def _tag(name: str) -> str:
    return f"{{{SITEMAP_NS}}}{name}"


def _to_xml(root: ET.Element) -> str:
    ET.indent(root)
    body = ET.tostring(root, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'


def shard_url(base_url: str, letter: str) -> str:
    return f"{base_url}/-/sitemap/{letter}/sitemap.xml"


def render_sitemap_index(document: SitemapIndexDocument, base_url: str) -> str:
    """Render the sitemap index pointing at every shard sitemap."""
    root = ET.Element(_tag("sitemapindex"))
    for letter in document.sitemaps:
        sitemap = ET.SubElement(root, _tag("sitemap"))
        ET.SubElement(sitemap, _tag("loc")).text = shard_url(base_url, letter)
    return _to_xml(root)


def render_sitemap(document: SitemapDocument, base_url: str) -> str:
    """Render one shard sitemap with a URL per crate and target."""
    root = ET.Element(_tag("urlset"))
    for release in document.releases:
        url = ET.SubElement(root, _tag("url"))
        ET.SubElement(url, _tag("loc")).text = (
            f"{base_url}/{release.crate_name}/latest/{release.target_name}/"
        )
        ET.SubElement(url, _tag("lastmod")).text = release.last_modified
        ET.SubElement(url, _tag("priority")).text = "1.0"
        ET.SubElement(url, _tag("changefreq")).text = "weekly"
    return _to_xml(root)


def render_robots_txt(base_url: str) -> str:
    return f"Sitemap: {base_url}/sitemap.xml\n"


class TemplateRenderer:
    """Renders HTML pages from the bundled templates."""

    def __init__(self) -> None:
        self._env = Environment(
            loader=PackageLoader("cratesite", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def render(self, template: str, **context: Any) -> str:
        return self._env.get_template(template).render(**context)

    def render_error(self, page: ErrorPage) -> str:
        return self.render(
            "core/error.html",
            title=page.title,
            message=page.message,
            status=page.status,
        )
