"""Tests for sitemap endpoints."""

from datetime import UTC, datetime
from xml.etree import ElementTree as ET

import pytest
from aiohttp.test_utils import TestClient
from cratesite.config import Config
from cratesite.database import Database
from cratesite.render import SITEMAP_NS
from cratesite.server import create_app

LETTERS = "abcdefghijklmnopqrstuvwxyz"
NS = {"sm": SITEMAP_NS}


class BrokenDatabase(Database):
    """Database whose queries always fail."""

    def fetch(self, prefix: str):
        raise OSError("database is gone")


@pytest.fixture
def client(test_config: Config, aiohttp_client) -> TestClient:
    """Create test client with configured app."""
    app = create_app(test_config)
    return aiohttp_client(app)


class TestSitemapIndex:
    """Tests for GET /sitemap.xml."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/sitemap.xml", "/sitemap-index"])
    async def test__index__lists_every_shard(self, client, path: str) -> None:
        test_client = await client
        response = await test_client.get(path)

        assert response.status == 200
        assert response.content_type == "application/xml"
        root = ET.fromstring(await response.text())
        locations = [loc.text for loc in root.findall("sm:sitemap/sm:loc", NS)]
        assert locations == [
            f"https://docs.example.com/-/sitemap/{letter}/sitemap.xml"
            for letter in LETTERS
        ]


class TestShardSitemap:
    """Tests for GET /-/sitemap/{letter}/sitemap.xml."""

    @pytest.mark.asyncio
    async def test__every_letter__succeeds_on_empty_database(self, client) -> None:
        test_client = await client
        for letter in LETTERS:
            response = await test_client.get(f"/-/sitemap/{letter}/sitemap.xml")

            assert response.status == 200
            assert response.content_type == "application/xml"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("letter", ["1", "aa", "A"])
    async def test__invalid_letter__returns_404(self, client, letter: str) -> None:
        test_client = await client
        response = await test_client.get(f"/-/sitemap/{letter}/sitemap.xml")

        assert response.status == 404

    @pytest.mark.asyncio
    async def test__crate__appears_only_in_its_shard(
        self, client, database: Database
    ) -> None:
        database.add_release("some_random_crate", "1.0.0")
        database.add_release(
            "some_random_crate_that_failed", "1.0.0", build_status=False
        )

        test_client = await client
        response = await test_client.get("/-/sitemap/s/sitemap.xml")
        assert response.status == 200
        content = await response.text()
        assert "some_random_crate" in content
        assert "some_random_crate_that_failed" not in content

        for letter in LETTERS.replace("s", ""):
            response = await test_client.get(f"/-/sitemap/{letter}/sitemap.xml")
            assert response.status == 200
            assert "some_random_crate" not in await response.text()

    @pytest.mark.asyncio
    async def test__old_release__reports_floor_date(
        self, client, database: Database
    ) -> None:
        database.add_release(
            "some_random_crate",
            "1.0.0",
            release_time=datetime(2020, 1, 1, tzinfo=UTC),
        )

        test_client = await client
        response = await test_client.get("/-/sitemap/s/sitemap.xml")

        assert response.status == 200
        content = await response.text()
        assert "2022-08-28T00:00:00+00:00" in content
        assert "2020-01-01" not in content

    @pytest.mark.asyncio
    async def test__entry__links_to_latest_docs(
        self, client, database: Database
    ) -> None:
        database.add_release(
            "some-crate",
            "0.3.0",
            release_time=datetime(2024, 5, 6, 7, 8, 9, tzinfo=UTC),
        )

        test_client = await client
        response = await test_client.get("/sitemap/s")

        root = ET.fromstring(await response.text())
        urls = root.findall("sm:url", NS)
        assert len(urls) == 1
        assert (
            urls[0].findtext("sm:loc", namespaces=NS)
            == "https://docs.example.com/some-crate/latest/some_crate/"
        )
        assert (
            urls[0].findtext("sm:lastmod", namespaces=NS) == "2024-05-06T07:08:09+00:00"
        )

    @pytest.mark.asyncio
    async def test__query_failure__returns_500_without_details(
        self, test_config: Config, aiohttp_client
    ) -> None:
        app = create_app(test_config, database=BrokenDatabase(test_config.database.path))
        test_client = await aiohttp_client(app)

        response = await test_client.get("/-/sitemap/a/sitemap.xml")

        assert response.status == 500
        assert "database is gone" not in await response.text()

    @pytest.mark.asyncio
    async def test__invalid_letter__skips_database(
        self, test_config: Config, aiohttp_client
    ) -> None:
        app = create_app(test_config, database=BrokenDatabase(test_config.database.path))
        test_client = await aiohttp_client(app)

        response = await test_client.get("/-/sitemap/AA/sitemap.xml")

        assert response.status == 404


class TestRobotsTxt:
    """Tests for GET /robots.txt."""

    @pytest.mark.asyncio
    async def test__robots__points_to_sitemap_index(self, client) -> None:
        test_client = await client
        response = await test_client.get("/robots.txt")

        assert response.status == 200
        assert "Sitemap: https://docs.example.com/sitemap.xml" in await response.text()
