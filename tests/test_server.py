"""Tests for server module."""

import pytest
from cratesite.app_keys import base_url_key, database_key, limits_key, templates_key
from cratesite.config import Config
from cratesite.database import Database
from cratesite.server import create_app


class TestCreateApp:
    """Tests for create_app()."""

    def test__valid_config__returns_configured_app(self, test_config: Config) -> None:
        """Create app with valid configuration."""
        app = create_app(test_config)

        assert templates_key in app
        assert app[database_key].path == test_config.database.path
        assert app[limits_key] == test_config.limits
        assert app[base_url_key] == "https://docs.example.com"

    def test__injected_database__is_used(
        self, test_config: Config, tmp_path
    ) -> None:
        database = Database(tmp_path / "other.db")

        app = create_app(test_config, database=database)

        assert app[database_key] is database

    @pytest.mark.asyncio
    async def test__unknown_route__returns_404(
        self, test_config: Config, aiohttp_client
    ) -> None:
        client = await aiohttp_client(create_app(test_config))

        response = await client.get("/no/such/route")

        assert response.status == 404
