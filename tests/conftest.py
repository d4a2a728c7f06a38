"""Shared test fixtures."""

from pathlib import Path

import pytest
from cratesite.config import Config, DatabaseConfig, ServerConfig, SiteConfig
from cratesite.core.limits import Limits
from cratesite.database import Database


@pytest.fixture
def database(tmp_path: Path) -> Database:
    """Create an empty database with schema applied."""
    db = Database(tmp_path / "cratesite.db")
    db.init_schema()
    return db


@pytest.fixture
def test_config(tmp_path: Path, database: Database) -> Config:
    """Create a test configuration pointing at the test database."""
    return Config(
        server=ServerConfig(),
        database=DatabaseConfig(path=database.path),
        site=SiteConfig(base_url="https://docs.example.com"),
        limits=Limits(),
    )
