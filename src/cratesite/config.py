"""Configuration management for Cratesite.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from cratesite.core.limits import Limits

CONFIG_FILENAME = "cratesite.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 3000


@dataclass
class DatabaseConfig:
    """Database configuration."""

    path: Path = field(default_factory=lambda: Path("cratesite.db"))


@dataclass
class SiteConfig:
    """Public site configuration."""

    base_url: str = "https://docs.rs"


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    database: DatabaseConfig
    site: SiteConfig
    limits: Limits
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for cratesite.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(
            server=ServerConfig(),
            database=DatabaseConfig(),
            site=SiteConfig(),
            limits=Limits(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            database=cls._parse_database(data.get("database"), config_dir),
            site=cls._parse_site(data.get("site")),
            limits=cls._parse_limits(data.get("limits")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 3000)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_database(cls, data: object, config_dir: Path) -> DatabaseConfig:
        """Parse database configuration section.

        Relative paths are resolved against the config file directory.
        """
        if data is None:
            return DatabaseConfig(path=config_dir / "cratesite.db")

        if not isinstance(data, dict):
            raise ValueError("database section must be a dictionary")

        path = data.get("path", "cratesite.db")
        if not isinstance(path, str):
            raise ValueError("database.path must be a string")

        return DatabaseConfig(path=config_dir / path)

    @classmethod
    def _parse_site(cls, data: object) -> SiteConfig:
        if data is None:
            return SiteConfig()

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        base_url = data.get("base_url", SiteConfig.base_url)
        if not isinstance(base_url, str):
            raise ValueError("site.base_url must be a string")

        return SiteConfig(base_url=base_url.rstrip("/"))

    @classmethod
    def _parse_limits(cls, data: object) -> Limits:
        """Parse limits configuration section.

        Missing keys keep their default build limits.
        """
        if data is None:
            return Limits()

        if not isinstance(data, dict):
            raise ValueError("limits section must be a dictionary")

        defaults = Limits()
        values: dict[str, int | bool] = {}
        for key in ("memory", "targets", "timeout", "max_log_size"):
            value = data.get(key, getattr(defaults, key))
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"limits.{key} must be an integer")
            if value < 0:
                raise ValueError(f"limits.{key} must not be negative")
            values[key] = value

        networking = data.get("networking", defaults.networking)
        if not isinstance(networking, bool):
            raise ValueError("limits.networking must be a boolean")
        values["networking"] = networking

        return Limits(**values)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        database_path: Path | None = None,
        base_url: str | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config.
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        database = self.database
        if database_path is not None:
            database = replace(self.database, path=database_path)

        site = self.site
        if base_url is not None:
            site = replace(self.site, base_url=base_url.rstrip("/"))

        return replace(self, server=server, database=database, site=site)
