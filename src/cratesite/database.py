"""SQLite storage for crates, releases and site configuration.

The web layer only reads from it. Every call opens its own connection, so a
Database can be shared between requests and used from worker threads.
"""

import json
import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

from cratesite.core.types import ReleaseRow

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS crates (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS releases (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    crate_id INTEGER NOT NULL REFERENCES crates(id) ON DELETE CASCADE,
    version TEXT NOT NULL,
    target_name TEXT NOT NULL,
    release_time TEXT NOT NULL,
    build_status INTEGER NOT NULL DEFAULT 1,
    rustdoc_status INTEGER NOT NULL DEFAULT 1,
    UNIQUE (crate_id, version)
);

CREATE INDEX IF NOT EXISTS idx_releases_crate_id ON releases(crate_id);

CREATE TABLE IF NOT EXISTS config (
    name TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

SITEMAP_QUERY = """
SELECT crates.name AS name,
       releases.target_name AS target_name,
       MAX(releases.release_time) AS release_time
FROM crates
INNER JOIN releases ON releases.crate_id = crates.id
WHERE releases.rustdoc_status = 1
  AND crates.name LIKE ? ESCAPE '\\'
GROUP BY crates.name, releases.target_name
ORDER BY crates.name, releases.target_name
"""

RUSTC_VERSION = "rustc_version"


class Database:
    """Handle to the SQLite database file.

    Implements the release aggregation query used for sitemaps and the
    key/value configuration store.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, committing on success and rolling back on error."""
        conn = sqlite3.connect(str(self.path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Create tables if they don't exist yet."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.connect() as conn:
            conn.executescript(SCHEMA)
        logger.debug(f"Initialized database schema at {self.path}")

    def fetch(self, prefix: str) -> list[ReleaseRow]:
        """Latest documented release time per (crate, target) for a name prefix.

        Args:
            prefix: Crate name prefix, matched case-insensitively

        Returns:
            Rows ordered by crate name, then target name
        """
        pattern = _escape_like(prefix) + "%"
        with self.connect() as conn:
            rows = conn.execute(SITEMAP_QUERY, (pattern,)).fetchall()
        return [
            ReleaseRow(
                crate_name=row["name"],
                target_name=row["target_name"],
                last_release_time=_parse_timestamp(row["release_time"]),
            )
            for row in rows
        ]

    def get_config(self, name: str) -> str | None:
        """Read a configuration value, None if it was never set."""
        with self.connect() as conn:
            row = conn.execute(
                "SELECT value FROM config WHERE name = ?", (name,)
            ).fetchone()
        if row is None:
            return None
        value = json.loads(row["value"])
        return value if isinstance(value, str) else str(value)

    def set_config(self, name: str, value: str) -> None:
        """Store a configuration value, replacing any previous one."""
        with self.connect() as conn:
            conn.execute(
                "INSERT INTO config (name, value) VALUES (?, ?) "
                "ON CONFLICT(name) DO UPDATE SET value = excluded.value",
                (name, json.dumps(value)),
            )

    def add_release(
        self,
        name: str,
        version: str,
        *,
        target_name: str | None = None,
        release_time: datetime | None = None,
        build_status: bool = True,
        rustdoc_status: bool | None = None,
    ) -> int:
        """Record a release, creating the crate if needed.

        Args:
            name: Crate name
            version: Release version
            target_name: Library target name (default: name with '-' as '_')
            release_time: Publication time (default: now)
            build_status: Whether the build succeeded
            rustdoc_status: Whether documentation was produced
                (default: same as build_status)

        Returns:
            ID of the release row
        """
        if target_name is None:
            target_name = name.replace("-", "_")
        if release_time is None:
            release_time = datetime.now(UTC)
        if rustdoc_status is None:
            rustdoc_status = build_status

        with self.connect() as conn:
            conn.execute("INSERT OR IGNORE INTO crates (name) VALUES (?)", (name,))
            crate_id = conn.execute(
                "SELECT id FROM crates WHERE name = ?", (name,)
            ).fetchone()["id"]
            cursor = conn.execute(
                """
                INSERT INTO releases
                    (crate_id, version, target_name, release_time,
                     build_status, rustdoc_status)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    crate_id,
                    version,
                    target_name,
                    _format_timestamp(release_time),
                    int(build_status),
                    int(rustdoc_status),
                ),
            )
            release_id = cursor.lastrowid
        logger.debug(f"Added release {name} {version} ({target_name})")
        assert release_id is not None
        return release_id


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _format_timestamp(value: datetime) -> str:
    # Fixed-width UTC text keeps MAX() and ORDER BY chronological
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f+00:00")


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
