"""Sitemap assembly.

Crates are partitioned into one sitemap per lowercase first letter of their
name, so that no single sitemap grows past what crawlers accept. The index
lists all 26 shards without touching the database.
"""

import asyncio
import logging
import string
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from typing import Protocol

from cratesite.core.types import (
    ReleaseRow,
    ShardKey,
    SitemapDocument,
    SitemapEntry,
    SitemapIndexDocument,
)
from cratesite.errors import NotFoundError, QueryError, WorkerError

logger = logging.getLogger(__name__)

SHARD_KEYS: tuple[ShardKey, ...] = tuple(
    ShardKey(letter) for letter in string.ascii_lowercase
)

# On Aug 27 2022 every page gained a <link rel="canonical">,
# so nothing may report an older modification time.
LAST_MODIFIED_FLOOR = datetime(2022, 8, 28, tzinfo=UTC)


class AggregationQuery(Protocol):
    """Read access to the latest successfully documented releases."""

    def fetch(self, prefix: str) -> Sequence[ReleaseRow]:
        """Return one row per (crate, target) for crates matching prefix.

        Matching is case-insensitive and restricted to releases with a
        successful documentation build. The release time is the maximum
        over all matching releases of the group.
        """
        ...


def validate_shard_key(raw: str) -> ShardKey:
    """Check that a raw path segment names a sitemap shard.

    Args:
        raw: Untrusted path segment

    Returns:
        The segment as a ShardKey

    Raises:
        NotFoundError: If raw is not exactly one lowercase ASCII letter
    """
    if len(raw) != 1 or raw not in string.ascii_lowercase:
        raise NotFoundError()
    return ShardKey(raw)


def build_sitemap_index() -> SitemapIndexDocument:
    """Return the fixed index of shard sitemaps, 'a' through 'z'."""
    return SitemapIndexDocument(sitemaps=SHARD_KEYS)


def normalize_last_modified(timestamp: datetime) -> datetime:
    """Clamp a timestamp so it never precedes LAST_MODIFIED_FLOOR.

    Naive timestamps are taken to be UTC.
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return max(timestamp, LAST_MODIFIED_FLOOR)


def format_last_modified(timestamp: datetime) -> str:
    """Format as RFC 3339 in UTC, e.g. ``2022-08-28T00:00:00+00:00``."""
    return timestamp.astimezone(UTC).isoformat()


def sitemap_entries(rows: Iterable[ReleaseRow]) -> tuple[SitemapEntry, ...]:
    """Turn aggregated release rows into sitemap entries."""
    return tuple(
        SitemapEntry(
            crate_name=row.crate_name,
            target_name=row.target_name,
            last_modified=format_last_modified(
                normalize_last_modified(row.last_release_time)
            ),
        )
        for row in rows
    )


def _fetch_releases(query: AggregationQuery, key: ShardKey) -> list[ReleaseRow]:
    try:
        return list(query.fetch(key))
    except Exception as e:
        raise QueryError(f"failed to fetch releases for sitemap {key!r}") from e


async def build_shard_sitemap(
    key: ShardKey,
    query: AggregationQuery,
) -> SitemapDocument:
    """Build the sitemap for one shard.

    The aggregation query blocks, so it runs in a worker thread and is
    awaited before the document is returned.

    Args:
        key: Validated shard key
        query: Aggregation query collaborator

    Returns:
        Sitemap document for the shard

    Raises:
        QueryError: If the query collaborator failed
        WorkerError: If the worker thread could not be joined
    """
    try:
        rows = await asyncio.to_thread(_fetch_releases, query, key)
    except QueryError:
        raise
    except Exception as e:
        raise WorkerError("failed to join sitemap worker") from e

    logger.debug(f"Sitemap {key!r}: {len(rows)} releases")
    return SitemapDocument(letter=key, releases=sitemap_entries(rows))
