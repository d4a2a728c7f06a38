"""Core type definitions."""

from dataclasses import dataclass
from datetime import datetime
from typing import NewType

# Single lowercase ASCII letter selecting one sitemap shard
# Only produced by validate_shard_key()
ShardKey = NewType("ShardKey", str)


@dataclass(frozen=True)
class ReleaseRow:
    """Latest release of one crate for one build target."""

    crate_name: str
    target_name: str
    last_release_time: datetime


@dataclass(frozen=True)
class SitemapEntry:
    """One documentation page listed in a shard sitemap."""

    crate_name: str
    target_name: str
    last_modified: str


@dataclass(frozen=True)
class SitemapDocument:
    """All documentation pages for one shard."""

    letter: ShardKey
    releases: tuple[SitemapEntry, ...]


@dataclass(frozen=True)
class SitemapIndexDocument:
    """Shard letters referenced by the sitemap index."""

    sitemaps: tuple[ShardKey, ...]
