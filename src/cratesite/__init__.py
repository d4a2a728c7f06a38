"""Cratesite - sitemaps and about pages for a crate documentation host."""

__version__ = "0.1.0"
