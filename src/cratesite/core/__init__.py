"""Framework-independent sitemap and about page logic."""
