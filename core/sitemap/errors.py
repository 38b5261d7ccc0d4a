"""Exceptions raised while generating sitemaps."""

from __future__ import annotations


class SitemapError(Exception):
    """Base class for sitemap generation failures."""


class UnsupportedResourceError(SitemapError):
    """Raised when a sitemap is requested for an unknown resource type."""

    def __init__(self, resource: str) -> None:
        super().__init__(f"Resource not supported: {resource!r}")
        self.resource = resource


class MalformedRowError(SitemapError):
    """Raised when a row cannot be turned into a public URL.

    The whole page fails so a broken location is never published.
    """
