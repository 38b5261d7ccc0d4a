"""Sitemap generation for public armory pages."""

from __future__ import annotations

from core.sitemap.config import SitemapConfig
from core.sitemap.errors import MalformedRowError, SitemapError, UnsupportedResourceError
from core.sitemap.service import SitemapService
from core.sitemap.store import DjangoResourceStore, ResourceStore

__all__ = [
    "DjangoResourceStore",
    "MalformedRowError",
    "ResourceStore",
    "SitemapConfig",
    "SitemapError",
    "SitemapService",
    "UnsupportedResourceError",
]
