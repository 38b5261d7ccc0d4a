"""Configuration for sitemap generation."""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings


@dataclass(frozen=True, slots=True)
class SitemapConfig:
    """Static limits and public locations used when rendering sitemaps.

    Attributes:
        page_item_limit: Maximum `<url>` entries in one sitemap document.
        public_web_url: Site root that page locations are appended to.
        public_api_url: API root that serves the sitemap documents.
    """

    page_item_limit: int
    public_web_url: str
    public_api_url: str

    def __post_init__(self) -> None:
        if self.page_item_limit <= 0:
            raise ValueError(f"page_item_limit must be positive, got {self.page_item_limit}")
        object.__setattr__(self, "public_web_url", self.public_web_url.rstrip("/"))
        object.__setattr__(self, "public_api_url", self.public_api_url.rstrip("/"))

    @classmethod
    def from_settings(cls) -> SitemapConfig:
        """Build a config from Django settings."""

        return cls(
            page_item_limit=settings.SITEMAP_PAGE_ITEM_LIMIT,
            public_web_url=settings.PUBLIC_WEB_URL,
            public_api_url=settings.PUBLIC_API_URL,
        )
