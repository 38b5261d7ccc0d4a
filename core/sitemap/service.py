"""Sitemap orchestration: page planning, row expansion and rendering."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime

from django.utils import timezone

from core.sitemap.builders import (
    build_sitemap,
    build_sitemap_index,
    build_sitemap_refs,
    build_url_entry,
)
from core.sitemap.config import SitemapConfig
from core.sitemap.errors import UnsupportedResourceError
from core.sitemap.planner import page_window, plan_pages, resources_per_page
from core.sitemap.routes import (
    RESOURCE_ROUTES,
    STATIC_RESOURCE,
    STATIC_ROUTES,
    ResourceRoutes,
    StaticRoute,
)
from core.sitemap.store import ResourceStore

logger = logging.getLogger(__name__)


class SitemapService:
    """Generate sitemap pages and the sitemap index.

    Args:
        store: Read access to resource rows and counts.
        config: Item limit and public URLs.
        routes: Route table for paginated resources.
        static_routes: Fixed public pages rendered for the `static` resource.
        clock: Returns the generation timestamp for index entries.
    """

    def __init__(
        self,
        store: ResourceStore,
        config: SitemapConfig,
        *,
        routes: Mapping[str, ResourceRoutes] = RESOURCE_ROUTES,
        static_routes: Sequence[StaticRoute] = STATIC_ROUTES,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self.store = store
        self.config = config
        self.routes = routes
        self.static_routes = static_routes
        self.clock = clock

    @property
    def resources(self) -> tuple[str, ...]:
        """Return every resource tag `generate` accepts."""

        return (STATIC_RESOURCE, *self.routes)

    def resources_per_page(self) -> dict[str, int]:
        """Return the row budget of one page for each paginated resource."""

        return {
            resource: resources_per_page(self.config.page_item_limit, len(spec.routes))
            for resource, spec in self.routes.items()
        }

    async def generate(self, resource: str, page: int = 0) -> str:
        """Render one sitemap page.

        Args:
            resource: `static` or a key of the route table.
            page: Zero-based page index (ignored for `static`).

        Returns:
            A complete `<urlset>` document. Pages past the last row are empty.

        Raises:
            UnsupportedResourceError: For an unknown resource.
            MalformedRowError: When a row cannot be turned into a location.
            ValueError: For a negative page index.
        """

        if resource == STATIC_RESOURCE:
            return await self._build_static_page()

        spec = self.routes.get(resource)
        if spec is None:
            raise UnsupportedResourceError(resource)

        per_page = resources_per_page(self.config.page_item_limit, len(spec.routes))
        window = page_window(page, per_page)
        rows = []
        if window.limit:
            rows = await self.store.read_page(
                resource,
                offset=window.offset,
                limit=window.limit,
                relations=spec.relations,
            )

        entries = []
        for row in rows:
            base_path = spec.path_for(row)
            for route in spec.routes:
                entries.append(
                    build_url_entry(
                        self.config.public_web_url,
                        f"{base_path}{route.suffix}",
                        priority=route.priority,
                        lastmod=row.updated_at,
                        changefreq=route.changefreq,
                    )
                )
        logger.debug("Generated sitemap %s page %d: %d rows, %d urls", resource, page, len(rows), len(entries))
        return build_sitemap(entries)

    async def index(self) -> str:
        """Render the sitemap index covering every page of every resource."""

        totals = await self.store.count_resources()
        pages = plan_pages(
            totals,
            {resource: len(spec.routes) for resource, spec in self.routes.items()},
            page_item_limit=self.config.page_item_limit,
        )
        generated_at = self.clock()
        refs = build_sitemap_refs(self.config.public_api_url, STATIC_RESOURCE, 1, generated_at=generated_at)
        for resource in self.routes:
            refs.extend(
                build_sitemap_refs(
                    self.config.public_api_url, resource, pages[resource], generated_at=generated_at
                )
            )
        logger.info("Built sitemap index: totals=%s pages=%s", totals, pages)
        return build_sitemap_index(refs)

    async def _build_static_page(self) -> str:
        """Render fixed public pages; ladder pages carry the ladder refresh time."""

        pvp_updated_at = None
        if any(route.pvp_lastmod for route in self.static_routes):
            pvp_updated_at = await self.store.read_latest_pvp_standing_timestamp()
        entries = [
            build_url_entry(
                self.config.public_web_url,
                route.loc,
                priority=route.priority,
                lastmod=pvp_updated_at if route.pvp_lastmod else None,
                changefreq=route.changefreq,
            )
            for route in self.static_routes
        ]
        return build_sitemap(entries)
