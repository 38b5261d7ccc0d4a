"""Data access used by sitemap generation.

`ResourceStore` is the read-only contract the sitemap service depends on;
`DjangoResourceStore` implements it with the async ORM.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import datetime
from typing import Any, Protocol

from django.db import models

from accounts.models import Profile
from core.sitemap.errors import UnsupportedResourceError
from gamedata.models import Character, Guild, PvpStanding


class ResourceStore(Protocol):
    """Read operations consumed by `SitemapService`."""

    async def count_resources(self) -> dict[str, int]:
        """Return total row counts keyed by resource."""

    async def read_page(
        self, resource: str, *, offset: int, limit: int, relations: Sequence[str] = ()
    ) -> list[Any]:
        """Return up to `limit` rows starting at `offset`, in a stable order."""

    async def read_latest_pvp_standing_timestamp(self) -> datetime | None:
        """Return when the PvP ladder was last refreshed, if ever."""


class DjangoResourceStore:
    """ORM-backed `ResourceStore`."""

    MODELS: dict[str, type[models.Model]] = {
        "users": Profile,
        "guilds": Guild,
        "characters": Character,
    }

    async def count_resources(self) -> dict[str, int]:
        """Count every resource concurrently."""

        resources = list(self.MODELS)
        counts = await asyncio.gather(*(self.MODELS[name].objects.acount() for name in resources))
        return dict(zip(resources, counts))

    async def read_page(
        self, resource: str, *, offset: int, limit: int, relations: Sequence[str] = ()
    ) -> list[Any]:
        """Read a primary-key ordered window of rows.

        Raises:
            UnsupportedResourceError: When `resource` has no backing model.
        """

        model = self.MODELS.get(resource)
        if model is None:
            raise UnsupportedResourceError(resource)
        queryset = model.objects.order_by("pk")
        if relations:
            queryset = queryset.select_related(*relations)
        return [row async for row in queryset[offset : offset + limit]]

    async def read_latest_pvp_standing_timestamp(self) -> datetime | None:
        standing = await PvpStanding.objects.order_by("-updated_at").afirst()
        if standing is None:
            return None
        return standing.updated_at
