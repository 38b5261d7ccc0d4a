"""Declarative route table for sitemap generation.

Adding a resource type to the sitemap only requires a new `RESOURCE_ROUTES`
entry (plus a model in the store).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from core.sitemap.builders import ChangeFrequency
from core.sitemap.errors import MalformedRowError

STATIC_RESOURCE = "static"


@dataclass(frozen=True, slots=True)
class Route:
    """A path suffix and priority applied to every row of a resource."""

    suffix: str
    priority: str | None = None
    changefreq: ChangeFrequency | None = None


@dataclass(frozen=True, slots=True)
class ResourceRoutes:
    """How rows of one resource become sitemap locations.

    Attributes:
        path_for: Returns the base path of a row (e.g. `g/<guild name>`).
        routes: Routes appended to the base path, in output order.
        relations: Relations the store must eager-load for `path_for`.
    """

    path_for: Callable[[Any], str]
    routes: tuple[Route, ...]
    relations: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class StaticRoute:
    """A fixed public page.

    Attributes:
        loc: Path below the site root.
        priority: Sitemap priority.
        changefreq: Optional change frequency.
        pvp_lastmod: Use the latest PvP ladder refresh as `<lastmod>`.
    """

    loc: str
    priority: str | None = None
    changefreq: ChangeFrequency | None = None
    pvp_lastmod: bool = False


def user_path(row: Any) -> str:
    return row.alias


def guild_path(row: Any) -> str:
    return f"g/{row.name}"


def character_path(row: Any) -> str:
    """Return `<owner alias>/c/<name>` for a character row.

    Raises:
        MalformedRowError: When the character has no owning alias.
    """

    token = getattr(row, "api_token", None)
    profile = getattr(token, "profile", None)
    alias = getattr(profile, "alias", None)
    if not alias:
        raise MalformedRowError(f"Character {row.name!r} has no owning alias")
    return f"{alias}/c/{row.name}"


RESOURCE_ROUTES: dict[str, ResourceRoutes] = {
    "users": ResourceRoutes(
        path_for=user_path,
        routes=(
            Route("", priority="0.8", changefreq=ChangeFrequency.DAILY),
            Route("/characters", priority="0.6", changefreq=ChangeFrequency.DAILY),
        ),
    ),
    "guilds": ResourceRoutes(
        path_for=guild_path,
        routes=(
            Route("", priority="0.7", changefreq=ChangeFrequency.DAILY),
            Route("/members", priority="0.5", changefreq=ChangeFrequency.WEEKLY),
        ),
    ),
    "characters": ResourceRoutes(
        path_for=character_path,
        routes=(
            Route("", priority="0.7", changefreq=ChangeFrequency.DAILY),
            Route("/builds", priority="0.6", changefreq=ChangeFrequency.DAILY),
        ),
        relations=("api_token__profile",),
    ),
}

STATIC_ROUTES: tuple[StaticRoute, ...] = (
    StaticRoute("", priority="1.0", changefreq=ChangeFrequency.DAILY),
    StaticRoute("leaderboards/pvp", priority="0.9", changefreq=ChangeFrequency.HOURLY, pvp_lastmod=True),
    StaticRoute("leaderboards/pvp/na", priority="0.8", changefreq=ChangeFrequency.HOURLY, pvp_lastmod=True),
    StaticRoute("leaderboards/pvp/eu", priority="0.8", changefreq=ChangeFrequency.HOURLY, pvp_lastmod=True),
    StaticRoute("statistics", priority="0.5", changefreq=ChangeFrequency.DAILY),
)
