"""Read services for the public guild, character and leaderboard resources.

Services in `core` turn ORM rows into the JSON-ready dicts returned by views.
"""

from __future__ import annotations

from typing import Any

from django.conf import settings
from django.core.cache import cache

from accounts.services import list_guild_members
from gamedata.models import Character, Guild, PvpStanding


def read_guild(name: str) -> dict[str, Any] | None:
    """Return a guild with its registered members, or None when unknown."""

    guild = Guild.objects.filter(name=name).first()
    if guild is None:
        return None
    return {
        "id": guild.guild_id,
        "name": guild.name,
        "tag": guild.tag,
        "members": list_guild_members(guild.guild_id),
    }


def read_character(name: str) -> dict[str, Any] | None:
    """Return a character with its owner, or None when unknown."""

    character = (
        Character.objects.filter(name=name).select_related("api_token__profile", "guild").first()
    )
    if character is None:
        return None
    token = character.api_token
    return {
        "name": character.name,
        "race": character.race,
        "gender": character.gender,
        "profession": character.profession,
        "level": character.level,
        "age": character.age,
        "deaths": character.deaths,
        "created": character.created.isoformat() if character.created else None,
        "guild": character.guild.name if character.guild else None,
        "alias": token.profile.alias,
        "accountName": token.account_name,
    }


def read_pvp_leaderboard(region: str | None = None) -> list[dict[str, Any]]:
    """Return the latest season's ladder rows, cached.

    Args:
        region: `na`, `eu`, or None for both regions.

    Returns:
        Rows ordered by region then rank. Empty when no ladder was ingested.
    """

    cache_key = f"leaderboards:pvp:{region or 'all'}"
    return cache.get_or_set(
        cache_key,
        lambda: _load_pvp_leaderboard(region),
        timeout=settings.LEADERBOARD_CACHE_SECONDS,
    )


def _load_pvp_leaderboard(region: str | None) -> list[dict[str, Any]]:
    """Query ladder rows for the season of the most recent refresh."""

    latest = PvpStanding.objects.order_by("-updated_at").first()
    if latest is None:
        return []
    standings = PvpStanding.objects.filter(season_id=latest.season_id)
    if region is not None:
        standings = standings.filter(region=region)
    return [
        {
            "region": standing.region,
            "rank": standing.rank,
            "accountName": standing.account_name,
            "rating": standing.rating,
        }
        for standing in standings.order_by("region", "rank")
    ]
