"""Ingest account, character, guild and ladder data from the GW2 API.

Each account is written in its own transaction so one failing key does not
roll back the others. API keys the GW2 API rejects are marked invalid and
skipped on later runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from django.db import transaction
from django.utils.dateparse import parse_datetime

from accounts.models import ApiToken
from accounts.services import set_token_validity
from gamedata.models import Character, Guild, PvpStanding
from gw2 import LADDER_REGIONS, Gw2ApiError, Gw2Client

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IngestSummary:
    """Counts for an ingestion run."""

    accounts: int = 0
    characters: int = 0
    guilds: int = 0
    invalid_tokens: int = 0
    standings: int = 0

    def __add__(self, other: IngestSummary) -> IngestSummary:
        return IngestSummary(
            accounts=self.accounts + other.accounts,
            characters=self.characters + other.characters,
            guilds=self.guilds + other.guilds,
            invalid_tokens=self.invalid_tokens + other.invalid_tokens,
            standings=self.standings + other.standings,
        )


def ingest_account(token: ApiToken, *, client: Gw2Client) -> IngestSummary:
    """Refresh one account's guilds and characters.

    Args:
        token: Registered API token to read with.
        client: GW2 API client.

    Returns:
        IngestSummary for this account. A key rejected by the API yields
        `invalid_tokens=1` and no writes besides the validity flag.

    Raises:
        Gw2ApiError: For failures other than a rejected key.
    """

    try:
        account = client.read_account(token.token)
        guild_ids = [str(guild_id) for guild_id in account.get("guilds") or []]
        guild_docs = [client.read_guild(guild_id) for guild_id in guild_ids]
        characters = client.read_characters(token.token)
    except Gw2ApiError as exc:
        if not exc.is_auth_failure:
            raise
        set_token_validity(token.token, valid=False)
        return IngestSummary(invalid_tokens=1)

    summary = IngestSummary(accounts=1)
    with transaction.atomic():
        token.world = str(account.get("world", ""))
        token.guilds = ",".join(guild_ids)
        token.save(update_fields=["world", "guilds", "updated_at"])

        guilds_by_id: dict[str, Guild] = {}
        for doc in guild_docs:
            guild, _ = Guild.objects.update_or_create(
                guild_id=doc["id"],
                defaults={"name": doc["name"], "tag": doc.get("tag", "")},
            )
            guilds_by_id[guild.guild_id] = guild
            summary = replace(summary, guilds=summary.guilds + 1)

        for doc in characters:
            Character.objects.update_or_create(
                name=doc["name"],
                defaults=_character_fields(doc, token=token, guilds_by_id=guilds_by_id),
            )
            summary = replace(summary, characters=summary.characters + 1)

    logger.info(
        "Ingested account %s: %d characters, %d guilds",
        token.account_name,
        summary.characters,
        summary.guilds,
    )
    return summary


def ingest_pvp_ladder(*, client: Gw2Client, regions: tuple[str, ...] = LADDER_REGIONS) -> IngestSummary:
    """Replace the latest season's ladder rows for each region.

    Returns:
        IngestSummary with the number of standings written.
    """

    season = client.read_latest_pvp_season()
    if season is None:
        logger.warning("GW2 API returned no PvP seasons; ladder not refreshed")
        return IngestSummary()

    season_id = season["id"]
    written = 0
    for region in regions:
        rows = client.read_pvp_ladder(season_id, region=region)
        with transaction.atomic():
            PvpStanding.objects.filter(season_id=season_id, region=region).delete()
            PvpStanding.objects.bulk_create(
                PvpStanding(
                    season_id=season_id,
                    region=region,
                    rank=row["rank"],
                    account_name=row["name"],
                    rating=_ladder_rating(row),
                )
                for row in rows
            )
        written += len(rows)
        logger.info("Stored %d %s ladder standings for season %s", len(rows), region, season_id)
    return IngestSummary(standings=written)


def _character_fields(
    doc: dict[str, Any], *, token: ApiToken, guilds_by_id: dict[str, Guild]
) -> dict[str, Any]:
    """Map a `/v2/characters` document onto Character fields."""

    created_raw = doc.get("created")
    return {
        "api_token": token,
        "race": doc.get("race", ""),
        "gender": doc.get("gender", ""),
        "profession": doc.get("profession", ""),
        "level": int(doc.get("level") or 1),
        "guild": guilds_by_id.get(doc.get("guild") or ""),
        "created": parse_datetime(created_raw) if created_raw else None,
        "age": int(doc.get("age") or 0),
        "deaths": int(doc.get("deaths") or 0),
    }


def _ladder_rating(row: dict[str, Any]) -> int | None:
    """Return the primary score of a ladder row (the first listed score)."""

    scores = row.get("scores") or []
    if not scores:
        return None
    return scores[0].get("value")
