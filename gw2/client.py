"""Thin client for the public Guild Wars 2 HTTP API (v2).

The client only performs HTTP and JSON decoding. It never touches the database;
callers in `gamedata` and `accounts` decide what to persist.
"""

from __future__ import annotations

import json
import logging
import time
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.guildwars2.com"
LADDER_REGIONS: tuple[str, ...] = ("na", "eu")


class Gw2ApiError(Exception):
    """Raised when the GW2 API returns an error or cannot be reached.

    Attributes:
        status: HTTP status code, or None for network failures.
        url: Requested URL (without credentials).
    """

    def __init__(self, message: str, *, status: int | None = None, url: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.url = url

    @property
    def is_auth_failure(self) -> bool:
        """Return True when the API rejected the supplied key."""

        return self.status in {401, 403}


class Gw2Client:
    """Read-only access to account, character, guild and PvP endpoints.

    Args:
        endpoint: API root (e.g. `https://api.guildwars2.com`).
        timeout: Per-request socket timeout in seconds.
        retries: Extra attempts for 5xx responses and network errors.
    """

    USER_AGENT = "gw2armory (api ingestion)"

    def __init__(self, endpoint: str = DEFAULT_ENDPOINT, *, timeout: float = 30, retries: int = 5) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.retries = max(0, retries)

    def read_token_info(self, token: str) -> dict[str, Any]:
        """Return `{id, name, permissions}` for an API key."""

        return self._get("/v2/tokeninfo", token=token)

    def read_account(self, token: str) -> dict[str, Any]:
        """Return the account document (id, name, world, guilds, ...)."""

        return self._get("/v2/account", token=token)

    def read_characters(self, token: str) -> list[dict[str, Any]]:
        """Return every character document visible to the key."""

        return self._get("/v2/characters", token=token, params={"ids": "all"})

    def read_character(self, token: str, name: str) -> dict[str, Any]:
        return self._get(f"/v2/characters/{urllib.parse.quote(name, safe='')}", token=token)

    def read_pvp_stats(self, token: str) -> dict[str, Any]:
        return self._get("/v2/pvp/stats", token=token)

    def read_guild(self, guild_id: str) -> dict[str, Any]:
        """Return the public guild document (id, name, tag)."""

        return self._get(f"/v2/guild/{urllib.parse.quote(guild_id, safe='')}")

    def read_latest_pvp_season(self) -> dict[str, Any] | None:
        """Return the PvP season with the most recent start date.

        Returns:
            The season document, or None when the API lists no seasons.
        """

        seasons = self._get("/v2/pvp/seasons", params={"ids": "all"})
        if not seasons:
            return None
        # ISO-8601 strings from the API sort chronologically.
        return max(seasons, key=lambda season: season.get("start") or "")

    def read_pvp_ladder(self, season_id: str, *, region: str) -> list[dict[str, Any]]:
        """Return the public ladder standings for a season and region.

        Raises:
            ValueError: When `region` is not a ladder region.
        """

        if region not in LADDER_REGIONS:
            raise ValueError(f"Unknown ladder region: {region!r}")
        path = f"/v2/pvp/seasons/{urllib.parse.quote(season_id, safe='')}/leaderboards/ladder/{region}"
        return self._get(path)

    def _get(self, path: str, *, token: str | None = None, params: dict[str, str] | None = None) -> Any:
        """Issue a GET request and decode the JSON body.

        Raises:
            Gw2ApiError: For 4xx responses immediately, and for 5xx/network
                failures once retries are exhausted.
        """

        url = f"{self.endpoint}{path}"
        if params:
            url = f"{url}?{urllib.parse.urlencode(params)}"
        headers = {"User-Agent": self.USER_AGENT, "Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        attempt = 0
        while True:
            request = urllib.request.Request(url, headers=headers)
            try:
                with urllib.request.urlopen(request, timeout=self.timeout) as response:
                    return json.loads(response.read().decode("utf-8"))
            except urllib.error.HTTPError as exc:
                if exc.code < 500 or attempt >= self.retries:
                    raise Gw2ApiError(
                        f"Request failed with status code {exc.code}", status=exc.code, url=url
                    ) from exc
                reason = f"status {exc.code}"
            except urllib.error.URLError as exc:
                if attempt >= self.retries:
                    raise Gw2ApiError(f"Request failed: {exc.reason}", url=url) from exc
                reason = str(exc.reason)
            attempt += 1
            logger.warning("GW2 API %s failed (%s); retry %d/%d", path, reason, attempt, self.retries)
            time.sleep(min(2 ** (attempt - 1), 8) * 0.25)
