"""Pytest fixtures shared across unit and Django integration tests."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest
from django.contrib.auth import get_user_model

from accounts.models import ApiToken
from gw2 import Gw2ApiError


class FakeGw2Client:
    """In-memory stand-in for `gw2.Gw2Client`.

    Attributes are plain data so tests can adjust responses before use.
    `errors` maps a method name to an exception raised instead of returning.
    """

    def __init__(self) -> None:
        self.token_info: dict[str, Any] = {
            "id": "token-id",
            "name": "armory key",
            "permissions": ["account", "characters", "builds"],
        }
        self.account: dict[str, Any] = {
            "id": "account-1",
            "name": "coolaccount.1234",
            "world": 1001,
            "guilds": ["guild-1"],
        }
        self.characters: list[dict[str, Any]] = [
            {
                "name": "Madoubie",
                "race": "Asura",
                "gender": "Female",
                "profession": "Elementalist",
                "level": 80,
                "guild": "guild-1",
                "created": "2015-06-23T10:53:00Z",
                "age": 1234,
                "deaths": 3,
            }
        ]
        self.guilds: dict[str, dict[str, Any]] = {
            "guild-1": {"id": "guild-1", "name": "Cool Guild", "tag": "COOL"},
        }
        self.season: dict[str, Any] | None = {"id": "season-2", "start": "2017-02-01T00:00:00Z"}
        self.ladders: dict[str, list[dict[str, Any]]] = {
            "na": [
                {"name": "first.1111", "rank": 1, "scores": [{"id": "rating", "value": 1800}]},
                {"name": "second.2222", "rank": 2, "scores": [{"id": "rating", "value": 1750}]},
            ],
            "eu": [{"name": "euro.3333", "rank": 1, "scores": []}],
        }
        self.errors: dict[str, Exception] = {}
        self.calls: list[str] = []

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.errors:
            raise self.errors[name]

    def read_token_info(self, token: str) -> dict[str, Any]:
        self._record("read_token_info")
        return dict(self.token_info)

    def read_account(self, token: str) -> dict[str, Any]:
        self._record("read_account")
        return dict(self.account)

    def read_characters(self, token: str) -> list[dict[str, Any]]:
        self._record("read_characters")
        return [dict(row) for row in self.characters]

    def read_guild(self, guild_id: str) -> dict[str, Any]:
        self._record("read_guild")
        if guild_id not in self.guilds:
            raise Gw2ApiError("Request failed with status code 404", status=404)
        return dict(self.guilds[guild_id])

    def read_latest_pvp_season(self) -> dict[str, Any] | None:
        self._record("read_latest_pvp_season")
        return self.season

    def read_pvp_ladder(self, season_id: str, *, region: str) -> list[dict[str, Any]]:
        self._record("read_pvp_ladder")
        return list(self.ladders.get(region, []))


@pytest.fixture
def fake_gw2() -> FakeGw2Client:
    """Return a fake GW2 API client with one account, character and guild."""

    return FakeGw2Client()


@pytest.fixture
def user(db):
    """Return a User (with an auto-created Profile) aliased `madou`."""

    user_model = get_user_model()
    return user_model.objects.create_user(username="madou", email="cool@email.com", password="password")


@pytest.fixture
def profile(user):
    """Return the Profile associated with the default test user."""

    return user.profile


@pytest.fixture
def api_token(profile) -> ApiToken:
    """Return a valid primary API token in guild `guild-1`."""

    return ApiToken.objects.create(
        profile=profile,
        token="i-am-token",
        account_id="account-1",
        account_name="coolaccount.1234",
        world="1001",
        permissions="account,characters,builds",
        guilds="guild-1",
        primary=True,
    )


@pytest.fixture
def auth_client(client, user):
    """Return a Django test client authenticated as the default test user."""

    client.force_login(user)
    return client


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no database access.
    - `integration`: tests touching Django, database, views, commands, or IO.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
