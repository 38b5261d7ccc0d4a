"""Unit tests for the GW2 API client with a patched `urlopen`."""

from __future__ import annotations

import io
import json
import urllib.error

import pytest

from gw2 import Gw2ApiError, Gw2Client
from gw2 import client as client_module

pytestmark = pytest.mark.unit


class _Response(io.BytesIO):
    """Minimal context-manager response returned by the fake urlopen."""

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _install(monkeypatch, outcomes: list) -> list:
    """Patch urlopen to return/raise each outcome in turn; return captured requests."""

    requests = []

    def fake_urlopen(request, timeout):
        requests.append(request)
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return _Response(json.dumps(outcome).encode("utf-8"))

    monkeypatch.setattr(client_module.urllib.request, "urlopen", fake_urlopen)
    monkeypatch.setattr(client_module.time, "sleep", lambda _seconds: None)
    return requests


def _http_error(code: int) -> urllib.error.HTTPError:
    return urllib.error.HTTPError("https://example.test", code, "error", hdrs=None, fp=None)


def test_read_account_sends_bearer_token(monkeypatch) -> None:
    requests = _install(monkeypatch, [{"id": "abc", "name": "stress level zero.4907"}])
    client = Gw2Client("https://api.example.test/")

    account = client.read_account("secret-key")

    assert account["name"] == "stress level zero.4907"
    assert requests[0].full_url == "https://api.example.test/v2/account"
    assert requests[0].get_header("Authorization") == "Bearer secret-key"


def test_read_character_quotes_the_name(monkeypatch) -> None:
    requests = _install(monkeypatch, [{"name": "Mdou Two"}])
    Gw2Client("https://api.example.test").read_character("key", "Mdou Two")
    assert requests[0].full_url == "https://api.example.test/v2/characters/Mdou%20Two"


def test_read_characters_requests_all_ids(monkeypatch) -> None:
    requests = _install(monkeypatch, [[{"name": "A"}, {"name": "B"}]])
    characters = Gw2Client("https://api.example.test").read_characters("key")
    assert [row["name"] for row in characters] == ["A", "B"]
    assert requests[0].full_url.endswith("/v2/characters?ids=all")


def test_read_latest_pvp_season_picks_latest_start(monkeypatch) -> None:
    _install(
        monkeypatch,
        [
            [
                {"id": "old", "start": "2016-01-01T00:00:00Z"},
                {"id": "new", "start": "2017-02-01T00:00:00Z"},
                {"id": "mid", "start": "2016-06-01T00:00:00Z"},
            ]
        ],
    )
    assert Gw2Client().read_latest_pvp_season()["id"] == "new"


def test_read_latest_pvp_season_handles_no_seasons(monkeypatch) -> None:
    _install(monkeypatch, [[]])
    assert Gw2Client().read_latest_pvp_season() is None


def test_read_pvp_ladder_builds_region_path_and_rejects_unknown_regions(monkeypatch) -> None:
    requests = _install(monkeypatch, [[{"name": "a.1", "rank": 1}]])
    client = Gw2Client("https://api.example.test")

    assert client.read_pvp_ladder("SEASON-1", region="eu") == [{"name": "a.1", "rank": 1}]
    assert requests[0].full_url == "https://api.example.test/v2/pvp/seasons/SEASON-1/leaderboards/ladder/eu"
    with pytest.raises(ValueError):
        client.read_pvp_ladder("SEASON-1", region="cn")


def test_client_errors_are_not_retried(monkeypatch) -> None:
    requests = _install(monkeypatch, [_http_error(403)])

    with pytest.raises(Gw2ApiError, match="Request failed with status code 403") as excinfo:
        Gw2Client(retries=3).read_character("invalid", "Blastrn")

    assert excinfo.value.status == 403
    assert excinfo.value.is_auth_failure
    assert len(requests) == 1


def test_server_errors_and_network_failures_are_retried(monkeypatch) -> None:
    outcomes = [_http_error(502), urllib.error.URLError("timed out"), {"pvp_rank": 80}]
    requests = _install(monkeypatch, outcomes)

    assert Gw2Client(retries=2).read_pvp_stats("key") == {"pvp_rank": 80}
    assert len(requests) == 3


def test_retries_exhausted_raise_api_error(monkeypatch) -> None:
    _install(monkeypatch, [_http_error(500), _http_error(503)])

    with pytest.raises(Gw2ApiError) as excinfo:
        Gw2Client(retries=1).read_guild("guild-1")

    assert excinfo.value.status == 503
    assert not excinfo.value.is_auth_failure
