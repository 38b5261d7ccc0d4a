"""Unit tests for SitemapService orchestration against an in-memory store."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any
from xml.etree import ElementTree

import pytest
from asgiref.sync import async_to_sync

from core.sitemap import MalformedRowError, SitemapConfig, SitemapService, UnsupportedResourceError
from core.sitemap.builders import SITEMAP_NAMESPACE

pytestmark = pytest.mark.unit

NS = {"sm": SITEMAP_NAMESPACE}
UPDATED = datetime(2017, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
GENERATED = datetime(2018, 6, 7, 8, 9, 10, tzinfo=timezone.utc)


class FakeStore:
    """ResourceStore backed by lists of rows."""

    def __init__(self, rows: dict[str, list[Any]] | None = None, *, pvp_updated_at: datetime | None = None):
        self.rows = rows or {}
        self.pvp_updated_at = pvp_updated_at
        self.reads: list[tuple[str, int, int, tuple[str, ...]]] = []
        self.counts: dict[str, int] | None = None

    async def count_resources(self) -> dict[str, int]:
        if self.counts is not None:
            return dict(self.counts)
        return {name: len(self.rows.get(name, [])) for name in ("users", "guilds", "characters")}

    async def read_page(self, resource: str, *, offset: int, limit: int, relations: Sequence[str] = ()):
        self.reads.append((resource, offset, limit, tuple(relations)))
        return self.rows.get(resource, [])[offset : offset + limit]

    async def read_latest_pvp_standing_timestamp(self) -> datetime | None:
        return self.pvp_updated_at


def _service(store: FakeStore, *, limit: int = 50000) -> SitemapService:
    config = SitemapConfig(
        page_item_limit=limit,
        public_web_url="https://gw2armory.com/",
        public_api_url="https://api.gw2armory.com",
    )
    return SitemapService(store, config, clock=lambda: GENERATED)


def _locs(document: str, path: str = "sm:url/sm:loc") -> list[str]:
    root = ElementTree.fromstring(document.encode("utf-8"))
    return [node.text for node in root.findall(path, NS)]


def _user(alias: str) -> SimpleNamespace:
    return SimpleNamespace(alias=alias, updated_at=UPDATED)


def test_generate_users_expands_each_row_into_every_route() -> None:
    """Three users with two routes each yield six entries."""

    store = FakeStore({"users": [_user("a"), _user("b"), _user("c")]})
    document = async_to_sync(_service(store, limit=6).generate)("users", 0)

    assert _locs(document) == [
        "https://gw2armory.com/a",
        "https://gw2armory.com/a/characters",
        "https://gw2armory.com/b",
        "https://gw2armory.com/b/characters",
        "https://gw2armory.com/c",
        "https://gw2armory.com/c/characters",
    ]
    assert store.reads == [("users", 0, 3, ())]
    assert document.count("<lastmod>2017-01-02T03:04:05.000Z</lastmod>") == 6


def test_generate_reads_the_window_for_the_requested_page() -> None:
    store = FakeStore({"users": [_user(str(index)) for index in range(7)]})
    document = async_to_sync(_service(store, limit=6).generate)("users", 2)

    assert store.reads == [("users", 6, 3, ())]
    assert _locs(document) == ["https://gw2armory.com/6", "https://gw2armory.com/6/characters"]


def test_generate_percent_encodes_special_characters_in_aliases() -> None:
    store = FakeStore({"users": [_user("cool guy")]})
    document = async_to_sync(_service(store).generate)("users")
    assert "https://gw2armory.com/cool%20guy" in _locs(document)


def test_generate_guilds_and_characters_use_their_path_templates() -> None:
    owner = SimpleNamespace(profile=SimpleNamespace(alias="madou"))
    store = FakeStore(
        {
            "guilds": [SimpleNamespace(name="Cool Guild", updated_at=UPDATED)],
            "characters": [SimpleNamespace(name="Blastrn", api_token=owner, updated_at=UPDATED)],
        }
    )
    service = _service(store)

    guilds = async_to_sync(service.generate)("guilds", 0)
    characters = async_to_sync(service.generate)("characters", 0)

    assert _locs(guilds) == [
        "https://gw2armory.com/g/Cool%20Guild",
        "https://gw2armory.com/g/Cool%20Guild/members",
    ]
    assert _locs(characters) == [
        "https://gw2armory.com/madou/c/Blastrn",
        "https://gw2armory.com/madou/c/Blastrn/builds",
    ]
    assert store.reads[-1] == ("characters", 0, 25000, ("api_token__profile",))


def test_generate_fails_the_page_for_a_character_without_owner() -> None:
    store = FakeStore(
        {
            "characters": [
                SimpleNamespace(name="Owned", api_token=SimpleNamespace(profile=SimpleNamespace(alias="a")), updated_at=UPDATED),
                SimpleNamespace(name="Orphan", api_token=None, updated_at=UPDATED),
            ]
        }
    )
    with pytest.raises(MalformedRowError, match="Orphan"):
        async_to_sync(_service(store).generate)("characters", 0)


def test_generate_past_the_last_page_is_an_empty_urlset() -> None:
    store = FakeStore({"users": [_user("a")]})
    document = async_to_sync(_service(store).generate)("users", 5)
    assert _locs(document) == []
    assert "<urlset" in document


def test_generate_rejects_unknown_resources_without_reading() -> None:
    store = FakeStore()
    with pytest.raises(UnsupportedResourceError):
        async_to_sync(_service(store).generate)("bogus", 0)
    assert store.reads == []


def test_generate_rejects_negative_pages() -> None:
    with pytest.raises(ValueError):
        async_to_sync(_service(FakeStore()).generate)("users", -1)


def test_generate_static_uses_ladder_timestamp_for_leaderboard_pages() -> None:
    pvp_updated_at = datetime(2019, 9, 9, 9, 9, 9, tzinfo=timezone.utc)
    store = FakeStore(pvp_updated_at=pvp_updated_at)
    document = async_to_sync(_service(store).generate)("static", 99)

    root = ElementTree.fromstring(document.encode("utf-8"))
    lastmods = {
        url.find("sm:loc", NS).text: getattr(url.find("sm:lastmod", NS), "text", None)
        for url in root.findall("sm:url", NS)
    }
    assert lastmods == {
        "https://gw2armory.com/": None,
        "https://gw2armory.com/leaderboards/pvp": "2019-09-09T09:09:09.000Z",
        "https://gw2armory.com/leaderboards/pvp/na": "2019-09-09T09:09:09.000Z",
        "https://gw2armory.com/leaderboards/pvp/eu": "2019-09-09T09:09:09.000Z",
        "https://gw2armory.com/statistics": None,
    }
    assert store.reads == []


def test_generate_static_without_ladder_data_omits_lastmod() -> None:
    document = async_to_sync(_service(FakeStore()).generate)("static")
    assert "<lastmod>" not in document
    assert len(_locs(document)) == 5


def test_index_lists_one_static_page_plus_pages_per_resource() -> None:
    store = FakeStore()
    store.counts = {"users": 100, "guilds": 0, "characters": 0}
    service = _service(store, limit=100)

    assert service.resources_per_page()["users"] == 50
    document = async_to_sync(service.index)()

    assert _locs(document, "sm:sitemap/sm:loc") == [
        "https://api.gw2armory.com/sitemap-static-0.xml",
        "https://api.gw2armory.com/sitemap-users-0.xml",
        "https://api.gw2armory.com/sitemap-users-1.xml",
    ]
    assert document.count("<lastmod>2018-06-07T08:09:10.000Z</lastmod>") == 3


def test_index_rounds_partial_pages_up() -> None:
    store = FakeStore()
    store.counts = {"users": 0, "guilds": 3, "characters": 51}
    document = async_to_sync(_service(store, limit=100).index)()

    assert _locs(document, "sm:sitemap/sm:loc") == [
        "https://api.gw2armory.com/sitemap-static-0.xml",
        "https://api.gw2armory.com/sitemap-guilds-0.xml",
        "https://api.gw2armory.com/sitemap-characters-0.xml",
        "https://api.gw2armory.com/sitemap-characters-1.xml",
    ]


def test_store_failures_propagate_unchanged() -> None:
    class BrokenStore(FakeStore):
        async def count_resources(self) -> dict[str, int]:
            raise ConnectionError("database unavailable")

    with pytest.raises(ConnectionError, match="database unavailable"):
        async_to_sync(_service(BrokenStore()).index)()


def test_config_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        SitemapConfig(page_item_limit=0, public_web_url="https://a", public_api_url="https://b")
