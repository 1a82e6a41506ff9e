from types import SimpleNamespace

import pytest

from src.meetpoint.errors import CacheUnavailable
from src.meetpoint.models.domain import PathKey, Point, RouteResult, RouteStrategy
from src.meetpoint.persistence import path_cache
from src.meetpoint.persistence.path_cache import InMemoryPathCache, SupabasePathCache, build_path_cache

KEY = PathKey(Point(127.0, 37.5), Point(127.05, 37.55))
RESULT = RouteResult(1260, True, RouteStrategy.TRANSFER_TRANSIT)


class FakeQuery:
    def __init__(self, client, table):
        self.client = client
        self.table = table

    def select(self, columns):
        return self

    def eq(self, column, value):
        self.client.filters[column] = value
        return self

    def limit(self, count):
        return self

    def upsert(self, record, on_conflict=None):
        self.client.upserts.append((self.table, record, on_conflict))
        return self

    def execute(self):
        if self.client.error:
            raise self.client.error
        return SimpleNamespace(data=self.client.rows)


class FakeSupabase:
    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.filters = {}
        self.upserts = []

    def table(self, name):
        return FakeQuery(self, name)


def test_in_memory_cache_round_trip():
    cache = InMemoryPathCache()
    assert cache.get(KEY) is None

    cache.put(KEY, RESULT)

    assert cache.get(KEY) == RESULT
    assert len(cache) == 1


def test_distinct_pairs_never_share_a_key():
    # "1.1" + "1.0" and "1.0" + "1.1"-style collisions cannot happen with structured keys
    cache = InMemoryPathCache()
    cache.put(PathKey(Point(1.1, 1.0), Point(1.0, 1.1)), RESULT)
    assert cache.get(PathKey(Point(1.0, 1.1), Point(1.1, 1.0))) is None


def test_supabase_cache_filters_on_all_key_columns():
    client = FakeSupabase(rows=[{"duration_seconds": 1260, "weighted": True, "strategy": "transfer_transit"}])
    cache = SupabasePathCache(client, table="path_results")

    assert cache.get(KEY) == RESULT
    assert client.filters == {
        "source_x": 127.0,
        "source_y": 37.5,
        "target_x": 127.05,
        "target_y": 37.55,
    }


def test_supabase_cache_miss_returns_none():
    assert SupabasePathCache(FakeSupabase(rows=[]), table="path_results").get(KEY) is None


def test_supabase_cache_upserts_on_composite_key():
    client = FakeSupabase()
    SupabasePathCache(client, table="path_results").put(KEY, RESULT)

    table, record, on_conflict = client.upserts[0]
    assert table == "path_results"
    assert on_conflict == "source_x,source_y,target_x,target_y"
    assert record["duration_seconds"] == 1260
    assert record["strategy"] == "transfer_transit"
    assert record["weighted"] is True


def test_supabase_errors_become_cache_unavailable():
    cache = SupabasePathCache(FakeSupabase(error=ConnectionError("dns failure")), table="path_results")

    with pytest.raises(CacheUnavailable):
        cache.get(KEY)
    with pytest.raises(CacheUnavailable):
        cache.put(KEY, RESULT)
    assert cache.ping() is False


def test_build_path_cache_falls_back_to_memory(monkeypatch):
    monkeypatch.setattr(path_cache, "get_supabase_client", lambda: None)

    assert isinstance(build_path_cache("memory"), InMemoryPathCache)
    assert isinstance(build_path_cache("supabase"), InMemoryPathCache)


def test_build_path_cache_uses_supabase_when_configured(monkeypatch):
    monkeypatch.setattr(path_cache, "get_supabase_client", lambda: FakeSupabase())
    assert isinstance(build_path_cache("supabase"), SupabasePathCache)


def test_build_path_cache_rejects_unknown_backend():
    with pytest.raises(ValueError):
        build_path_cache("redis")
