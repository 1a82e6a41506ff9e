"""Storage for memoized route results keyed by (source, target)."""

from __future__ import annotations

import logging
import threading
from typing import Any, Protocol

from ..config import settings
from ..db.supabase import get_supabase_client
from ..errors import CacheUnavailable
from ..models.domain import PathKey, RouteResult, RouteStrategy

logger = logging.getLogger(__name__)

_KEY_COLUMNS = ("source_x", "source_y", "target_x", "target_y")


class PathCache(Protocol):
    name: str

    def get(self, key: PathKey) -> RouteResult | None:
        ...

    def put(self, key: PathKey, result: RouteResult) -> None:
        ...


class InMemoryPathCache:
    """Process-local cache guarded by a lock."""

    name = "memory"

    def __init__(self) -> None:
        self._entries: dict[PathKey, RouteResult] = {}
        self._lock = threading.Lock()

    def get(self, key: PathKey) -> RouteResult | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: PathKey, result: RouteResult) -> None:
        with self._lock:
            self._entries[key] = result

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def key_to_record(key: PathKey) -> dict[str, float]:
    return {
        "source_x": key.source.x,
        "source_y": key.source.y,
        "target_x": key.target.x,
        "target_y": key.target.y,
    }


def result_to_record(key: PathKey, result: RouteResult) -> dict[str, Any]:
    record: dict[str, Any] = key_to_record(key)
    record.update(
        {
            "duration_seconds": result.duration_seconds,
            "weighted": result.weighted,
            "strategy": result.strategy.value,
        }
    )
    return record


def record_to_result(row: dict[str, Any]) -> RouteResult:
    return RouteResult(
        duration_seconds=int(row["duration_seconds"]),
        weighted=bool(row["weighted"]),
        strategy=RouteStrategy(row["strategy"]),
    )


class SupabasePathCache:
    """Shared cache stored in a Supabase table with a composite key."""

    name = "supabase"

    def __init__(self, client: Any, table: str | None = None) -> None:
        self.client = client
        self.table = table or settings.path_cache_table

    def get(self, key: PathKey) -> RouteResult | None:
        query = self.client.table(self.table).select("duration_seconds, weighted, strategy")
        for column, value in key_to_record(key).items():
            query = query.eq(column, value)
        try:
            response = query.limit(1).execute()
        except Exception as exc:
            raise CacheUnavailable(f"Failed to read path cache table '{self.table}': {exc}") from exc

        rows = response.data or []
        if not rows:
            return None
        try:
            return record_to_result(rows[0])
        except (KeyError, ValueError, TypeError) as exc:
            raise CacheUnavailable(f"Malformed path cache row for {key}: {exc}") from exc

    def put(self, key: PathKey, result: RouteResult) -> None:
        try:
            self.client.table(self.table).upsert(
                result_to_record(key, result),
                on_conflict=",".join(_KEY_COLUMNS),
            ).execute()
        except Exception as exc:
            raise CacheUnavailable(f"Failed to write path cache table '{self.table}': {exc}") from exc

    def ping(self) -> bool:
        try:
            self.client.table(self.table).select("duration_seconds").limit(1).execute()
        except Exception as exc:
            logger.warning(f"Path cache table '{self.table}' is not reachable: {exc}")
            return False
        return True


def build_path_cache(backend: str | None = None) -> PathCache:
    """Create the configured cache backend, falling back to memory."""
    selected = backend or settings.path_cache_backend
    if selected == "supabase":
        client = get_supabase_client()
        if client is not None:
            logger.info(f"Using Supabase path cache (table '{settings.path_cache_table}')")
            return SupabasePathCache(client)
        logger.warning("Supabase path cache requested but Supabase is not configured; using memory cache")
    elif selected != "memory":
        raise ValueError(f"Unknown path cache backend '{selected}'.")
    return InMemoryPathCache()
