"""Memoized travel time from each input location to each candidate station."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Iterable

from ...config import settings
from ...errors import CacheUnavailable
from ...models.domain import (
    Candidate,
    PathKey,
    Point,
    ResultMatrix,
    RouteResult,
    RouteStrategy,
    min_time_route,
)
from ...persistence.path_cache import PathCache
from ..geospatial import haversine_km
from .base import RoutingCollaborator

logger = logging.getLogger(__name__)


class PathResolver:
    """Cache-aside resolution of the fastest route for a (source, candidate) pair.

    On a miss the direct and transfer strategies are both requested and the
    faster one is stored. Cache failures are logged and never fail a request.
    Concurrent misses on the same key through this resolver wait for the first
    computation instead of calling the router again, so the application shares
    one resolver per process.
    """

    def __init__(
        self,
        routing: RoutingCollaborator,
        cache: PathCache,
        *,
        walking_speed_kmh: float | None = None,
    ) -> None:
        self.routing = routing
        self.cache = cache
        self.walking_speed_kmh = walking_speed_kmh or settings.walking_speed_kmh
        self._key_locks: dict[PathKey, threading.Lock] = {}
        self._key_locks_guard = threading.Lock()

    def resolve(self, source: Point, candidate: Candidate) -> RouteResult:
        key = PathKey(source, candidate.point)
        cached = self._cache_get(key)
        if cached is not None:
            return self._tagged(cached, candidate)

        lock = self._key_lock(key)
        try:
            with lock:
                cached = self._cache_get(key)
                if cached is not None:
                    return self._tagged(cached, candidate)
                result = self.min_path_result(source, candidate)
                self._cache_put(key, result)
                return result
        finally:
            with self._key_locks_guard:
                if self._key_locks.get(key) is lock:
                    del self._key_locks[key]

    def resolve_all(self, points: Iterable[Point], candidates: Iterable[Candidate]) -> ResultMatrix:
        """Fill the source x candidate matrix, one worker per distinct source."""
        sources = list(dict.fromkeys(points))
        candidate_list = list(candidates)
        matrix: ResultMatrix = {source: {} for source in sources}
        if not sources or not candidate_list:
            return matrix

        with ThreadPoolExecutor(max_workers=len(sources), thread_name_prefix="path-resolver") as executor:
            for candidate in candidate_list:
                futures = [(source, executor.submit(self.resolve, source, candidate)) for source in sources]
                for source, future in futures:
                    matrix[source][candidate.point] = future.result()
        return matrix

    def min_path_result(self, source: Point, candidate: Candidate) -> RouteResult:
        target = candidate.point
        direct_route = self.routing.direct_route(source, target)
        transfer_route = self.routing.transfer_route(source, target)

        direct = (
            RouteResult.from_transit_route(
                direct_route, weighted=candidate.is_weighted, strategy=RouteStrategy.DIRECT_TRANSIT
            )
            if direct_route is not None
            else None
        )
        transfer = (
            RouteResult.from_transit_route(
                transfer_route, weighted=candidate.is_weighted, strategy=RouteStrategy.TRANSFER_TRANSIT
            )
            if transfer_route is not None
            else None
        )

        if direct is not None and transfer is not None:
            return min_time_route(direct, transfer)
        if direct is not None:
            return direct
        if transfer is not None:
            return transfer
        return self.walking_result(source, candidate)

    def walking_result(self, source: Point, candidate: Candidate) -> RouteResult:
        """Estimate a walk when the router has no itinerary for either strategy."""
        target = candidate.point
        distance_km = haversine_km(source.y, source.x, target.y, target.x)
        duration_seconds = round(distance_km / self.walking_speed_kmh * 3600)
        logger.debug(f"No transit itinerary to {candidate.name}; estimated walk of {duration_seconds}s")
        return RouteResult(
            duration_seconds=duration_seconds,
            weighted=candidate.is_weighted,
            strategy=RouteStrategy.WALKING,
        )

    @staticmethod
    def _tagged(result: RouteResult, candidate: Candidate) -> RouteResult:
        """Carry the candidate's current weighted flag on a cached result."""
        if result.weighted == candidate.is_weighted:
            return result
        return replace(result, weighted=candidate.is_weighted)

    def _key_lock(self, key: PathKey) -> threading.Lock:
        with self._key_locks_guard:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._key_locks[key] = lock
            return lock

    def _cache_get(self, key: PathKey) -> RouteResult | None:
        try:
            result = self.cache.get(key)
        except CacheUnavailable as exc:
            logger.warning(f"Path cache read failed, computing route directly: {exc}")
            return None
        if result is not None:
            logger.debug(f"Path cache hit for {key}")
        return result

    def _cache_put(self, key: PathKey, result: RouteResult) -> None:
        try:
            self.cache.put(key, result)
        except CacheUnavailable as exc:
            logger.warning(f"Path cache write failed, result not memoized: {exc}")
