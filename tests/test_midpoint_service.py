import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.meetpoint.errors import CacheUnavailable, NoCandidateFound, RequesterFailure
from src.meetpoint.models.domain import Candidate, Point, Points, TransitRoute
from src.meetpoint.persistence.path_cache import InMemoryPathCache
from src.meetpoint.services.midpoint.candidates import CandidateGenerator
from src.meetpoint.services.midpoint.grading import WeightedBonusScore
from src.meetpoint.services.midpoint.path_resolver import PathResolver
from src.meetpoint.services.midpoint import service as midpoint_service
from src.meetpoint.services.midpoint.service import MiddlePointService

A, B = Point(0, 0), Point(10, 10)
S1, S2 = Point(5, 5), Point(6, 4)

DURATIONS = {
    (A, S1): 600,
    (B, S1): 500,
    (A, S2): 400,
    (B, S2): 400,
}


class FakePOI:
    def __init__(self, stations):
        self.stations = stations

    def nearby_stations(self, point):
        return list(self.stations)


class FakeRegistry:
    def __init__(self, stations):
        self.stations = stations

    def list_stations(self):
        return dict(self.stations)


class TableRouter:
    def __init__(self, durations, failing=(), delay=0.0):
        self.durations = durations
        self.failing = set(failing)
        self.delay = delay
        self.calls = 0
        self._lock = threading.Lock()

    def _count(self):
        with self._lock:
            self.calls += 1
        if self.delay:
            time.sleep(self.delay)

    def direct_route(self, source, target):
        self._count()
        if (source, target) in self.failing:
            raise RequesterFailure("odsay", "HTTP 500")
        return TransitRoute(duration_seconds=self.durations[(source, target)])

    def transfer_route(self, source, target):
        self._count()
        return TransitRoute(duration_seconds=self.durations[(source, target)] + 120)


class BrokenCache:
    name = "broken"

    def get(self, key):
        raise CacheUnavailable("down")

    def put(self, key, result):
        raise CacheUnavailable("down")


def _service(router, cache=None, discovered=None, weighted=None):
    if discovered is None:
        discovered = [Candidate("Station one", S1), Candidate("Station two", S2)]
    if weighted is None:
        weighted = {"Hub one": S1}
    generator = CandidateGenerator(poi=FakePOI(discovered), registry=FakeRegistry(weighted))
    resolver = PathResolver(router, cache if cache is not None else InMemoryPathCache())
    return MiddlePointService(generator, resolver, score=WeightedBonusScore(bonus_seconds=300))


def test_weighted_station_discovered_first_wins_the_tie():
    point = _service(TableRouter(DURATIONS)).resolve_meeting_point(Points([A, B]))
    assert point == S1


def test_unweighted_station_listed_first_wins_the_tie():
    discovered = [Candidate("Station two", S2), Candidate("Station one", S1)]
    point = _service(TableRouter(DURATIONS), discovered=discovered).resolve_meeting_point(Points([A, B]))
    assert point == S2


def test_cache_outage_does_not_change_answer():
    healthy = _service(TableRouter(DURATIONS)).resolve_meeting_point(Points([A, B]))
    degraded = _service(TableRouter(DURATIONS), cache=BrokenCache()).resolve_meeting_point(Points([A, B]))
    assert degraded == healthy


def test_second_request_is_served_from_cache():
    router = TableRouter(DURATIONS)
    service = _service(router)

    service.resolve_meeting_point(Points([A, B]))
    calls = router.calls
    service.resolve_meeting_point(Points([A, B]))

    assert calls == 8
    assert router.calls == calls


def test_single_routing_failure_aborts_resolution():
    router = TableRouter(DURATIONS, failing={(B, S2)})
    with pytest.raises(RequesterFailure):
        _service(router).resolve_meeting_point(Points([A, B]))


def test_no_candidates_raises():
    service = _service(TableRouter(DURATIONS), discovered=[], weighted={})
    with pytest.raises(NoCandidateFound):
        service.resolve_meeting_point(Points([A, B]))


@pytest.fixture
def wired_router(monkeypatch):
    """Production wiring with fake collaborators; yields the shared slow router."""
    router = TableRouter(DURATIONS, delay=0.05)
    cache = InMemoryPathCache()
    discovered = [Candidate("Station one", S1), Candidate("Station two", S2)]
    monkeypatch.setattr(midpoint_service, "KakaoLocalClient", lambda: FakePOI(discovered))
    monkeypatch.setattr(midpoint_service, "OdsayTransitClient", lambda: router)
    monkeypatch.setattr(midpoint_service, "get_weighted_station_registry", lambda: FakeRegistry({"Hub one": S1}))
    monkeypatch.setattr(midpoint_service, "get_path_cache", lambda: cache)
    midpoint_service.get_path_resolver.cache_clear()
    yield router
    midpoint_service.get_path_resolver.cache_clear()


def test_services_built_per_request_share_one_resolver(wired_router):
    first = midpoint_service.build_middle_point_service()
    second = midpoint_service.build_middle_point_service()
    candidate = Candidate("Station one", S1)
    barrier = threading.Barrier(2)

    def resolve(service):
        barrier.wait()
        return service.resolver.resolve(A, candidate)

    with ThreadPoolExecutor(max_workers=2) as executor:
        results = list(executor.map(resolve, [first, second]))

    assert first.resolver is second.resolver
    assert results[0] == results[1]
    assert wired_router.calls == 2


def test_concurrent_requests_compute_each_pair_once(wired_router):
    barrier = threading.Barrier(3)

    def request():
        service = midpoint_service.build_middle_point_service()
        barrier.wait()
        return service.resolve_meeting_point(Points([A, B]))

    with ThreadPoolExecutor(max_workers=3) as executor:
        answers = list(executor.map(lambda _: request(), range(3)))

    assert answers == [S1, S1, S1]
    assert wired_router.calls == 8
