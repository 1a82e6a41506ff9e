import pytest
from fastapi.testclient import TestClient

from src.meetpoint.errors import NoCandidateFound, RequesterFailure
from src.meetpoint.main import create_app
from src.meetpoint.models.domain import Candidate, Point, TransitRoute
from src.meetpoint.persistence.path_cache import InMemoryPathCache
from src.meetpoint.services.locations import service as location_service
from src.meetpoint.services.midpoint import service as midpoint_service
from src.meetpoint.services.midpoint.candidates import CandidateGenerator
from src.meetpoint.services.midpoint.grading import WeightedBonusScore
from src.meetpoint.services.midpoint.path_resolver import PathResolver


class DummyPOI:
    def nearby_stations(self, point):
        return [Candidate("Station one", Point(5, 5)), Candidate("Station two", Point(6, 4))]


class DummyRegistry:
    def list_stations(self):
        return {"Hub one": Point(5, 5)}


class DummyRouter:
    durations = {
        (Point(0, 0), Point(5, 5)): 600,
        (Point(10, 10), Point(5, 5)): 500,
        (Point(0, 0), Point(6, 4)): 400,
        (Point(10, 10), Point(6, 4)): 400,
    }

    def direct_route(self, source, target):
        return TransitRoute(duration_seconds=self.durations[(source, target)])

    def transfer_route(self, source, target):
        return None


@pytest.fixture
def api_client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def dummy_service(monkeypatch):
    def build():
        return midpoint_service.MiddlePointService(
            generator=CandidateGenerator(poi=DummyPOI(), registry=DummyRegistry()),
            resolver=PathResolver(DummyRouter(), InMemoryPathCache()),
            score=WeightedBonusScore(bonus_seconds=300),
        )

    monkeypatch.setattr(midpoint_service, "build_middle_point_service", build)


def test_health(api_client):
    response = api_client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_health_cache_reports_backend(api_client, monkeypatch):
    monkeypatch.setattr(midpoint_service, "get_path_cache", lambda: InMemoryPathCache())
    response = api_client.get("/api/health/cache")
    assert response.json() == {"service": "path_cache", "backend": "memory", "healthy": True}


def test_midpoint_returns_winning_station(api_client, dummy_service):
    response = api_client.post(
        "/api/locations/midpoint",
        json={"locations": [{"x": 0, "y": 0}, {"x": 10, "y": 10}]},
    )
    assert response.status_code == 200
    assert response.json() == {"x": 5.0, "y": 5.0}


def test_midpoint_requires_locations(api_client):
    response = api_client.post("/api/locations/midpoint", json={"locations": []})
    assert response.status_code == 422


def test_midpoint_requester_failure_is_bad_gateway(api_client, monkeypatch):
    def fail(payload):
        raise RequesterFailure("odsay", "HTTP 503")

    monkeypatch.setattr(midpoint_service, "find_middle_point", fail)
    response = api_client.post("/api/locations/midpoint", json={"locations": [{"x": 0, "y": 0}]})
    assert response.status_code == 502


def test_midpoint_without_candidates_is_not_found(api_client, monkeypatch):
    def fail(payload):
        raise NoCandidateFound("No candidate stations were found near the input locations.")

    monkeypatch.setattr(midpoint_service, "find_middle_point", fail)
    response = api_client.post("/api/locations/midpoint", json={"locations": [{"x": 0, "y": 0}]})
    assert response.status_code == 404


def test_unknown_utility_category_is_bad_request(api_client):
    response = api_client.get("/api/locations/utility", params={"category": "놀이터", "x": 127.0, "y": 37.5})
    assert response.status_code == 400


def test_search_passes_through_documents(api_client, monkeypatch):
    class FakeKakao:
        def request_search(self, keyword):
            return [{"place_name": f"{keyword} 2호선", "x": "127.027636", "y": "37.497950"}]

    monkeypatch.setattr(location_service, "_client", lambda: FakeKakao())
    response = api_client.get("/api/locations/search", params={"keyword": "강남역"})

    assert response.status_code == 200
    [place] = response.json()
    assert place["place_name"] == "강남역 2호선"
    assert place["x"] == pytest.approx(127.027636)


def test_midpoint_internal_value_error_is_server_error(api_client, monkeypatch):
    def fail(payload):
        raise ValueError("Result matrix is missing the route Point(x=0, y=0) -> Point(x=5, y=5).")

    monkeypatch.setattr(midpoint_service, "find_middle_point", fail)
    response = api_client.post("/api/locations/midpoint", json={"locations": [{"x": 0, "y": 0}]})
    assert response.status_code == 500


def test_malformed_utility_document_is_bad_gateway(api_client, monkeypatch):
    class FakeKakao:
        def request_utility(self, category_code, x, y):
            return [{"place_name": "역삼 주차장", "x": "not-a-number", "y": "37.5"}]

    monkeypatch.setattr(location_service, "_client", lambda: FakeKakao())
    response = api_client.get("/api/locations/utility", params={"category": "주차장", "x": 127.0, "y": 37.5})
    assert response.status_code == 502
