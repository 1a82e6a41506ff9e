"""Meeting point orchestration service."""

from __future__ import annotations

import logging
from functools import lru_cache

from ...data.weighted_stations import get_weighted_station_registry
from ...errors import RequesterFailure
from ...models.domain import Point, Points
from ...persistence.path_cache import PathCache, build_path_cache
from ...schemas.locations import LocationsRequest, MiddlePointResponse
from ..requesters.kakao_client import KakaoLocalClient
from ..requesters.odsay_client import OdsayTransitClient
from .candidates import CandidateGenerator
from .grading import ScoreFunction, StationGrades
from .path_resolver import PathResolver

logger = logging.getLogger(__name__)


class MiddlePointService:
    def __init__(
        self,
        generator: CandidateGenerator,
        resolver: PathResolver,
        score: ScoreFunction | None = None,
    ) -> None:
        self.generator = generator
        self.resolver = resolver
        self.score = score

    def resolve_meeting_point(self, points: Points) -> Point:
        candidates = self.generator.generate(points)
        matrix = self.resolver.resolve_all(points, candidates)
        best = StationGrades.value_of(points, candidates, matrix, self.score).best()
        logger.info(
            f"Meeting point for {len(points)} locations: {best.candidate.name} "
            f"({best.candidate.point.x}, {best.candidate.point.y}) score={best.score:.0f} "
            f"out of {len(candidates)} candidates"
        )
        return best.candidate.point


@lru_cache()
def get_path_cache() -> PathCache:
    """Process-wide cache shared by every request."""
    return build_path_cache()


@lru_cache()
def get_path_resolver() -> PathResolver:
    """Process-wide resolver so concurrent requests share its per-key locks."""
    return PathResolver(routing=OdsayTransitClient(), cache=get_path_cache())


def build_middle_point_service() -> MiddlePointService:
    try:
        kakao = KakaoLocalClient()
        resolver = get_path_resolver()
    except ValueError as e:
        logger.error(f"Requester initialization failed: {e}")
        raise RequesterFailure("configuration", str(e)) from e

    generator = CandidateGenerator(poi=kakao, registry=get_weighted_station_registry())
    return MiddlePointService(generator=generator, resolver=resolver)


def find_middle_point(payload: LocationsRequest) -> MiddlePointResponse:
    points = Points.from_coordinates((location.x, location.y) for location in payload.locations)
    service = build_middle_point_service()
    point = service.resolve_meeting_point(points)
    return MiddlePointResponse(x=point.x, y=point.y)
