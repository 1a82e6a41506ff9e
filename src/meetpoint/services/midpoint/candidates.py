"""Candidate station discovery around the middle of the input locations."""

from __future__ import annotations

import logging
from typing import Iterable

from ...models.domain import Candidate, CandidateSet, Points
from .base import POICollaborator, StationRegistry

logger = logging.getLogger(__name__)


def remove_duplicate_stations(candidates: Iterable[Candidate]) -> CandidateSet:
    """Keep one candidate per coordinate, preferring the weighted variant."""
    result = CandidateSet()
    for candidate in candidates:
        result.add(candidate)
    return result


class CandidateGenerator:
    def __init__(self, poi: POICollaborator, registry: StationRegistry) -> None:
        self.poi = poi
        self.registry = registry

    def weighted_candidates(self) -> list[Candidate]:
        return [
            Candidate(name=name, point=point, is_weighted=True)
            for name, point in self.registry.list_stations().items()
        ]

    def generate(self, points: Points) -> CandidateSet:
        middle = points.middle_point()
        discovered = self.poi.nearby_stations(middle)
        weighted = self.weighted_candidates()
        candidates = remove_duplicate_stations([*discovered, *weighted])
        logger.debug(
            f"Candidates around ({middle.x:.6f}, {middle.y:.6f}): {len(discovered)} discovered, "
            f"{len(weighted)} weighted, {len(candidates)} after deduplication"
        )
        return candidates
