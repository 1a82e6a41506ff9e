"""Domain models for meeting point resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Sequence

from ..services.geospatial import centroid


@dataclass(frozen=True, slots=True)
class Point:
    """A coordinate pair where x is longitude and y is latitude."""

    x: float
    y: float


class Points:
    """Ordered, non-empty collection of input locations."""

    __slots__ = ("_points",)

    def __init__(self, points: Iterable[Point]) -> None:
        self._points: tuple[Point, ...] = tuple(points)
        if not self._points:
            raise ValueError("At least one location is required to find a meeting point.")

    @classmethod
    def from_coordinates(cls, coordinates: Iterable[tuple[float, float]]) -> "Points":
        return cls(Point(float(x), float(y)) for x, y in coordinates)

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def distinct(self) -> list[Point]:
        """Unique points in first-seen order."""
        return list(dict.fromkeys(self._points))

    def middle_point(self) -> Point:
        x, y = centroid((point.x, point.y) for point in self._points)
        return Point(x, y)


@dataclass(frozen=True, slots=True)
class Candidate:
    """A named station that may become the meeting point."""

    name: str
    point: Point
    is_weighted: bool = False


class CandidateSet:
    """Candidates keyed by coordinate, kept in insertion order."""

    __slots__ = ("_by_point",)

    def __init__(self) -> None:
        self._by_point: dict[Point, Candidate] = {}

    def add(self, candidate: Candidate) -> None:
        """Insert a candidate; a weighted one replaces an unweighted one at the same coordinate."""
        existing = self._by_point.get(candidate.point)
        if existing is None or (candidate.is_weighted and not existing.is_weighted):
            self._by_point[candidate.point] = candidate

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._by_point.values())

    def __len__(self) -> int:
        return len(self._by_point)


class RouteStrategy(str, Enum):
    DIRECT_TRANSIT = "direct_transit"
    TRANSFER_TRANSIT = "transfer_transit"
    WALKING = "walking"


@dataclass(frozen=True, slots=True)
class ItineraryLeg:
    mode: str
    duration_seconds: int
    label: str | None = None


@dataclass(frozen=True, slots=True)
class TransitRoute:
    """Itinerary returned by the routing provider for one strategy."""

    duration_seconds: int
    legs: tuple[ItineraryLeg, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class RouteResult:
    """Best known travel time from one source to one candidate."""

    duration_seconds: int
    weighted: bool
    strategy: RouteStrategy

    @classmethod
    def from_transit_route(
        cls, route: TransitRoute, *, weighted: bool, strategy: RouteStrategy
    ) -> "RouteResult":
        return cls(duration_seconds=route.duration_seconds, weighted=weighted, strategy=strategy)


def min_time_route(direct: RouteResult, transfer: RouteResult) -> RouteResult:
    """Return the faster result; equal durations keep the direct route."""
    if transfer.duration_seconds < direct.duration_seconds:
        return transfer
    return direct


@dataclass(frozen=True, slots=True)
class PathKey:
    """Cache key for an ordered (source, target) pair."""

    source: Point
    target: Point


ResultMatrix = dict[Point, dict[Point, RouteResult]]


def durations_for(points: Sequence[Point] | Points, target: Point, matrix: ResultMatrix) -> list[int]:
    """Collect one duration per input point towards ``target``."""
    durations: list[int] = []
    for source in points:
        row = matrix.get(source)
        if row is None or target not in row:
            raise ValueError(f"Result matrix is missing the route {source} -> {target}.")
        durations.append(row[target].duration_seconds)
    return durations
