"""Collaborator contracts used by meeting point resolution."""

from __future__ import annotations

from typing import Protocol

from ...models.domain import Candidate, Point, TransitRoute


class RoutingCollaborator(Protocol):
    """Transit router offering the two strategies compared per pair.

    Either method returns ``None`` when the provider has no itinerary of that
    kind, and raises ``RequesterFailure`` when the provider itself fails.
    """

    def direct_route(self, source: Point, target: Point) -> TransitRoute | None:
        ...

    def transfer_route(self, source: Point, target: Point) -> TransitRoute | None:
        ...


class POICollaborator(Protocol):
    def nearby_stations(self, point: Point) -> list[Candidate]:
        ...


class StationRegistry(Protocol):
    def list_stations(self) -> dict[str, Point]:
        ...
