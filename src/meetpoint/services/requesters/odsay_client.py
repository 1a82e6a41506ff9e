"""HTTP client for the ODsay public transit routing API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import settings
from ...errors import RequesterFailure
from ...models.domain import ItineraryLeg, Point, TransitRoute
from .http import JsonRequester

logger = logging.getLogger(__name__)

# SearchPathType values
SEARCH_ALL = 0
SEARCH_SUBWAY = 1

# path.pathType value for itineraries mixing bus and subway
PATH_TYPE_BUS_AND_SUBWAY = 3

# Error codes meaning "no itinerary" rather than a provider failure:
# -98 origin and destination are too close, -99 no route found.
NO_ROUTE_CODES = frozenset({"-98", "-99"})

TRAFFIC_MODES = {1: "subway", 2: "bus", 3: "walk"}


def _error_code(data: dict[str, Any]) -> tuple[str, str] | None:
    error = data.get("error")
    if error is None:
        return None
    if isinstance(error, list):
        error = error[0] if error else {}
    code = str(error.get("code", ""))
    message = str(error.get("msg") or error.get("message") or "unknown error")
    return code, message


def _leg_label(sub_path: dict[str, Any]) -> str | None:
    lanes = sub_path.get("lane") or []
    if not lanes:
        return None
    lane = lanes[0]
    return lane.get("name") or lane.get("busNo")


def parse_path(path: dict[str, Any]) -> TransitRoute:
    """Turn one ODsay ``path`` entry into a TransitRoute."""
    total_minutes = path["info"]["totalTime"]
    legs = tuple(
        ItineraryLeg(
            mode=TRAFFIC_MODES.get(sub_path.get("trafficType"), "unknown"),
            duration_seconds=int(sub_path.get("sectionTime", 0)) * 60,
            label=_leg_label(sub_path),
        )
        for sub_path in path.get("subPath") or []
    )
    return TransitRoute(duration_seconds=int(total_minutes) * 60, legs=legs)


class OdsayTransitClient(JsonRequester):
    """Routing collaborator exposing the direct and transfer strategies."""

    name = "odsay"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(
            base_url or settings.transit_base_url,
            timeout=timeout,
            max_retries=max_retries,
            backoff_seconds=backoff_seconds,
            transport=transport,
        )
        self.api_key = api_key or settings.transit_api_key
        if not self.api_key:
            raise ValueError("Transit API key is not configured.")

    def _search_paths(self, source: Point, target: Point, search_type: int) -> list[dict[str, Any]] | None:
        data = self._get_json(
            "/searchPubTransPathT",
            {
                "SX": source.x,
                "SY": source.y,
                "EX": target.x,
                "EY": target.y,
                "SearchPathType": search_type,
                "apiKey": self.api_key,
            },
        )
        if not isinstance(data, dict):
            raise RequesterFailure(self.name, "unexpected response payload")

        error = _error_code(data)
        if error is not None:
            code, message = error
            if code in NO_ROUTE_CODES:
                logger.debug(f"No transit itinerary ({code}) from {source} to {target}: {message}")
                return None
            raise RequesterFailure(self.name, f"error {code}: {message}")

        paths = (data.get("result") or {}).get("path")
        if not isinstance(paths, list):
            raise RequesterFailure(self.name, "response missing result.path")
        return paths

    def _fastest(self, paths: list[dict[str, Any]]) -> TransitRoute | None:
        try:
            routes = [parse_path(path) for path in paths]
        except (KeyError, TypeError, ValueError) as e:
            raise RequesterFailure(self.name, f"invalid path entry: {e}") from e
        if not routes:
            return None
        return min(routes, key=lambda route: route.duration_seconds)

    def direct_route(self, source: Point, target: Point) -> TransitRoute | None:
        """Fastest subway-only itinerary."""
        paths = self._search_paths(source, target, SEARCH_SUBWAY)
        if paths is None:
            return None
        return self._fastest(paths)

    def transfer_route(self, source: Point, target: Point) -> TransitRoute | None:
        """Fastest itinerary that combines bus and subway."""
        paths = self._search_paths(source, target, SEARCH_ALL)
        if paths is None:
            return None
        return self._fastest([path for path in paths if path.get("pathType") == PATH_TYPE_BUS_AND_SUBWAY])
