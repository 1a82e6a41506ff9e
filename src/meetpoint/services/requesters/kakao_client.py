"""HTTP client for the Kakao Local API (geocoding, keyword and category search)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import settings
from ...errors import RequesterFailure
from ...models.domain import Candidate, Point
from .http import JsonRequester

SUBWAY_CATEGORY_CODE = "SW8"

logger = logging.getLogger(__name__)


class KakaoLocalClient(JsonRequester):
    name = "kakao"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        *,
        subway_radius_m: int | None = None,
        utility_radius_m: int | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(
            base_url or settings.kakao_base_url,
            timeout=timeout,
            max_retries=max_retries,
            backoff_seconds=backoff_seconds,
            transport=transport,
        )
        self.api_key = api_key or settings.kakao_api_key
        if not self.api_key:
            raise ValueError("Kakao API key is not configured.")
        self.subway_radius_m = subway_radius_m if subway_radius_m is not None else settings.subway_search_radius_m
        self.utility_radius_m = (
            utility_radius_m if utility_radius_m is not None else settings.utility_search_radius_m
        )

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"KakaoAK {self.api_key}"}

    def _documents(self, path: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        data = self._get_json(path, params)
        documents = data.get("documents") if isinstance(data, dict) else None
        if not isinstance(documents, list):
            raise RequesterFailure(self.name, f"{path} response missing documents")
        return documents

    def request_address(self, x: float, y: float) -> list[dict[str, Any]]:
        """Reverse geocode a coordinate into address documents."""
        return self._documents("/v2/local/geo/coord2address.json", {"x": x, "y": y})

    def request_coordinate(self, address: str) -> list[dict[str, Any]]:
        """Exact address search."""
        return self._documents("/v2/local/search/address.json", {"query": address})

    def request_search(self, keyword: str) -> list[dict[str, Any]]:
        return self._documents("/v2/local/search/keyword.json", {"query": keyword})

    def request_utility(self, category_code: str, x: float, y: float) -> list[dict[str, Any]]:
        return self._documents(
            "/v2/local/search/category.json",
            {
                "category_group_code": category_code,
                "x": x,
                "y": y,
                "radius": self.utility_radius_m,
                "sort": "distance",
            },
        )

    def request_subway(self, x: float, y: float) -> list[dict[str, Any]]:
        return self._documents(
            "/v2/local/search/category.json",
            {
                "category_group_code": SUBWAY_CATEGORY_CODE,
                "x": x,
                "y": y,
                "radius": self.subway_radius_m,
                "sort": "distance",
            },
        )

    def nearby_stations(self, point: Point) -> list[Candidate]:
        """Subway stations around ``point`` as unweighted candidates."""
        candidates: list[Candidate] = []
        for document in self.request_subway(point.x, point.y):
            try:
                candidates.append(
                    Candidate(
                        name=str(document["place_name"]),
                        point=Point(float(document["x"]), float(document["y"])),
                    )
                )
            except (KeyError, ValueError, TypeError) as e:
                raise RequesterFailure(self.name, f"invalid station document: {e}") from e
        logger.debug(f"Found {len(candidates)} stations near ({point.x}, {point.y})")
        return candidates
