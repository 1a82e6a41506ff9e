"""Address, keyword and category lookups passed through to the Kakao Local API."""

from __future__ import annotations

from typing import Any, Iterable

from ...errors import RequesterFailure
from ...schemas.locations import LocationResponse, SpecificLocationResponse, UtilityResponse
from ..requesters.kakao_client import KakaoLocalClient
from .categories import translated_code


def _client() -> KakaoLocalClient:
    try:
        return KakaoLocalClient()
    except ValueError as e:
        raise RequesterFailure("configuration", str(e)) from e


def _optional_int(value: Any) -> int | None:
    if value in (None, ""):
        return None
    return int(value)


def to_specific_location(document: dict[str, Any]) -> SpecificLocationResponse:
    address = document.get("address") or {}
    road_address = document.get("road_address") or {}
    return SpecificLocationResponse(
        address_name=address.get("address_name") or road_address.get("address_name", ""),
        road_address_name=road_address.get("address_name"),
        building_name=road_address.get("building_name") or None,
        region_1depth_name=address.get("region_1depth_name"),
        region_2depth_name=address.get("region_2depth_name"),
        region_3depth_name=address.get("region_3depth_name"),
    )


def to_utility(document: dict[str, Any]) -> UtilityResponse:
    return UtilityResponse(
        place_name=document["place_name"],
        address_name=document.get("address_name") or None,
        road_address_name=document.get("road_address_name") or None,
        category_group_name=document.get("category_group_name") or None,
        phone=document.get("phone") or None,
        place_url=document.get("place_url") or None,
        distance=_optional_int(document.get("distance")),
        x=float(document["x"]),
        y=float(document["y"]),
    )


def combine_axis_keyword(
    address_documents: Iterable[dict[str, Any]],
    keyword_documents: Iterable[dict[str, Any]],
) -> list[LocationResponse]:
    """Exact address matches first, then keyword matches, one entry per coordinate."""
    locations: list[LocationResponse] = []
    seen: set[tuple[float, float]] = set()

    def _append(name: str, address_name: str, x: Any, y: Any) -> None:
        coordinate = (float(x), float(y))
        if coordinate in seen:
            return
        seen.add(coordinate)
        locations.append(LocationResponse(name=name, address_name=address_name, x=coordinate[0], y=coordinate[1]))

    for document in address_documents:
        road_address = document.get("road_address") or {}
        name = road_address.get("building_name") or document["address_name"]
        _append(name, document["address_name"], document["x"], document["y"])

    for document in keyword_documents:
        address_name = document.get("road_address_name") or document.get("address_name", "")
        _append(document["place_name"], address_name, document["x"], document["y"])

    return locations


def find_address(x: float, y: float) -> list[SpecificLocationResponse]:
    return [to_specific_location(document) for document in _client().request_address(x, y)]


def find_axis(address: str) -> list[LocationResponse]:
    client = _client()
    exact_address_result = client.request_coordinate(address)
    keyword_result = client.request_search(address)
    return combine_axis_keyword(exact_address_result, keyword_result)


def _utilities(documents: Iterable[dict[str, Any]]) -> list[UtilityResponse]:
    try:
        return [to_utility(document) for document in documents]
    except (KeyError, TypeError, ValueError) as e:
        raise RequesterFailure("kakao", f"Malformed place document: {e}") from e


def find_utility(category: str, x: float, y: float) -> list[UtilityResponse]:
    category_code = translated_code(category)
    return _utilities(_client().request_utility(category_code, x, y))


def find_search(keyword: str) -> list[UtilityResponse]:
    return _utilities(_client().request_search(keyword))
