"""Kakao category group codes accepted by the utility search."""

from __future__ import annotations

from ...errors import UnknownCategory

CATEGORY_CODES: dict[str, str] = {
    "대형마트": "MT1",
    "편의점": "CS2",
    "어린이집": "PS3",
    "유치원": "PS3",
    "학교": "SC4",
    "학원": "AC5",
    "주차장": "PK6",
    "주유소": "OL7",
    "충전소": "OL7",
    "지하철역": "SW8",
    "은행": "BK9",
    "문화시설": "CT1",
    "중개업소": "AG2",
    "공공기관": "PO3",
    "관광명소": "AT4",
    "숙박": "AD5",
    "음식점": "FD6",
    "카페": "CE7",
    "병원": "HP8",
    "약국": "PM9",
}

_KNOWN_CODES = frozenset(CATEGORY_CODES.values())


def translated_code(category: str) -> str:
    """Return the Kakao code for a category name, or the code itself if already one."""
    normalized = category.strip()
    if normalized.upper() in _KNOWN_CODES:
        return normalized.upper()
    try:
        return CATEGORY_CODES[normalized]
    except KeyError:
        raise UnknownCategory(f"Unknown location category '{category}'.") from None
