"""Curated station registry with database-first approach, falling back to settings."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Mapping

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import Point


class WeightedStationRegistry:
    """Fixed set of stations that receive a grading bonus."""

    def __init__(self, stations: Mapping[str, Point]) -> None:
        self._stations = dict(stations)

    def list_stations(self) -> dict[str, Point]:
        return dict(self._stations)

    def __len__(self) -> int:
        return len(self._stations)


def _load_stations_from_database() -> dict[str, Point] | None:
    """Load stations from Supabase. Returns None if the database is not available or empty."""
    supabase = get_supabase_client()
    if not supabase:
        return None

    try:
        response = supabase.table(settings.weighted_stations_table).select("name, x, y").execute()
    except Exception as e:
        logging.debug(f"Weighted station query failed, falling back to settings: {e}")
        return None

    stations: dict[str, Point] = {}
    for row in response.data or []:
        try:
            stations[str(row["name"]).strip()] = Point(float(row["x"]), float(row["y"]))
        except (KeyError, ValueError, TypeError) as e:
            logging.warning(f"Skipping invalid weighted station row: {e}")
    return stations or None


def _load_stations_from_settings() -> dict[str, Point]:
    return {name: Point(x, y) for name, (x, y) in settings.weighted_stations.items()}


@lru_cache()
def get_weighted_station_registry() -> WeightedStationRegistry:
    stations = _load_stations_from_database()
    if stations is None:
        stations = _load_stations_from_settings()
        source = "settings"
    else:
        source = "database"
    logging.info(f"Loaded {len(stations)} weighted stations from {source}")
    return WeightedStationRegistry(stations)
