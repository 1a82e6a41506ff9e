"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Major Seoul transfer hubs (x = longitude, y = latitude).
DEFAULT_WEIGHTED_STATIONS: dict[str, tuple[float, float]] = {
    "강남역": (127.027636, 37.497950),
    "서울역": (126.972559, 37.554648),
    "홍대입구역": (126.923778, 37.557527),
    "잠실역": (127.100109, 37.513305),
    "건대입구역": (127.070277, 37.540693),
    "사당역": (126.981611, 37.476538),
    "종로3가역": (126.991806, 37.571607),
}


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="MEETPOINT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Meeting Point API"
    api_prefix: str = "/api"
    kakao_base_url: str = Field(
        default="https://dapi.kakao.com",
        description="Base URL for the Kakao Local API (geocoding, keyword and category search).",
    )
    kakao_api_key: Optional[str] = Field(default=None, description="Kakao REST API key.")
    transit_base_url: str = Field(
        default="https://api.odsay.com/v1/api",
        description="Base URL for the ODsay public transit routing API.",
    )
    transit_api_key: Optional[str] = Field(default=None, description="ODsay API key.")
    requester_timeout_seconds: float = Field(default=10.0, gt=0.0)
    requester_max_retries: int = Field(default=2, ge=0)
    requester_backoff_seconds: float = Field(default=0.5, ge=0.0)
    subway_search_radius_m: int = Field(
        default=2000,
        ge=0,
        le=20000,
        description="Radius around the centroid searched for candidate subway stations.",
    )
    utility_search_radius_m: int = Field(default=1000, ge=0, le=20000)
    walking_speed_kmh: float = Field(
        default=4.5,
        gt=0.0,
        description="Speed used to estimate a walking route when transit has no itinerary.",
    )
    weighted_station_bonus_seconds: float = Field(
        default=300.0,
        ge=0.0,
        description="Score reduction applied to curated weighted stations when grading.",
    )
    weighted_stations: dict[str, tuple[float, float]] = Field(
        default_factory=lambda: dict(DEFAULT_WEIGHTED_STATIONS),
        description="Curated stations as a mapping of name to (x, y).",
    )
    weighted_stations_table: str = "weighted_stations"
    path_cache_backend: Literal["memory", "supabase"] = Field(
        default="memory",
        description="Storage used for memoized route results.",
    )
    path_cache_table: str = "path_results"
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("weighted_stations", mode="before")
    @classmethod
    def _parse_station_mapping(cls, value: Any) -> dict[str, tuple[float, float]]:
        """Accept a JSON object or a mapping of name -> [x, y]."""
        if value is None:
            return {}
        if isinstance(value, str):
            if not value.strip():
                return {}
            try:
                value = json.loads(value)
            except json.JSONDecodeError as exc:
                raise ValueError(f"weighted_stations must be a JSON object: {exc}") from exc
        if not isinstance(value, dict):
            raise ValueError("weighted_stations must be a mapping of name to [x, y].")
        stations: dict[str, tuple[float, float]] = {}
        for name, coords in value.items():
            if not isinstance(coords, (list, tuple)) or len(coords) != 2:
                raise ValueError(f"weighted_stations entry '{name}' must be an [x, y] pair, got {coords!r}.")
            try:
                stations[str(name).strip()] = (float(coords[0]), float(coords[1]))
            except (TypeError, ValueError) as exc:
                raise ValueError(f"weighted_stations entry '{name}' has non-numeric coordinates: {exc}") from exc
        return stations


settings = Settings()
