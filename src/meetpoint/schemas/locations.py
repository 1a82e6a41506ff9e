"""Location lookup and meeting point request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class LocationRequest(BaseModel):
    x: float = Field(..., description="Longitude")
    y: float = Field(..., description="Latitude")


class LocationsRequest(BaseModel):
    locations: List[LocationRequest] = Field(..., min_length=1)


class MiddlePointResponse(BaseModel):
    x: float
    y: float


class SpecificLocationResponse(BaseModel):
    address_name: str
    road_address_name: Optional[str] = None
    building_name: Optional[str] = None
    region_1depth_name: Optional[str] = None
    region_2depth_name: Optional[str] = None
    region_3depth_name: Optional[str] = None


class LocationResponse(BaseModel):
    name: str
    address_name: str
    x: float
    y: float


class UtilityResponse(BaseModel):
    place_name: str
    address_name: Optional[str] = None
    road_address_name: Optional[str] = None
    category_group_name: Optional[str] = None
    phone: Optional[str] = None
    place_url: Optional[str] = None
    distance: Optional[int] = None
    x: float
    y: float
