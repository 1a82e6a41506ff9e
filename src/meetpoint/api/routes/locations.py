"""Location lookup and meeting point endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from ...errors import NoCandidateFound, RequesterFailure, UnknownCategory
from ...schemas.locations import (
    LocationResponse,
    LocationsRequest,
    MiddlePointResponse,
    SpecificLocationResponse,
    UtilityResponse,
)
from ...services.locations import service as location_service
from ...services.midpoint import service as midpoint_service

router = APIRouter(prefix="/locations", tags=["locations"])


def _requester_error(exc: RequesterFailure) -> HTTPException:
    logging.warning(f"External requester failed: {exc}")
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"External location service failed: {exc}",
    )


def _unexpected_error(action: str, exc: Exception) -> HTTPException:
    logging.exception(f"Error while trying to {action}: {exc}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {str(exc)}",
    )


@router.get("/address", response_model=List[SpecificLocationResponse])
def find_address(
    x: float = Query(..., description="Longitude"),
    y: float = Query(..., description="Latitude"),
) -> List[SpecificLocationResponse]:
    try:
        return location_service.find_address(x, y)
    except RequesterFailure as exc:
        raise _requester_error(exc) from exc
    except Exception as exc:
        raise _unexpected_error("look up address", exc) from exc


@router.get("/coordinate", response_model=List[LocationResponse])
def find_axis(address: str = Query(..., min_length=1)) -> List[LocationResponse]:
    try:
        return location_service.find_axis(address)
    except RequesterFailure as exc:
        raise _requester_error(exc) from exc
    except Exception as exc:
        raise _unexpected_error("look up coordinates", exc) from exc


@router.get("/utility", response_model=List[UtilityResponse])
def find_utility(
    category: str = Query(..., min_length=1),
    x: float = Query(..., description="Longitude"),
    y: float = Query(..., description="Latitude"),
) -> List[UtilityResponse]:
    try:
        return location_service.find_utility(category, x, y)
    except UnknownCategory as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except RequesterFailure as exc:
        raise _requester_error(exc) from exc
    except Exception as exc:
        raise _unexpected_error("search utilities", exc) from exc


@router.get("/search", response_model=List[UtilityResponse])
def find_search(keyword: str = Query(..., min_length=1)) -> List[UtilityResponse]:
    try:
        return location_service.find_search(keyword)
    except RequesterFailure as exc:
        raise _requester_error(exc) from exc
    except Exception as exc:
        raise _unexpected_error("search keyword", exc) from exc


@router.post("/midpoint", response_model=MiddlePointResponse, status_code=status.HTTP_200_OK)
def find_middle_point(payload: LocationsRequest) -> MiddlePointResponse:
    try:
        return midpoint_service.find_middle_point(payload)
    except NoCandidateFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except RequesterFailure as exc:
        raise _requester_error(exc) from exc
    except Exception as exc:
        raise _unexpected_error("find meeting point", exc) from exc
