"""HTTP controller layer for apartment reservation availability."""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from backend.controllers.dependencies import get_availability_service
from backend.domain.models import AvailabilityState, AvailabilitySummary
from backend.services.availability_service import (
    ApartmentAvailabilityService,
    ApartmentNotFoundError,
    AvailabilityValidationError,
    get_availability_counts,
)
from backend.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["availability"])


class ReservationCheckRequest(BaseModel):
    level: Literal["apartment", "bedroom", "bed"]
    target_id: Optional[str] = None

    @field_validator("target_id")
    @classmethod
    def normalize_target_id(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None


class ReservationCheckResponse(BaseModel):
    allowed: bool
    reason: Optional[str] = None


class AvailabilityCountsResponse(BaseModel):
    available_bedrooms: int = Field(ge=0)
    available_beds: int = Field(ge=0)
    total_bedrooms: int = Field(ge=0)
    total_beds: int = Field(ge=0)


class AvailabilityResponse(BaseModel):
    apartment_id: str
    can_reserve_full_apartment: bool
    can_reserve_bedroom: dict[str, bool]
    can_reserve_bed: dict[str, bool]
    apartment_reservable: bool
    bedroom_reservable: bool
    bed_reservable: bool
    is_apartment_locked: bool
    has_reserved_beds: bool
    has_reserved_bedrooms: bool
    reason: Optional[str] = None
    counts: AvailabilityCountsResponse
    is_fully_booked: bool
    is_fully_available: bool
    is_partially_available: bool
    status_text: str


class AvailabilityListResponse(BaseModel):
    apartments: list[AvailabilityResponse]


def _availability_response(
    apartment_id: str,
    state: AvailabilityState,
    summary: AvailabilitySummary,
) -> AvailabilityResponse:
    counts = get_availability_counts(state)
    return AvailabilityResponse(
        apartment_id=apartment_id,
        can_reserve_full_apartment=state.can_reserve_full_apartment,
        can_reserve_bedroom=state.can_reserve_bedroom,
        can_reserve_bed=state.can_reserve_bed,
        apartment_reservable=state.apartment_reservable,
        bedroom_reservable=state.bedroom_reservable,
        bed_reservable=state.bed_reservable,
        is_apartment_locked=state.is_apartment_locked,
        has_reserved_beds=state.has_reserved_beds,
        has_reserved_bedrooms=state.has_reserved_bedrooms,
        reason=state.reason,
        counts=AvailabilityCountsResponse(
            available_bedrooms=counts.available_bedrooms,
            available_beds=counts.available_beds,
            total_bedrooms=counts.total_bedrooms,
            total_beds=counts.total_beds,
        ),
        is_fully_booked=summary.is_fully_booked,
        is_fully_available=summary.is_fully_available,
        is_partially_available=summary.is_partially_available,
        status_text=summary.status_text,
    )


@router.get(
    "/apartments/availability",
    response_model=AvailabilityListResponse,
    status_code=status.HTTP_200_OK,
)
async def list_availability(
    service: ApartmentAvailabilityService = Depends(get_availability_service),
) -> AvailabilityListResponse:
    try:
        results = service.list_availability()
        return AvailabilityListResponse(
            apartments=[
                _availability_response(apartment_id, state, summary)
                for apartment_id, (state, summary) in results.items()
            ]
        )
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected availability listing failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list availability",
        ) from exc


@router.get(
    "/apartments/{apartment_id}/availability",
    response_model=AvailabilityResponse,
    status_code=status.HTTP_200_OK,
)
async def get_availability(
    apartment_id: str,
    service: ApartmentAvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    try:
        state, summary = service.get_availability(apartment_id)
        return _availability_response(apartment_id, state, summary)
    except ApartmentNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected availability failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute availability",
        ) from exc


@router.post(
    "/apartments/{apartment_id}/reservation_check",
    response_model=ReservationCheckResponse,
    status_code=status.HTTP_200_OK,
)
async def check_reservation(
    apartment_id: str,
    payload: ReservationCheckRequest,
    service: ApartmentAvailabilityService = Depends(get_availability_service),
) -> ReservationCheckResponse:
    """A disallowed reservation is a normal 200 answer carrying a reason."""
    try:
        result = service.check_reservation(
            apartment_id=apartment_id,
            level=payload.level,
            target_id=payload.target_id,
        )
        return ReservationCheckResponse(allowed=result.allowed, reason=result.reason)
    except AvailabilityValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except ApartmentNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected reservation check failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to check reservation",
        ) from exc
