"""Apartment reservation availability with apartment/bedroom/bed mutual exclusivity.

Rules, evaluated fresh on every call:
  1. An active apartment-level reservation locks everything (short-circuits).
  2. Any active bed or bedroom reservation disables full-apartment booking.
  3. A bedroom reserved as a whole disables every bed inside it.
  4. A reserved bed disables its bedroom's whole-room option; sibling beds stay open.

Rules 2-4 only ever disable options, so their order does not change the result.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, Optional, Sequence

from backend.domain.constraints import (
    DEFAULT_ACTIVE_RESERVATION_STATUSES,
    RESERVATION_LEVELS,
    validate_reservation_statuses,
)
from backend.domain.models import (
    ApartmentConfig,
    AvailabilityCounts,
    AvailabilityState,
    AvailabilitySummary,
    Reservation,
    ReservationCheck,
)
from backend.repository.data_repository import DataRepository
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)

APARTMENT_LOCKED_REASON = "Apartment is fully reserved"


class AvailabilityValidationError(Exception):
    """Raised when a reservation check request is invalid."""


class ApartmentNotFoundError(Exception):
    """Raised when an apartment configuration does not exist."""


def _active_reservations(
    apartment: ApartmentConfig,
    reservations: Iterable[Reservation],
    active_statuses: AbstractSet[str],
) -> list[Reservation]:
    return [
        reservation
        for reservation in reservations
        if reservation.apartment_id == apartment.id and reservation.status in active_statuses
    ]


def calculate_availability(
    apartment: ApartmentConfig,
    reservations: Sequence[Reservation],
    active_statuses: Optional[AbstractSet[str]] = None,
) -> AvailabilityState:
    """Compute which reservation options are currently legal for one apartment."""
    statuses = active_statuses if active_statuses is not None else DEFAULT_ACTIVE_RESERVATION_STATUSES
    active = _active_reservations(apartment, reservations, statuses)

    total_bedrooms = len(apartment.bedrooms)
    total_beds = sum(len(bedroom.beds) for bedroom in apartment.bedrooms)

    if any(reservation.reservation_level == "apartment" for reservation in active):
        return AvailabilityState(
            can_reserve_full_apartment=False,
            can_reserve_bedroom={bedroom.id: False for bedroom in apartment.bedrooms},
            can_reserve_bed={
                bed.id: False for bedroom in apartment.bedrooms for bed in bedroom.beds
            },
            total_bedrooms_count=total_bedrooms,
            total_beds_count=total_beds,
            is_apartment_locked=True,
            reason=APARTMENT_LOCKED_REASON,
        )

    can_reserve_full = apartment.enable_full_apartment_reservation
    can_reserve_bedroom = {
        bedroom.id: apartment.enable_bedroom_reservation for bedroom in apartment.bedrooms
    }
    can_reserve_bed = {
        bed.id: apartment.enable_bed_reservation and bed.available
        for bedroom in apartment.bedrooms
        for bed in bedroom.beds
    }

    bed_reservations = [r for r in active if r.reservation_level == "bed"]
    if bed_reservations:
        can_reserve_full = False
        reserved_bed_ids = {r.bed_id for r in bed_reservations if r.bed_id}
        for bed_id in reserved_bed_ids:
            if bed_id in can_reserve_bed:
                can_reserve_bed[bed_id] = False
        for bedroom in apartment.bedrooms:
            if any(bed.id in reserved_bed_ids for bed in bedroom.beds):
                can_reserve_bedroom[bedroom.id] = False

    bedroom_reservations = [r for r in active if r.reservation_level == "bedroom"]
    if bedroom_reservations:
        can_reserve_full = False
        bedrooms_by_id = {bedroom.id: bedroom for bedroom in apartment.bedrooms}
        for reservation in bedroom_reservations:
            bedroom = bedrooms_by_id.get(reservation.bedroom_id or "")
            if bedroom is None:
                continue
            can_reserve_bedroom[bedroom.id] = False
            for bed in bedroom.beds:
                can_reserve_bed[bed.id] = False

    available_bedrooms = sum(1 for allowed in can_reserve_bedroom.values() if allowed)
    available_beds = sum(1 for allowed in can_reserve_bed.values() if allowed)
    has_reserved_beds = bool(bed_reservations)
    has_reserved_bedrooms = bool(bedroom_reservations)

    return AvailabilityState(
        can_reserve_full_apartment=can_reserve_full,
        can_reserve_bedroom=can_reserve_bedroom,
        can_reserve_bed=can_reserve_bed,
        apartment_reservable=(
            can_reserve_full
            and apartment.enable_full_apartment_reservation
            and not has_reserved_beds
            and not has_reserved_bedrooms
        ),
        bedroom_reservable=available_bedrooms > 0 and apartment.enable_bedroom_reservation,
        bed_reservable=available_beds > 0 and apartment.enable_bed_reservation,
        available_bedrooms_count=available_bedrooms,
        available_beds_count=available_beds,
        total_bedrooms_count=total_bedrooms,
        total_beds_count=total_beds,
        is_apartment_locked=False,
        has_reserved_beds=has_reserved_beds,
        has_reserved_bedrooms=has_reserved_bedrooms,
    )


def can_make_reservation(
    apartment: ApartmentConfig,
    reservations: Sequence[Reservation],
    level: str,
    target_id: Optional[str] = None,
    active_statuses: Optional[AbstractSet[str]] = None,
) -> ReservationCheck:
    availability = calculate_availability(apartment, reservations, active_statuses)

    if level == "apartment":
        if availability.apartment_reservable:
            return ReservationCheck(allowed=True)
        return ReservationCheck(
            allowed=False,
            reason="Full apartment reservation is not available",
        )

    if level == "bedroom":
        if not target_id:
            return ReservationCheck(allowed=False, reason="Bedroom ID required")
        if availability.can_reserve_bedroom.get(target_id, False):
            return ReservationCheck(allowed=True)
        return ReservationCheck(
            allowed=False,
            reason="This bedroom is not available for reservation",
        )

    if level == "bed":
        if not target_id:
            return ReservationCheck(allowed=False, reason="Bed ID required")
        if availability.can_reserve_bed.get(target_id, False):
            return ReservationCheck(allowed=True)
        return ReservationCheck(
            allowed=False,
            reason="This bed is not available for reservation",
        )

    return ReservationCheck(allowed=False, reason="Invalid reservation level")


def get_availability_summary(availability: AvailabilityState) -> AvailabilitySummary:
    is_fully_booked = not (
        availability.apartment_reservable
        or availability.bedroom_reservable
        or availability.bed_reservable
    )
    is_fully_available = availability.apartment_reservable

    if is_fully_booked:
        status_text = "Fully Booked"
    elif is_fully_available:
        status_text = "Fully Available"
    else:
        # Partial availability only ever reports beds, even for bedroom-only states.
        status_text = f"{availability.available_beds_count} beds available"

    return AvailabilitySummary(
        is_fully_booked=is_fully_booked,
        is_fully_available=is_fully_available,
        is_partially_available=not is_fully_booked and not is_fully_available,
        status_text=status_text,
    )


def get_availability_counts(availability: AvailabilityState) -> AvailabilityCounts:
    return AvailabilityCounts(
        available_bedrooms=availability.available_bedrooms_count,
        available_beds=availability.available_beds_count,
        total_bedrooms=availability.total_bedrooms_count,
        total_beds=availability.total_beds_count,
    )


def calculate_multiple_availability(
    apartments: Sequence[ApartmentConfig],
    reservations: Sequence[Reservation],
    active_statuses: Optional[AbstractSet[str]] = None,
) -> dict[str, tuple[AvailabilityState, AvailabilitySummary]]:
    """Evaluate each apartment independently against the shared reservation list."""
    results: dict[str, tuple[AvailabilityState, AvailabilitySummary]] = {}
    for apartment in apartments:
        state = calculate_availability(apartment, reservations, active_statuses)
        results[apartment.id] = (state, get_availability_summary(state))
    return results


class ApartmentAvailabilityService:
    """Feeds stored apartment configurations and reservations into the rules."""

    def __init__(
        self,
        repository: Optional[DataRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._active_statuses = frozenset(self._settings.active_reservation_statuses)
        validate_reservation_statuses(self._active_statuses)

    def _require_apartment(self, apartment_id: str) -> ApartmentConfig:
        apartment = self._repository.get_apartment(apartment_id)
        if apartment is None:
            raise ApartmentNotFoundError(f"Apartment {apartment_id} was not found")
        return apartment

    def get_availability(
        self,
        apartment_id: str,
    ) -> tuple[AvailabilityState, AvailabilitySummary]:
        apartment = self._require_apartment(apartment_id)
        reservations = self._repository.list_reservations(apartment_id=apartment_id)
        state = calculate_availability(apartment, reservations, self._active_statuses)
        summary = get_availability_summary(state)
        logger.debug(
            "Availability computed | apartment_id=%s | status=%s | beds=%s/%s | bedrooms=%s/%s",
            apartment_id,
            summary.status_text,
            state.available_beds_count,
            state.total_beds_count,
            state.available_bedrooms_count,
            state.total_bedrooms_count,
        )
        return state, summary

    def check_reservation(
        self,
        *,
        apartment_id: str,
        level: str,
        target_id: Optional[str] = None,
    ) -> ReservationCheck:
        if level not in RESERVATION_LEVELS:
            raise AvailabilityValidationError(
                f"level must be one of {', '.join(RESERVATION_LEVELS)}"
            )
        apartment = self._require_apartment(apartment_id)
        reservations = self._repository.list_reservations(apartment_id=apartment_id)
        result = can_make_reservation(
            apartment,
            reservations,
            level,
            target_id,
            self._active_statuses,
        )
        logger.info(
            "Reservation check | apartment_id=%s | level=%s | target_id=%s | allowed=%s",
            apartment_id,
            level,
            target_id,
            result.allowed,
        )
        return result

    def list_availability(self) -> dict[str, tuple[AvailabilityState, AvailabilitySummary]]:
        apartments = self._repository.list_apartments()
        reservations = self._repository.list_reservations()
        return calculate_multiple_availability(apartments, reservations, self._active_statuses)
