"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from backend.services.availability_service import ApartmentAvailabilityService
from backend.services.compatibility_service import CompatibilityMatchingService


def get_matching_service(request: Request) -> CompatibilityMatchingService:
    service = getattr(request.app.state, "matching_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Matching service is not initialized",
        )
    return service


def get_availability_service(request: Request) -> ApartmentAvailabilityService:
    service = getattr(request.app.state, "availability_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Availability service is not initialized",
        )
    return service
