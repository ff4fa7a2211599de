from __future__ import annotations

from dataclasses import replace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from backend.controllers.availability_controller import router
from backend.domain.models import ApartmentConfig, Bed, Bedroom
from backend.repository.data_repository import DataRepository
from backend.services.availability_service import (
    ApartmentAvailabilityService,
    ApartmentNotFoundError,
    AvailabilityValidationError,
)
from backend.utils.config import get_settings


def _build_test_settings(tmp_path, filename: str):
    base = get_settings()
    return replace(base, database_path=tmp_path / filename)


def _seed_apartment(repository: DataRepository) -> None:
    repository.create_apartment(
        ApartmentConfig(
            id="apt-1",
            name="A1",
            enable_full_apartment_reservation=True,
            enable_bedroom_reservation=True,
            enable_bed_reservation=True,
            bedrooms=(
                Bedroom(id="br-1", name="Bedroom 1", beds=(Bed(id="bed-1", label="Bed A"), Bed(id="bed-2", label="Bed B"))),
            ),
        )
    )


def _build_service(tmp_path, filename: str) -> tuple[ApartmentAvailabilityService, DataRepository]:
    settings = _build_test_settings(tmp_path, filename)
    repository = DataRepository(settings)
    repository.initialize_database()
    _seed_apartment(repository)
    return ApartmentAvailabilityService(repository=repository, settings=settings), repository


def test_repository_round_trips_apartment_tree(tmp_path):
    _, repository = _build_service(tmp_path, "availability_repo.db")
    apartment = repository.get_apartment("apt-1")

    assert apartment is not None
    assert [bedroom.id for bedroom in apartment.bedrooms] == ["br-1"]
    assert [bed.id for bed in apartment.bedrooms[0].beds] == ["bed-1", "bed-2"]
    assert repository.get_apartment("missing") is None


def test_service_applies_stored_reservations(tmp_path):
    service, repository = _build_service(tmp_path, "availability_service.db")
    repository.create_reservation("bed", "confirmed", apartment_id="apt-1", bed_id="bed-1")

    state, summary = service.get_availability("apt-1")

    assert state.apartment_reservable is False
    assert state.can_reserve_bed == {"bed-1": False, "bed-2": True}
    assert state.can_reserve_bedroom == {"br-1": False}
    assert summary.status_text == "1 beds available"


def test_cancelled_reservation_reopens_apartment(tmp_path):
    service, repository = _build_service(tmp_path, "availability_cancel.db")
    reservation_id = repository.create_reservation("apartment", "pending", apartment_id="apt-1")
    assert service.get_availability("apt-1")[1].status_text == "Fully Booked"

    repository.update_reservation_status([reservation_id], "cancelled")
    assert service.get_availability("apt-1")[1].status_text == "Fully Available"


def test_service_unknown_apartment_raises(tmp_path):
    service, _ = _build_service(tmp_path, "availability_unknown.db")
    with pytest.raises(ApartmentNotFoundError):
        service.get_availability("missing")


def test_service_rejects_unknown_level(tmp_path):
    service, _ = _build_service(tmp_path, "availability_level.db")
    with pytest.raises(AvailabilityValidationError):
        service.check_reservation(apartment_id="apt-1", level="floor")


def test_seeded_apartments_are_all_evaluated(tmp_path):
    settings = _build_test_settings(tmp_path, "availability_seed.db")
    repository = DataRepository(settings)
    repository.initialize_database()
    repository.seed_synthetic_data()
    service = ApartmentAvailabilityService(repository=repository, settings=settings)

    results = service.list_availability()
    assert len(results) == settings.synthetic_apartment_count
    for _, summary in results.values():
        assert summary.status_text == "Fully Available"


# --- HTTP endpoints ---

def _build_client(tmp_path, filename: str) -> tuple[TestClient, DataRepository]:
    service, repository = _build_service(tmp_path, filename)
    app = FastAPI()
    app.include_router(router)
    app.state.availability_service = service
    return TestClient(app), repository


def test_availability_endpoint(tmp_path):
    client, repository = _build_client(tmp_path, "availability_endpoint.db")
    repository.create_reservation("bedroom", "active", apartment_id="apt-1", bedroom_id="br-1")

    response = client.get("/apartments/apt-1/availability")
    assert response.status_code == 200
    body = response.json()
    assert body["apartment_reservable"] is False
    assert body["can_reserve_bed"] == {"bed-1": False, "bed-2": False}
    assert body["counts"] == {
        "available_bedrooms": 0,
        "available_beds": 0,
        "total_bedrooms": 1,
        "total_beds": 2,
    }
    assert body["is_fully_booked"] is True
    assert body["status_text"] == "Fully Booked"


def test_availability_endpoint_unknown_apartment(tmp_path):
    client, _ = _build_client(tmp_path, "availability_endpoint_missing.db")
    response = client.get("/apartments/missing/availability")
    assert response.status_code == 404


def test_list_availability_endpoint(tmp_path):
    client, _ = _build_client(tmp_path, "availability_endpoint_list.db")
    response = client.get("/apartments/availability")
    assert response.status_code == 200
    apartments = response.json()["apartments"]
    assert [item["apartment_id"] for item in apartments] == ["apt-1"]
    assert apartments[0]["status_text"] == "Fully Available"


def test_reservation_check_endpoint(tmp_path):
    client, repository = _build_client(tmp_path, "availability_endpoint_check.db")
    repository.create_reservation("bed", "confirmed", apartment_id="apt-1", bed_id="bed-1")

    free_bed = client.post(
        "/apartments/apt-1/reservation_check",
        json={"level": "bed", "target_id": "bed-2"},
    )
    assert free_bed.status_code == 200
    assert free_bed.json() == {"allowed": True, "reason": None}

    whole_apartment = client.post(
        "/apartments/apt-1/reservation_check",
        json={"level": "apartment"},
    )
    assert whole_apartment.json() == {
        "allowed": False,
        "reason": "Full apartment reservation is not available",
    }

    missing_target = client.post(
        "/apartments/apt-1/reservation_check",
        json={"level": "bedroom", "target_id": "   "},
    )
    assert missing_target.json() == {"allowed": False, "reason": "Bedroom ID required"}


def test_reservation_check_endpoint_rejects_invalid_level(tmp_path):
    client, _ = _build_client(tmp_path, "availability_endpoint_invalid.db")
    response = client.post(
        "/apartments/apt-1/reservation_check",
        json={"level": "floor"},
    )
    assert response.status_code == 422
