from __future__ import annotations

from dataclasses import replace

from fastapi.testclient import TestClient

from app import create_app
from backend.utils.config import get_settings


def test_startup_seeds_demo_data_and_serves_both_engines(tmp_path):
    settings = replace(get_settings(), database_path=tmp_path / "startup.db")
    app = create_app(settings)

    with TestClient(app) as client:
        assert app.state.repository.count_students() == settings.synthetic_student_count

        matches = client.get("/students/student-001/matches")
        assert matches.status_code == 200
        for match in matches.json()["matches"]:
            assert 0 <= match["scores"]["overall_score"] <= 100

        availability = client.get("/apartments/availability")
        assert availability.status_code == 200
        assert len(availability.json()["apartments"]) == settings.synthetic_apartment_count


def test_startup_without_seed(tmp_path):
    settings = replace(
        get_settings(),
        database_path=tmp_path / "startup_empty.db",
        seed_demo_data=False,
    )
    app = create_app(settings)

    with TestClient(app) as client:
        assert app.state.repository.count_students() == 0
        assert client.get("/apartments/availability").json() == {"apartments": []}
