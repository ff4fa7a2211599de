#!/usr/bin/env python3
"""Validate local Roomy service environment readiness."""

from __future__ import annotations

import importlib
import shutil
import sys
import tempfile
from dataclasses import replace
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.repository.data_repository import DataRepository
from backend.services.availability_service import ApartmentAvailabilityService
from backend.services.compatibility_service import CompatibilityMatchingService
from backend.utils.config import get_settings

SEPARATOR_LINE = "=" * 44


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True
    temp_dir = tempfile.mkdtemp(prefix="roomy-env-")

    # CHECK 1: Python version >= 3.10
    if sys.version_info >= (3, 10):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.10",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2: Required packages importable
    package_specs = [
        ("fastapi", "fastapi"),
        ("uvicorn", "uvicorn"),
        ("pydantic", "pydantic"),
        ("httpx", "httpx"),
        ("pytest", "pytest"),
    ]
    import_errors: list[str] = []
    for module_name, dist_name in package_specs:
        try:
            importlib.import_module(module_name)
            version(dist_name)
        except (ImportError, PackageNotFoundError) as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    try:
        validation_settings = replace(
            get_settings(),
            database_path=Path(temp_dir) / "roomy_validation.db",
        )
        repository = DataRepository(validation_settings)

        # CHECK 3: Database initialization
        try:
            repository.initialize_database()
            ok, line = _print_result("Database initialization", True)
        except Exception as exc:
            ok, line = _print_result("Database initialization", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 4: Synthetic data seeding
        try:
            repository.seed_synthetic_data()
            seeded = repository.count_students()
            expected = validation_settings.synthetic_student_count
            if seeded != expected:
                raise RuntimeError(f"expected {expected} students, got {seeded}")
            ok, line = _print_result("Synthetic dataset", True, f": {seeded} students")
        except Exception as exc:
            ok, line = _print_result("Synthetic dataset", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 5: Roommate matching
        try:
            matching_service = CompatibilityMatchingService(
                repository=repository,
                settings=validation_settings,
            )
            matches = matching_service.find_matches("student-001")
            for match in matches:
                if not 0 <= match.scores.overall_score <= 100:
                    raise RuntimeError("overall score out of [0,100] bounds")
            ok, line = _print_result("Roommate matching", True, f": {len(matches)} matches")
        except Exception as exc:
            ok, line = _print_result("Roommate matching", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 6: Apartment availability
        try:
            availability_service = ApartmentAvailabilityService(
                repository=repository,
                settings=validation_settings,
            )
            summaries = availability_service.list_availability()
            if len(summaries) != validation_settings.synthetic_apartment_count:
                raise RuntimeError(f"expected availability for every apartment, got {len(summaries)}")
            ok, line = _print_result(
                "Apartment availability",
                True,
                f": {len(summaries)} apartments",
            )
        except Exception as exc:
            ok, line = _print_result("Apartment availability", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    print(SEPARATOR_LINE)
    print(" Roomy Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
