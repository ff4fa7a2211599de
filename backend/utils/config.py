"""Environment-driven application settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_tuple(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    values = tuple(item.strip() for item in raw.split(",") if item.strip())
    return values or default


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    database_path: Path
    log_level: str
    seed_demo_data: bool
    matching_max_results: int
    matching_max_reasons: int
    matching_reason_threshold: float
    matching_highlight_threshold: int
    active_reservation_statuses: tuple[str, ...]
    synthetic_random_seed: int
    synthetic_student_count: int
    synthetic_apartment_count: int


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process; tests derive copies with `replace`."""
    return Settings(
        app_name=os.getenv("ROOMY_APP_NAME", "Roomy Matching & Availability API"),
        app_version=os.getenv("ROOMY_APP_VERSION", "1.0.0"),
        database_path=Path(
            os.getenv("ROOMY_DATABASE_PATH", str(PROJECT_ROOT / "data" / "roomy.db"))
        ),
        log_level=os.getenv("ROOMY_LOG_LEVEL", "INFO"),
        seed_demo_data=_env_bool("ROOMY_SEED_DEMO_DATA", True),
        matching_max_results=int(os.getenv("ROOMY_MATCHING_MAX_RESULTS", "20")),
        matching_max_reasons=int(os.getenv("ROOMY_MATCHING_MAX_REASONS", "3")),
        matching_reason_threshold=float(os.getenv("ROOMY_MATCHING_REASON_THRESHOLD", "4.0")),
        matching_highlight_threshold=int(os.getenv("ROOMY_MATCHING_HIGHLIGHT_THRESHOLD", "85")),
        active_reservation_statuses=_env_tuple(
            "ROOMY_ACTIVE_RESERVATION_STATUSES",
            ("active", "confirmed", "pending"),
        ),
        synthetic_random_seed=int(os.getenv("ROOMY_SYNTHETIC_RANDOM_SEED", "42")),
        synthetic_student_count=int(os.getenv("ROOMY_SYNTHETIC_STUDENT_COUNT", "30")),
        synthetic_apartment_count=int(os.getenv("ROOMY_SYNTHETIC_APARTMENT_COUNT", "4")),
    )
