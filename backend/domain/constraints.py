"""Domain-level validation rules for matching and reservation inputs."""

from __future__ import annotations

from dataclasses import dataclass


LIKERT_MIN = 1
LIKERT_MAX = 5

RESERVATION_LEVELS = ("apartment", "bedroom", "bed")
DEFAULT_ACTIVE_RESERVATION_STATUSES = frozenset({"active", "confirmed", "pending"})


@dataclass(frozen=True)
class MatchingConfig:
    max_matches: int = 20
    max_reasons: int = 3
    reason_threshold: float = 4.0
    highlight_threshold: int = 85


def validate_matching_config(config: MatchingConfig) -> None:
    if config.max_matches <= 0:
        raise ValueError("max_matches must be > 0")
    if config.max_reasons <= 0:
        raise ValueError("max_reasons must be > 0")
    if not 0.0 <= config.reason_threshold <= float(LIKERT_MAX):
        raise ValueError("reason_threshold must be between 0 and 5")
    if not 0 <= config.highlight_threshold <= 100:
        raise ValueError("highlight_threshold must be between 0 and 100")


def is_valid_response(value: int) -> bool:
    return LIKERT_MIN <= value <= LIKERT_MAX


def validate_reservation_statuses(statuses: frozenset[str]) -> None:
    if not statuses:
        raise ValueError("active reservation statuses must not be empty")
    for status in statuses:
        if not status.strip():
            raise ValueError("active reservation statuses must be non-empty strings")
