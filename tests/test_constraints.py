"""Tests for matching configuration and reservation status validation."""

from __future__ import annotations

import pytest

from backend.domain.constraints import (
    MatchingConfig,
    is_valid_response,
    validate_matching_config,
    validate_reservation_statuses,
)


def valid_config(**overrides) -> MatchingConfig:
    """Return a valid baseline MatchingConfig, optionally overriding fields."""
    defaults = {
        "max_matches": 20,
        "max_reasons": 3,
        "reason_threshold": 4.0,
        "highlight_threshold": 85,
    }
    defaults.update(overrides)
    return MatchingConfig(**defaults)


def test_valid_config_passes() -> None:
    validate_matching_config(valid_config())


def test_default_config_matches_documented_limits() -> None:
    config = MatchingConfig()
    assert config.max_matches == 20
    assert config.max_reasons == 3
    assert config.reason_threshold == 4.0
    assert config.highlight_threshold == 85


# --- max_matches / max_reasons ---

def test_max_matches_zero_raises() -> None:
    with pytest.raises(ValueError):
        validate_matching_config(valid_config(max_matches=0))


def test_max_reasons_negative_raises() -> None:
    with pytest.raises(ValueError):
        validate_matching_config(valid_config(max_reasons=-1))


# --- thresholds ---

def test_reason_threshold_above_scale_raises() -> None:
    with pytest.raises(ValueError):
        validate_matching_config(valid_config(reason_threshold=5.5))


def test_highlight_threshold_above_hundred_raises() -> None:
    with pytest.raises(ValueError):
        validate_matching_config(valid_config(highlight_threshold=101))


def test_threshold_boundaries_pass() -> None:
    validate_matching_config(valid_config(reason_threshold=0.0, highlight_threshold=0))
    validate_matching_config(valid_config(reason_threshold=5.0, highlight_threshold=100))


# --- responses & statuses ---

@pytest.mark.parametrize("value,expected", [(0, False), (1, True), (3, True), (5, True), (6, False)])
def test_is_valid_response_uses_likert_bounds(value: int, expected: bool) -> None:
    assert is_valid_response(value) is expected


def test_empty_reservation_statuses_raise() -> None:
    with pytest.raises(ValueError):
        validate_reservation_statuses(frozenset())


def test_blank_reservation_status_raises() -> None:
    with pytest.raises(ValueError):
        validate_reservation_statuses(frozenset({"active", "  "}))
