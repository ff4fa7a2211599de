"""Tests for weighted questionnaire scoring and match reasons."""

from __future__ import annotations

import random

import pytest

from backend.domain.constraints import MatchingConfig
from backend.domain.models import CompatibilityScores
from backend.services.compatibility_service import (
    compute_compatibility,
    generate_match_reasons,
    score_label,
)


def _full_responses(seed: int, include_advanced: bool = True) -> dict[int, int]:
    rng = random.Random(seed)
    last_id = 35 if include_advanced else 25
    return {question_id: rng.randint(1, 5) for question_id in range(1, last_id + 1)}


def _uniform(value: int, last_id: int = 35) -> dict[int, int]:
    return {question_id: value for question_id in range(1, last_id + 1)}


def _all_scores(scores: CompatibilityScores) -> list[int]:
    values = [
        scores.overall_score,
        scores.lifestyle_score,
        scores.study_score,
        scores.personality_score,
        scores.similarity_score,
    ]
    if scores.advanced_score is not None:
        values.append(scores.advanced_score)
    return values


# --- compute_compatibility ---

def test_identical_cleanliness_answers_have_zero_distance() -> None:
    responses = {1: 5, 2: 5, 3: 5}
    scores = compute_compatibility(responses, dict(responses))
    assert scores.lifestyle_score == 100
    assert scores.overall_score == 100


def test_weighted_distance_example() -> None:
    # item 2 differs by half the scale: 0.5 * 1.5 out of a total weight of 3.0
    scores = compute_compatibility({1: 5, 2: 5}, {1: 5, 2: 3})
    assert scores.overall_score == 75
    assert scores.lifestyle_score == 75
    assert scores.study_score == 0
    assert scores.personality_score == 0
    assert scores.similarity_score == 0


def test_opposite_answers_score_zero() -> None:
    scores = compute_compatibility(_uniform(1, 25), _uniform(5, 25))
    assert _all_scores(scores) == [0, 0, 0, 0, 0]


def test_self_match_scores_100() -> None:
    responses = _full_responses(7)
    scores = compute_compatibility(responses, responses, True)
    assert scores.overall_score == 100
    assert scores.advanced_score == 100


def test_no_overlapping_answers_scores_zero() -> None:
    scores = compute_compatibility({1: 5, 4: 2, 11: 3}, {2: 5, 15: 1, 23: 4}, True)
    assert scores.overall_score == 0
    assert _all_scores(scores) == [0, 0, 0, 0, 0]
    assert scores.advanced_score is None


def test_empty_maps_score_zero() -> None:
    scores = compute_compatibility({}, {})
    assert scores.overall_score == 0


def test_advanced_score_is_none_unless_requested() -> None:
    first = _full_responses(1)
    second = _full_responses(2)
    assert compute_compatibility(first, second, False).advanced_score is None
    assert compute_compatibility(first, second, True).advanced_score is not None


def test_advanced_score_is_none_without_mutual_advanced_answers() -> None:
    first = _full_responses(1, include_advanced=False)
    second = _full_responses(2)
    assert compute_compatibility(first, second, True).advanced_score is None


def test_advanced_items_ignored_when_not_included() -> None:
    base = _uniform(3, 25)
    first = {**base, 26: 1}
    second = {**base, 26: 5}
    assert compute_compatibility(first, second, False).overall_score == 100
    assert compute_compatibility(first, second, True).overall_score < 100


def test_unknown_question_ids_are_ignored() -> None:
    scores = compute_compatibility({1: 5, 99: 1}, {1: 5, 99: 5})
    assert scores.overall_score == 100


@pytest.mark.parametrize("seed", range(10))
def test_scores_are_bounded(seed: int) -> None:
    rng = random.Random(seed)
    first = {question_id: rng.randint(1, 5) for question_id in range(1, 36) if rng.random() < 0.8}
    second = {question_id: rng.randint(1, 5) for question_id in range(1, 36) if rng.random() < 0.8}
    scores = compute_compatibility(first, second, True)
    for value in _all_scores(scores):
        assert 0 <= value <= 100


@pytest.mark.parametrize("seed", range(10))
@pytest.mark.parametrize("include_advanced", [False, True])
def test_scoring_is_symmetric(seed: int, include_advanced: bool) -> None:
    first = _full_responses(seed)
    second = _full_responses(seed + 100)
    forward = compute_compatibility(first, second, include_advanced)
    backward = compute_compatibility(second, first, include_advanced)
    assert forward.overall_score == backward.overall_score
    assert forward == backward


def test_scoring_is_deterministic() -> None:
    first = _full_responses(3)
    second = _full_responses(4)
    results = {compute_compatibility(first, second, True) for _ in range(5)}
    assert len(results) == 1


# --- generate_match_reasons ---

def test_identical_profiles_keep_insertion_order_for_equal_scores() -> None:
    responses = _uniform(3)
    scores = compute_compatibility(responses, responses)
    reasons = generate_match_reasons(scores, responses, responses)
    assert reasons == [
        "Similar cleanliness standards",
        "Compatible noise preferences",
        "Similar sleep schedules",
    ]


def test_reasons_are_sorted_by_score() -> None:
    first = {1: 5, 2: 5, 3: 5, 4: 5, 5: 5}
    second = {1: 4, 2: 4, 3: 4, 4: 5, 5: 5}
    scores = compute_compatibility(first, second)
    assert scores.lifestyle_score == 85
    reasons = generate_match_reasons(scores, first, second)
    assert reasons == [
        "Compatible noise preferences",
        "Excellent lifestyle compatibility",
        "Similar cleanliness standards",
    ]


def test_incomplete_group_yields_no_group_reason() -> None:
    first = {1: 5, 2: 5}
    second = {1: 5, 2: 5}
    scores = compute_compatibility(first, second)
    reasons = generate_match_reasons(scores, first, second)
    assert reasons == ["Excellent lifestyle compatibility"]


def test_conflict_style_within_one_point() -> None:
    scores = compute_compatibility({18: 3}, {18: 4})
    assert scores.personality_score == 75
    assert generate_match_reasons(scores, {18: 3}, {18: 4}) == [
        "Similar conflict resolution styles"
    ]
    far_scores = compute_compatibility({18: 1}, {18: 4})
    assert generate_match_reasons(far_scores, {18: 1}, {18: 4}) == []


def test_group_below_threshold_is_skipped() -> None:
    first = {4: 5, 5: 5}
    second = {4: 4, 5: 3}
    scores = compute_compatibility(first, second)
    reasons = generate_match_reasons(scores, first, second)
    assert "Compatible noise preferences" not in reasons


def test_personality_highlight() -> None:
    first = {question_id: 4 for question_id in range(15, 23)}
    second = dict(first)
    second[18] = 1
    scores = compute_compatibility(first, second)
    assert scores.personality_score >= 85
    reasons = generate_match_reasons(scores, first, second)
    assert reasons == ["Strong personality match"]


def test_reason_count_follows_config() -> None:
    responses = _uniform(3)
    scores = compute_compatibility(responses, responses)
    reasons = generate_match_reasons(
        scores,
        responses,
        responses,
        MatchingConfig(max_reasons=10),
    )
    assert len(reasons) == 8


@pytest.mark.parametrize(
    "score,label",
    [(100, "Excellent Match"), (85, "Excellent Match"), (84, "Great Match"), (70, "Great Match"),
     (69, "Good Match"), (55, "Good Match"), (54, "Moderate Match"), (0, "Moderate Match")],
)
def test_score_label_tiers(score: int, label: str) -> None:
    assert score_label(score) == label
