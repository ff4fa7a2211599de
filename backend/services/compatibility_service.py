"""Weighted questionnaire compatibility scoring and roommate match ranking."""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Optional, Sequence

from backend.domain.constraints import MatchingConfig, is_valid_response, validate_matching_config
from backend.domain.models import (
    CompatibilityScores,
    MatchCandidate,
    QuestionCategory,
    ResponseMap,
    StudentProfile,
)
from backend.domain.questionnaire import get_question, questions_for_comparison
from backend.repository.data_repository import DataRepository
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


class MatchingValidationError(Exception):
    """Raised when questionnaire responses are malformed."""


class StudentNotFoundError(Exception):
    """Raised when a student profile does not exist."""


# (question ids, reason text); a group only counts when both sides answered all of it.
REASON_GROUPS: tuple[tuple[tuple[int, ...], str], ...] = (
    ((1, 2, 3), "Similar cleanliness standards"),
    ((4, 5), "Compatible noise preferences"),
    ((6, 7), "Similar sleep schedules"),
    ((8, 9), "Similar social habits"),
    ((11, 12), "Compatible study environments"),
)
CONFLICT_QUESTION_ID = 18
CONFLICT_REASON = "Similar conflict resolution styles"
LIFESTYLE_REASON = "Excellent lifestyle compatibility"
PERSONALITY_REASON = "Strong personality match"

NEEDS_DORM_STATUS = "need_dorm"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _normalize(response: int) -> float:
    return (response - 1) / 4


def _category_score(weighted_distance: float, weight: float) -> int:
    if weight == 0:
        return 0
    return _round_half_up((1 - weighted_distance / weight) * 100)


def compute_compatibility(
    responses_a: ResponseMap,
    responses_b: ResponseMap,
    include_advanced: bool = False,
) -> CompatibilityScores:
    """Score two respondents on the shared questionnaire items.

    Each mutually answered item contributes its normalized absolute distance
    times its weight. Scores are ``round((1 - distance / weight) * 100)``
    overall and per category. No mutually answered item yields 0, not an
    "unknown" score.
    """
    category_distance: dict[QuestionCategory, float] = defaultdict(float)
    category_weight: dict[QuestionCategory, float] = defaultdict(float)
    total_distance = 0.0
    total_weight = 0.0

    for question in questions_for_comparison(include_advanced):
        first = responses_a.get(question.id)
        second = responses_b.get(question.id)
        if first is None or second is None:
            continue

        weighted_distance = abs(_normalize(first) - _normalize(second)) * question.weight
        category_distance[question.category] += weighted_distance
        category_weight[question.category] += question.weight
        total_distance += weighted_distance
        total_weight += question.weight

    advanced_score: Optional[int] = None
    if include_advanced and category_weight["advanced"] > 0:
        advanced_score = _category_score(category_distance["advanced"], category_weight["advanced"])

    return CompatibilityScores(
        overall_score=_category_score(total_distance, total_weight),
        lifestyle_score=_category_score(category_distance["lifestyle"], category_weight["lifestyle"]),
        study_score=_category_score(category_distance["study_work"], category_weight["study_work"]),
        personality_score=_category_score(
            category_distance["personality"], category_weight["personality"]
        ),
        similarity_score=_category_score(
            category_distance["similarity"], category_weight["similarity"]
        ),
        advanced_score=advanced_score,
    )


def _group_closeness(
    question_ids: Sequence[int],
    responses_a: ResponseMap,
    responses_b: ResponseMap,
) -> Optional[float]:
    closeness: list[int] = []
    for question_id in question_ids:
        first = responses_a.get(question_id)
        second = responses_b.get(question_id)
        if first is None or second is None:
            return None
        closeness.append(5 - abs(first - second))
    return sum(closeness) / len(closeness)


def generate_match_reasons(
    scores: CompatibilityScores,
    responses_a: ResponseMap,
    responses_b: ResponseMap,
    config: Optional[MatchingConfig] = None,
) -> list[str]:
    """Return up to ``max_reasons`` human-readable reasons, strongest first."""
    config = config or MatchingConfig()
    candidates: list[tuple[str, float]] = []

    for question_ids, text in REASON_GROUPS:
        closeness = _group_closeness(question_ids, responses_a, responses_b)
        if closeness is not None and closeness >= config.reason_threshold:
            candidates.append((text, closeness))

    first_conflict = responses_a.get(CONFLICT_QUESTION_ID)
    second_conflict = responses_b.get(CONFLICT_QUESTION_ID)
    if (
        first_conflict is not None
        and second_conflict is not None
        and abs(first_conflict - second_conflict) <= 1
    ):
        candidates.append((CONFLICT_REASON, 5.0))

    if scores.lifestyle_score >= config.highlight_threshold:
        candidates.append((LIFESTYLE_REASON, scores.lifestyle_score / 20))
    if scores.personality_score >= config.highlight_threshold:
        candidates.append((PERSONALITY_REASON, scores.personality_score / 20))

    # sorted() is stable, so equal scores keep insertion order.
    ranked = sorted(candidates, key=lambda item: item[1], reverse=True)
    return [text for text, _ in ranked[: config.max_reasons]]


def score_label(score: int) -> str:
    if score >= 85:
        return "Excellent Match"
    if score >= 70:
        return "Great Match"
    if score >= 55:
        return "Good Match"
    return "Moderate Match"


def is_eligible_candidate(current: StudentProfile, candidate: StudentProfile) -> bool:
    """Apply the roommate-intent filter between the current user and a candidate."""
    if candidate.user_id == current.user_id:
        return False
    if not candidate.compatibility_test_completed:
        return False
    if current.needs_roommate_current_place:
        return (
            candidate.needs_roommate_current_place
            or candidate.accommodation_status == NEEDS_DORM_STATUS
        )
    if current.needs_roommate_new_dorm:
        return candidate.needs_roommate_new_dorm
    return False


def rank_matches(
    current: StudentProfile,
    current_responses: ResponseMap,
    candidates: Sequence[StudentProfile],
    responses_by_user: dict[str, dict[int, int]],
    config: Optional[MatchingConfig] = None,
) -> list[MatchCandidate]:
    """Score every candidate with recorded responses and keep the best ones."""
    config = config or MatchingConfig()
    scored: list[MatchCandidate] = []

    for candidate in candidates:
        candidate_responses = responses_by_user.get(candidate.user_id)
        if not candidate_responses:
            continue
        include_advanced = (
            current.advanced_compatibility_enabled
            and candidate.advanced_compatibility_enabled
        )
        scores = compute_compatibility(current_responses, candidate_responses, include_advanced)
        reasons = generate_match_reasons(scores, current_responses, candidate_responses, config)
        scored.append(
            MatchCandidate(
                user_id=candidate.user_id,
                full_name=candidate.full_name,
                age=candidate.age,
                university=candidate.university,
                major=candidate.major,
                gender=candidate.gender,
                profile_photo_url=candidate.profile_photo_url,
                scores=scores,
                match_reasons=tuple(reasons),
            )
        )

    scored.sort(key=lambda match: match.scores.overall_score, reverse=True)
    return scored[: config.max_matches]


def _validate_responses(responses: ResponseMap, field_name: str) -> None:
    for question_id, value in responses.items():
        if get_question(question_id) is None:
            raise MatchingValidationError(f"{field_name} references unknown question {question_id}")
        if not is_valid_response(value):
            raise MatchingValidationError(
                f"{field_name} value for question {question_id} must be between 1 and 5"
            )


class CompatibilityMatchingService:
    """Loads profiles and responses, then runs the pure scoring engine."""

    def __init__(
        self,
        repository: Optional[DataRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or DataRepository(self._settings)
        self._config = MatchingConfig(
            max_matches=self._settings.matching_max_results,
            max_reasons=self._settings.matching_max_reasons,
            reason_threshold=self._settings.matching_reason_threshold,
            highlight_threshold=self._settings.matching_highlight_threshold,
        )
        validate_matching_config(self._config)

    @property
    def config(self) -> MatchingConfig:
        return self._config

    def score_responses(
        self,
        *,
        responses_a: ResponseMap,
        responses_b: ResponseMap,
        include_advanced: bool = False,
    ) -> tuple[CompatibilityScores, list[str]]:
        _validate_responses(responses_a, "responses_a")
        _validate_responses(responses_b, "responses_b")
        scores = compute_compatibility(responses_a, responses_b, include_advanced)
        reasons = generate_match_reasons(scores, responses_a, responses_b, self._config)
        return scores, reasons

    def _require_student(self, user_id: str) -> StudentProfile:
        profile = self._repository.get_student(user_id)
        if profile is None:
            raise StudentNotFoundError(f"Student {user_id} was not found")
        return profile

    def find_matches(self, user_id: str) -> list[MatchCandidate]:
        current = self._require_student(user_id)
        if not current.compatibility_test_completed:
            logger.info("Matching skipped | user_id=%s | reason=questionnaire_incomplete", user_id)
            return []
        if not current.needs_roommate:
            logger.info("Matching skipped | user_id=%s | reason=no_roommate_intent", user_id)
            return []

        current_responses = self._repository.get_responses(user_id)
        candidates = [
            candidate
            for candidate in self._repository.list_students(completed_only=True)
            if is_eligible_candidate(current, candidate)
        ]
        responses_by_user = self._repository.get_responses_for_users(
            [candidate.user_id for candidate in candidates]
        )
        matches = rank_matches(
            current,
            current_responses,
            candidates,
            responses_by_user,
            self._config,
        )
        logger.info(
            "Matching completed | user_id=%s | candidates=%s | matches=%s",
            user_id,
            len(candidates),
            len(matches),
        )
        return matches

    def compare(self, user_id: str, other_user_id: str) -> tuple[CompatibilityScores, list[str]]:
        current = self._require_student(user_id)
        other = self._require_student(other_user_id)
        current_responses = self._repository.get_responses(user_id)
        other_responses = self._repository.get_responses(other_user_id)
        include_advanced = (
            current.advanced_compatibility_enabled and other.advanced_compatibility_enabled
        )
        scores = compute_compatibility(current_responses, other_responses, include_advanced)
        reasons = generate_match_reasons(scores, current_responses, other_responses, self._config)
        return scores, reasons
