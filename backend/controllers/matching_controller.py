"""HTTP controller layer for questionnaire scoring and roommate matching."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator

from backend.controllers.dependencies import get_matching_service
from backend.domain.constraints import LIKERT_MAX, LIKERT_MIN
from backend.domain.models import CompatibilityScores
from backend.domain.questionnaire import (
    CATEGORY_LABELS,
    questions_for_comparison,
)
from backend.services.compatibility_service import (
    CompatibilityMatchingService,
    MatchingValidationError,
    StudentNotFoundError,
    score_label,
)
from backend.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["matching"])


class QuestionResponse(BaseModel):
    id: int = Field(gt=0)
    text: str
    category: str
    category_label: str
    subcategory: str
    weight: float = Field(gt=0.0)
    is_advanced: bool
    display_order: int


class QuestionnaireResponse(BaseModel):
    questions: list[QuestionResponse]


class CompatibilityRequest(BaseModel):
    """Two respondents' answers keyed by questionnaire item id."""

    responses_a: dict[int, int]
    responses_b: dict[int, int]
    include_advanced: bool = False

    @field_validator("responses_a", "responses_b")
    @classmethod
    def validate_likert_values(cls, value: dict[int, int]) -> dict[int, int]:
        for question_id, response in value.items():
            if not LIKERT_MIN <= response <= LIKERT_MAX:
                raise ValueError(
                    f"response for question {question_id} must be between {LIKERT_MIN} and {LIKERT_MAX}"
                )
        return value


class CompatibilityScoresResponse(BaseModel):
    overall_score: int = Field(ge=0, le=100)
    lifestyle_score: int = Field(ge=0, le=100)
    study_score: int = Field(ge=0, le=100)
    personality_score: int = Field(ge=0, le=100)
    similarity_score: int = Field(ge=0, le=100)
    advanced_score: Optional[int] = Field(default=None, ge=0, le=100)


class CompatibilityResponse(BaseModel):
    scores: CompatibilityScoresResponse
    match_reasons: list[str]
    label: str


class MatchCandidateResponse(BaseModel):
    user_id: str
    full_name: str
    age: Optional[int] = None
    university: Optional[str] = None
    major: Optional[str] = None
    gender: Optional[str] = None
    profile_photo_url: Optional[str] = None
    scores: CompatibilityScoresResponse
    match_reasons: list[str]
    label: str


class MatchListResponse(BaseModel):
    user_id: str
    matches: list[MatchCandidateResponse]


def _scores_response(scores: CompatibilityScores) -> CompatibilityScoresResponse:
    return CompatibilityScoresResponse(
        overall_score=scores.overall_score,
        lifestyle_score=scores.lifestyle_score,
        study_score=scores.study_score,
        personality_score=scores.personality_score,
        similarity_score=scores.similarity_score,
        advanced_score=scores.advanced_score,
    )


@router.get(
    "/questions",
    response_model=QuestionnaireResponse,
    status_code=status.HTTP_200_OK,
)
async def list_questions(
    include_advanced: bool = Query(default=True),
) -> QuestionnaireResponse:
    return QuestionnaireResponse(
        questions=[
            QuestionResponse(
                id=question.id,
                text=question.text,
                category=question.category,
                category_label=CATEGORY_LABELS[question.category],
                subcategory=question.subcategory,
                weight=question.weight,
                is_advanced=question.is_advanced,
                display_order=question.display_order,
            )
            for question in questions_for_comparison(include_advanced)
        ]
    )


@router.post(
    "/compatibility",
    response_model=CompatibilityResponse,
    status_code=status.HTTP_200_OK,
)
async def score_compatibility(
    payload: CompatibilityRequest,
    service: CompatibilityMatchingService = Depends(get_matching_service),
) -> CompatibilityResponse:
    """Score two ad-hoc response maps without touching stored profiles."""
    try:
        scores, reasons = service.score_responses(
            responses_a=payload.responses_a,
            responses_b=payload.responses_b,
            include_advanced=payload.include_advanced,
        )
        return CompatibilityResponse(
            scores=_scores_response(scores),
            match_reasons=reasons,
            label=score_label(scores.overall_score),
        )
    except MatchingValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected compatibility scoring failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to score compatibility",
        ) from exc


@router.get(
    "/students/{user_id}/matches",
    response_model=MatchListResponse,
    status_code=status.HTTP_200_OK,
)
async def find_matches(
    user_id: str,
    service: CompatibilityMatchingService = Depends(get_matching_service),
) -> MatchListResponse:
    try:
        matches = service.find_matches(user_id)
        return MatchListResponse(
            user_id=user_id,
            matches=[
                MatchCandidateResponse(
                    user_id=match.user_id,
                    full_name=match.full_name,
                    age=match.age,
                    university=match.university,
                    major=match.major,
                    gender=match.gender,
                    profile_photo_url=match.profile_photo_url,
                    scores=_scores_response(match.scores),
                    match_reasons=list(match.match_reasons),
                    label=score_label(match.scores.overall_score),
                )
                for match in matches
            ],
        )
    except StudentNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected matching failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to find matches",
        ) from exc


@router.get(
    "/students/{user_id}/compare/{other_user_id}",
    response_model=CompatibilityResponse,
    status_code=status.HTTP_200_OK,
)
async def compare_students(
    user_id: str,
    other_user_id: str,
    service: CompatibilityMatchingService = Depends(get_matching_service),
) -> CompatibilityResponse:
    try:
        scores, reasons = service.compare(user_id, other_user_id)
        return CompatibilityResponse(
            scores=_scores_response(scores),
            match_reasons=reasons,
            label=score_label(scores.overall_score),
        )
    except StudentNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected comparison failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compare students",
        ) from exc
