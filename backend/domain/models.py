"""Domain models for roommate compatibility matching and apartment availability."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping, Optional


QuestionCategory = Literal["lifestyle", "study_work", "personality", "similarity", "advanced"]
ReservationLevel = Literal["apartment", "bedroom", "bed"]

# Questionnaire item id -> Likert response in [1, 5]. Partial maps are allowed.
ResponseMap = Mapping[int, int]


@dataclass(frozen=True)
class QuestionnaireItem:
    id: int
    text: str
    category: QuestionCategory
    subcategory: str
    weight: float
    is_advanced: bool
    display_order: int


@dataclass(frozen=True)
class CompatibilityScores:
    overall_score: int
    lifestyle_score: int
    study_score: int
    personality_score: int
    similarity_score: int
    advanced_score: Optional[int]


@dataclass(frozen=True)
class StudentProfile:
    user_id: str
    full_name: str
    age: Optional[int] = None
    university: Optional[str] = None
    major: Optional[str] = None
    gender: Optional[str] = None
    profile_photo_url: Optional[str] = None
    compatibility_test_completed: bool = False
    advanced_compatibility_enabled: bool = False
    needs_roommate_current_place: bool = False
    needs_roommate_new_dorm: bool = False
    accommodation_status: Optional[str] = None

    @property
    def needs_roommate(self) -> bool:
        return self.needs_roommate_current_place or self.needs_roommate_new_dorm


@dataclass(frozen=True)
class MatchCandidate:
    user_id: str
    full_name: str
    age: Optional[int]
    university: Optional[str]
    major: Optional[str]
    gender: Optional[str]
    profile_photo_url: Optional[str]
    scores: CompatibilityScores
    match_reasons: tuple[str, ...]


@dataclass(frozen=True)
class Bed:
    id: str
    label: str = ""
    available: bool = True


@dataclass(frozen=True)
class Bedroom:
    id: str
    name: str = ""
    beds: tuple[Bed, ...] = ()


@dataclass(frozen=True)
class ApartmentConfig:
    id: str
    enable_full_apartment_reservation: bool
    enable_bedroom_reservation: bool
    enable_bed_reservation: bool
    bedrooms: tuple[Bedroom, ...] = ()
    name: str = ""


@dataclass(frozen=True)
class Reservation:
    id: str
    reservation_level: ReservationLevel
    status: str
    apartment_id: Optional[str] = None
    bedroom_id: Optional[str] = None
    bed_id: Optional[str] = None


@dataclass(frozen=True)
class AvailabilityState:
    can_reserve_full_apartment: bool
    can_reserve_bedroom: dict[str, bool] = field(default_factory=dict)
    can_reserve_bed: dict[str, bool] = field(default_factory=dict)
    apartment_reservable: bool = False
    bedroom_reservable: bool = False
    bed_reservable: bool = False
    available_bedrooms_count: int = 0
    available_beds_count: int = 0
    total_bedrooms_count: int = 0
    total_beds_count: int = 0
    is_apartment_locked: bool = False
    has_reserved_beds: bool = False
    has_reserved_bedrooms: bool = False
    reason: Optional[str] = None


@dataclass(frozen=True)
class ReservationCheck:
    allowed: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class AvailabilitySummary:
    is_fully_booked: bool
    is_fully_available: bool
    is_partially_available: bool
    status_text: str


@dataclass(frozen=True)
class AvailabilityCounts:
    available_bedrooms: int
    available_beds: int
    total_bedrooms: int
    total_beds: int
