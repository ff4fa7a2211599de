"""Fixed roommate compatibility questionnaire.

Thirty-five Likert items (1 = strongly disagree, 5 = strongly agree) grouped
into four base sections plus an opt-in advanced section. Weights express how
strongly a disagreement on the item should pull the compatibility score down.
"""

from __future__ import annotations

from typing import Optional

from backend.domain.models import QuestionCategory, QuestionnaireItem


CATEGORIES: tuple[QuestionCategory, ...] = (
    "lifestyle",
    "study_work",
    "personality",
    "similarity",
    "advanced",
)


def _item(
    question_id: int,
    text: str,
    category: QuestionCategory,
    subcategory: str,
    weight: float,
) -> QuestionnaireItem:
    return QuestionnaireItem(
        id=question_id,
        text=text,
        category=category,
        subcategory=subcategory,
        weight=weight,
        is_advanced=category == "advanced",
        display_order=question_id,
    )


COMPATIBILITY_QUESTIONS: tuple[QuestionnaireItem, ...] = (
    # Section A: lifestyle
    _item(1, "I am generally a clean and organized person", "lifestyle", "cleanliness", 1.5),
    _item(2, "I wash dishes and clean shared areas without reminders", "lifestyle", "cleanliness", 1.5),
    _item(3, "I don't mind if my roommate is less clean than me", "lifestyle", "cleanliness", 1.3),
    _item(4, "I prefer a quiet environment most of the time", "lifestyle", "noise", 1.4),
    _item(5, "I am okay with noise (music, calls, etc.) during the day", "lifestyle", "noise", 1.3),
    _item(6, "I wake up early (before 9 AM)", "lifestyle", "schedule", 1.2),
    _item(7, "I stay up late (after 12 AM)", "lifestyle", "schedule", 1.2),
    _item(8, "I prefer hosting guests frequently", "lifestyle", "social", 1.1),
    _item(9, "I am comfortable if my roommate has guests", "lifestyle", "social", 1.1),
    _item(10, "I am comfortable sharing my belongings", "lifestyle", "sharing", 1.0),
    # Section B: study & work style
    _item(11, "I study or work from my room regularly", "study_work", "work_habits", 1.2),
    _item(12, "I need silence when studying/working", "study_work", "environment", 1.3),
    _item(13, "I don't mind different study schedules", "study_work", "flexibility", 1.1),
    _item(14, "I am okay with remote-class/call activity in the room", "study_work", "environment", 1.2),
    # Section C: personality traits
    _item(15, "I consider myself an extrovert", "personality", "extraversion", 1.0),
    _item(16, "I enjoy spending time alone", "personality", "introversion", 1.0),
    _item(17, "I get stressed/anxious easily", "personality", "neuroticism", 1.2),
    _item(18, "I handle conflicts calmly", "personality", "agreeableness", 1.3),
    _item(19, "I am open to new experiences", "personality", "openness", 1.0),
    _item(20, "I prefer a structured routine", "personality", "conscientiousness", 1.1),
    _item(21, "I adapt easily to changes", "personality", "flexibility", 1.1),
    _item(22, "I avoid drama and confrontations", "personality", "agreeableness", 1.3),
    # Section D: roommate similarity preference
    _item(23, "I prefer a roommate who is similar to me", "similarity", "preference", 1.4),
    _item(24, "I am okay living with someone who is different", "similarity", "tolerance", 1.2),
    _item(25, "I would like a sociable/friendly roommate", "similarity", "social", 1.3),
    # Advanced (opt-in on both sides)
    _item(26, "I smoke / I am okay with a roommate who smokes", "advanced", "substance", 1.5),
    _item(27, "I drink alcohol / I am okay with a roommate who drinks", "advanced", "substance", 1.3),
    _item(28, "I am comfortable with roommates of different religions/cultures", "advanced", "diversity", 1.0),
    _item(29, "I am okay with roommates' overnight guests", "advanced", "privacy", 1.2),
    _item(30, "I am okay sharing food and groceries", "advanced", "sharing", 1.0),
    _item(31, "I prefer warm rooms (AC/heater usage preference)", "advanced", "temperature", 0.8),
    _item(32, "I am comfortable living around pets", "advanced", "pets", 1.0),
    _item(33, "I am sensitive to scents (perfume, incense, etc.)", "advanced", "environment", 0.9),
    _item(34, "I prefer the room temperature to be cold", "advanced", "temperature", 0.8),
    _item(35, "I prefer the lights off at night", "advanced", "sleep", 1.0),
)

CATEGORY_LABELS: dict[QuestionCategory, str] = {
    "lifestyle": "Lifestyle Compatibility",
    "study_work": "Study & Work Style",
    "personality": "Personality Traits",
    "similarity": "Roommate Similarity Preference",
    "advanced": "Advanced Compatibility",
}

CATEGORY_DESCRIPTIONS: dict[QuestionCategory, str] = {
    "lifestyle": "How you live day-to-day - cleanliness, noise, schedule, and social habits",
    "study_work": "Your study and work environment preferences",
    "personality": "Core personality traits that affect how you interact with others",
    "similarity": "Whether you prefer similar or different roommates",
    "advanced": "Additional lifestyle factors for more detailed matching",
}

_QUESTIONS_BY_ID = {question.id: question for question in COMPATIBILITY_QUESTIONS}


def get_question(question_id: int) -> Optional[QuestionnaireItem]:
    return _QUESTIONS_BY_ID.get(question_id)


def questions_for_comparison(include_advanced: bool) -> tuple[QuestionnaireItem, ...]:
    """Return the item set that participates in a pairwise comparison."""
    if include_advanced:
        return COMPATIBILITY_QUESTIONS
    return tuple(question for question in COMPATIBILITY_QUESTIONS if not question.is_advanced)


def questions_by_category() -> dict[QuestionCategory, list[QuestionnaireItem]]:
    grouped: dict[QuestionCategory, list[QuestionnaireItem]] = {
        category: [] for category in CATEGORIES
    }
    for question in COMPATIBILITY_QUESTIONS:
        if question.is_advanced:
            grouped["advanced"].append(question)
        else:
            grouped[question.category].append(question)
    return grouped
