from __future__ import annotations

from collections import Counter

from backend.domain.questionnaire import (
    CATEGORIES,
    CATEGORY_DESCRIPTIONS,
    CATEGORY_LABELS,
    COMPATIBILITY_QUESTIONS,
    get_question,
    questions_by_category,
    questions_for_comparison,
)


def test_catalog_has_35_dense_unique_ids() -> None:
    ids = [question.id for question in COMPATIBILITY_QUESTIONS]
    assert ids == list(range(1, 36))


def test_every_item_belongs_to_a_known_category() -> None:
    for question in COMPATIBILITY_QUESTIONS:
        assert question.category in CATEGORIES
        assert question.weight > 0
        assert question.display_order == question.id


def test_advanced_items_are_the_last_ten() -> None:
    advanced_ids = [question.id for question in COMPATIBILITY_QUESTIONS if question.is_advanced]
    assert advanced_ids == list(range(26, 36))
    assert all(get_question(question_id).category == "advanced" for question_id in advanced_ids)


def test_category_sizes() -> None:
    counts = Counter(question.category for question in COMPATIBILITY_QUESTIONS)
    assert counts == {
        "lifestyle": 10,
        "study_work": 4,
        "personality": 8,
        "similarity": 3,
        "advanced": 10,
    }


def test_questions_by_category_groups_every_item_once() -> None:
    grouped = questions_by_category()
    assert set(grouped) == set(CATEGORIES)
    flattened = [question.id for items in grouped.values() for question in items]
    assert sorted(flattened) == list(range(1, 36))


def test_questions_for_comparison_excludes_advanced_by_default() -> None:
    assert len(questions_for_comparison(False)) == 25
    assert len(questions_for_comparison(True)) == 35


def test_cleanliness_weights() -> None:
    assert [get_question(question_id).weight for question_id in (1, 2, 3)] == [1.5, 1.5, 1.3]


def test_get_question_unknown_id_returns_none() -> None:
    assert get_question(0) is None
    assert get_question(36) is None


def test_labels_and_descriptions_cover_every_category() -> None:
    assert set(CATEGORY_LABELS) == set(CATEGORIES)
    assert set(CATEGORY_DESCRIPTIONS) == set(CATEGORIES)
