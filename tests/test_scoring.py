"""Tests for weighted aggregation, grading and narrative derivation."""

from __future__ import annotations

import math

import pytest

from repohealth.models import CATEGORY_LABELS, CATEGORY_ORDER, CategoryKey, CategoryResult, LetterGrade, Signal
from repohealth.scoring import (
    DEFAULT_WEIGHTS,
    compute_grade,
    compute_overall_score,
    generate_next_steps,
    generate_risks,
    generate_strengths,
    isoformat_utc,
    validate_weights,
)


def _category(key, score, found=(), missing=(), weight=None):
    signals = [Signal(name, True) for name in found] + [Signal(name, False) for name in missing]
    return CategoryResult(
        key=key,
        label=CATEGORY_LABELS[key],
        score=score,
        weight=DEFAULT_WEIGHTS[key] if weight is None else weight,
        signals=signals,
    )


def test_default_weights_sum_to_one() -> None:
    assert math.isclose(sum(DEFAULT_WEIGHTS.values()), 1.0, abs_tol=1e-5)
    assert list(DEFAULT_WEIGHTS) == list(CATEGORY_ORDER)


@pytest.mark.parametrize(
    ("score", "grade"),
    [
        (100, LetterGrade.A),
        (85, LetterGrade.A),
        (84, LetterGrade.B),
        (70, LetterGrade.B),
        (69, LetterGrade.C),
        (55, LetterGrade.C),
        (54, LetterGrade.D),
        (40, LetterGrade.D),
        (39, LetterGrade.F),
        (0, LetterGrade.F),
    ],
)
def test_grade_boundaries(score, grade) -> None:
    assert compute_grade(score) is grade


def test_overall_score_rounds_half_up() -> None:
    categories = [
        _category(CategoryKey.DOCUMENTATION, 73, weight=0.5),
        _category(CategoryKey.SECURITY, 72, weight=0.5),
    ]

    assert compute_overall_score(categories) == 73


def test_overall_score_uses_default_weights() -> None:
    categories = [_category(key, 0) for key in CATEGORY_ORDER]
    categories[1] = _category(CategoryKey.SECURITY, 10)

    # 10 * 0.15 = 1.5 rounds to 2
    assert compute_overall_score(categories) == 2


def test_overall_score_without_weight_is_zero() -> None:
    assert compute_overall_score([]) == 0
    assert compute_overall_score([_category(CategoryKey.LICENSE, 90, weight=0.0)]) == 0


def test_strengths_require_score_and_found_signals() -> None:
    categories = [
        _category(CategoryKey.DOCUMENTATION, 80, found=["README exists", "CHANGELOG", "docs/ directory"]),
        _category(CategoryKey.SECURITY, 79, found=["SECURITY.md"]),
        _category(CategoryKey.CICD, 100),
    ]

    assert generate_strengths(categories) == ["Strong documentation: README exists, CHANGELOG"]


def test_risks_list_first_two_missing_signals() -> None:
    categories = [
        _category(CategoryKey.CICD, 39, missing=["Dockerfile", "Makefile", "Docker Compose"]),
        _category(CategoryKey.LICENSE, 40, missing=["Other license"]),
    ]

    assert generate_risks(categories) == ["Weak ci/cd: missing Dockerfile, Makefile"]


def test_next_steps_break_ties_by_category_order() -> None:
    categories = [
        _category(key, 20, missing=[f"{key.value} gap"]) for key in CATEGORY_ORDER
    ]

    assert generate_next_steps(categories) == [
        "Add documentation gap to improve documentation score",
        "Add security gap to improve security score",
        "Add cicd gap to improve ci/cd score",
    ]


def test_next_steps_skip_category_without_missing_signals() -> None:
    categories = [
        _category(CategoryKey.DOCUMENTATION, 10, found=["README exists"]),
        _category(CategoryKey.SECURITY, 20, missing=["SECURITY.md"]),
        _category(CategoryKey.CICD, 30, missing=["Makefile"]),
        _category(CategoryKey.LICENSE, 40, missing=["Other license"]),
    ]

    assert generate_next_steps(categories) == [
        "Add security.md to improve security score",
        "Add makefile to improve ci/cd score",
    ]


def test_validate_weights_accepts_complete_table() -> None:
    table = {key.value: value for key, value in DEFAULT_WEIGHTS.items()}

    assert validate_weights(table) == DEFAULT_WEIGHTS


@pytest.mark.parametrize(
    "change",
    [
        {"bogus": 0.0},
        {"license": "high"},
        {"license": -0.1, "community": 0.3},
        {"license": 0.5},
    ],
)
def test_validate_weights_rejects_invalid_tables(change) -> None:
    table = {key.value: value for key, value in DEFAULT_WEIGHTS.items()}
    table.update(change)

    with pytest.raises(ValueError):
        validate_weights(table)


def test_validate_weights_rejects_missing_category() -> None:
    table = {key.value: value for key, value in DEFAULT_WEIGHTS.items()}
    del table["community"]

    with pytest.raises(ValueError, match="missing categories: community"):
        validate_weights(table)


def test_isoformat_utc_has_millisecond_precision(frozen_now) -> None:
    assert isoformat_utc(frozen_now) == "2024-05-01T12:00:00.000Z"
