"""Weighted aggregation, grading and narrative derivation."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from fractions import Fraction
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .models import (
    CATEGORY_LABELS,
    CATEGORY_ORDER,
    AnalysisReport,
    CategoryKey,
    CategoryResult,
    LetterGrade,
    to_plain,
)

DEFAULT_WEIGHTS: Dict[CategoryKey, float] = {
    CategoryKey.DOCUMENTATION: 0.20,
    CategoryKey.SECURITY: 0.15,
    CategoryKey.CICD: 0.15,
    CategoryKey.DEPENDENCIES: 0.15,
    CategoryKey.CODE_QUALITY: 0.15,
    CategoryKey.LICENSE: 0.10,
    CategoryKey.COMMUNITY: 0.10,
}

WEIGHT_TOLERANCE = 1e-5

# Inclusive lower bounds, checked in order.
GRADE_THRESHOLDS = (
    (85, LetterGrade.A),
    (70, LetterGrade.B),
    (55, LetterGrade.C),
    (40, LetterGrade.D),
)

STRENGTH_THRESHOLD = 80
RISK_THRESHOLD = 40
NEXT_STEP_COUNT = 3


def clamp_score(value: float) -> int:
    return max(0, min(100, int(value)))


def validate_weights(weights: Mapping[str, Any]) -> Dict[CategoryKey, float]:
    """Coerce a weight table keyed by category name and check its invariants.

    The table must name exactly the seven categories and sum to 1.0.
    """
    resolved: Dict[CategoryKey, float] = {}
    for name, value in weights.items():
        try:
            key = CategoryKey(str(name))
        except ValueError as exc:
            raise ValueError(f"Unknown category in weight table: {name}") from exc
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Weight for {key.value} must be a number")
        if value < 0:
            raise ValueError(f"Weight for {key.value} must not be negative")
        resolved[key] = float(value)

    missing = [key.value for key in CATEGORY_ORDER if key not in resolved]
    if missing:
        raise ValueError(f"Weight table is missing categories: {', '.join(missing)}")

    total = sum(resolved.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise ValueError(f"Category weights must sum to 1.0 (got {total:.6f})")

    return {key: resolved[key] for key in CATEGORY_ORDER}


def compute_overall_score(categories: Sequence[CategoryResult]) -> int:
    """Weighted mean of category scores, rounded half up.

    Uses exact rationals so that e.g. a mean of 72.5 never drifts to
    72.49999 and rounds down.
    """
    weighted_sum = Fraction(0)
    total_weight = Fraction(0)
    for category in categories:
        weight = Fraction(str(category.weight))
        weighted_sum += category.score * weight
        total_weight += weight

    if total_weight == 0:
        return 0
    return clamp_score(math.floor(weighted_sum / total_weight + Fraction(1, 2)))


def compute_grade(score: int) -> LetterGrade:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return LetterGrade.F


def generate_strengths(categories: Sequence[CategoryResult]) -> List[str]:
    strengths: List[str] = []
    for category in categories:
        if category.score < STRENGTH_THRESHOLD:
            continue
        top = [signal.name for signal in category.found_signals()[:2]]
        if top:
            strengths.append(f"Strong {category.label.lower()}: {', '.join(top)}")
    return strengths


def generate_risks(categories: Sequence[CategoryResult]) -> List[str]:
    risks: List[str] = []
    for category in categories:
        if category.score >= RISK_THRESHOLD:
            continue
        missing = [signal.name for signal in category.missing_signals()[:2]]
        if missing:
            risks.append(f"Weak {category.label.lower()}: missing {', '.join(missing)}")
    return risks


def generate_next_steps(categories: Sequence[CategoryResult]) -> List[str]:
    """One suggestion for each of the three weakest categories.

    ``sorted`` is stable, so ties keep the order the categories were given in.
    A weakest category with nothing missing is skipped, not replaced.
    """
    steps: List[str] = []
    weakest = sorted(categories, key=lambda category: category.score)[:NEXT_STEP_COUNT]
    for category in weakest:
        missing = category.missing_signals()
        if missing:
            steps.append(
                f"Add {missing[0].name.lower()} to improve {category.label.lower()} score"
            )
    return steps


# ---------------------------------------------------------------------------
# Report comparison


@dataclass
class CategoryDiff:
    key: CategoryKey
    label: str
    score_a: int
    score_b: int
    diff: int


@dataclass
class ComparisonReport:
    """Side-by-side category deltas between two analysis reports."""

    repo_a: str
    repo_b: str
    overall_a: int
    overall_b: int
    category_diffs: List[CategoryDiff] = field(default_factory=list)
    winner: str = "tie"
    generated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(asdict(self))


def compare_reports(
    report_a: AnalysisReport,
    report_b: AnalysisReport,
    *,
    now: Optional[datetime] = None,
) -> ComparisonReport:
    diffs: List[CategoryDiff] = []
    for key in CATEGORY_ORDER:
        category_a = report_a.category(key)
        category_b = report_b.category(key)
        score_a = category_a.score if category_a else 0
        score_b = category_b.score if category_b else 0
        label = CATEGORY_LABELS[key]
        diffs.append(
            CategoryDiff(key=key, label=label, score_a=score_a, score_b=score_b, diff=score_b - score_a)
        )

    if report_a.overall_score > report_b.overall_score:
        winner = "A"
    elif report_b.overall_score > report_a.overall_score:
        winner = "B"
    else:
        winner = "tie"

    return ComparisonReport(
        repo_a=report_a.repo.full_name,
        repo_b=report_b.repo.full_name,
        overall_a=report_a.overall_score,
        overall_b=report_b.overall_score,
        category_diffs=diffs,
        winner=winner,
        generated_at=isoformat_utc(now),
    )


def isoformat_utc(now: Optional[datetime] = None) -> str:
    """Render ``now`` (default: the current time) as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


__all__ = [
    "CategoryDiff",
    "ComparisonReport",
    "DEFAULT_WEIGHTS",
    "GRADE_THRESHOLDS",
    "clamp_score",
    "compare_reports",
    "compute_grade",
    "compute_overall_score",
    "generate_next_steps",
    "generate_risks",
    "generate_strengths",
    "isoformat_utc",
    "validate_weights",
]
