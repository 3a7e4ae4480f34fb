"""Evaluate policy sets against finished analysis reports."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from ..logging import get_logger
from ..models import AnalysisReport
from ..scoring import isoformat_utc
from .models import PolicyEvaluation, PolicyRuleResult, PolicySet
from .rules import (
    CategoryScoreRule,
    OverallScoreRule,
    PolicyRule,
    PresenceOperator,
    SignalRule,
    format_number,
)

logger = get_logger("policy")

PRESENT = "Present"
MISSING = "Missing"
UNKNOWN_RULE_TYPE = "Unknown rule type"


def evaluate_policy(
    policy: PolicySet,
    report: AnalysisReport,
    *,
    now: Optional[datetime] = None,
) -> PolicyEvaluation:
    """Check every rule of ``policy`` against ``report``.

    The evaluation passes only when every rule passes. Unrecognized rule
    types fail instead of being skipped.
    """
    results = [evaluate_rule(rule, report) for rule in policy.rules]
    pass_count = sum(1 for result in results if result.passed)
    fail_count = len(results) - pass_count
    logger.debug(
        "Policy %s on %s: %d passed, %d failed",
        policy.id,
        report.repo.full_name,
        pass_count,
        fail_count,
    )
    return PolicyEvaluation(
        policy=policy,
        repo=report.repo.full_name,
        results=results,
        passed=fail_count == 0,
        pass_count=pass_count,
        fail_count=fail_count,
        evaluated_at=isoformat_utc(now),
    )


def evaluate_rule(rule: PolicyRule, report: AnalysisReport) -> PolicyRuleResult:
    if isinstance(rule, OverallScoreRule):
        return _score_result(rule, report.overall_score)
    if isinstance(rule, CategoryScoreRule):
        category = report.category(rule.category)
        return _score_result(rule, category.score if category is not None else 0)
    if isinstance(rule, SignalRule):
        return _signal_result(rule, report)
    return PolicyRuleResult(rule=rule, passed=False, actual=UNKNOWN_RULE_TYPE, expected=rule.type)


def blocking_failures(evaluation: PolicyEvaluation) -> List[PolicyRuleResult]:
    """Failed results whose rule has ``error`` severity."""
    return [result for result in evaluation.results if result.blocking]


def has_blocking_failures(evaluations: Sequence[PolicyEvaluation]) -> bool:
    return any(blocking_failures(evaluation) for evaluation in evaluations)


def _score_result(rule: OverallScoreRule | CategoryScoreRule, score: int) -> PolicyRuleResult:
    return PolicyRuleResult(
        rule=rule,
        passed=rule.operator.compare(score, rule.value),
        actual=str(score),
        expected=f"{rule.operator.value} {format_number(rule.value)}",
    )


def _signal_result(rule: SignalRule, report: AnalysisReport) -> PolicyRuleResult:
    wanted = rule.signal.lower()
    found = any(
        signal.found
        for category in report.categories
        for signal in category.signals
        if signal.name.lower() == wanted
    )
    if rule.operator is PresenceOperator.EXISTS:
        passed, expected = found, PRESENT
    else:
        passed, expected = not found, MISSING
    return PolicyRuleResult(
        rule=rule,
        passed=passed,
        actual=PRESENT if found else MISSING,
        expected=expected,
    )


__all__ = [
    "blocking_failures",
    "evaluate_policy",
    "evaluate_rule",
    "has_blocking_failures",
]
