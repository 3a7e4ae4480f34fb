"""Declarative compliance policies evaluated against analysis reports."""

from __future__ import annotations

from .engine import blocking_failures, evaluate_policy, evaluate_rule, has_blocking_failures
from .loader import load_policy_file, parse_policy_document, resolve_policy
from .models import PolicyEvaluation, PolicyRuleResult, PolicySet
from .presets import DEFAULT_POLICIES, get_preset, preset_ids
from .rules import (
    CategoryScoreRule,
    OverallScoreRule,
    PolicyError,
    PolicyRule,
    PresenceOperator,
    ScoreOperator,
    Severity,
    SignalRule,
    UnrecognizedRule,
    parse_rule,
    rule_to_dict,
)

__all__ = [
    "CategoryScoreRule",
    "DEFAULT_POLICIES",
    "OverallScoreRule",
    "PolicyError",
    "PolicyEvaluation",
    "PolicyRule",
    "PolicyRuleResult",
    "PolicySet",
    "PresenceOperator",
    "ScoreOperator",
    "Severity",
    "SignalRule",
    "UnrecognizedRule",
    "blocking_failures",
    "evaluate_policy",
    "evaluate_rule",
    "get_preset",
    "has_blocking_failures",
    "load_policy_file",
    "parse_policy_document",
    "parse_rule",
    "preset_ids",
    "resolve_policy",
]
