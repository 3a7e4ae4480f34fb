"""Built-in policy presets."""

from __future__ import annotations

from typing import Dict, List

from ..models import CategoryKey
from .models import PolicySet
from .rules import (
    CategoryScoreRule,
    OverallScoreRule,
    PolicyError,
    ScoreOperator,
    Severity,
    SignalRule,
)

_CREATED_AT = "2024-01-01T00:00:00.000Z"


def _category_floor(
    rule_id: str, category: CategoryKey, label: str, severity: Severity
) -> CategoryScoreRule:
    return CategoryScoreRule(
        id=rule_id,
        name=f"{label} >= 60",
        description=f"{label} score must be at least 60",
        category=category,
        operator=ScoreOperator.GE,
        value=60,
        severity=severity,
    )


BASIC_HYGIENE = PolicySet(
    id="basic-hygiene",
    name="Basic Hygiene",
    description="Minimum requirements for any public repository: README, LICENSE, and .gitignore.",
    rules=[
        SignalRule(
            id="bh-readme",
            name="README exists",
            description="Repository must have a README file",
            signal="README exists",
        ),
        SignalRule(
            id="bh-license",
            name="License file exists",
            description="Repository must have a LICENSE file",
            signal="License file exists",
        ),
        SignalRule(
            id="bh-gitignore",
            name=".gitignore present",
            description="Repository must have a .gitignore file",
            signal=".gitignore present",
            severity=Severity.WARNING,
        ),
    ],
    created_at=_CREATED_AT,
)

PRODUCTION_READY = PolicySet(
    id="production-ready",
    name="Production Ready",
    description=(
        "Requirements for production-grade repositories: strong scores across all "
        "categories, CI, tests, and license."
    ),
    rules=[
        OverallScoreRule(
            id="pr-overall",
            name="Overall score >= 60",
            description="Overall repository health score must be at least 60",
            operator=ScoreOperator.GE,
            value=60,
        ),
        _category_floor("pr-docs", CategoryKey.DOCUMENTATION, "Documentation", Severity.WARNING),
        _category_floor("pr-security", CategoryKey.SECURITY, "Security", Severity.WARNING),
        _category_floor("pr-cicd", CategoryKey.CICD, "CI/CD", Severity.WARNING),
        _category_floor("pr-deps", CategoryKey.DEPENDENCIES, "Dependencies", Severity.WARNING),
        _category_floor("pr-quality", CategoryKey.CODE_QUALITY, "Code Quality", Severity.WARNING),
        _category_floor("pr-license", CategoryKey.LICENSE, "License", Severity.ERROR),
        _category_floor("pr-community", CategoryKey.COMMUNITY, "Community", Severity.WARNING),
        SignalRule(
            id="pr-ci",
            name="Has CI workflows",
            description="Repository must have GitHub Actions workflows",
            signal="GitHub Actions workflows",
        ),
        SignalRule(
            id="pr-tests",
            name="Has tests",
            description="Repository must have tests",
            signal="Tests present",
        ),
        SignalRule(
            id="pr-license-file",
            name="License file exists",
            description="Repository must have a LICENSE file",
            signal="License file exists",
        ),
    ],
    created_at=_CREATED_AT,
)

SECURITY_FOCUSED = PolicySet(
    id="security-focused",
    name="Security Focused",
    description=(
        "Strict security requirements: high security score, Dependabot, SECURITY.md, "
        "CODEOWNERS, and CodeQL."
    ),
    rules=[
        CategoryScoreRule(
            id="sf-score",
            name="Security score >= 80",
            description="Security category score must be at least 80",
            category=CategoryKey.SECURITY,
            operator=ScoreOperator.GE,
            value=80,
        ),
        SignalRule(
            id="sf-dependabot",
            name="Dependabot configured",
            description="Repository must have Dependabot configured for automated dependency updates",
            signal="Dependabot configured",
        ),
        SignalRule(
            id="sf-security-md",
            name="SECURITY.md exists",
            description="Repository must have a security policy",
            signal="SECURITY.md",
        ),
        SignalRule(
            id="sf-codeowners",
            name="CODEOWNERS exists",
            description="Repository must have CODEOWNERS for review enforcement",
            signal="CODEOWNERS",
        ),
        SignalRule(
            id="sf-codeql",
            name="CodeQL enabled",
            description="Repository must have CodeQL or equivalent security scanning",
            signal="CodeQL / security scanning",
            severity=Severity.WARNING,
        ),
    ],
    created_at=_CREATED_AT,
)

DEFAULT_POLICIES: List[PolicySet] = [BASIC_HYGIENE, PRODUCTION_READY, SECURITY_FOCUSED]

_PRESETS_BY_ID: Dict[str, PolicySet] = {policy.id: policy for policy in DEFAULT_POLICIES}


def get_preset(policy_id: str) -> PolicySet:
    try:
        return _PRESETS_BY_ID[policy_id]
    except KeyError:
        known = ", ".join(sorted(_PRESETS_BY_ID))
        raise PolicyError(f"Unknown policy preset '{policy_id}' (available: {known})") from None


def preset_ids() -> List[str]:
    return [policy.id for policy in DEFAULT_POLICIES]


__all__ = [
    "BASIC_HYGIENE",
    "DEFAULT_POLICIES",
    "PRODUCTION_READY",
    "SECURITY_FOCUSED",
    "get_preset",
    "preset_ids",
]
