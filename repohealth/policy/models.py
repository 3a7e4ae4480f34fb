"""Policy sets and evaluation results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .rules import PolicyError, PolicyRule, Severity, parse_rule, rule_to_dict


@dataclass
class PolicySet:
    """A named group of rules, independent of any single repository."""

    id: str
    name: str
    description: str = ""
    rules: List[PolicyRule] = field(default_factory=list)
    created_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "rules": [rule_to_dict(rule) for rule in self.rules],
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PolicySet":
        if not isinstance(payload, Mapping):
            raise PolicyError("A policy must be a mapping")
        policy_id = payload.get("id")
        if not isinstance(policy_id, str) or not policy_id:
            raise PolicyError("A policy needs an 'id'")
        rules = payload.get("rules") or []
        if not isinstance(rules, list):
            raise PolicyError(f"Policy '{policy_id}' rules must be a list")
        return cls(
            id=policy_id,
            name=str(payload.get("name") or policy_id),
            description=str(payload.get("description") or ""),
            rules=[parse_rule(item) for item in rules],
            created_at=str(payload.get("created_at") or payload.get("createdAt") or ""),
        )


@dataclass
class PolicyRuleResult:
    rule: PolicyRule
    passed: bool
    actual: str
    expected: str

    @property
    def blocking(self) -> bool:
        return not self.passed and self.rule.severity is Severity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule": rule_to_dict(self.rule),
            "passed": self.passed,
            "actual": self.actual,
            "expected": self.expected,
        }


@dataclass
class PolicyEvaluation:
    policy: PolicySet
    repo: str
    results: List[PolicyRuleResult]
    passed: bool
    pass_count: int
    fail_count: int
    evaluated_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "policy": self.policy.to_dict(),
            "repo": self.repo,
            "results": [result.to_dict() for result in self.results],
            "passed": self.passed,
            "pass_count": self.pass_count,
            "fail_count": self.fail_count,
            "evaluated_at": self.evaluated_at,
        }


__all__ = ["PolicyEvaluation", "PolicyRuleResult", "PolicySet"]
