"""Policy rule variants.

Each rule ``type`` maps to its own frozen dataclass, so a signal rule always
carries a signal name and a score rule always carries a numeric threshold.
Construction validates operator/field combinations and raises
``PolicyError`` for anything that does not fit its variant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Union

from ..models import CategoryKey


class PolicyError(ValueError):
    """Raised when a policy document or rule is malformed."""


class ScoreOperator(str, Enum):
    GE = ">="
    GT = ">"
    LE = "<="
    LT = "<"
    EQ = "=="

    def compare(self, actual: float, threshold: float) -> bool:
        if self is ScoreOperator.GE:
            return actual >= threshold
        if self is ScoreOperator.GT:
            return actual > threshold
        if self is ScoreOperator.LE:
            return actual <= threshold
        if self is ScoreOperator.LT:
            return actual < threshold
        return actual == threshold


class PresenceOperator(str, Enum):
    EXISTS = "exists"
    NOT_EXISTS = "not-exists"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


def _coerce_enum(enum_cls: type, value: Any, what: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise PolicyError(f"Invalid {what} '{value}' (expected one of: {allowed})") from exc


def _category_key(value: Any) -> str:
    if isinstance(value, CategoryKey):
        return value.value
    if not isinstance(value, str) or not value.strip():
        raise PolicyError(f"Category score rules need a category key, got {value!r}")
    return value.strip()


def _coerce_value(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PolicyError(f"Score rules need a numeric value, got {value!r}")
    return float(value)


@dataclass(frozen=True)
class OverallScoreRule:
    id: str
    name: str
    operator: ScoreOperator
    value: float
    description: str = ""
    severity: Severity = Severity.ERROR

    type: ClassVar[str] = "overall-score"

    def __post_init__(self) -> None:
        object.__setattr__(self, "operator", _coerce_enum(ScoreOperator, self.operator, "score operator"))
        object.__setattr__(self, "value", _coerce_value(self.value))
        object.__setattr__(self, "severity", _coerce_enum(Severity, self.severity, "severity"))


@dataclass(frozen=True)
class CategoryScoreRule:
    id: str
    name: str
    category: str
    operator: ScoreOperator
    value: float
    description: str = ""
    severity: Severity = Severity.ERROR

    type: ClassVar[str] = "category-score"

    def __post_init__(self) -> None:
        # Keys outside the built-in categories are kept and score 0 when evaluated.
        object.__setattr__(self, "category", _category_key(self.category))
        object.__setattr__(self, "operator", _coerce_enum(ScoreOperator, self.operator, "score operator"))
        object.__setattr__(self, "value", _coerce_value(self.value))
        object.__setattr__(self, "severity", _coerce_enum(Severity, self.severity, "severity"))


@dataclass(frozen=True)
class SignalRule:
    id: str
    name: str
    signal: str
    operator: PresenceOperator = PresenceOperator.EXISTS
    description: str = ""
    severity: Severity = Severity.ERROR

    type: ClassVar[str] = "signal"

    def __post_init__(self) -> None:
        if not isinstance(self.signal, str) or not self.signal.strip():
            raise PolicyError(f"Signal rule '{self.id}' needs a signal name")
        object.__setattr__(
            self, "operator", _coerce_enum(PresenceOperator, self.operator, "signal operator")
        )
        object.__setattr__(self, "severity", _coerce_enum(Severity, self.severity, "severity"))


@dataclass(frozen=True)
class UnrecognizedRule:
    """A rule whose ``type`` this version does not understand; it always fails."""

    id: str
    name: str
    rule_type: str
    description: str = ""
    severity: Severity = Severity.ERROR
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def type(self) -> str:
        return self.rule_type


PolicyRule = Union[OverallScoreRule, CategoryScoreRule, SignalRule, UnrecognizedRule]


def parse_rule(data: Mapping[str, Any]) -> PolicyRule:
    """Build the rule variant named by ``data["type"]``."""
    if not isinstance(data, Mapping):
        raise PolicyError("Policy rules must be mappings")

    rule_id = str(data.get("id") or "")
    if not rule_id:
        raise PolicyError("Policy rules need an 'id'")
    name = str(data.get("name") or rule_id)
    description = str(data.get("description") or "")
    severity = data.get("severity", Severity.ERROR.value)
    rule_type = data.get("type")
    if not isinstance(rule_type, str) or not rule_type:
        raise PolicyError(f"Rule '{rule_id}' needs a 'type'")

    if rule_type == OverallScoreRule.type:
        return OverallScoreRule(
            id=rule_id,
            name=name,
            operator=data.get("operator"),
            value=data.get("value"),
            description=description,
            severity=severity,
        )
    if rule_type == CategoryScoreRule.type:
        if not data.get("category"):
            raise PolicyError(f"Rule '{rule_id}' needs a 'category'")
        return CategoryScoreRule(
            id=rule_id,
            name=name,
            category=data.get("category"),
            operator=data.get("operator"),
            value=data.get("value"),
            description=description,
            severity=severity,
        )
    if rule_type == SignalRule.type:
        return SignalRule(
            id=rule_id,
            name=name,
            signal=data.get("signal") or "",
            operator=data.get("operator", PresenceOperator.EXISTS.value),
            description=description,
            severity=severity,
        )
    return UnrecognizedRule(
        id=rule_id,
        name=name,
        rule_type=rule_type,
        description=description,
        severity=_coerce_enum(Severity, severity, "severity"),
        raw=dict(data),
    )


def rule_to_dict(rule: PolicyRule) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": rule.id,
        "name": rule.name,
        "description": rule.description,
        "type": rule.type,
        "severity": rule.severity.value,
    }
    if isinstance(rule, (OverallScoreRule, CategoryScoreRule)):
        if isinstance(rule, CategoryScoreRule):
            payload["category"] = rule.category
        payload["operator"] = rule.operator.value
        payload["value"] = format_number(rule.value, as_number=True)
    elif isinstance(rule, SignalRule):
        payload["signal"] = rule.signal
        payload["operator"] = rule.operator.value
    return payload


def format_number(value: float, *, as_number: bool = False) -> Any:
    """Render ``60.0`` as ``60`` and keep fractional thresholds intact."""
    if float(value).is_integer():
        return int(value) if as_number else str(int(value))
    return value if as_number else str(value)


__all__ = [
    "CategoryScoreRule",
    "OverallScoreRule",
    "PolicyError",
    "PolicyRule",
    "PresenceOperator",
    "ScoreOperator",
    "Severity",
    "SignalRule",
    "UnrecognizedRule",
    "format_number",
    "parse_rule",
    "rule_to_dict",
]
