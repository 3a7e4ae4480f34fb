"""Base classes for category analyzers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ..evidence import Evidence
from ..models import CATEGORY_LABELS, CategoryKey, CategoryResult, RepoInfo, Signal
from ..scoring import DEFAULT_WEIGHTS, clamp_score

Finding = Tuple[bool, Optional[str]]
Check = Callable[[Evidence, Optional[RepoInfo]], Finding]


@dataclass(frozen=True)
class PointRule:
    """One scored predicate: a signal name, its point value, and the check."""

    signal: str
    points: int
    check: Check


class Analyzer(ABC):
    """Contract for analyzers that score one category from the evidence model."""

    key: CategoryKey

    @property
    @abstractmethod
    def rules(self) -> Sequence[PointRule]:
        """Ordered point rules; signal order in the result follows this order."""

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self.key]

    def analyze(
        self,
        evidence: Evidence,
        repo_info: RepoInfo | None = None,
        *,
        weight: float | None = None,
    ) -> CategoryResult:
        """Evaluate every rule, emit one signal each and sum triggered points."""
        signals: List[Signal] = []
        score = 0
        for rule in self.rules:
            found, details = rule.check(evidence, repo_info)
            signals.append(Signal(name=rule.signal, found=found, details=details))
            if found:
                score += rule.points

        return CategoryResult(
            key=self.key,
            label=self.label,
            score=clamp_score(score),
            weight=DEFAULT_WEIGHTS[self.key] if weight is None else weight,
            signals=signals,
        )


__all__ = ["Analyzer", "Check", "Finding", "PointRule"]
