"""Category analyzer implementations and discovery utilities."""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence, Set

from ..models import CATEGORY_ORDER, CategoryKey
from .base import Analyzer, PointRule
from .cicd import CicdAnalyzer
from .code_quality import CodeQualityAnalyzer
from .community import CommunityAnalyzer
from .dependencies import DependenciesAnalyzer
from .documentation import DocumentationAnalyzer
from .license import LicenseAnalyzer
from .security import SecurityAnalyzer
from .tech_stack import detect_tech_stack, merge_primary_language

_BUILTIN_FACTORIES: Dict[CategoryKey, Callable[[], Analyzer]] = {
    CategoryKey.DOCUMENTATION: DocumentationAnalyzer,
    CategoryKey.SECURITY: SecurityAnalyzer,
    CategoryKey.CICD: CicdAnalyzer,
    CategoryKey.DEPENDENCIES: DependenciesAnalyzer,
    CategoryKey.CODE_QUALITY: CodeQualityAnalyzer,
    CategoryKey.LICENSE: LicenseAnalyzer,
    CategoryKey.COMMUNITY: CommunityAnalyzer,
}


def discover_analyzers(enabled: Sequence[str] | None = None) -> List[Analyzer]:
    """Return instantiated analyzers in canonical category order.

    ``enabled`` restricts the result to the named category keys; unknown
    names raise ``ValueError``.
    """

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}
        known = {key.value.lower() for key in CATEGORY_ORDER}
        unknown = enabled_set - known
        if unknown:
            missing = ", ".join(sorted(unknown))
            raise ValueError(f"Unknown analyzers requested: {missing}")

    analyzers: List[Analyzer] = []
    for key in CATEGORY_ORDER:
        if enabled_set is not None and key.value.lower() not in enabled_set:
            continue
        instance = _BUILTIN_FACTORIES[key]()
        if not isinstance(instance, Analyzer):
            raise TypeError(f"Analyzer factory for '{key.value}' did not return an Analyzer instance")
        analyzers.append(instance)
    return analyzers


def get_analyzer(key: CategoryKey | str) -> Analyzer:
    return _BUILTIN_FACTORIES[CategoryKey(key)]()


__all__ = [
    "Analyzer",
    "CicdAnalyzer",
    "CodeQualityAnalyzer",
    "CommunityAnalyzer",
    "DependenciesAnalyzer",
    "DocumentationAnalyzer",
    "LicenseAnalyzer",
    "PointRule",
    "SecurityAnalyzer",
    "detect_tech_stack",
    "discover_analyzers",
    "get_analyzer",
    "merge_primary_language",
]
