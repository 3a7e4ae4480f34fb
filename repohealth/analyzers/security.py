"""Security analyzer implementation."""

from __future__ import annotations

import re
from typing import Optional

from ..evidence import WORKFLOW_DIR, Evidence
from ..models import CategoryKey, RepoInfo
from .base import Analyzer, Finding, PointRule
from .utils import content_under, no_blob_matches, path_exists

_SECRET_NAME = re.compile(r"secret|credentials", re.IGNORECASE)
_CODEQL_KEYWORDS = ("codeql-analysis", "CodeQL")


def is_suspicious_path(path: str) -> bool:
    """Filenames that usually hold credentials and should not be committed."""
    return path.endswith(".env") or bool(_SECRET_NAME.search(path))


def _codeql(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
    if any("codeql" in path.lower() for path in evidence.paths):
        return True, None
    for text in evidence.contents.values():
        if any(keyword in text for keyword in _CODEQL_KEYWORDS):
            return True, None
    return False, None


class SecurityAnalyzer(Analyzer):
    """Scores security policy files, automated scanning and secret hygiene."""

    key = CategoryKey.SECURITY
    rules = (
        PointRule(
            "SECURITY.md",
            20,
            path_exists("SECURITY.md", ".github/SECURITY.md", "docs/SECURITY.md"),
        ),
        PointRule(
            "CODEOWNERS",
            15,
            path_exists("CODEOWNERS", ".github/CODEOWNERS", "docs/CODEOWNERS"),
        ),
        PointRule(
            "Dependabot configured",
            20,
            path_exists(".github/dependabot.yml", ".github/dependabot.yaml"),
        ),
        PointRule("CodeQL / security scanning", 15, _codeql),
        PointRule(
            "PR-triggered workflows",
            10,
            content_under(WORKFLOW_DIR, ("pull_request", "pull-request")),
        ),
        PointRule(".gitignore present", 10, path_exists(".gitignore")),
        PointRule("No exposed secret files", 10, no_blob_matches(is_suspicious_path)),
    )


__all__ = ["SecurityAnalyzer", "is_suspicious_path"]
