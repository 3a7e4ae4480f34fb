"""License analyzer implementation."""

from __future__ import annotations

from typing import Optional

from ..evidence import Evidence
from ..models import CategoryKey, RepoInfo
from .base import Analyzer, Finding, PointRule
from .documentation import LICENSE_FILES
from .utils import path_exists

PERMISSIVE_LICENSES = frozenset(
    {
        "MIT",
        "Apache-2.0",
        "BSD-2-Clause",
        "BSD-3-Clause",
        "ISC",
        "Unlicense",
        "CC0-1.0",
    }
)
COPYLEFT_LICENSES = frozenset(
    {"GPL-2.0", "GPL-3.0", "AGPL-3.0", "LGPL-2.1", "LGPL-3.0", "MPL-2.0"}
)

_UNASSERTED = "NOASSERTION"


def spdx_id(repo_info: Optional[RepoInfo]) -> Optional[str]:
    """The declared SPDX identifier, or None when absent or unasserted."""
    if repo_info is None or not repo_info.license:
        return None
    value = repo_info.license.strip()
    if not value or value == _UNASSERTED:
        return None
    return value


def _detected(_: Evidence, repo_info: Optional[RepoInfo]) -> Finding:
    value = spdx_id(repo_info)
    raw = repo_info.license if repo_info is not None else None
    return value is not None, raw or None


def _permissive(_: Evidence, repo_info: Optional[RepoInfo]) -> Finding:
    value = spdx_id(repo_info)
    if value in PERMISSIVE_LICENSES:
        return True, value
    return False, None


def _copyleft(_: Evidence, repo_info: Optional[RepoInfo]) -> Finding:
    value = spdx_id(repo_info)
    if value in COPYLEFT_LICENSES:
        return True, value
    return False, None


def _other(_: Evidence, repo_info: Optional[RepoInfo]) -> Finding:
    value = spdx_id(repo_info)
    if value is None or value in PERMISSIVE_LICENSES or value in COPYLEFT_LICENSES:
        return False, None
    return True, value


class LicenseAnalyzer(Analyzer):
    """Scores the license file and the declared SPDX classification.

    The permissive, copyleft and other bonuses are mutually exclusive because
    the two license lists are disjoint.
    """

    key = CategoryKey.LICENSE
    rules = (
        PointRule("License file exists", 40, path_exists(*LICENSE_FILES)),
        PointRule("SPDX license detected", 30, _detected),
        PointRule("Permissive license", 30, _permissive),
        PointRule("Copyleft license", 20, _copyleft),
        PointRule("Other license", 10, _other),
    )


__all__ = ["COPYLEFT_LICENSES", "LicenseAnalyzer", "PERMISSIVE_LICENSES", "spdx_id"]
