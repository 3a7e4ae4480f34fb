"""Community health analyzer implementation."""

from __future__ import annotations

from ..evidence import ISSUE_TEMPLATE_DIR
from ..models import CategoryKey
from .base import Analyzer, PointRule
from .documentation import CONTRIBUTING_FILES
from .utils import path_exists, prefix_count

PR_TEMPLATE_FILES = (
    ".github/PULL_REQUEST_TEMPLATE.md",
    ".github/pull_request_template.md",
    "PULL_REQUEST_TEMPLATE.md",
    "docs/PULL_REQUEST_TEMPLATE.md",
)
CODE_OF_CONDUCT_FILES = (
    "CODE_OF_CONDUCT.md",
    ".github/CODE_OF_CONDUCT.md",
    "docs/CODE_OF_CONDUCT.md",
)
FUNDING_FILES = (".github/FUNDING.yml",)
SUPPORT_FILES = ("SUPPORT.md", ".github/SUPPORT.md", "docs/SUPPORT.md")


class CommunityAnalyzer(Analyzer):
    """Scores community health files that GitHub surfaces to contributors."""

    key = CategoryKey.COMMUNITY
    rules = (
        PointRule("Issue templates", 20, prefix_count(ISSUE_TEMPLATE_DIR, "{count} template(s)")),
        PointRule("PR template", 20, path_exists(*PR_TEMPLATE_FILES)),
        PointRule("Code of Conduct", 20, path_exists(*CODE_OF_CONDUCT_FILES)),
        PointRule("CONTRIBUTING.md", 20, path_exists(*CONTRIBUTING_FILES)),
        PointRule("Funding configuration", 10, path_exists(*FUNDING_FILES)),
        PointRule("SUPPORT.md", 10, path_exists(*SUPPORT_FILES)),
    )


__all__ = [
    "CODE_OF_CONDUCT_FILES",
    "CommunityAnalyzer",
    "FUNDING_FILES",
    "PR_TEMPLATE_FILES",
    "SUPPORT_FILES",
]
