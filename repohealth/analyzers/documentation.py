"""Documentation analyzer implementation."""

from __future__ import annotations

from ..models import CategoryKey
from .base import Analyzer, PointRule
from .utils import directory_exists, path_exists

README_FILES = ("README.md", "README.rst", "README.txt", "README")
CONTRIBUTING_FILES = ("CONTRIBUTING.md", ".github/CONTRIBUTING.md", "docs/CONTRIBUTING.md")
CHANGELOG_FILES = ("CHANGELOG.md", "CHANGES.md", "HISTORY.md", "CHANGELOG")
LICENSE_FILES = ("LICENSE", "LICENSE.md", "LICENSE.txt", "COPYING", "LICENCE")


class DocumentationAnalyzer(Analyzer):
    """Scores the presence of the core project documents."""

    key = CategoryKey.DOCUMENTATION
    rules = (
        PointRule(
            "README exists",
            30,
            path_exists(*README_FILES, canonical=("README.md", "README.rst")),
        ),
        PointRule(
            "CONTRIBUTING.md",
            20,
            path_exists(*CONTRIBUTING_FILES, canonical=("CONTRIBUTING.md",)),
        ),
        PointRule(
            "CHANGELOG",
            15,
            path_exists(*CHANGELOG_FILES, canonical=("CHANGELOG.md", "CHANGES.md", "HISTORY.md")),
        ),
        PointRule("docs/ directory", 15, directory_exists("docs", "doc")),
        PointRule("LICENSE file", 20, path_exists(*LICENSE_FILES)),
    )


__all__ = [
    "CHANGELOG_FILES",
    "CONTRIBUTING_FILES",
    "DocumentationAnalyzer",
    "LICENSE_FILES",
    "README_FILES",
]
