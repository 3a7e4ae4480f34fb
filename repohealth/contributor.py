"""Contributor-friendliness scoring.

Overlaps with the community category in the evidence it reads but weights it
independently, and adds README-body checks aimed at first-time contributors.
"""

from __future__ import annotations

import re
from typing import List, Sequence

from .analyzers.community import (
    CODE_OF_CONDUCT_FILES,
    FUNDING_FILES,
    PR_TEMPLATE_FILES,
    SUPPORT_FILES,
)
from .analyzers.documentation import CONTRIBUTING_FILES, README_FILES
from .evidence import ISSUE_TEMPLATE_DIR, Evidence
from .models import ChecklistItem, ContributorFriendliness, FileContent, Signal, TreeEntry
from .scoring import clamp_score

SUBSTANTIAL_CONTRIBUTING_CHARS = 200
SUBSTANTIAL_README_CHARS = 500

_CONTRIBUTING_HEADING = re.compile(r"^#{1,3}\s+contribut", re.IGNORECASE | re.MULTILINE)
_SETUP_HEADING = re.compile(
    r"^#{1,3}\s+(install|setup|getting\s+started)", re.IGNORECASE | re.MULTILINE
)
_GOOD_FIRST_ISSUE = ("good first issue", "good-first-issue")

POINTS = {
    "CONTRIBUTING.md exists": 12,
    "CONTRIBUTING.md is substantial (>200 chars)": 8,
    "Issue templates": 12,
    "Multiple issue templates": 5,
    "PR template": 12,
    "Code of Conduct": 10,
    "Good first issue label in templates": 8,
    "README has Contributing section": 8,
    "Setup instructions in README": 10,
    "Funding configured": 7,
    "SUPPORT.md": 8,
    "Substantial README (>500 chars)": 8,
}

CHECKLIST = (
    (
        "Contribution guide",
        "CONTRIBUTING.md exists",
        "A CONTRIBUTING.md file explaining how to contribute to the project",
    ),
    (
        "Issue templates",
        "Issue templates",
        "Structured issue templates in .github/ISSUE_TEMPLATE/ for bug reports and feature requests",
    ),
    (
        "PR template",
        "PR template",
        "A pull request template that guides contributors through the PR process",
    ),
    (
        "Code of conduct",
        "Code of Conduct",
        "A CODE_OF_CONDUCT.md that sets expectations for community behavior",
    ),
    (
        "Setup instructions",
        "Setup instructions in README",
        "Clear instructions in the README for installing and running the project locally",
    ),
    (
        "Contributing section in README",
        "README has Contributing section",
        "A section in the README that introduces contributors to the project workflow",
    ),
    (
        "Good first issue labels",
        "Good first issue label in templates",
        "Issue templates or labels that help newcomers find beginner-friendly tasks",
    ),
    (
        "Support resources",
        "SUPPORT.md",
        "A SUPPORT.md file directing users to help channels (forums, chat, etc.)",
    ),
    (
        "Funding information",
        "Funding configured",
        "A .github/FUNDING.yml file enabling sponsor buttons on the repository",
    ),
)


def analyze_contributor_friendliness(
    files: Sequence[FileContent],
    tree: Sequence[TreeEntry],
) -> ContributorFriendliness:
    return score_contributor_friendliness(Evidence(files, tree))


def score_contributor_friendliness(evidence: Evidence) -> ContributorFriendliness:
    """Score onboarding readiness and build the nine-item checklist."""
    signals = _collect_signals(evidence)
    score = sum(POINTS[signal.name] for signal in signals if signal.found)

    found = {signal.name: signal.found for signal in signals}
    checklist = [
        ChecklistItem(label=label, passed=found[signal_name], description=description)
        for label, signal_name, description in CHECKLIST
    ]
    return ContributorFriendliness(
        score=clamp_score(score),
        signals=signals,
        readiness_checklist=checklist,
    )


def _collect_signals(evidence: Evidence) -> List[Signal]:
    contributing_path = evidence.find(*CONTRIBUTING_FILES)
    contributing = evidence.content(*CONTRIBUTING_FILES)
    templates = evidence.prefix_paths(ISSUE_TEMPLATE_DIR)
    readme = evidence.content(*README_FILES) or ""

    good_first_issue = any(
        any(phrase in text.lower() for phrase in _GOOD_FIRST_ISSUE)
        for _path, text in evidence.contents_under(ISSUE_TEMPLATE_DIR)
    )

    return [
        Signal("CONTRIBUTING.md exists", contributing_path is not None),
        Signal(
            "CONTRIBUTING.md is substantial (>200 chars)",
            len(contributing or "") > SUBSTANTIAL_CONTRIBUTING_CHARS,
            f"{len(contributing)} characters" if contributing is not None else None,
        ),
        Signal("Issue templates", bool(templates), f"{len(templates)} template(s)"),
        Signal("Multiple issue templates", len(templates) >= 2),
        Signal("PR template", evidence.has_any(*PR_TEMPLATE_FILES)),
        Signal("Code of Conduct", evidence.has_any(*CODE_OF_CONDUCT_FILES)),
        Signal("Good first issue label in templates", good_first_issue),
        Signal("README has Contributing section", bool(_CONTRIBUTING_HEADING.search(readme))),
        Signal("Setup instructions in README", bool(_SETUP_HEADING.search(readme))),
        Signal("Funding configured", evidence.has_any(*FUNDING_FILES)),
        Signal("SUPPORT.md", evidence.has_any(*SUPPORT_FILES)),
        Signal(
            "Substantial README (>500 chars)",
            len(readme) > SUBSTANTIAL_README_CHARS,
            f"{len(readme)} characters" if readme else None,
        ),
    ]


__all__ = [
    "CHECKLIST",
    "POINTS",
    "analyze_contributor_friendliness",
    "score_contributor_friendliness",
]
