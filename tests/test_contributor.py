"""Tests for contributor-friendliness scoring."""

from __future__ import annotations

from repohealth.contributor import CHECKLIST, analyze_contributor_friendliness
from tests._fixtures.repo_builder import make_snapshot

README = (
    "# Demo\n\n"
    + "A project description that goes on for a while. " * 12
    + "\n\n## Installation\n\npip install demo\n\n## Contributing\n\nSee CONTRIBUTING.md.\n"
)


def _signals(result):
    return {signal.name: signal.found for signal in result.signals}


def test_fully_prepared_repository_is_capped_at_100() -> None:
    files, tree = make_snapshot(
        {
            "README.md": README,
            "CONTRIBUTING.md": "Please open an issue before sending a change. " * 6,
            ".github/ISSUE_TEMPLATE/bug_report.md": "labels: bug, good first issue",
            ".github/ISSUE_TEMPLATE/feature.md": "labels: enhancement",
        },
        paths=[
            ".github/pull_request_template.md",
            "CODE_OF_CONDUCT.md",
            ".github/FUNDING.yml",
            "SUPPORT.md",
        ],
    )

    result = analyze_contributor_friendliness(files, tree)

    assert result.score == 100
    assert all(_signals(result).values())
    assert all(item.passed for item in result.readiness_checklist)


def test_short_contributing_guide_scores_presence_only() -> None:
    files, tree = make_snapshot({"CONTRIBUTING.md": "Be nice."})

    result = analyze_contributor_friendliness(files, tree)

    assert result.score == 12
    signals = _signals(result)
    assert signals["CONTRIBUTING.md exists"] is True
    assert signals["CONTRIBUTING.md is substantial (>200 chars)"] is False


def test_checklist_has_nine_items_in_fixed_order() -> None:
    result = analyze_contributor_friendliness([], [])

    assert [item.label for item in result.readiness_checklist] == [label for label, _, _ in CHECKLIST]
    assert len(result.readiness_checklist) == 9
    assert result.readiness_checklist[0].passed is False


def test_readme_sections_are_detected_from_headings() -> None:
    files, tree = make_snapshot({"README.md": "# Demo\n\n### Getting Started\n\nRun it.\n"})

    signals = _signals(analyze_contributor_friendliness(files, tree))

    assert signals["Setup instructions in README"] is True
    assert signals["README has Contributing section"] is False
    assert signals["Substantial README (>500 chars)"] is False


def test_empty_input_scores_zero() -> None:
    result = analyze_contributor_friendliness([], [])

    assert result.score == 0
    assert not any(signal.found for signal in result.signals)
