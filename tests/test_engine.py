"""End-to-end tests for the analysis pipeline."""

from __future__ import annotations

import pytest

from repohealth.analyzers import discover_analyzers
from repohealth.engine import run_analysis
from repohealth.models import (
    CATEGORY_ORDER,
    AnalysisReport,
    CategoryKey,
    LetterGrade,
    ParsedRepo,
    RepoInfo,
)
from tests._fixtures.repo_builder import make_snapshot

PARSED = ParsedRepo(owner="acme", repo="demo")


def _run(files, tree, *, license=None, language=None, **kwargs):
    info = RepoInfo(owner="acme", repo="demo", license=license, language=language)
    return run_analysis(PARSED, info, tree, files, **kwargs)


def test_empty_snapshot_scores_only_vacuous_security(frozen_now) -> None:
    report = _run([], [], now=frozen_now)

    scores = {category.key: category.score for category in report.categories}
    assert scores.pop(CategoryKey.SECURITY) == 10
    assert set(scores.values()) == {0}
    assert report.overall_score == 2
    assert report.grade is LetterGrade.F
    assert report.strengths == []
    assert report.tech_stack == []
    assert report.file_count == 0
    assert report.tree_entry_count == 0


def test_readme_only_repository(frozen_now) -> None:
    files, tree = make_snapshot({"README.md": "# Demo\n"})

    report = _run(files, tree, now=frozen_now)

    assert report.category(CategoryKey.DOCUMENTATION).score >= 30
    # 30 * 0.20 + 10 * 0.15 = 7.5
    assert report.overall_score == 8
    assert report.grade in (LetterGrade.D, LetterGrade.F)
    assert report.next_steps[0] == "Add github actions workflows to improve ci/cd score"


def test_report_identity_and_timestamp(frozen_now) -> None:
    report = _run([], [], now=frozen_now)

    assert report.analyzed_at == "2024-05-01T12:00:00.000Z"
    assert report.id == "acme/demo@2024-05-01T12:00:00.000Z"


def test_categories_follow_canonical_order_regardless_of_analyzer_order(frozen_now) -> None:
    analyzers = list(reversed(discover_analyzers()))

    report = _run([], [], now=frozen_now, analyzers=analyzers)

    assert [category.key for category in report.categories] == list(CATEGORY_ORDER)


@pytest.mark.parametrize("drop", [0, 6])
def test_incomplete_analyzer_set_is_rejected(frozen_now, drop) -> None:
    analyzers = discover_analyzers()
    del analyzers[drop]

    with pytest.raises(ValueError, match="cover each category"):
        _run([], [], now=frozen_now, analyzers=analyzers)


def test_duplicated_analyzer_is_rejected(frozen_now) -> None:
    analyzers = discover_analyzers()
    analyzers[-1] = analyzers[0]

    with pytest.raises(ValueError, match="cover each category"):
        _run([], [], now=frozen_now, analyzers=analyzers)


def test_repeated_runs_are_identical(frozen_now) -> None:
    files, tree = make_snapshot(
        {".github/workflows/ci.yml": "on: [push, pull_request]\njobs:\n  test:\n    run: npm test\n"},
        paths=["package.json", "LICENSE", "README.md"],
    )

    first = _run(files, tree, license="MIT", now=frozen_now)
    second = _run(files, tree, license="MIT", now=frozen_now)

    assert first.to_dict() == second.to_dict()


def test_weights_override_changes_aggregation(frozen_now) -> None:
    files, tree = make_snapshot(paths=["LICENSE"])
    weights = {key: 0.0 for key in CATEGORY_ORDER}
    weights[CategoryKey.LICENSE] = 1.0

    report = _run(files, tree, license="GPL-3.0", weights=weights, now=frozen_now)

    assert report.overall_score == 90
    assert report.grade is LetterGrade.A
    assert report.category(CategoryKey.LICENSE).weight == 1.0
    assert report.strengths == ["Strong license: License file exists, SPDX license detected"]


def test_primary_language_leads_tech_stack(frozen_now) -> None:
    files, tree = make_snapshot(paths=["Dockerfile"])

    report = _run(files, tree, language="Python", now=frozen_now)

    assert [item.name for item in report.tech_stack] == ["Python", "Docker"]


def test_report_survives_plain_payload(frozen_now) -> None:
    files, tree = make_snapshot({"README.md": "# Demo\n", "CONTRIBUTING.md": "Thanks!"})
    report = _run(files, tree, license="MIT", now=frozen_now)

    payload = report.to_dict()
    restored = AnalysisReport.from_dict(payload)

    assert payload["categories"][4]["key"] == "codeQuality"
    assert payload["grade"] == report.grade.value
    assert restored.to_dict() == payload
