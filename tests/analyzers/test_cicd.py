"""Tests for the CI/CD analyzer."""

from __future__ import annotations

from repohealth.engine import analyze_cicd, analyze_security
from repohealth.models import TreeEntry
from tests._fixtures.repo_builder import make_snapshot


def _signal(result, name):
    return next(signal for signal in result.signals if signal.name == name)


def test_complete_pipeline_scores_exactly_100() -> None:
    files, tree = make_snapshot(
        {
            ".github/workflows/ci.yml": (
                "on:\n  push:\n  pull_request:\njobs:\n  build:\n    steps:\n      - run: npm test\n"
            ),
            ".github/workflows/deploy.yml": "on: release\njobs:\n  deploy:\n",
        },
        paths=["Dockerfile", "docker-compose.yml", "Makefile"],
    )

    result = analyze_cicd(files, tree)

    assert result.score == 100
    assert _signal(result, "GitHub Actions workflows").details == "2 workflow file(s)"


def test_push_only_workflow_misses_pr_checks() -> None:
    files, tree = make_snapshot(
        {
            ".github/workflows/ci.yml": "on: push\njobs:\n  build:\n  run: npm test",
            ".github/workflows/deploy.yml": "steps:\n  - run: ./deploy.sh\n",
        },
        paths=["Dockerfile", "docker-compose.yml", "Makefile"],
    )

    result = analyze_cicd(files, tree)

    assert _signal(result, "PR-triggered checks").found is False
    assert result.score == 85


def test_release_workflow_detected_by_path() -> None:
    files, tree = make_snapshot({".github/workflows/release.yml": "on: push\n"})

    assert _signal(analyze_cicd(files, tree), "Deploy / release workflow").found is True


def test_nested_dockerfile_counts() -> None:
    files, tree = make_snapshot(paths=["services/api/Dockerfile"])

    result = analyze_cicd(files, tree)

    assert _signal(result, "Dockerfile").found is True
    assert result.score == 10


def test_dockerfile_suffix_variant_is_not_a_dockerfile() -> None:
    files, tree = make_snapshot(paths=["Dockerfile.dev"])

    assert _signal(analyze_cicd(files, tree), "Dockerfile").found is False


def test_empty_input_scores_zero() -> None:
    result = analyze_cicd([], [])

    assert result.score == 0
    assert not any(signal.found for signal in result.signals)


def test_tree_entries_with_string_kinds_still_count_as_files() -> None:
    tree = [
        TreeEntry(".github/workflows/ci.yml", kind="blob"),
        TreeEntry("Dockerfile", kind="blob"),
        TreeEntry(".env", kind="blob"),
    ]

    assert analyze_cicd([], tree).score == 35
    assert _signal(analyze_security([], tree), "No exposed secret files").found is False
