"""Tests for the dependencies analyzer."""

from __future__ import annotations

from repohealth.engine import analyze_dependencies
from tests._fixtures.repo_builder import make_snapshot


def _signal(result, name):
    return next(signal for signal in result.signals if signal.name == name)


def test_polyglot_repository_scores_100() -> None:
    files, tree = make_snapshot(
        paths=[
            "package.json",
            "package-lock.json",
            "pyproject.toml",
            "src/index.js",
            "src/app.py",
            "tests/test_app.py",
        ]
    )

    result = analyze_dependencies(files, tree)

    assert result.score == 100
    assert _signal(result, "Dependency manifest").details == "package.json, pyproject.toml"
    assert _signal(result, "Lockfile present").details == "package-lock.json"
    assert _signal(result, "Reasonable repository size").details == "6 tree entries"


def test_single_manifest_without_lockfile() -> None:
    files, tree = make_snapshot(paths=["go.mod", "main.go"])

    result = analyze_dependencies(files, tree)

    assert result.score == 30
    assert _signal(result, "Multiple dependency manifests").found is False


def test_manifest_only_in_subdirectory_is_ignored() -> None:
    files, tree = make_snapshot(paths=["web/package.json"])

    assert _signal(analyze_dependencies(files, tree), "Dependency manifest").found is False


def test_size_bounds_are_exclusive() -> None:
    _, five = make_snapshot(paths=[f"f{index}.txt" for index in range(5)])
    _, six = make_snapshot(paths=[f"f{index}.txt" for index in range(6)])

    assert _signal(analyze_dependencies([], five), "Reasonable repository size").found is False
    assert _signal(analyze_dependencies([], six), "Reasonable repository size").found is True


def test_empty_input_scores_zero() -> None:
    result = analyze_dependencies([], [])

    assert result.score == 0
    assert not any(signal.found for signal in result.signals)
