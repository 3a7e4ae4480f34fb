"""Tests for boilerplate starter files."""

from __future__ import annotations

import pytest

from repohealth.engine import run_analysis
from repohealth.models import ParsedRepo, RepoInfo
from repohealth.starter_files import (
    STARTER_FILES,
    ecosystems_for,
    render_starter_file,
    starter_file_for_report,
    starter_filenames,
)
from tests._fixtures.repo_builder import make_snapshot

EXPECTED = [
    "SECURITY.md",
    "CODE_OF_CONDUCT.md",
    "CONTRIBUTING.md",
    ".github/PULL_REQUEST_TEMPLATE.md",
    ".github/ISSUE_TEMPLATE/bug_report.md",
    ".github/FUNDING.yml",
    ".github/dependabot.yml",
    ".editorconfig",
]


def test_every_common_file_has_a_starter() -> None:
    assert starter_filenames() == EXPECTED


@pytest.mark.parametrize("filename", EXPECTED)
def test_each_starter_renders_non_empty_content(filename) -> None:
    starter = render_starter_file(filename)

    assert starter.filename == filename
    assert starter.content.strip()
    assert starter.content.endswith("\n")
    assert "{{" not in starter.content


@pytest.mark.parametrize(
    ("filename", "snippets"),
    [
        ("SECURITY.md", ["Security Policy", "Reporting a Vulnerability"]),
        ("CODE_OF_CONDUCT.md", ["Code of Conduct", "Our Pledge"]),
        ("CONTRIBUTING.md", ["Contributing", "Pull Request"]),
        (".github/dependabot.yml", ["version: 2", "package-ecosystem"]),
        (".editorconfig", ["root = true", "indent_style"]),
    ],
)
def test_starter_content_matches_its_purpose(filename, snippets) -> None:
    content = render_starter_file(filename).content

    for snippet in snippets:
        assert snippet in content


def test_repository_details_are_filled_in() -> None:
    content = render_starter_file("CONTRIBUTING.md", owner="acme", repo="demo", branch="trunk").content

    assert "git clone https://github.com/YOUR_USERNAME/demo.git" in content
    assert "against the `trunk` branch" in content
    assert "https://github.com/acme/demo/issues" in content


def test_unknown_filename_is_rejected() -> None:
    with pytest.raises(ValueError, match="No starter template"):
        render_starter_file("README.md")


def test_ecosystems_are_distinct_and_ordered() -> None:
    assert ecosystems_for(["pyproject.toml", "package.json", "requirements.txt", "unknown.lock"]) == ["pip", "npm"]


def test_dependabot_starter_follows_detected_manifests(frozen_now) -> None:
    files, tree = make_snapshot(paths=["package.json", "go.mod"])
    report = run_analysis(
        ParsedRepo("acme", "demo"), RepoInfo(owner="acme", repo="demo"), tree, files, now=frozen_now
    )

    content = starter_file_for_report(report, ".github/dependabot.yml").content

    assert content.count("package-ecosystem") == 3
    assert 'package-ecosystem: "github-actions"' in content
    assert content.index('"npm"') < content.index('"gomod"')


def test_dependabot_starter_without_manifests_only_tracks_actions() -> None:
    content = render_starter_file(".github/dependabot.yml").content

    assert content.count("package-ecosystem") == 1
    assert set(STARTER_FILES) == set(EXPECTED)
