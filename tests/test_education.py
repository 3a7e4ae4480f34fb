"""Tests for per-signal guidance."""

from __future__ import annotations

from urllib.parse import unquote

from repohealth.analyzers import discover_analyzers
from repohealth.contributor import POINTS
from repohealth.education import get_fix_url, get_guidance, load_guidance, recommendations
from repohealth.engine import run_analysis
from repohealth.models import ParsedRepo, RepoInfo
from repohealth.starter_files import render_starter_file
from tests._fixtures.repo_builder import make_snapshot


def test_every_category_signal_has_guidance() -> None:
    guidance = load_guidance()

    for analyzer in discover_analyzers():
        for rule in analyzer.rules:
            assert rule.signal in guidance, rule.signal


def test_contributor_signals_with_guidance_are_known() -> None:
    guidance = load_guidance()

    assert "Setup instructions in README" in guidance
    assert "Setup instructions in README" in POINTS


def test_fix_url_is_formatted_and_quoted() -> None:
    url = get_fix_url("acme", "demo", "release/1.0", "SECURITY.md")

    assert url == "https://github.com/acme/demo/new/release%2F1.0?filename=SECURITY.md"


def test_fix_url_absent_for_non_file_signals() -> None:
    assert get_guidance("Reasonable repository size") is not None
    assert get_fix_url("acme", "demo", "main", "Reasonable repository size") is None
    assert get_fix_url("acme", "demo", "main", "Not a real signal") is None


def test_recommendations_cover_missing_signals_in_category_order(frozen_now) -> None:
    files, tree = make_snapshot({"README.md": "# Demo\n"})
    report = run_analysis(
        ParsedRepo("acme", "demo", branch="dev"),
        RepoInfo(owner="acme", repo="demo"),
        tree,
        files,
        now=frozen_now,
    )

    items = recommendations(report)

    assert items[0].signal == "CONTRIBUTING.md"
    assert items[0].fix_url == "https://github.com/acme/demo/new/dev?filename=CONTRIBUTING.md"
    assert "README exists" not in {item.signal for item in items}
    assert len(items) == sum(len(category.missing_signals()) for category in report.categories)


def test_guidance_exposes_the_file_its_fix_link_creates() -> None:
    assert get_guidance("Dependabot configured").filename == ".github/dependabot.yml"
    assert get_guidance("Reasonable repository size").filename is None


def test_prefilled_fix_url_carries_starter_content() -> None:
    plain = get_fix_url("acme", "demo", "main", "SECURITY.md")
    prefilled = get_fix_url("acme", "demo", "main", "SECURITY.md", prefill=True)

    assert prefilled.startswith(plain + "&value=")
    assert unquote(prefilled.split("&value=", 1)[1]) == render_starter_file(
        "SECURITY.md", owner="acme", repo="demo", branch="main"
    ).content


def test_prefill_is_ignored_without_a_starter() -> None:
    plain = get_fix_url("acme", "demo", "main", "README exists")

    assert get_fix_url("acme", "demo", "main", "README exists", prefill=True) == plain


def test_recommendations_name_available_starter_files(frozen_now) -> None:
    report = run_analysis(
        ParsedRepo("acme", "demo"), RepoInfo(owner="acme", repo="demo"), [], [], now=frozen_now
    )

    starters = {item.signal: item.starter_file for item in recommendations(report)}

    assert starters["SECURITY.md"] == "SECURITY.md"
    assert starters["README exists"] is None
