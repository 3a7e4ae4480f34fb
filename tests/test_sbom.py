"""Tests for the CycloneDX-style SBOM exporter."""

from __future__ import annotations

import json
import re

import pytest

from repohealth import __version__
from repohealth.engine import run_analysis
from repohealth.export import render_report
from repohealth.export.sbom import build_sbom, serial_number
from repohealth.models import ParsedRepo, RepoInfo, TechCategory, TechStackItem
from tests._fixtures.repo_builder import make_snapshot


def _report(frozen_now, *, paths=(), branch=None, now=None):
    files, tree = make_snapshot(paths=paths)
    info = RepoInfo(owner="acme", repo="demo", default_branch="main")
    return run_analysis(ParsedRepo("acme", "demo", branch=branch), info, tree, files, now=now or frozen_now)


def _component(sbom, name):
    return next(component for component in sbom["components"] if component["name"] == name)


def test_document_header_and_metadata(frozen_now) -> None:
    sbom = build_sbom(_report(frozen_now))

    assert sbom["bomFormat"] == "CycloneDX"
    assert sbom["specVersion"] == "1.5"
    assert sbom["version"] == 1
    assert re.fullmatch(r"urn:uuid:[0-9a-f]{8}-[0-9a-f]{4}-5[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}", sbom["serialNumber"])
    assert sbom["metadata"]["timestamp"] == "2024-05-01T12:00:00.000Z"
    assert sbom["metadata"]["tools"] == [
        {"vendor": "repohealth", "name": "repohealth analyzer", "version": __version__}
    ]
    assert sbom["metadata"]["component"] == {"type": "application", "name": "acme/demo", "version": "main"}


def test_explicit_branch_is_the_component_version(frozen_now) -> None:
    sbom = build_sbom(_report(frozen_now, branch="develop"))

    assert sbom["metadata"]["component"]["version"] == "develop"


def test_serial_number_is_stable_per_report(frozen_now) -> None:
    first = _report(frozen_now)
    later = _report(frozen_now, now=frozen_now.replace(hour=13))

    assert serial_number(first) == serial_number(_report(frozen_now))
    assert serial_number(first) != serial_number(later)


@pytest.mark.parametrize(
    ("category", "component_type"),
    [
        (TechCategory.FRAMEWORK, "framework"),
        (TechCategory.PLATFORM, "application"),
        (TechCategory.LANGUAGE, "library"),
        (TechCategory.TOOL, "library"),
        (TechCategory.DATABASE, "library"),
    ],
)
def test_tech_stack_category_maps_to_component_type(frozen_now, category, component_type) -> None:
    report = _report(frozen_now)
    report.tech_stack = [TechStackItem("Node.js", category)]

    component = _component(build_sbom(report), "Node.js")

    assert component == {
        "type": component_type,
        "name": "Node.js",
        "group": category.value,
        "bom-ref": "techstack-node-js",
    }


def test_manifests_and_lockfiles_become_components(frozen_now) -> None:
    report = _report(frozen_now, paths=["package.json", "requirements.txt", "package-lock.json", "yarn.lock"])
    report.tech_stack = []

    sbom = build_sbom(report)

    assert [component["name"] for component in sbom["components"]] == [
        "package.json",
        "requirements.txt",
        "package-lock.json",
        "yarn.lock",
    ]
    assert _component(sbom, "package.json")["bom-ref"] == "manifest-package-json"
    assert _component(sbom, "yarn.lock")["bom-ref"] == "lockfile-yarn-lock"


def test_components_are_deduplicated_by_name(frozen_now) -> None:
    report = _report(frozen_now, paths=["package.json", "yarn.lock"])
    report.tech_stack = []
    report.find_signal("Lockfile present").details = "package.json"

    names = [component["name"] for component in build_sbom(report)["components"]]

    assert names == ["package.json"]


def test_empty_repository_has_no_components(frozen_now) -> None:
    assert build_sbom(_report(frozen_now))["components"] == []


def test_sbom_is_an_export_format(frozen_now) -> None:
    report = _report(frozen_now, paths=["go.mod"])

    text = render_report(report, "sbom")

    assert text.endswith("\n")
    assert json.loads(text) == build_sbom(report)
