"""Dependency management analyzer implementation."""

from __future__ import annotations

from typing import List, Optional

from ..evidence import Evidence
from ..models import CategoryKey, RepoInfo
from .base import Analyzer, Finding, PointRule

MANIFEST_FILES = (
    "package.json",
    "Cargo.toml",
    "go.mod",
    "requirements.txt",
    "Pipfile",
    "pyproject.toml",
    "setup.py",
    "setup.cfg",
    "Gemfile",
    "composer.json",
    "pom.xml",
    "build.gradle",
    "build.gradle.kts",
    "mix.exs",
    "pubspec.yaml",
    "Package.swift",
)

LOCKFILES = (
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "Cargo.lock",
    "go.sum",
    "Gemfile.lock",
    "poetry.lock",
    "Pipfile.lock",
    "composer.lock",
)

MIN_TREE_ENTRIES = 5
MAX_TREE_ENTRIES = 50_000


def present_manifests(evidence: Evidence) -> List[str]:
    return [name for name in MANIFEST_FILES if evidence.has(name)]


def _manifest(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
    manifests = present_manifests(evidence)
    return bool(manifests), ", ".join(manifests) or None


def _lockfile(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
    lockfiles = [name for name in LOCKFILES if evidence.has(name)]
    return bool(lockfiles), ", ".join(lockfiles) or None


def _reasonable_size(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
    size = evidence.tree_size
    return MIN_TREE_ENTRIES < size < MAX_TREE_ENTRIES, f"{size} tree entries"


def _multiple_manifests(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
    count = len(present_manifests(evidence))
    return count > 1, f"{count} manifest(s)" if count else None


class DependenciesAnalyzer(Analyzer):
    """Scores declared, locked and well-scoped dependency management."""

    key = CategoryKey.DEPENDENCIES
    rules = (
        PointRule("Dependency manifest", 30, _manifest),
        PointRule("Lockfile present", 25, _lockfile),
        PointRule("Reasonable repository size", 20, _reasonable_size),
        PointRule("Multiple dependency manifests", 25, _multiple_manifests),
    )


__all__ = ["DependenciesAnalyzer", "LOCKFILES", "MANIFEST_FILES", "present_manifests"]
