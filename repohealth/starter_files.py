"""Boilerplate content for commonly missing repository files.

Each supported path maps to a Jinja2 template under ``starter_templates/``.
Templates see ``owner``, ``repo``, ``branch`` and ``ecosystems`` (dependabot
package ecosystems derived from the detected dependency manifests).
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Sequence

from jinja2 import Environment, FileSystemLoader

from .models import AnalysisReport

_TEMPLATES_DIR = Path(__file__).with_name("starter_templates")

STARTER_FILES: Dict[str, str] = {
    "SECURITY.md": "SECURITY.md.j2",
    "CODE_OF_CONDUCT.md": "CODE_OF_CONDUCT.md.j2",
    "CONTRIBUTING.md": "CONTRIBUTING.md.j2",
    ".github/PULL_REQUEST_TEMPLATE.md": "PULL_REQUEST_TEMPLATE.md.j2",
    ".github/ISSUE_TEMPLATE/bug_report.md": "bug_report.md.j2",
    ".github/FUNDING.yml": "FUNDING.yml.j2",
    ".github/dependabot.yml": "dependabot.yml.j2",
    ".editorconfig": "editorconfig.j2",
}

# Manifest file -> dependabot package-ecosystem.
MANIFEST_ECOSYSTEMS: Dict[str, str] = {
    "package.json": "npm",
    "Cargo.toml": "cargo",
    "go.mod": "gomod",
    "requirements.txt": "pip",
    "Pipfile": "pip",
    "pyproject.toml": "pip",
    "setup.py": "pip",
    "setup.cfg": "pip",
    "Gemfile": "bundler",
    "composer.json": "composer",
    "pom.xml": "maven",
    "build.gradle": "gradle",
    "build.gradle.kts": "gradle",
    "mix.exs": "mix",
    "pubspec.yaml": "pub",
    "Package.swift": "swift",
}


@dataclass(frozen=True)
class StarterFile:
    filename: str
    content: str


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def starter_filenames() -> List[str]:
    return list(STARTER_FILES)


def ecosystems_for(manifests: Sequence[str]) -> List[str]:
    """Distinct dependabot ecosystems for ``manifests``, in first-seen order."""
    ecosystems: List[str] = []
    for manifest in manifests:
        ecosystem = MANIFEST_ECOSYSTEMS.get(manifest)
        if ecosystem and ecosystem not in ecosystems:
            ecosystems.append(ecosystem)
    return ecosystems


def render_starter_file(
    filename: str,
    *,
    owner: str = "OWNER",
    repo: str = "REPO",
    branch: str = "main",
    ecosystems: Sequence[str] = (),
) -> StarterFile:
    """Render the boilerplate for ``filename``; unknown names raise ``ValueError``."""
    template_name = STARTER_FILES.get(filename)
    if template_name is None:
        available = ", ".join(STARTER_FILES)
        raise ValueError(f"No starter template for '{filename}' (available: {available})")
    content = _environment().get_template(template_name).render(
        owner=owner,
        repo=repo,
        branch=branch,
        ecosystems=list(ecosystems),
    )
    return StarterFile(filename=filename, content=content)


def starter_file_for_report(report: AnalysisReport, filename: str) -> StarterFile:
    """Render ``filename`` with the repository details of ``report``."""
    manifest_signal = report.find_signal("Dependency manifest")
    manifests = (
        manifest_signal.details.split(", ")
        if manifest_signal is not None and manifest_signal.details
        else []
    )
    return render_starter_file(
        filename,
        owner=report.repo.owner,
        repo=report.repo.repo,
        branch=report.repo.branch or report.repo_info.default_branch,
        ecosystems=ecosystems_for(manifests),
    )


__all__ = [
    "MANIFEST_ECOSYSTEMS",
    "STARTER_FILES",
    "StarterFile",
    "ecosystems_for",
    "render_starter_file",
    "starter_file_for_report",
    "starter_filenames",
]
