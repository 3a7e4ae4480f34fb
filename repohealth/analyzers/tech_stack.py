"""Technology stack detection from manifest files."""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Sequence, Tuple

from ..evidence import Evidence
from ..logging import get_logger
from ..models import TechCategory, TechStackItem

logger = get_logger("tech_stack")

# Ordered: detection output follows this order.
MANIFEST_TECHNOLOGIES: Tuple[Tuple[str, str, TechCategory], ...] = (
    ("package.json", "Node.js", TechCategory.PLATFORM),
    ("tsconfig.json", "TypeScript", TechCategory.LANGUAGE),
    ("Cargo.toml", "Rust", TechCategory.LANGUAGE),
    ("go.mod", "Go", TechCategory.LANGUAGE),
    ("requirements.txt", "Python", TechCategory.LANGUAGE),
    ("pyproject.toml", "Python", TechCategory.LANGUAGE),
    ("Pipfile", "Python", TechCategory.LANGUAGE),
    ("setup.py", "Python", TechCategory.LANGUAGE),
    ("Gemfile", "Ruby", TechCategory.LANGUAGE),
    ("composer.json", "PHP", TechCategory.LANGUAGE),
    ("pom.xml", "Java/JVM", TechCategory.LANGUAGE),
    ("build.gradle", "Java/JVM", TechCategory.LANGUAGE),
    ("build.gradle.kts", "Java/JVM", TechCategory.LANGUAGE),
    ("mix.exs", "Elixir", TechCategory.LANGUAGE),
    ("pubspec.yaml", "Dart", TechCategory.LANGUAGE),
    ("Package.swift", "Swift", TechCategory.LANGUAGE),
    ("Dockerfile", "Docker", TechCategory.PLATFORM),
    ("docker-compose.yml", "Docker Compose", TechCategory.TOOL),
)

PACKAGE_JSON_TECHNOLOGIES: Tuple[Tuple[Sequence[str], str, TechCategory], ...] = (
    (("react", "react-dom"), "React", TechCategory.FRAMEWORK),
    (("vue",), "Vue", TechCategory.FRAMEWORK),
    (("@angular/core",), "Angular", TechCategory.FRAMEWORK),
    (("svelte",), "Svelte", TechCategory.FRAMEWORK),
    (("next",), "Next.js", TechCategory.FRAMEWORK),
    (("express",), "Express", TechCategory.FRAMEWORK),
    (("fastify",), "Fastify", TechCategory.FRAMEWORK),
    (("nestjs", "@nestjs/core"), "NestJS", TechCategory.FRAMEWORK),
    (("typescript",), "TypeScript", TechCategory.LANGUAGE),
    (("tailwindcss",), "Tailwind CSS", TechCategory.TOOL),
    (("webpack",), "Webpack", TechCategory.TOOL),
    (("vite",), "Vite", TechCategory.TOOL),
    (("jest", "vitest", "mocha"), "Test Framework", TechCategory.TOOL),
)


def detect_tech_stack(evidence: Evidence) -> List[TechStackItem]:
    """Return technologies implied by manifests, deduplicated by name."""
    items: List[TechStackItem] = []
    dependencies = _package_dependencies(evidence.content("package.json"))
    for packages, name, category in PACKAGE_JSON_TECHNOLOGIES:
        if any(package in dependencies for package in packages):
            _append_unique(items, name, category)

    for filename, name, category in MANIFEST_TECHNOLOGIES:
        if evidence.has(filename):
            _append_unique(items, name, category)

    return items


def merge_primary_language(
    items: Sequence[TechStackItem], language: Optional[str]
) -> List[TechStackItem]:
    """Put the declared primary language first unless it is already listed."""
    merged = list(items)
    if not language:
        return merged
    wanted = language.lower()
    if any(item.name.lower() == wanted for item in merged):
        return merged
    merged.insert(0, TechStackItem(name=language, category=TechCategory.LANGUAGE))
    return merged


def _append_unique(items: List[TechStackItem], name: str, category: TechCategory) -> None:
    lowered = name.lower()
    if any(item.name.lower() == lowered for item in items):
        return
    items.append(TechStackItem(name=name, category=category))


def _package_dependencies(text: Optional[str]) -> Dict[str, object]:
    if not text:
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.debug("package.json is not valid JSON; skipping framework detection")
        return {}
    if not isinstance(data, dict):
        return {}

    dependencies: Dict[str, object] = {}
    for key in ("dependencies", "devDependencies"):
        section = data.get(key)
        if isinstance(section, dict):
            dependencies.update(section)
    return dependencies


__all__ = [
    "MANIFEST_TECHNOLOGIES",
    "PACKAGE_JSON_TECHNOLOGIES",
    "detect_tech_stack",
    "merge_primary_language",
]
