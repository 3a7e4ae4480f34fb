"""Code quality tooling analyzer implementation."""

from __future__ import annotations

from typing import Dict, List, Optional

from ..evidence import WORKFLOW_DIR, Evidence
from ..models import CategoryKey, RepoInfo
from .base import Analyzer, Finding, PointRule
from .utils import compile_patterns, lookup, path_exists

LINTER_FILES: Dict[str, str] = {
    ".eslintrc.json": "ESLint",
    ".eslintrc.js": "ESLint",
    ".eslintrc.yml": "ESLint",
    ".eslintrc": "ESLint",
    "eslint.config.js": "ESLint",
    "eslint.config.mjs": "ESLint",
    ".flake8": "Flake8",
    ".pylintrc": "Pylint",
    "ruff.toml": "Ruff",
    ".ruff.toml": "Ruff",
    "clippy.toml": "Clippy",
    ".rubocop.yml": "RuboCop",
    ".golangci.yml": "golangci-lint",
    "biome.json": "Biome",
    "deno.json": "Deno",
}

FORMATTER_FILES: Dict[str, str] = {
    ".prettierrc": "Prettier",
    ".prettierrc.json": "Prettier",
    ".prettierrc.js": "Prettier",
    "prettier.config.js": "Prettier",
    ".prettierrc.yaml": "Prettier",
    "rustfmt.toml": "rustfmt",
    ".clang-format": "clang-format",
    "biome.json": "Biome",
    ".editorconfig": "EditorConfig",
}

TYPE_SYSTEM_FILES: Dict[str, str] = {
    "tsconfig.json": "TypeScript",
    "mypy.ini": "mypy",
    "pyrightconfig.json": "Pyright",
    ".flowconfig": "Flow",
}

HOOK_FILES: Dict[str, str] = {
    ".husky/pre-commit": "Husky",
    ".husky": "Husky",
    ".pre-commit-config.yaml": "pre-commit",
    ".lefthook.yml": "Lefthook",
    "lefthook.yml": "Lefthook",
}

TEST_DIR_NAMES = ("test", "tests", "__tests__", "spec", "src/test", "src/__tests__")

TEST_FILE_PATTERNS = tuple(
    zip(
        compile_patterns(
            (
                r"\.test\.[jt]sx?$",
                r"\.spec\.[jt]sx?$",
                r"_test\.go$",
                r"_test\.rs$",
                r"test_.*\.py$",
                r"_spec\.rb$",
            )
        ),
        (
            "JS/TS test files",
            "JS/TS spec files",
            "Go test files",
            "Rust test files",
            "Python test files",
            "Ruby spec files",
        ),
    )
)

CI_TEST_COMMANDS: Dict[str, str] = {
    "npm test": "npm test",
    "npm run test": "npm run test",
    "yarn test": "yarn test",
    "pnpm test": "pnpm test",
    "pytest": "pytest",
    "cargo test": "cargo test",
    "go test": "go test",
    "jest": "Jest",
    "vitest": "Vitest",
    "make test": "make test",
    "bundle exec rspec": "RSpec",
    "phpunit": "PHPUnit",
}


def detected_test_dirs(evidence: Evidence) -> List[str]:
    return [name for name in TEST_DIR_NAMES if name in evidence.directories]


def _hooks(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
    for path, tool in HOOK_FILES.items():
        if evidence.has(path) or evidence.has_directory(path):
            return True, tool
    return False, None


def _tests(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
    test_dirs = detected_test_dirs(evidence)

    count = 0
    first_label = ""
    for pattern, label in TEST_FILE_PATTERNS:
        matches = sum(1 for path in evidence.blobs if pattern.search(path))
        if matches:
            count += matches
            first_label = first_label or label

    if count:
        return True, f"{count} test files found ({first_label})"
    if test_dirs:
        return True, f"{', '.join(test_dirs)} directory"
    return False, None


def _ci_runs_tests(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
    for _path, text in evidence.workflows():
        for command, label in CI_TEST_COMMANDS.items():
            if command in text:
                return True, f"via {label}"
    return False, None


class CodeQualityAnalyzer(Analyzer):
    """Scores linting, formatting, typing, hooks and automated tests."""

    key = CategoryKey.CODE_QUALITY
    rules = (
        PointRule("Linter configured", 20, lookup(LINTER_FILES)),
        PointRule("Formatter configured", 15, lookup(FORMATTER_FILES)),
        PointRule("Type system", 15, lookup(TYPE_SYSTEM_FILES)),
        PointRule("Git hooks", 10, _hooks),
        PointRule("Tests present", 20, _tests),
        PointRule("CI runs tests", 10, _ci_runs_tests),
        PointRule("EditorConfig", 10, path_exists(".editorconfig")),
    )


__all__ = [
    "CI_TEST_COMMANDS",
    "CodeQualityAnalyzer",
    "FORMATTER_FILES",
    "LINTER_FILES",
    "TEST_DIR_NAMES",
    "TYPE_SYSTEM_FILES",
]
