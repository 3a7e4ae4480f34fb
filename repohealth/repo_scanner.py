"""Local snapshot provider: tree manifest plus a bounded set of file contents."""

from __future__ import annotations

import os
import re
from collections import Counter
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .config import DEFAULT_MAX_FILES
from .evidence import ISSUE_TEMPLATE_DIR, WORKFLOW_DIR
from .logging import get_logger
from .models import FileContent, ParsedRepo, RepoInfo, TreeEntry

logger = get_logger("scanner")

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}

_LANGUAGE_BY_SUFFIX = {
    ".py": "Python",
    ".pyi": "Python",
    ".js": "JavaScript",
    ".mjs": "JavaScript",
    ".jsx": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".java": "Java",
    ".kt": "Kotlin",
    ".kts": "Kotlin",
    ".go": "Go",
    ".rs": "Rust",
    ".rb": "Ruby",
    ".php": "PHP",
    ".cs": "C#",
    ".c": "C",
    ".h": "C",
    ".cpp": "C++",
    ".hpp": "C++",
    ".cc": "C++",
    ".swift": "Swift",
    ".m": "Objective-C",
    ".scala": "Scala",
    ".ex": "Elixir",
    ".exs": "Elixir",
    ".dart": "Dart",
    ".sh": "Shell",
}

# Fetched first, in this order, when present (matched case-insensitively).
_TARGET_FILES: Tuple[str, ...] = (
    "README.md",
    "README.rst",
    "README.txt",
    "README",
    "CONTRIBUTING.md",
    ".github/CONTRIBUTING.md",
    "docs/CONTRIBUTING.md",
    "CODE_OF_CONDUCT.md",
    ".github/CODE_OF_CONDUCT.md",
    "SECURITY.md",
    ".github/SECURITY.md",
    "SUPPORT.md",
    ".github/SUPPORT.md",
    "LICENSE",
    "LICENSE.md",
    "LICENSE.txt",
    "COPYING",
    "LICENCE",
    "package.json",
    ".github/dependabot.yml",
    ".github/dependabot.yaml",
)

_MAX_CONTENT_BYTES = 512 * 1024

# (required markers, SPDX id); every marker must appear, first row wins.
_LICENSE_MARKERS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("GNU AFFERO GENERAL PUBLIC LICENSE",), "AGPL-3.0"),
    (("GNU LESSER GENERAL PUBLIC LICENSE", "Version 3"), "LGPL-3.0"),
    (("GNU LESSER GENERAL PUBLIC LICENSE", "Version 2.1"), "LGPL-2.1"),
    (("GNU LESSER GENERAL PUBLIC LICENSE",), "LGPL-3.0"),
    (("GNU GENERAL PUBLIC LICENSE", "Version 3"), "GPL-3.0"),
    (("GNU GENERAL PUBLIC LICENSE", "Version 2"), "GPL-2.0"),
    (("GNU GENERAL PUBLIC LICENSE",), "GPL-3.0"),
    (("Mozilla Public License", "2.0"), "MPL-2.0"),
    (("Apache License", "Version 2.0"), "Apache-2.0"),
    (("MIT License",), "MIT"),
    (("Permission is hereby granted, free of charge",), "MIT"),
    (("ISC License",), "ISC"),
    (("This is free and unencumbered software",), "Unlicense"),
    (("CC0 1.0 Universal",), "CC0-1.0"),
    (("Redistribution and use in source and binary forms", "Neither the name"), "BSD-3-Clause"),
    (("Redistribution and use in source and binary forms",), "BSD-2-Clause"),
)

_REMOTE_URL = re.compile(r"^\s*url\s*=\s*(?P<url>\S+)\s*$", re.MULTILINE)
_REMOTE_SLUG = re.compile(r"[:/](?P<owner>[^/:]+)/(?P<repo>[^/]+?)(?:\.git)?/?$")


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .repohealth.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


@dataclass
class RepoSnapshot:
    """Everything the analysis pipeline needs about one local checkout."""

    root: Path
    parsed_repo: ParsedRepo
    repo_info: RepoInfo
    tree: List[TreeEntry] = field(default_factory=list)
    files: List[FileContent] = field(default_factory=list)


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern.rstrip("/")

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def _walk(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Tuple[str, bool, Path]]:
    """Yield ``(relative path, is_dir, absolute path)`` in sorted walk order."""
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept_dirs = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            kept_dirs.append(name)
            yield rel_path, True, current_dir / name
        dirnames[:] = kept_dirs

        for filename in sorted(filenames):
            if filename in _EXCLUDED_FILES:
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield rel_path, False, current_dir / filename


def select_content_paths(blobs: Sequence[str], max_files: int) -> List[str]:
    """Choose which blobs to read: well-known files, then workflows, then issue templates."""
    by_lower: Dict[str, str] = {}
    for path in blobs:
        by_lower.setdefault(path.lower(), path)

    selected: List[str] = []
    seen = set()

    def _take(path: str) -> None:
        if path not in seen:
            seen.add(path)
            selected.append(path)

    for target in _TARGET_FILES:
        actual = by_lower.get(target.lower())
        if actual is not None:
            _take(actual)
    for path in blobs:
        if path.startswith(WORKFLOW_DIR):
            _take(path)
    for path in blobs:
        if path.startswith(ISSUE_TEMPLATE_DIR):
            _take(path)

    return selected[:max_files]


def infer_language(blobs: Sequence[str]) -> Optional[str]:
    """Most common programming language by file suffix; ties go to the first seen."""
    counts: Counter[str] = Counter()
    for path in blobs:
        language = _LANGUAGE_BY_SUFFIX.get(Path(path).suffix.lower())
        if language:
            counts[language] += 1
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def infer_license(text: Optional[str]) -> Optional[str]:
    """Best-effort SPDX id from license text; ``NOASSERTION`` when unrecognised."""
    if text is None:
        return None
    for markers, spdx in _LICENSE_MARKERS:
        if all(marker in text for marker in markers):
            return spdx
    return "NOASSERTION"


def read_remote_slug(root: Path) -> Optional[Tuple[str, str]]:
    """``(owner, repo)`` from the first remote URL in ``.git/config``, if any."""
    config_path = root / ".git" / "config"
    try:
        text = config_path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    for match in _REMOTE_URL.finditer(text):
        slug = _REMOTE_SLUG.search(match.group("url"))
        if slug:
            return slug.group("owner"), slug.group("repo")
    return None


class RepoScanner:
    """Walks a local checkout to produce a repository snapshot."""

    def __init__(
        self,
        *,
        max_files: int = DEFAULT_MAX_FILES,
        exclude_paths: Sequence[str] = (),
    ) -> None:
        self.max_files = max_files
        self.exclude_paths = list(exclude_paths)

    def scan(
        self,
        root: str | Path,
        *,
        owner: Optional[str] = None,
        repo: Optional[str] = None,
        license: Optional[str] = None,
        language: Optional[str] = None,
    ) -> RepoSnapshot:
        """Return the tree and the bounded content set for ``root``.

        ``license`` and ``language`` override the values inferred from the
        checkout.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        rules = _parse_gitignore(root_path / ".gitignore")
        for pattern in self.exclude_paths:
            rule = build_ignore_rule(pattern)
            if rule is not None:
                rules.append(rule)

        tree: List[TreeEntry] = []
        blobs: List[str] = []
        absolute: Dict[str, Path] = {}
        for rel_path, is_dir, path in _walk(root_path, rules):
            if is_dir:
                tree.append(TreeEntry.directory(rel_path))
                continue
            try:
                size = path.stat().st_size
            except OSError as exc:
                logger.debug("Skipping %s: %s", rel_path, exc)
                continue
            tree.append(TreeEntry.blob(rel_path, size=size))
            blobs.append(rel_path)
            absolute[rel_path] = path

        files: List[FileContent] = []
        for rel_path in select_content_paths(blobs, self.max_files):
            content = _read_text(absolute[rel_path])
            if content is None:
                logger.debug("Skipping unreadable file %s", rel_path)
                continue
            files.append(FileContent(path=rel_path, content=content, size=len(content)))

        logger.debug(
            "Scanned %s: %d tree entries, %d blobs, %d files read",
            root_path,
            len(tree),
            len(blobs),
            len(files),
        )

        slug = read_remote_slug(root_path)
        resolved_owner = owner or (slug[0] if slug else "local")
        resolved_repo = repo or (slug[1] if slug else root_path.name)

        license_text = _license_text(files)
        repo_info = RepoInfo(
            owner=resolved_owner,
            repo=resolved_repo,
            license=license if license is not None else infer_license(license_text),
            language=language if language is not None else infer_language(blobs),
            size=sum(entry.size or 0 for entry in tree) // 1024,
        )

        return RepoSnapshot(
            root=root_path,
            parsed_repo=ParsedRepo(owner=resolved_owner, repo=resolved_repo),
            repo_info=repo_info,
            tree=tree,
            files=files,
        )


def _license_text(files: Sequence[FileContent]) -> Optional[str]:
    for item in files:
        if "/" not in item.path and item.path.upper().startswith(("LICENSE", "LICENCE", "COPYING")):
            return item.content
    return None


def _read_text(path: Path) -> Optional[str]:
    try:
        with path.open("rb") as handle:
            raw = handle.read(_MAX_CONTENT_BYTES)
    except OSError:
        return None
    if b"\x00" in raw:
        return None
    return raw.decode("utf-8", errors="replace")


__all__ = [
    "IgnoreRule",
    "RepoScanner",
    "RepoSnapshot",
    "build_ignore_rule",
    "infer_language",
    "infer_license",
    "read_remote_slug",
    "select_content_paths",
]
