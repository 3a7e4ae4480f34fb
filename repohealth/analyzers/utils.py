"""Reusable predicate shapes shared by the category analyzers."""

from __future__ import annotations

import re
from typing import Callable, Iterable, Mapping, Optional, Pattern, Sequence

from ..evidence import Evidence
from ..models import RepoInfo
from .base import Check, Finding

# Path existence


def path_exists(*candidates: str, canonical: Sequence[str] = ()) -> Check:
    """Any candidate present (case-insensitive).

    When the match is a differently-cased spelling of one of the ``canonical``
    names, the signal details carry a note about the conventional spelling.
    """

    def _check(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
        actual = evidence.find(*candidates)
        if actual is None:
            return False, None
        return True, casing_note(actual, canonical)

    return _check


def casing_note(actual: str, canonical: Sequence[str]) -> Optional[str]:
    for name in canonical:
        if actual != name and actual.lower() == name.lower():
            return f'Found as "{actual}" - standard convention is "{name}"'
    return None


def directory_exists(*names: str) -> Check:
    def _check(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
        return evidence.has_directory(*names), None

    return _check


def blob_matches(predicate: Callable[[str], bool]) -> Check:
    """Any blob path satisfying ``predicate``."""

    def _check(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
        return any(predicate(path) for path in evidence.blobs), None

    return _check


def no_blob_matches(predicate: Callable[[str], bool]) -> Check:
    def _check(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
        return not any(predicate(path) for path in evidence.blobs), None

    return _check


# Prefix / directory counting


def prefix_count(prefix: str, details: str) -> Check:
    """Blobs under ``prefix``; ``details`` is formatted with ``count``."""

    def _check(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
        count = len(evidence.prefix_paths(prefix))
        return count > 0, details.format(count=count)

    return _check


# Content matching


def contains_any(text: str, needles: Iterable[str]) -> bool:
    return any(needle in text for needle in needles)


def content_under(
    prefix: str,
    *groups: Sequence[str],
    path_keywords: Sequence[str] = (),
) -> Check:
    """A single file under ``prefix`` satisfies every keyword group.

    Each group is an OR of literal substrings; groups are ANDed. A file also
    matches when its lower-cased path contains one of ``path_keywords``.
    """

    def _check(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
        for path, text in evidence.contents_under(prefix):
            lowered_path = path.lower()
            if path_keywords and any(word in lowered_path for word in path_keywords):
                return True, None
            if groups and all(contains_any(text, group) for group in groups):
                return True, None
        return False, None

    return _check


# Lookup tables


def first_lookup(evidence: Evidence, table: Mapping[str, str]) -> Optional[str]:
    """Return the mapped name of the first table key present in the snapshot."""
    for filename, name in table.items():
        if evidence.has(filename):
            return name
    return None


def lookup(table: Mapping[str, str]) -> Check:
    def _check(evidence: Evidence, _: Optional[RepoInfo]) -> Finding:
        name = first_lookup(evidence, table)
        return name is not None, name

    return _check


def compile_patterns(patterns: Iterable[str]) -> tuple[Pattern[str], ...]:
    return tuple(re.compile(pattern) for pattern in patterns)


__all__ = [
    "blob_matches",
    "casing_note",
    "compile_patterns",
    "contains_any",
    "content_under",
    "directory_exists",
    "first_lookup",
    "lookup",
    "no_blob_matches",
    "path_exists",
    "prefix_count",
]
