"""Normalized path/content view of a repository snapshot."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from .models import FileContent, TreeEntry

WORKFLOW_DIR = ".github/workflows/"
ISSUE_TEMPLATE_DIR = ".github/ISSUE_TEMPLATE/"


class Evidence:
    """Read-only lookups over the tree manifest and fetched file contents.

    Built once per analysis run and shared by every analyzer. Nothing here
    mutates after construction.
    """

    def __init__(self, files: Iterable[FileContent], tree: Iterable[TreeEntry]) -> None:
        tree_entries = list(tree)
        self.tree_size = len(tree_entries)

        self.contents: Dict[str, str] = {}
        for item in files:
            self.contents.setdefault(item.path, item.content)

        blobs: List[str] = []
        seen_blobs: Set[str] = set()
        explicit_dirs: Set[str] = set()
        for entry in tree_entries:
            if entry.is_blob:
                if entry.path not in seen_blobs:
                    blobs.append(entry.path)
                    seen_blobs.add(entry.path)
            else:
                explicit_dirs.add(entry.path.rstrip("/"))
        for path in self.contents:
            if path not in seen_blobs:
                blobs.append(path)
                seen_blobs.add(path)
        self.blobs: Tuple[str, ...] = tuple(blobs)

        self.paths: frozenset[str] = frozenset(
            [entry.path for entry in tree_entries] + list(self.contents)
        )
        self.directories: frozenset[str] = frozenset(
            explicit_dirs | _implied_directories(self.paths)
        )

        self._lower_index: Dict[str, str] = {}
        for path in sorted(self.paths):
            self._lower_index.setdefault(path.lower(), path)

    # ------------------------------------------------------------------
    # Path lookups

    def has(self, path: str) -> bool:
        return path in self.paths

    def find(self, *candidates: str) -> Optional[str]:
        """Return the actual path of the first candidate present, ignoring case."""
        for candidate in candidates:
            if candidate in self.paths:
                return candidate
        for candidate in candidates:
            actual = self._lower_index.get(candidate.lower())
            if actual is not None:
                return actual
        return None

    def has_any(self, *candidates: str) -> bool:
        return self.find(*candidates) is not None

    def has_directory(self, *names: str) -> bool:
        lowered = {name.lower().rstrip("/") for name in names}
        return any(directory.lower() in lowered for directory in self.directories)

    def prefix_paths(self, prefix: str) -> List[str]:
        """Blob paths located under ``prefix``, in snapshot order."""
        return [path for path in self.blobs if path.startswith(prefix)]

    # ------------------------------------------------------------------
    # Content lookups

    def content(self, *candidates: str) -> Optional[str]:
        """Return decoded text for the first candidate with fetched content."""
        for candidate in candidates:
            if candidate in self.contents:
                return self.contents[candidate]
        lowered = {candidate.lower() for candidate in candidates}
        for path, text in self.contents.items():
            if path.lower() in lowered:
                return text
        return None

    def contents_under(self, prefix: str) -> Iterator[Tuple[str, str]]:
        for path, text in self.contents.items():
            if path.startswith(prefix):
                yield path, text

    def workflows(self) -> List[Tuple[str, str]]:
        return list(self.contents_under(WORKFLOW_DIR))


def _implied_directories(paths: Sequence[str] | frozenset[str]) -> Set[str]:
    directories: Set[str] = set()
    for path in paths:
        parts = path.split("/")[:-1]
        for index in range(1, len(parts) + 1):
            directories.add("/".join(parts[:index]))
    return directories


__all__ = ["Evidence", "ISSUE_TEMPLATE_DIR", "WORKFLOW_DIR"]
