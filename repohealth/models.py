"""Core data models shared across repohealth components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class CategoryKey(str, Enum):
    """Scoring dimensions, declared in canonical report order."""

    DOCUMENTATION = "documentation"
    SECURITY = "security"
    CICD = "cicd"
    DEPENDENCIES = "dependencies"
    CODE_QUALITY = "codeQuality"
    LICENSE = "license"
    COMMUNITY = "community"


CATEGORY_ORDER: tuple[CategoryKey, ...] = tuple(CategoryKey)

CATEGORY_LABELS: Dict[CategoryKey, str] = {
    CategoryKey.DOCUMENTATION: "Documentation",
    CategoryKey.SECURITY: "Security",
    CategoryKey.CICD: "CI/CD",
    CategoryKey.DEPENDENCIES: "Dependencies",
    CategoryKey.CODE_QUALITY: "Code Quality",
    CategoryKey.LICENSE: "License",
    CategoryKey.COMMUNITY: "Community",
}


class EntryKind(str, Enum):
    BLOB = "blob"
    TREE = "tree"


class TechCategory(str, Enum):
    LANGUAGE = "language"
    FRAMEWORK = "framework"
    TOOL = "tool"
    PLATFORM = "platform"
    DATABASE = "database"


class LetterGrade(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


@dataclass(frozen=True)
class TreeEntry:
    """One file-system entry of the repository snapshot."""

    path: str
    kind: EntryKind = EntryKind.BLOB
    size: Optional[int] = None

    @classmethod
    def blob(cls, path: str, size: Optional[int] = None) -> "TreeEntry":
        return cls(path=path, kind=EntryKind.BLOB, size=size)

    @classmethod
    def directory(cls, path: str) -> "TreeEntry":
        return cls(path=path, kind=EntryKind.TREE)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", EntryKind(self.kind))

    @property
    def is_blob(self) -> bool:
        return self.kind is EntryKind.BLOB


@dataclass(frozen=True)
class FileContent:
    """Decoded text for one of the bounded set of fetched paths."""

    path: str
    content: str
    size: int = 0

    @classmethod
    def from_text(cls, path: str, content: str) -> "FileContent":
        return cls(path=path, content=content, size=len(content))


@dataclass
class Signal:
    """Named boolean fact about the repository plus optional detail text."""

    name: str
    found: bool
    details: Optional[str] = None


@dataclass
class CategoryResult:
    """Score and evidence for a single category."""

    key: CategoryKey
    label: str
    score: int
    weight: float
    signals: List[Signal] = field(default_factory=list)

    def missing_signals(self) -> List[Signal]:
        return [signal for signal in self.signals if not signal.found]

    def found_signals(self) -> List[Signal]:
        return [signal for signal in self.signals if signal.found]


@dataclass
class TechStackItem:
    name: str
    category: TechCategory


@dataclass
class ChecklistItem:
    label: str
    passed: bool
    description: str


@dataclass
class ContributorFriendliness:
    """Onboarding score with its fixed readiness checklist."""

    score: int
    signals: List[Signal]
    readiness_checklist: List[ChecklistItem]


@dataclass(frozen=True)
class ParsedRepo:
    owner: str
    repo: str
    branch: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class RepoInfo:
    """Repository metadata supplied alongside the snapshot.

    Only ``license`` (an SPDX identifier) and ``language`` influence scoring.
    """

    owner: str
    repo: str
    default_branch: str = "main"
    description: str = ""
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    license: Optional[str] = None
    language: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
    topics: List[str] = field(default_factory=list)
    archived: bool = False
    size: int = 0


@dataclass
class AnalysisReport:
    """Root aggregate produced once per analysis run."""

    id: str
    repo: ParsedRepo
    repo_info: RepoInfo
    categories: List[CategoryResult]
    overall_score: int
    grade: LetterGrade
    tech_stack: List[TechStackItem]
    strengths: List[str]
    risks: List[str]
    next_steps: List[str]
    analyzed_at: str
    contributor_score: ContributorFriendliness
    file_count: int
    tree_entry_count: int

    def category(self, key: CategoryKey | str) -> Optional[CategoryResult]:
        """Look up a category by key; unknown keys yield ``None``."""
        wanted = key.value if isinstance(key, CategoryKey) else str(key)
        for result in self.categories:
            if result.key == wanted:
                return result
        return None

    def find_signal(self, name: str) -> Optional[Signal]:
        """First signal called ``name`` across categories, in report order."""
        for result in self.categories:
            for signal in result.signals:
                if signal.name == name:
                    return signal
        return None

    def to_dict(self) -> Dict[str, Any]:
        return to_plain(asdict(self))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AnalysisReport":
        repo = payload["repo"]
        contributor = payload["contributor_score"]
        return cls(
            id=str(payload["id"]),
            repo=ParsedRepo(
                owner=repo["owner"], repo=repo["repo"], branch=repo.get("branch")
            ),
            repo_info=RepoInfo(**dict(payload["repo_info"])),
            categories=[category_from_dict(item) for item in payload["categories"]],
            overall_score=int(payload["overall_score"]),
            grade=LetterGrade(payload["grade"]),
            tech_stack=[
                TechStackItem(name=item["name"], category=TechCategory(item["category"]))
                for item in payload.get("tech_stack", [])
            ],
            strengths=list(payload.get("strengths", [])),
            risks=list(payload.get("risks", [])),
            next_steps=list(payload.get("next_steps", [])),
            analyzed_at=str(payload["analyzed_at"]),
            contributor_score=ContributorFriendliness(
                score=int(contributor["score"]),
                signals=[signal_from_dict(item) for item in contributor["signals"]],
                readiness_checklist=[
                    ChecklistItem(**dict(item))
                    for item in contributor["readiness_checklist"]
                ],
            ),
            file_count=int(payload.get("file_count", 0)),
            tree_entry_count=int(payload.get("tree_entry_count", 0)),
        )


def signal_from_dict(payload: Mapping[str, Any]) -> Signal:
    return Signal(
        name=str(payload["name"]),
        found=bool(payload["found"]),
        details=payload.get("details"),
    )


def category_from_dict(payload: Mapping[str, Any]) -> CategoryResult:
    return CategoryResult(
        key=CategoryKey(payload["key"]),
        label=str(payload["label"]),
        score=int(payload["score"]),
        weight=float(payload["weight"]),
        signals=[signal_from_dict(item) for item in payload.get("signals", [])],
    )


def to_plain(value: Any) -> Any:
    """Convert enums (recursively) into their wire values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    return value


__all__ = [
    "AnalysisReport",
    "CATEGORY_LABELS",
    "CATEGORY_ORDER",
    "CategoryKey",
    "CategoryResult",
    "ChecklistItem",
    "ContributorFriendliness",
    "EntryKind",
    "FileContent",
    "LetterGrade",
    "ParsedRepo",
    "RepoInfo",
    "Signal",
    "TechCategory",
    "TechStackItem",
    "TreeEntry",
    "category_from_dict",
    "signal_from_dict",
    "to_plain",
]
