"""Why-it-matters and how-to-fix guidance for individual signals."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import parse_qs, quote, urlsplit

import yaml

from .models import AnalysisReport, CategoryKey
from .starter_files import STARTER_FILES, render_starter_file

_GUIDANCE_FILE = Path(__file__).with_name("guidance.yml")


@dataclass(frozen=True)
class SignalGuidance:
    name: str
    category: CategoryKey
    why: str
    how_to_fix: str
    fix_url: Optional[str] = None
    learn_more_url: Optional[str] = None

    @property
    def filename(self) -> Optional[str]:
        """Repository path the fix link creates, if any."""
        if not self.fix_url:
            return None
        values = parse_qs(urlsplit(self.fix_url).query).get("filename")
        return values[0] if values else None


@dataclass(frozen=True)
class Recommendation:
    """A missing signal paired with its guidance and a resolved fix link."""

    category: CategoryKey
    signal: str
    guidance: SignalGuidance
    fix_url: Optional[str]
    starter_file: Optional[str] = None


@lru_cache(maxsize=1)
def load_guidance() -> Dict[str, SignalGuidance]:
    data = yaml.safe_load(_GUIDANCE_FILE.read_text(encoding="utf-8")) or {}
    table: Dict[str, SignalGuidance] = {}
    for category_name, entries in data.items():
        category = CategoryKey(category_name)
        for name, entry in (entries or {}).items():
            table[name] = SignalGuidance(
                name=name,
                category=category,
                why=entry["why"],
                how_to_fix=entry["how_to_fix"],
                fix_url=entry.get("fix_url"),
                learn_more_url=entry.get("learn_more_url"),
            )
    return table


def get_guidance(signal_name: str) -> Optional[SignalGuidance]:
    return load_guidance().get(signal_name)


def get_fix_url(
    owner: str, repo: str, branch: str, signal_name: str, *, prefill: bool = False
) -> Optional[str]:
    """Link that opens the hosting UI's new-file form for the missing file.

    With ``prefill`` the form starts with the starter content for that file,
    when one exists.
    """
    guidance = get_guidance(signal_name)
    if guidance is None or not guidance.fix_url:
        return None
    url = guidance.fix_url.format(
        owner=quote(owner, safe=""),
        repo=quote(repo, safe=""),
        branch=quote(branch, safe=""),
    )
    if prefill and guidance.filename in STARTER_FILES:
        starter = render_starter_file(guidance.filename, owner=owner, repo=repo, branch=branch)
        url += "&value=" + quote(starter.content, safe="")
    return url


def recommendations(report: AnalysisReport) -> List[Recommendation]:
    """Guidance for every missing signal of the report, in category order."""
    owner, repo = report.repo.owner, report.repo.repo
    branch = report.repo.branch or report.repo_info.default_branch
    items: List[Recommendation] = []
    for category in report.categories:
        for signal in category.missing_signals():
            guidance = get_guidance(signal.name)
            if guidance is None:
                continue
            items.append(
                Recommendation(
                    category=category.key,
                    signal=signal.name,
                    guidance=guidance,
                    fix_url=get_fix_url(owner, repo, branch, signal.name),
                    starter_file=guidance.filename if guidance.filename in STARTER_FILES else None,
                )
            )
    return items


__all__ = [
    "Recommendation",
    "SignalGuidance",
    "get_fix_url",
    "get_guidance",
    "load_guidance",
    "recommendations",
]
