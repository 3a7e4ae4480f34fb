"""Analysis pipeline over an in-memory repository snapshot."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence

from .analyzers import Analyzer, discover_analyzers, get_analyzer
from .analyzers.tech_stack import detect_tech_stack as _detect_from_evidence
from .analyzers.tech_stack import merge_primary_language
from .contributor import score_contributor_friendliness
from .evidence import Evidence
from .logging import get_logger
from .models import (
    CATEGORY_ORDER,
    AnalysisReport,
    CategoryKey,
    CategoryResult,
    FileContent,
    ParsedRepo,
    RepoInfo,
    TechStackItem,
    TreeEntry,
)
from .scoring import (
    DEFAULT_WEIGHTS,
    compute_grade,
    compute_overall_score,
    generate_next_steps,
    generate_risks,
    generate_strengths,
    isoformat_utc,
)

logger = get_logger("engine")


def run_analysis(
    parsed_repo: ParsedRepo,
    repo_info: RepoInfo,
    tree: Sequence[TreeEntry],
    files: Sequence[FileContent],
    *,
    weights: Optional[Mapping[CategoryKey, float]] = None,
    now: Optional[datetime] = None,
    analyzers: Optional[Sequence[Analyzer]] = None,
) -> AnalysisReport:
    """Score every category and assemble the full report.

    ``weights`` replaces the default table as a whole; ``now`` pins the
    analysis timestamp so repeated runs are byte-identical.
    ``analyzers`` may reorder the built-in set but must cover all seven
    categories once each; anything else raises ``ValueError``.
    """
    table: Dict[CategoryKey, float] = dict(weights or DEFAULT_WEIGHTS)
    evidence = Evidence(files, tree)
    logger.info(
        "Analyzing %s (%d tree entries, %d files)",
        parsed_repo.full_name,
        evidence.tree_size,
        len(files),
    )

    selected = list(analyzers) if analyzers is not None else discover_analyzers()
    covered = sorted(analyzer.key.value for analyzer in selected)
    if covered != sorted(key.value for key in CATEGORY_ORDER):
        raise ValueError(
            "Analyzers must cover each category exactly once, got: " + ", ".join(covered)
        )
    results: Dict[CategoryKey, CategoryResult] = {}
    for analyzer in selected:
        weight = table.get(analyzer.key, DEFAULT_WEIGHTS[analyzer.key])
        result = analyzer.analyze(evidence, repo_info, weight=weight)
        logger.debug("Category %s scored %d", result.key.value, result.score)
        results[result.key] = result

    # Output order is fixed regardless of the order analyzers ran in.
    categories = [results[key] for key in CATEGORY_ORDER]

    overall = compute_overall_score(categories)
    grade = compute_grade(overall)
    tech_stack = merge_primary_language(_detect_from_evidence(evidence), repo_info.language)
    contributor = score_contributor_friendliness(evidence)
    analyzed_at = isoformat_utc(now)

    logger.info("Overall score for %s: %d (%s)", parsed_repo.full_name, overall, grade.value)
    return AnalysisReport(
        id=f"{parsed_repo.owner}/{parsed_repo.repo}@{analyzed_at}",
        repo=parsed_repo,
        repo_info=repo_info,
        categories=categories,
        overall_score=overall,
        grade=grade,
        tech_stack=tech_stack,
        strengths=generate_strengths(categories),
        risks=generate_risks(categories),
        next_steps=generate_next_steps(categories),
        analyzed_at=analyzed_at,
        contributor_score=contributor,
        file_count=len(files),
        tree_entry_count=len(tree),
    )


def detect_tech_stack(
    files: Sequence[FileContent],
    tree: Sequence[TreeEntry],
    language: Optional[str] = None,
) -> List[TechStackItem]:
    return merge_primary_language(_detect_from_evidence(Evidence(files, tree)), language)


def _analyze(
    key: CategoryKey,
    files: Sequence[FileContent],
    tree: Sequence[TreeEntry],
    repo_info: Optional[RepoInfo],
) -> CategoryResult:
    return get_analyzer(key).analyze(Evidence(files, tree), repo_info)


def analyze_documentation(files, tree, repo_info=None) -> CategoryResult:
    return _analyze(CategoryKey.DOCUMENTATION, files, tree, repo_info)


def analyze_security(files, tree, repo_info=None) -> CategoryResult:
    return _analyze(CategoryKey.SECURITY, files, tree, repo_info)


def analyze_cicd(files, tree, repo_info=None) -> CategoryResult:
    return _analyze(CategoryKey.CICD, files, tree, repo_info)


def analyze_dependencies(files, tree, repo_info=None) -> CategoryResult:
    return _analyze(CategoryKey.DEPENDENCIES, files, tree, repo_info)


def analyze_code_quality(files, tree, repo_info=None) -> CategoryResult:
    return _analyze(CategoryKey.CODE_QUALITY, files, tree, repo_info)


def analyze_license(files, tree, repo_info=None) -> CategoryResult:
    return _analyze(CategoryKey.LICENSE, files, tree, repo_info)


def analyze_community(files, tree, repo_info=None) -> CategoryResult:
    return _analyze(CategoryKey.COMMUNITY, files, tree, repo_info)


__all__ = [
    "analyze_cicd",
    "analyze_code_quality",
    "analyze_community",
    "analyze_dependencies",
    "analyze_documentation",
    "analyze_license",
    "analyze_security",
    "detect_tech_stack",
    "run_analysis",
]
