"""Coordinates scanning, analysis and policy evaluation for local checkouts."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from .config import RepoHealthConfig, load_config
from .engine import run_analysis
from .logging import get_logger
from .models import AnalysisReport
from .policy import PolicyEvaluation, PolicySet, evaluate_policy, load_policy_file, resolve_policy
from .repo_scanner import RepoScanner
from .scoring import ComparisonReport, compare_reports


class Orchestrator:
    """Runs the analysis pipeline against repositories on disk."""

    def __init__(self, scanner: RepoScanner | None = None, config_path: Path | None = None) -> None:
        self._scanner = scanner
        self._config_path = config_path
        self.logger = get_logger("orchestrator")

    def load_config(self, repo_path: Path) -> RepoHealthConfig:
        return load_config(self._config_path or repo_path)

    def analyze_path(
        self,
        path: str | Path,
        *,
        license: Optional[str] = None,
        language: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AnalysisReport:
        """Scan ``path`` and return its analysis report."""
        repo_path = Path(path).expanduser().resolve()
        self.logger.info("Starting analysis of %s", repo_path)
        config = self.load_config(repo_path)
        scanner = self._scanner or RepoScanner(
            max_files=config.scanner.max_files,
            exclude_paths=config.scanner.exclude_paths,
        )
        snapshot = scanner.scan(repo_path, license=license, language=language)
        self.logger.debug(
            "Snapshot has %d tree entries and %d fetched files",
            len(snapshot.tree),
            len(snapshot.files),
        )
        return run_analysis(
            snapshot.parsed_repo,
            snapshot.repo_info,
            snapshot.tree,
            snapshot.files,
            weights=config.weights,
            now=now,
        )

    def resolve_policies(
        self,
        references: Sequence[str],
        *,
        config: RepoHealthConfig | None = None,
    ) -> List[PolicySet]:
        """Policies named on the command line, else the ones enabled in config."""
        policies: List[PolicySet] = []
        if references:
            for reference in references:
                policies.extend(resolve_policy(reference))
            return policies

        if config is None:
            return policies
        for reference in config.policies.enabled:
            policies.extend(resolve_policy(reference, base_dir=config.root))
        for policy_file in config.policies.files:
            policies.extend(load_policy_file(policy_file))
        return policies

    def evaluate(
        self,
        report: AnalysisReport,
        policies: Sequence[PolicySet],
        *,
        now: Optional[datetime] = None,
    ) -> List[PolicyEvaluation]:
        evaluations = [evaluate_policy(policy, report, now=now) for policy in policies]
        for evaluation in evaluations:
            self.logger.info(
                "Policy %s: %s (%d passed, %d failed)",
                evaluation.policy.id,
                "passed" if evaluation.passed else "failed",
                evaluation.pass_count,
                evaluation.fail_count,
            )
        return evaluations

    def compare_paths(
        self,
        path_a: str | Path,
        path_b: str | Path,
        *,
        now: Optional[datetime] = None,
    ) -> ComparisonReport:
        report_a = self.analyze_path(path_a, now=now)
        report_b = self.analyze_path(path_b, now=now)
        return compare_reports(report_a, report_b, now=now)


__all__ = ["Orchestrator"]
