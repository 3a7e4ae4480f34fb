"""Report exporters."""

from __future__ import annotations

from typing import Callable, Dict, Sequence

from ..models import AnalysisReport
from ..policy import PolicyEvaluation
from .csv_export import render_csv
from .json_export import load_report, render_json, report_payload
from .markdown import render_markdown
from .sbom import build_sbom, render_sbom

FORMATS = ("text", "json", "markdown", "csv", "sbom")


def render_report(
    report: AnalysisReport,
    fmt: str,
    evaluations: Sequence[PolicyEvaluation] = (),
) -> str:
    """Render ``report`` in one of the machine formats (json, markdown, csv, sbom)."""
    renderers: Dict[str, Callable[[], str]] = {
        "json": lambda: render_json(report, evaluations),
        "markdown": lambda: render_markdown(report, evaluations),
        "csv": lambda: render_csv(report),
        "sbom": lambda: render_sbom(report),
    }
    renderer = renderers.get(fmt)
    if renderer is None:
        raise ValueError(f"Unsupported export format: {fmt}")
    return renderer()


__all__ = [
    "FORMATS",
    "build_sbom",
    "load_report",
    "render_csv",
    "render_json",
    "render_markdown",
    "render_report",
    "render_sbom",
    "report_payload",
]
