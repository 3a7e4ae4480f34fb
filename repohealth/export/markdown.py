"""Markdown report rendering via Jinja2 templates."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from ..education import recommendations
from ..models import AnalysisReport
from ..policy import PolicyEvaluation

_TEMPLATE_NAME = "report.md.j2"


def _create_env(templates_dir: Path | None = None) -> Environment:
    directories = []
    if templates_dir:
        directories.append(str(templates_dir))
    directories.append(str(Path(__file__).with_name("templates")))
    loader = FileSystemLoader(directories)
    return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


def render_markdown(
    report: AnalysisReport,
    evaluations: Sequence[PolicyEvaluation] = (),
    *,
    templates_dir: Optional[Path] = None,
    include_guidance: bool = True,
) -> str:
    """Render ``report`` (and optional policy results) as a Markdown document."""
    template = _create_env(templates_dir).get_template(_TEMPLATE_NAME)
    rendered = template.render(
        report=report,
        evaluations=list(evaluations),
        recommendations=recommendations(report) if include_guidance else [],
    )
    return rendered.rstrip() + "\n"


__all__ = ["render_markdown"]
