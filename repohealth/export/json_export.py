"""JSON serialisation of reports and policy evaluations."""

from __future__ import annotations

import json
from typing import Any, Dict, Sequence

from ..models import AnalysisReport
from ..policy import PolicyEvaluation


def report_payload(
    report: AnalysisReport, evaluations: Sequence[PolicyEvaluation] = ()
) -> Dict[str, Any]:
    payload = report.to_dict()
    if evaluations:
        payload["policy_evaluations"] = [evaluation.to_dict() for evaluation in evaluations]
    return payload


def render_json(
    report: AnalysisReport,
    evaluations: Sequence[PolicyEvaluation] = (),
    *,
    indent: int = 2,
) -> str:
    return json.dumps(report_payload(report, evaluations), indent=indent, ensure_ascii=False) + "\n"


def load_report(text: str) -> AnalysisReport:
    """Rebuild a report from :func:`render_json` output."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Report is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Report JSON must be an object")
    try:
        return AnalysisReport.from_dict(payload)
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Report JSON is missing or has invalid fields: {exc}") from exc


__all__ = ["load_report", "render_json", "report_payload"]
