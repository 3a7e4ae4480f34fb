"""CSV export: one row per signal."""

from __future__ import annotations

import csv
import io

from ..models import AnalysisReport

HEADER = ("repo", "category", "category_score", "weight", "signal", "found", "details")


def render_csv(report: AnalysisReport) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(HEADER)
    for category in report.categories:
        for signal in category.signals:
            writer.writerow(
                (
                    report.repo.full_name,
                    category.key.value,
                    category.score,
                    category.weight,
                    signal.name,
                    "yes" if signal.found else "no",
                    signal.details or "",
                )
            )
    return buffer.getvalue()


__all__ = ["HEADER", "render_csv"]
