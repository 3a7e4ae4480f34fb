"""CycloneDX-style software bill of materials built from a report.

Components come from the detected tech stack plus the manifest and lockfile
names recorded on the dependency signals. Versions are not resolved.
"""

from __future__ import annotations

import json
import re
import uuid
from typing import Any, Dict, List

from .. import __version__
from ..models import AnalysisReport, TechCategory

BOM_FORMAT = "CycloneDX"
SPEC_VERSION = "1.5"
TOOL_VENDOR = "repohealth"
TOOL_NAME = "repohealth analyzer"

_COMPONENT_TYPES = {
    TechCategory.FRAMEWORK: "framework",
    TechCategory.PLATFORM: "application",
}

# Signal name -> bom-ref prefix for file components.
_FILE_SIGNALS = (
    ("Dependency manifest", "manifest"),
    ("Lockfile present", "lockfile"),
)


def _ref(prefix: str, name: str) -> str:
    return f"{prefix}-" + re.sub(r"[^a-z0-9-]", "-", name.lower())


def serial_number(report: AnalysisReport) -> str:
    """``urn:uuid`` derived from the report id, so re-exports are identical."""
    return f"urn:uuid:{uuid.uuid5(uuid.NAMESPACE_URL, f'repohealth:{report.id}')}"


def build_sbom(report: AnalysisReport) -> Dict[str, Any]:
    components: List[Dict[str, Any]] = []
    seen = set()

    for item in report.tech_stack:
        components.append(
            {
                "type": _COMPONENT_TYPES.get(item.category, "library"),
                "name": item.name,
                "group": item.category.value,
                "bom-ref": _ref("techstack", item.name),
            }
        )
        seen.add(item.name)

    for signal_name, prefix in _FILE_SIGNALS:
        signal = report.find_signal(signal_name)
        if signal is None or not signal.details:
            continue
        for filename in signal.details.split(", "):
            if filename in seen:
                continue
            seen.add(filename)
            components.append(
                {"type": "library", "name": filename, "bom-ref": _ref(prefix, filename)}
            )

    return {
        "bomFormat": BOM_FORMAT,
        "specVersion": SPEC_VERSION,
        "serialNumber": serial_number(report),
        "version": 1,
        "metadata": {
            "timestamp": report.analyzed_at,
            "tools": [{"vendor": TOOL_VENDOR, "name": TOOL_NAME, "version": __version__}],
            "component": {
                "type": "application",
                "name": report.repo.full_name,
                "version": report.repo.branch or report.repo_info.default_branch,
            },
        },
        "components": components,
    }


def render_sbom(report: AnalysisReport, *, indent: int = 2) -> str:
    return json.dumps(build_sbom(report), indent=indent, ensure_ascii=False) + "\n"


__all__ = ["build_sbom", "render_sbom", "serial_number"]
