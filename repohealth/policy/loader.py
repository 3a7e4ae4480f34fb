"""Load policy sets from YAML or JSON documents."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

import yaml

from ..logging import get_logger
from .models import PolicySet
from .presets import get_preset, preset_ids
from .rules import PolicyError

logger = get_logger("policy.loader")


def load_policy_file(path: Path) -> List[PolicySet]:
    """Read one policy mapping, or a ``policies:`` list of them, from ``path``."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as exc:
        raise PolicyError(f"Unable to read policy file {path}: {exc}") from exc

    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise PolicyError(f"Invalid JSON in policy file {path}: {exc}") from exc
    else:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise PolicyError(f"Invalid YAML in policy file {path}: {exc}") from exc

    policies = parse_policy_document(data, source=str(path))
    logger.debug("Loaded %d policies from %s", len(policies), path)
    return policies


def parse_policy_document(data: Any, *, source: str = "<policy>") -> List[PolicySet]:
    if data is None:
        return []
    if isinstance(data, dict) and "policies" in data:
        entries = data["policies"]
        if not isinstance(entries, list):
            raise PolicyError(f"'policies' in {source} must be a list")
        return [PolicySet.from_dict(entry) for entry in entries]
    if isinstance(data, list):
        return [PolicySet.from_dict(entry) for entry in data]
    if isinstance(data, dict):
        return [PolicySet.from_dict(data)]
    raise PolicyError(f"{source} must contain a policy mapping or a list of policies")


def resolve_policy(reference: str, *, base_dir: Optional[Path] = None) -> List[PolicySet]:
    """Resolve a preset id or a policy file path into policy sets."""
    if reference in preset_ids():
        return [get_preset(reference)]

    path = Path(reference).expanduser()
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    if not path.exists():
        raise PolicyError(f"'{reference}' is neither a policy preset nor an existing file")
    return load_policy_file(path)


__all__ = ["load_policy_file", "parse_policy_document", "resolve_policy"]
