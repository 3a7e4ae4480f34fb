"""Configuration loading for repohealth (.repohealth.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .models import CategoryKey
from .scoring import DEFAULT_WEIGHTS, validate_weights

CONFIG_FILENAME = ".repohealth.yml"
DEFAULT_MAX_FILES = 25


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ScannerConfig:
    """Bounds and exclusions for the local snapshot provider."""

    max_files: int = DEFAULT_MAX_FILES
    exclude_paths: List[str] = field(default_factory=list)


@dataclass
class PolicyConfig:
    """Policies evaluated by default after an analysis."""

    enabled: List[str] = field(default_factory=list)
    files: List[Path] = field(default_factory=list)


@dataclass
class LoggingConfig:
    """Optional log file sink, resolved against the config directory."""

    file: Optional[Path] = None


@dataclass
class RepoHealthConfig:
    """Represents the settings defined in .repohealth.yml."""

    root: Path
    weights: Dict[CategoryKey, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    policies: PolicyConfig = field(default_factory=PolicyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    source: Optional[Path] = None


def load_config(config_path: Path) -> RepoHealthConfig:
    """Load configuration from a repository root or an explicit file path."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return RepoHealthConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    weights = dict(DEFAULT_WEIGHTS)
    weights_data = data.get("weights")
    if weights_data is not None:
        if not isinstance(weights_data, dict):
            raise ConfigError("'weights' must be a mapping of category to weight")
        try:
            weights = validate_weights(weights_data)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    scanner_data = _as_dict(data.get("scanner"))
    scanner = ScannerConfig()
    if scanner_data:
        max_files = scanner_data.get("max_files")
        if max_files is not None:
            parsed = _as_int(max_files)
            if parsed is None or parsed < 0:
                raise ConfigError("'scanner.max_files' must be a non-negative integer")
            scanner.max_files = parsed
        scanner.exclude_paths = _as_str_list(scanner_data.get("exclude_paths"))

    policy_data = _as_dict(data.get("policies"))
    policies = PolicyConfig()
    if policy_data:
        policies.enabled = _as_str_list(policy_data.get("enabled"))
        policies.files = [root / item for item in _as_str_list(policy_data.get("files"))]

    logging_data = _as_dict(data.get("logging"))
    logging_config = LoggingConfig()
    log_file = logging_data.get("file")
    if log_file is not None:
        if not isinstance(log_file, str) or not log_file.strip():
            raise ConfigError("'logging.file' must be a file path")
        logging_config.file = (root / Path(log_file).expanduser()).resolve()

    return RepoHealthConfig(
        root=root,
        weights=weights,
        scanner=scanner,
        policies=policies,
        logging=logging_config,
        source=config_file,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "LoggingConfig",
    "PolicyConfig",
    "RepoHealthConfig",
    "ScannerConfig",
    "load_config",
]
