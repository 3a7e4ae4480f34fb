"""Tests for repohealth.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from repohealth.config import ConfigError, RepoHealthConfig, load_config
from repohealth.models import CategoryKey
from repohealth.scoring import DEFAULT_WEIGHTS


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, RepoHealthConfig)
    assert config.root == tmp_path.resolve()
    assert config.weights == DEFAULT_WEIGHTS
    assert config.scanner.max_files == 25
    assert config.scanner.exclude_paths == []
    assert config.policies.enabled == []
    assert config.policies.files == []
    assert config.source is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".repohealth.yml"
    config_file.write_text(
        """
weights:
  documentation: 0.30
  security: 0.10
  cicd: 0.15
  dependencies: 0.10
  codeQuality: 0.15
  license: 0.10
  community: 0.10
scanner:
  max_files: 40
  exclude_paths:
    - "vendor/"
    - "*.min.js"
policies:
  enabled: [basic-hygiene]
  files:
    - "policies/team.yml"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.source == config_file.resolve()
    assert config.weights[CategoryKey.DOCUMENTATION] == pytest.approx(0.30)
    assert list(config.weights) == list(DEFAULT_WEIGHTS)
    assert config.scanner.max_files == 40
    assert config.scanner.exclude_paths == ["vendor/", "*.min.js"]
    assert config.policies.enabled == ["basic-hygiene"]
    assert config.policies.files == [tmp_path.resolve() / "policies" / "team.yml"]


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".repohealth.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.weights == DEFAULT_WEIGHTS
    assert config.source == (tmp_path / ".repohealth.yml").resolve()


@pytest.mark.parametrize(
    "body",
    [
        "- just\n- a list\n",
        "weights: [1, 2]\n",
        "weights:\n  documentation: 1.0\n",
        "scanner:\n  max_files: -1\n",
        "scanner:\n  max_files: lots\n",
        "weights: {documentation: [unclosed\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, body: str) -> None:
    (tmp_path / ".repohealth.yml").write_text(body, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_logging_file_resolves_against_config_directory(tmp_path: Path) -> None:
    (tmp_path / ".repohealth.yml").write_text("logging:\n  file: logs/repohealth.log\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.logging.file == (tmp_path / "logs" / "repohealth.log").resolve()


def test_logging_file_defaults_to_none(tmp_path: Path) -> None:
    assert load_config(tmp_path).logging.file is None


def test_logging_file_must_be_a_path(tmp_path: Path) -> None:
    (tmp_path / ".repohealth.yml").write_text("logging:\n  file: [a, b]\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="logging.file"):
        load_config(tmp_path)
