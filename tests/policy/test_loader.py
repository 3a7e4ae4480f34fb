"""Tests for loading policy documents."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from repohealth.policy import (
    PolicyError,
    SignalRule,
    load_policy_file,
    parse_policy_document,
    resolve_policy,
)

TEAM_POLICY = """
policies:
  - id: team
    name: Team rules
    rules:
      - id: t-overall
        type: overall-score
        operator: ">="
        value: 70
      - id: t-readme
        type: signal
        signal: README exists
        severity: warning
  - id: other
    rules: []
"""


def test_load_yaml_policy_list(tmp_path: Path) -> None:
    path = tmp_path / "policies.yml"
    path.write_text(TEAM_POLICY, encoding="utf-8")

    policies = load_policy_file(path)

    assert [policy.id for policy in policies] == ["team", "other"]
    assert isinstance(policies[0].rules[1], SignalRule)
    assert policies[1].name == "other"


def test_load_json_single_policy(tmp_path: Path) -> None:
    path = tmp_path / "policy.json"
    path.write_text(
        json.dumps({"id": "json-policy", "rules": [{"id": "r", "type": "signal", "signal": "SECURITY.md"}]}),
        encoding="utf-8",
    )

    [policy] = load_policy_file(path)

    assert policy.id == "json-policy"
    assert policy.rules[0].signal == "SECURITY.md"


def test_missing_file_propagates(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_policy_file(tmp_path / "absent.yml")


@pytest.mark.parametrize(
    ("name", "body"),
    [
        ("bad.yml", "policies: [unclosed\n"),
        ("bad.json", "{not json"),
        ("bad.yml", "policies: just-a-string\n"),
        ("bad.yml", "42\n"),
        ("bad.yml", "name: no id here\n"),
    ],
)
def test_malformed_documents_raise_policy_error(tmp_path: Path, name: str, body: str) -> None:
    path = tmp_path / name
    path.write_text(body, encoding="utf-8")

    with pytest.raises(PolicyError):
        load_policy_file(path)


def test_empty_document_yields_no_policies() -> None:
    assert parse_policy_document(None) == []


def test_resolve_policy_accepts_preset_or_relative_file(tmp_path: Path) -> None:
    (tmp_path / "team.yml").write_text(TEAM_POLICY, encoding="utf-8")

    assert [policy.id for policy in resolve_policy("basic-hygiene")] == ["basic-hygiene"]
    assert [policy.id for policy in resolve_policy("team.yml", base_dir=tmp_path)] == ["team", "other"]
    with pytest.raises(PolicyError):
        resolve_policy("team.yml")
