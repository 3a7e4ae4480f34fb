from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from tests._fixtures.repo_builder import RepoBuilder

FROZEN_NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def frozen_now() -> datetime:
    return FROZEN_NOW
