"""CI/CD analyzer implementation."""

from __future__ import annotations

from ..evidence import WORKFLOW_DIR
from ..models import CategoryKey
from .base import Analyzer, PointRule
from .utils import blob_matches, content_under, path_exists, prefix_count

CI_TRIGGERS = ("push", "pull_request")
CI_ACTIONS = ("test", "build", "ci")
DEPLOY_KEYWORDS = ("deploy", "publish")
DEPLOY_PATH_KEYWORDS = ("deploy", "release")
COMPOSE_FILES = ("docker-compose.yml", "docker-compose.yaml", "compose.yml", "compose.yaml")


def _is_dockerfile(path: str) -> bool:
    return path == "Dockerfile" or path.endswith("/Dockerfile")


class CicdAnalyzer(Analyzer):
    """Scores workflow automation and container/build tooling."""

    key = CategoryKey.CICD
    rules = (
        PointRule(
            "GitHub Actions workflows",
            25,
            prefix_count(WORKFLOW_DIR, "{count} workflow file(s)"),
        ),
        PointRule(
            "CI workflow (test/build)",
            25,
            content_under(WORKFLOW_DIR, CI_TRIGGERS, CI_ACTIONS),
        ),
        PointRule(
            "Deploy / release workflow",
            15,
            content_under(WORKFLOW_DIR, DEPLOY_KEYWORDS, path_keywords=DEPLOY_PATH_KEYWORDS),
        ),
        PointRule("PR-triggered checks", 15, content_under(WORKFLOW_DIR, ("pull_request",))),
        PointRule("Dockerfile", 10, blob_matches(_is_dockerfile)),
        PointRule("Docker Compose", 5, path_exists(*COMPOSE_FILES)),
        PointRule("Makefile", 5, path_exists("Makefile")),
    )


__all__ = ["CicdAnalyzer"]
