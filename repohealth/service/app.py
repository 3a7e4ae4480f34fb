"""FastAPI application entrypoint for repohealth service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import ConfigError
from ..export import build_sbom
from ..models import AnalysisReport
from ..orchestrator import Orchestrator
from ..policy import DEFAULT_POLICIES, PolicyError


class AnalyzeRequest(BaseModel):
    path: str
    license: Optional[str] = None
    language: Optional[str] = None
    policies: List[str] = Field(default_factory=list)


class AnalyzeResponse(BaseModel):
    report: Dict[str, Any]
    policy_evaluations: List[Dict[str, Any]] = Field(default_factory=list)


class EvaluateRequest(BaseModel):
    report: Dict[str, Any]
    policies: List[str]


class EvaluateResponse(BaseModel):
    passed: bool
    evaluations: List[Dict[str, Any]]


class SbomRequest(BaseModel):
    report: Dict[str, Any]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing repohealth operations."""

    app = FastAPI(title="RepoHealth Service", version="0.1.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/policies")
    async def list_policies() -> List[Dict[str, Any]]:
        return [policy.to_dict() for policy in DEFAULT_POLICIES]

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze_repo(
        payload: AnalyzeRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> AnalyzeResponse:
        def _run_analysis() -> AnalyzeResponse:
            repo_path = Path(payload.path).expanduser().resolve()
            report = orchestrator.analyze_path(
                repo_path, license=payload.license, language=payload.language
            )
            config = orchestrator.load_config(repo_path)
            policies = orchestrator.resolve_policies(payload.policies, config=config)
            evaluations = orchestrator.evaluate(report, policies)
            return AnalyzeResponse(
                report=report.to_dict(),
                policy_evaluations=[evaluation.to_dict() for evaluation in evaluations],
            )

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, _run_analysis)

    @app.post("/evaluate", response_model=EvaluateResponse)
    async def evaluate_report(
        payload: EvaluateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> EvaluateResponse:
        report = _report_from_payload(payload.report)
        policies = orchestrator.resolve_policies(payload.policies)
        evaluations = orchestrator.evaluate(report, policies)
        return EvaluateResponse(
            passed=all(evaluation.passed for evaluation in evaluations),
            evaluations=[evaluation.to_dict() for evaluation in evaluations],
        )

    @app.post("/sbom")
    async def export_sbom(payload: SbomRequest) -> Dict[str, Any]:
        return build_sbom(_report_from_payload(payload.report))

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(PolicyError)
    async def policy_error_handler(_: Any, exc: PolicyError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def _report_from_payload(payload: Dict[str, Any]) -> AnalysisReport:
    try:
        return AnalysisReport.from_dict(payload)
    except (KeyError, TypeError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=f"Invalid report payload: {exc}") from exc


def run_service(
    host: str = "127.0.0.1",
    port: int = 8000,
    config_path: Path | None = None,
) -> None:  # pragma: no cover - integration path
    app = create_app(lambda: Orchestrator(config_path=config_path))
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
