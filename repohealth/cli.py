"""CLI entrypoints for repohealth commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .config import ConfigError
from .export import FORMATS, load_report, render_report
from .logging import add_file_handler, configure_logging, get_logger
from .models import AnalysisReport
from .orchestrator import Orchestrator
from .policy import (
    DEFAULT_POLICIES,
    PolicyError,
    PolicyEvaluation,
    blocking_failures,
    has_blocking_failures,
)
from .scoring import ComparisonReport
from .starter_files import STARTER_FILES, starter_file_for_report, starter_filenames


def _add_common_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    verbose_kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
        "default": argparse.SUPPRESS if suppress_default else False,
    }
    parser.add_argument("-v", "--verbose", **verbose_kwargs)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write debug logs to this file (overrides logging.file in .repohealth.yml).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Path to a .repohealth.yml file (defaults to the one in the repository root).",
    )


def _add_policy_option(parser: argparse.ArgumentParser, *, required: bool = False) -> None:
    parser.add_argument(
        "--policy",
        dest="policies",
        action="append",
        default=[],
        required=required,
        metavar="ID_OR_FILE",
        help="Policy preset id or policy file to evaluate (repeatable).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repohealth",
        description="Score repository health and check it against compliance policies.",
    )
    _add_common_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze a local repository checkout.",
    )
    _add_common_options(analyze_parser, suppress_default=True)
    analyze_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )
    analyze_parser.add_argument(
        "--format",
        choices=FORMATS,
        default="text",
        help="Output format.",
    )
    analyze_parser.add_argument("--license", help="SPDX license id to use instead of detection.")
    analyze_parser.add_argument("--language", help="Primary language to use instead of detection.")
    analyze_parser.add_argument("--output", type=Path, help="Write the report to this file.")
    _add_policy_option(analyze_parser)

    evaluate_parser = subparsers.add_parser(
        "evaluate",
        help="Evaluate policies against a saved JSON report.",
    )
    _add_common_options(evaluate_parser, suppress_default=True)
    evaluate_parser.add_argument("report", type=Path, help="Report produced by `analyze --format json`.")
    evaluate_parser.add_argument("--format", choices=("text", "json"), default="text")
    _add_policy_option(evaluate_parser, required=True)

    compare_parser = subparsers.add_parser(
        "compare",
        help="Compare the health of two local repositories.",
    )
    _add_common_options(compare_parser, suppress_default=True)
    compare_parser.add_argument("path_a")
    compare_parser.add_argument("path_b")
    compare_parser.add_argument("--format", choices=("text", "json"), default="text")

    policies_parser = subparsers.add_parser("policies", help="List built-in policy presets.")
    _add_common_options(policies_parser, suppress_default=True)
    policies_parser.add_argument("--format", choices=("text", "json"), default="text")

    starter_parser = subparsers.add_parser(
        "starter",
        help="Print boilerplate for a commonly missing file (lists them without FILENAME).",
    )
    _add_common_options(starter_parser, suppress_default=True)
    starter_parser.add_argument("filename", nargs="?", help="Repository path such as SECURITY.md.")
    starter_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Repository whose details fill the template (defaults to current directory).",
    )
    starter_parser.add_argument("--output", type=Path, help="Write the file here instead of stdout.")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_common_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for repohealth commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file
    )
    logger = get_logger("cli")

    orchestrator = Orchestrator(config_path=args.config)

    try:
        if args.command == "analyze":
            _run_analyze(parser, orchestrator, args)
        elif args.command == "evaluate":
            _run_evaluate(parser, orchestrator, args)
        elif args.command == "compare":
            comparison = orchestrator.compare_paths(args.path_a, args.path_b)
            if args.format == "json":
                print(json.dumps(comparison.to_dict(), indent=2))
            else:
                print(format_comparison(comparison))
        elif args.command == "policies":
            if args.format == "json":
                print(json.dumps([policy.to_dict() for policy in DEFAULT_POLICIES], indent=2))
            else:
                for policy in DEFAULT_POLICIES:
                    print(f"{policy.id:<18} {policy.name} ({len(policy.rules)} rules)")
                    print(f"{'':<18} {policy.description}")
        elif args.command == "starter":
            _run_starter(parser, orchestrator, args)
        elif args.command == "serve":
            _run_serve(parser, args)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except (ConfigError, PolicyError) as exc:
        parser.exit(1, f"repohealth {args.command} failed: {exc}\n")
    except ValueError as exc:
        logger.debug("Command failed", exc_info=True)
        parser.exit(1, f"repohealth {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _run_analyze(
    parser: argparse.ArgumentParser, orchestrator: Orchestrator, args: argparse.Namespace
) -> None:
    repo_path = Path(args.path).expanduser().resolve()
    config = None
    if repo_path.is_dir():
        config = orchestrator.load_config(repo_path)
        if args.log_file is None and config.logging.file is not None:
            add_file_handler(config.logging.file)
    # Missing or non-directory paths raise here.
    report = orchestrator.analyze_path(repo_path, license=args.license, language=args.language)
    policies = orchestrator.resolve_policies(args.policies, config=config)
    evaluations = orchestrator.evaluate(report, policies)

    if args.format == "text":
        output = format_report(report, evaluations)
    else:
        output = render_report(report, args.format, evaluations)

    if args.output:
        args.output.write_text(output, encoding="utf-8")
        print(f"Report written to {_relativize(args.output.resolve())}")
    else:
        sys.stdout.write(output if output.endswith("\n") else output + "\n")

    _exit_on_blocking(parser, evaluations)


def _run_evaluate(
    parser: argparse.ArgumentParser, orchestrator: Orchestrator, args: argparse.Namespace
) -> None:
    report = load_report(args.report.read_text(encoding="utf-8"))
    policies = orchestrator.resolve_policies(args.policies)
    evaluations = orchestrator.evaluate(report, policies)
    if args.format == "json":
        print(json.dumps([evaluation.to_dict() for evaluation in evaluations], indent=2))
    else:
        print(format_evaluations(evaluations).rstrip())
    _exit_on_blocking(parser, evaluations)


def _run_starter(
    parser: argparse.ArgumentParser, orchestrator: Orchestrator, args: argparse.Namespace
) -> None:
    if not args.filename:
        for filename in starter_filenames():
            print(filename)
        return
    if args.filename not in STARTER_FILES:
        parser.exit(
            1,
            f"No starter template for '{args.filename}'. "
            "Run `repohealth starter` to list the available files.\n",
        )

    report = orchestrator.analyze_path(args.path)
    starter = starter_file_for_report(report, args.filename)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(starter.content, encoding="utf-8")
        print(f"{starter.filename} written to {_relativize(args.output.resolve())}")
    else:
        sys.stdout.write(starter.content)


def _run_serve(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    try:
        from .service import run_service
    except ModuleNotFoundError as exc:
        parser.exit(
            1,
            f"Service mode needs the 'service' extra ({exc.name} is missing). "
            "Install it with `pip install repohealth[service]`.\n",
        )
    run_service(host=args.host, port=args.port, config_path=args.config)


def _exit_on_blocking(
    parser: argparse.ArgumentParser, evaluations: Sequence[PolicyEvaluation]
) -> None:
    if has_blocking_failures(evaluations):
        failed = ", ".join(
            evaluation.policy.id for evaluation in evaluations if blocking_failures(evaluation)
        )
        parser.exit(1, f"Policy check failed: {failed}\n")


def format_report(report: AnalysisReport, evaluations: Sequence[PolicyEvaluation] = ()) -> str:
    """Plain-text summary for terminals."""
    lines: List[str] = [
        f"{report.repo.full_name}: {report.overall_score}/100 (grade {report.grade.value})",
        "",
    ]
    for category in report.categories:
        lines.append(f"  {category.label:<14} {category.score:>3}  (weight {category.weight:.2f})")
        for signal in category.signals:
            mark = "+" if signal.found else "-"
            detail = f" ({signal.details})" if signal.details else ""
            lines.append(f"      {mark} {signal.name}{detail}")

    if report.tech_stack:
        lines += ["", "Tech stack: " + ", ".join(item.name for item in report.tech_stack)]
    for title, items in (
        ("Strengths", report.strengths),
        ("Risks", report.risks),
        ("Next steps", report.next_steps),
    ):
        if items:
            lines += ["", f"{title}:"] + [f"  - {item}" for item in items]

    lines += ["", f"Contributor readiness: {report.contributor_score.score}/100"]
    for item in report.contributor_score.readiness_checklist:
        lines.append(f"  [{'x' if item.passed else ' '}] {item.label}")

    if evaluations:
        lines += ["", format_evaluations(evaluations).rstrip()]
    return "\n".join(lines) + "\n"


def format_evaluations(evaluations: Sequence[PolicyEvaluation]) -> str:
    lines: List[str] = []
    for evaluation in evaluations:
        status = "PASSED" if evaluation.passed else "FAILED"
        lines.append(
            f"Policy {evaluation.policy.name}: {status} "
            f"({evaluation.pass_count} passed, {evaluation.fail_count} failed)"
        )
        for result in evaluation.results:
            mark = "ok" if result.passed else result.rule.severity.value
            lines.append(
                f"  [{mark}] {result.rule.name}: actual {result.actual}, expected {result.expected}"
            )
    return "\n".join(lines) + "\n"


def format_comparison(comparison: ComparisonReport) -> str:
    lines = [
        f"{comparison.repo_a} ({comparison.overall_a}) vs {comparison.repo_b} ({comparison.overall_b})",
    ]
    for diff in comparison.category_diffs:
        lines.append(f"  {diff.label:<14} {diff.score_a:>3} {diff.score_b:>3} {diff.diff:+4d}")
    winner: Optional[str] = {
        "A": comparison.repo_a,
        "B": comparison.repo_b,
    }.get(comparison.winner)
    lines.append(f"Winner: {winner}" if winner else "Result: tie")
    return "\n".join(lines)


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
