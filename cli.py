"""
Command line interface for the EvoNiche SDK.

Examples
--------
Run a speciated evolution on the sphere objective::

    python cli.py run --profile fast

Explain a configuration key::

    python cli.py describe-config --key compatibility_threshold
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict

from evoniche import EvoNiche
from evoniche.diagnostics.doctor import run_doctor
from evoniche.utils.logger import configure_console
from evoniche.utils.profiles import list_profiles


def _default_config_path(path: str) -> Path:
    candidate = Path(path)
    if candidate.exists():
        return candidate
    raise FileNotFoundError(f"Configuration file not found: {candidate}")


def _cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    engine: Dict[str, Any] = {}
    for key in ("generations", "population", "objective", "seed"):
        value = getattr(args, key, None)
        if value is not None:
            engine[key] = value
    return {"engine": engine} if engine else {}


def _run_command(args: argparse.Namespace) -> None:
    config_source = _default_config_path(args.config) if args.config else None
    em = EvoNiche(
        profile=args.profile,
        config=_cli_overrides(args) or None,
        global_config=config_source,
        run_name=args.run_name,
    )
    configure_console(args.log_level or em.config["tracking"]["log_level"])
    result = em.run()
    payload = {
        "run_id": result.run_id,
        "best_score": result.best_score,
        "generations": len(result.history),
        "final_species": result.reports[-1].species_count if result.reports else 0,
        "final_threshold": result.reports[-1].compatibility_threshold if result.reports else None,
    }
    print(json.dumps(payload, indent=2))


def _doctor_command(_: argparse.Namespace) -> None:
    results = run_doctor()
    for item in results:
        status = item.get("status", "unknown").upper()
        check = item.get("check", "")
        details = item.get("details")
        print(f"[{status}] {check}")
        if details:
            print(f"  {details}")


def _list_profiles_command(_: argparse.Namespace) -> None:
    print(json.dumps(list_profiles(), indent=2))


def _describe_config_command(args: argparse.Namespace) -> None:
    if args.key:
        print(EvoNiche.explain(args.key))
        return
    EvoNiche.describe_config(section=args.section, as_markdown=args.markdown, to_console=True)


def _generate_config_docs_command(args: argparse.Namespace) -> None:
    output = Path(args.output)
    path = EvoNiche.generate_config_docs(output)
    print(f"Configuration reference generated at {path.resolve()}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="evoniche", description="EvoNiche speciation SDK CLI")
    subparsers = parser.add_subparsers(dest="command")

    profile_choices = sorted(list_profiles().keys())

    run_parser = subparsers.add_parser("run", help="Execute an EvoNiche evolutionary run.")
    run_parser.add_argument("--config", help="Optional configuration file (YAML/JSON).")
    run_parser.add_argument("--profile", choices=profile_choices, help="Apply a configuration profile before overrides.")
    run_parser.add_argument("--objective", help="Objective function (sphere, rastrigin, rosenbrock).")
    run_parser.add_argument("--generations", type=int, help="Number of generations to evolve.")
    run_parser.add_argument("--population", type=int, help="Population size.")
    run_parser.add_argument("--seed", type=int, help="Random seed.")
    run_parser.add_argument("--run-name", help="Optional custom name used for the run id (slugified).")
    run_parser.add_argument("--log-level", help="Console log level (DEBUG, INFO, WARNING...).")
    run_parser.set_defaults(func=_run_command)

    doctor_parser = subparsers.add_parser("doctor", help="Run environment diagnostics.")
    doctor_parser.set_defaults(func=_doctor_command)

    profiles_parser = subparsers.add_parser("list-profiles", help="Show the available configuration profiles.")
    profiles_parser.set_defaults(func=_list_profiles_command)

    describe_parser = subparsers.add_parser("describe-config", help="Display EvoNiche configuration schema.")
    describe_parser.add_argument("--section", help="Optional configuration section to filter.")
    describe_parser.add_argument("--markdown", action="store_true", help="Render the output as markdown.")
    describe_parser.add_argument("--key", help="Explain a single configuration key instead of listing the table.")
    describe_parser.set_defaults(func=_describe_config_command)

    config_doc_parser = subparsers.add_parser("generate-config-docs", help="Write CONFIG.md from the schema.")
    config_doc_parser.add_argument("--output", default="CONFIG.md", help="Destination markdown file (default: CONFIG.md).")
    config_doc_parser.set_defaults(func=_generate_config_docs_command)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0].startswith("--"):
        argv = ["run", *argv]
    if not argv:
        parser.print_help()
        return
    parsed = parser.parse_args(argv)
    if not hasattr(parsed, "func"):
        parser.print_help()
        return
    parsed.func(parsed)


if __name__ == "__main__":
    main()
