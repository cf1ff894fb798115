# uiauto_appium/cli.py
"""
@file cli.py
@brief Command-line interface: run the scenario, validate or list an object map.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from .actionlogger import ACTION_LOGGER
from .config import TimeConfig, available_presets, timeout_overrides
from .context import ActionContextManager
from .extractor import ExtractedProduct, format_products
from .repository import (DEFAULT_OBJECT_MAP, Repository, load_capabilities,
                         with_session_overrides)
from .runner import ScenarioRunner
from .session import Session

SERVER_URL_ENV = "UIAUTO_APPIUM_SERVER_URL"

EXIT_PASSED = 0
EXIT_SETUP_ERROR = 1
EXIT_FAILED = 2


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def _configure_action_logger_from_env() -> None:
    """UIAUTO_ACTION_LOGGING turns the event log on; the other variables tune it."""
    if not _env_flag("UIAUTO_ACTION_LOGGING"):
        ACTION_LOGGER.disable()
        return

    ACTION_LOGGER.configure(
        console=True,
        file_path=os.getenv("UIAUTO_ACTION_LOG_FILE"),
        level=os.getenv("UIAUTO_ACTION_LOG_LEVEL", "INFO"),
        format=os.getenv("UIAUTO_ACTION_LOG_FORMAT", "line"),
        max_traceback_chars=int(os.getenv("UIAUTO_ACTION_LOG_MAX_TRACEBACK", "4000")),
    )
    ACTION_LOGGER.enable()


def _parse_pause(spec: str) -> tuple[str, str]:
    key, sep, value = spec.partition("=")
    if not sep or not key.strip():
        raise ValueError(f"--pause expects KEY=SECONDS, got '{spec}'")
    return key.strip(), value.strip()


def _timing_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """--timeout first, then each --pause, so an explicit pause always wins."""
    overrides: Dict[str, Any] = {}
    if args.timeout is not None:
        overrides.update(timeout_overrides(args.timeout))
    overrides.update(_parse_pause(spec) for spec in args.pause or [])
    return overrides


def _build_time_config(args: argparse.Namespace) -> TimeConfig:
    return TimeConfig.build_from(preset=args.preset, overrides=_timing_overrides(args))


def _print_report(report: Dict[str, Any], verbose: bool) -> None:
    status = report.get("status", "unknown")
    print("\n" + "=" * 60)
    print(f"Scenario: {report.get('scenario')}  query='{report.get('query')}'")
    print(f"Status:   {status.upper()}")
    print(f"Duration: {report.get('duration_sec', 0):.2f}s")

    if verbose or status == "failed":
        print("\nSteps:")
        icons = {"passed": "+", "skipped": "-", "failed": "X"}
        for step in report.get("steps", []):
            print(
                f"  {icons.get(step['status'], '?')} [{step['index']:>2}] {step['name']} "
                f"({step['policy']}): {step['status']} {step.get('duration_sec', 0):.2f}s"
            )
            if "error" in step:
                print(f"      Error: {step['error']}")
            if verbose and step.get("action_trace"):
                print("      " + step["action_trace"].replace("\n", "\n      "))

    products = report.get("products") or []
    print()
    if products:
        print(format_products([ExtractedProduct(**p) for p in products]))
    else:
        print("No products found to extract")

    for i, error in enumerate(report.get("errors", [])):
        if i == 0:
            print("\nErrors:")
        print(f"  - {error}")
    print("=" * 60)

    if verbose:
        print("\nFull Report (JSON):")
        print(json.dumps(report, indent=2, ensure_ascii=False))


def _cmd_run(args: argparse.Namespace) -> int:
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    ActionContextManager.clear()

    try:
        repo = Repository(args.elements)
        caps = load_capabilities(args.caps) if args.caps else None
        session_config = with_session_overrides(repo.session, server_url=args.server_url, capabilities=caps)
        runner = ScenarioRunner(
            Session(session_config),
            repo,
            _build_time_config(args),
            query=args.query,
            limit=args.limit,
            artifacts_dir=args.screenshots_dir,
        )
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_SETUP_ERROR

    report = runner.run(report_path=args.report)
    _print_report(report, args.verbose)
    return EXIT_PASSED if report.get("status") == "passed" else EXIT_FAILED


def _cmd_validate(args: argparse.Namespace) -> int:
    try:
        repo = Repository(args.elements)
    except Exception as e:
        print(f"X Elements file is invalid: {e}", file=sys.stderr)
        return EXIT_FAILED
    print(f"+ Elements file is valid: {args.elements}")
    print(f"  - App: {repo.app.name}")
    print(f"  - Elements: {len(repo.list_elements())}")
    print(f"  - Query: {repo.query}")
    return EXIT_PASSED


def _cmd_list_elements(args: argparse.Namespace) -> int:
    try:
        repo = Repository(args.elements, require_scenario_elements=False)
    except Exception as e:
        print(f"Error loading elements file: {e}", file=sys.stderr)
        return EXIT_SETUP_ERROR

    names = repo.list_elements()
    print(f"Elements ({len(names)}):")
    for name in names:
        loc = repo.get_locator(name)
        print(f"  - {name}: {repo.describe(name)}")
        print(f"      {loc.by}: {loc.query}")
    return EXIT_PASSED


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="uiauto-appium",
        description="Mercado Libre Android search-and-filter scenario over Appium",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    runp = sub.add_parser("run", help="Run the search-and-filter scenario against an Appium server")
    runp.add_argument("--elements", "-e", default=DEFAULT_OBJECT_MAP, help="Object map YAML (default: packaged map)")
    runp.add_argument("--server-url", default=os.getenv(SERVER_URL_ENV), help=f"Appium server URL (default: ${SERVER_URL_ENV}, then the object map)")
    runp.add_argument("--caps", default=None, help="YAML/JSON capabilities file replacing the object map capabilities")
    runp.add_argument("--query", "-q", default=None, help="Search text (default: object map)")
    runp.add_argument("--limit", "-n", type=int, default=None, help="Number of result cards to extract (default: object map)")
    runp.add_argument("--screenshots-dir", default=None, help="Screenshot directory (default: object map)")
    runp.add_argument("--report", "-r", default="report.json", help="Report output path (JSON)")
    runp.add_argument("--timeout", "-t", type=float, default=None, help="Set every locator timeout, in seconds")
    runp.add_argument("--pause", action="append", metavar="KEY=SECONDS", help="Override one settle delay (repeatable)")
    presets = runp.add_mutually_exclusive_group()
    for name in sorted(set(available_presets()) - {"default"}):
        presets.add_argument(f"--{name}", dest="preset", action="store_const", const=name, help=f"Use the '{name}' timing preset")
    runp.add_argument("--verbose", action="store_true", help="Show step details, action traces and session logs")
    runp.set_defaults(func=_cmd_run, preset="default")

    valp = sub.add_parser("validate", help="Validate an object map")
    valp.add_argument("--elements", "-e", default=DEFAULT_OBJECT_MAP, help="Object map YAML")
    valp.set_defaults(func=_cmd_validate)

    listp = sub.add_parser("list-elements", help="List the elements of an object map")
    listp.add_argument("--elements", "-e", default=DEFAULT_OBJECT_MAP, help="Object map YAML")
    listp.set_defaults(func=_cmd_list_elements)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    _configure_action_logger_from_env()
    args = build_parser().parse_args(argv if argv is not None else sys.argv[1:])
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
