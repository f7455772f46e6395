"""
Command line entrypoint.

``smartui run <directory>`` runs every scenario file in a directory,
each in its own browser session. ``smartui validate <file>...`` only
parses.
"""

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from smartui.core.errors import ScenarioFormatError, ScenarioSourceError
from smartui.core.logging import configure_logging
from smartui.runner.scenario import load_scenario, summarize
from smartui.runner.scenario_runner import run_directory

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="smartui", description="Run field-name driven UI test scenarios")
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command")

    run_p = sub.add_parser("run", help="run every scenario file in a directory")
    run_p.add_argument("directory", nargs="?", default=None)

    val_p = sub.add_parser("validate", help="parse scenario files and print a summary")
    val_p.add_argument("files", nargs="+")
    return parser


def cmd_run(directory: Optional[str]) -> int:
    if not directory:
        print("Please provide a directory containing scenario files.")
        return 0
    if not os.path.isdir(directory):
        print(f"Not a directory: {directory}")
        return 0
    batch = run_directory(directory)
    if not batch.results:
        print(f"No scenario files found in {directory}")
        return 0
    for result in batch.results:
        status = "PASSED" if result.passed else "FAILED"
        line = f"{status} {result.name} ({result.pages_run} page(s))"
        if result.error:
            line += f": {result.error}"
        print(line)
        for warning in result.warnings:
            print(f"  warning: {warning}")
    print(f"{len(batch.results) - len(batch.failed)}/{len(batch.results)} scenario(s) passed")
    return 0 if batch.passed else 1


def cmd_validate(files: List[str]) -> int:
    rc = 0
    for path in files:
        try:
            scenario = load_scenario(path)
        except (ScenarioSourceError, ScenarioFormatError, ValueError) as e:
            print(f"INVALID {path}: {e}")
            rc = 1
            continue
        print(f"OK {path}")
        print(json.dumps(summarize(scenario), ensure_ascii=False, indent=2))
    return rc


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level)
    if args.command == "run":
        return cmd_run(args.directory)
    if args.command == "validate":
        return cmd_validate(args.files)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
