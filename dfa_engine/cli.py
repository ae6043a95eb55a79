"""
Command line front end for the DFA engine.

Usage:
    dfa-engine validate FILE
    dfa-engine run FILE INPUT [INPUT ...] [--json]
    dfa-engine steps FILE INPUT [--json]
    dfa-engine dot FILE
"""

import argparse
import json
import sys
from typing import List, Optional

import structlog

from .engine import DFAEngine
from .errors import DFAFormatError
from .export import load_dfa, to_dot
from .logging_config import setup_logging
from .validator import validate_dfa

log = structlog.get_logger(__name__)


def cmd_validate(args) -> int:
    report = validate_dfa(load_dfa(args.file))
    if args.json:
        print(report.model_dump_json(by_alias=True, indent=2))
        return 0 if report.is_valid else 1
    for error in report.errors:
        print(f"ERROR:   {error}")
    for warning in report.warnings:
        print(f"WARNING: {warning}")
    print("VALID" if report.is_valid else "INVALID")
    return 0 if report.is_valid else 1


def cmd_run(args) -> int:
    engine = DFAEngine(load_dfa(args.file))
    all_accepted = True
    for input_string in args.inputs:
        result = engine.process_string(input_string)
        all_accepted = all_accepted and result.accepted
        if args.json:
            print(result.model_dump_json(by_alias=True))
            continue
        verdict = "ACCEPT" if result.accepted else "REJECT"
        print(f"{verdict}  '{input_string}'  path: {' -> '.join(result.path) or '-'}")
        if result.outcome.is_failure:
            print(f"        {result.error}")
    return 0 if all_accepted else 2


def cmd_steps(args) -> int:
    trace = DFAEngine(load_dfa(args.file)).get_simulation_trace(args.input)
    if args.json:
        print(trace.model_dump_json(by_alias=True, indent=2))
        return 0
    for step in trace.steps:
        symbol = step.symbol if step.symbol is not None else "-"
        print(f"{step.step_number:>4}  {symbol:>3}  {step.state_id:<12} remaining: '{step.remaining_input}'")
    print(trace.outcome.value + (f": {trace.error}" if trace.error else ""))
    return 0


def cmd_dot(args) -> int:
    print(to_dot(load_dfa(args.file)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dfa-engine",
        description="Validate and simulate DFA definitions stored as JSON",
    )
    parser.add_argument("--log-level", default=None,
                        help="Logging level (default: $LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("validate", help="Structural report for a DFA file")
    p.add_argument("file")
    p.add_argument("--json", action="store_true", help="Emit JSON")
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("run", help="Accept/reject one or more input strings")
    p.add_argument("file")
    p.add_argument("inputs", nargs="+", metavar="INPUT")
    p.add_argument("--json", action="store_true", help="Emit one JSON result per line")
    p.set_defaults(func=cmd_run)

    p = sub.add_parser("steps", help="Step-by-step trace for one input string")
    p.add_argument("file")
    p.add_argument("input")
    p.add_argument("--json", action="store_true", help="Emit JSON")
    p.set_defaults(func=cmd_steps)

    p = sub.add_parser("dot", help="Graphviz DOT source for a DFA file")
    p.add_argument("file")
    p.set_defaults(func=cmd_dot)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_level=args.log_level, file_output=False)
    try:
        return args.func(args)
    except (DFAFormatError, OSError) as e:
        log.error("cli_failed", command=args.command, error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
