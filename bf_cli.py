#!/usr/bin/env python3
"""
bfrun: run a Brainfuck program file, or check a YAML suite of programs.

    bfrun -r hello.bf
    bfrun --suite programs/suite.yaml
"""

import argparse
import sys

from brainfuck import BrainfuckError, BrainfuckInterpreter
from bf_loader import load_program_file
from bf_log import init_logger, set_level
from bf_settings import DEFAULT_STEP_LIMIT, LOG_LEVEL, LOG_LEVELS
from bf_suite import load_program_cases, run_suite

logger = init_logger("BF_CLI")


def build_parser():
    ap = argparse.ArgumentParser(prog="bfrun", description="Brainfuck interpreter")
    ap.add_argument("-r", "--run", help="Name of the Brainfuck file to interpret")
    ap.add_argument("--suite", help="Path to YAML file with program cases")
    ap.add_argument("--step-limit", type=int, default=None,
                    help=f"Interpreter max steps (suite default: {DEFAULT_STEP_LIMIT}; --run default: unbounded)")
    ap.add_argument("--log-level", default=LOG_LEVEL, type=str.upper, choices=LOG_LEVELS,
                    help="Logging level (env BF_LOG_LEVEL)")
    return ap


def run_file(path, step_limit=None) -> int:
    try:
        source = load_program_file(path)
        itp = BrainfuckInterpreter(source)
        if step_limit is None:
            itp.run()
        else:
            while itp.steps < step_limit and itp.step():
                pass
            if not itp.finished:
                logger.warning("Stopped after %d steps", itp.steps)
                return 2
    except OSError as e:
        logger.error("Cannot read %s: %s", path, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except BrainfuckError as e:
        logger.error("%s: %s", e.kind, e)
        print(f"{e.kind}: {e}", file=sys.stderr)
        return 1
    return 0


def check_suite(path, step_limit=None) -> int:
    try:
        cases = load_program_cases(path)
    except (OSError, ValueError, BrainfuckError) as e:
        logger.error("Cannot load suite %s: %s", path, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    outcomes = run_suite(cases, step_limit or DEFAULT_STEP_LIMIT)
    for o in outcomes:
        status = "PASS" if o.passed else "FAIL"
        line = f"{status} {o.case.name}"
        if o.reason:
            line += f": {o.reason}"
        print(line)
    return 0 if all(o.passed for o in outcomes) else 1


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    set_level(args.log_level)

    if args.suite:
        return check_suite(args.suite, args.step_limit)
    if args.run:
        return run_file(args.run, args.step_limit)

    print("Error")
    return 1


if __name__ == "__main__":
    sys.exit(main())
