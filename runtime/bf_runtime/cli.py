"""
Command-line entry point: run a program file against stdin/stdout.

    bf-run SOURCEFILE [--eof {zero,unchanged,minus-one}] [--max-cells N]
                      [--max-steps N] [--check-brackets] [--no-flush] [-v]
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import EOFPolicy, RuntimeConfig
from .errors import BFError, Status
from .interpreter import Interpreter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bf-run", description="Run a brainfuck program.")
    parser.add_argument("source", type=str, help="Path to the program source file.")
    parser.add_argument("--eof", choices=[p.value for p in EOFPolicy], default=EOFPolicy.ZERO.value,
                        help="Value stored by ',' at end of input (default: zero).")
    parser.add_argument("--max-cells", type=int, default=None, help="Limit on tape cells.")
    parser.add_argument("--max-steps", type=int, default=None, help="Limit on executed instructions.")
    parser.add_argument("--check-brackets", action="store_true",
                        help="Validate all brackets before running.")
    parser.add_argument("--no-flush", action="store_true",
                        help="Do not flush stdout after every byte.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    prog = parser.prog

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr,
                            format="%(name)s: %(levelname)s: %(message)s")

    try:
        config = RuntimeConfig.from_args(args)
    except BFError as e:
        print(f"{prog}: error: {e.message}", file=sys.stderr)
        return 1

    try:
        with open(args.source, "rb") as f:
            program = f.read()
    except FileNotFoundError:
        print(f"{prog}: error: could not open file", file=sys.stderr)
        return 1
    except OSError as e:
        logger.debug("Reading %s failed: %s", args.source, e)
        print(f"{prog}: error: cannot read file", file=sys.stderr)
        return 1

    interpreter = Interpreter(program, sink=sys.stdout.buffer, source=sys.stdin.buffer, config=config)
    result = interpreter.run()
    sys.stdout.flush()

    if result.status is not Status.SUCCESS:
        logger.debug("%s", result.error)
        print(f"{prog}: error: {result.status.description}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
