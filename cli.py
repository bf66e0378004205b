#!/usr/bin/env python3
"""Command-line front ends for the hyperoperation evaluator.

Usage examples:
  - Ackermann-Peter function:
      ackermann 4 1

  - Hyperoperation H(order, base, exp):
      hyperop 4 3 3

  - Fail fast instead of exhausting memory:
      hyperop 5 3 3 --max-bits 100000
      hyperop 1000000 2 3 --max-depth 1000
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass

from pydantic import BaseModel, ValidationError

from hyperop import (
    DEFAULT_MAX_DEPTH,
    HyperCalculator,
    RecursionBudgetExceeded,
    ResultSizeExceeded,
)
from models import AckermannRequest, HyperOpRequest, allow_long_numerals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrontEnd:
    """One thin command: positional numerals in, one numeral out."""

    prog: str
    fields: tuple[str, ...]
    help_words: frozenset[str]
    usage: str
    request: type[BaseModel]
    operation: str      # HyperCalculator method name


ACKERMANN = FrontEnd(
    prog="ackermann",
    fields=("m", "n"),
    help_words=frozenset({"help", "/?"}),
    usage="usage: ackermann m n\nwhere both are Natural decimal numerals\n",
    request=AckermannRequest,
    operation="ackermann",
)

HYPEROP = FrontEnd(
    prog="hyperop",
    fields=("order", "base", "exp"),
    help_words=frozenset({"help", "?"}),
    usage="usage: hyperop n base exp\nwhere all are Natural decimal numerals\n",
    request=HyperOpRequest,
    operation="hyper_op",
)


def build_argparser(front: FrontEnd) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog=front.prog,
        description=front.usage.splitlines()[0],
    )
    ap.add_argument(
        "numerals",
        nargs="*",
        metavar="NUMERAL",
        help=f"Non-negative decimal numerals: {' '.join(front.fields)}.",
    )
    ap.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Maximum pending frames in the order walk (default {DEFAULT_MAX_DEPTH}).",
    )
    ap.add_argument(
        "--max-bits",
        type=int,
        default=None,
        help="Refuse any value wider than this many bits (default: unlimited).",
    )
    ap.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-v info, -vv debug).",
    )
    return ap


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _print_parse_errors(exc: ValidationError) -> None:
    for err in exc.errors(include_url=False):
        name = err["loc"][0] if err["loc"] else "?"
        print(f"error: cannot parse `{name}`: {err['msg']}", file=sys.stderr)


def run(front: FrontEnd, argv: list[str] | None = None) -> int:
    ap = build_argparser(front)
    args = ap.parse_args(argv)
    _configure_logging(args.verbose)

    numerals: list[str] = args.numerals
    if not numerals:
        print(front.usage)
        return 0
    if numerals[0].lower() in front.help_words:
        print(front.usage)
        return 0
    if len(numerals) < len(front.fields):
        print(front.usage, file=sys.stderr)
        return 2
    if len(numerals) > len(front.fields):
        logger.info("ignoring %d extra argument(s)", len(numerals) - len(front.fields))

    allow_long_numerals()
    try:
        request = front.request.model_validate(dict(zip(front.fields, numerals)))
    except ValidationError as e:
        _print_parse_errors(e)
        return 2

    try:
        calc = HyperCalculator(max_depth=args.max_depth, max_bits=args.max_bits)
    except ValueError as e:
        ap.error(str(e))

    # the parsed strings can be large; keep only the integers
    del numerals, args

    try:
        value = getattr(calc, front.operation)(**request.model_dump())
    except (RecursionBudgetExceeded, ResultSizeExceeded) as e:
        logger.info("%s aborted: %s", front.prog, e)
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(value)
    return 0


def ackermann_main(argv: list[str] | None = None) -> int:
    return run(ACKERMANN, argv)


def hyperop_main(argv: list[str] | None = None) -> int:
    return run(HYPEROP, argv)


if __name__ == "__main__":
    raise SystemExit(hyperop_main())
