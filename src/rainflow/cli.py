"""
Command-line driver: read a relief and a rain duration, print the settled state.

Input (stdin):
    line 1: whitespace-separated non-negative integers, the relief left to right
    line 2: a real number, the hours of rain

Usage:
    printf '3 7 4 5 3\\n2\\n' | python -m src.rainflow
    printf '3 1\\n1\\n' | python -m src.rainflow --plot output/profile.png

Exit codes: 0 on success, 1 on malformed input, 2 if the engine fails.
"""

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

from src.config import DEFAULT_LOG_LEVEL
from src.rainflow.display import format_state
from src.rainflow.flow import ConvergenceError, FlowClassificationError, simulate
from src.utils.helpers import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BAD_INPUT = 1
EXIT_ENGINE_FAILURE = 2


class InputError(ValueError):
    """Malformed relief or rain duration."""


def parse_relief(line: str) -> List[int]:
    """Parse the relief line into column heights."""
    tokens = line.split()
    if not tokens:
        raise InputError("relief line is empty")

    relief = []
    for i, token in enumerate(tokens, start=1):
        try:
            height = int(token)
        except ValueError:
            raise InputError(f"relief entry {i} ({token!r}) is not an integer") from None
        if height < 0:
            raise InputError(f"relief entry {i} ({height}) is negative")
        relief.append(height)
    return relief


def parse_hours(line: str) -> float:
    """Parse the rain duration line."""
    text = line.strip()
    if not text:
        raise InputError("hours line is empty")
    try:
        hours = float(text)
    except ValueError:
        raise InputError(f"hours ({text!r}) is not a number") from None
    if not math.isfinite(hours):
        raise InputError(f"hours ({text!r}) must be finite")
    if hours < 0:
        raise InputError(f"hours ({hours:g}) must be non-negative")
    return hours


def read_input(stream: TextIO) -> Tuple[List[int], float]:
    """Read the relief and hours lines from ``stream``."""
    relief_line = stream.readline()
    if not relief_line:
        raise InputError("no input: expected a relief line and an hours line")
    hours_line = stream.readline()
    if not hours_line:
        raise InputError("missing hours line")
    return parse_relief(relief_line), parse_hours(hours_line)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rainflow",
        description="Settle rain over a one-dimensional relief read from stdin.",
    )
    parser.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {DEFAULT_LOG_LEVEL})",
    )
    parser.add_argument(
        "--plot",
        type=Path,
        default=None,
        help="Also save a profile plot of the settled relief to this image path",
    )
    parser.add_argument(
        "--no-grid",
        action="store_true",
        help="Print only the per-column report, without the ASCII grid",
    )
    return parser


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    args = build_parser().parse_args(argv)
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr

    setup_logging("src", args.log_level, stream=stderr)

    try:
        relief, hours = read_input(stdin)
    except InputError as e:
        print(f"error: {e}", file=stderr)
        return EXIT_BAD_INPUT

    logger.info(f"Read relief of {len(relief)} columns and {hours:g} h of rain")

    try:
        result = simulate(relief, hours)
    except (FlowClassificationError, ConvergenceError) as e:
        logger.error(f"Flow engine failed: {e}")
        print(f"error: flow engine failed: {e}", file=stderr)
        return EXIT_ENGINE_FAILURE

    print(format_state(result, grid=not args.no_grid), file=stdout)

    if args.plot is not None:
        from src.rainflow.visualization import save_water_profile_plot

        save_water_profile_plot(result, args.plot)

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
