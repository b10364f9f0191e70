"""keysmith command-line interface.

Usage examples:
    keysmith
    keysmith -n 20 -s
    python -m keysmith -n 16 -c 5 --interleave
"""

import argparse
import logging
import os
import sys

from keysmith import (
    DEFAULT_LENGTH,
    MAX_LENGTH,
    MIN_LENGTH,
    PasswordGenerationError,
    generate_password,
)

logger = logging.getLogger(__name__)

_LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def _length(value: str) -> int:
    try:
        length = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid length: {value!r}") from None
    if not MIN_LENGTH <= length <= MAX_LENGTH:
        raise argparse.ArgumentTypeError(
            f"length must be between {MIN_LENGTH} and {MAX_LENGTH}"
        )
    return length


def _count(value: str) -> int:
    try:
        count = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid count: {value!r}") from None
    if count < 1:
        raise argparse.ArgumentTypeError("count must be at least 1")
    return count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keysmith",
        description="Generate secure passwords without sequential characters.",
    )
    parser.add_argument(
        "-n", "--length", type=_length, default=DEFAULT_LENGTH,
        help=f"Password length, {MIN_LENGTH}-{MAX_LENGTH} (default: {DEFAULT_LENGTH})",
    )
    parser.add_argument(
        "-s", "--special",
        action="store_true",
        help="Include special characters",
    )
    parser.add_argument(
        "-c", "--count", type=_count, default=1,
        help="Number of passwords to generate (default: 1)",
    )
    parser.add_argument(
        "--interleave",
        action="store_true",
        help="Shuffle the required characters instead of a fixed prefix",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug); overrides KEYSMITH_LOG_LEVEL",
    )
    return parser


def _configure_logging(verbosity: int) -> None:
    level = _LOG_LEVELS[min(verbosity, len(_LOG_LEVELS) - 1)]
    env_level = os.environ.get("KEYSMITH_LOG_LEVEL")
    invalid_env = None
    # An explicit -v/-vv wins over the environment.
    if env_level and not verbosity:
        resolved = logging.getLevelName(env_level.upper())
        if isinstance(resolved, int):
            level = resolved
        else:
            invalid_env = env_level
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("keysmith").setLevel(level)
    if invalid_env is not None:
        logger.warning("Ignoring invalid KEYSMITH_LOG_LEVEL %r", invalid_env)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    return _cmd_generate(args)


def _cmd_generate(args: argparse.Namespace) -> int:
    logger.info(
        "Generating %d password(s): length=%d special=%s interleave=%s",
        args.count, args.length, args.special, args.interleave,
    )
    try:
        for _ in range(args.count):
            pwd = generate_password(
                args.length,
                args.special,
                interleave=args.interleave,
            )
            print(pwd)
    except PasswordGenerationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:
        logger.exception("Unexpected failure while generating a password")
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
