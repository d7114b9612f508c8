"""Command-line entry point.

    python -m whereabouts notes/barbara.txt --target Barbara
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from .config import get_config
from .container import Container
from .domain.errors import ConfigurationError
from .logging_setup import configure_logging
from .services import LocationResolverService


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="whereabouts",
        description="Find where a person mentioned in a note is right now.",
    )
    parser.add_argument("note", help="Path to the note file")
    parser.add_argument("--target", help="Name of the person to locate")
    parser.add_argument(
        "--max-attempts", type=positive_int, help="Ceiling on answer submissions"
    )
    parser.add_argument(
        "--workers", type=positive_int, help="Concurrent lookups per phase"
    )
    parser.add_argument(
        "--normalizer",
        choices=["rule_based", "llm"],
        help="Name normalization strategy",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = get_config().model_copy(deep=True)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if args.target is not None:
        config.search.target_name = args.target
    if args.max_attempts is not None:
        config.search.max_attempts = args.max_attempts
    if args.workers is not None:
        config.search.max_workers = args.workers
    if args.normalizer is not None:
        config.normalizer.strategy = args.normalizer

    configure_logging(config.observability)

    container = Container.create_default(config)
    try:
        service: LocationResolverService = container.resolve(LocationResolverService)
    except ConfigurationError as e:
        print(f"Configuration error: {e} ({e.setting_name})", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    outcome, error = service.resolve_safe(args.note)
    if outcome is None:
        print(error, file=sys.stderr)
        return 1

    print(service.format_outcome(outcome))
    return 0 if outcome.is_success else 1


if __name__ == "__main__":
    sys.exit(main())
