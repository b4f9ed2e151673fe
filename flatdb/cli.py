# ==============================================
# CLI - Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Let an operator check a store file by hand, e.g. after startup
#   refused to load it with "please fix it manually".
#
# COMMANDS:
# ---------
# 1. Verify a store file without loading it into any real object:
#    python -m flatdb.cli inspect data/mncache.dat --tag "magicMasternodeCache"
#    python -m flatdb.cli inspect data/mncache.dat --tag CACHE1 --env aabbccdd
#
# EXIT CODES:
# -----------
#   0 → file is OK, missing, or has a recoverable format problem
#   1 → file is corrupted or belongs to another store / environment
#
# ==============================================

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from flatdb.config import configure_logging, get_config
from flatdb.persistence import FlatStore, RawPayload, ReadResult


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flatdb", description="Flat store file tools")
    sub = parser.add_subparsers(dest="command", required=True)

    inspect = sub.add_parser("inspect", help="Dry-run read a store file and report the result")
    inspect.add_argument("path", help="Path to the store file")
    inspect.add_argument("--tag", required=True, help="Expected store tag")
    inspect.add_argument("--env", default=None, help="Expected environment tag as 8 hex digits")
    inspect.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default WARNING)",
    )
    return parser


def inspect_file(path: str, tag: str, env: Optional[str] = None) -> ReadResult:
    """
    Dry-run read a store file into an opaque payload.

    Args:
        path: Path to the store file
        tag: Expected store tag
        env: Expected environment tag; defaults to the configured one

    Returns:
        The ReadResult of the read
    """
    file_path = Path(path)
    env_tag = env if env is not None else get_config().store.env_tag
    store = FlatStore(file_path.name, tag, env_tag, data_dir=file_path.parent)
    payload = RawPayload()
    result = store.read(payload, dry_run=True)

    print(f"{file_path}: {result.value}")
    if result == ReadResult.OK:
        print(f"   payload: {len(payload.payload)} bytes")
    return result


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "inspect":
        try:
            result = inspect_file(args.path, args.tag, args.env)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2
        return 1 if result.is_fatal else 0
    return 2


if __name__ == "__main__":
    sys.exit(main())
