"""
Command-line entry point.

Commands:
    hieravault lookup KEY   - Resolve a key and print it as JSON
    hieravault check        - Check that Vault is reachable and unsealed
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Sequence

import structlog

from hieravault.backend import VaultBackend
from hieravault.config.loader import load_config
from hieravault.errors import ExitCode, main_with_error_handling
from hieravault.host import HierarchyHost
from hieravault.logging import configure_logging
from hieravault.models import ResolutionType

logger = structlog.get_logger()


def _scope_pair(pair: str) -> tuple[str, str]:
    name, sep, value = pair.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"invalid scope variable '{pair}', expected name=value")
    return name, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hieravault", description="Vault hierarchy lookups")
    parser.add_argument("--config", help="Path to configuration file", default=None)
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    subparsers = parser.add_subparsers(dest="command")

    lookup_parser = subparsers.add_parser("lookup", help="Resolve a key")
    lookup_parser.add_argument("key", help="Lookup key")
    lookup_parser.add_argument(
        "--scope",
        action="append",
        type=_scope_pair,
        default=[],
        metavar="NAME=VALUE",
        help="Scope variable used for interpolation (repeatable)",
    )
    lookup_parser.add_argument(
        "--type",
        dest="resolution_type",
        choices=[member.value for member in ResolutionType],
        default=ResolutionType.SCALAR.value,
        help="Resolution type",
    )
    override_group = lookup_parser.add_mutually_exclusive_group()
    override_group.add_argument("--override", help="Hierarchy level to consult first")
    override_group.add_argument(
        "--override-json",
        type=json.loads,
        help="Override value as JSON (e.g. a flag directive)",
    )

    subparsers.add_parser("check", help="Check that Vault is reachable and unsealed")

    return parser


def lookup_command(args: argparse.Namespace) -> int:
    loaded = load_config(args.config)
    backend = VaultBackend(loaded.backend, HierarchyHost(loaded.hierarchy))

    override: Any = args.override
    if args.override_json is not None:
        override = args.override_json

    answer = backend.lookup(args.key, dict(args.scope), override, args.resolution_type)
    if answer is None:
        logger.info("key_not_found", key=args.key)
        return ExitCode.NOT_FOUND

    print(json.dumps(answer, indent=2, sort_keys=True))
    return ExitCode.SUCCESS


def check_command(args: argparse.Namespace) -> int:
    loaded = load_config(args.config)
    backend = VaultBackend(loaded.backend, HierarchyHost(loaded.hierarchy))
    if backend.store.ensure_connected():
        print(f"vault available at {loaded.backend.store.addr}")
        return ExitCode.SUCCESS
    print(f"vault unavailable at {loaded.backend.store.addr}")
    return ExitCode.STORE_ERROR


@main_with_error_handling
def run(args: argparse.Namespace) -> int:
    if args.command == "lookup":
        return lookup_command(args)
    if args.command == "check":
        return check_command(args)
    return ExitCode.UNKNOWN_ERROR


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1

    configure_logging(args.log_level.upper())
    return run(args)


if __name__ == "__main__":  # pragma: no cover - exercised via module entrypoint
    sys.exit(main())
