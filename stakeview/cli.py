"""Command-line interface for stakeview."""
from __future__ import annotations

import argparse
import asyncio
import sys

from .bignumber import bn_to_string
from .config import load_config
from .logging_setup import configure_logging
from .services import StakingService


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="stakeview",
        description="Proof-of-stake delegation tracker",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("report", help="Fetch all accounts and print a staking report")

    validator_parser = sub.add_parser("validator", help="Fetch a single validator")
    validator_parser.add_argument("chain_id", help="CAIP-2 chain id, e.g. cosmos:cosmoshub-4")
    validator_parser.add_argument("address", help="Validator operator address")

    return parser


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command; returns the process exit code."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    service = StakingService(config)

    if args.command == "report":
        await service.refresh()
        print(service.build_report())
        return 0

    if args.command == "validator":
        result = await service.fetch_validator(args.chain_id, args.address)
        if not result.ok:
            print(f"Failed to fetch validator: {result.error.message}", file=sys.stderr)
            return 1
        validator = result.data
        print(
            f"{validator.moniker} ({validator.address})\n"
            f"  APR: {validator.apr * 100:.2f}%\n"
            f"  Commission: {validator.commission * 100:.2f}%\n"
            f"  Tokens: {bn_to_string(validator.tokens)}"
        )
        return 0

    build_parser().print_help()
    return 1


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
