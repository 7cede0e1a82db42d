"""
Command-line interface for the Namespace SDK.

Read-only commands:
- listing: Show the listing of a parent name
- details: Simulate a mint and show eligibility and price
- available: Check on chain whether a subname is free
- config: Show the configuration resolved from the environment

Configuration comes from NAMESPACE_* variables (and a .env file).
Output is JSON on stdout; errors go to stderr with a non-zero exit code.
"""

import argparse
import asyncio
import json
import sys
from dataclasses import replace
from typing import Optional

import httpx

from . import __version__
from .audit_logger import AuditLogger
from .config import ClientConfig, load_config_from_env
from .exceptions import NamespaceError
from .orchestrator import NamespaceClient


def _print_json(data: dict) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _print_error(data: dict) -> None:
    print(json.dumps(data, ensure_ascii=False, default=str), file=sys.stderr)


def build_config(args: argparse.Namespace) -> ClientConfig:
    """Resolve configuration from the environment plus command line overrides."""
    config = load_config_from_env(dotenv_path=args.env_file)
    if args.chain_id is not None:
        config = replace(config, chain_id=args.chain_id)
    return config


def _create_client(config: ClientConfig, verbose: bool) -> NamespaceClient:
    logger = AuditLogger(output_format="text") if verbose else None
    return NamespaceClient(config, logger=logger)


async def show_listing(config: ClientConfig, name: str, verbose: bool = False) -> int:
    async with _create_client(config, verbose) as client:
        listing = await client.get_listed_name(name)
    _print_json(listing.to_dict())
    return 0


async def show_mint_details(
    config: ClientConfig,
    name: str,
    label: str,
    minter: str,
    verbose: bool = False,
) -> int:
    async with _create_client(config, verbose) as client:
        listing = await client.get_listed_name(name)
        details = await client.get_mint_details(listing, label, minter)
    _print_json({
        "subname": f"{label}.{listing.full_name}",
        "canMint": details.can_mint,
        "estimatedPrice": details.estimated_price,
        "estimatedFee": details.estimated_fee,
        "validationErrors": details.validation_errors,
        "requiresVerifiedMinter": details.requires_verified_minter,
        "isStandardFee": details.is_standard_fee,
    })
    return 0 if details.can_mint else 1


async def check_availability(
    config: ClientConfig,
    name: str,
    label: str,
    verbose: bool = False,
) -> int:
    """
    Check a subname on chain.

    Returns:
        Exit code (0 for available, 1 for taken)
    """
    async with _create_client(config, verbose) as client:
        listing = await client.get_listed_name(name)
        available = await client.is_subname_available(listing, label)
    _print_json({"subname": f"{label}.{listing.full_name}", "available": available})
    return 0 if available else 1


def _run(args: argparse.Namespace, command) -> int:
    """Build the configuration and run an async command, mapping errors to exit code 2."""
    try:
        config = build_config(args)
    except ValueError as e:
        _print_error({"error_type": "ValueError", "message": str(e)})
        return 2

    try:
        return asyncio.run(command(config))
    except NamespaceError as e:
        _print_error(e.to_dict())
        return 2
    except httpx.HTTPError as e:
        _print_error({"error_type": type(e).__name__, "message": str(e)})
        return 2


def cmd_listing(args: argparse.Namespace) -> int:
    """Handle the 'listing' command."""
    return _run(args, lambda config: show_listing(config, args.name, args.verbose))


def cmd_details(args: argparse.Namespace) -> int:
    """Handle the 'details' command."""
    return _run(
        args,
        lambda config: show_mint_details(config, args.name, args.label, args.minter, args.verbose),
    )


def cmd_available(args: argparse.Namespace) -> int:
    """Handle the 'available' command."""
    return _run(args, lambda config: check_availability(config, args.name, args.label, args.verbose))


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the 'config' command."""
    try:
        config = build_config(args)
    except ValueError as e:
        _print_error({"error_type": "ValueError", "message": str(e)})
        return 2

    if args.action == "show":
        _print_json({
            "chainId": config.chain_id,
            "mode": config.mode.value,
            "backendUrl": config.backend_api_url,
            "rpcUrl": config.rpc_url,
            "mintSource": config.mint_source,
            "l2ControllerVersion": config.l2_controller_version.value,
            "httpTimeout": config.http_timeout,
            "logging": {
                "enabled": config.logging.enabled,
                "level": config.logging.level,
                "outputFormat": config.logging.output_format,
            },
        })
        return 0

    return 1


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--chain-id",
        type=int,
        help="Chain id to use (overrides NAMESPACE_CHAIN_ID)",
    )
    parser.add_argument(
        "--env-file",
        help="Path to a .env file to load",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log SDK steps to stderr",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="namespace-sdk",
        description="Query Namespace listings and subname availability",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'listing' command
    listing_parser = subparsers.add_parser(
        "listing",
        help="Show the listing of a parent name",
    )
    listing_parser.add_argument("name", help="Listed parent name (e.g., example.eth)")
    _add_common_arguments(listing_parser)
    listing_parser.set_defaults(func=cmd_listing)

    # 'details' command
    details_parser = subparsers.add_parser(
        "details",
        help="Simulate a mint and show eligibility and price",
    )
    details_parser.add_argument("name", help="Listed parent name (e.g., example.eth)")
    details_parser.add_argument("label", help="Subname label to mint (e.g., alice)")
    details_parser.add_argument(
        "--minter",
        required=True,
        help="Address of the minter",
    )
    _add_common_arguments(details_parser)
    details_parser.set_defaults(func=cmd_details)

    # 'available' command
    available_parser = subparsers.add_parser(
        "available",
        help="Check whether a subname is still free",
    )
    available_parser.add_argument("name", help="Listed parent name (e.g., example.eth)")
    available_parser.add_argument("label", help="Subname label (e.g., alice)")
    _add_common_arguments(available_parser)
    available_parser.set_defaults(func=cmd_available)

    # 'config' command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
    )
    config_parser.add_argument(
        "action",
        choices=["show"],
        help="Configuration action",
    )
    _add_common_arguments(config_parser)
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
