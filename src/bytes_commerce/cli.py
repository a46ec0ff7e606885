"""Command-line entry point.

Usage:
    export BYTES_IDENTITY_HOST=https://identity.example.com
    export BYTES_COMMERCE_HOST=https://commerce.example.com
    export BYTES_USERNAME=client-id
    export BYTES_PASSWORD=client-secret
    export BYTES_CONTRACT_ID=1234

    bytes-commerce create --friendly-name acme-sub --po-number PO-1 --budget-code BC-1
    bytes-commerce order 200

Output:
    Record as JSON on stdout. Structured logs on stderr.
    Exit code 0 on success, 1 on API failure, 2 on configuration errors.
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import os
import sys
from typing import Any, Mapping, Sequence

from .client.errors import CommerceError, ConfigurationError
from .observability.logging import configure_logging, get_logger
from .resource import SubscriptionResource
from .session import CommerceSession
from .settings import CommerceSettings

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bytes-commerce",
        description="Provision subscriptions through the commerce API.",
    )
    parser.add_argument("--identity-url", help="Identity API URL (BYTES_IDENTITY_HOST)")
    parser.add_argument("--commerce-url", help="Commerce API URL (BYTES_COMMERCE_HOST)")
    parser.add_argument("--username", help="API client id (BYTES_USERNAME)")
    parser.add_argument("--contract-id", type=int, help="Contract ID (BYTES_CONTRACT_ID)")
    parser.add_argument("--log-level", default=None, help="Log level (LOG_LEVEL)")

    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create a subscription and wait for its id")
    create.add_argument("--friendly-name", required=True)
    create.add_argument("--po-number", required=True)
    create.add_argument("--budget-code", required=True)
    create.add_argument("--default-admin", default="")
    create.add_argument("--division-id", type=int, default=None)

    order = sub.add_parser("order", help="Show an existing order")
    order.add_argument("order_id")

    return parser


def resolve_settings(
    args: argparse.Namespace,
    env: Mapping[str, str] | None = None,
) -> CommerceSettings:
    """Environment settings with command-line overrides applied."""
    settings = CommerceSettings.from_env(env)
    overrides: dict[str, Any] = {}
    if args.identity_url:
        overrides["identity_api_url"] = args.identity_url
    if args.commerce_url:
        overrides["commerce_api_url"] = args.commerce_url
    if args.username:
        overrides["username"] = args.username
    if args.contract_id is not None:
        overrides["contract_id"] = args.contract_id
    return dataclasses.replace(settings, **overrides)


async def run(args: argparse.Namespace, settings: CommerceSettings) -> dict[str, Any]:
    async with await CommerceSession.from_settings(settings) as session:
        resource = SubscriptionResource(session)
        if args.command == "create":
            return await resource.create(
                {
                    "friendly_name": args.friendly_name,
                    "po_number": args.po_number,
                    "budget_code": args.budget_code,
                    "default_admin": args.default_admin,
                    "division_id": args.division_id,
                }
            )
        return await resource.read(args.order_id)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level, json_output=os.environ.get("LOG_FORMAT") == "json")

    try:
        settings = resolve_settings(args)
        record = asyncio.run(run(args, settings))
    except ConfigurationError as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return 2
    except CommerceError as exc:
        logger.error("command_failed", command=args.command, error=str(exc))
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(record, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
