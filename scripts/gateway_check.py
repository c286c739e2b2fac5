#!/usr/bin/env python3
"""
Gateway configuration and connectivity check.

DO NOT ADD BUSINESS LOGIC HERE.
This script only calls the gateway layer.

Usage:
    python scripts/gateway_check.py
    python scripts/gateway_check.py --gateway iotec --status <REFERENCE>
    python scripts/gateway_check.py --balance

Flow:
    1. Validate configuration of the selected gateway
    2. Optionally query account balance
    3. Optionally look up a transaction by gateway or external reference
"""

import argparse
import asyncio
import logging
import sys

from paygate import (
    ConfigurationError,
    GatewayError,
    UnsupportedOperationError,
    gateway_service,
)


async def run(args: argparse.Namespace) -> int:
    try:
        if args.gateway:
            gateway = gateway_service.get_gateway(args.gateway)
        else:
            gateway = gateway_service.validate()
    except ConfigurationError as e:
        print(f"ERROR: {e} (code={e.code})")
        return 1

    config = gateway.gateway_config
    print(f"Gateway: {config.name.value} (sandbox={config.use_sandbox})")

    if args.balance:
        try:
            balances = await gateway.get_balance()
        except UnsupportedOperationError as e:
            print(f"Balance: {e}")
        except GatewayError as e:
            print(f"ERROR: balance query failed: {e} (code={e.code})")
            return 1
        else:
            if not balances:
                print("Balance: no wallets reported")
            for balance in balances:
                print(f"Balance: {balance.amount:,.2f} {balance.currency}")

    if args.status or args.external:
        try:
            if args.status:
                result = await gateway.check_status(args.status)
            else:
                result = await gateway.check_status_by_external_reference(args.external)
        except GatewayError as e:
            print(f"ERROR: status check failed: {e} (code={e.code})")
            return 1

        print(f"Status: {result.status.value} (success={result.success})")
        print(f"  gateway reference: {result.gateway_reference or '-'}")
        print(f"  external reference: {result.external_reference or '-'}")
        print(f"  MNO reference: {result.mno_reference or '-'}")
        if result.amount is not None:
            print(f"  amount: {result.amount} {result.currency or ''}")
        if result.message:
            print(f"  message: {result.message}")

    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Check payment gateway configuration")
    parser.add_argument("--gateway", choices=["yo", "iotec"], help="Gateway (default: PAYMENT_GATEWAY)")
    parser.add_argument("--balance", action="store_true", help="Query account balance")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--status", metavar="REFERENCE", help="Look up by gateway reference")
    group.add_argument("--external", metavar="REFERENCE", help="Look up by external reference")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
