# src/authority_runner.py
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from config import make_authorization_service
from config.settings import AuthoritySettings, configure_logging
from engine.authorizer import AuthorizationResult


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Verify a bridge deposit and print the signed claim authorization.",
    )
    parser.add_argument("tx_id", help="deposit transaction hash")
    parser.add_argument("from_chain_id", type=int, help="chain ID where the deposit was sent")
    parser.add_argument("--nft", action="store_true", help="use the NFT bridge")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace, settings: AuthoritySettings) -> AuthorizationResult:
    service = make_authorization_service(settings)
    return await service.authorize(args.tx_id, args.from_chain_id, is_nft=args.nft)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run a single authorization and print the JSON response.

    Exit status is 0 for a signed authorization and 1 for any failure,
    including a deposit that is still waiting for confirmations. A
    keystore or chains file that cannot be loaded exits with 2.
    """
    args = parse_args(argv)
    settings = AuthoritySettings.from_env()
    configure_logging(settings.log_level)

    try:
        result = asyncio.run(run(args, settings))
    except (OSError, ValueError) as exc:
        # Start-up problems: unreadable keystore or chains file.
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    print(json.dumps(result.to_response(), indent=2))
    return 0 if result.is_success else 1


if __name__ == "__main__":
    sys.exit(main())
