"""Leaderboard quest check from the command line.

Usage:
  python -m invitegate.leaderboard_cli 78752 0x4BdcB795842B0C029095687f2fD7DD15c52f443D
  python -m invitegate.leaderboard_cli 78752 0xabc... --sprint-id 3 --access-token TOKEN

The access token defaults to LEADERBOARD_ACCESS_TOKEN (environment or .env).
Prints one JSON boolean per entry on the first ranks page.
"""

import argparse
import asyncio
import json
import logging
import sys

from invitegate.config import get_settings
from invitegate.core.errors import InviteGateError
from invitegate.infrastructure.leaderboard_client import LeaderboardClient
from invitegate.infrastructure.observability import setup_logging
from invitegate.services.leaderboard_lookup import validate_quest

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="leaderboard_cli",
        description="Check an address against a space's loyalty-points leaderboard.",
    )
    parser.add_argument("space_id", type=int, help="numeric space id")
    parser.add_argument("address", help="wallet address to look for")
    parser.add_argument("--sprint-id", type=int, default=None)
    parser.add_argument("--access-token", default=None)
    parser.add_argument("--endpoint", default=None, help="override the GraphQL endpoint")
    return parser


async def run(args: argparse.Namespace) -> list[bool]:
    settings = get_settings()
    token = args.access_token or settings.leaderboard_access_token
    if not token:
        raise SystemExit("No access token: pass --access-token or set LEADERBOARD_ACCESS_TOKEN")
    client = LeaderboardClient(
        args.endpoint or settings.leaderboard_endpoint,
        timeout_seconds=settings.http_timeout_seconds,
    )
    try:
        return await validate_quest(
            client, args.space_id, token, args.address, sprint_id=args.sprint_id,
        )
    finally:
        await client.aclose()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level, "text")
    try:
        matches = asyncio.run(run(args))
    except InviteGateError as e:
        logger.error(e.message, extra={"error_code": e.code})
        return 1
    print(json.dumps(matches))
    return 0


if __name__ == "__main__":
    sys.exit(main())
