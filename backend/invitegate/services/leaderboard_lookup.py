"""Leaderboard Lookup — tests an address against the first page of a space's ranks.

Invariants:
    - One query per call; only the first page is inspected
    - Output is one bool per first-page entry, not a single found/not-found answer
    - Only the target is lower-cased; entry addresses are compared as returned

Design Decisions:
    - Output shape kept as-is: a single found/not-found answer for the target
      entry is not confirmed as the intent, so it is not substituted here
"""

import logging

from invitegate.infrastructure.leaderboard_client import LeaderboardClient

logger = logging.getLogger(__name__)


def match_addresses(addresses: list[str], target: str) -> list[bool]:
    normalised = target.lower()
    return [address == normalised for address in addresses]


async def validate_quest(
    client: LeaderboardClient,
    space_id: int | str,
    access_token: str,
    address: str = "",
    *,
    sprint_id: int | None = None,
) -> list[bool]:
    """Fetch the first ranks page and flag entries whose address equals the target."""
    page = await client.fetch_ranks(space_id, access_token, sprint_id=sprint_id)
    if page.page_info.has_next_page:
        logger.debug(
            f"Space {space_id} has more than one ranks page "
            f"({page.total_count} entries); only the first is inspected",
        )
    return match_addresses([entry.address.address for entry in page.entries], address)
