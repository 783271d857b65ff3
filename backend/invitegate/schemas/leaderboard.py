"""Leaderboard Schemas — GraphQL spaceLoyaltyPointsRanks payload.

Invariants:
    - Field names mirror the GraphQL schema (camelCase aliases)
    - pageInfo is parsed so callers can see more pages exist, even if unused
"""

from pydantic import BaseModel, ConfigDict, Field


class RankedAddress(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str | None = None
    address: str
    avatar: str | None = None


class RankEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    rank: int
    points: float
    address: RankedAddress


class PageInfo(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    has_next_page: bool = Field(False, alias="hasNextPage")
    end_cursor: str | None = Field(None, alias="endCursor")


class LoyaltyRanksPage(BaseModel):
    """One page of spaceLoyaltyPointsRanks."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    total_count: int = Field(0, alias="totalCount")
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")
    entries: list[RankEntry] = Field(default_factory=list, alias="list")


class GraphQLError(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str = ""


class LoyaltyRanksResponse(BaseModel):
    """Top-level GraphQL envelope: {data: {spaceLoyaltyPointsRanks}, errors}."""
    model_config = ConfigDict(extra="ignore")

    data: dict | None = None
    errors: list[GraphQLError] | None = None
