"""Eligibility Snapshot — decides at login whether an account may claim.

Invariants:
    - eligible = account_age_days >= MIN_ACCOUNT_AGE_DAYS AND followers > MIN_FOLLOWERS_EXCLUSIVE
    - Computed once per login; never recomputed when the account's stats change
    - Missing created_at counts as "created now" (age 0, never eligible)

Design Decisions:
    - Snapshot-at-login kept as policy: a stale flag is possible if an account
      crosses the thresholds between logins
"""

from datetime import datetime

from invitegate.core.domain_types import MIN_ACCOUNT_AGE_DAYS, MIN_FOLLOWERS_EXCLUSIVE


def account_age_days(created_at: datetime | None, now: datetime) -> float:
    if created_at is None:
        return 0.0
    return (now - created_at).total_seconds() / 86_400


def compute_eligibility(
    created_at: datetime | None, followers: int, now: datetime,
) -> bool:
    """Pure eligibility check over the two login-time inputs."""
    return (
        account_age_days(created_at, now) >= MIN_ACCOUNT_AGE_DAYS
        and followers > MIN_FOLLOWERS_EXCLUSIVE
    )
