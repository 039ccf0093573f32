"""
Trial Status - Days Remaining and Urgency

Trial end resolves from, in order: an explicit end date, the trial start
plus trial days, the verification date plus trial days, the approval date
plus trial days.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from hurecore.coreutils.env import TRIAL_DAYS
from hurecore.coreutils.time import KENYA_TZ, to_instant

URGENT_DAYS = 5
CRITICAL_DAYS = 2

_SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class TrialStatus:
    days_remaining: int
    trial_end: Optional[datetime]
    is_expired: bool
    is_urgent: bool
    is_critical: bool


def resolve_trial_end(
    trial_ends_at: Any = None,
    trial_started_at: Any = None,
    verified_at: Any = None,
    approved_at: Any = None,
    trial_days: Optional[int] = None,
) -> Optional[datetime]:
    """First available trial end, or None when nothing anchors the trial"""
    days = TRIAL_DAYS if trial_days is None else trial_days

    explicit = to_instant(trial_ends_at)
    if explicit is not None:
        return explicit.as_datetime()

    for anchor in (trial_started_at, verified_at, approved_at):
        instant = to_instant(anchor)
        if instant is not None:
            return instant.as_datetime() + timedelta(days=days)

    return None


def trial_status(
    now: Optional[datetime] = None,
    trial_ends_at: Any = None,
    trial_started_at: Any = None,
    verified_at: Any = None,
    approved_at: Any = None,
    trial_days: Optional[int] = None,
) -> TrialStatus:
    """
    Countdown for an organization's trial

    Days remaining round up, so a trial ending later today still shows one
    day. Urgent covers 3-5 days, critical 1-2 days.
    """
    trial_end = resolve_trial_end(
        trial_ends_at, trial_started_at, verified_at, approved_at, trial_days
    )
    if trial_end is None:
        return TrialStatus(0, None, True, False, False)

    now = now or datetime.now(KENYA_TZ)
    if now.tzinfo is None:
        now = now.replace(tzinfo=KENYA_TZ)

    remaining = math.ceil((trial_end - now).total_seconds() / _SECONDS_PER_DAY)

    return TrialStatus(
        days_remaining=max(0, remaining),
        trial_end=trial_end,
        is_expired=remaining <= 0,
        is_urgent=CRITICAL_DAYS < remaining <= URGENT_DAYS,
        is_critical=0 < remaining <= CRITICAL_DAYS,
    )
