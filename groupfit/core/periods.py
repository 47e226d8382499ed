"""Ranking period calculation."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from groupfit.core.constants import RANKING_DURATIONS, WEEK_START_WEEKDAY
from groupfit.errors import ValidationError


@dataclass(frozen=True)
class RankingWindow:
    """An inclusive [start, end] time range for ranking aggregation."""

    start: datetime.datetime
    end: datetime.datetime


def _start_of_day(value: datetime.datetime) -> datetime.datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def get_range(
    duration: str,
    now: datetime.datetime | None = None,
    tz: str | datetime.tzinfo | None = None,
) -> RankingWindow:
    """Return the ranking window for ``duration`` ending at ``now``.

    ``weekly`` starts on the most recent Monday at midnight and ``monthly`` on
    the first day of the current month at midnight, both in ``tz`` (UTC when
    omitted). Any other duration is rejected.
    """
    if duration not in RANKING_DURATIONS:
        raise ValidationError(
            f"duration must be one of {', '.join(RANKING_DURATIONS)}.",
            path="duration",
        )

    if isinstance(tz, str):
        tz = ZoneInfo(tz)
    tz = tz or datetime.timezone.utc

    if now is None:
        now = datetime.datetime.now(tz)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    else:
        now = now.astimezone(tz)

    if duration == "weekly":
        days_since_start = (now.weekday() - WEEK_START_WEEKDAY) % 7
        start = _start_of_day(now - datetime.timedelta(days=days_since_start))
    else:
        start = _start_of_day(now.replace(day=1))

    return RankingWindow(start=start, end=now)
