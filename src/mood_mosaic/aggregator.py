"""
Mood Aggregation.

Pure functions that derive daily summaries, the 7-day trend and
filtered entry lists from an in-memory list of mood entries.
Values are recomputed on every call; nothing is cached.

Day boundaries follow the local calendar. Naive timestamps are
taken to be local time.
"""

import calendar
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

from .models import MoodEntry

logger = logging.getLogger(__name__)

# Minimum difference between recent and earlier averages to call a trend
TREND_MARGIN = 5.0

# Buckets compared on each side of the week
TREND_WINDOW = 3

WEEK_DAYS = 7


class TrendDirection(str, Enum):
    """Classification of recent vs. earlier mood averages."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"
    INSUFFICIENT_DATA = "insufficient_data"

    @property
    def label(self) -> str:
        return _TREND_LABELS[self]


_TREND_LABELS = {
    TrendDirection.IMPROVING: "Improving ↗️",
    TrendDirection.DECLINING: "Declining ↘️",
    TrendDirection.STABLE: "Stable →",
    TrendDirection.INSUFFICIENT_DATA: "Insufficient data",
}


class TimeFilter(str, Enum):
    """Time windows offered when browsing entries."""

    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


@dataclass
class DailySummary:
    """Aggregate figures for one calendar day."""

    day: date
    entry_count: int = 0
    average_intensity: float = 0.0
    dominant_tag: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "day": self.day.isoformat(),
            "entry_count": self.entry_count,
            "average_intensity": self.average_intensity,
            "dominant_tag": self.dominant_tag,
        }


@dataclass
class TrendBucket:
    """One day in the weekly trend."""

    day: date
    label: str
    average_intensity: float
    entry_count: int

    def to_dict(self) -> dict:
        return {
            "day": self.day.isoformat(),
            "label": self.label,
            "average_intensity": self.average_intensity,
            "entry_count": self.entry_count,
        }


@dataclass
class WeeklyTrend:
    """Seven daily buckets, oldest first, plus the trend classification."""

    buckets: List[TrendBucket] = field(default_factory=list)
    direction: TrendDirection = TrendDirection.INSUFFICIENT_DATA
    recent_average: Optional[float] = None
    earlier_average: Optional[float] = None

    @property
    def description(self) -> str:
        return self.direction.label

    def to_dict(self) -> dict:
        return {
            "buckets": [b.to_dict() for b in self.buckets],
            "direction": self.direction.value,
            "description": self.description,
            "recent_average": self.recent_average,
            "earlier_average": self.earlier_average,
        }


def _as_local(ts: datetime) -> datetime:
    """Return ts as an aware datetime in the local timezone."""
    return ts.astimezone()


def local_day(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return _as_local(value).date()
    return value


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def entries_for_day(
    entries: Iterable[MoodEntry], day: Union[date, datetime]
) -> List[MoodEntry]:
    """Entries whose timestamp falls on the same local calendar day as day."""
    target = local_day(day)
    return [e for e in entries if local_day(e.timestamp) == target]


def dominant_tag(entries: Iterable[MoodEntry]) -> Optional[str]:
    """
    Most frequent tag across the entries' tag lists.

    Ties go to the tag encountered first when walking the entries in
    order. Returns None if there are no tags at all.
    """
    counts = Counter(tag for entry in entries for tag in entry.tags)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def daily_summary(
    entries: Iterable[MoodEntry], day: Union[date, datetime]
) -> DailySummary:
    """
    Summarize the entries logged on one calendar day.

    Args:
        entries: All known mood entries
        day: The day to summarize (a datetime is reduced to its local date)

    Returns:
        DailySummary with count, mean intensity (0 when empty) and dominant tag
    """
    day_entries = entries_for_day(entries, day)
    return DailySummary(
        day=local_day(day),
        entry_count=len(day_entries),
        average_intensity=_mean([e.intensity for e in day_entries]),
        dominant_tag=dominant_tag(day_entries),
    )


def weekly_trend(
    entries: Iterable[MoodEntry],
    reference_date: Optional[Union[date, datetime]] = None,
) -> WeeklyTrend:
    """
    Build the 7-day mood trend ending on reference_date.

    Buckets cover reference_date and the six days before it, oldest
    first. Only buckets with a nonzero average take part in the
    classification: the mean of the last (up to) three is compared
    with the mean of the first (up to) three.

    Args:
        entries: All known mood entries
        reference_date: Last day of the window (defaults to today)

    Returns:
        WeeklyTrend with exactly seven buckets
    """
    entries = list(entries)
    end_day = local_day(reference_date) if reference_date else date.today()

    buckets = []
    for offset in range(WEEK_DAYS - 1, -1, -1):
        day = end_day - timedelta(days=offset)
        summary = daily_summary(entries, day)
        buckets.append(
            TrendBucket(
                day=day,
                label=day.strftime("%a"),
                average_intensity=summary.average_intensity,
                entry_count=summary.entry_count,
            )
        )

    qualifying = [b.average_intensity for b in buckets if b.average_intensity > 0]
    if len(qualifying) < 2:
        return WeeklyTrend(buckets=buckets)

    recent = _mean(qualifying[-TREND_WINDOW:])
    earlier = _mean(qualifying[:TREND_WINDOW])

    if recent > earlier + TREND_MARGIN:
        direction = TrendDirection.IMPROVING
    elif recent < earlier - TREND_MARGIN:
        direction = TrendDirection.DECLINING
    else:
        direction = TrendDirection.STABLE

    logger.debug(
        f"[TREND] {end_day}: recent={recent:.1f} earlier={earlier:.1f} -> {direction.value}"
    )
    return WeeklyTrend(
        buckets=buckets,
        direction=direction,
        recent_average=recent,
        earlier_average=earlier,
    )


def _sorted_recent_first(entries: Iterable[MoodEntry]) -> List[MoodEntry]:
    return sorted(entries, key=lambda e: _as_local(e.timestamp), reverse=True)


def recent_entries(
    entries: Iterable[MoodEntry], days: int = 7, now: Optional[datetime] = None
) -> List[MoodEntry]:
    """Entries with timestamp >= now - days, most recent first."""
    cutoff = _as_local(now or datetime.now()) - timedelta(days=days)
    return _sorted_recent_first(e for e in entries if _as_local(e.timestamp) >= cutoff)


def _one_month_before(moment: datetime) -> datetime:
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    last_day = calendar.monthrange(year, month)[1]
    return moment.replace(year=year, month=month, day=min(moment.day, last_day))


def filter_entries(
    entries: Iterable[MoodEntry],
    time_filter: TimeFilter = TimeFilter.ALL,
    now: Optional[datetime] = None,
) -> List[MoodEntry]:
    """Entries inside the given time window, most recent first."""
    now = _as_local(now or datetime.now())

    if time_filter == TimeFilter.ALL:
        return _sorted_recent_first(entries)
    if time_filter == TimeFilter.TODAY:
        return _sorted_recent_first(entries_for_day(entries, now))
    if time_filter == TimeFilter.WEEK:
        return recent_entries(entries, 7, now=now)

    cutoff = _one_month_before(now)
    return _sorted_recent_first(e for e in entries if _as_local(e.timestamp) >= cutoff)
