"""
Health Data Integration.

Read-only access to daily health metrics (steps, sleep, workout
minutes) behind an async, authorization-gated interface, plus
helpers that relate those metrics to logged moods.

Failures are raised as typed HealthDataError subclasses at the call
site. Snapshot collection catches each fetch on its own and logs it;
nothing here retries.
"""

import asyncio
import logging
import os
import sqlite3
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Union

from .aggregator import TREND_MARGIN, local_day, daily_summary
from .config import get_settings
from .models import MoodEntry

logger = logging.getLogger(__name__)


class HealthDataError(Exception):
    """Base class for health data failures."""


class HealthDataNotAvailable(HealthDataError):
    """Health data is not available on this device or installation."""


class HealthAuthorizationDenied(HealthDataError):
    """The user has not granted read access to health data."""


class HealthDataFetchFailed(HealthDataError):
    """A query failed; the underlying error is kept as cause."""

    def __init__(self, cause: Exception):
        super().__init__(f"Health data fetch failed: {cause}")
        self.cause = cause


class HealthDataSource(ABC):
    """Async interface to a read-only store of daily health samples."""

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Whether health data can be read at all."""

    @property
    @abstractmethod
    def is_authorized(self) -> bool:
        """Whether read access has been granted."""

    @abstractmethod
    async def request_authorization(self) -> None:
        """Ask for read access. Raises HealthDataError on failure."""

    @abstractmethod
    async def fetch_steps(self, day: Union[date, datetime]) -> int:
        """Total steps for the day, 0 without samples."""

    @abstractmethod
    async def fetch_sleep_hours(self, day: Union[date, datetime]) -> float:
        """Hours slept for the day, 0 without samples."""

    @abstractmethod
    async def fetch_workout_minutes(self, day: Union[date, datetime]) -> int:
        """Workout minutes for the day, 0 without samples."""


class SQLiteHealthDataSource(HealthDataSource):
    """
    Health data source backed by a fitness_data SQLite table.

    Uses the same schema as exported wearable data: one or more rows
    per date with steps, sleep_hours and workout_duration_min columns.
    Values are stored as text, so they are cast on read. Connections
    are opened read-only per query.
    """

    def __init__(
        self,
        db_path: Optional[str] = None,
        grant_authorization: bool = True,
        table_name: str = "fitness_data",
    ):
        """
        Initialize the data source.

        Args:
            db_path: Path to the SQLite file (defaults to settings.health_db_path)
            grant_authorization: Outcome of the authorization request
            table_name: Table holding the daily samples
        """
        self.db_path = db_path or get_settings().health_db_path
        self.grant_authorization = grant_authorization
        self.table_name = table_name
        self._authorized = False

    @property
    def is_available(self) -> bool:
        return os.path.exists(self.db_path)

    @property
    def is_authorized(self) -> bool:
        return self._authorized

    async def request_authorization(self) -> None:
        if not self.is_available:
            raise HealthDataNotAvailable(f"No health database at {self.db_path}")

        self._authorized = self.grant_authorization
        if not self._authorized:
            raise HealthAuthorizationDenied("Read access to health data was denied")

        logger.info(f"[HEALTH] Authorized health data access: {self.db_path}")

    def _check_access(self) -> None:
        if not self.is_available:
            raise HealthDataNotAvailable(f"No health database at {self.db_path}")
        if not self._authorized:
            raise HealthAuthorizationDenied("Health data access has not been authorized")

    def _sum_column(self, column: str, day: date) -> float:
        """Blocking query summing one column over a day's rows."""
        uri = f"file:{self.db_path}?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True)
            try:
                cursor = conn.execute(
                    f"SELECT COALESCE(SUM(CAST({column} AS REAL)), 0) "
                    f"FROM {self.table_name} WHERE date = ?",
                    (day.isoformat(),),
                )
                row = cursor.fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise HealthDataFetchFailed(e) from e

        return float(row[0]) if row and row[0] is not None else 0.0

    async def _fetch(self, column: str, day: Union[date, datetime]) -> float:
        self._check_access()
        return await asyncio.to_thread(self._sum_column, column, local_day(day))

    async def fetch_steps(self, day: Union[date, datetime]) -> int:
        return int(await self._fetch("steps", day))

    async def fetch_sleep_hours(self, day: Union[date, datetime]) -> float:
        return await self._fetch("sleep_hours", day)

    async def fetch_workout_minutes(self, day: Union[date, datetime]) -> int:
        return int(await self._fetch("workout_duration_min", day))


@dataclass
class HealthSnapshot:
    """Health metrics for one day. Missing values are None."""

    day: date
    steps: Optional[int] = None
    sleep_hours: Optional[float] = None
    workout_minutes: Optional[int] = None
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "day": self.day.isoformat(),
            "steps": self.steps,
            "sleep_hours": self.sleep_hours,
            "workout_minutes": self.workout_minutes,
            "errors": list(self.errors),
        }


async def fetch_health_snapshot(
    source: HealthDataSource, day: Union[date, datetime]
) -> HealthSnapshot:
    """
    Fetch every metric for a day, tolerating individual failures.

    Args:
        source: The health data source
        day: Day to fetch

    Returns:
        HealthSnapshot with a value or an error for each metric
    """
    snapshot = HealthSnapshot(day=local_day(day))

    fetchers = {
        "steps": source.fetch_steps,
        "sleep_hours": source.fetch_sleep_hours,
        "workout_minutes": source.fetch_workout_minutes,
    }
    for name, fetch in fetchers.items():
        try:
            setattr(snapshot, name, await fetch(day))
        except HealthDataError as e:
            snapshot.errors.append(f"{name}: {e}")
            logger.warning(f"[HEALTH] Could not fetch {name} for {snapshot.day}: {e}")

    return snapshot


@dataclass
class MoodCorrelation:
    """Average mood on days that meet a health threshold vs. days that do not."""

    metric: str
    threshold: float
    unit: str
    average_with: float
    average_without: float
    days_with: int
    days_without: int
    trend: str  # positive, negative, neutral

    @property
    def description(self) -> str:
        if self.trend == "positive":
            return f"Better mood with {self.threshold:g}+ {self.unit}"
        if self.trend == "negative":
            return f"Lower mood with {self.threshold:g}+ {self.unit}"
        return f"No clear mood difference around {self.threshold:g} {self.unit}"

    def to_dict(self) -> dict:
        return {
            "metric": self.metric,
            "threshold": self.threshold,
            "unit": self.unit,
            "average_with": self.average_with,
            "average_without": self.average_without,
            "days_with": self.days_with,
            "days_without": self.days_without,
            "trend": self.trend,
            "description": self.description,
        }


# metric name -> (snapshot attribute, threshold, unit)
CORRELATION_THRESHOLDS = {
    "Sleep": ("sleep_hours", 8.0, "hours"),
    "Exercise": ("workout_minutes", 30.0, "minutes"),
    "Steps": ("steps", 8000.0, "steps"),
}


def mood_health_correlations(
    entries: Iterable[MoodEntry], snapshots: Iterable[HealthSnapshot]
) -> List[MoodCorrelation]:
    """
    Compare daily mood averages across health thresholds.

    Only days with at least one mood entry and a value for the metric
    are used. A metric is left out when either side has no days.
    """
    entries = list(entries)
    snapshots_by_day = {s.day: s for s in snapshots}

    day_moods: Dict[date, float] = {}
    for day in snapshots_by_day:
        summary = daily_summary(entries, day)
        if summary.entry_count:
            day_moods[day] = summary.average_intensity

    correlations = []
    for metric, (attribute, threshold, unit) in CORRELATION_THRESHOLDS.items():
        with_values: List[float] = []
        without_values: List[float] = []
        for day, mood in day_moods.items():
            value = getattr(snapshots_by_day[day], attribute)
            if value is None:
                continue
            (with_values if value >= threshold else without_values).append(mood)

        if not with_values or not without_values:
            continue

        average_with = sum(with_values) / len(with_values)
        average_without = sum(without_values) / len(without_values)
        if average_with > average_without + TREND_MARGIN:
            trend = "positive"
        elif average_with < average_without - TREND_MARGIN:
            trend = "negative"
        else:
            trend = "neutral"

        correlations.append(
            MoodCorrelation(
                metric=metric,
                threshold=threshold,
                unit=unit,
                average_with=average_with,
                average_without=average_without,
                days_with=len(with_values),
                days_without=len(without_values),
                trend=trend,
            )
        )

    return correlations
