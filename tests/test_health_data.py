"""
Unit tests for health data access and mood correlation.

These tests verify:
1. Authorization and availability errors
2. Daily sums read from the fitness_data table
3. Snapshot collection that tolerates individual failures
4. Mood vs. health threshold correlations

Usage:
    pytest tests/test_health_data.py -v
"""
import sqlite3
import pytest
from datetime import date, datetime

from mood_mosaic.health_data import (
    HealthAuthorizationDenied,
    HealthDataFetchFailed,
    HealthDataNotAvailable,
    HealthDataSource,
    HealthSnapshot,
    SQLiteHealthDataSource,
    fetch_health_snapshot,
    mood_health_correlations,
)


async def authorized_source(db_path):
    source = SQLiteHealthDataSource(db_path=db_path)
    await source.request_authorization()
    return source


class PartialSource(HealthDataSource):
    """Source whose sleep query always fails."""

    is_available = True
    is_authorized = True

    async def request_authorization(self):
        return None

    async def fetch_steps(self, day):
        return 1234

    async def fetch_sleep_hours(self, day):
        raise HealthDataFetchFailed(RuntimeError("sleep store locked"))

    async def fetch_workout_minutes(self, day):
        return 15


# ============================================================================
# SQLite Source Tests
# ============================================================================


class TestAuthorization:
    """Test access checks."""

    @pytest.mark.asyncio
    async def test_missing_database_not_available(self, tmp_path):
        source = SQLiteHealthDataSource(db_path=str(tmp_path / "missing.db"))

        assert not source.is_available
        with pytest.raises(HealthDataNotAvailable):
            await source.request_authorization()

    @pytest.mark.asyncio
    async def test_denied_authorization(self, health_db):
        source = SQLiteHealthDataSource(db_path=health_db, grant_authorization=False)

        with pytest.raises(HealthAuthorizationDenied):
            await source.request_authorization()
        assert not source.is_authorized

    @pytest.mark.asyncio
    async def test_fetch_before_authorization(self, health_db):
        """Fetching without authorization raises."""
        source = SQLiteHealthDataSource(db_path=health_db)

        with pytest.raises(HealthAuthorizationDenied):
            await source.fetch_steps(date(2026, 10, 19))

    @pytest.mark.asyncio
    async def test_authorize(self, health_db):
        source = SQLiteHealthDataSource(db_path=health_db)
        await source.request_authorization()

        assert source.is_available
        assert source.is_authorized


class TestFetch:
    """Test daily metric queries."""

    @pytest.mark.asyncio
    async def test_sums_rows_for_day(self, health_db):
        """Multiple rows on one day are summed."""
        source = await authorized_source(health_db)
        day = date(2026, 10, 19)

        assert await source.fetch_steps(day) == 5500
        assert await source.fetch_sleep_hours(day) == 7.0
        assert await source.fetch_workout_minutes(day) == 30

    @pytest.mark.asyncio
    async def test_text_values_cast(self, health_db):
        """Decimal text values are read as numbers."""
        source = await authorized_source(health_db)
        day = date(2026, 10, 18)

        assert await source.fetch_steps(day) == 9200
        assert await source.fetch_sleep_hours(day) == 8.5
        assert await source.fetch_workout_minutes(day) == 45

    @pytest.mark.asyncio
    async def test_datetime_argument(self, health_db):
        source = await authorized_source(health_db)
        assert await source.fetch_steps(datetime(2026, 10, 17, 22, 30)) == 6500

    @pytest.mark.asyncio
    async def test_no_samples_is_zero(self, health_db):
        """A day without rows reads as zero."""
        source = await authorized_source(health_db)
        day = date(2026, 1, 1)

        assert await source.fetch_steps(day) == 0
        assert await source.fetch_sleep_hours(day) == 0.0
        assert await source.fetch_workout_minutes(day) == 0

    @pytest.mark.asyncio
    async def test_query_failure_wrapped(self, tmp_path):
        """SQLite errors surface as HealthDataFetchFailed."""
        db_path = tmp_path / "empty.db"
        sqlite3.connect(db_path).close()
        source = SQLiteHealthDataSource(db_path=str(db_path))
        await source.request_authorization()

        with pytest.raises(HealthDataFetchFailed) as exc_info:
            await source.fetch_steps(date(2026, 10, 19))
        assert isinstance(exc_info.value.cause, sqlite3.Error)


# ============================================================================
# Snapshot Tests
# ============================================================================


class TestSnapshot:
    """Test snapshot collection."""

    @pytest.mark.asyncio
    async def test_full_snapshot(self, health_db):
        source = SQLiteHealthDataSource(db_path=health_db)
        await source.request_authorization()

        snapshot = await fetch_health_snapshot(source, date(2026, 10, 18))

        assert snapshot.steps == 9200
        assert snapshot.sleep_hours == 8.5
        assert snapshot.workout_minutes == 45
        assert snapshot.errors == []

    @pytest.mark.asyncio
    async def test_failures_recorded_per_metric(self):
        """One failing metric does not hide the others."""
        snapshot = await fetch_health_snapshot(PartialSource(), date(2026, 10, 19))

        assert snapshot.steps == 1234
        assert snapshot.sleep_hours is None
        assert snapshot.workout_minutes == 15
        assert len(snapshot.errors) == 1
        assert snapshot.errors[0].startswith("sleep_hours")

    @pytest.mark.asyncio
    async def test_unauthorized_snapshot_is_empty(self, health_db):
        snapshot = await fetch_health_snapshot(
            SQLiteHealthDataSource(db_path=health_db), date(2026, 10, 19)
        )

        assert snapshot.steps is None
        assert len(snapshot.errors) == 3

    def test_to_dict(self):
        data = HealthSnapshot(day=date(2026, 10, 19), steps=10).to_dict()

        assert data["day"] == "2026-10-19"
        assert data["steps"] == 10
        assert data["sleep_hours"] is None


# ============================================================================
# Correlation Tests
# ============================================================================


class TestCorrelations:
    """Test mood vs. health threshold correlations."""

    def test_better_mood_with_sleep(self, make_entry):
        snapshots = [
            HealthSnapshot(day=date(2026, 10, 17), sleep_hours=6.0),
            HealthSnapshot(day=date(2026, 10, 18), sleep_hours=8.5),
            HealthSnapshot(day=date(2026, 10, 19), sleep_hours=9.0),
        ]
        entries = [
            make_entry(40, [], datetime(2026, 10, 17, 9)),
            make_entry(80, [], datetime(2026, 10, 18, 9)),
            make_entry(70, [], datetime(2026, 10, 19, 9)),
        ]

        correlations = mood_health_correlations(entries, snapshots)

        assert len(correlations) == 1
        sleep = correlations[0]
        assert sleep.metric == "Sleep"
        assert sleep.average_with == 75
        assert sleep.average_without == 40
        assert sleep.days_with == 2
        assert sleep.days_without == 1
        assert sleep.trend == "positive"
        assert sleep.description == "Better mood with 8+ hours"

    def test_negative_and_neutral(self, make_entry):
        snapshots = [
            HealthSnapshot(day=date(2026, 10, 18), steps=12000, workout_minutes=40),
            HealthSnapshot(day=date(2026, 10, 19), steps=3000, workout_minutes=0),
        ]
        entries = [
            make_entry(52, [], datetime(2026, 10, 18, 9)),
            make_entry(50, [], datetime(2026, 10, 19, 9)),
        ]

        by_metric = {c.metric: c for c in mood_health_correlations(entries, snapshots)}

        assert set(by_metric) == {"Exercise", "Steps"}
        assert by_metric["Steps"].trend == "neutral"

        entries[0] = make_entry(20, [], datetime(2026, 10, 18, 9))
        by_metric = {c.metric: c for c in mood_health_correlations(entries, snapshots)}
        assert by_metric["Exercise"].trend == "negative"

    def test_days_without_moods_skipped(self, make_entry):
        """Days with no mood entries do not count on either side."""
        snapshots = [
            HealthSnapshot(day=date(2026, 10, 18), sleep_hours=9.0),
            HealthSnapshot(day=date(2026, 10, 19), sleep_hours=5.0),
        ]
        entries = [make_entry(60, [], datetime(2026, 10, 19, 9))]

        assert mood_health_correlations(entries, snapshots) == []

    def test_accepts_generators(self, make_entry):
        snapshots = (
            HealthSnapshot(day=date(2026, 10, d), sleep_hours=h)
            for d, h in [(18, 9.0), (19, 5.0)]
        )
        entries = (
            make_entry(v, [], datetime(2026, 10, d, 9)) for d, v in [(18, 90), (19, 30)]
        )

        correlations = mood_health_correlations(entries, snapshots)

        assert correlations[0].to_dict()["trend"] == "positive"
