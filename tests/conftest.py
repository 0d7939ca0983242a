"""
Pytest fixtures for Mood Mosaic tests.
"""
import sys
import sqlite3
import pytest
from datetime import datetime
from pathlib import Path
from dotenv import load_dotenv

# Ensure src/ is on sys.path so tests can import mood_mosaic without installing.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Load environment variables
load_dotenv()

from mood_mosaic.models import MoodEntry  # noqa: E402
from mood_mosaic.storage import InMemoryKeyValueStore  # noqa: E402


# ============================================================================
# Mood Entry Fixtures
# ============================================================================

# Fixed local "now" so day-boundary tests do not depend on the wall clock
REFERENCE_NOW = datetime(2026, 10, 19, 15, 0)


@pytest.fixture
def reference_now():
    """Return the fixed local reference time used across tests."""
    return REFERENCE_NOW


@pytest.fixture
def make_entry():
    """
    Factory fixture building MoodEntry objects.

    Timestamps are naive local datetimes; defaults to REFERENCE_NOW.
    """

    def _make_entry(intensity=50, tags=None, timestamp=None, note=None, **kwargs):
        return MoodEntry(
            intensity=intensity,
            tags=list(tags or []),
            note=note,
            timestamp=timestamp or REFERENCE_NOW,
            **kwargs,
        )

    return _make_entry


# ============================================================================
# Storage Fixtures
# ============================================================================

@pytest.fixture
def memory_store():
    """Return an empty in-memory key-value store."""
    return InMemoryKeyValueStore()


# ============================================================================
# Health Data Fixtures
# ============================================================================

FITNESS_ROWS = [
    # record_id, date, steps, sleep_hours, workout_duration_min
    ("REC_001", "2026-10-17", "6500", "6.0", "0"),
    ("REC_002", "2026-10-18", "9200.0", "8.5", "45.0"),
    ("REC_003", "2026-10-19", "4000", "7.0", "20"),
    ("REC_004", "2026-10-19", "1500", None, "10"),
]


@pytest.fixture
def health_db(tmp_path):
    """Create a fitness_data SQLite database with TEXT columns and return its path."""
    db_path = tmp_path / "health.db"
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()
    cursor.execute(
        "CREATE TABLE fitness_data ("
        "id INTEGER PRIMARY KEY AUTOINCREMENT, record_id TEXT, date TEXT, "
        "steps TEXT, sleep_hours TEXT, workout_duration_min TEXT)"
    )
    cursor.executemany(
        "INSERT INTO fitness_data (record_id, date, steps, sleep_hours, workout_duration_min) "
        "VALUES (?, ?, ?, ?, ?)",
        FITNESS_ROWS,
    )
    conn.commit()
    conn.close()
    return str(db_path)
