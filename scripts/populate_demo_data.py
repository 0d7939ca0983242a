#!/usr/bin/env python3
"""
Populate demo data for Mood Mosaic.

Creates a health.db SQLite database with a fitness_data table and a
store of mood entries covering the last two weeks, under the
configured data path (MOOD_MOSAIC_DATA_PATH).

Usage:
    python scripts/populate_demo_data.py
"""
import logging
import os
import random
import sqlite3
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

# Base directory (project root)
BASE_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BASE_DIR / "src"))

from mood_mosaic.config import get_settings  # noqa: E402
from mood_mosaic.models import EmotionTag, MoodEntry  # noqa: E402
from mood_mosaic.repositories import CustomHabitRepository, MoodRepository  # noqa: E402
from mood_mosaic.storage import FileKeyValueStore  # noqa: E402

DEMO_DAYS = 14
FITNESS_COLUMNS = ["record_id", "date", "steps", "sleep_hours", "workout_duration_min"]


def populate_health_database(db_path: str, rng: random.Random) -> int:
    """
    Create and populate the fitness_data table.

    Args:
        db_path: SQLite file to (re)create
        rng: Random source for the generated values

    Returns:
        Number of rows inserted
    """
    if os.path.exists(db_path):
        os.remove(db_path)
        print(f"  Removed existing: {Path(db_path).name}")

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    # TEXT columns, matching exported wearable data
    columns = ["id INTEGER PRIMARY KEY AUTOINCREMENT"] + [f"{c} TEXT" for c in FITNESS_COLUMNS]
    cursor.execute(f"CREATE TABLE fitness_data ({', '.join(columns)})")

    rows = []
    today = date.today()
    for offset in range(DEMO_DAYS):
        day = today - timedelta(days=offset)
        rows.append(
            (
                f"REC_{day.strftime('%Y%m%d')}",
                day.isoformat(),
                str(rng.randint(2000, 14000)),
                f"{rng.uniform(5.0, 9.0):.1f}",
                str(rng.choice([0, 0, 20, 30, 45, 60])),
            )
        )

    placeholders = ", ".join(["?"] * len(FITNESS_COLUMNS))
    cursor.executemany(
        f"INSERT INTO fitness_data ({', '.join(FITNESS_COLUMNS)}) VALUES ({placeholders})",
        rows,
    )
    conn.commit()

    cursor.execute("SELECT COUNT(*) FROM fitness_data")
    count = cursor.fetchone()[0]
    conn.close()

    return count


def populate_mood_entries(repository: MoodRepository, rng: random.Random) -> int:
    """Add two to four mood entries per demo day."""
    tags = list(EmotionTag)
    now = datetime.now()
    added = 0

    for offset in range(DEMO_DAYS):
        day = now - timedelta(days=offset)
        for _ in range(rng.randint(2, 4)):
            timestamp = day.replace(hour=rng.randint(8, 21), minute=rng.randint(0, 59))
            if timestamp > now:
                continue
            repository.add(
                MoodEntry(
                    intensity=rng.randint(20, 95),
                    tags=[t.value for t in rng.sample(tags, rng.randint(1, 3))],
                    timestamp=timestamp,
                )
            )
            added += 1

    return added


def main():
    """Populate the demo health database and mood store."""
    logging.basicConfig(level=logging.WARNING)
    settings = get_settings()
    rng = random.Random(42)

    print("=" * 60)
    print("Mood Mosaic Demo Data Population Script")
    print("=" * 60)
    print(f"\nData path: {settings.data_path}\n")

    os.makedirs(settings.data_path, exist_ok=True)

    print(f"Processing: fitness_data -> {settings.health_db_path}")
    row_count = populate_health_database(settings.health_db_path, rng)
    print(f"  Rows inserted: {row_count}\n")

    store = FileKeyValueStore(settings.store_path)
    store.delete(settings.mood_entries_key)
    store.delete(settings.custom_habits_key)

    print(f"Processing: mood entries -> {settings.store_path}")
    entry_count = populate_mood_entries(MoodRepository(store), rng)
    print(f"  Entries added: {entry_count}")

    habits = CustomHabitRepository(store).habits
    print(f"  Default habits: {', '.join(h.name for h in habits)}")

    print("\n" + "=" * 60)
    print("Complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
