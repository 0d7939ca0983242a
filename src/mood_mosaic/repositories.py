"""
Record Repositories.

Repositories own one record collection and its persistence boundary.
Every mutation writes the whole collection back to the injected
key-value store and returns a copy of the updated collection.

(De)serialization failures never reach the caller: a failed load
yields an empty collection (or the default habits) and a failed
write is logged and skipped.
"""

import logging
from datetime import date, datetime
from typing import Callable, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from .aggregator import entries_for_day, recent_entries
from .config import get_settings
from .models import CustomHabit, HabitColor, MoodEntry
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class _CollectionRepository(Generic[RecordT]):
    """Shared load/save logic for a collection stored under one key."""

    def __init__(self, store: KeyValueStore, key: str, record_type: type):
        self.store = store
        self.key = key
        self._adapter = TypeAdapter(List[record_type])
        self._records: List[RecordT] = []

    def _decode(self) -> Optional[List[RecordT]]:
        """
        Read and decode the stored collection.

        Returns:
            Decoded records, or None if nothing usable is stored
        """
        try:
            raw = self.store.get(self.key)
        except OSError as e:
            logger.warning(f"[STORE] Failed to read {self.key}: {e}")
            return None

        if raw is None:
            return None

        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(
                f"[STORE] Discarding undecodable {self.key} data "
                f"({e.error_count()} errors)"
            )
            return None

    def _save(self) -> None:
        try:
            encoded = self._adapter.dump_json(self._records)
            self.store.set(self.key, encoded)
        except (OSError, ValueError) as e:
            logger.warning(f"[STORE] Skipped write of {self.key}: {e}")

    def _index_of(self, record_id: str) -> Optional[int]:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def get(self, record_id: str) -> Optional[RecordT]:
        index = self._index_of(record_id)
        return self._records[index] if index is not None else None

    def __len__(self) -> int:
        return len(self._records)


class MoodRepository(_CollectionRepository[MoodEntry]):
    """Ordered collection of mood entries keyed by id."""

    def __init__(self, store: KeyValueStore, key: Optional[str] = None):
        super().__init__(store, key or get_settings().mood_entries_key, MoodEntry)
        self.reload()

    def reload(self) -> List[MoodEntry]:
        """Reload entries from the store, discarding in-memory state."""
        self._records = self._decode() or []
        logger.info(f"[MOODS] Loaded {len(self._records)} mood entries")
        return self.entries

    @property
    def entries(self) -> List[MoodEntry]:
        return list(self._records)

    def add(self, entry: MoodEntry) -> List[MoodEntry]:
        self._records.append(entry)
        self._save()
        logger.debug(f"[MOODS] Added entry {entry.id} ({entry.intensity:.0f})")
        return self.entries

    def update(self, entry: MoodEntry) -> List[MoodEntry]:
        """Replace the entry with the same id. Unknown ids are ignored."""
        index = self._index_of(entry.id)
        if index is None:
            logger.debug(f"[MOODS] No entry {entry.id} to update")
            return self.entries
        self._records[index] = entry
        self._save()
        return self.entries

    def delete(self, entry_id: str) -> List[MoodEntry]:
        before = len(self._records)
        self._records = [e for e in self._records if e.id != entry_id]
        if len(self._records) != before:
            self._save()
        return self.entries

    def entries_for_day(self, day: Union[date, datetime]) -> List[MoodEntry]:
        return entries_for_day(self._records, day)

    def recent(
        self, days: Optional[int] = None, now: Optional[datetime] = None
    ) -> List[MoodEntry]:
        if days is None:
            days = get_settings().default_recent_days
        return recent_entries(self._records, days, now=now)


def default_custom_habits() -> List[CustomHabit]:
    """Habits seeded on first launch."""
    return [
        CustomHabit(
            name="Meditation",
            icon="brain.head.profile",
            color=HabitColor.PURPLE,
            unit="min",
            target_value=10,
        ),
        CustomHabit(
            name="Reading",
            icon="book.fill",
            color=HabitColor.BROWN,
            unit="pages",
            target_value=20,
        ),
        CustomHabit(
            name="Steps",
            icon="figure.walk",
            color=HabitColor.GREEN,
            unit="steps",
            target_value=10000,
        ),
    ]


class CustomHabitRepository(_CollectionRepository[CustomHabit]):
    """Collection of user-defined habit trackers."""

    def __init__(
        self,
        store: KeyValueStore,
        key: Optional[str] = None,
        seed_defaults: bool = True,
        defaults_factory: Callable[[], List[CustomHabit]] = default_custom_habits,
    ):
        """
        Initialize the habit repository.

        Args:
            store: Key-value store holding the encoded collection
            key: Storage key (defaults to the configured custom habits key)
            seed_defaults: Seed and save default habits when nothing is stored
            defaults_factory: Builds the habits used for seeding
        """
        super().__init__(store, key or get_settings().custom_habits_key, CustomHabit)
        self.seed_defaults = seed_defaults
        self._defaults_factory = defaults_factory
        self.reload()

    def reload(self) -> List[CustomHabit]:
        decoded = self._decode()
        if decoded is not None:
            self._records = decoded
        elif self.seed_defaults:
            self._records = self._defaults_factory()
            self._save()
            logger.info(f"[HABITS] Seeded {len(self._records)} default habits")
        else:
            self._records = []
        return self.habits

    @property
    def habits(self) -> List[CustomHabit]:
        return list(self._records)

    def active_habits(self) -> List[CustomHabit]:
        return [h for h in self._records if h.is_active]

    def create(
        self,
        name: str,
        icon: str = "",
        color: HabitColor = HabitColor.BLUE,
        unit: str = "",
        target_value: float = 1.0,
    ) -> CustomHabit:
        """Build a new active habit with a fresh id and add it."""
        habit = CustomHabit(
            name=name,
            icon=icon,
            color=color,
            unit=unit,
            target_value=target_value,
        )
        self.add(habit)
        return habit

    def add(self, habit: CustomHabit) -> List[CustomHabit]:
        self._records.append(habit)
        self._save()
        logger.info(f"[HABITS] Added habit: {habit.name} ({habit.target_value} {habit.unit})")
        return self.habits

    def update(self, habit: CustomHabit) -> List[CustomHabit]:
        index = self._index_of(habit.id)
        if index is not None:
            self._records[index] = habit
            self._save()
        return self.habits

    def delete(self, habit_id: str) -> List[CustomHabit]:
        before = len(self._records)
        self._records = [h for h in self._records if h.id != habit_id]
        if len(self._records) != before:
            self._save()
            logger.info(f"[HABITS] Removed habit {habit_id}")
        return self.habits

    def increment(self, habit_id: str, amount: float = 1.0) -> List[CustomHabit]:
        """Add amount to a habit's current value, never going below zero."""
        index = self._index_of(habit_id)
        if index is not None:
            habit = self._records[index]
            new_value = max(0.0, habit.current_value + amount)
            self._records[index] = habit.model_copy(update={"current_value": new_value})
            self._save()
        return self.habits

    def reset_daily_values(self) -> List[CustomHabit]:
        """Set every habit's current value back to zero."""
        self._records = [
            h.model_copy(update={"current_value": 0.0}) for h in self._records
        ]
        self._save()
        logger.info(f"[HABITS] Reset daily values for {len(self._records)} habits")
        return self.habits
