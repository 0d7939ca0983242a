"""
Mood Logging Forms.

Holds the write-time rules for mood entries: at most three tags
from the emotion vocabulary, notes soft-truncated to 140 characters,
and edits that keep an entry's id, source and timestamp.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from .config import get_settings
from .models import EmotionTag, MoodEntry
from .repositories import MoodRepository

logger = logging.getLogger(__name__)

DEFAULT_INTENSITY = 50.0


class QuickSituation(str, Enum):
    """One-tap situations that prefill tags and a note."""

    WORK_STRESS = "Work Stress"
    SOCIAL_TIME = "Social Time"
    EXERCISE = "Exercise"
    GOOD_NEWS = "Good News"
    CONFLICT = "Conflict"
    ACHIEVEMENT = "Achievement"

    @property
    def preset(self) -> Tuple[List[EmotionTag], str]:
        return _SITUATION_PRESETS[self]


_SITUATION_PRESETS = {
    QuickSituation.WORK_STRESS: ([EmotionTag.STRESSED, EmotionTag.TIRED], "Work-related stress"),
    QuickSituation.SOCIAL_TIME: ([EmotionTag.HAPPY, EmotionTag.EXCITED], "Enjoying social time"),
    QuickSituation.EXERCISE: ([EmotionTag.FOCUSED, EmotionTag.EXCITED], "Post-workout feeling"),
    QuickSituation.GOOD_NEWS: ([EmotionTag.HAPPY, EmotionTag.GRATEFUL], "Received good news"),
    QuickSituation.CONFLICT: ([EmotionTag.STRESSED, EmotionTag.SAD], "Had a conflict"),
    QuickSituation.ACHIEVEMENT: (
        [EmotionTag.HAPPY, EmotionTag.GRATEFUL, EmotionTag.EXCITED],
        "Personal achievement",
    ),
}


def truncate_note(note: Optional[str], max_length: Optional[int] = None) -> Optional[str]:
    """Cut note to max_length characters; empty notes become None."""
    if max_length is None:
        max_length = get_settings().max_note_length
    if not note:
        return None
    return note[:max_length]


class _TagSelection:
    """Ordered tag selection capped at max_tags."""

    def __init__(self, max_tags: Optional[int] = None, max_note_length: Optional[int] = None):
        settings = get_settings()
        self.max_tags = max_tags if max_tags is not None else settings.max_tag_selection
        self.max_note_length = (
            max_note_length if max_note_length is not None else settings.max_note_length
        )
        self.selected_tags: List[EmotionTag] = []
        self.note: str = ""

    def toggle_tag(self, tag: EmotionTag) -> bool:
        """
        Select or deselect a tag.

        Returns:
            True if the tag is selected afterwards
        """
        if tag in self.selected_tags:
            self.selected_tags.remove(tag)
            return False
        if len(self.selected_tags) < self.max_tags:
            self.selected_tags.append(tag)
            return True
        return False

    @property
    def note_character_count(self) -> int:
        return len(self.note)

    @property
    def is_note_too_long(self) -> bool:
        return len(self.note) > self.max_note_length

    def _tag_strings(self) -> List[str]:
        return [tag.value for tag in self.selected_tags]


class MoodLogForm(_TagSelection):
    """State of the log-a-mood form."""

    def __init__(self, max_tags: Optional[int] = None, max_note_length: Optional[int] = None):
        super().__init__(max_tags, max_note_length)
        self.intensity: float = DEFAULT_INTENSITY

    @property
    def can_save(self) -> bool:
        return self.intensity > 0

    def apply_quick_situation(self, situation: QuickSituation) -> None:
        """Prefill tags and note. Intensity is left as is."""
        tags, note = situation.preset
        self.selected_tags = list(tags)
        self.note = note

    def build_entry(self, timestamp: Optional[datetime] = None) -> MoodEntry:
        return MoodEntry(
            intensity=max(0.0, min(100.0, self.intensity)),
            tags=self._tag_strings(),
            note=truncate_note(self.note, self.max_note_length),
            source="manual",
            timestamp=timestamp or datetime.now(),
        )

    def save(
        self, repository: MoodRepository, timestamp: Optional[datetime] = None
    ) -> Optional[MoodEntry]:
        """
        Add the form's entry to the repository and reset the form.

        Returns:
            The saved entry, or None if the form cannot be saved
        """
        if not self.can_save:
            logger.debug("[MOODS] Ignoring save with zero intensity")
            return None

        entry = self.build_entry(timestamp)
        repository.add(entry)
        logger.info(f"[MOODS] Logged mood {entry.intensity:.0f} with tags {entry.tags}")
        self.reset()
        return entry

    def reset(self) -> None:
        self.intensity = DEFAULT_INTENSITY
        self.selected_tags = []
        self.note = ""


class MoodEditForm(_TagSelection):
    """Edits an existing entry in place, keeping id, source and timestamp."""

    def __init__(
        self,
        entry: MoodEntry,
        max_tags: Optional[int] = None,
        max_note_length: Optional[int] = None,
    ):
        super().__init__(max_tags, max_note_length)
        self.original = entry
        self.intensity: float = entry.intensity
        # Tags outside the vocabulary cannot be shown in the editor
        self.selected_tags = [
            EmotionTag(tag) for tag in entry.tags if tag in EmotionTag._value2member_map_
        ]
        self.note = entry.note or ""

    @property
    def has_changes(self) -> bool:
        original_tags = {t for t in self.original.tags if t in EmotionTag._value2member_map_}
        return not (
            self.intensity == self.original.intensity
            and set(self._tag_strings()) == original_tags
            and (self.note or None) == self.original.note
        )

    def build_entry(self) -> MoodEntry:
        return self.original.model_copy(
            update={
                # model_copy skips validation
                "intensity": max(0.0, min(100.0, self.intensity)),
                "tags": self._tag_strings(),
                "note": truncate_note(self.note, self.max_note_length),
            }
        )

    def save(self, repository: MoodRepository) -> MoodEntry:
        entry = self.build_entry()
        repository.update(entry)
        logger.info(f"[MOODS] Updated entry {entry.id}")
        return entry
