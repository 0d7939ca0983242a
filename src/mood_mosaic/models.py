"""Mood entry and custom habit data models."""
import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _new_id() -> str:
    return str(uuid.uuid4())


class EmotionTag(str, Enum):
    """Fixed vocabulary of emotion tags offered when logging a mood."""

    HAPPY = "Happy"
    SAD = "Sad"
    ANXIOUS = "Anxious"
    CALM = "Calm"
    EXCITED = "Excited"
    TIRED = "Tired"
    FOCUSED = "Focused"
    STRESSED = "Stressed"
    GRATEFUL = "Grateful"

    @property
    def emoji(self) -> str:
        return _EMOTION_EMOJI[self]


_EMOTION_EMOJI = {
    EmotionTag.HAPPY: "😊",
    EmotionTag.SAD: "😢",
    EmotionTag.ANXIOUS: "😰",
    EmotionTag.CALM: "😌",
    EmotionTag.EXCITED: "🤩",
    EmotionTag.TIRED: "😴",
    EmotionTag.FOCUSED: "🎯",
    EmotionTag.STRESSED: "😤",
    EmotionTag.GRATEFUL: "🙏",
}


class HabitColor(str, Enum):
    """Color tags available for custom habits."""

    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    ORANGE = "orange"
    PURPLE = "purple"
    PINK = "pink"
    YELLOW = "yellow"
    BROWN = "brown"
    CYAN = "cyan"
    MINT = "mint"
    INDIGO = "indigo"


class MoodEntry(BaseModel):
    """
    A single logged mood.

    Entries are immutable. Edits produce a copy that keeps the same
    id, source and timestamp.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    intensity: float = Field(ge=0, le=100)
    tags: List[str] = Field(default_factory=list)
    note: Optional[str] = None
    source: str = "manual"
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def intensity_percentage(self) -> str:
        return f"{self.intensity:.0f}%"


class CustomHabit(BaseModel):
    """User-defined daily habit with a numeric goal."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    name: str
    icon: str = ""
    color: HabitColor = HabitColor.BLUE
    unit: str = ""
    target_value: float = 1.0
    current_value: float = Field(default=0.0, ge=0)
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def progress(self) -> float:
        """Progress toward the target, clamped to [0, 1]."""
        if self.target_value <= 0:
            return 0.0
        return max(0.0, min(self.current_value / self.target_value, 1.0))

    @property
    def display_value(self) -> str:
        """Current value rounded to an integer, with the unit if one is set."""
        if not self.unit:
            return f"{self.current_value:.0f}"
        return f"{self.current_value:.0f} {self.unit}"
