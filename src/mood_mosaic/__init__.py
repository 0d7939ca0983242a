"""
Mood Mosaic.

Mood logging, daily and weekly mood aggregation, habit scoring,
health data correlation and reminder scheduling.
"""

from .aggregator import (
    DailySummary,
    TimeFilter,
    TrendBucket,
    TrendDirection,
    WeeklyTrend,
    daily_summary,
    filter_entries,
    recent_entries,
    weekly_trend,
)
from .habit_scorer import (
    DailyHabitState,
    HabitStatus,
    alcohol_progress,
    habit_progress,
    habit_summary,
    health_score,
    tracked_habits_count,
)
from .models import CustomHabit, EmotionTag, HabitColor, MoodEntry
from .repositories import CustomHabitRepository, MoodRepository
from .storage import FileKeyValueStore, InMemoryKeyValueStore, KeyValueStore

__all__ = [
    "DailySummary",
    "TimeFilter",
    "TrendBucket",
    "TrendDirection",
    "WeeklyTrend",
    "daily_summary",
    "filter_entries",
    "recent_entries",
    "weekly_trend",
    "DailyHabitState",
    "HabitStatus",
    "alcohol_progress",
    "habit_progress",
    "habit_summary",
    "health_score",
    "tracked_habits_count",
    "CustomHabit",
    "EmotionTag",
    "HabitColor",
    "MoodEntry",
    "CustomHabitRepository",
    "MoodRepository",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
]
