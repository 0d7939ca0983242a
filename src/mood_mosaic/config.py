"""Application configuration loaded from environment variables."""
import os
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Mood Mosaic settings loaded from environment."""

    # Local data directory
    data_path: str = os.getenv(
        "MOOD_MOSAIC_DATA_PATH", os.path.join(os.path.expanduser("~"), ".mood_mosaic")
    )

    @property
    def store_path(self) -> str:
        return os.path.join(self.data_path, "store")

    @property
    def health_db_path(self) -> str:
        return os.path.join(self.data_path, "health.db")

    # Storage keys
    mood_entries_key: str = "MoodEntries"
    custom_habits_key: str = "CustomHabits"

    # Mood logging limits
    max_note_length: int = 140
    max_tag_selection: int = 3
    default_recent_days: int = 7

    # Hourly reminder window (inclusive)
    reminder_start_hour: int = 8
    reminder_end_hour: int = 22

    class Config:
        env_prefix = "MOOD_MOSAIC_"


@lru_cache
def get_settings() -> Settings:
    return Settings()
