"""
Habit Scoring Module.

Tracks the five built-in daily habits (caffeine, alcohol, exercise,
water, sleep) as transient session state and derives progress ratios,
statuses and the composite 0-100 health score from them.

The state is never persisted and never rolls over on its own; callers
reset it explicitly.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

COFFEE_MG = 100
WORKOUT_MINUTES = 30
WORKOUT_TYPE = "Workout"
GOOD_SLEEP_HOURS = 8.0

BASE_SCORE = 30


class HabitStatus(str, Enum):
    """Status of a built-in habit for the day."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    GOAL_REACHED = "goal_reached"
    WITHIN_LIMIT = "within_limit"
    OVER_LIMIT = "over_limit"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()


@dataclass
class HabitDefinition:
    """Definition of a built-in habit."""

    key: str  # caffeine, alcohol, exercise, water, sleep
    name: str
    unit: str
    is_limit: bool = False  # True when lower is better


BUILTIN_HABITS: Dict[str, HabitDefinition] = {
    h.key: h
    for h in [
        HabitDefinition(key="caffeine", name="Caffeine", unit="mg"),
        HabitDefinition(key="alcohol", name="Alcohol", unit="units", is_limit=True),
        HabitDefinition(key="exercise", name="Exercise", unit="min"),
        HabitDefinition(key="water", name="Water", unit="glasses"),
        HabitDefinition(key="sleep", name="Sleep", unit="hours"),
    ]
}


@dataclass
class DailyHabitState:
    """Today's values for the built-in habits, with their goals and limits."""

    caffeine_mg: int = 0
    caffeine_limit: int = 400
    alcohol_units: int = 0
    alcohol_limit: int = 2
    exercise_type: str = ""
    exercise_minutes: int = 0
    exercise_goal: int = 30
    water_glasses: int = 0
    water_goal: int = 8
    sleep_hours: float = 0.0
    sleep_goal: float = 8.0
    notes: str = ""
    day: date = field(default_factory=date.today)

    def set_caffeine(self, mg: int) -> None:
        self.caffeine_mg = max(0, mg)

    def set_alcohol(self, units: int) -> None:
        self.alcohol_units = max(0, units)

    def set_exercise(self, minutes: int, exercise_type: Optional[str] = None) -> None:
        self.exercise_minutes = max(0, minutes)
        if exercise_type is not None:
            self.exercise_type = exercise_type

    def set_water(self, glasses: int) -> None:
        self.water_glasses = max(0, glasses)

    def set_sleep(self, hours: float) -> None:
        self.sleep_hours = max(0.0, hours)

    def add_coffee(self) -> None:
        self.caffeine_mg += COFFEE_MG
        logger.debug(f"[HABITS] Coffee added, caffeine now {self.caffeine_mg}mg")

    def add_workout(self) -> None:
        self.exercise_type = WORKOUT_TYPE
        self.exercise_minutes += WORKOUT_MINUTES
        logger.debug(f"[HABITS] Workout added, exercise now {self.exercise_minutes}min")

    def add_water(self) -> None:
        self.water_glasses += 1

    def add_good_sleep(self) -> None:
        # Sets rather than increments
        self.sleep_hours = GOOD_SLEEP_HOURS

    def reset(self, day: Optional[date] = None) -> None:
        """Zero every habit value. Goals and limits are kept."""
        self.caffeine_mg = 0
        self.alcohol_units = 0
        self.exercise_type = ""
        self.exercise_minutes = 0
        self.water_glasses = 0
        self.sleep_hours = 0.0
        self.notes = ""
        self.day = day or date.today()
        logger.info(f"[HABITS] Reset daily habits for {self.day}")

    def current_value(self, key: str) -> float:
        return {
            "caffeine": self.caffeine_mg,
            "alcohol": self.alcohol_units,
            "exercise": self.exercise_minutes,
            "water": self.water_glasses,
            "sleep": self.sleep_hours,
        }[key]

    def target_value(self, key: str) -> float:
        return {
            "caffeine": self.caffeine_limit,
            "alcohol": self.alcohol_limit,
            "exercise": self.exercise_goal,
            "water": self.water_goal,
            "sleep": self.sleep_goal,
        }[key]


def habit_progress(current: float, goal: float) -> float:
    """current / goal clamped to [0, 1]; 0 when goal <= 0."""
    if goal <= 0:
        return 0.0
    return max(0.0, min(current / goal, 1.0))


def alcohol_progress(units: float, limit: float) -> float:
    """
    Inverted progress for alcohol.

    1.0 only at zero units, falling linearly to 0 at the limit, and
    exactly 0 once over the limit.
    """
    if limit <= 0:
        return 1.0 if units <= 0 else 0.0
    if units > limit:
        return 0.0
    return max(0.0, 1.0 - units / limit)


def progress_for(state: DailyHabitState) -> Dict[str, float]:
    """Progress ratio for every built-in habit."""
    return {
        key: (
            alcohol_progress(state.alcohol_units, state.alcohol_limit)
            if key == "alcohol"
            else habit_progress(state.current_value(key), state.target_value(key))
        )
        for key in BUILTIN_HABITS
    }


def habit_status(state: DailyHabitState, key: str) -> HabitStatus:
    """Status of one built-in habit."""
    current = state.current_value(key)
    target = state.target_value(key)

    if BUILTIN_HABITS[key].is_limit:
        return HabitStatus.OVER_LIMIT if current > target else HabitStatus.WITHIN_LIMIT

    if current <= 0:
        return HabitStatus.NOT_STARTED
    if target > 0 and current >= target:
        return HabitStatus.GOAL_REACHED
    return HabitStatus.IN_PROGRESS


def _exercise_points(minutes: float) -> int:
    if minutes >= 30:
        return 25
    if minutes > 0:
        return 15
    return 0


def _caffeine_points(mg: float) -> int:
    if mg > 400:
        return -15
    if mg > 300:
        return -10
    if mg > 200:
        return -5
    if mg > 0:
        return 5
    return 0


def _alcohol_points(units: float) -> int:
    if units > 3:
        return -20
    if units > 2:
        return -15
    if units > 1:
        return -10
    return 0


def _water_points(glasses: float) -> int:
    if glasses >= 8:
        return 15
    if glasses >= 6:
        return 10
    if glasses >= 4:
        return 5
    return 0


def _sleep_points(hours: float) -> int:
    if hours >= 7.5:
        return 20
    if hours >= 6.5:
        return 15
    if hours >= 5.5:
        return 10
    # 0 means sleep was not logged
    if 0 < hours < 5:
        return -10
    return 0


def health_score(state: DailyHabitState) -> int:
    """
    Composite 0-100 health score for the day.

    Starts at BASE_SCORE and applies fixed bonuses and penalties per
    habit band. The result is clamped to [0, 100].
    """
    score = BASE_SCORE
    score += _exercise_points(state.exercise_minutes)
    score += _caffeine_points(state.caffeine_mg)
    score += _alcohol_points(state.alcohol_units)
    score += _water_points(state.water_glasses)
    score += _sleep_points(state.sleep_hours)
    return max(0, min(100, score))


def health_score_band(score: int) -> str:
    if score < 40:
        return "poor"
    if score < 60:
        return "fair"
    if score < 80:
        return "good"
    return "excellent"


def tracked_habits_count(state: DailyHabitState) -> int:
    """Number of built-in habits with a nonzero value today."""
    return sum(1 for key in BUILTIN_HABITS if state.current_value(key) != 0)


def habit_summary(state: DailyHabitState) -> Dict:
    """Summary of today's habits, progress and score."""
    progress = progress_for(state)
    habits: List[Dict] = []
    for key, definition in BUILTIN_HABITS.items():
        status = habit_status(state, key)
        habits.append(
            {
                "key": key,
                "name": definition.name,
                "unit": definition.unit,
                "current_value": state.current_value(key),
                "target": state.target_value(key),
                "is_limit": definition.is_limit,
                "progress": progress[key],
                "status": status.value,
                "status_label": status.label,
            }
        )

    score = health_score(state)
    return {
        "date": state.day.isoformat(),
        "habits": habits,
        "exercise_type": state.exercise_type or None,
        "tracked_habits": tracked_habits_count(state),
        "health_score": score,
        "health_score_band": health_score_band(score),
    }
