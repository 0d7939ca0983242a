"""
Mood Reminder Scheduler.

Builds local notification requests for hourly mood check-ins across
a daytime window and for one-off custom reminders, and hands them to
a notification center that does the actual delivery.
"""

import logging
import random
import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Union

from .config import get_settings

logger = logging.getLogger(__name__)

HOURLY_TITLE = "How are you feeling?"
CUSTOM_TITLE = "Mood Mosaic+"
FALLBACK_PROMPT = "How are you feeling right now?"

MOOD_PROMPTS = [
    "Take a moment to check in with yourself.",
    "How has your mood been over the past hour?",
    "What emotions are you experiencing right now?",
    "Quick mood check - how are you doing?",
    "Time for a gentle mood reflection.",
    "What's your current emotional state?",
]


@dataclass
class NotificationRequest:
    """
    A single local notification to schedule.

    Repeating requests fire daily at hour:minute. One-off requests
    fire once at fire_at.
    """

    identifier: str
    title: str
    body: str
    hour: Optional[int] = None
    minute: Optional[int] = None
    fire_at: Optional[datetime] = None
    repeats: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "identifier": self.identifier,
            "title": self.title,
            "body": self.body,
            "hour": self.hour,
            "minute": self.minute,
            "fire_at": self.fire_at.isoformat() if self.fire_at else None,
            "repeats": self.repeats,
        }


class NotificationCenter(ABC):
    """Delivery side of local notifications."""

    @abstractmethod
    def add(self, request: NotificationRequest) -> None:
        """Queue a request, replacing any pending one with the same identifier."""

    @abstractmethod
    def remove_all_pending(self) -> None:
        """Drop every pending request."""

    @abstractmethod
    def pending(self) -> List[NotificationRequest]:
        """Requests that have not fired yet."""


class InMemoryNotificationCenter(NotificationCenter):
    """Notification center that only records requests."""

    def __init__(self):
        self._requests: Dict[str, NotificationRequest] = {}
        self._lock = threading.Lock()

    def add(self, request: NotificationRequest) -> None:
        with self._lock:
            self._requests[request.identifier] = request

    def remove_all_pending(self) -> None:
        with self._lock:
            self._requests.clear()

    def pending(self) -> List[NotificationRequest]:
        with self._lock:
            return list(self._requests.values())


class ReminderScheduler:
    """
    Schedules mood check-in reminders.

    Nothing is scheduled until authorization has been granted. Hourly
    reminders repeat daily from start_hour to end_hour inclusive,
    skipping any configured quiet hours.
    """

    def __init__(
        self,
        center: NotificationCenter,
        start_hour: Optional[int] = None,
        end_hour: Optional[int] = None,
        prompts: Optional[Sequence[str]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the reminder scheduler.

        Args:
            center: Notification center receiving the requests
            start_hour: First reminder hour (default from settings)
            end_hour: Last reminder hour, inclusive (default from settings)
            prompts: Pool of reminder bodies, one picked at random per hour
            rng: Random source for picking prompts
        """
        settings = get_settings()
        self.center = center
        self.start_hour = settings.reminder_start_hour if start_hour is None else start_hour
        self.end_hour = settings.reminder_end_hour if end_hour is None else end_hour
        self.prompts = list(MOOD_PROMPTS if prompts is None else prompts)
        self.rng = rng or random.Random()

        self.enabled = False
        self.quiet_start: Optional[int] = None
        self.quiet_end: Optional[int] = None

        logger.info(
            f"[REMINDERS] Initialized with window={self.start_hour}:00-{self.end_hour}:00, "
            f"prompts={len(self.prompts)}"
        )

    def request_authorization(self, granted: bool) -> bool:
        """Record the outcome of the notification permission request."""
        self.enabled = granted
        if not granted:
            logger.info("[REMINDERS] Notification permission not granted")
        return self.enabled

    def mood_prompt(self) -> str:
        if not self.prompts:
            return FALLBACK_PROMPT
        return self.rng.choice(self.prompts)

    def is_quiet_hour(self, hour: int) -> bool:
        """Whether hour falls in [quiet_start, quiet_end), wrapping past midnight."""
        if self.quiet_start is None or self.quiet_end is None:
            return False
        if self.quiet_start <= self.quiet_end:
            return self.quiet_start <= hour < self.quiet_end
        return hour >= self.quiet_start or hour < self.quiet_end

    def schedule_hourly_reminders(self) -> List[NotificationRequest]:
        """
        Replace all pending requests with the hourly check-ins.

        Returns:
            The requests that were scheduled (empty when disabled)
        """
        if not self.enabled:
            logger.debug("[REMINDERS] Skipping hourly schedule, notifications disabled")
            return []

        self.center.remove_all_pending()

        scheduled = []
        for hour in range(self.start_hour, self.end_hour + 1):
            if self.is_quiet_hour(hour):
                continue
            request = NotificationRequest(
                identifier=f"mood-reminder-{hour}",
                title=HOURLY_TITLE,
                body=self.mood_prompt(),
                hour=hour,
                minute=0,
                repeats=True,
            )
            self.center.add(request)
            scheduled.append(request)

        logger.info(f"[REMINDERS] Scheduled {len(scheduled)} hourly reminders")
        return scheduled

    def schedule_custom_reminder(
        self,
        at: Union[datetime, timedelta],
        message: str,
        now: Optional[datetime] = None,
    ) -> Optional[NotificationRequest]:
        """
        Schedule a one-off reminder.

        Args:
            at: Time to fire, or a delay from now
            message: Notification body
            now: Current time (defaults to datetime.now())

        Returns:
            The scheduled request, or None if disabled or the time has passed
        """
        if not self.enabled:
            return None

        now = now or datetime.now()
        fire_at = now + at if isinstance(at, timedelta) else at

        if fire_at.astimezone() <= now.astimezone():
            logger.warning(f"[REMINDERS] Ignoring reminder in the past: {fire_at.isoformat()}")
            return None

        request = NotificationRequest(
            identifier=str(uuid.uuid4()),
            title=CUSTOM_TITLE,
            body=message,
            fire_at=fire_at,
        )
        self.center.add(request)
        logger.info(f"[REMINDERS] Custom reminder at {fire_at.isoformat()}")
        return request

    def set_quiet_hours(self, start_hour: int, end_hour: int) -> List[NotificationRequest]:
        """Silence hourly reminders in [start_hour, end_hour) and reschedule."""
        for hour in (start_hour, end_hour):
            if not 0 <= hour <= 23:
                raise ValueError(f"Hour must be between 0 and 23, got {hour}")
        self.quiet_start = start_hour
        self.quiet_end = end_hour
        logger.info(f"[REMINDERS] Quiet hours set to {start_hour}:00-{end_hour}:00")
        return self.schedule_hourly_reminders()

    def clear_quiet_hours(self) -> List[NotificationRequest]:
        self.quiet_start = None
        self.quiet_end = None
        return self.schedule_hourly_reminders()

    def cancel_all(self) -> None:
        self.center.remove_all_pending()
        logger.info("[REMINDERS] Cancelled all pending reminders")

    def get_status(self) -> Dict[str, Any]:
        """Get scheduler status."""
        return {
            "enabled": self.enabled,
            "start_hour": self.start_hour,
            "end_hour": self.end_hour,
            "quiet_hours": (
                {"start": self.quiet_start, "end": self.quiet_end}
                if self.quiet_start is not None
                else None
            ),
            "pending": len(self.center.pending()),
        }
