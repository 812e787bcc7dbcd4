"""
Enrollment Window

Pure date logic for one enrollment cycle: is enrollment open today, how many
days remain, and which phase the cycle is in.

Rules:
- Only calendar dates are compared (no time of day)
- today is always passed in by the caller; nothing here reads the clock
- end_date alone decides when the window closes. The early, regular and late
  deadlines are informational and never gate is_open()
- Inconsistent dates are rejected when the window is built, not when queried
"""

import enum
from dataclasses import dataclass
from datetime import date


class InvalidWindow(ValueError):
    """Raised when window dates are inconsistent."""


class WindowPhase(str, enum.Enum):
    """Where today falls relative to the window."""

    UPCOMING = "upcoming"
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class EnrollmentWindow:
    """
    Date range and deadlines of an enrollment cycle.

    Raises:
        InvalidWindow: If end_date < start_date or a deadline falls
            outside [start_date, end_date]
    """

    start_date: date
    end_date: date
    regular_deadline: date
    early_deadline: date | None = None
    late_deadline: date | None = None
    allow_new_students: bool = True
    allow_returning_students: bool = True

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise InvalidWindow(
                f"end_date ({self.end_date}) must not be before start_date ({self.start_date})"
            )

        for name, deadline in self.deadlines().items():
            if not self.start_date <= deadline <= self.end_date:
                raise InvalidWindow(
                    f"{name} ({deadline}) must fall within "
                    f"{self.start_date} - {self.end_date}"
                )

    def deadlines(self) -> dict[str, date]:
        """Present deadlines keyed by field name, in early/regular/late order."""
        candidates = {
            "early_deadline": self.early_deadline,
            "regular_deadline": self.regular_deadline,
            "late_deadline": self.late_deadline,
        }
        return {name: value for name, value in candidates.items() if value is not None}


def is_open(window: EnrollmentWindow, today: date) -> bool:
    """True when start_date <= today <= end_date."""
    return window.start_date <= today <= window.end_date


def days_remaining(window: EnrollmentWindow, today: date) -> int:
    """
    Whole days from today until end_date, never negative.

    Before the window starts this is still the distance to end_date.
    """
    return max(0, (window.end_date - today).days)


def phase(window: EnrollmentWindow, today: date) -> WindowPhase:
    if today < window.start_date:
        return WindowPhase.UPCOMING
    if today > window.end_date:
        return WindowPhase.CLOSED
    return WindowPhase.OPEN


def current_deadline(window: EnrollmentWindow, today: date) -> date | None:
    """The earliest deadline on or after today, or None once all have passed."""
    upcoming = [deadline for deadline in window.deadlines().values() if deadline >= today]
    return min(upcoming, default=None)
