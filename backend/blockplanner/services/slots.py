from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass

from blockplanner.models.block import Shift
from blockplanner.models.class_session import Weekday

SESSION_LENGTH_HOURS = 2

WEEKDAYS = (Weekday.monday, Weekday.tuesday, Weekday.wednesday, Weekday.thursday, Weekday.friday)


@dataclass(frozen=True)
class SlotCandidate:
    weekday: Weekday
    start: str
    end: str


@dataclass(frozen=True)
class ShiftPlan:
    """Candidate days and windows of one shift; iterating yields day-major, window-minor."""

    shift: Shift
    days: tuple[Weekday, ...]
    windows: tuple[tuple[str, str], ...]

    def __iter__(self) -> Iterator[SlotCandidate]:
        for day in self.days:
            for start, end in self.windows:
                yield SlotCandidate(weekday=day, start=start, end=end)

    def __len__(self) -> int:
        return len(self.days) * len(self.windows)

    def allows(self, weekday: Weekday) -> bool:
        return weekday in self.days


SHIFT_PLANS: dict[Shift, ShiftPlan] = {
    Shift.morning: ShiftPlan(
        shift=Shift.morning,
        days=WEEKDAYS,
        windows=(("07:00", "09:00"), ("09:00", "11:00"), ("11:00", "13:00")),
    ),
    Shift.afternoon: ShiftPlan(
        shift=Shift.afternoon,
        days=WEEKDAYS,
        windows=(("14:00", "16:00"), ("16:00", "18:00"), ("18:00", "20:00")),
    ),
    Shift.evening: ShiftPlan(
        shift=Shift.evening,
        days=WEEKDAYS + (Weekday.saturday,),
        windows=(("19:00", "21:00"), ("21:00", "23:00")),
    ),
}


def plan_for_shift(shift: Shift | str | None) -> ShiftPlan:
    """Resolve a shift name to its plan; unknown or empty names fall back to morning."""
    if isinstance(shift, Shift):
        return SHIFT_PLANS[shift]
    normalized = (shift or "").strip().lower()
    try:
        return SHIFT_PLANS[Shift(normalized)]
    except ValueError:
        return SHIFT_PLANS[Shift.morning]


def required_session_count(weekly_hours: int | None, default_weekly_hours: int = 4) -> int:
    hours = weekly_hours if weekly_hours and weekly_hours > 0 else default_weekly_hours
    return math.ceil(hours / SESSION_LENGTH_HOURS)
