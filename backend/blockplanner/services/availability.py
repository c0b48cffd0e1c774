from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from blockplanner.db.repository import TimetableRepository
from blockplanner.models.class_session import ClassSession, Weekday
from blockplanner.schemas.common import parse_time_to_minutes


def intervals_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    # Half-open intervals: touching at a boundary is not an overlap.
    return start1 < end2 and start2 < end1


def find_overlap(sessions: Iterable[ClassSession], start: str, end: str) -> ClassSession | None:
    start_minutes = parse_time_to_minutes(start)
    end_minutes = parse_time_to_minutes(end)
    for session in sessions:
        if intervals_overlap(
            start_minutes,
            end_minutes,
            parse_time_to_minutes(session.start_time),
            parse_time_to_minutes(session.end_time),
        ):
            return session
    return None


def _course_name(session: ClassSession) -> str:
    assignment = session.assignment
    if assignment is not None and assignment.course is not None:
        return assignment.course.name
    return "another course"


@dataclass(frozen=True)
class AvailabilityConflict:
    kind: Literal["room", "teacher"]
    session: ClassSession
    message: str

    @property
    def course_name(self) -> str:
        return _course_name(self.session)

    def as_details(self) -> dict:
        return {
            "kind": self.kind,
            "conflictingSessionId": self.session.id,
            "course": self.course_name,
            "startTime": self.session.start_time,
            "endTime": self.session.end_time,
        }


def room_conflict_message(session: ClassSession) -> str:
    return (
        f'Schedule conflict: room already occupied by "{_course_name(session)}" '
        f"from {session.start_time} - {session.end_time}"
    )


def teacher_conflict_message(session: ClassSession) -> str:
    return (
        f'Schedule conflict: teacher already teaching "{_course_name(session)}" '
        f"from {session.start_time} - {session.end_time}"
    )


class AvailabilityChecker:
    """Answers whether a room or teacher is free for a weekday interval."""

    def __init__(self, repository: TimetableRepository):
        self.repository = repository

    def check_room(
        self,
        weekday: Weekday,
        start: str,
        end: str,
        room_id: str | None,
        exclude_session_id: str | None = None,
    ) -> AvailabilityConflict | None:
        if room_id is None:
            # Virtual sessions occupy no room.
            return None
        existing = self.repository.sessions_in_room(weekday, room_id, exclude_session_id)
        clash = find_overlap(existing, start, end)
        if clash is None:
            return None
        return AvailabilityConflict(kind="room", session=clash, message=room_conflict_message(clash))

    def check_teacher(
        self,
        weekday: Weekday,
        start: str,
        end: str,
        teacher_id: str | None,
        exclude_session_id: str | None = None,
    ) -> AvailabilityConflict | None:
        if teacher_id is None:
            return None
        existing = self.repository.sessions_for_teacher(weekday, teacher_id, exclude_session_id)
        clash = find_overlap(existing, start, end)
        if clash is None:
            return None
        return AvailabilityConflict(kind="teacher", session=clash, message=teacher_conflict_message(clash))

    def check(
        self,
        weekday: Weekday,
        start: str,
        end: str,
        *,
        room_id: str | None = None,
        teacher_id: str | None = None,
        exclude_session_id: str | None = None,
    ) -> AvailabilityConflict | None:
        conflict = self.check_room(weekday, start, end, room_id, exclude_session_id)
        if conflict is not None:
            return conflict
        return self.check_teacher(weekday, start, end, teacher_id, exclude_session_id)
