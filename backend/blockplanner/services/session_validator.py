from __future__ import annotations

import logging

from blockplanner.core.config import Settings, get_settings
from blockplanner.core.exceptions import ResourceNotFoundError, ScheduleConflictError, ValidationError
from blockplanner.db.repository import TimetableRepository
from blockplanner.models.assignment import Assignment
from blockplanner.models.class_session import ClassSession, Weekday
from blockplanner.schemas.common import parse_time_to_minutes
from blockplanner.schemas.session import SessionCreate, SessionUpdate
from blockplanner.services.availability import AvailabilityChecker
from blockplanner.services.slots import plan_for_shift

logger = logging.getLogger(__name__)


class SessionValidator:
    """Guards manual single-session writes against room (and optionally teacher) overlaps.

    The conflicting state is never written: on a clash the unit of work is rolled
    back and :class:`ScheduleConflictError` propagates to the caller.
    """

    def __init__(self, repository: TimetableRepository, settings: Settings | None = None):
        self.repository = repository
        self.settings = settings or get_settings()
        self.checker = AvailabilityChecker(repository)

    def create_session(self, payload: SessionCreate) -> ClassSession:
        assignment = self._get_assignment(payload.assignmentId)
        room_id = payload.roomId or assignment.room_id
        self._validate_slot(assignment, payload.weekday, payload.start, payload.end, room_id)

        with self.repository.transaction():
            self._ensure_free(assignment, payload.weekday, payload.start, payload.end, room_id)
            session = self.repository.create_session(
                assignment_id=assignment.id,
                room_id=room_id,
                weekday=payload.weekday,
                start_time=payload.start,
                end_time=payload.end,
                kind=payload.kind,
            )
        logger.info(
            "SESSION CREATED | session=%s | assignment=%s | slot=%s %s-%s | room=%s",
            session.id,
            assignment.id,
            payload.weekday.value,
            payload.start,
            payload.end,
            room_id,
        )
        return session

    def update_session(self, session_id: str, payload: SessionUpdate) -> ClassSession:
        session = self.repository.get_session(session_id)
        if session is None:
            raise ResourceNotFoundError("Session", session_id)
        assignment = self._get_assignment(session.assignment_id)

        weekday = payload.weekday or session.weekday
        start = payload.start or session.start_time
        end = payload.end or session.end_time
        room_id = payload.roomId or session.room_id or assignment.room_id
        self._validate_slot(assignment, weekday, start, end, room_id)

        with self.repository.transaction():
            self._ensure_free(assignment, weekday, start, end, room_id, exclude_session_id=session.id)
            changes = {"weekday": weekday, "start_time": start, "end_time": end, "room_id": room_id}
            if payload.kind is not None:
                changes["kind"] = payload.kind
            self.repository.update_session(session, **changes)
        logger.info(
            "SESSION UPDATED | session=%s | slot=%s %s-%s | room=%s",
            session.id,
            weekday.value,
            start,
            end,
            room_id,
        )
        return session

    def delete_session(self, session_id: str) -> None:
        session = self.repository.get_session(session_id)
        if session is None:
            raise ResourceNotFoundError("Session", session_id)
        with self.repository.transaction():
            self.repository.delete_session(session)
        logger.info("SESSION DELETED | session=%s", session_id)

    def _get_assignment(self, assignment_id: str) -> Assignment:
        assignment = self.repository.get_assignment(assignment_id)
        if assignment is None:
            raise ResourceNotFoundError("Assignment", assignment_id)
        return assignment

    def _validate_slot(
        self,
        assignment: Assignment,
        weekday: Weekday,
        start: str,
        end: str,
        room_id: str | None,
    ) -> None:
        try:
            start_minutes = parse_time_to_minutes(start)
            end_minutes = parse_time_to_minutes(end)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        if end_minutes <= start_minutes:
            raise ValidationError("end must be after start", details={"start": start, "end": end})

        block = self.repository.get_block(assignment.block_id)
        if block is not None:
            plan = plan_for_shift(block.shift)
            if not plan.allows(weekday):
                raise ValidationError(
                    f"{weekday.value} is outside the {plan.shift.value} shift of block {block.code}",
                    details={"weekday": weekday.value, "shift": plan.shift.value},
                )
        if room_id is not None and self.repository.get_room(room_id) is None:
            raise ResourceNotFoundError("Room", room_id)

    def _ensure_free(
        self,
        assignment: Assignment,
        weekday: Weekday,
        start: str,
        end: str,
        room_id: str | None,
        exclude_session_id: str | None = None,
    ) -> None:
        check_teacher = self.settings.manual_edit_checks_teacher
        self.repository.lock_resources(
            room_ids=[room_id] if room_id is not None else [],
            teacher_id=assignment.teacher_id if check_teacher else None,
        )
        conflict = self.checker.check_room(weekday, start, end, room_id, exclude_session_id)
        if conflict is None and check_teacher:
            conflict = self.checker.check_teacher(weekday, start, end, assignment.teacher_id, exclude_session_id)
        if conflict is not None:
            logger.info(
                "SESSION REJECTED | assignment=%s | slot=%s %s-%s | kind=%s | conflicting=%s",
                assignment.id,
                weekday.value,
                start,
                end,
                conflict.kind,
                conflict.session.id,
            )
            raise ScheduleConflictError(conflict.message, details=conflict.as_details())
