"""Typed persistence contract used by the assignment engine and the session routes.

Every read and write goes through :class:`TimetableRepository`. Listing order is
stable (course code, teacher name, room code) so a bulk run over unchanged data is
deterministic. Storage-level failures surface as :class:`RepositoryError`.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from blockplanner.core.exceptions import DuplicateAssignmentError, RepositoryError
from blockplanner.models.assignment import Assignment
from blockplanner.models.block import Block
from blockplanner.models.class_session import ClassSession, SessionKind, Weekday
from blockplanner.models.course import Course
from blockplanner.models.room import Room
from blockplanner.models.teacher import Teacher

logger = logging.getLogger(__name__)

ASSIGNMENT_UNIQUE_MARKERS = ("uq_assignments_block_course", "assignments.block_id, assignments.course_id")


def _storage_errors(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            logger.exception("REPOSITORY FAILURE | operation=%s", method.__name__)
            # A failed statement leaves PostgreSQL connections unusable until rollback.
            self.db.rollback()
            raise RepositoryError(f"Storage failure during {method.__name__}") from exc

    return wrapper


class TimetableRepository:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Commit the enclosed unit of work, or roll it back on any error."""
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise RepositoryError("Storage failure; unit of work rolled back") from exc
        except Exception:
            self.db.rollback()
            raise

    @_storage_errors
    def lock_resources(self, *, room_ids: Sequence[str] = (), teacher_id: str | None = None) -> None:
        """Row-lock the teacher, then the rooms in id order.

        Locks are always taken in this order so concurrent units of work cannot
        wait on each other in a cycle.
        """
        if teacher_id is not None:
            self.db.execute(select(Teacher.id).where(Teacher.id == teacher_id).with_for_update())
        ordered = sorted({room_id for room_id in room_ids if room_id is not None})
        if ordered:
            self.db.execute(select(Room.id).where(Room.id.in_(ordered)).order_by(Room.id).with_for_update())

    # Blocks and catalog

    @_storage_errors
    def get_block(self, block_id: str) -> Block | None:
        return self.db.get(Block, block_id)

    @_storage_errors
    def get_blocks(self, block_ids: Sequence[str]) -> list[Block]:
        if not block_ids:
            return []
        rows = self.db.execute(select(Block).where(Block.id.in_(list(block_ids)))).scalars().all()
        by_id = {row.id: row for row in rows}
        return [by_id[block_id] for block_id in dict.fromkeys(block_ids) if block_id in by_id]

    @_storage_errors
    def get_blocks_by_code(self, codes: Sequence[str]) -> list[Block]:
        normalized = [code.strip().upper() for code in codes]
        rows = self.db.execute(select(Block).where(Block.code.in_(normalized))).scalars().all()
        by_code = {row.code: row for row in rows}
        return [by_code[code] for code in dict.fromkeys(normalized) if code in by_code]

    @_storage_errors
    def list_courses_for_block(self, block: Block) -> list[Course]:
        stmt = (
            select(Course)
            .where(
                Course.program_id == block.program_id,
                Course.semester == block.semester,
                Course.is_active.is_(True),
            )
            .order_by(Course.code)
        )
        return list(self.db.execute(stmt).scalars())

    @_storage_errors
    def get_course(self, course_id: str) -> Course | None:
        return self.db.get(Course, course_id)

    @_storage_errors
    def get_teacher(self, teacher_id: str) -> Teacher | None:
        return self.db.get(Teacher, teacher_id)

    @_storage_errors
    def list_active_teachers(self) -> list[Teacher]:
        stmt = select(Teacher).where(Teacher.is_active.is_(True)).order_by(Teacher.name, Teacher.id)
        return list(self.db.execute(stmt).scalars())

    @_storage_errors
    def count_assignments_by_teacher(self, teacher_ids: Sequence[str]) -> dict[str, int]:
        counts = {teacher_id: 0 for teacher_id in teacher_ids}
        if not counts:
            return counts
        stmt = (
            select(Assignment.teacher_id, func.count(Assignment.id))
            .where(Assignment.teacher_id.in_(list(counts)))
            .group_by(Assignment.teacher_id)
        )
        for teacher_id, total in self.db.execute(stmt).all():
            counts[teacher_id] = int(total)
        return counts

    @_storage_errors
    def get_room(self, room_id: str) -> Room | None:
        return self.db.get(Room, room_id)

    @_storage_errors
    def list_active_rooms(self) -> list[Room]:
        stmt = select(Room).where(Room.is_active.is_(True)).order_by(Room.code)
        return list(self.db.execute(stmt).scalars())

    # Assignments

    @_storage_errors
    def get_assignment(self, assignment_id: str) -> Assignment | None:
        return self.db.get(Assignment, assignment_id)

    @_storage_errors
    def find_assignment(self, block_id: str, course_id: str) -> Assignment | None:
        stmt = select(Assignment).where(Assignment.block_id == block_id, Assignment.course_id == course_id)
        return self.db.execute(stmt).scalar_one_or_none()

    @_storage_errors
    def create_assignment(
        self,
        *,
        block_id: str,
        course_id: str,
        teacher_id: str,
        room_id: str | None = None,
        notes: str | None = None,
    ) -> Assignment:
        assignment = Assignment(
            block_id=block_id,
            course_id=course_id,
            teacher_id=teacher_id,
            room_id=room_id,
            notes=notes,
        )
        self.db.add(assignment)
        try:
            self.db.flush()
        except IntegrityError as exc:
            message = str(exc.orig)
            if any(marker in message for marker in ASSIGNMENT_UNIQUE_MARKERS):
                raise DuplicateAssignmentError(block_id, course_id) from exc
            raise RepositoryError("Assignment references an unknown block, course, teacher or room") from exc
        return assignment

    @_storage_errors
    def update_assignment(self, assignment: Assignment, **changes) -> Assignment:
        for key, value in changes.items():
            setattr(assignment, key, value)
        self.db.flush()
        return assignment

    @_storage_errors
    def delete_assignment(self, assignment: Assignment) -> int:
        """Delete the assignment and its sessions; returns the number of sessions removed."""
        result = self.db.execute(delete(ClassSession).where(ClassSession.assignment_id == assignment.id))
        self.db.delete(assignment)
        self.db.flush()
        return result.rowcount or 0

    # Sessions

    @_storage_errors
    def get_session(self, session_id: str) -> ClassSession | None:
        return self.db.get(ClassSession, session_id)

    @_storage_errors
    def list_sessions_for_block(self, block_id: str) -> list[ClassSession]:
        stmt = (
            select(ClassSession)
            .join(Assignment, ClassSession.assignment_id == Assignment.id)
            .where(Assignment.block_id == block_id)
        )
        return list(self.db.execute(stmt).scalars().unique())

    @_storage_errors
    def sessions_in_room(
        self,
        weekday: Weekday,
        room_id: str,
        exclude_session_id: str | None = None,
    ) -> list[ClassSession]:
        stmt = select(ClassSession).where(ClassSession.weekday == weekday, ClassSession.room_id == room_id)
        if exclude_session_id is not None:
            stmt = stmt.where(ClassSession.id != exclude_session_id)
        return list(self.db.execute(stmt.order_by(ClassSession.start_time)).scalars().unique())

    @_storage_errors
    def sessions_for_teacher(
        self,
        weekday: Weekday,
        teacher_id: str,
        exclude_session_id: str | None = None,
    ) -> list[ClassSession]:
        stmt = (
            select(ClassSession)
            .join(Assignment, ClassSession.assignment_id == Assignment.id)
            .where(ClassSession.weekday == weekday, Assignment.teacher_id == teacher_id)
        )
        if exclude_session_id is not None:
            stmt = stmt.where(ClassSession.id != exclude_session_id)
        return list(self.db.execute(stmt.order_by(ClassSession.start_time)).scalars().unique())

    @_storage_errors
    def create_session(
        self,
        *,
        assignment_id: str,
        weekday: Weekday,
        start_time: str,
        end_time: str,
        room_id: str | None = None,
        kind: SessionKind = SessionKind.theory,
    ) -> ClassSession:
        session = ClassSession(
            assignment_id=assignment_id,
            room_id=room_id,
            weekday=weekday,
            start_time=start_time,
            end_time=end_time,
            kind=kind,
        )
        self.db.add(session)
        self.db.flush()
        return session

    @_storage_errors
    def update_session(self, session: ClassSession, **changes) -> ClassSession:
        for key, value in changes.items():
            setattr(session, key, value)
        self.db.flush()
        return session

    @_storage_errors
    def delete_session(self, session: ClassSession) -> None:
        self.db.delete(session)
        self.db.flush()
