"""Bulk assignment of courses, teachers, rooms and weekly sessions for blocks.

The builder walks blocks -> eligible courses -> shift slot candidates strictly in
order. Each course is one unit of work: its assignment and sessions are committed
together, and a failure in one course is recorded in the report without stopping
the run. Progress is carried in an immutable :class:`BuildState` that each step
returns, so a builder instance holds no per-run mutable state.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from time import perf_counter

from blockplanner.core.config import Settings, get_settings
from blockplanner.core.exceptions import DuplicateAssignmentError, NoTeacherAvailableError, RepositoryError
from blockplanner.db.repository import TimetableRepository
from blockplanner.models.assignment import Assignment
from blockplanner.models.block import Block
from blockplanner.models.class_session import SessionKind
from blockplanner.models.course import Course
from blockplanner.models.room import Room
from blockplanner.models.teacher import Teacher
from blockplanner.schemas.auto_assign import AutoAssignConflict, AutoAssignReport
from blockplanner.services.availability import AvailabilityChecker
from blockplanner.services.room_selection import CourseClassifier, RoomCursor, candidate_rooms, pick_room
from blockplanner.services.slots import ShiftPlan, plan_for_shift, required_session_count
from blockplanner.services.teacher_selection import select_teacher

logger = logging.getLogger(__name__)

AUTO_ASSIGNMENT_NOTE = "Assigned automatically"


@dataclass(frozen=True)
class BlockConflict:
    block: str
    error: str


@dataclass(frozen=True)
class BuildState:
    assignments_created: int = 0
    sessions_created: int = 0
    conflicts: tuple[BlockConflict, ...] = ()
    cursor: RoomCursor = field(default_factory=RoomCursor)

    def with_assignment(self, sessions: int) -> "BuildState":
        return replace(
            self,
            assignments_created=self.assignments_created + 1,
            sessions_created=self.sessions_created + sessions,
        )

    def with_conflict(self, block: str, error: str) -> "BuildState":
        return replace(self, conflicts=self.conflicts + (BlockConflict(block=block, error=error),))

    def with_cursor(self, cursor: RoomCursor) -> "BuildState":
        return replace(self, cursor=cursor)


@dataclass(frozen=True)
class AssignmentReport:
    assignments_created: int
    sessions_created: int
    conflicts: tuple[BlockConflict, ...]

    @property
    def message(self) -> str:
        return (
            f"Assignment completed: {self.assignments_created} assignments, "
            f"{self.sessions_created} sessions"
        )

    def to_payload(self) -> AutoAssignReport:
        return AutoAssignReport(
            assignmentsCreated=self.assignments_created,
            sessionsCreated=self.sessions_created,
            conflicts=[AutoAssignConflict(block=item.block, error=item.error) for item in self.conflicts],
            message=self.message,
        )


class AssignmentBuilder:
    def __init__(self, repository: TimetableRepository, settings: Settings | None = None):
        self.repository = repository
        self.settings = settings or get_settings()
        self.checker = AvailabilityChecker(repository)
        self.classifier = CourseClassifier(self.settings.practical_course_keywords)

    def run(self, block_ids: Sequence[str]) -> AssignmentReport:
        started = perf_counter()
        logger.info("AUTO ASSIGN START | blocks_requested=%s", len(block_ids))
        state = BuildState()

        blocks = self.repository.get_blocks(block_ids)
        found = {block.id for block in blocks}
        for block_id in dict.fromkeys(block_ids):
            if block_id not in found:
                state = state.with_conflict(block_id, f"Block with id {block_id} not found")

        for block in blocks:
            try:
                state = self.process_block(block, state)
            except RepositoryError as exc:
                logger.exception("AUTO ASSIGN BLOCK FAILED | block=%s", block.code)
                state = state.with_conflict(block.code, exc.message)

        report = AssignmentReport(
            assignments_created=state.assignments_created,
            sessions_created=state.sessions_created,
            conflicts=state.conflicts,
        )
        logger.info(
            "AUTO ASSIGN COMPLETE | blocks=%s | assignments=%s | sessions=%s | conflicts=%s | wall_ms=%s",
            len(blocks),
            report.assignments_created,
            report.sessions_created,
            len(report.conflicts),
            int((perf_counter() - started) * 1000),
        )
        return report

    def process_block(self, block: Block, state: BuildState) -> BuildState:
        courses = self.repository.list_courses_for_block(block)
        if not courses:
            logger.info("AUTO ASSIGN BLOCK EMPTY | block=%s | semester=%s", block.code, block.semester)
            return state

        plan = plan_for_shift(block.shift)
        logger.info("AUTO ASSIGN BLOCK | block=%s | shift=%s | courses=%s", block.code, plan.shift.value, len(courses))
        for course in courses:
            try:
                if self.repository.find_assignment(block.id, course.id) is not None:
                    logger.info("AUTO ASSIGN SKIP | block=%s | course=%s | reason=already assigned", block.code, course.code)
                    continue
                state = self.assign_course(block, course, plan, state)
            except NoTeacherAvailableError as exc:
                logger.warning("AUTO ASSIGN NO TEACHER | block=%s | course=%s", block.code, course.code)
                state = state.with_conflict(block.code, exc.message)
            except DuplicateAssignmentError:
                logger.warning("AUTO ASSIGN DUPLICATE | block=%s | course=%s", block.code, course.code)
                state = state.with_conflict(block.code, f"{course.name}: already assigned in this block")
            except RepositoryError as exc:
                logger.exception("AUTO ASSIGN COURSE FAILED | block=%s | course=%s", block.code, course.code)
                state = state.with_conflict(block.code, f"{course.name}: {exc.message}")
        return state

    def assign_course(self, block: Block, course: Course, plan: ShiftPlan, state: BuildState) -> BuildState:
        teachers = self.repository.list_active_teachers()
        counts = self.repository.count_assignments_by_teacher([teacher.id for teacher in teachers])
        teacher = select_teacher(course, teachers, counts)

        required = required_session_count(course.weekly_hours, self.settings.default_weekly_hours)
        practical = self.classifier.is_practical(course.name)
        rooms = self.repository.list_active_rooms()

        with self.repository.transaction():
            self.repository.lock_resources(
                room_ids=[room.id for room in candidate_rooms(rooms, practical)],
                teacher_id=teacher.id,
            )
            assignment = self.repository.create_assignment(
                block_id=block.id,
                course_id=course.id,
                teacher_id=teacher.id,
                notes=AUTO_ASSIGNMENT_NOTE,
            )
            placed, cursor = self.place_sessions(
                assignment,
                teacher,
                plan,
                required=required,
                practical=practical,
                rooms=rooms,
                cursor=state.cursor,
            )

        logger.info(
            "AUTO ASSIGN COURSE | block=%s | course=%s | teacher=%s | sessions=%s/%s",
            block.code,
            course.code,
            teacher.name,
            placed,
            required,
        )
        state = state.with_assignment(placed).with_cursor(cursor)
        if placed < required:
            state = state.with_conflict(
                block.code,
                f"{course.name}: placed {placed} of {required} required sessions",
            )
        return state

    def place_sessions(
        self,
        assignment: Assignment,
        teacher: Teacher,
        plan: ShiftPlan,
        *,
        required: int,
        practical: bool,
        rooms: Sequence[Room],
        cursor: RoomCursor,
    ) -> tuple[int, RoomCursor]:
        kind = SessionKind.laboratory if practical else SessionKind.theory
        placed = 0
        for candidate in plan:
            if placed >= required:
                break
            room, cursor = pick_room(rooms, practical, cursor)
            if room is None:
                logger.debug("AUTO ASSIGN NO ROOM | assignment=%s | slot=%s %s", assignment.id, candidate.weekday.value, candidate.start)
                continue

            conflict = self.checker.check_room(candidate.weekday, candidate.start, candidate.end, room.id)
            if conflict is None:
                conflict = self.checker.check_teacher(candidate.weekday, candidate.start, candidate.end, teacher.id)
            if conflict is not None:
                logger.debug(
                    "AUTO ASSIGN DISCARD | assignment=%s | slot=%s %s-%s | room=%s | reason=%s",
                    assignment.id,
                    candidate.weekday.value,
                    candidate.start,
                    candidate.end,
                    room.code,
                    conflict.kind,
                )
                continue

            self.repository.create_session(
                assignment_id=assignment.id,
                room_id=room.id,
                weekday=candidate.weekday,
                start_time=candidate.start,
                end_time=candidate.end,
                kind=kind,
            )
            placed += 1
        return placed, cursor
