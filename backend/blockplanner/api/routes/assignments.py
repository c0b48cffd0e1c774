import logging

from fastapi import APIRouter, Depends, status

from blockplanner.api.deps import get_repository
from blockplanner.core.exceptions import ResourceNotFoundError
from blockplanner.db.repository import TimetableRepository
from blockplanner.schemas.assignment import AssignmentCreate, AssignmentOut, AssignmentUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def _require(repository: TimetableRepository, *, teacher_id: str | None = None, room_id: str | None = None) -> None:
    if teacher_id is not None and repository.get_teacher(teacher_id) is None:
        raise ResourceNotFoundError("Teacher", teacher_id)
    if room_id is not None and repository.get_room(room_id) is None:
        raise ResourceNotFoundError("Room", room_id)


@router.post("/", response_model=AssignmentOut, status_code=status.HTTP_201_CREATED)
def create_assignment(
    payload: AssignmentCreate,
    repository: TimetableRepository = Depends(get_repository),
) -> AssignmentOut:
    if repository.get_block(payload.blockId) is None:
        raise ResourceNotFoundError("Block", payload.blockId)
    if repository.get_course(payload.courseId) is None:
        raise ResourceNotFoundError("Course", payload.courseId)
    _require(repository, teacher_id=payload.teacherId, room_id=payload.roomId)

    with repository.transaction():
        assignment = repository.create_assignment(
            block_id=payload.blockId,
            course_id=payload.courseId,
            teacher_id=payload.teacherId,
            room_id=payload.roomId,
            notes=payload.notes,
        )
    logger.info("ASSIGNMENT CREATED | assignment=%s | block=%s | course=%s", assignment.id, payload.blockId, payload.courseId)
    return AssignmentOut.from_model(assignment)


@router.put("/{assignment_id}", response_model=AssignmentOut)
def update_assignment(
    assignment_id: str,
    payload: AssignmentUpdate,
    repository: TimetableRepository = Depends(get_repository),
) -> AssignmentOut:
    assignment = repository.get_assignment(assignment_id)
    if assignment is None:
        raise ResourceNotFoundError("Assignment", assignment_id)

    data = payload.model_dump(exclude_unset=True)
    _require(repository, teacher_id=data.get("teacherId"), room_id=data.get("roomId"))
    changes = {}
    if data.get("teacherId") is not None:
        changes["teacher_id"] = data["teacherId"]
    if "roomId" in data:
        changes["room_id"] = data["roomId"]
    if "notes" in data:
        changes["notes"] = data["notes"]

    with repository.transaction():
        repository.update_assignment(assignment, **changes)
    return AssignmentOut.from_model(assignment)


@router.delete("/{assignment_id}")
def delete_assignment(
    assignment_id: str,
    repository: TimetableRepository = Depends(get_repository),
) -> dict:
    assignment = repository.get_assignment(assignment_id)
    if assignment is None:
        raise ResourceNotFoundError("Assignment", assignment_id)
    with repository.transaction():
        removed = repository.delete_assignment(assignment)
    logger.info("ASSIGNMENT DELETED | assignment=%s | sessions_removed=%s", assignment_id, removed)
    return {"success": True, "sessionsRemoved": removed}
