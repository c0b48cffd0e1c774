from __future__ import annotations

from pydantic import BaseModel, Field

from blockplanner.models.assignment import Assignment


class AssignmentCreate(BaseModel):
    blockId: str = Field(min_length=1, max_length=36)
    courseId: str = Field(min_length=1, max_length=36)
    teacherId: str = Field(min_length=1, max_length=36)
    roomId: str | None = Field(default=None, max_length=36)
    notes: str | None = Field(default=None, max_length=500)


class AssignmentUpdate(BaseModel):
    teacherId: str | None = Field(default=None, min_length=1, max_length=36)
    roomId: str | None = Field(default=None, max_length=36)
    notes: str | None = Field(default=None, max_length=500)


class AssignmentOut(BaseModel):
    id: str
    blockId: str
    courseId: str
    teacherId: str
    roomId: str | None
    notes: str | None

    @classmethod
    def from_model(cls, assignment: Assignment) -> "AssignmentOut":
        return cls(
            id=assignment.id,
            blockId=assignment.block_id,
            courseId=assignment.course_id,
            teacherId=assignment.teacher_id,
            roomId=assignment.room_id,
            notes=assignment.notes,
        )
