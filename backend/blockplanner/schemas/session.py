from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from blockplanner.models.class_session import ClassSession, SessionKind, Weekday
from blockplanner.schemas.common import normalize_time, parse_time_to_minutes


class SessionCreate(BaseModel):
    assignmentId: str = Field(min_length=1, max_length=36)
    weekday: Weekday
    start: str
    end: str
    roomId: str | None = Field(default=None, max_length=36)
    kind: SessionKind = SessionKind.theory

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return normalize_time(value)

    @model_validator(mode="after")
    def validate_order(self) -> "SessionCreate":
        if parse_time_to_minutes(self.end) <= parse_time_to_minutes(self.start):
            raise ValueError("end must be after start")
        return self


class SessionUpdate(BaseModel):
    weekday: Weekday | None = None
    start: str | None = None
    end: str | None = None
    roomId: str | None = Field(default=None, max_length=36)
    kind: SessionKind | None = None

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return normalize_time(value)


class SessionOut(BaseModel):
    id: str
    assignmentId: str
    roomId: str | None
    weekday: Weekday
    start: str
    end: str
    kind: SessionKind
    course: str | None = None

    @classmethod
    def from_model(cls, session: ClassSession) -> "SessionOut":
        return cls(
            id=session.id,
            assignmentId=session.assignment_id,
            roomId=session.room_id,
            weekday=session.weekday,
            start=session.start_time,
            end=session.end_time,
            kind=session.kind,
            course=session.assignment.course.name if session.assignment is not None else None,
        )
