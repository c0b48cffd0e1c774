from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class AutoAssignRequest(BaseModel):
    blockIds: list[str] = Field(min_length=1, max_length=500)

    @field_validator("blockIds")
    @classmethod
    def strip_ids(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip() for item in value if item.strip()]
        if not cleaned:
            raise ValueError("At least one block id is required")
        return cleaned


class AutoAssignConflict(BaseModel):
    block: str
    error: str


class AutoAssignReport(BaseModel):
    assignmentsCreated: int
    sessionsCreated: int
    conflicts: list[AutoAssignConflict]
    message: str
