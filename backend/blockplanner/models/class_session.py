import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, Enum as SAEnum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from blockplanner.db.base import Base
from blockplanner.models.assignment import Assignment


class Weekday(str, Enum):
    monday = "Monday"
    tuesday = "Tuesday"
    wednesday = "Wednesday"
    thursday = "Thursday"
    friday = "Friday"
    saturday = "Saturday"
    sunday = "Sunday"


WEEKDAY_ORDER = {day: index for index, day in enumerate(Weekday)}


class SessionKind(str, Enum):
    theory = "theory"
    workshop = "workshop"
    laboratory = "laboratory"
    virtual = "virtual"
    evaluation = "evaluation"


class ClassSession(Base):
    __tablename__ = "class_sessions"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_class_sessions_time_order"),
        Index("ix_class_sessions_room_day_start", "room_id", "weekday", "start_time"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    assignment_id: Mapped[str] = mapped_column(ForeignKey("assignments.id"), index=True, nullable=False)
    room_id: Mapped[str | None] = mapped_column(ForeignKey("rooms.id"), nullable=True)
    weekday: Mapped[Weekday] = mapped_column(
        SAEnum(Weekday, name="weekday", values_callable=lambda items: [item.value for item in items]),
        nullable=False,
    )
    # Zero-padded HH:MM so lexical order matches chronological order.
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    kind: Mapped[SessionKind] = mapped_column(
        SAEnum(SessionKind, name="session_kind"), nullable=False, default=SessionKind.theory
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    assignment: Mapped[Assignment] = relationship(lazy="joined")
