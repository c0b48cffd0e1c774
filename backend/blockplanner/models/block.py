import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from blockplanner.db.base import Base


class Shift(str, Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"


class Block(Base):
    __tablename__ = "blocks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    program_id: Mapped[str] = mapped_column(ForeignKey("programs.id"), index=True, nullable=False)
    term_id: Mapped[str] = mapped_column(ForeignKey("terms.id"), index=True, nullable=False)
    semester: Mapped[str] = mapped_column(String(20), nullable=False)
    shift: Mapped[Shift | None] = mapped_column(SAEnum(Shift, name="block_shift"), nullable=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
