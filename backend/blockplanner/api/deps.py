from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from blockplanner.db.repository import TimetableRepository
from blockplanner.db.session import SessionLocal


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_repository(db: Session = Depends(get_db)) -> TimetableRepository:
    return TimetableRepository(db)
