import os

# The app module builds its engine at import time; point it at SQLite before that happens.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from blockplanner.api.deps import get_db
from blockplanner.db.base import Base
from blockplanner.db.repository import TimetableRepository
from blockplanner.main import app
from blockplanner.models import (
    Assignment,
    Block,
    ClassSession,
    Course,
    Program,
    Room,
    RoomCategory,
    SessionKind,
    Shift,
    Teacher,
    Term,
)


class Catalog:
    """Seeds catalog rows and commits each one, in creation order."""

    def __init__(self, db):
        self.db = db
        self._counter = 0
        self.program = self._save(Program(code="TEC", name="Technology"))
        self.term = self._save(Term(code="2026-I", name="Term 2026-I"))

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    def _save(self, item):
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def course(self, name, *, weekly_hours=4, semester="I", program=None, is_active=True):
        return self._save(
            Course(
                program_id=(program or self.program).id,
                semester=semester,
                code=f"C{self._next():03d}",
                name=name,
                weekly_hours=weekly_hours,
                is_active=is_active,
            )
        )

    def teacher(self, name, specialty=None, *, is_active=True):
        return self._save(Teacher(name=name, specialty=specialty, is_active=is_active))

    def room(self, code, category=RoomCategory.ordinary, *, is_active=True):
        return self._save(Room(code=code, name=f"Room {code}", category=category, capacity=30, is_active=is_active))

    def block(self, code, *, semester="I", shift=Shift.morning, program=None):
        return self._save(
            Block(
                code=code,
                program_id=(program or self.program).id,
                term_id=self.term.id,
                semester=semester,
                shift=shift,
                capacity=30,
            )
        )

    def assignment(self, block, course, teacher, room=None):
        return self._save(
            Assignment(
                block_id=block.id,
                course_id=course.id,
                teacher_id=teacher.id,
                room_id=room.id if room is not None else None,
            )
        )

    def session(self, assignment, weekday, start, end, room=None, kind=SessionKind.theory):
        return self._save(
            ClassSession(
                assignment_id=assignment.id,
                room_id=room.id if room is not None else None,
                weekday=weekday,
                start_time=start,
                end_time=end,
                kind=kind,
            )
        )


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def repository(db):
    return TimetableRepository(db)


@pytest.fixture()
def catalog(db):
    return Catalog(db)


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
