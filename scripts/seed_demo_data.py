"""Seed a small demo catalog for BlockPlanner.

Run:
  PYTHONPATH=backend python scripts/seed_demo_data.py

Rows are matched on their natural keys (codes, teacher names), so running the
script twice leaves a single copy of every record.
"""

from __future__ import annotations

import os

from sqlalchemy import func, select

from blockplanner.core.config import get_settings
from blockplanner.db.bootstrap import ensure_runtime_schema
from blockplanner.db.session import SessionLocal, engine
from blockplanner.models import Block, Course, Program, Room, RoomCategory, Shift, Teacher, Term

PROGRAM_CODE = os.getenv("SEED_PROGRAM_CODE", "SIS").strip().upper() or "SIS"
PROGRAM_NAME = "Systems Engineering"
TERM_CODE = os.getenv("SEED_TERM_CODE", "2026-II").strip() or "2026-II"

CURRICULUM = {
    "I": [
        ("SIS-101", "Mathematics I", 4),
        ("SIS-102", "Programming Fundamentals", 6),
        ("SIS-103", "Academic Writing", 2),
        ("SIS-104", "General Physics", 4),
    ],
    "II": [
        ("SIS-201", "Mathematics II", 4),
        ("SIS-202", "Data Structures", 6),
        ("SIS-203", "Ethics and Society", 2),
        ("SIS-204", "Software Workshop", 4),
    ],
}

TEACHERS = [
    ("Ana Torres", "ana.torres@blockplanner.test", "Mathematics I, Mathematics II"),
    ("Bruno Diaz", "bruno.diaz@blockplanner.test", "Programming Fundamentals"),
    ("Carla Mendez", "carla.mendez@blockplanner.test", "Data Structures, Software Workshop"),
    ("Diego Rojas", "diego.rojas@blockplanner.test", None),
    ("Elena Castro", "elena.castro@blockplanner.test", "Academic Writing"),
]

ROOMS = [
    ("A-101", "Classroom A-101", RoomCategory.ordinary, 40),
    ("A-102", "Classroom A-102", RoomCategory.ordinary, 40),
    ("A-201", "Classroom A-201", RoomCategory.ordinary, 35),
    ("LAB-1", "Computer Lab 1", RoomCategory.laboratory, 30),
    ("LAB-2", "Computer Lab 2", RoomCategory.laboratory, 30),
    ("AUD-1", "Main Auditorium", RoomCategory.auditorium, 120),
]

BLOCKS = [
    ("SIS-1A", "I", Shift.morning),
    ("SIS-1B", "I", Shift.afternoon),
    ("SIS-2A", "II", Shift.morning),
    ("SIS-2N", "II", Shift.evening),
]


def upsert_by_code(session, model, code: str, **values):
    item = session.execute(select(model).where(model.code == code)).scalar_one_or_none()
    if item is None:
        item = model(code=code, **values)
        session.add(item)
    else:
        for key, value in values.items():
            setattr(item, key, value)
    session.flush()
    return item


def upsert_teacher(session, name: str, email: str, specialty: str | None) -> Teacher:
    teacher = session.execute(
        select(Teacher).where(func.lower(Teacher.name) == name.lower())
    ).scalar_one_or_none()
    if teacher is None:
        teacher = Teacher(name=name)
        session.add(teacher)
    teacher.email = email
    teacher.specialty = specialty
    teacher.is_active = True
    session.flush()
    return teacher


def main() -> None:
    ensure_runtime_schema(engine, auto_create=get_settings().auto_create_schema)
    with SessionLocal() as session:
        program = upsert_by_code(session, Program, PROGRAM_CODE, name=PROGRAM_NAME)
        term = upsert_by_code(session, Term, TERM_CODE, name=f"Term {TERM_CODE}")

        for semester, courses in CURRICULUM.items():
            for code, name, weekly_hours in courses:
                upsert_by_code(
                    session,
                    Course,
                    code,
                    program_id=program.id,
                    semester=semester,
                    name=name,
                    weekly_hours=weekly_hours,
                    is_active=True,
                )

        for name, email, specialty in TEACHERS:
            upsert_teacher(session, name, email, specialty)

        for code, name, category, capacity in ROOMS:
            upsert_by_code(session, Room, code, name=name, category=category, capacity=capacity, is_active=True)

        for code, semester, shift in BLOCKS:
            upsert_by_code(
                session,
                Block,
                code,
                program_id=program.id,
                term_id=term.id,
                semester=semester,
                shift=shift,
                capacity=35,
            )

        session.commit()

        course_count = session.execute(select(func.count(Course.id))).scalar_one()
        teacher_count = session.execute(select(func.count(Teacher.id))).scalar_one()
        room_count = session.execute(select(func.count(Room.id))).scalar_one()
        block_codes = session.execute(select(Block.code).order_by(Block.code)).scalars().all()

    print("Demo catalog seeded successfully.")
    print("")
    print(f"Program: {PROGRAM_NAME} ({PROGRAM_CODE}), term {TERM_CODE}")
    print(f"Course records: {course_count}")
    print(f"Teacher records: {teacher_count}")
    print(f"Rooms (classrooms + labs): {room_count}")
    print(f"Blocks: {', '.join(block_codes)}")
    print("")
    print("Next step:")
    print(f"  PYTHONPATH=backend python scripts/auto_assign.py {' '.join(block_codes)}")


if __name__ == "__main__":
    main()
