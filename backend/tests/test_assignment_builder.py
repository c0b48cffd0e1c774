from itertools import combinations

from sqlalchemy import func, select

from blockplanner.core.config import Settings
from blockplanner.core.exceptions import RepositoryError
from blockplanner.models import Assignment, ClassSession, RoomCategory, SessionKind, Shift, Weekday
from blockplanner.schemas.common import parse_time_to_minutes
from blockplanner.services.assignment_builder import AssignmentBuilder, BlockConflict, BuildState
from blockplanner.services.availability import intervals_overlap


def _builder(repository, **overrides):
    return AssignmentBuilder(repository, Settings(**overrides))


def _seed_technology(catalog):
    catalog.course("Mathematics I", weekly_hours=5)
    catalog.course("Programming Fundamentals", weekly_hours=4)
    ana = catalog.teacher("Ana Torres", "Mathematics")
    bruno = catalog.teacher("Bruno Diaz")
    lab = catalog.room("LAB-1", RoomCategory.laboratory)
    classroom = catalog.room("A-101")
    return ana, bruno, lab, classroom


def _sessions_with_teacher(db):
    rows = db.execute(select(ClassSession, Assignment.teacher_id).join(Assignment)).all()
    return [(session, teacher_id) for session, teacher_id in rows]


def _assert_no_overlaps(db):
    rows = _sessions_with_teacher(db)
    for (first, first_teacher), (second, second_teacher) in combinations(rows, 2):
        if first.weekday != second.weekday:
            continue
        overlapping = intervals_overlap(
            parse_time_to_minutes(first.start_time),
            parse_time_to_minutes(first.end_time),
            parse_time_to_minutes(second.start_time),
            parse_time_to_minutes(second.end_time),
        )
        if first.room_id is not None and first.room_id == second.room_id:
            assert not overlapping, (first.id, second.id)
        if first_teacher == second_teacher:
            assert not overlapping, (first.id, second.id)


def test_single_block_assigns_teachers_rooms_and_sessions(db, repository, catalog):
    ana, bruno, lab, classroom = _seed_technology(catalog)
    block = catalog.block("TEC-1A")

    report = _builder(repository).run([block.id])

    assert report.assignments_created == 2
    assert report.sessions_created == 5
    assert report.conflicts == ()
    assert report.message == "Assignment completed: 2 assignments, 5 sessions"

    by_course = {item.course.name: item for item in db.execute(select(Assignment)).scalars()}
    assert by_course["Mathematics I"].teacher_id == ana.id
    assert by_course["Programming Fundamentals"].teacher_id == bruno.id

    math_sessions = db.execute(
        select(ClassSession)
        .where(ClassSession.assignment_id == by_course["Mathematics I"].id)
        .order_by(ClassSession.start_time)
    ).scalars().all()
    assert [(s.weekday, s.start_time, s.end_time) for s in math_sessions] == [
        (Weekday.monday, "07:00", "09:00"),
        (Weekday.monday, "09:00", "11:00"),
        (Weekday.monday, "11:00", "13:00"),
    ]
    assert {s.room_id for s in math_sessions} == {classroom.id}
    assert {s.kind for s in math_sessions} == {SessionKind.theory}

    lab_sessions = db.execute(
        select(ClassSession).where(ClassSession.assignment_id == by_course["Programming Fundamentals"].id)
    ).scalars().all()
    assert len(lab_sessions) == 2
    assert {s.room_id for s in lab_sessions} == {lab.id}
    assert {s.kind for s in lab_sessions} == {SessionKind.laboratory}


def test_second_block_avoids_occupied_rooms_and_busy_teachers(db, repository, catalog):
    _seed_technology(catalog)
    first = catalog.block("TEC-1A")
    second = catalog.block("TEC-1B")

    report = _builder(repository).run([first.id, second.id])

    assert report.assignments_created == 4
    assert report.sessions_created == 10
    assert report.conflicts == ()
    _assert_no_overlaps(db)


def test_afternoon_block_uses_afternoon_windows(db, repository, catalog):
    catalog.course("Ethics", weekly_hours=2)
    catalog.teacher("Ana Torres")
    catalog.room("A-101")
    block = catalog.block("TEC-1C", shift=Shift.afternoon)

    _builder(repository).run([block.id])

    session = db.execute(select(ClassSession)).scalar_one()
    assert (session.weekday, session.start_time, session.end_time) == (Weekday.monday, "14:00", "16:00")


def test_block_without_eligible_courses_is_a_quiet_no_op(repository, catalog):
    catalog.course("Mathematics III", semester="III")
    catalog.teacher("Ana Torres")
    block = catalog.block("TEC-1A", semester="I")

    report = _builder(repository).run([block.id])

    assert report.assignments_created == 0
    assert report.sessions_created == 0
    assert report.conflicts == ()


def test_inactive_courses_are_not_eligible(repository, catalog):
    catalog.course("Legacy Course", is_active=False)
    catalog.teacher("Ana Torres")
    block = catalog.block("TEC-1A")

    assert _builder(repository).run([block.id]).assignments_created == 0


def test_missing_teachers_are_recorded_per_course(db, repository, catalog):
    catalog.course("Mathematics I")
    catalog.teacher("Retired", is_active=False)
    catalog.room("A-101")
    block = catalog.block("TEC-1A")

    report = _builder(repository).run([block.id])

    assert report.assignments_created == 0
    assert [(c.block, c.error) for c in report.conflicts] == [("TEC-1A", "No teacher available for Mathematics I")]
    assert db.execute(select(func.count(Assignment.id))).scalar_one() == 0


def test_rerun_does_not_duplicate_assignments(db, repository, catalog):
    _seed_technology(catalog)
    block = catalog.block("TEC-1A")
    builder = _builder(repository)

    builder.run([block.id])
    again = builder.run([block.id])

    assert again.assignments_created == 0
    assert again.sessions_created == 0
    assert db.execute(select(func.count(Assignment.id))).scalar_one() == 2


def test_shortfall_is_reported_without_failing_the_run(db, repository, catalog):
    catalog.course("Intensive Seminar", weekly_hours=40)
    catalog.course("Ethics", weekly_hours=2)
    catalog.teacher("Ana Torres")
    catalog.room("A-101")
    block = catalog.block("TEC-1A")

    report = _builder(repository).run([block.id])

    assert report.assignments_created == 2
    assert report.sessions_created == 15
    assert ("TEC-1A", "Intensive Seminar: placed 15 of 20 required sessions") in [
        (c.block, c.error) for c in report.conflicts
    ]
    assert ("TEC-1A", "Ethics: placed 0 of 1 required sessions") in [(c.block, c.error) for c in report.conflicts]


def test_no_rooms_still_creates_assignment(repository, catalog):
    catalog.course("Ethics", weekly_hours=4)
    catalog.teacher("Ana Torres")
    block = catalog.block("TEC-1A")

    report = _builder(repository).run([block.id])

    assert report.assignments_created == 1
    assert report.sessions_created == 0
    assert report.conflicts[0].error == "Ethics: placed 0 of 2 required sessions"


def test_existing_manual_sessions_are_respected(db, repository, catalog):
    teacher = catalog.teacher("Ana Torres")
    room = catalog.room("A-101")
    other_block = catalog.block("TEC-2A", semester="II")
    manual_course = catalog.course("Statistics", semester="II")
    manual = catalog.assignment(other_block, manual_course, teacher)
    catalog.session(manual, Weekday.monday, "07:00", "09:00", room=room)
    catalog.course("Ethics", weekly_hours=2)
    block = catalog.block("TEC-1A")

    _builder(repository).run([block.id])

    placed = db.execute(
        select(ClassSession).join(Assignment).where(Assignment.block_id == block.id)
    ).scalar_one()
    assert (placed.weekday, placed.start_time) == (Weekday.monday, "09:00")
    _assert_no_overlaps(db)


def test_unknown_block_ids_become_conflicts(repository, catalog):
    block = catalog.block("TEC-1A")

    report = _builder(repository).run(["missing-id", block.id])

    assert [(c.block, c.error) for c in report.conflicts] == [
        ("missing-id", "Block with id missing-id not found"),
    ]


def test_storage_failure_skips_only_the_failing_course(db, repository, catalog, monkeypatch):
    catalog.course("Alpha")
    catalog.course("Beta")
    catalog.teacher("Ana Torres")
    catalog.room("A-101")
    first_block = catalog.block("TEC-1A")
    second_block = catalog.block("TEC-1B")

    original = repository.find_assignment
    calls = []

    def fail_first_lookup(block_id, course_id):
        calls.append((block_id, course_id))
        if len(calls) == 1:
            raise RepositoryError("Storage failure during find_assignment")
        return original(block_id, course_id)

    monkeypatch.setattr(repository, "find_assignment", fail_first_lookup)

    report = _builder(repository).run([first_block.id, second_block.id])

    assert report.assignments_created == 3
    assert report.sessions_created == 6
    assert report.conflicts == (
        BlockConflict(block="TEC-1A", error="Alpha: Storage failure during find_assignment"),
    )
    assigned = {
        (item.block_id, item.course.name) for item in db.execute(select(Assignment)).scalars()
    }
    assert assigned == {
        (first_block.id, "Beta"),
        (second_block.id, "Alpha"),
        (second_block.id, "Beta"),
    }
    _assert_no_overlaps(db)


def test_custom_keywords_drive_room_category(db, repository, catalog):
    catalog.course("Design Studio", weekly_hours=2)
    catalog.teacher("Ana Torres")
    lab = catalog.room("LAB-1", RoomCategory.laboratory)
    catalog.room("A-101")
    block = catalog.block("TEC-1A")

    _builder(repository, practical_course_keywords=["studio"]).run([block.id])

    session = db.execute(select(ClassSession)).scalar_one()
    assert session.room_id == lab.id
    assert session.kind == SessionKind.laboratory


def test_build_state_is_immutable():
    state = BuildState()
    advanced = state.with_assignment(3).with_conflict("TEC-1A", "boom")

    assert state.assignments_created == 0
    assert state.conflicts == ()
    assert advanced.assignments_created == 1
    assert advanced.sessions_created == 3
    assert advanced.conflicts[0].error == "boom"


def test_report_payload_uses_camel_case_contract(repository, catalog):
    _seed_technology(catalog)
    block = catalog.block("TEC-1A")

    payload = _builder(repository).run([block.id]).to_payload().model_dump()

    assert set(payload) == {"assignmentsCreated", "sessionsCreated", "conflicts", "message"}
    assert payload["assignmentsCreated"] == 2
