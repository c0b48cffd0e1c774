from types import SimpleNamespace

import pytest

from blockplanner.models import Weekday
from blockplanner.services.availability import AvailabilityChecker, find_overlap, intervals_overlap


@pytest.mark.parametrize(
    ("first", "second", "expected"),
    [
        ((540, 660), (600, 720), True),
        ((540, 660), (660, 780), False),
        ((660, 780), (540, 660), False),
        ((540, 780), (600, 660), True),
        ((420, 540), (840, 960), False),
    ],
)
def test_intervals_overlap_is_half_open(first, second, expected):
    assert intervals_overlap(*first, *second) is expected


def test_find_overlap_returns_first_clashing_session():
    sessions = [
        SimpleNamespace(id="a", start_time="07:00", end_time="09:00"),
        SimpleNamespace(id="b", start_time="09:00", end_time="11:00"),
    ]
    assert find_overlap(sessions, "10:00", "12:00").id == "b"
    assert find_overlap(sessions, "11:00", "13:00") is None
    assert find_overlap([], "07:00", "09:00") is None


@pytest.fixture
def occupied_room(catalog):
    block = catalog.block("TEC-1A")
    room = catalog.room("A-101")
    teacher = catalog.teacher("Ana Torres")
    course = catalog.course("Mathematics I")
    assignment = catalog.assignment(block, course, teacher)
    session = catalog.session(assignment, Weekday.monday, "09:00", "11:00", room=room)
    return SimpleNamespace(block=block, room=room, teacher=teacher, assignment=assignment, session=session)


def test_room_conflict_names_existing_range(repository, occupied_room):
    conflict = AvailabilityChecker(repository).check_room(Weekday.monday, "10:00", "12:00", occupied_room.room.id)

    assert conflict is not None
    assert conflict.kind == "room"
    assert conflict.session.id == occupied_room.session.id
    assert "09:00 - 11:00" in conflict.message
    assert conflict.message.startswith('Schedule conflict: room already occupied by "Mathematics I"')
    assert conflict.as_details()["course"] == "Mathematics I"


def test_room_boundary_touch_is_free(repository, occupied_room):
    checker = AvailabilityChecker(repository)
    assert checker.check_room(Weekday.monday, "11:00", "13:00", occupied_room.room.id) is None
    assert checker.check_room(Weekday.monday, "07:00", "09:00", occupied_room.room.id) is None


def test_room_check_ignores_other_days_and_rooms(repository, catalog, occupied_room):
    other_room = catalog.room("A-102")
    checker = AvailabilityChecker(repository)
    assert checker.check_room(Weekday.tuesday, "09:00", "11:00", occupied_room.room.id) is None
    assert checker.check_room(Weekday.monday, "09:00", "11:00", other_room.id) is None


def test_room_check_excludes_edited_session(repository, occupied_room):
    conflict = AvailabilityChecker(repository).check_room(
        Weekday.monday,
        "09:30",
        "11:30",
        occupied_room.room.id,
        exclude_session_id=occupied_room.session.id,
    )
    assert conflict is None


def test_virtual_session_skips_room_check(repository, occupied_room):
    assert AvailabilityChecker(repository).check_room(Weekday.monday, "09:00", "11:00", None) is None


def test_teacher_conflict_detected_across_rooms(repository, catalog):
    block = catalog.block("TEC-1A")
    teacher = catalog.teacher("Teresa Ramos")
    room_one = catalog.room("A-101")
    room_two = catalog.room("A-102")
    course_x = catalog.course("Physics")
    course_y = catalog.course("Chemistry")
    first = catalog.assignment(block, course_x, teacher)
    catalog.assignment(block, course_y, teacher)
    catalog.session(first, Weekday.tuesday, "14:00", "16:00", room=room_one)

    checker = AvailabilityChecker(repository)
    assert checker.check_room(Weekday.tuesday, "15:00", "17:00", room_two.id) is None

    conflict = checker.check_teacher(Weekday.tuesday, "15:00", "17:00", teacher.id)
    assert conflict is not None
    assert conflict.kind == "teacher"
    assert "14:00 - 16:00" in conflict.message

    combined = checker.check(Weekday.tuesday, "15:00", "17:00", room_id=room_two.id, teacher_id=teacher.id)
    assert combined is not None and combined.kind == "teacher"


def test_teacher_check_ignores_other_teachers(repository, catalog, occupied_room):
    other = catalog.teacher("Bruno Diaz")
    assert AvailabilityChecker(repository).check_teacher(Weekday.monday, "09:00", "11:00", other.id) is None
