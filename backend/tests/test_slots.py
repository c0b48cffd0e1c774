import pytest

from blockplanner.models import Shift, Weekday
from blockplanner.services.slots import SHIFT_PLANS, plan_for_shift, required_session_count


def test_morning_plan_is_day_major_window_minor():
    candidates = list(plan_for_shift(Shift.morning))

    assert len(candidates) == 15
    assert [(c.weekday, c.start, c.end) for c in candidates[:4]] == [
        (Weekday.monday, "07:00", "09:00"),
        (Weekday.monday, "09:00", "11:00"),
        (Weekday.monday, "11:00", "13:00"),
        (Weekday.tuesday, "07:00", "09:00"),
    ]
    assert candidates[-1].weekday == Weekday.friday
    assert candidates[-1].start == "11:00"


def test_afternoon_and_evening_plans():
    afternoon = list(plan_for_shift("afternoon"))
    assert afternoon[0].start == "14:00"
    assert afternoon[-1].end == "20:00"

    evening = plan_for_shift("Evening")
    assert evening.allows(Weekday.saturday)
    assert not evening.allows(Weekday.sunday)
    assert len(evening) == 12
    assert [(c.start, c.end) for c in list(evening)[:2]] == [("19:00", "21:00"), ("21:00", "23:00")]


@pytest.mark.parametrize("name", [None, "", "night", "mañana"])
def test_unknown_shift_defaults_to_morning(name):
    assert plan_for_shift(name) is SHIFT_PLANS[Shift.morning]


def test_plan_iteration_is_restartable():
    plan = plan_for_shift(Shift.afternoon)
    first_pass = list(plan)
    iterator = iter(plan)
    next(iterator)
    assert list(plan) == first_pass


@pytest.mark.parametrize(
    ("weekly_hours", "expected"),
    [(4, 2), (5, 3), (2, 1), (1, 1), (6, 3), (0, 2), (None, 2)],
)
def test_required_session_count(weekly_hours, expected):
    assert required_session_count(weekly_hours) == expected


def test_required_session_count_uses_configured_default():
    assert required_session_count(None, default_weekly_hours=6) == 3
