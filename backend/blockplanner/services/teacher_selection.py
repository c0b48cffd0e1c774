from __future__ import annotations

from collections.abc import Mapping, Sequence

from blockplanner.core.exceptions import NoTeacherAvailableError
from blockplanner.models.course import Course
from blockplanner.models.teacher import Teacher


def specialty_matches(specialty: str | None, course_name: str) -> bool:
    normalized_specialty = (specialty or "").strip().lower()
    normalized_course = course_name.strip().lower()
    if not normalized_specialty or not normalized_course:
        return False
    return normalized_course in normalized_specialty or normalized_specialty in normalized_course


def select_teacher(
    course: Course,
    teachers: Sequence[Teacher],
    assignment_counts: Mapping[str, int],
) -> Teacher:
    """Pick the first specialist for ``course``, else the least-loaded teacher.

    ``teachers`` is the active set in stable order; ties keep that order.
    Raises :class:`NoTeacherAvailableError` when the set is empty.
    """
    if not teachers:
        raise NoTeacherAvailableError(course.name)

    for teacher in teachers:
        if specialty_matches(teacher.specialty, course.name):
            return teacher

    # min() returns the first of equal keys, which keeps input order on ties.
    return min(teachers, key=lambda teacher: assignment_counts.get(teacher.id, 0))
