from blockplanner.models.assignment import Assignment  # noqa: F401
from blockplanner.models.block import Block, Shift  # noqa: F401
from blockplanner.models.class_session import WEEKDAY_ORDER, ClassSession, SessionKind, Weekday  # noqa: F401
from blockplanner.models.course import Course  # noqa: F401
from blockplanner.models.program import Program, Term  # noqa: F401
from blockplanner.models.room import Room, RoomCategory  # noqa: F401
from blockplanner.models.teacher import Teacher  # noqa: F401
