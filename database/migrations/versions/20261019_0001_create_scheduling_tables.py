"""create scheduling tables

Revision ID: 20261019_0001
Revises: None
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


room_category_enum = sa.Enum("ordinary", "workshop", "laboratory", "auditorium", name="room_category")
block_shift_enum = sa.Enum("morning", "afternoon", "evening", name="block_shift")
weekday_enum = sa.Enum(
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday", name="weekday"
)
session_kind_enum = sa.Enum("theory", "workshop", "laboratory", "virtual", "evaluation", name="session_kind")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "programs",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_programs_code", "programs", ["code"], unique=True)

    op.create_table(
        "terms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_terms_code", "terms", ["code"], unique=True)

    op.create_table(
        "courses",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("program_id", sa.String(length=36), sa.ForeignKey("programs.id"), nullable=False),
        sa.Column("semester", sa.String(length=20), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("weekly_hours", sa.Integer(), nullable=False, server_default=sa.text("4")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_courses_code", "courses", ["code"], unique=True)
    op.create_index("ix_courses_program_semester", "courses", ["program_id", "semester"])

    op.create_table(
        "teachers",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True, unique=True),
        sa.Column("specialty", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )

    op.create_table(
        "rooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("category", room_category_enum, nullable=False, server_default="ordinary"),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default=sa.text("30")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_rooms_code", "rooms", ["code"], unique=True)

    op.create_table(
        "blocks",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("program_id", sa.String(length=36), sa.ForeignKey("programs.id"), nullable=False),
        sa.Column("term_id", sa.String(length=36), sa.ForeignKey("terms.id"), nullable=False),
        sa.Column("semester", sa.String(length=20), nullable=False),
        sa.Column("shift", block_shift_enum, nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default=sa.text("30")),
        *_timestamps(),
    )
    op.create_index("ix_blocks_code", "blocks", ["code"], unique=True)
    op.create_index("ix_blocks_program_id", "blocks", ["program_id"])
    op.create_index("ix_blocks_term_id", "blocks", ["term_id"])

    op.create_table(
        "assignments",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("block_id", sa.String(length=36), sa.ForeignKey("blocks.id"), nullable=False),
        sa.Column("course_id", sa.String(length=36), sa.ForeignKey("courses.id"), nullable=False),
        sa.Column("teacher_id", sa.String(length=36), sa.ForeignKey("teachers.id"), nullable=False),
        sa.Column("room_id", sa.String(length=36), sa.ForeignKey("rooms.id"), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("block_id", "course_id", name="uq_assignments_block_course"),
    )
    op.create_index("ix_assignments_block_id", "assignments", ["block_id"])
    op.create_index("ix_assignments_teacher_id", "assignments", ["teacher_id"])

    op.create_table(
        "class_sessions",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("assignment_id", sa.String(length=36), sa.ForeignKey("assignments.id"), nullable=False),
        sa.Column("room_id", sa.String(length=36), sa.ForeignKey("rooms.id"), nullable=True),
        sa.Column("weekday", weekday_enum, nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("kind", session_kind_enum, nullable=False, server_default="theory"),
        *_timestamps(),
        sa.CheckConstraint("start_time < end_time", name="ck_class_sessions_time_order"),
    )
    op.create_index("ix_class_sessions_assignment_id", "class_sessions", ["assignment_id"])
    op.create_index("ix_class_sessions_room_day_start", "class_sessions", ["room_id", "weekday", "start_time"])


def downgrade() -> None:
    op.drop_index("ix_class_sessions_room_day_start", table_name="class_sessions")
    op.drop_index("ix_class_sessions_assignment_id", table_name="class_sessions")
    op.drop_table("class_sessions")
    op.drop_index("ix_assignments_teacher_id", table_name="assignments")
    op.drop_index("ix_assignments_block_id", table_name="assignments")
    op.drop_table("assignments")
    op.drop_index("ix_blocks_term_id", table_name="blocks")
    op.drop_index("ix_blocks_program_id", table_name="blocks")
    op.drop_index("ix_blocks_code", table_name="blocks")
    op.drop_table("blocks")
    op.drop_index("ix_rooms_code", table_name="rooms")
    op.drop_table("rooms")
    op.drop_table("teachers")
    op.drop_index("ix_courses_program_semester", table_name="courses")
    op.drop_index("ix_courses_code", table_name="courses")
    op.drop_table("courses")
    op.drop_index("ix_terms_code", table_name="terms")
    op.drop_table("terms")
    op.drop_index("ix_programs_code", table_name="programs")
    op.drop_table("programs")

    bind = op.get_bind()
    for enum in (session_kind_enum, weekday_enum, block_shift_enum, room_category_enum):
        enum.drop(bind, checkfirst=True)
