from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

import blockplanner.models  # noqa: F401
from blockplanner.db.base import Base

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "courses": {"id", "program_id", "semester", "name", "weekly_hours", "is_active"},
    "teachers": {"id", "name", "specialty", "is_active"},
    "rooms": {"id", "code", "category", "is_active"},
    "blocks": {"id", "code", "program_id", "semester", "shift"},
    "assignments": {"id", "block_id", "course_id", "teacher_id", "room_id"},
    "class_sessions": {"id", "assignment_id", "room_id", "weekday", "start_time", "end_time", "kind"},
}


def inspect_schema(engine: Engine) -> tuple[list[str], dict[str, list[str]]]:
    """Return the required tables and columns missing from the connected database."""
    missing_tables: list[str] = []
    missing_columns: dict[str, list[str]] = {}
    with engine.connect() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        for table_name, columns in REQUIRED_COLUMNS.items():
            if table_name not in table_names:
                missing_tables.append(table_name)
                continue
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            missing = sorted(columns - existing)
            if missing:
                missing_columns[table_name] = missing
    return missing_tables, missing_columns


def ensure_runtime_schema(engine: Engine, *, auto_create: bool) -> None:
    try:
        if auto_create:
            Base.metadata.create_all(bind=engine)
            return
        missing_tables, missing_columns = inspect_schema(engine)
    except SQLAlchemyError:
        # Startup continues; /health/ready reports the database as degraded.
        logger.exception("Database schema check failed at startup")
        return
    if missing_tables or missing_columns:
        logger.warning(
            "Database schema is behind the models (missing tables=%s, columns=%s); run `alembic upgrade head`",
            missing_tables,
            missing_columns,
        )
