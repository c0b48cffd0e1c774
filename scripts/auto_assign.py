"""Run automatic assignment for blocks from the command line.

Run:
  PYTHONPATH=backend python scripts/auto_assign.py SIS-1A SIS-2A

Blocks are given by code. The assignment report is printed as JSON; the exit
status is 1 when the report carries conflicts and 2 when no block matched.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from blockplanner.core.config import get_settings
from blockplanner.core.logging import configure_logging
from blockplanner.db.repository import TimetableRepository
from blockplanner.db.session import SessionLocal
from blockplanner.services.assignment_builder import AssignmentBuilder

logger = logging.getLogger("blockplanner.scripts.auto_assign")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Assign courses, teachers, rooms and sessions to blocks.")
    parser.add_argument("blocks", nargs="+", help="Block codes, for example SIS-1A")
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL for this run")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    if args.log_level:
        settings = settings.model_copy(update={"log_level": args.log_level.upper()})
    configure_logging(settings)

    with SessionLocal() as session:
        repository = TimetableRepository(session)
        blocks = repository.get_blocks_by_code(args.blocks)
        found = {block.code for block in blocks}
        missing = [code for code in args.blocks if code.strip().upper() not in found]
        if missing:
            logger.warning("AUTO ASSIGN UNKNOWN BLOCKS | codes=%s", ",".join(missing))
        if not blocks:
            print(json.dumps({"message": "No matching blocks", "missing": missing}, indent=2))
            return 2

        report = AssignmentBuilder(repository, settings).run([block.id for block in blocks])

    print(json.dumps(report.to_payload().model_dump(), indent=2, ensure_ascii=False))
    return 1 if report.conflicts else 0


if __name__ == "__main__":
    sys.exit(main())
