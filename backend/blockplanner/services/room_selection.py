from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from blockplanner.models.class_session import SessionKind
from blockplanner.models.room import Room, RoomCategory

# Keywords this short only count as whole words ("AI" must not match "Social").
WHOLE_WORD_MAX_LENGTH = 3


class CourseClassifier:
    """Classifies a course as practical or theoretical from keywords in its name."""

    def __init__(self, keywords: Iterable[str]):
        patterns = []
        for keyword in keywords:
            cleaned = keyword.strip()
            if not cleaned:
                continue
            escaped = re.escape(cleaned)
            if len(cleaned) <= WHOLE_WORD_MAX_LENGTH:
                patterns.append(rf"\b{escaped}\b")
            else:
                patterns.append(escaped)
        self._pattern = re.compile("|".join(patterns), re.IGNORECASE) if patterns else None

    def is_practical(self, course_name: str) -> bool:
        if self._pattern is None:
            return False
        return self._pattern.search(course_name) is not None

    def session_kind(self, course_name: str) -> SessionKind:
        return SessionKind.laboratory if self.is_practical(course_name) else SessionKind.theory


@dataclass(frozen=True)
class RoomCursor:
    """Rotation position over laboratory and non-laboratory rooms."""

    practical: int = 0
    theoretical: int = 0

    def position(self, practical: bool) -> int:
        return self.practical if practical else self.theoretical

    def advance(self, practical: bool) -> "RoomCursor":
        if practical:
            return replace(self, practical=self.practical + 1)
        return replace(self, theoretical=self.theoretical + 1)


def candidate_rooms(rooms: Sequence[Room], practical: bool) -> list[Room]:
    if practical:
        matching = [room for room in rooms if room.category == RoomCategory.laboratory]
    else:
        matching = [room for room in rooms if room.category != RoomCategory.laboratory]
    return matching or list(rooms)


def pick_room(rooms: Sequence[Room], practical: bool, cursor: RoomCursor) -> tuple[Room | None, RoomCursor]:
    """Return the next room in rotation for the course category and the advanced cursor."""
    pool = candidate_rooms(rooms, practical)
    if not pool:
        return None, cursor
    room = pool[cursor.position(practical) % len(pool)]
    return room, cursor.advance(practical)
