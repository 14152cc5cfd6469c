from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

NOTE_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def is_note_date(value: str) -> bool:
    return NOTE_DATE_RE.fullmatch(value) is not None


def parse_note_date(value: str) -> date | None:
    """Calendar date for a note date string, or None if it names no real day."""
    if not is_note_date(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class DailyNote:
    date: str
    content_markdown: str


@dataclass(frozen=True)
class NoteNavigation:
    previous: str | None
    next: str | None
