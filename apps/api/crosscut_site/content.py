from __future__ import annotations

import re
from pathlib import Path

from .domain.entities import DailyNote, is_note_date
from .domain.exceptions import ConfigurationError, NoteNotFound

NOTE_SUFFIX = ".md"

_NOTE_FILE_RE = re.compile(r"(\d{4}-\d{2}-\d{2})\.md", re.ASCII)


class DailyNotes:
    """Read-only view of the daily notes directory.

    Nothing is cached: every call looks at the directory as it is right now.
    """

    def __init__(self, content_dir: Path) -> None:
        self.content_dir = content_dir

    def check(self) -> None:
        if not self.content_dir.is_dir():
            raise ConfigurationError(f"content_dir_missing: {self.content_dir}")

    def list_dates(self) -> list[str]:
        dates: list[str] = []
        try:
            for entry in self.content_dir.iterdir():
                m = _NOTE_FILE_RE.fullmatch(entry.name)
                if m and entry.is_file():
                    dates.append(m.group(1))
        except (FileNotFoundError, NotADirectoryError) as e:
            raise ConfigurationError(f"content_dir_missing: {self.content_dir}") from e
        except PermissionError as e:
            raise ConfigurationError(f"content_dir_unreadable: {self.content_dir}") from e

        dates.sort()
        dates.reverse()
        return dates

    def note_path(self, date: str) -> Path:
        return self.content_dir / f"{date}{NOTE_SUFFIX}"

    def read(self, date: str) -> DailyNote:
        if not is_note_date(date):
            raise NoteNotFound(date)
        try:
            # Undecodable bytes become U+FFFD rather than failing the page
            content = self.note_path(date).read_text(encoding="utf-8", errors="replace")
        except (FileNotFoundError, IsADirectoryError) as e:
            self.check()
            raise NoteNotFound(date) from e
        except PermissionError as e:
            raise ConfigurationError(f"content_dir_unreadable: {self.content_dir}") from e

        return DailyNote(date=date, content_markdown=content)
