from __future__ import annotations
from typing import Optional


class BeatmapError(ValueError):
    """Base error for beatmap decoding."""


class MalformedRecord(BeatmapError):
    """Raised when a record is corrupt enough to abort the whole decode run."""

    def __init__(self, message: str, *, line_no: Optional[int] = None, line: Optional[str] = None):
        self.line_no = line_no
        self.line = line
        where = f" (line {line_no})" if line_no is not None else ""
        super().__init__(f"{message}{where}")
