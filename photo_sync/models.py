from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


@dataclass
class MediaFile:
    """
    Represents a media file found during a scan.

    `timestamp` stays None until the file has been chosen as the
    representative of its fingerprint.
    """
    path: Path
    fingerprint: str
    timestamp: Optional[str] = None


@dataclass(frozen=True)
class ParsedTimestamp:
    year: str
    month: str
    day: str
    hour: str
    minute: str
    second: str


@dataclass(frozen=True)
class DestinationCandidate:
    subdirectory: str   # year/month/day
    basename: str       # year-month-day-hour.minute.second
    extension: str      # with leading dot, case preserved

    @property
    def filename(self) -> str:
        return f"{self.basename}{self.extension}"


@dataclass(frozen=True)
class Resolution:
    path: Path
    already_present: bool


class PlacementResult(Enum):
    PLACED = "placed"
    ALREADY_PRESENT = "already_present"


@dataclass
class RunSummary:
    discovered: int = 0
    duplicates: int = 0
    placed: int = 0
    already_present: int = 0
    skipped: int = 0
    failed: int = 0
