from pathlib import Path
from typing import Dict, Optional

from .. import config
from ..exceptions import CollisionLimitError, MalformedTimestampError
from ..models import DestinationCandidate, ParsedTimestamp, Resolution
from ..scanning.hasher import FileHasher


class DestinationNamer:
    """
    Turns 'YYYY:MM:DD HH:MM:SS' into a (subdirectory, basename, extension)
    triple. Field values are used verbatim; nothing is re-padded or
    checked against the calendar.
    """

    def parse_timestamp(self, timestamp: Optional[str]) -> ParsedTimestamp:
        if not timestamp:
            raise MalformedTimestampError(timestamp)

        parts = timestamp.split(' ')
        if len(parts) != 2:
            raise MalformedTimestampError(timestamp)

        date_fields = parts[0].split(':')
        time_fields = parts[1].split(':')
        fields = date_fields + time_fields
        if len(date_fields) != 3 or len(time_fields) != 3:
            raise MalformedTimestampError(timestamp)
        # Fields become path components, so only plain digits are accepted
        if not all(f and f.isascii() and f.isdigit() for f in fields):
            raise MalformedTimestampError(timestamp)

        return ParsedTimestamp(*fields)

    def name_for(self, timestamp: Optional[str], extension: str) -> DestinationCandidate:
        ts = self.parse_timestamp(timestamp)
        values = {
            'year': ts.year, 'month': ts.month, 'day': ts.day,
            'hour': ts.hour, 'minute': ts.minute, 'second': ts.second,
        }
        return DestinationCandidate(
            subdirectory=config.FOLDER_PATTERN.format(**values),
            basename=config.NAME_PATTERN.format(**values),
            extension=extension,
        )


class CollisionResolver:
    """
    Finds the slot a file should occupy under the destination root.

    Walks path0, then basename(0), basename(1), ... and stops at the first
    path that is free or already holds the same content. Slots handed out
    during the run are remembered so that a dry run predicts the same
    names a real run would write.
    """

    def __init__(self, hasher: Optional[FileHasher] = None,
                 max_collisions: int = config.MAX_COLLISIONS):
        self.hasher = hasher or FileHasher()
        self.max_collisions = max_collisions
        # Slots claimed in this run: path -> fingerprint
        self.reserved: Dict[Path, str] = {}

    def resolve(self, dest_root: Path, candidate: DestinationCandidate, fingerprint: str) -> Resolution:
        """
        Raises FileHashError if an existing destination file can't be read,
        CollisionLimitError if no slot is found within max_collisions.
        """
        folder = dest_root / candidate.subdirectory
        path = folder / candidate.filename
        n = 0

        while self._is_occupied(path):
            if self._fingerprint_at(path) == fingerprint:
                return Resolution(path, already_present=True)

            if n >= self.max_collisions:
                raise CollisionLimitError(
                    f"Gave up after {n} numbered variants of {folder / candidate.filename}"
                )
            suffix = config.DISAMBIGUATOR_PATTERN.format(n=n)
            path = folder / f"{candidate.basename}{suffix}{candidate.extension}"
            n += 1

        self.reserved[path] = fingerprint
        return Resolution(path, already_present=False)

    def release(self, path: Path):
        """Forget a reservation whose placement failed."""
        self.reserved.pop(path, None)

    def _is_occupied(self, path: Path) -> bool:
        return path in self.reserved or path.exists() or path.is_symlink()

    def _fingerprint_at(self, path: Path) -> Optional[str]:
        if path in self.reserved:
            return self.reserved[path]
        # A directory or other non-file entry never matches
        if not path.is_file():
            return None
        return self.hasher.digest(path)
