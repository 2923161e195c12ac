import shutil
import logging
from pathlib import Path
from typing import Iterable, Optional

from ..exceptions import (
    CollisionLimitError,
    FileHashError,
    FileOperationError,
    MalformedTimestampError,
)
from ..metadata.extract import MetadataExtractor
from ..models import MediaFile, PlacementResult, RunSummary
from .rules import CollisionResolver, DestinationNamer


class FileMover:
    def __init__(self,
                 metadata: Optional[MetadataExtractor] = None,
                 namer: Optional[DestinationNamer] = None,
                 resolver: Optional[CollisionResolver] = None):
        self.metadata = metadata or MetadataExtractor()
        self.namer = namer or DestinationNamer()
        self.resolver = resolver or CollisionResolver()

    def execute(self,
                representatives: Iterable[MediaFile],
                dest_root: Path,
                move_mode: bool = False,
                dry_run: bool = False,
                summary: Optional[RunSummary] = None) -> RunSummary:
        """
        Places every representative, in order. A failure on one file is
        logged and counted; the rest of the batch still runs.
        """
        summary = summary or RunSummary()

        for media in representatives:
            try:
                result = self.place(media, dest_root, move_mode=move_mode, dry_run=dry_run)
            except MalformedTimestampError as e:
                logging.warning(f"Skipping {media.path}: {e}")
                summary.skipped += 1
                continue
            except (FileHashError, FileOperationError, CollisionLimitError) as e:
                logging.error(f"Failed to place {media.path}: {e}")
                summary.failed += 1
                continue

            if result is PlacementResult.ALREADY_PRESENT:
                summary.already_present += 1
            else:
                summary.placed += 1

        return summary

    def place(self,
              media: MediaFile,
              dest_root: Path,
              move_mode: bool = False,
              dry_run: bool = False) -> PlacementResult:
        """
        Resolves the destination for one representative and copies/moves it
        there unless an identical file is already in place.
        """
        # Timestamps are only read for files that survived deduplication
        if media.timestamp is None:
            media.timestamp = self.metadata.resolve_timestamp(media.path)

        candidate = self.namer.name_for(media.timestamp, media.path.suffix)
        resolution = self.resolver.resolve(dest_root, candidate, media.fingerprint)
        dest = resolution.path
        prefix = "[DRY RUN] " if dry_run else ""

        if resolution.already_present:
            logging.info(f"{prefix}{media.path} already exist at: {dest}")
            return PlacementResult.ALREADY_PRESENT

        logging.info(f"{prefix}{'mv' if move_mode else 'cp'} {media.path} {dest}")
        if dry_run:
            return PlacementResult.PLACED

        try:
            if not dest.parent.is_dir():
                logging.info(f"mkdir {dest.parent}")
                dest.parent.mkdir(parents=True, exist_ok=True)

            if move_mode:
                shutil.move(str(media.path), str(dest))
            else:
                shutil.copy2(str(media.path), str(dest))
        except OSError as e:
            # dest was free before this call, so anything there now is ours
            self._discard_partial(dest)
            self.resolver.release(dest)
            raise FileOperationError(f"Could not {'move' if move_mode else 'copy'} {media.path} to {dest}: {e}") from e

        return PlacementResult.PLACED

    def _discard_partial(self, dest: Path):
        try:
            dest.unlink(missing_ok=True)
        except OSError as e:
            logging.error(f"Could not remove partial file {dest}: {e}")
