import logging
from pathlib import Path
from typing import Optional

from .models import RunSummary
from .scanning.filesystem import DiskScanner
from .scanning.dedup import SourceDeduplicator
from .metadata.extract import MetadataExtractor
from .organization.rules import CollisionResolver, DestinationNamer
from .organization.mover import FileMover


class PhotoSyncApp:
    def __init__(self, metadata: Optional[MetadataExtractor] = None):
        self.scanner = DiskScanner()
        self.metadata = metadata or MetadataExtractor()

    def sync(self,
             src_root: Path,
             dest_root: Path,
             move: bool = False,
             dry_run: bool = False,
             max_workers: int = 1,
             show_progress: bool = False) -> RunSummary:
        """
        Runs the pipeline once.
        1. Scan (media files only)
        2. Hash & Deduplicate
        3. Resolve destinations & Copy/Move

        Unreadable source files abort the run (FileHashError); problems with
        individual placements are counted in the returned summary.
        """
        summary = RunSummary()

        # --- Step 1: Scanning ---
        # Never re-ingest the library when it lives inside the source tree
        skip_dirs = set()
        if src_root in dest_root.parents:
            skip_dirs.add(dest_root)

        logging.debug(f"Scanning {src_root}...")
        paths = list(self.scanner.iter_media(src_root, skip_dirs))
        summary.discovered = len(paths)
        logging.debug(f"Found {len(paths)} media files.")

        # --- Step 2: Deduplication ---
        dedup = SourceDeduplicator(max_workers=max_workers, show_progress=show_progress)
        result = dedup.deduplicate(paths)
        summary.duplicates = result.duplicate_count

        # --- Step 3: Placement ---
        # A fresh resolver per run; reservations don't outlive it
        mover = FileMover(self.metadata, DestinationNamer(), CollisionResolver())
        mover.execute(result.representatives, dest_root,
                      move_mode=move, dry_run=dry_run, summary=summary)

        logging.info(f"Found {summary.duplicates} duplicate file(s) in source")
        logging.info(
            f"{'[DRY RUN] ' if dry_run else ''}Done. {summary.placed} placed, "
            f"{summary.already_present} already present, "
            f"{summary.skipped} skipped, {summary.failed} failed."
        )
        return summary
