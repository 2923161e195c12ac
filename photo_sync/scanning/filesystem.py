import os
import logging
from pathlib import Path
from typing import Iterator, List, Set, Optional

from .. import config


class DiskScanner:
    def iter_media(self, root: Path, skip_dirs: Optional[Set[Path]] = None) -> Iterator[Path]:
        """
        Yields every image/video file under root, in discovery order.

        Discovery order is what decides which copy of duplicated content is
        kept, so it must not change between runs: each directory's files
        come first (sorted case-insensitively), then its subdirectories in
        the same order. Symlinks are not followed.

        skip_dirs are pruned before being entered; the app passes the
        destination here when the library lives inside the source tree.
        """
        skip_dirs = skip_dirs or set()
        pending = [root]
        while pending:
            current = pending.pop()
            files, subdirs = self._list_dir(current)

            for path in files:
                if self.classify(path) != 'other':
                    yield path

            kept = [d for d in subdirs if not self._is_skipped(d, skip_dirs)]
            # Popped from the end, so push in reverse
            pending.extend(reversed(kept))

    def classify(self, path: Path) -> str:
        return config.EXT_TO_TYPE.get(path.suffix.lower(), 'other')

    def _is_skipped(self, path: Path, skip_dirs: Set[Path]) -> bool:
        if any(sd == path or sd in path.parents for sd in skip_dirs):
            logging.debug(f"Not scanning {path}")
            return True
        return False

    def _list_dir(self, directory: Path):
        """Returns (files, subdirs), each sorted by lowercased name."""
        files: List[Path] = []
        subdirs: List[Path] = []
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name.lower())
        except OSError as e:
            logging.warning(f"Cannot read directory {directory}: {e}")
            return files, subdirs

        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                subdirs.append(Path(entry.path))
            elif entry.is_file(follow_symlinks=False):
                files.append(Path(entry.path))
        return files, subdirs
