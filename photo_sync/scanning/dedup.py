import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from tqdm import tqdm

from ..models import MediaFile
from .hasher import FileHasher


@dataclass
class DedupResult:
    representatives: List[MediaFile] = field(default_factory=list)
    duplicate_count: int = 0


class SourceDeduplicator:
    """
    Keeps the first file seen for each fingerprint.

    Duplicates are dropped before any metadata is read for them. Hashing
    can be spread over worker threads; results are still consumed in
    discovery order, so the chosen representatives never depend on
    thread timing.
    """

    def __init__(self, hasher: Optional[FileHasher] = None, max_workers: int = 1,
                 show_progress: bool = False):
        self.hasher = hasher or FileHasher()
        self.max_workers = max_workers
        self.show_progress = show_progress

    def deduplicate(self, paths: Iterable[Path]) -> DedupResult:
        """
        Raises FileHashError on the first source file that can't be read.
        """
        result = DedupResult()
        seen = set()

        paths = list(paths)
        digests = self._digest_all(paths)
        for path, fingerprint in tqdm(digests, total=len(paths), desc="Hashing", unit="file",
                                      disable=not self.show_progress):
            if fingerprint in seen:
                result.duplicate_count += 1
                logging.debug(f"Duplicate: {path} ({fingerprint})")
                continue
            seen.add(fingerprint)
            result.representatives.append(MediaFile(path=path, fingerprint=fingerprint))

        return result

    def _digest_all(self, paths: List[Path]) -> Iterator[Tuple[Path, str]]:
        if self.max_workers <= 1:
            for path in paths:
                yield path, self.hasher.digest(path)
            return

        # executor.map yields in submission order
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            yield from zip(paths, executor.map(self.hasher.digest, paths))
