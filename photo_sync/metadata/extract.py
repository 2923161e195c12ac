import logging
import re
import subprocess
import json
from pathlib import Path
from typing import Optional

import exifread
from pymediainfo import MediaInfo

from .. import config
from ..exceptions import MetadataExtractionError

# Matches EXIF ("2020:02:22 13:37:05"), ISO ("2020-02-22T13:37:05") and
# MediaInfo ("UTC 2020-02-22 13:37:05") renderings.
_DATE_RE = re.compile(
    r'(\d{4})[:-](\d{2})[:-](\d{2})[ T](\d{2}):(\d{2}):(\d{2})'
)


class MetadataExtractor:
    """
    Produces capture timestamps in 'YYYY:MM:DD HH:MM:SS' form.

    Strategies:
      - Images: 'exifread', DateTimeOriginal.
      - Video: 'pymediainfo' (fast wrapper) -> falls back to 'exiftool'
        (MediaCreateDate).

    An empty string means no usable timestamp was found.
    """

    def resolve_timestamp(self, path: Path) -> str:
        ftype = config.EXT_TO_TYPE.get(path.suffix.lower(), 'other')
        if ftype == 'video':
            return self.get_video_timestamp(path)
        return self.get_image_timestamp(path)

    def get_image_timestamp(self, path: Path) -> str:
        try:
            return self._extract_exifread(path)
        except MetadataExtractionError as e:
            logging.warning(f"ExifRead failed for {path}: {e}")
            return ""

    def get_video_timestamp(self, path: Path) -> str:
        # Strategy 1: Try MediaInfo (Fastest, usually sufficient)
        try:
            ts = self._extract_mediainfo(path)
            if ts:
                return ts
        except MetadataExtractionError as e:
            logging.debug(f"MediaInfo failed for {path}: {e}")

        # Strategy 2: Try ExifTool (requires system install)
        try:
            return self._extract_exiftool(path)
        except MetadataExtractionError as e:
            # Only log at debug level to avoid spamming console if tool is missing
            logging.debug(f"ExifTool failed for {path}: {e}")
        return ""

    # --- Internal Extraction Helpers ---

    def _extract_exifread(self, path: Path) -> str:
        try:
            with path.open('rb') as f:
                # details=False speeds up processing significantly
                tags = exifread.process_file(f, details=False)
        except Exception as e:
            raise MetadataExtractionError(str(e)) from e

        if config.IMAGE_DATE_TAG not in tags:
            return ""
        return str(tags[config.IMAGE_DATE_TAG]).strip()

    def _extract_mediainfo(self, path: Path) -> str:
        try:
            mi = MediaInfo.parse(str(path))
        except Exception as e:
            raise MetadataExtractionError(str(e)) from e

        for track in mi.tracks:
            if track.track_type != "General":
                continue
            for field in config.VIDEO_MEDIAINFO_FIELDS:
                ts = normalize_timestamp(getattr(track, field, None))
                if ts:
                    return ts
        return ""

    def _extract_exiftool(self, path: Path) -> str:
        """
        Wraps the 'exiftool' command line utility.
        Must be installed and on the system PATH.
        """
        cmd = ["exiftool", "-j", f"-{config.VIDEO_EXIFTOOL_FIELD}", str(path)]
        try:
            out = subprocess.check_output(cmd, stderr=subprocess.DEVNULL, text=True)
            data_list = json.loads(out)
        except (OSError, subprocess.CalledProcessError, ValueError) as e:
            raise MetadataExtractionError(str(e)) from e

        if not data_list:
            return ""
        return normalize_timestamp(data_list[0].get(config.VIDEO_EXIFTOOL_FIELD)) or ""


def normalize_timestamp(value) -> Optional[str]:
    """
    Rewrites a date string to 'YYYY:MM:DD HH:MM:SS'.

    Field values are kept as found; sub-seconds and zone suffixes are
    dropped without conversion.
    """
    if not value:
        return None
    m = _DATE_RE.search(str(value))
    if not m:
        return None
    y, mo, d, h, mi, s = m.groups()
    return f"{y}:{mo}:{d} {h}:{mi}:{s}"
