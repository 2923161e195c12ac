"""
Custom exception hierarchy for the photo sync tool.

Per-file errors (bad timestamps, failed copies, unreadable destination
files) are caught by the mover and reported; errors on source files during
the scan abort the run.
"""


class PhotoSyncError(Exception):
    """Base exception for all photo sync errors."""
    pass


class FileHashError(PhotoSyncError):
    """Raised when a file cannot be read for digesting."""

    def __init__(self, path, reason=None):
        self.path = path
        self.reason = reason
        message = f"Cannot open file: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class MetadataExtractionError(PhotoSyncError):
    """Raised when metadata cannot be extracted from a file."""
    pass


class MalformedTimestampError(PhotoSyncError):
    """Raised when a capture timestamp is not 'YYYY:MM:DD HH:MM:SS' shaped."""

    def __init__(self, timestamp):
        self.timestamp = timestamp
        super().__init__(f"Malformed timestamp: {timestamp!r}")


class FileOperationError(PhotoSyncError):
    """Raised when directory creation or file copy/move operations fail."""
    pass


class CollisionLimitError(PhotoSyncError):
    """Raised when too many differently-named variants already exist."""
    pass
