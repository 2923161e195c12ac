import logging

import pytest

from photo_sync.metadata.extract import MetadataExtractor


class StubTimestamps:
    """File name -> timestamp table standing in for real metadata."""

    def __init__(self):
        self.table = {}
        self.calls = []

    def __setitem__(self, name, timestamp):
        self.table[name] = timestamp

    def resolve(self, path):
        self.calls.append(path)
        return self.table.get(path.name, "")


@pytest.fixture
def timestamps(monkeypatch):
    """
    Stubs metadata extraction; files missing from the table get an empty
    timestamp.
    """
    stub = StubTimestamps()
    monkeypatch.setattr(MetadataExtractor, "resolve_timestamp", lambda self, p: stub.resolve(p))
    return stub


@pytest.fixture
def restore_logging():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    try:
        yield
    finally:
        for h in root.handlers[:]:
            if h not in handlers:
                root.removeHandler(h)
                h.close()
        for h in handlers:
            if h not in root.handlers:
                root.addHandler(h)
        root.setLevel(level)
