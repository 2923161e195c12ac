import subprocess

import pytest
from PIL import Image

import photo_sync.metadata.extract as extract_module
from photo_sync.metadata.extract import MetadataExtractor, normalize_timestamp


# Mock MediaInfo class structure
class MockTrack:
    def __init__(self, track_type="General", **kwargs):
        self.track_type = track_type
        for k, v in kwargs.items():
            setattr(self, k, v)


class MockMediaInfo:
    tracks_for_parse = []

    def __init__(self, tracks):
        self.tracks = tracks

    @classmethod
    def parse(cls, path):
        return cls(cls.tracks_for_parse)


class BrokenMediaInfo:
    @classmethod
    def parse(cls, path):
        raise OSError("libmediainfo not found")


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2020:02:22 13:37:05", "2020:02:22 13:37:05"),
        ("UTC 2020-02-22 13:37:05", "2020:02:22 13:37:05"),
        ("2020-02-22 13:37:05 UTC", "2020:02:22 13:37:05"),
        ("2020-02-22T13:37:05.123+02:00", "2020:02:22 13:37:05"),
        ("", None),
        (None, None),
        ("not a date", None),
    ],
)
def test_normalize_timestamp(raw, expected):
    assert normalize_timestamp(raw) == expected


def test_image_timestamp_from_exif(monkeypatch, tmp_path):
    img = tmp_path / "IMG_0001.JPG"
    img.write_bytes(b"fake")
    monkeypatch.setattr(
        extract_module.exifread, "process_file",
        lambda f, details=False: {"EXIF DateTimeOriginal": "2020:02:22 13:37:05 "},
    )

    assert MetadataExtractor().resolve_timestamp(img) == "2020:02:22 13:37:05"


def test_image_timestamp_is_passed_through_verbatim(monkeypatch, tmp_path):
    img = tmp_path / "scan.png"
    img.write_bytes(b"fake")
    monkeypatch.setattr(
        extract_module.exifread, "process_file",
        lambda f, details=False: {"EXIF DateTimeOriginal": "2020:2:22 13:37:05"},
    )

    # Not re-padded; the namer decides what to do with it
    assert MetadataExtractor().resolve_timestamp(img) == "2020:2:22 13:37:05"


def test_image_without_exif_yields_empty(tmp_path):
    img = tmp_path / "plain.jpg"
    Image.new("RGB", (8, 8), color="red").save(img, "JPEG")

    assert MetadataExtractor().resolve_timestamp(img) == ""


def test_image_read_failure_yields_empty(monkeypatch, tmp_path, caplog):
    img = tmp_path / "broken.jpg"
    img.write_bytes(b"fake")

    def boom(f, details=False):
        raise ValueError("corrupt")

    monkeypatch.setattr(extract_module.exifread, "process_file", boom)

    assert MetadataExtractor().resolve_timestamp(img) == ""
    assert "broken.jpg" in caplog.text


def test_video_timestamp_from_mediainfo(monkeypatch, tmp_path):
    vid = tmp_path / "clip.MP4"
    vid.touch()
    MockMediaInfo.tracks_for_parse = [
        MockTrack(track_type="Video", encoded_date="UTC 1999-01-01 00:00:00"),
        MockTrack(encoded_date="UTC 2021-06-30 08:09:10", tagged_date="UTC 2022-01-01 00:00:00"),
    ]
    monkeypatch.setattr(extract_module, "MediaInfo", MockMediaInfo)

    assert MetadataExtractor().resolve_timestamp(vid) == "2021:06:30 08:09:10"


def test_video_falls_back_to_exiftool(monkeypatch, tmp_path):
    vid = tmp_path / "clip.mp4"
    vid.touch()
    monkeypatch.setattr(extract_module, "MediaInfo", BrokenMediaInfo)

    seen = {}

    def fake_check_output(cmd, **kwargs):
        seen["cmd"] = cmd
        return '[{"SourceFile": "clip.mp4", "MediaCreateDate": "2019:12:31 23:59:58"}]'

    monkeypatch.setattr(extract_module.subprocess, "check_output", fake_check_output)

    assert MetadataExtractor().resolve_timestamp(vid) == "2019:12:31 23:59:58"
    assert seen["cmd"][0] == "exiftool"
    assert str(vid) in seen["cmd"]


def test_video_without_any_backend_yields_empty(monkeypatch, tmp_path):
    vid = tmp_path / "clip.mp4"
    vid.touch()
    MockMediaInfo.tracks_for_parse = [MockTrack()]
    monkeypatch.setattr(extract_module, "MediaInfo", MockMediaInfo)

    def missing_tool(cmd, **kwargs):
        raise FileNotFoundError("exiftool")

    monkeypatch.setattr(extract_module.subprocess, "check_output", missing_tool)

    assert MetadataExtractor().resolve_timestamp(vid) == ""


def test_exiftool_error_status_yields_empty(monkeypatch, tmp_path):
    vid = tmp_path / "clip.mp4"
    vid.touch()
    monkeypatch.setattr(extract_module, "MediaInfo", BrokenMediaInfo)

    def failing(cmd, **kwargs):
        raise subprocess.CalledProcessError(1, cmd)

    monkeypatch.setattr(extract_module.subprocess, "check_output", failing)

    assert MetadataExtractor().get_video_timestamp(vid) == ""
