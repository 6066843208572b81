"""
Format detection and the content type -> extension map.
"""

import subprocess
from types import SimpleNamespace

import pytest

from conftest import HEIC, JPEG, MP4, PNG, QUICKTIME
from takeoutfix import filetype
from takeoutfix.filetype import (
    ExifToolDetector,
    FileTypeError,
    extension_for,
    get_detector,
    sniff_mime,
)


class TestExtensionMap:
    """Test the fixed extension map."""

    def test_known(self):
        assert extension_for("image/png") == "png"
        assert extension_for("video/quicktime") == "mov"
        assert extension_for("image/jpeg") == "jpg"

    def test_normalizes_input(self):
        assert extension_for(" Image/PNG ") == "png"

    def test_unknown_is_not_guessed(self):
        assert extension_for("application/octet-stream") is None
        assert extension_for("image/x-canon-cr2") is None


class TestSniffMime:
    """Test the built-in magic byte detector."""

    @pytest.mark.parametrize("data,mime", [
        (JPEG, "image/jpeg"),
        (PNG, "image/png"),
        (QUICKTIME, "video/quicktime"),
        (MP4, "video/mp4"),
        (HEIC, "image/heic"),
        (b"GIF89a" + b"\x00" * 20, "image/gif"),
        (b"RIFF\x00\x00\x00\x00WEBPVP8 " + b"\x00" * 20, "image/webp"),
        (b"RIFF\x00\x00\x00\x00AVI LIST" + b"\x00" * 20, "video/x-msvideo"),
        (b"\x00\x00\x00\x08wide\x00\x00\x00\x00mdat" + b"\x00" * 20, "video/quicktime"),
        (b"\x00\x00\x00\x18ftyp3gp4\x00\x00\x00\x00" + b"\x00" * 20, "video/3gpp"),
        (b"\x1A\x45\xDF\xA3\x01\x00\x00\x00webm" + b"\x00" * 20, "video/webm"),
        (b"just some text here", "application/octet-stream"),
    ])
    def test_detects(self, tmp_path, data, mime):
        p = tmp_path / "file.bin"
        p.write_bytes(data)
        assert sniff_mime(p) == mime

    def test_empty_file(self, tmp_path):
        p = tmp_path / "empty"
        p.write_bytes(b"")
        assert sniff_mime(p) == "application/octet-stream"

    @pytest.mark.parametrize("data", [
        b"%PDF-1.7\n" + b"\x00" * 20,
        b"ID3\x04\x00\x00\x00\x00\x00\x00" + b"\x00" * 20,
        b"RIFF\x00\x00\x00\x00WAVEfmt " + b"\x00" * 20,
    ])
    def test_non_media_is_unknown(self, tmp_path, data):
        p = tmp_path / "file.bin"
        p.write_bytes(data)

        mime = sniff_mime(p)

        assert mime == "application/octet-stream"
        assert extension_for(mime) is None


class TestDetectors:
    """Test detector selection and the exiftool backend."""

    def test_builtin(self):
        assert get_detector("builtin") is sniff_mime

    def test_unknown_name(self):
        with pytest.raises(FileTypeError):
            get_detector("nope")

    def test_exiftool_missing_is_fatal(self, monkeypatch):
        monkeypatch.setattr(filetype.shutil, "which", lambda name: None)
        with pytest.raises(FileTypeError):
            get_detector("exiftool")

    def test_exiftool_reads_mimetype(self, tmp_path, monkeypatch):
        calls = []

        def fake_run(argv, **kwargs):
            calls.append(argv)
            return SimpleNamespace(stdout="video/quicktime\n")

        monkeypatch.setattr(filetype.subprocess, "run", fake_run)
        detect = ExifToolDetector("exiftool")

        assert detect(tmp_path / "clip.mp4") == "video/quicktime"
        assert calls[0][:3] == ["exiftool", "-s3", "-MIMEType"]

    def test_exiftool_failure(self, tmp_path, monkeypatch):
        def fake_run(argv, **kwargs):
            raise subprocess.CalledProcessError(1, argv)

        monkeypatch.setattr(filetype.subprocess, "run", fake_run)

        with pytest.raises(FileTypeError):
            ExifToolDetector("exiftool")(tmp_path / "clip.mp4")
