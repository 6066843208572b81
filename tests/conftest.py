import logging
from pathlib import Path

import pytest

JPEG = b"\xFF\xD8\xFF\xE0\x00\x10JFIF\x00" + b"\x00" * 32
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
QUICKTIME = b"\x00\x00\x00\x14ftypqt  \x00\x00\x02\x00qt  " + b"\x00" * 32
MP4 = b"\x00\x00\x00\x18ftypisom\x00\x00\x02\x00isomiso2" + b"\x00" * 32
HEIC = b"\x00\x00\x00\x18ftypheic\x00\x00\x00\x00mif1heic" + b"\x00" * 32


def make_files(root: Path, files: dict) -> None:
    """Create `relative name -> bytes` under root."""
    for rel, data in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)


def snapshot(root: Path) -> list:
    return sorted(str(p.relative_to(root)) for p in root.rglob("*") if p.is_file())


class FakeDetector:
    """Detector double: content type by file name, records every call."""

    def __init__(self, mimes: dict, default: str = "application/octet-stream"):
        self.mimes = mimes
        self.default = default
        self.calls = []

    def __call__(self, path: Path) -> str:
        self.calls.append(path.name)
        result = self.mimes.get(path.name, self.default)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("takeoutfix")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
