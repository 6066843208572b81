# takeoutfix/filetype.py

from __future__ import annotations
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Dict, Optional

log = logging.getLogger(__name__)

UNKNOWN_MIME = "application/octet-stream"

# A detector maps a content file to its content type, e.g. "image/png".
Detector = Callable[[Path], str]


class FileTypeError(Exception):
    """Raised when format detection cannot run."""


# --- content type -> extension ----------------------------------------------------

EXTENSION_MAP: Dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/tiff": "tif",
    "image/bmp": "bmp",
    "image/webp": "webp",
    "image/heic": "heic",
    "image/heif": "heif",
    "image/avif": "avif",
    "video/mp4": "mp4",
    "video/quicktime": "mov",
    "video/3gpp": "3gp",
    "video/x-m4v": "m4v",
    "video/x-msvideo": "avi",
    "video/x-matroska": "mkv",
    "video/webm": "webm",
    "video/mpeg": "mpg",
}


def extension_for(mime: str) -> Optional[str]:
    """Return the canonical extension for a content type, or None if unmapped."""
    return EXTENSION_MAP.get(mime.strip().lower())


# --- sniffers -------------------------------------------------------------------


def _read_head(p: Path, head_bytes: int = 64) -> bytes:
    """Read the first bytes of a file."""
    with p.open("rb") as f:
        return f.read(head_bytes)


def _is_jpeg(head: bytes) -> bool:
    return head.startswith(b"\xFF\xD8\xFF")


def _is_png(head: bytes) -> bool:
    return head.startswith(b"\x89PNG\r\n\x1a\n")


def _is_gif(head: bytes) -> bool:
    return head.startswith(b"GIF87a") or head.startswith(b"GIF89a")


def _is_tiff(head: bytes) -> bool:
    return head.startswith(b"II*\x00") or head.startswith(b"MM\x00*")


def _is_bmp(head: bytes) -> bool:
    return head.startswith(b"BM") and len(head) >= 26 and head[6:10] == b"\x00\x00\x00\x00"


def _is_riff(head: bytes, fourcc: bytes) -> bool:
    return head[:4] == b"RIFF" and len(head) >= 12 and head[8:12] == fourcc


def _is_matroska(head: bytes) -> bool:
    return head.startswith(b"\x1A\x45\xDF\xA3")


def _is_mpeg(head: bytes) -> bool:
    return head.startswith(b"\x00\x00\x01\xBA") or head.startswith(b"\x00\x00\x01\xB3")


_HEIC_BRANDS = {b"heic", b"heix", b"hevc", b"hevx", b"heim", b"heis"}
_HEIF_BRANDS = {b"mif1", b"msf1"}
_AVIF_BRANDS = {b"avif", b"avis"}
_M4V_BRANDS = {b"M4V ", b"M4VH", b"M4VP"}
# Top-level atoms that open a QuickTime file written without an ftyp box.
_QT_ATOMS = {b"moov", b"mdat", b"wide", b"free", b"skip", b"pnot"}


def _iso_media(head: bytes) -> Optional[str]:
    """Classify ISO base media files (MP4, MOV, HEIC, 3GP...) by brand."""
    if len(head) < 12:
        return None
    box = head[4:8]
    if box in _QT_ATOMS:
        return "video/quicktime"
    if box != b"ftyp":
        return None

    brand = head[8:12]
    if brand == b"qt  ":
        return "video/quicktime"
    if brand in _HEIC_BRANDS:
        return "image/heic"
    if brand in _HEIF_BRANDS:
        return "image/heif"
    if brand in _AVIF_BRANDS:
        return "image/avif"
    if brand in _M4V_BRANDS:
        return "video/x-m4v"
    if brand.startswith(b"3g"):
        return "video/3gpp"
    return "video/mp4"


def sniff_mime(path: Path) -> str:
    """Detect the content type of a file from its magic bytes.

    This is the built-in detector; unrecognised content comes back as
    `application/octet-stream`, which is not in EXTENSION_MAP.
    """
    head = _read_head(path)

    if _is_jpeg(head):
        return "image/jpeg"
    if _is_png(head):
        return "image/png"
    if _is_gif(head):
        return "image/gif"
    if _is_tiff(head):
        return "image/tiff"
    if _is_riff(head, b"WEBP"):
        return "image/webp"

    iso = _iso_media(head)
    if iso:
        return iso

    if _is_riff(head, b"AVI "):
        return "video/x-msvideo"
    if _is_matroska(head):
        return "video/webm" if b"webm" in head[:64] else "video/x-matroska"
    if _is_mpeg(head):
        return "video/mpeg"
    if _is_bmp(head):
        return "image/bmp"

    return UNKNOWN_MIME


# --- exiftool -------------------------------------------------------------------


class ExifToolDetector:
    """Ask ExifTool for the MIMEType tag, one file per call."""

    def __init__(self, executable: Optional[str] = None) -> None:
        exe = executable or shutil.which("exiftool")
        if not exe:
            raise FileTypeError("exiftool not found on PATH")
        self.executable = exe

    def __call__(self, path: Path) -> str:
        try:
            proc = subprocess.run(
                [self.executable, "-s3", "-MIMEType", str(path)],
                check=True,
                capture_output=True,
                text=True,
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            raise FileTypeError(f"exiftool failed on {path}: {exc}") from exc
        return proc.stdout.strip() or UNKNOWN_MIME


def get_detector(name: str) -> Detector:
    """Resolve a detector by name (`builtin` or `exiftool`).

    Raises:
        FileTypeError: the detector is unknown or its backend is unavailable.
    """
    if name == "builtin":
        return sniff_mime
    if name == "exiftool":
        return ExifToolDetector()
    raise FileTypeError(f"unknown detector: {name}")
