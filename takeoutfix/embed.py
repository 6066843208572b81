# takeoutfix/embed.py

"""
Write sidecar metadata into content files with ExifTool.

This runs after reconciliation, when every sidecar that can be found sits
at `<content-file>.supplemental-metadata.json` next to its content file.
"""
from __future__ import annotations
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

from .names import CANONICAL_SUFFIX

log = logging.getLogger(__name__)

# Receives a full argv, returns the exit status.
Runner = Callable[[List[str]], int]

# target tag <- sidecar JSON field (ExifTool flattens nested JSON keys).
TAG_MAP = [
    ("DateTimeOriginal", "PhotoTakenTimeTimestamp"),
    ("CreateDate", "PhotoTakenTimeTimestamp"),
    ("ModifyDate", "PhotoTakenTimeTimestamp"),
    ("GPSAltitude", "GeoDataAltitude"),
    ("GPSLatitude", "GeoDataLatitude"),
    ("GPSLatitudeRef", "GeoDataLatitude"),
    ("GPSLongitude", "GeoDataLongitude"),
    ("GPSLongitudeRef", "GeoDataLongitude"),
    ("Keywords", "Tags"),
    ("Subject", "Tags"),
    ("ImageDescription", "Description"),
    ("Caption-Abstract", "Description"),
]

DEFAULT_EXCLUDE = "edited"


class EmbedError(Exception):
    """Raised when ExifTool is unavailable."""


def _run(argv: List[str]) -> int:
    return subprocess.run(argv, check=False).returncode


class ExifToolEmbedder:
    def __init__(self, executable: Optional[str] = None, runner: Optional[Runner] = None) -> None:
        exe = executable or shutil.which("exiftool")
        if runner is None and not exe:
            raise EmbedError("exiftool not found on PATH")
        self.executable = exe or "exiftool"
        self.runner = runner or _run

    def build_args(self, source: str, targets: List[str], exclude: str = "", recursive: bool = False) -> List[str]:
        """Assemble the ExifTool command line.

        `source` is the sidecar to copy tags from; for tree runs it is the
        ExifTool filename template `%d%F<suffix>`, resolved per file.
        """
        argv = [self.executable]
        if recursive:
            argv.append("-r")
        # Timestamps in the sidecar are epoch seconds.
        argv += ["-d", "%s", "-tagsfromfile", source]
        argv += [f"-{tag}<{field}" for tag, field in TAG_MAP]
        argv += ["-ext", "*", "--ext", "json", "-overwrite_original"]
        if exclude:
            argv += ["-if", f"not $FileName =~ /\\Q{exclude}\\E/i"]
        argv += targets
        return argv

    def embed_file(self, content: Path, sidecar: Path) -> int:
        log.info("Embedding %s into %s", sidecar.name, content)
        return self.runner(self.build_args(str(sidecar), [str(content)]))

    def embed_tree(self, root: Path, exclude: str = DEFAULT_EXCLUDE, recursive: bool = True) -> int:
        """Embed metadata for every content file under `root`.

        Returns ExifTool's exit status; 1 is also what it reports when some
        files simply had no sidecar.
        """
        log.info("Embedding metadata under %s (excluding '%s')", root, exclude)
        argv = self.build_args(f"%d%F{CANONICAL_SUFFIX}", [str(root)], exclude, recursive)
        status = self.runner(argv)
        if status != 0:
            log.warning("exiftool exited with status %d", status)
        return status
