# takeoutfix/extfix.py

from __future__ import annotations
import logging
from pathlib import Path
from typing import Collection

from .filetype import Detector, FileTypeError, extension_for
from .model import FileEntry
from .names import split_name
from .rename import Renamer
from .walk import iter_content_files

log = logging.getLogger(__name__)

PHASE = "extension"

# Assumed correct; not worth a detector call.
TRUSTED_EXTS = {"jpg", "jpeg"}


def fix_extension(entry: FileEntry, detect: Detector, renamer: Renamer) -> str:
    """Give one content file the extension its encoded format calls for.

    Returns the Renamer action, or `none` when nothing needed doing (or the
    file could not be classified).
    """
    base, cur_ext = split_name(entry.name)
    try:
        mime = detect(entry.path)
    except (FileTypeError, OSError) as exc:
        log.warning("Could not detect format of %s: %s", entry.path, exc)
        return "none"

    new_ext = extension_for(mime)
    if new_ext is None:
        log.warning("Unknown format %s for %s, leaving extension as is", mime, entry.path)
        return "none"
    if new_ext == cur_ext.lower():
        return "none"

    new_path = entry.directory / f"{base}.{new_ext}"
    return renamer.move(entry.path, new_path, PHASE, f"detected {mime}")


def fix_extensions(root: Path, detect: Detector, renamer: Renamer, skip: Collection[Path] = ()) -> int:
    """Correct extensions across the tree. Returns the number of files checked."""
    log.info("Checking content file extensions under %s", root)
    checked = 0
    for entry in iter_content_files(root, skip, renamer):
        _base, ext = split_name(entry.name)
        if ext.lower() in TRUSTED_EXTS:
            continue
        checked += 1
        fix_extension(entry, detect, renamer)
    return checked
