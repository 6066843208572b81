# takeoutfix/walk.py

from __future__ import annotations
import os
from pathlib import Path
from typing import TYPE_CHECKING, Collection, Iterator, List, Optional

from .model import FileEntry

if TYPE_CHECKING:
    from .rename import Renamer


def iter_files(root: Path, skip: Collection[Path] = (), renamer: Optional[Renamer] = None) -> Iterator[FileEntry]:
    """Iterate over all files under a directory, recursively.

    The tree is listed up front on every call, so renames made while the
    caller consumes the iterator are never picked up twice and a new call
    always sees the current on-disk state.

    Args:
        root (Path): Directory to scan.
        skip (Collection[Path]): Absolute paths to leave out (e.g. our own log).
        renamer (Renamer | None): In dry-run mode, its planned moves are
            applied to the listing.

    Yields:
        FileEntry: Each file found, in sorted path order.
    """
    root = root.absolute()
    skipped = {p.absolute() for p in skip}
    paths = [p for p in root.rglob("*") if p.is_file()]
    if renamer is not None:
        paths = renamer.project(paths, root, recursive=True)
    for p in sorted(paths):
        entry = FileEntry.from_path(p)
        if entry.path in skipped:
            continue
        yield entry


def iter_sidecars(root: Path, skip: Collection[Path] = (), renamer: Optional[Renamer] = None) -> Iterator[FileEntry]:
    for entry in iter_files(root, skip, renamer):
        if entry.is_sidecar:
            yield entry


def iter_content_files(root: Path, skip: Collection[Path] = (), renamer: Optional[Renamer] = None) -> Iterator[FileEntry]:
    for entry in iter_files(root, skip, renamer):
        if entry.is_content:
            yield entry


def list_dir(directory: Path, renamer: Optional[Renamer] = None) -> List[str]:
    """Return the names of the files directly inside `directory` (depth 1)."""
    with os.scandir(directory) as it:
        paths = [directory / e.name for e in it if e.is_file()]
    if renamer is not None:
        paths = renamer.project(paths, directory, recursive=False)
    return sorted(p.name for p in paths)
