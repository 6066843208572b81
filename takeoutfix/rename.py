# takeoutfix/rename.py

from __future__ import annotations
import logging
from collections import Counter
from pathlib import Path
from typing import Iterable, List, Set

from .model import RenameRecord

log = logging.getLogger(__name__)

RENAMED = "rename"
PLANNED = "dry-run"
SKIPPED = "skip"
FAILED = "error"
UNCHANGED = "none"


def _same_file(a: Path, b: Path) -> bool:
    try:
        return a.samefile(b)
    except OSError:
        return False


class Renamer:
    """Single place where the tree gets mutated.

    Every phase routes its moves through one instance, which never
    overwrites an existing file and, in dry-run mode, only reports. A dry
    run remembers its planned moves so later checks and listings see the
    tree as a real run would have left it.
    """

    def __init__(self, dry_run: bool = False) -> None:
        self.dry_run = dry_run
        self.records: List[RenameRecord] = []
        self._moved_away: Set[Path] = set()
        self._moved_in: Set[Path] = set()

    def exists(self, path: Path) -> bool:
        """Whether `path` exists, counting the moves planned so far."""
        if path in self._moved_in:
            return True
        if path in self._moved_away:
            return False
        return path.exists()

    def project(self, paths: Iterable[Path], under: Path, recursive: bool = True) -> List[Path]:
        """Apply the planned moves to a listing of `under`."""
        result = {p for p in paths if p not in self._moved_away}
        for p in self._moved_in:
            if p.parent == under or (recursive and under in p.parents):
                result.add(p)
        return sorted(result)

    def move(self, src: Path, dst: Path, phase: str, reason: str = "") -> str:
        """Rename `src` to `dst` unless that would clobber another file.

        Args:
            src (Path): Existing file.
            dst (Path): Target path, normally in the same directory.
            phase (str): Name of the calling phase, for the report.
            reason (str): Why the rename is wanted.

        Returns:
            str: One of `rename`, `dry-run`, `skip`, `error` or `none`
            (source and destination are the same path).
        """
        if src == dst:
            log.debug("Already named correctly: %s", src)
            return UNCHANGED

        # A case-only rename on a case-insensitive file system sees dst as existing.
        if self.exists(dst) and not _same_file(src, dst):
            log.warning("Destination exists, not renaming %s -> %s", src, dst.name)
            self._record(phase, src, dst, SKIPPED, reason, "destination exists")
            return SKIPPED

        if self.dry_run:
            if not self.exists(src):
                log.error("Rename failed %s -> %s: source already moved", src, dst.name)
                self._record(phase, src, dst, FAILED, reason, "FileNotFoundError: source already moved")
                return FAILED
            log.info("Would rename %s -> %s", src, dst.name)
            self._record(phase, src, dst, PLANNED, reason)
            self._moved_in.discard(src)
            self._moved_away.add(src)
            self._moved_away.discard(dst)
            self._moved_in.add(dst)
            return PLANNED

        try:
            src.rename(dst)
        except OSError as exc:
            log.error("Rename failed %s -> %s: %s", src, dst.name, exc)
            self._record(phase, src, dst, FAILED, reason, f"{type(exc).__name__}: {exc}")
            return FAILED

        log.info("Renamed %s -> %s", src, dst.name)
        self._record(phase, src, dst, RENAMED, reason)
        return RENAMED

    def _record(self, phase: str, src: Path, dst: Path, action: str, reason: str, error: str = "") -> None:
        self.records.append(RenameRecord(
            phase=phase,
            source=str(src),
            destination=str(dst),
            action=action,
            reason=reason,
            error=error,
        ))

    def counts(self) -> Counter:
        return Counter(r.action for r in self.records)

    @property
    def errors(self) -> int:
        return sum(1 for r in self.records if r.action == FAILED)
