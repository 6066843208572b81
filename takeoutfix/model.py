# takeoutfix/model.py

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


SIDECAR_EXT = "json"


@dataclass(frozen=True)
class FileEntry:
    """A file found in the export tree."""
    path: Path        # absolute path
    directory: Path
    name: str

    @classmethod
    def from_path(cls, path: Path) -> "FileEntry":
        path = path.absolute()
        return cls(path=path, directory=path.parent, name=path.name)

    @property
    def is_sidecar(self) -> bool:
        return self.name.lower().endswith("." + SIDECAR_EXT)

    @property
    def is_content(self) -> bool:
        return not self.is_sidecar


class MatchResult(Enum):
    """Outcome of the sidecar search for one content file."""
    ALREADY_CORRECT = "already-correct"
    UNIQUE_CANDIDATE_FOUND = "unique-candidate"
    MULTIPLE_CANDIDATES_FOUND = "multiple-candidates"
    LEGACY_TRUNCATED_MATCH = "legacy-truncated"
    ABBREVIATED_SUFFIX_MATCH = "abbreviated-suffix"
    NO_MATCH_FOUND = "no-match"


@dataclass
class RenameRecord:
    """Represents a row in the rename report CSV."""
    phase: str
    source: str
    destination: str
    action: str       # one of: rename | dry-run | skip | error
    reason: str
    error: str = ""
