# takeoutfix/match.py

"""
Sidecar Matcher: give every content file its sidecar under the canonical name.

For each content file the fallback chain below is tried in order and the
first hit wins:

    1. canonical sidecar already present            ALREADY_CORRECT
    2. `<base>.*.supplemental-metadata.json`
         exactly one candidate -> renamed           UNIQUE_CANDIDATE_FOUND
         several candidates    -> left for a human  MULTIPLE_CANDIDATES_FOUND
    3. `<base minus last char>.json`                LEGACY_TRUNCATED_MATCH
    4. `<name>.supplemental-meta.json` and friends  ABBREVIATED_SUFFIX_MATCH
    5. nothing                                      NO_MATCH_FOUND

Only the content file's own directory is searched. Each directory is listed
once per run and the listing is updated after every rename, so later
content files in the same directory see earlier renames.
"""
from __future__ import annotations
import logging
from collections import Counter
from pathlib import Path
from typing import Collection, Dict, List, Optional

from .model import FileEntry, MatchResult
from .names import (
    CANONICAL_SUFFIX,
    abbreviated_sidecar_names,
    canonical_sidecar_name,
    legacy_truncated_name,
    matches_sidecar_pattern,
    split_name,
)
from .rename import PLANNED, RENAMED, Renamer
from .walk import iter_content_files, list_dir

log = logging.getLogger(__name__)

PHASE = "match"


def find_candidates(content_name: str, names: List[str]) -> List[str]:
    """Return the pattern candidates for `content_name` among `names`.

    A candidate that is the canonical sidecar of another file still present
    in the directory belongs to that file and is not offered.
    """
    base, _ext = split_name(content_name)
    canonical = canonical_sidecar_name(content_name)
    present = {n.lower() for n in names if n.lower() != content_name.lower()}

    found = []
    for name in names:
        if name == canonical or not matches_sidecar_pattern(base, name):
            continue
        owner = name[: -len(CANONICAL_SUFFIX)]
        if owner.lower() in present:
            continue
        found.append(name)
    return found


def _move(renamer: Renamer, directory: Path, names: List[str], old: str, new: str, reason: str) -> None:
    """Rename `old` to `new` and keep the cached listing in step."""
    action = renamer.move(directory / old, directory / new, PHASE, reason)
    if action in (RENAMED, PLANNED):
        names.remove(old)
        names.append(new)


def match_sidecar(content: FileEntry, renamer: Renamer, names: Optional[List[str]] = None) -> MatchResult:
    """Run the fallback chain for one content file.

    `names` is the listing of the content file's directory; it is read when
    not given and updated in place after each rename.
    """
    directory = content.directory
    if names is None:
        names = list_dir(directory, renamer)
    canonical = canonical_sidecar_name(content.name)

    if canonical in names:
        log.debug("Sidecar already canonical: %s", directory / canonical)
        return MatchResult.ALREADY_CORRECT

    candidates = find_candidates(content.name, names)
    if len(candidates) == 1:
        _move(renamer, directory, names, candidates[0], canonical, "pattern match")
        return MatchResult.UNIQUE_CANDIDATE_FOUND
    if len(candidates) > 1:
        log.warning(
            "Multiple sidecar candidates for %s, not renaming any: %s",
            content.path, ", ".join(candidates),
        )
        return MatchResult.MULTIPLE_CANDIDATES_FOUND

    legacy = legacy_truncated_name(content.name)
    if legacy and legacy in names:
        _move(renamer, directory, names, legacy, canonical, "legacy truncated name")
        return MatchResult.LEGACY_TRUNCATED_MATCH

    for name in abbreviated_sidecar_names(content.name):
        if name in names:
            _move(renamer, directory, names, name, canonical, "abbreviated suffix")
            return MatchResult.ABBREVIATED_SUFFIX_MATCH

    log.debug("No sidecar found for %s", content.path)
    return MatchResult.NO_MATCH_FOUND


def match_sidecars(root: Path, renamer: Renamer, skip: Collection[Path] = ()) -> Counter:
    """Run the matcher over every content file. Returns a Counter of MatchResult.

    Each directory is listed once; the matcher keeps that listing current
    as it renames.
    """
    log.info("Matching sidecars under %s", root)
    results: Counter = Counter()
    listings: Dict[Path, List[str]] = {}
    for entry in iter_content_files(root, skip, renamer):
        names = listings.get(entry.directory)
        if names is None:
            names = listings[entry.directory] = list_dir(entry.directory, renamer)
        results[match_sidecar(entry, renamer, names)] += 1
    return results
