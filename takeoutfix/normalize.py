# takeoutfix/normalize.py

"""
Sidecar Normalizer: repair sidecar names mangled by the exporter.

Two passes, each over a fresh scan of the tree:
    1. abbreviated marker  `x.jpg.supplemental-meta.json`
    2. misplaced counter   `x.jpg.supplemental-metadata(2).json`
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Collection

from .names import has_counter_suffix, repair_abbreviated_marker, repair_misplaced_counter
from .rename import Renamer
from .walk import iter_sidecars

log = logging.getLogger(__name__)

PHASE = "normalize"


def repair_abbreviations(root: Path, renamer: Renamer, skip: Collection[Path] = ()) -> int:
    """Expand truncated metadata markers. Returns the number of moves attempted."""
    moves = 0
    for entry in iter_sidecars(root, skip, renamer):
        if has_counter_suffix(entry.name):
            continue
        new_name = repair_abbreviated_marker(entry.name)
        if new_name is None:
            continue
        renamer.move(entry.path, entry.directory / new_name, PHASE, "abbreviated marker")
        moves += 1
    return moves


def repair_counters(root: Path, renamer: Renamer, skip: Collection[Path] = ()) -> int:
    """Move counters placed after the marker. Returns the number of moves attempted."""
    moves = 0
    for entry in iter_sidecars(root, skip, renamer):
        if not has_counter_suffix(entry.name):
            continue
        new_name = repair_misplaced_counter(entry.name)
        if new_name is None:
            log.warning("Unhandled counter pattern, leaving as is: %s", entry.path)
            continue
        renamer.move(entry.path, entry.directory / new_name, PHASE, "misplaced counter")
        moves += 1
    return moves


def normalize_sidecars(root: Path, renamer: Renamer, skip: Collection[Path] = ()) -> int:
    log.info("Normalizing sidecar names under %s", root)
    return repair_abbreviations(root, renamer, skip) + repair_counters(root, renamer, skip)
