# takeoutfix/names.py

"""
Pure filename parsing for sidecar reconciliation.

Nothing here touches the file system: every function takes a bare file name
and returns a name (or ``None`` when the pattern does not apply), so each
malformation can be tested on its own.
"""
from __future__ import annotations
import re
from typing import List, Optional, Tuple

CANONICAL_MARKER = "supplemental-metadata"
CANONICAL_SUFFIX = f".{CANONICAL_MARKER}.json"

# Shortest truncation still recognisable as the marker.
_MIN_MARKER = "supplem"

# Every truncation of the marker, longest first.
ABBREVIATED_MARKERS: Tuple[str, ...] = tuple(
    CANONICAL_MARKER[:n] for n in range(len(CANONICAL_MARKER) - 1, len(_MIN_MARKER) - 1, -1)
)

# Markers seen in front of a misplaced counter, in priority order.
COUNTER_MARKERS: Tuple[str, ...] = (CANONICAL_MARKER, "supplemental-meta", "supplem")

# Abbreviated sidecar suffixes the matcher tries, in priority order.
ABBREVIATED_SUFFIXES: Tuple[str, ...] = (
    ".supplemental-meta.json",
    ".supplemental-metadat.json",
    ".supplem.json",
)

_COUNTER_SUFFIX = re.compile(r"\((\d+)\)\.json$")


def split_name(name: str) -> Tuple[str, str]:
    """Split a file name into (base, extension) at the last dot.

    A name without a dot, or whose only dot is the leading one, has no
    extension.
    """
    base, dot, ext = name.rpartition(".")
    if not dot or not base:
        return name, ""
    return base, ext


def canonical_sidecar_name(content_name: str) -> str:
    """`photo.jpg` -> `photo.jpg.supplemental-metadata.json`."""
    return content_name + CANONICAL_SUFFIX


def repair_abbreviated_marker(name: str) -> Optional[str]:
    """Expand a truncated metadata marker to the full one.

    `trip.jpg.supplemental-meta.json` -> `trip.jpg.supplemental-metadata.json`
    """
    if not name.endswith(".json"):
        return None
    stem = name[: -len(".json")]
    for marker in ABBREVIATED_MARKERS:
        tail = "." + marker
        if stem.endswith(tail) and len(stem) > len(tail):
            return stem[: -len(marker)] + CANONICAL_MARKER + ".json"
    return None


def has_counter_suffix(name: str) -> bool:
    return _COUNTER_SUFFIX.search(name) is not None


def repair_misplaced_counter(name: str) -> Optional[str]:
    """Move a disambiguation counter from after the marker to after the base.

    `img0002.jpg.supplemental-metadata(3).json`
        -> `img0002(3).jpg.supplemental-metadata.json`

    Returns None when the name has no trailing counter, when no known marker
    precedes it, or when the recovered content name has no extension.
    """
    m = _COUNTER_SUFFIX.search(name)
    if not m:
        return None
    counter = m.group(1)
    head = name[: m.start()]

    original = None
    for marker in COUNTER_MARKERS:
        tail = "." + marker
        if head.endswith(tail):
            original = head[: -len(tail)]
            break
    if not original:
        return None

    base, ext = split_name(original)
    if not ext:
        return None
    return f"{base}({counter}).{ext}{CANONICAL_SUFFIX}"


def matches_sidecar_pattern(content_base: str, candidate: str) -> bool:
    """Case-insensitive test of `candidate` against `<base>.*.supplemental-metadata.json`."""
    prefix = (content_base + ".").lower()
    suffix = CANONICAL_SUFFIX.lower()
    cand = candidate.lower()
    return (
        len(cand) >= len(prefix) + len(suffix)
        and cand.startswith(prefix)
        and cand.endswith(suffix)
    )


def legacy_truncated_name(content_name: str) -> Optional[str]:
    """`longname.jpg` -> `longnam.json`, the old truncated sidecar form."""
    base, _ext = split_name(content_name)
    if len(base) < 2:
        return None
    return base[:-1] + ".json"


def abbreviated_sidecar_names(content_name: str) -> List[str]:
    return [content_name + suffix for suffix in ABBREVIATED_SUFFIXES]
