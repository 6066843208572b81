# takeoutfix/pipeline.py

from __future__ import annotations
import logging
from collections import Counter
from pathlib import Path
from typing import Collection, Optional

from .embed import DEFAULT_EXCLUDE, ExifToolEmbedder
from .extfix import fix_extensions
from .filetype import Detector
from .match import match_sidecars
from .normalize import normalize_sidecars
from .rename import Renamer

log = logging.getLogger(__name__)


def reconcile(
    root: Path,
    renamer: Renamer,
    detect: Optional[Detector] = None,
    embedder: Optional[ExifToolEmbedder] = None,
    exclude: str = DEFAULT_EXCLUDE,
    skip: Collection[Path] = (),
) -> Counter:
    """Run every phase, in order, over the tree at `root`.

    Each phase rescans the tree, so it works on whatever the previous one
    left on disk. Passing `detect=None` turns the extension phase off;
    passing an embedder adds the metadata step at the end.

    Returns:
        Counter: MatchResult -> number of content files.
    """
    normalize_sidecars(root, renamer, skip)

    if detect is not None:
        fix_extensions(root, detect, renamer, skip)
    else:
        log.info("Extension correction disabled")

    results = match_sidecars(root, renamer, skip)

    if embedder is not None:
        if renamer.dry_run:
            log.info("Dry run: metadata embedding skipped")
        else:
            embedder.embed_tree(root, exclude)

    return results
