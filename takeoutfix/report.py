# takeoutfix/report.py

from __future__ import annotations
import csv
from pathlib import Path
from typing import Iterable

from .model import RenameRecord


def write_csv(out_path: Path, rows: Iterable[RenameRecord]) -> None:
    """Write rename decisions to a CSV file.

    Args:
        out_path (Path): Destination CSV file path.
        rows (Iterable[RenameRecord]): Renames done, planned, skipped or failed.

    Returns:
        None
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["phase", "source", "destination", "action", "reason", "error"])
        for r in rows:
            writer.writerow([r.phase, r.source, r.destination, r.action, r.reason, r.error])
