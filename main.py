# main.py

"""
Orchestrator: read params (JSON + CLI), normalize sidecar names, fix content
extensions, match sidecars, optionally embed metadata, write the CSV report.
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from takeoutfix.embed import DEFAULT_EXCLUDE, EmbedError, ExifToolEmbedder
from takeoutfix.filetype import Detector, FileTypeError, get_detector
from takeoutfix.logs import setup_logging
from takeoutfix.model import MatchResult
from takeoutfix.pipeline import reconcile
from takeoutfix.rename import Renamer
from takeoutfix.report import write_csv

log = logging.getLogger("takeoutfix.main")

DEFAULT_REPORT = "rename_report.csv"
DEFAULT_LOG = "takeoutfix.log"


def load_config(path: Path | None) -> Dict[str, Any]:
    """Load configuration from a JSON file.

    Args:
        path (Path | None): Path to the JSON configuration file.

    Returns:
        Dict[str, Any]: Configuration dictionary. Empty if no file is provided or read fails.
    """
    if not path:
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as exc:
        print(f"[WARN] Failed to read config {path}: {exc}", file=sys.stderr)
        return {}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments.

    Returns:
        argparse.Namespace: Parsed command-line arguments.
    """
    p = argparse.ArgumentParser(
        description="Reconcile photo-export sidecar names, fix content extensions and embed metadata."
    )
    p.add_argument("target", nargs="?", help="Export directory to process (recursive).")
    p.add_argument("--dry-run", action="store_true", help="Only report the renames that would happen.")
    p.add_argument("--no-ext-fix", action="store_true", help="Skip the extension correction phase.")
    p.add_argument("--embed", action="store_true", help="Embed sidecar metadata with exiftool afterwards.")
    p.add_argument("--exclude", type=str, help=f"Skip files containing this word when embedding (default: {DEFAULT_EXCLUDE}).")
    p.add_argument("--detector", choices=["builtin", "exiftool"], help="Format detector (default: builtin).")
    p.add_argument("--report", type=str, help=f"Path to CSV rename report (default: {DEFAULT_REPORT}).")
    p.add_argument("--log-file", type=str, help=f"Path to diagnostic log (default: {DEFAULT_LOG}).")
    p.add_argument("--config", type=str, help="Optional JSON config (flags override).")
    p.add_argument("-v", "--verbose", action="store_true", help="Also show informational per-file lines.")
    return p.parse_args(argv)


def _get_effective_config(args: argparse.Namespace) -> Tuple[Dict[str, Any], Path]:
    """Load CLI + JSON configuration, giving precedence to CLI flags."""
    script_dir = Path(__file__).parent
    default_config_path = script_dir / "params.json"
    config_path = Path(args.config) if args.config else default_config_path
    cfg = load_config(config_path if config_path.exists() else None)
    return cfg, config_path


def _resolve_target(args: argparse.Namespace, cfg: Dict[str, Any], config_path: Path) -> Path:
    """Resolve and validate the export directory."""
    raw = args.target or cfg.get("target", "")
    if not raw:
        log.error("target directory is required (or set 'target' in %s).", config_path.name)
        raise SystemExit(2)
    target = Path(raw)
    if not target.is_dir():
        log.error("Target directory not found: %s", target)
        raise SystemExit(2)
    return target.absolute()


def _print_summary(results: Counter, renamer: Renamer, report_path: Path) -> None:
    """Log summary information."""
    counts = renamer.counts()
    log.info(
        "Done. Renamed: %d | Planned: %d | Skipped: %d | Errors: %d",
        counts["rename"], counts["dry-run"], counts["skip"], counts["error"],
    )
    log.info("Sidecars: %s", " | ".join(f"{r.value}: {results[r]}" for r in MatchResult))
    log.info("Report: %s", report_path.resolve())
    if renamer.dry_run:
        log.info("Dry run: nothing was renamed. See the 'dry-run' rows in the report.")


def run(
    target: Path,
    report_path: Path,
    dry_run: bool = False,
    detect: Optional[Detector] = None,
    embedder: Optional[ExifToolEmbedder] = None,
    exclude: str = DEFAULT_EXCLUDE,
    skip: Sequence[Path] = (),
) -> int:
    """Reconcile `target`, write the report and return the exit code.

    Args:
        target (Path): Export directory, already validated.
        report_path (Path): Where the CSV rename report goes.
        dry_run (bool): Only plan the renames.
        detect (Detector | None): Format detector; None skips extension correction.
        embedder (ExifToolEmbedder | None): Metadata embedding step, if wanted.
        exclude (str): Word that keeps a file out of embedding.
        skip (Sequence[Path]): Our own output files, left out of every scan.

    Returns:
        int: 3 if any rename failed, else 0.
    """
    renamer = Renamer(dry_run=dry_run)

    log.info("Processing: %s%s", target, " (dry run)" if dry_run else "")
    results = reconcile(target, renamer, detect, embedder, exclude, skip)

    write_csv(report_path, renamer.records)
    _print_summary(results, renamer, report_path)

    if renamer.errors:
        return 3
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main orchestration function.

    Returns:
        int: Exit code.
    """
    args = parse_args(argv)
    cfg, config_path = _get_effective_config(args)

    log_file = Path(args.log_file or cfg.get("log_file") or DEFAULT_LOG)
    setup_logging(log_file, verbose=args.verbose)

    target = _resolve_target(args, cfg, config_path)
    report_path = Path(args.report or cfg.get("report") or DEFAULT_REPORT)
    dry_run = bool(args.dry_run or cfg.get("dry_run", False))
    fix_ext = not args.no_ext_fix and bool(cfg.get("fix_extensions", True))
    do_embed = bool(args.embed or cfg.get("embed", False))
    exclude = args.exclude or cfg.get("exclude") or DEFAULT_EXCLUDE
    detector_name = args.detector or cfg.get("detector") or "builtin"

    # Capabilities are resolved before the first rename.
    detect = None
    if fix_ext:
        try:
            detect = get_detector(detector_name)
        except FileTypeError as exc:
            log.error("Format detection unavailable: %s", exc)
            raise SystemExit(2)
    embedder = None
    if do_embed:
        try:
            embedder = ExifToolEmbedder()
        except EmbedError as exc:
            log.error("Metadata embedding unavailable: %s", exc)
            raise SystemExit(2)

    skip = [log_file.absolute(), report_path.absolute()]
    return run(target, report_path, dry_run, detect, embedder, exclude, skip)


if __name__ == "__main__":
    raise SystemExit(main())
