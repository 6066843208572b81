"""
Rename executor: never overwrites, dry-run only reports.
"""

import logging

from takeoutfix.rename import Renamer


class TestRenamer:
    """Test the single rename entry point."""

    def test_rename(self, tmp_path):
        src = tmp_path / "a.json"
        src.write_text("{}")
        renamer = Renamer()

        assert renamer.move(src, tmp_path / "b.json", "test", "why") == "rename"
        assert not src.exists()
        assert (tmp_path / "b.json").read_text() == "{}"
        assert [r.action for r in renamer.records] == ["rename"]
        assert renamer.records[0].reason == "why"

    def test_same_path_is_noop(self, tmp_path):
        src = tmp_path / "a.json"
        src.write_text("{}")
        renamer = Renamer()

        assert renamer.move(src, src, "test") == "none"
        assert src.exists()
        assert renamer.records == []

    def test_existing_destination_is_skipped(self, tmp_path, caplog):
        src = tmp_path / "a.json"
        dst = tmp_path / "b.json"
        src.write_text("src")
        dst.write_text("dst")
        renamer = Renamer()

        with caplog.at_level(logging.WARNING):
            assert renamer.move(src, dst, "test") == "skip"

        assert src.read_text() == "src"
        assert dst.read_text() == "dst"
        assert renamer.records[0].action == "skip"
        assert "Destination exists" in caplog.text

    def test_dry_run(self, tmp_path):
        src = tmp_path / "a.json"
        src.write_text("{}")
        renamer = Renamer(dry_run=True)

        assert renamer.move(src, tmp_path / "b.json", "test") == "dry-run"
        assert src.exists()
        assert not (tmp_path / "b.json").exists()
        assert renamer.counts()["dry-run"] == 1

    def test_failure_is_recorded(self, tmp_path):
        renamer = Renamer()

        assert renamer.move(tmp_path / "missing.json", tmp_path / "b.json", "test") == "error"
        assert renamer.errors == 1
        assert "FileNotFoundError" in renamer.records[0].error

    def test_dry_run_sees_planned_destination(self, tmp_path):
        a = tmp_path / "a.jpg.supplem.json"
        b = tmp_path / "a.jpg.supplemental-meta.json"
        dst = tmp_path / "a.jpg.supplemental-metadata.json"
        a.write_text("{}")
        b.write_text("{}")
        renamer = Renamer(dry_run=True)

        assert renamer.move(a, dst, "test") == "dry-run"
        assert renamer.move(b, dst, "test") == "skip"
        assert renamer.exists(dst)
        assert not renamer.exists(a)
        assert not dst.exists()

    def test_dry_run_source_already_moved(self, tmp_path):
        src = tmp_path / "a.json"
        src.write_text("{}")
        renamer = Renamer(dry_run=True)
        renamer.move(src, tmp_path / "b.json", "test")

        assert renamer.move(src, tmp_path / "c.json", "test") == "error"
        assert src.exists()

    def test_project_applies_planned_moves(self, tmp_path):
        src = tmp_path / "sub" / "clip.mp4"
        src.parent.mkdir()
        src.write_bytes(b"x")
        renamer = Renamer(dry_run=True)
        renamer.move(src, src.with_name("clip.mov"), "test")

        assert renamer.project([src], tmp_path) == [src.with_name("clip.mov")]
        assert renamer.project([], tmp_path, recursive=False) == []
        assert renamer.project([src], src.parent, recursive=False) == [src.with_name("clip.mov")]
