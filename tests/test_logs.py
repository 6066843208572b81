"""
Console and file logging setup.
"""

import logging

from takeoutfix.logs import setup_logging


class TestSetupLogging:
    """Test where each level ends up."""

    def test_warnings_go_to_stderr(self, capsys):
        setup_logging(None)
        log = logging.getLogger("takeoutfix.match")

        log.info("Matching sidecars")
        log.warning("Multiple sidecar candidates")
        log.error("Rename failed")

        out, err = capsys.readouterr()
        assert out == "[INFO] Matching sidecars\n"
        assert err == "[WARN] Multiple sidecar candidates\n[ERR] Rename failed\n"

    def test_debug_only_when_verbose(self, capsys):
        setup_logging(None, verbose=True)
        logging.getLogger("takeoutfix").debug("No sidecar found")

        assert capsys.readouterr().out == "[DBG] No sidecar found\n"

    def test_file_log(self, tmp_path, capsys):
        log_file = tmp_path / "logs" / "run.log"
        setup_logging(log_file)

        logging.getLogger("takeoutfix.rename").warning("Destination exists")
        for handler in logging.getLogger("takeoutfix").handlers:
            handler.flush()

        assert "| takeoutfix.rename | WARNING | Destination exists" in log_file.read_text(encoding="utf-8")
