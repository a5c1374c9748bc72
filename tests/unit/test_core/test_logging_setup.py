"""Unit tests for logging configuration."""

from pathlib import Path

from loguru import logger

from election_map.core.logging import setup_logging


class TestLogging:
    """Tests for Loguru logging setup."""

    def test_setup_logging_does_not_raise(self) -> None:
        """setup_logging with valid log level does not raise."""
        setup_logging("DEBUG")
        setup_logging("INFO")
        setup_logging("WARNING")

    def test_setup_logging_case_insensitive(self) -> None:
        """setup_logging accepts case-insensitive log levels."""
        setup_logging("info")
        setup_logging("debug")

    def test_file_sink(self, tmp_path: Path) -> None:
        """A log directory gets a log file."""
        log_dir = tmp_path / "logs"
        setup_logging("INFO", log_dir=str(log_dir))
        logger.info("election-map file sink check")
        logger.complete()
        setup_logging("INFO")

        log_file = log_dir / "election-map.log"
        assert log_file.exists()
        assert "file sink check" in log_file.read_text(encoding="utf-8")
