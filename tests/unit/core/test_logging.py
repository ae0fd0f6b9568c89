"""Tests for developer logging setup."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest

from cruxfade.core.logging import configure_logging, get_logger


if TYPE_CHECKING:
    from collections.abc import Generator


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self) -> Generator[None, None, None]:
        root = logging.getLogger()
        handlers = root.handlers[:]
        level = root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_events_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test events are written to stderr and stdout stays clean."""
        configure_logging(level="INFO")

        get_logger("cruxfade.test").info("Combat started", enemy_id="goblin")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Combat started" in captured.err
        assert "goblin" in captured.err

    def test_json_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test JSON output carries the event and the app name."""
        configure_logging(level="INFO", json_format=True)

        get_logger("cruxfade.test").info("Level started", level=2)

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["event"] == "Level started"
        assert record["level"] == "info"
        assert record["app"] == "cruxfade"

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test events below the configured level are dropped."""
        configure_logging(level="WARNING")

        get_logger("cruxfade.test").info("Card drawn")

        assert "Card drawn" not in capsys.readouterr().err

    def test_stream_handlers_only(self) -> None:
        """Test setup never opens a log file."""
        configure_logging(level="DEBUG")

        assert not any(isinstance(handler, logging.FileHandler) for handler in logging.getLogger().handlers)
        with pytest.raises(TypeError):
            configure_logging(log_file="cruxfade.log")  # type: ignore[call-arg]
