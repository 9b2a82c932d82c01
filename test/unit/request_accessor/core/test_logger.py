"""Tests for log event formatting."""

import pytest

from request_accessor.core.logger import EventFormatter, LoggerError, LogIcon, dev_pipeline_renderer


class TestEventFormatter:
    """Tests for EventFormatter."""

    def test_uppercases_and_truncates(self) -> None:
        formatter = EventFormatter(debug=False, max_length=5)
        assert formatter(None, "info", {"event": "snapshot taken"})["event"] == "SNAPS"

    def test_icon_prepended_in_debug(self) -> None:
        formatter = EventFormatter(debug=True)
        result = formatter(None, "info", {"event": "date cast failed", "icon": LogIcon.DATE})
        assert result["event"] == f"{LogIcon.DATE.value} DATE CAST FAILED"
        assert "icon" not in result

    def test_invalid_icon_raises(self) -> None:
        formatter = EventFormatter(debug=True)
        with pytest.raises(LoggerError):
            formatter(None, "info", {"event": "x", "icon": "not-an-icon"})


def test_dev_pipeline_renderer() -> None:
    line = dev_pipeline_renderer(
        None,
        "info",
        {"timestamp": "T", "level": "info", "event": "E", "key": "k", "filename": "f.py", "lineno": 3},
    )
    assert line == "T | INFO | E | key=k | f.py:3"
