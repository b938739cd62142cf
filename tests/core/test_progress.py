"""Tests for core/progress.py module.

Covers:
- status() styles and indentation
- pluralize()
- spinner() in TTY and non-TTY mode
- suppress_console_logs() and ConsoleSuppressingFilter
- make_count_table() / make_tree()
"""

from __future__ import annotations

import logging
from io import StringIO
from unittest.mock import MagicMock, patch

import pytest

from clue.core.logging import ConsoleSuppressingFilter
from clue.core.progress import (
    _STYLES,
    is_console_suppressed,
    make_count_table,
    make_tree,
    pluralize,
    spinner,
    status,
    suppress_console_logs,
)


class TestStyles:
    """Tests for _STYLES constant."""

    def test_has_expected_styles(self) -> None:
        """Contains expected style keys."""
        assert set(_STYLES.keys()) == {"success", "error", "warning", "info", "none"}


class TestStatus:
    """Tests for status function."""

    def test_prints_message(self) -> None:
        """Prints a message to console."""
        with patch("clue.core.progress._console") as mock_console:
            status("Test message")
            mock_console.print.assert_called_once()

    def test_warning_style(self) -> None:
        """Applies warning style."""
        with patch("clue.core.progress._console") as mock_console:
            status("Double-check", style="warning")
            assert "!" in mock_console.print.call_args[0][0]

    def test_error_style(self) -> None:
        """Applies error style."""
        with patch("clue.core.progress._console") as mock_console:
            status("Failed", style="error")
            assert "✗" in mock_console.print.call_args[0][0]

    def test_with_indent(self) -> None:
        """Applies indentation."""
        with patch("clue.core.progress._console") as mock_console:
            status("Indented", indent=4, style="none")
            assert mock_console.print.call_args[0][0] == "    Indented"


class TestPluralize:
    """Tests for pluralize function."""

    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, "0 operations"), (1, "1 operation"), (7, "7 operations")],
    )
    def test_default_plural(self, count: int, expected: str) -> None:
        """Appends "s" unless the count is one."""
        assert pluralize(count, "operation") == expected

    def test_custom_plural(self) -> None:
        """Uses the given plural form."""
        assert pluralize(2, "entity", "entities") == "2 entities"


class TestSpinner:
    """Tests for spinner context manager."""

    def test_non_tty_prints_message(self) -> None:
        """Non-TTY mode prints message."""
        with (
            patch("clue.core.progress._is_tty", return_value=False),
            patch("clue.core.progress._console") as mock_console,
        ):
            with spinner("Analyzing"):
                pass
            mock_console.print.assert_called_once()
            assert "Analyzing" in mock_console.print.call_args[0][0]

    def test_tty_mode_uses_console_status_and_suppresses_logs(self) -> None:
        """TTY mode uses console.status and suppresses console logs inside."""
        mock_status = MagicMock()
        mock_status.__enter__ = MagicMock(return_value=None)
        mock_status.__exit__ = MagicMock(return_value=None)

        with (
            patch("clue.core.progress._is_tty", return_value=True),
            patch("clue.core.progress._console") as mock_console,
        ):
            mock_console.status.return_value = mock_status
            with spinner("Processing"):
                assert is_console_suppressed()
            mock_console.status.assert_called_once()
        assert not is_console_suppressed()


class TestSuppressConsoleLogs:
    """Tests for suppress_console_logs and the console filter."""

    def test_clears_flag_on_exception(self) -> None:
        """Flag is cleared even on exception."""
        with pytest.raises(ValueError), suppress_console_logs():
            assert is_console_suppressed()
            raise ValueError("test")
        assert not is_console_suppressed()

    def test_filter_blocks_records_while_suppressed(self) -> None:
        """Records reach a filtered handler only outside the context."""
        handler = logging.StreamHandler(StringIO())
        handler.addFilter(ConsoleSuppressingFilter())
        logger = logging.getLogger("test_filter")
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        try:
            logger.info("visible")
            with suppress_console_logs():
                logger.info("hidden")
        finally:
            logger.removeHandler(handler)

        output = handler.stream.getvalue()
        assert "visible" in output
        assert "hidden" not in output


class TestRichHelpers:
    """Tests for table and tree builders."""

    def test_count_table_sorted_by_name(self) -> None:
        """Rows are sorted by name."""
        table = make_count_table({"write": 2, "read": 5}, title="Operations")

        assert table.title == "Operations"
        assert table.row_count == 2
        assert list(table.columns[0].cells) == ["read", "write"]

    def test_tree_label(self) -> None:
        """Tree keeps the given label."""
        tree = make_tree("Recognized")
        tree.add("app.User")

        assert tree.label == "Recognized"
        assert len(tree.children) == 1
