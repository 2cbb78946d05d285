"""Tests for the terminal front end."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from vox.app import VoxApp, format_elapsed
from vox.config import Config
from vox.types import RecordingMode


class TestFormatElapsed:
    def test_format(self) -> None:
        assert format_elapsed(0) == "00:00"
        assert format_elapsed(65.9) == "01:05"


class TestVoxApp:
    """Tests for VoxApp."""

    @patch("vox.app.missing_clipboard_tools", return_value=False)
    @patch("vox.app.run_interactive_session")
    def test_run_copies_final_text(
        self, mock_session: MagicMock, _tools: MagicMock, capsys: pytest.CaptureFixture
    ) -> None:
        """Test the final text is printed and copied to the clipboard."""
        mock_session.return_value = "Final text."
        app = VoxApp(Config())
        app._output = MagicMock()

        assert app.run() == "Final text."
        app._output.output.assert_called_once_with("Final text.")
        assert "Final text." in capsys.readouterr().out

    @patch("vox.app.missing_clipboard_tools", return_value=False)
    @patch("vox.app.run_interactive_session")
    def test_run_without_clipboard(self, mock_session: MagicMock, _tools: MagicMock) -> None:
        """Test the clipboard is left alone when disabled."""
        mock_session.return_value = "Final text."
        config = Config()
        config.clipboard.enabled = False
        app = VoxApp(config)
        app._output = MagicMock()

        app.run()
        app._output.output.assert_not_called()

    @patch("vox.app.missing_clipboard_tools", return_value=False)
    @patch("vox.app.run_interactive_session")
    def test_run_nothing_recorded(self, mock_session: MagicMock, _tools: MagicMock) -> None:
        """Test nothing is copied when the session produced no text."""
        mock_session.return_value = ""
        app = VoxApp(Config())
        app._output = MagicMock()

        assert app.run() == ""
        app._output.output.assert_not_called()

    @patch("vox.app.missing_clipboard_tools", return_value=False)
    @patch("vox.app.run_interactive_session")
    def test_run_passes_config_and_events(self, mock_session: MagicMock, _tools: MagicMock) -> None:
        """Test the session gets the app config and all event hooks."""
        mock_session.return_value = ""
        config = Config()
        VoxApp(config).run()

        assert mock_session.call_args[0][0] is config
        events = mock_session.call_args[1]["events"]
        assert events.on_mode_changed is not None
        assert events.on_warning is not None
        assert mock_session.call_args[1]["show_prompt"] is not None

    def test_mode_change_output(self, capsys: pytest.CaptureFixture) -> None:
        """Test mode changes are printed with a timestamp and description."""
        VoxApp(Config())._on_mode_changed(RecordingMode.INSTRUCTION, 75.2)
        out = capsys.readouterr().out
        assert "[01:15]" in out
        assert "Listening for instruction" in out
        assert "directions for processing" in out
