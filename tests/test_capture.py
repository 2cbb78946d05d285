"""Tests for the capture loop."""

from __future__ import annotations

from typing import Callable

import pytest

from vox.capture import CaptureSession, KeyAction
from vox.errors import DeviceError
from vox.types import ModeToggleEvent, RecordingMode


class TestCaptureSession:
    """Tests for CaptureSession.capture."""

    def test_records_until_stop(self, frame_source, scripted_keys, fake_clock) -> None:
        """Test frames are read until the stop key and the stream is closed."""
        keys = scripted_keys(None, None, KeyAction.STOP)
        result = CaptureSession(frame_source, keys, clock=fake_clock).capture()

        assert len(result.samples) == 2 * frame_source.frame_length
        assert result.toggles == []
        assert not result.is_empty
        assert frame_source.started == 1
        assert frame_source.stopped == 1
        assert keys.cleared == 1

    def test_toggle_records_elapsed_time(self, frame_source, scripted_keys, fake_clock) -> None:
        """Test a toggle key flips the mode at the elapsed time."""
        changes: list[tuple[RecordingMode, float]] = []
        keys = scripted_keys(None, KeyAction.TOGGLE, None, KeyAction.STOP)

        result = CaptureSession(
            frame_source,
            keys,
            on_mode_changed=lambda mode, elapsed: changes.append((mode, elapsed)),
            clock=fake_clock,
        ).capture()

        assert result.toggles == [ModeToggleEvent(pytest.approx(0.032), RecordingMode.INSTRUCTION)]
        assert changes[0] == (RecordingMode.CONTENT, 0.0)
        assert changes[1][0] == RecordingMode.INSTRUCTION
        assert changes[1][1] == pytest.approx(0.032)
        assert frame_source.reads == 3
        assert result.total_duration == pytest.approx(0.064)

    def test_toggle_back_and_forth(self, frame_source, scripted_keys, fake_clock) -> None:
        """Test repeated toggles alternate modes with increasing timestamps."""
        keys = scripted_keys(KeyAction.TOGGLE, KeyAction.TOGGLE, KeyAction.TOGGLE, KeyAction.STOP)
        result = CaptureSession(frame_source, keys, clock=fake_clock).capture()

        assert [event.mode for event in result.toggles] == [
            RecordingMode.INSTRUCTION,
            RecordingMode.CONTENT,
            RecordingMode.INSTRUCTION,
        ]
        stamps = [event.timestamp for event in result.toggles]
        assert stamps == sorted(stamps)
        assert len(set(stamps)) == 3

    def test_stop_before_any_frame(self, frame_source, scripted_keys, fake_clock) -> None:
        """Test an immediate stop gives an empty, valid recording."""
        result = CaptureSession(
            frame_source, scripted_keys(KeyAction.STOP), clock=fake_clock
        ).capture()

        assert result.is_empty
        assert result.samples.dtype.name == "int16"
        assert frame_source.reads == 0
        assert frame_source.stopped == 1

    def test_accept_key_ignored_while_recording(
        self, frame_source, scripted_keys, fake_clock
    ) -> None:
        """Test the accept key does not end or toggle a recording."""
        keys = scripted_keys(KeyAction.ACCEPT, None, KeyAction.STOP)
        result = CaptureSession(frame_source, keys, clock=fake_clock).capture()

        assert result.toggles == []
        assert frame_source.reads == 2

    def test_samples_kept_in_order(self, frame_source, scripted_keys, fake_clock) -> None:
        """Test frames are concatenated in the order they were read."""
        keys = scripted_keys(None, None, None, KeyAction.STOP)
        result = CaptureSession(frame_source, keys, clock=fake_clock).capture()

        n = frame_source.frame_length
        assert list(result.samples[::n]) == [1, 2, 3]

    def test_device_error_on_open(self, frame_source, scripted_keys: Callable) -> None:
        """Test a device that fails to open surfaces as DeviceError."""
        frame_source.fail_on_start = DeviceError("no microphone")
        with pytest.raises(DeviceError):
            CaptureSession(frame_source, scripted_keys()).capture()

    def test_stream_closed_on_read_error(
        self, frame_source, scripted_keys, fake_clock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test the stream is released when a read fails."""

        def broken_read():
            raise DeviceError("device unplugged")

        monkeypatch.setattr(frame_source, "read", broken_read)
        with pytest.raises(DeviceError):
            CaptureSession(frame_source, scripted_keys(None), clock=fake_clock).capture()
        assert frame_source.stopped == 1

    def test_toggles_on_same_clock_reading(self, frame_source, scripted_keys) -> None:
        """Test toggles that read the same clock value still record in order."""
        ticks = iter([0.0, 0.5, 0.5, 0.5, 1.0])
        keys = scripted_keys(KeyAction.TOGGLE, KeyAction.TOGGLE, KeyAction.STOP)

        result = CaptureSession(frame_source, keys, clock=lambda: next(ticks)).capture()

        assert [event.mode for event in result.toggles] == [
            RecordingMode.INSTRUCTION,
            RecordingMode.CONTENT,
        ]
        first, second = (event.timestamp for event in result.toggles)
        assert first == pytest.approx(0.5)
        assert second > first
        assert second == pytest.approx(0.5, abs=1e-3)
