"""Tests for the toggle timeline."""

from __future__ import annotations

import pytest

from vox.timeline import INITIAL_EVENT, ToggleTimeline
from vox.types import ModeToggleEvent, RecordingMode


class TestToggleTimeline:
    """Tests for ToggleTimeline."""

    def test_starts_in_content_mode(self) -> None:
        """Test an empty timeline is implicitly in content mode."""
        timeline = ToggleTimeline()
        assert len(timeline) == 0
        assert timeline.current_mode == RecordingMode.CONTENT
        assert timeline.effective() == [INITIAL_EVENT]

    def test_toggle_flips_mode(self) -> None:
        """Test toggling alternates between the two modes."""
        timeline = ToggleTimeline()
        first = timeline.toggle(1.5)
        second = timeline.toggle(3.0)

        assert first == ModeToggleEvent(1.5, RecordingMode.INSTRUCTION)
        assert second == ModeToggleEvent(3.0, RecordingMode.CONTENT)
        assert timeline.current_mode == RecordingMode.CONTENT
        assert timeline.effective() == [INITIAL_EVENT, first, second]

    def test_rejects_non_increasing_timestamps(self) -> None:
        """Test timestamps must strictly increase."""
        timeline = ToggleTimeline()
        timeline.toggle(2.0)
        with pytest.raises(ValueError):
            timeline.toggle(2.0)
        with pytest.raises(ValueError):
            timeline.toggle(1.0)
        assert len(timeline) == 1

    def test_rejects_negative_timestamp(self) -> None:
        """Test negative timestamps are rejected."""
        with pytest.raises(ValueError):
            ToggleTimeline().append(-0.1, RecordingMode.INSTRUCTION)

    def test_events_is_a_snapshot(self) -> None:
        """Test callers cannot mutate the log through events."""
        timeline = ToggleTimeline()
        timeline.toggle(1.0)
        events = timeline.events
        timeline.toggle(2.0)
        assert len(events) == 1
        assert list(timeline) == list(timeline.events)


class TestRecordingMode:
    """Tests for RecordingMode enum."""

    def test_toggled(self) -> None:
        assert RecordingMode.CONTENT.toggled() == RecordingMode.INSTRUCTION
        assert RecordingMode.INSTRUCTION.toggled() == RecordingMode.CONTENT

    def test_description(self) -> None:
        assert RecordingMode.CONTENT.description == "text for final output"
        assert RecordingMode.INSTRUCTION.description == "directions for processing"
