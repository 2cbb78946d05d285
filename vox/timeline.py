"""Append-only log of mode changes during one recording."""

from __future__ import annotations

from typing import Iterator

from vox.types import ModeToggleEvent, RecordingMode

INITIAL_EVENT = ModeToggleEvent(timestamp=0.0, mode=RecordingMode.CONTENT)


class ToggleTimeline:
    """Chronological mode changes, relative to recording start.

    Every recording starts in CONTENT mode at 0s. That initial entry is
    implicit: it is never stored, but `effective()` and `current_mode`
    account for it.
    """

    def __init__(self) -> None:
        self._events: list[ModeToggleEvent] = []

    @property
    def events(self) -> tuple[ModeToggleEvent, ...]:
        return tuple(self._events)

    @property
    def current_mode(self) -> RecordingMode:
        if self._events:
            return self._events[-1].mode
        return INITIAL_EVENT.mode

    def effective(self) -> list[ModeToggleEvent]:
        return [INITIAL_EVENT, *self._events]

    def append(self, timestamp: float, mode: RecordingMode) -> ModeToggleEvent:
        if timestamp < 0:
            raise ValueError(f"Toggle timestamp must be >= 0, got {timestamp}")
        if self._events and timestamp <= self._events[-1].timestamp:
            raise ValueError(
                f"Toggle timestamps must be strictly increasing "
                f"({timestamp} after {self._events[-1].timestamp})"
            )
        event = ModeToggleEvent(timestamp=timestamp, mode=mode)
        self._events.append(event)
        return event

    def toggle(self, timestamp: float) -> ModeToggleEvent:
        """Flip the current mode at `timestamp` and record it."""
        return self.append(timestamp, self.current_mode.toggled())

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[ModeToggleEvent]:
        return iter(list(self._events))
