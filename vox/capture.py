"""Recording loop that tags audio with Content/Instruction mode changes."""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import TYPE_CHECKING, Callable, Protocol

import numpy as np

from vox.timeline import ToggleTimeline
from vox.types import RecordingMode, RecordingResult

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)

ModeChangedCallback = Callable[[RecordingMode, float], None]

# Toggles that share a clock reading are spread apart by this much.
MIN_TOGGLE_GAP_S = 1e-6


class KeyAction(str, Enum):
    TOGGLE = "toggle"
    STOP = "stop"
    ACCEPT = "accept"


class AudioFrameSource(Protocol):
    def start(self) -> None: ...

    def read(self) -> "NDArray[np.int16]":
        """Block until the next frame of mono samples is available."""
        ...

    def stop(self) -> None: ...


class KeySource(Protocol):
    def poll(self) -> KeyAction | None:
        """Return the next pending key action without blocking."""
        ...

    def clear(self) -> None: ...


class CaptureSession:
    """
    Records from an audio frame source until the stop key is pressed.

    Key input is polled once per frame, before the frame is read, so key
    responsiveness is bounded by the frame duration. This loop is the only
    writer of both the sample buffer and the toggle timeline.
    """

    def __init__(
        self,
        source: AudioFrameSource,
        keys: KeySource,
        on_mode_changed: ModeChangedCallback | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._keys = keys
        self._on_mode_changed = on_mode_changed
        self._clock = clock

    def capture(self) -> RecordingResult:
        timeline = ToggleTimeline()
        frames: list["NDArray[np.int16]"] = []

        self._keys.clear()
        self._source.start()
        started_at = self._clock()
        self._notify(timeline.current_mode, 0.0)

        try:
            while True:
                action = self._keys.poll()
                if action == KeyAction.STOP:
                    break
                if action == KeyAction.TOGGLE:
                    elapsed = _next_timestamp(timeline, self._clock() - started_at)
                    event = timeline.toggle(elapsed)
                    logger.debug("Mode -> %s at %.2fs", event.mode.value, event.timestamp)
                    self._notify(event.mode, event.timestamp)

                frames.append(self._source.read())
        finally:
            self._source.stop()

        total_duration = self._clock() - started_at

        if frames:
            samples = np.concatenate(frames).astype(np.int16, copy=False)
        else:
            samples = np.zeros((0,), dtype=np.int16)

        logger.info(
            "Captured %d samples over %.2fs with %d toggle(s)",
            len(samples),
            total_duration,
            len(timeline),
        )
        return RecordingResult(
            samples=samples,
            toggles=list(timeline.events),
            total_duration=total_duration,
        )

    def _notify(self, mode: RecordingMode, elapsed: float) -> None:
        if self._on_mode_changed is not None:
            self._on_mode_changed(mode, elapsed)


def _next_timestamp(timeline: ToggleTimeline, elapsed: float) -> float:
    """Keep toggle timestamps strictly increasing on coarse clocks."""
    if len(timeline) and elapsed <= timeline.events[-1].timestamp:
        return timeline.events[-1].timestamp + MIN_TOGGLE_GAP_S
    return max(elapsed, 0.0)
