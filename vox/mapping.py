"""Reconcile transcript segments against the mode toggle timeline."""

from __future__ import annotations

import logging
from bisect import bisect_right
from typing import Iterable, Sequence

from vox.timeline import INITIAL_EVENT
from vox.types import (
    LabeledSegment,
    ModeToggleEvent,
    RecordingMode,
    SplitText,
    TranscriptSegment,
)

logger = logging.getLogger(__name__)


def _effective_timeline(
    toggles: Iterable[ModeToggleEvent],
) -> tuple[list[float], list[RecordingMode]]:
    # Stable sort keeps the implicit initial entry ahead of any toggle at 0s
    timeline = sorted([INITIAL_EVENT, *toggles], key=lambda event: event.timestamp)
    return (
        [event.timestamp for event in timeline],
        [event.mode for event in timeline],
    )


def _sanitize(segments: Iterable[TranscriptSegment]) -> list[TranscriptSegment]:
    cleaned = []
    for segment in segments:
        if segment.end < segment.start:
            logger.warning(
                "Clamping segment with end before start (%.2fs < %.2fs)",
                segment.end,
                segment.start,
            )
            segment = TranscriptSegment(
                start=segment.start, end=segment.start, text=segment.text
            )
        cleaned.append(segment)
    return sorted(cleaned, key=lambda segment: segment.start)


def label_segments(
    segments: Iterable[TranscriptSegment],
    toggles: Iterable[ModeToggleEvent],
) -> list[LabeledSegment]:
    """Tag each segment with the mode active at its midpoint.

    The active mode is that of the last timeline entry at or before the
    midpoint, so a segment whose midpoint lands exactly on a toggle takes
    the new mode.
    """
    timestamps, modes = _effective_timeline(toggles)

    labeled = []
    for segment in _sanitize(segments):
        midpoint = segment.start + (segment.end - segment.start) / 2
        mode = modes[bisect_right(timestamps, midpoint) - 1]
        labeled.append(
            LabeledSegment(
                text=segment.text,
                mode=mode,
                start=segment.start,
                end=segment.end,
            )
        )
    return labeled


def coalesce(labeled: Iterable[LabeledSegment]) -> list[LabeledSegment]:
    """Merge adjacent segments that share a mode into single runs."""
    runs: list[LabeledSegment] = []
    for segment in labeled:
        if runs and runs[-1].mode == segment.mode:
            current = runs[-1]
            runs[-1] = LabeledSegment(
                text=current.text + " " + segment.text,
                mode=current.mode,
                start=current.start,
                end=segment.end,
            )
        else:
            runs.append(segment)
    return runs


def map_segments_to_modes(
    segments: Sequence[TranscriptSegment],
    toggles: Sequence[ModeToggleEvent],
) -> list[LabeledSegment]:
    """Label transcript segments by mode and coalesce them into runs."""
    return coalesce(label_segments(segments, toggles))


def split_segments(labeled: Iterable[LabeledSegment]) -> SplitText:
    """Separate content runs from instruction runs.

    Each mode's trimmed run texts are joined with newlines. An instruction
    that ends up empty is reported as None.
    """
    content_lines = []
    instruction_lines = []
    for segment in labeled:
        if segment.mode == RecordingMode.CONTENT:
            content_lines.append(segment.text.strip())
        else:
            instruction_lines.append(segment.text.strip())

    content = "\n".join(content_lines).strip()
    instruction = "\n".join(instruction_lines).strip()
    return SplitText(instruction=instruction or None, content=content)
