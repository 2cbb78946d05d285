"""Type definitions for the vox application."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, TypedDict

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray


class RecordingMode(str, Enum):
    CONTENT = "content"
    INSTRUCTION = "instruction"

    def toggled(self) -> "RecordingMode":
        if self is RecordingMode.CONTENT:
            return RecordingMode.INSTRUCTION
        return RecordingMode.CONTENT

    @property
    def description(self) -> str:
        if self is RecordingMode.CONTENT:
            return "text for final output"
        return "directions for processing"


@dataclass(frozen=True)
class ModeToggleEvent:
    """A mode change, `timestamp` seconds after recording started."""

    timestamp: float
    mode: RecordingMode


@dataclass
class RecordingResult:
    """Everything captured during one recording pass."""

    samples: "NDArray[np.int16]" = field(
        default_factory=lambda: np.zeros((0,), dtype=np.int16)
    )
    toggles: list[ModeToggleEvent] = field(default_factory=list)
    total_duration: float = 0.0

    @property
    def is_empty(self) -> bool:
        return len(self.samples) == 0


@dataclass(frozen=True)
class TranscriptSegment:
    start: float
    end: float
    text: str


@dataclass(frozen=True)
class LabeledSegment:
    """A run of transcript text spoken in a single mode."""

    text: str
    mode: RecordingMode
    start: float
    end: float


@dataclass(frozen=True)
class SplitText:
    """Content and instruction text extracted from labeled segments.

    `instruction` is None when no instruction was spoken, never "".
    """

    instruction: str | None
    content: str


class WhisperResult(TypedDict, total=False):
    """Result from Whisper transcription."""

    text: str
    segments: list[dict]
    language: str
