"""Multi-pass dictation session: record, transcribe, tag, revise, repeat."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Protocol

from vox.capture import KeyAction
from vox.errors import RevisionError, VoxError
from vox.mapping import map_segments_to_modes, split_segments

if TYPE_CHECKING:
    from vox.config import Config
    from vox.revise import Reviser
    from vox.transcribe import Transcriber
    from vox.types import LabeledSegment, RecordingMode, RecordingResult

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_PREAMBLE = """\
You are a transcription refinement assistant. Your job is to refine spoken text into written prose.

CRITICAL GUIDELINES:
- You are writing AS the speaker, in the first person, not FOR the speaker
- Preserve the speaker's voice, tone, and style
- Do NOT polish the text into generic corporate phrasing
- Only apply requested changes, don't over-edit
- Remove filler words (um, uh, like) unless they add meaning
- Fix grammar and punctuation for written form
"""

SYSTEM_PROMPT_CLOSING = (
    "When revising, apply ONLY the requested changes. "
    "Return only the refined text, no explanations or commentary."
)


class LoopState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    TRANSCRIBING = "transcribing"
    MAPPING = "mapping"
    REVISING = "revising"
    AWAITING_CONTINUE = "awaiting_continue"
    TERMINATED = "terminated"


class ContinueDecision(str, Enum):
    CONTINUE = "continue"
    ACCEPT = "accept"


class Recorder(Protocol):
    def capture(self) -> "RecordingResult": ...


@dataclass
class SessionState:
    accumulated_content: str = ""
    system_prompt: str = ""
    is_first_iteration: bool = True


@dataclass
class SessionEvents:
    """Optional observers for a running session."""

    on_mode_changed: Callable[["RecordingMode", float], None] | None = None
    on_segment_labeled: Callable[["LabeledSegment"], None] | None = None
    on_revision_applied: Callable[[str], None] | None = None
    on_warning: Callable[[str], None] | None = None
    on_state_changed: Callable[[LoopState, LoopState], None] | None = None


def build_system_prompt(instruction: str | None) -> str:
    parts = [SYSTEM_PROMPT_PREAMBLE]
    if instruction:
        parts.append(f"INSTRUCTIONS FROM USER:\n{instruction}\n")
    parts.append(SYSTEM_PROMPT_CLOSING)
    return "\n".join(parts)


def append_content(accumulated: str, content: str) -> str:
    """Add a new block of content, separated from earlier text by a blank line."""
    if not content:
        return accumulated
    if not accumulated:
        return content
    return accumulated + "\n\n" + content


class RevisionLoop:
    """
    Runs dictation passes until the user accepts the text.

    Each pass records audio, transcribes it, splits it into content and
    instruction by the toggle timeline, appends the content and, when an
    instruction was spoken and a reviser is available, has the reviser
    rewrite the accumulated text. Without a reviser the loop stops after
    a single pass.
    """

    def __init__(
        self,
        recorder: Recorder,
        transcriber: "Transcriber",
        ask_continue: Callable[[], ContinueDecision | None],
        reviser: "Reviser | None" = None,
        language: str | None = None,
        events: SessionEvents | None = None,
    ) -> None:
        self._recorder = recorder
        self._transcriber = transcriber
        self._ask_continue = ask_continue
        self._reviser = reviser
        self._language = language
        self._events = events or SessionEvents()
        self._state = LoopState.IDLE

    @property
    def state(self) -> LoopState:
        return self._state

    def run(self) -> str:
        """Run the session and return the final text ("" if nothing was recorded)."""
        session = SessionState()
        try:
            text = self._run(session)
        except VoxError:
            self._set_state(LoopState.TERMINATED)
            raise
        self._set_state(LoopState.TERMINATED)
        return text

    def _run(self, session: SessionState) -> str:
        while True:
            if not session.is_first_iteration:
                self._set_state(LoopState.AWAITING_CONTINUE)
                if self._await_decision() == ContinueDecision.ACCEPT:
                    logger.info("Text accepted")
                    break

            self._set_state(LoopState.RECORDING)
            recording = self._recorder.capture()
            if recording.is_empty:
                if session.is_first_iteration:
                    self._warn("No audio detected.")
                    return ""
                self._warn("No audio detected, keeping current version.")
                break

            self._set_state(LoopState.TRANSCRIBING)
            segments = self._transcriber.transcribe(recording.samples, self._language)

            self._set_state(LoopState.MAPPING)
            labeled = map_segments_to_modes(segments, recording.toggles)
            for segment in labeled:
                if self._events.on_segment_labeled is not None:
                    self._events.on_segment_labeled(segment)
            split = split_segments(labeled)

            if session.is_first_iteration:
                session.system_prompt = build_system_prompt(split.instruction)

            session.accumulated_content = append_content(
                session.accumulated_content, split.content
            )

            if self._reviser is not None and split.instruction is not None:
                revision_request = None if session.is_first_iteration else split.instruction
                self._revise(self._reviser, session, revision_request)

            session.is_first_iteration = False

            if self._reviser is None:
                break

        return session.accumulated_content

    def _revise(
        self,
        reviser: "Reviser",
        session: SessionState,
        revision_request: str | None,
    ) -> None:
        self._set_state(LoopState.REVISING)
        try:
            revised = reviser.revise(
                session.system_prompt,
                session.accumulated_content,
                revision_request,
            )
        except RevisionError as e:
            self._warn(f"Revision failed, keeping current version: {e}")
            return

        session.accumulated_content = revised
        if self._events.on_revision_applied is not None:
            self._events.on_revision_applied(revised)

    def _await_decision(self) -> ContinueDecision:
        while True:
            decision = self._ask_continue()
            if decision is not None:
                return decision
            logger.debug("Ignoring input at continue prompt")

    def _set_state(self, new: LoopState) -> None:
        old, self._state = self._state, new
        if old != new and self._events.on_state_changed is not None:
            self._events.on_state_changed(old, new)

    def _warn(self, message: str) -> None:
        logger.warning(message)
        if self._events.on_warning is not None:
            self._events.on_warning(message)


def decision_for(action: KeyAction | None) -> ContinueDecision | None:
    """Map a key press at the continue prompt to a decision."""
    if action == KeyAction.STOP:
        return ContinueDecision.CONTINUE
    if action == KeyAction.ACCEPT:
        return ContinueDecision.ACCEPT
    return None


def run_interactive_session(
    config: "Config",
    events: SessionEvents | None = None,
    show_prompt: Callable[[], None] | None = None,
) -> str:
    """
    Run a full interactive session on the real microphone and keyboard.

    `show_prompt` is called each time the user is asked whether to record
    another pass. Returns the final text, or "" when nothing was captured
    on the first pass.
    """
    from vox.audio import SoundDeviceFrameSource
    from vox.capture import CaptureSession
    from vox.keys import KeyboardListener
    from vox.revise import create_reviser
    from vox.transcribe import WhisperTranscriber

    events = events or SessionEvents()
    reviser = create_reviser(config.llm)
    transcriber = WhisperTranscriber(config.whisper, config.audio.sample_rate)

    with KeyboardListener(config.keybinds) as keys:
        recorder = CaptureSession(
            SoundDeviceFrameSource(config.audio),
            keys,
            on_mode_changed=events.on_mode_changed,
        )

        def ask_continue() -> ContinueDecision | None:
            keys.clear()
            if show_prompt is not None:
                show_prompt()
            return decision_for(keys.wait())

        loop = RevisionLoop(
            recorder,
            transcriber,
            ask_continue,
            reviser=reviser,
            language=config.whisper.language,
            events=events,
        )
        return loop.run()
