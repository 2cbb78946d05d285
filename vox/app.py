"""Main vox application: terminal front end for a dictation session."""

from __future__ import annotations

import logging

from vox.config import Config
from vox.output import ClipboardOutput, check_clipboard, missing_clipboard_tools
from vox.session import LoopState, SessionEvents, run_interactive_session
from vox.types import LabeledSegment, RecordingMode

logger = logging.getLogger(__name__)


def format_elapsed(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


class VoxApp:
    """
    Mode-tagged voice dictation.

    Records speech while the user toggles between content and instruction
    mode, transcribes it with Whisper, optionally revises it with an LLM
    and copies the result to the clipboard.
    """

    def __init__(self, config: Config | None = None) -> None:
        self._config = config or Config()
        self._output = ClipboardOutput()

    def _print_banner(self) -> None:
        print("=" * 60)
        print("🎙️ VOX - mode-tagged voice dictation")
        print("=" * 60)

    def _print_instructions(self) -> None:
        keys = self._config.keybinds
        print(
            f"\n📌 Press {keys.toggle_key.upper()} to change input modes. "
            f"Press {keys.stop_key.upper()} when done speaking.\n"
        )

    def _print_continue_prompt(self) -> None:
        keys = self._config.keybinds
        print(
            f"📌 Press {keys.stop_key.upper()} to revise/append, "
            f"or {keys.accept_key.upper()} to accept and exit."
        )

    def _on_mode_changed(self, mode: RecordingMode, elapsed: float) -> None:
        icon = "🟢" if mode == RecordingMode.CONTENT else "🟡"
        print(
            f"[{format_elapsed(elapsed)}] {icon} Listening for {mode.value} "
            f"({mode.description})"
        )

    def _on_segment_labeled(self, segment: LabeledSegment) -> None:
        print(f"  {segment.mode.value.capitalize()}: {segment.text.strip()}")

    def _on_revision_applied(self, text: str) -> None:
        print("\n✨ AI revision:")
        print(text)
        print()

    def _on_warning(self, message: str) -> None:
        print(f"⚠️ {message}")

    def _on_state_changed(self, old: LoopState, new: LoopState) -> None:
        if new == LoopState.RECORDING:
            self._print_instructions()
        elif new == LoopState.TRANSCRIBING:
            print("⏳ Transcribing...")
        elif new == LoopState.MAPPING:
            print()
        elif new == LoopState.REVISING:
            print("⏳ Processing with LLM...")

    def _events(self) -> SessionEvents:
        return SessionEvents(
            on_mode_changed=self._on_mode_changed,
            on_segment_labeled=self._on_segment_labeled,
            on_revision_applied=self._on_revision_applied,
            on_warning=self._on_warning,
            on_state_changed=self._on_state_changed,
        )

    def run(self) -> str:
        """Run one interactive session; returns the final text ("" if none)."""
        self._print_banner()

        if self._config.clipboard.enabled and missing_clipboard_tools():
            print("⚠️ Clipboard tools not found. Install xsel or xclip to enable clipboard copy.")

        text = run_interactive_session(
            self._config,
            events=self._events(),
            show_prompt=self._print_continue_prompt,
        )
        if text:
            self._emit_output(text)
        return text

    def _emit_output(self, text: str) -> None:
        print(f"\n✅ Final text:\n{text}\n")
        if not self._config.clipboard.enabled:
            return
        try:
            self._output.output(text)
            print("📋 Copied to clipboard")
        except Exception as e:
            logger.error("Output error: %s", e)
            print(f"   ⚠️ Could not copy to clipboard: {e}")

    def list_devices(self) -> None:
        from vox.audio import list_input_devices

        devices = list_input_devices()
        if not devices:
            print("No audio input devices found.")
            return
        print("\n🎤 Available audio input devices:")
        print("-" * 50)
        for device in devices:
            print(f"  {device}")
        print("-" * 50)

    def diagnose(self) -> None:
        from vox.audio import list_input_devices
        from vox.revise import REVISERS

        rows: list[tuple[str, str, str]] = []

        try:
            devices = list_input_devices()
            rows.append(("Audio input", "✓ Available", f"{len(devices)} device(s) found"))
        except Exception as e:
            rows.append(("Audio input", "✗ Error", str(e)))

        ok, detail = check_clipboard()
        rows.append(("Clipboard", "✓ Available" if ok else "⚠ Warning", detail))

        whisper = self._config.whisper
        rows.append(
            (
                "Whisper model",
                "✓ Configured",
                f"{whisper.repo} (~{whisper.approx_size_mb}MB, downloaded on first use)",
            )
        )

        llm = self._config.llm
        if not llm.enabled:
            rows.append(("LLM revision", "○ Disabled", "single-shot mode"))
        elif REVISERS[llm.provider].can_create(llm):
            rows.append(("LLM revision", "✓ Configured", f"{llm.provider.value}: {llm.model_name}"))
        else:
            rows.append(
                ("LLM revision", "⚠ Not configured", f"{llm.provider.value}: missing API settings")
            )

        print("\n🩺 vox diagnostics")
        print("-" * 72)
        for component, status, details in rows:
            print(f"  {component:<16} {status:<18} {details}")
        print("-" * 72)
