"""Speech-to-text transcription into time-stamped segments."""

from __future__ import annotations

import logging
import os
import tempfile
import time
from typing import TYPE_CHECKING, Protocol

from scipy.io.wavfile import write as wav_write

from vox.errors import TranscriptionError
from vox.types import TranscriptSegment

if TYPE_CHECKING:
    from numpy.typing import NDArray
    import numpy as np

    from vox.config import WhisperConfig
    from vox.types import WhisperResult

logger = logging.getLogger(__name__)


class Transcriber(Protocol):
    def transcribe(
        self,
        samples: "NDArray[np.int16]",
        language: str | None = None,
    ) -> list[TranscriptSegment]: ...


class WhisperTranscriber:
    """Transcribes audio into segments using an MLX Whisper model."""

    def __init__(self, config: "WhisperConfig", sample_rate: int = 16_000) -> None:
        self._config = config
        self._sample_rate = sample_rate

    @property
    def repo(self) -> str:
        return self._config.repo

    def transcribe(
        self,
        samples: "NDArray[np.int16]",
        language: str | None = None,
    ) -> list[TranscriptSegment]:
        """
        Transcribe audio to time-stamped segments.

        Args:
            samples: Audio data as 16-bit integer samples.
            language: Language hint; defaults to the configured language.

        Returns:
            Segments in the order the model produced them.

        Raises:
            TranscriptionError: If the model could not be loaded or run.
        """
        language = language if language is not None else self._config.language
        duration_s = len(samples) / self._sample_rate
        logger.info("Transcribing %.2fs of audio with %s", duration_s, self.repo)

        wav_path: str | None = None
        try:
            wav_path = self._save_temp_wav(samples)
            t0 = time.time()
            result = self._run_model(wav_path, language)
            logger.info("Whisper done in %.2fs", time.time() - t0)
        except Exception as e:
            raise TranscriptionError(
                f"Transcription failed: {e} (model: {self.repo})"
            ) from e
        finally:
            if wav_path is not None:
                self._cleanup_temp_file(wav_path)

        return self._to_segments(result)

    def _run_model(self, wav_path: str, language: str | None) -> "WhisperResult":
        import mlx_whisper

        return mlx_whisper.transcribe(
            wav_path,
            path_or_hf_repo=self.repo,
            language=language,
        )

    @staticmethod
    def _to_segments(result: "WhisperResult") -> list[TranscriptSegment]:
        segments = []
        for raw in result.get("segments") or []:
            try:
                segments.append(
                    TranscriptSegment(
                        start=float(raw["start"]),
                        end=float(raw["end"]),
                        text=str(raw.get("text", "")),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                raise TranscriptionError(f"Malformed transcript segment: {raw!r}") from e
        return segments

    def _save_temp_wav(self, samples: "NDArray[np.int16]") -> str:
        """Save audio to a temporary WAV file."""
        fd, path = tempfile.mkstemp(suffix=".wav", prefix="vox_")
        os.close(fd)
        try:
            wav_write(path, self._sample_rate, samples)
        except Exception:
            self._cleanup_temp_file(path)
            raise
        return path

    def _cleanup_temp_file(self, path: str) -> None:
        """Remove temporary file."""
        try:
            os.remove(path)
        except OSError as e:
            logger.warning("Failed to remove temp file %s: %s", path, e)
