"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
import tempfile
from typing import TYPE_CHECKING, Callable, Generator, Iterable

import numpy as np
import pytest

from vox.capture import KeyAction

if TYPE_CHECKING:
    from numpy.typing import NDArray


class FakeClock:
    """Monotonic clock that advances a fixed step every time it is read."""

    def __init__(self, step: float = 0.032) -> None:
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


class FakeFrameSource:
    """Yields fixed frames and records start/stop calls."""

    def __init__(self, frame_length: int = 512, fail_on_start: Exception | None = None) -> None:
        self.frame_length = frame_length
        self.fail_on_start = fail_on_start
        self.started = 0
        self.stopped = 0
        self.reads = 0

    def start(self) -> None:
        if self.fail_on_start is not None:
            raise self.fail_on_start
        self.started += 1

    def read(self) -> "NDArray[np.int16]":
        self.reads += 1
        return np.full(self.frame_length, self.reads, dtype=np.int16)

    def stop(self) -> None:
        self.stopped += 1


class ScriptedKeys:
    """Key source that returns one scripted action (or None) per poll."""

    def __init__(self, script: Iterable[KeyAction | None]) -> None:
        self._script = list(script)
        self.cleared = 0

    def poll(self) -> KeyAction | None:
        if not self._script:
            return KeyAction.STOP
        return self._script.pop(0)

    def clear(self) -> None:
        self.cleared += 1


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def frame_source() -> FakeFrameSource:
    return FakeFrameSource()


@pytest.fixture
def scripted_keys() -> Callable[..., ScriptedKeys]:
    return lambda *actions: ScriptedKeys(actions)


@pytest.fixture
def sample_audio_16k() -> NDArray[np.int16]:
    """Generate 1 second of sample audio at 16kHz."""
    sample_rate = 16000
    duration = 1.0
    t = np.linspace(0, duration, int(sample_rate * duration), dtype=np.float32)
    # Generate a 440Hz sine wave
    audio = np.sin(2 * np.pi * 440 * t) * 0.5
    return (audio * 32767).astype(np.int16)


@pytest.fixture
def temp_wav_file(sample_audio_16k: NDArray[np.int16]) -> Generator[str, None, None]:
    """Create a temporary WAV file with sample audio."""
    from scipy.io.wavfile import write as wav_write

    fd, path = tempfile.mkstemp(suffix=".wav")
    os.close(fd)
    wav_write(path, 16000, sample_audio_16k)
    yield path
    if os.path.exists(path):
        os.remove(path)


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Fixture to clean environment variables before/after tests."""
    env_vars = [
        "VOX_AUDIO_DEVICE",
        "VOX_WHISPER_MODEL_SIZE",
        "VOX_WHISPER_MODEL",
        "VOX_LANGUAGE",
        "VOX_TOGGLE_KEY",
        "VOX_CLIPBOARD",
        "VOX_VERBOSE",
        "VOX_LLM_ENABLED",
        "VOX_LLM_PROVIDER",
        "VOX_LLM_MODEL",
        "VOX_LLM_API_KEY",
        "VOX_LLM_ENDPOINT",
        "VOX_LLM_DEPLOYMENT",
        "ANTHROPIC_API_KEY",
        "AZURE_OPENAI_API_KEY",
        "AZURE_OPENAI_ENDPOINT",
    ]
    original_values = {var: os.environ.get(var) for var in env_vars}

    for var in env_vars:
        os.environ.pop(var, None)

    yield

    for var, value in original_values.items():
        if value is not None:
            os.environ[var] = value
        else:
            os.environ.pop(var, None)
