from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import sounddevice as sd

from vox.errors import DeviceError

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from vox.config import AudioConfig

logger = logging.getLogger(__name__)

FIRST_CHANNEL_INDEX = 0


@dataclass
class AudioDevice:
    index: int
    name: str
    is_default: bool = False

    def __str__(self) -> str:
        marker = " (DEFAULT)" if self.is_default else ""
        return f"[{self.index}] {self.name}{marker}"


def list_input_devices() -> list[AudioDevice]:
    devices = sd.query_devices()
    default_input = sd.default.device[FIRST_CHANNEL_INDEX]

    input_devices = []
    for i, dev in enumerate(devices):
        if dev["max_input_channels"] > 0:  # type: ignore[index]
            input_devices.append(
                AudioDevice(
                    index=i,
                    name=dev["name"],  # type: ignore[index]
                    is_default=(i == default_input),
                )
            )
    return input_devices


def resolve_device(device: int | str | None) -> int | None:
    """Resolve a device index or a case-insensitive name fragment."""
    if device is None or isinstance(device, int):
        return device

    needle = device.lower()
    for candidate in list_input_devices():
        if needle in candidate.name.lower():
            return candidate.index
    raise DeviceError(f"No input device matching '{device}'")


class SoundDeviceFrameSource:
    """Blocking fixed-size int16 frames from a sounddevice input stream."""

    def __init__(self, config: "AudioConfig") -> None:
        self._config = config
        self._stream: sd.InputStream | None = None

    def start(self) -> None:
        if self._stream is not None:
            return
        try:
            self._stream = sd.InputStream(
                samplerate=self._config.sample_rate,
                channels=self._config.channels,
                dtype="int16",
                blocksize=self._config.block_size,
                device=resolve_device(self._config.device),
            )
            self._stream.start()
        except (sd.PortAudioError, ValueError) as e:
            self._stream = None
            raise DeviceError(f"Failed to open audio input device: {e}") from e

    def read(self) -> "NDArray[np.int16]":
        if self._stream is None:
            raise DeviceError("Audio stream is not open")
        try:
            data, overflowed = self._stream.read(self._config.block_size)
        except sd.PortAudioError as e:
            raise DeviceError(f"Audio read failed: {e}") from e
        if overflowed:
            logger.warning("Audio input overflow, samples were dropped")
        return np.array(data[:, FIRST_CHANNEL_INDEX], dtype=np.int16)

    def stop(self) -> None:
        if self._stream:
            try:
                self._stream.stop()
                self._stream.close()
            except Exception as e:
                logger.warning("Error stopping audio stream: %s", e)
            finally:
                self._stream = None
