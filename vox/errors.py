"""Exceptions raised by vox.

`DeviceError` and `TranscriptionError` abort a session. `RevisionError` is
reported and the session carries on with the text it already has.
"""

from __future__ import annotations


class VoxError(Exception):
    """Base class for all vox errors."""


class DeviceError(VoxError):
    """The audio input device is unavailable or failed to open."""


class TranscriptionError(VoxError):
    """Speech-to-text failed."""


class RevisionError(VoxError):
    """The LLM revision call failed."""
