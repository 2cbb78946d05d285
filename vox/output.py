"""Clipboard output for the final text."""

from __future__ import annotations

import logging
import shutil
import sys

import pyperclip

logger = logging.getLogger(__name__)

LINUX_CLIPBOARD_TOOLS = ("xsel", "xclip", "wl-copy")


class ClipboardOutput:
    """Copies text to the system clipboard."""

    def output(self, text: str) -> None:
        """Copy text to clipboard."""
        pyperclip.copy(text)


def missing_clipboard_tools() -> bool:
    """True on Linux when no clipboard helper pyperclip can drive is installed."""
    if not sys.platform.startswith("linux"):
        return False
    return not any(shutil.which(tool) for tool in LINUX_CLIPBOARD_TOOLS)


def check_clipboard() -> tuple[bool, str]:
    """Try a clipboard round trip; returns (ok, detail)."""
    try:
        pyperclip.copy("vox")
    except pyperclip.PyperclipException as e:
        logger.debug("Clipboard check failed: %s", e)
        return False, "Install xsel or xclip"
    return True, "Copy to clipboard enabled"
