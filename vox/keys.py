"""Keyboard input for the recording loop and the continue prompt."""

from __future__ import annotations

import logging
import queue
import sys
from typing import TYPE_CHECKING

from pynput import keyboard

from vox.capture import KeyAction

if TYPE_CHECKING:
    from vox.config import KeybindConfig

logger = logging.getLogger(__name__)


def resolve_key(name: str) -> keyboard.Key | keyboard.KeyCode:
    """Turn a configured key name ('tab', 'enter', 'f8', 'q') into a pynput key."""
    name = name.strip().lower()
    try:
        return keyboard.Key[name]
    except KeyError:
        pass
    if len(name) == 1:
        return keyboard.KeyCode.from_char(name)
    raise ValueError(f"Unknown key name: {name!r}")


def flush_terminal_input() -> None:
    """Drop keystrokes the terminal buffered while the global listener handled them."""
    if sys.stdin is None or not sys.stdin.isatty():
        return
    if sys.platform == "win32":
        import msvcrt

        while msvcrt.kbhit():
            msvcrt.getwch()
        return

    import termios

    try:
        termios.tcflush(sys.stdin, termios.TCIFLUSH)
    except termios.error as e:
        logger.debug("Could not flush terminal input: %s", e)


class KeyboardListener:
    """
    Queues key actions from a background pynput listener.

    The listener thread only enqueues; consumers drain the queue with
    `poll()` (non-blocking) or `wait()` (blocking).
    """

    def __init__(self, keybinds: "KeybindConfig") -> None:
        self._bindings = {
            resolve_key(keybinds.toggle_key): KeyAction.TOGGLE,
            resolve_key(keybinds.stop_key): KeyAction.STOP,
            resolve_key(keybinds.accept_key): KeyAction.ACCEPT,
        }
        self._queue: queue.Queue[KeyAction] = queue.Queue()
        self._listener: keyboard.Listener | None = None

    def start(self) -> None:
        if self._listener is not None:
            return
        self._listener = keyboard.Listener(on_press=self._on_press)
        self._listener.start()
        logger.debug("Keyboard listener started")

    def stop(self) -> None:
        if self._listener is not None:
            self._listener.stop()
            self._listener = None
        flush_terminal_input()

    def __enter__(self) -> "KeyboardListener":
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()

    def _on_press(self, key: keyboard.Key | keyboard.KeyCode | None) -> None:
        if key is None:
            return
        action = self._bindings.get(key)
        if action is None and isinstance(key, keyboard.KeyCode) and key.char:
            action = self._bindings.get(keyboard.KeyCode.from_char(key.char.lower()))
        if action is not None:
            self._queue.put(action)

    def poll(self) -> KeyAction | None:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def wait(self, timeout: float | None = None) -> KeyAction | None:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def clear(self) -> None:
        flush_terminal_input()
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                return
