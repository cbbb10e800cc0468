"""
Press-and-hold detection for idea cards.

A short press opens the idea; holding past the threshold triggers the
secondary action (edit) instead. The two are mutually exclusive for a
single press.
"""

import time
from typing import Callable

LONG_PRESS_SECONDS = 0.5

IDLE = "idle"
PRESSED = "pressed"
LONG_PRESSED = "long_pressed"


class PressGesture:
    """
    State machine: idle -> pressed -> (released | long_pressed) -> idle.

    There are no timers; the caller drives `poll()` while the press is held.
    """

    def __init__(
        self,
        on_press: Callable[[], None],
        on_long_press: Callable[[], None],
        threshold: float = LONG_PRESS_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if threshold <= 0:
            raise ValueError("threshold must be positive")
        self.on_press = on_press
        self.on_long_press = on_long_press
        self.threshold = threshold
        self.clock = clock
        self.state = IDLE
        self._pressed_at = None

    def press(self) -> None:
        self.state = PRESSED
        self._pressed_at = self.clock()

    def poll(self) -> bool:
        """Fire the long press once the hold exceeds the threshold. Returns True if it fired."""
        if self.state != PRESSED:
            return False
        if self.clock() - self._pressed_at >= self.threshold:
            self.state = LONG_PRESSED
            self.on_long_press()
            return True
        return False

    def release(self) -> str:
        """
        End the press.

        Returns:
            "press" if the primary action fired, "long_press" if the hold
            turned into a long press, or "" if nothing was pressed.
        """
        if self.state == IDLE:
            return ""

        # A hold that crossed the threshold without a poll still counts as long
        self.poll()
        fired = "long_press" if self.state == LONG_PRESSED else "press"
        if fired == "press":
            self.on_press()
        self._reset()
        return fired

    def cancel(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.state = IDLE
        self._pressed_at = None
