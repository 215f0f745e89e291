"""Gesture disambiguation for the PTT button.

Raw presses are turned into ``GestureAction`` values. Two policies exist:

* ``ClickPolicy.SINGLE_ONLY`` - every press is emitted as ``SINGLE`` at once.
* ``ClickPolicy.DOUBLE_CLICK`` - two presses closer than the window become one
  ``DOUBLE``; a press with no follow-up inside the window becomes ``SINGLE``
  once the window has elapsed, so singles carry the window as latency.

Timing runs on an injected scheduler and clock, which keeps the state machine
testable without wall-clock delays.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from ..core.logging_utils import get_module_logger
from .capabilities import Scheduler, TimerHandle
from .state import ClickPolicy, GestureAction

logger = get_module_logger("Gestures")

DEFAULT_DOUBLE_CLICK_WINDOW = 0.35

ActionCallback = Callable[[GestureAction], None]


class GestureDisambiguator:
    """Arm/cancel/fire state machine over button press timestamps."""

    def __init__(
        self,
        on_action: ActionCallback,
        scheduler: Scheduler,
        *,
        policy: ClickPolicy = ClickPolicy.SINGLE_ONLY,
        window: float = DEFAULT_DOUBLE_CLICK_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._on_action = on_action
        self._scheduler = scheduler
        self._policy = policy
        self._window = window
        self._clock = clock

        self._last_press: Optional[float] = None
        self._timer: Optional[TimerHandle] = None

    @property
    def policy(self) -> ClickPolicy:
        return self._policy

    @property
    def window(self) -> float:
        return self._window

    @property
    def pending(self) -> bool:
        """True while a press is waiting for its window to resolve."""
        return self._last_press is not None

    def press(self, timestamp: Optional[float] = None) -> None:
        """Feed one button press, stamped with ``timestamp`` or the clock."""
        t = self._clock() if timestamp is None else timestamp

        if self._policy is ClickPolicy.SINGLE_ONLY:
            self._emit(GestureAction.SINGLE)
            return

        if self._last_press is not None:
            if t - self._last_press < self._window:
                self._cancel_timer()
                self._last_press = None
                self._emit(GestureAction.DOUBLE)
                return
            # Window elapsed but the timer has not run yet.
            self._cancel_timer()
            self._last_press = None
            self._emit(GestureAction.SINGLE)

        self._last_press = t
        self._timer = self._scheduler.call_later(self._window, self._on_window_elapsed)

    def reset(self) -> None:
        """Drop any half-resolved press without emitting."""
        self._cancel_timer()
        self._last_press = None

    def _on_window_elapsed(self) -> None:
        self._timer = None
        if self._last_press is None:
            return
        self._last_press = None
        self._emit(GestureAction.SINGLE)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _emit(self, action: GestureAction) -> None:
        logger.debug("Gesture resolved: %s", action.value)
        self._on_action(action)


__all__ = ["ActionCallback", "DEFAULT_DOUBLE_CLICK_WINDOW", "GestureDisambiguator"]
