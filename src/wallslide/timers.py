"""
Timer primitives on top of the Tk event loop.

All callbacks run on the loop thread. A `Timer` is a named slot holding at
most one outstanding callback: arming it always cancels the previous one
first.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerService(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class TkTimerHandle:
    """A callback scheduled with `widget.after`."""

    def __init__(self, widget: Any, after_id: str):
        self.widget = widget
        self.after_id: Optional[str] = after_id

    def cancel(self) -> None:
        if self.after_id:
            self.widget.after_cancel(self.after_id)
            self.after_id = None


class TkTimerService:
    """Schedules callbacks on a Tk widget's event loop. Delays are in seconds."""

    def __init__(self, widget: Any):
        self.widget = widget

    def call_later(self, delay: float, callback: Callable[[], None]) -> TkTimerHandle:
        after_id = self.widget.after(max(0, int(delay * 1000)), callback)
        return TkTimerHandle(self.widget, after_id)


class Timer:
    """
    A single-slot, re-armable timer.

    Arming cancels whatever is outstanding before scheduling, so a `Timer`
    never has more than one pending fire.
    """

    def __init__(self, service: TimerService, name: str):
        self.service = service
        self.name = name
        self._handle: Optional[TimerHandle] = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def arm(self, delay: float, callback: Callable[[], None]) -> None:
        """Cancel any outstanding fire, then schedule `callback` after `delay` seconds."""
        self.cancel()
        logger.debug(f"Arming {self.name} timer for {delay:.2f}s.")

        def fire() -> None:
            self._handle = None
            callback()

        self._handle = self.service.call_later(delay, fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
