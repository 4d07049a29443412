"""Debounce primitive for input-driven lookups."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Generic, Optional, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerLoop(Protocol):
    """The part of an asyncio event loop a :class:`Debouncer` needs."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class Debouncer(Generic[T]):
    """Emit the latest pushed value once ``delay`` seconds pass without input.

    Each instance owns a single timer slot. Pushing a new value cancels the
    pending emission and restarts the timer; superseded values are dropped
    silently. Timers come from ``loop`` (the running asyncio loop by default),
    so everything runs on the loop's thread.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[T], None],
        *,
        loop: Optional[TimerLoop] = None,
    ):
        if delay < 0:
            raise ValueError("delay must not be negative")
        self.delay = delay
        self._callback = callback
        self._loop = loop
        self._handle: Optional[TimerHandle] = None
        self._value: Optional[T] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def _timer_loop(self) -> TimerLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def push(self, value: T) -> None:
        loop = self._timer_loop()
        self.cancel()
        self._value = value
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop the pending emission, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._value = None

    def flush(self) -> bool:
        """Emit the pending value now. Returns ``False`` when nothing was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def _fire(self) -> None:
        value = self._value
        self._handle = None
        self._value = None
        logger.debug("Debounced emission after %.3fs", self.delay)
        self._callback(value)  # type: ignore[arg-type]
