"""
Clocks and phase windows.

Every timed phase goes through a Clock so a game can run on wall-clock time
or on virtual time (simulations, tests) without changing the phase logic.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Awaitable, List, TypeVar

T = TypeVar("T")


class Clock(ABC):
    """Source of time for phase windows."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds."""
        pass

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        pass

    @abstractmethod
    async def wait_for(self, awaitable: Awaitable[T], timeout: float) -> T:
        """Await with a deadline; raises asyncio.TimeoutError when it passes."""
        pass


class SystemClock(Clock):
    """Wall-clock time on the running event loop."""

    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def wait_for(self, awaitable: Awaitable[T], timeout: float) -> T:
        return await asyncio.wait_for(awaitable, timeout=max(timeout, 0.0))


class InstantClock(Clock):
    """
    Virtual clock: sleeping advances time immediately.

    Deadlines are not enforced by ``wait_for``; the awaited call is trusted to
    finish on its own, which is what simulated and scripted platforms do.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self.sleeps: List[float] = []

    def now(self) -> float:
        return self._now

    async def sleep(self, seconds: float) -> None:
        target = self._now + max(seconds, 0.0)
        if seconds > 0:
            self.sleeps.append(seconds)
        # Let concurrent phases open their windows before time moves on
        await asyncio.sleep(0)
        self._now = max(self._now, target)

    async def wait_for(self, awaitable: Awaitable[T], timeout: float) -> T:
        return await awaitable


class PhaseWindow:
    """A bounded interval during which votes or choices are accepted."""

    def __init__(self, clock: Clock, duration: float):
        self.clock = clock
        self.duration = duration
        self.opened_at = clock.now()
        self.deadline = self.opened_at + duration

    @property
    def remaining(self) -> float:
        return max(0.0, self.deadline - self.clock.now())

    @property
    def is_closed(self) -> bool:
        return self.clock.now() >= self.deadline

    async def wait_closed(self) -> None:
        """Sleep out the rest of the window. Windows never close early."""
        remaining = self.remaining
        if remaining > 0:
            await self.clock.sleep(remaining)

    async def guard(self, awaitable: Awaitable[T], grace: float = 0.0) -> T:
        """Await something that must finish by the end of the window (plus grace)."""
        return await self.clock.wait_for(awaitable, self.remaining + grace)
