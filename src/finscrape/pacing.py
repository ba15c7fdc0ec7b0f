"""Delay and jitter provider for the scrape loop.

Every wait in a cycle goes through a Pacer so the request rate stays
throttled in production while tests can substitute an instant one.
"""

import asyncio
import random
from typing import Optional


class Pacer:
    """Cooperative sleeps with randomized durations."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    async def pause(self, seconds: float) -> None:
        """Suspend the control flow for a fixed number of seconds."""
        if seconds > 0:
            await asyncio.sleep(seconds)

    async def jitter(self, low: float, high: float) -> float:
        """Pause for a uniformly random duration in [low, high]. Returns the delay."""
        delay = self._rng.uniform(low, high)
        await self.pause(delay)
        return delay

    def pick(self, low: int, high: int) -> int:
        """Random integer in [low, high], inclusive."""
        return self._rng.randint(low, high)
