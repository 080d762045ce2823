"""Fixed inter-request pacing toward the portal."""

import asyncio
from typing import Awaitable, Callable

from wishlist_crawler.constants import REQUEST_DELAY_SECONDS


class RequestPacer:
    """Sleep a fixed delay before each paced request.

    One pacer is shared by every stage of a run so the delay applies to
    the portal as a whole, not per stage.
    """

    def __init__(
        self,
        delay_seconds: float = REQUEST_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.delay_seconds = delay_seconds
        self.wait_count = 0
        self._sleep = sleep

    async def wait(self) -> None:
        """Suspend for the pacing delay."""
        self.wait_count += 1
        await self._sleep(self.delay_seconds)
