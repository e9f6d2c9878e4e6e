"""Event-loop backed timer scheduling."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class AsyncioScheduler:
    """Schedules callbacks on the running asyncio event loop."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` on the loop after ``delay_seconds``."""
        asyncio.get_running_loop().call_later(delay_seconds, callback)
