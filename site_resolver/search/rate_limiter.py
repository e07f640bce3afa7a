"""
Fixed pauses between consecutive search queries and companies.
"""

import time
from typing import Callable


class RateLimiter:
    """
    Sleep a fixed delay before every call except the first.

    Used to keep a gap between queries of one company and between companies,
    so the search API's own per-key rate limiting is not tripped.
    """

    def __init__(self, delay_ms: int, sleep: Callable[[float], None] = time.sleep):
        """
        Initialize the rate limiter.

        Args:
            delay_ms: Delay between calls in milliseconds (0 = no delay)
            sleep: Function used to wait
        """
        self.delay = max(0, delay_ms) / 1000.0
        self._sleep = sleep
        self._calls = 0

    def wait_if_needed(self) -> None:
        """
        Wait before the next call.

        The first call after construction or reset() returns immediately.
        """
        if self._calls and self.delay > 0:
            self._sleep(self.delay)
        self._calls += 1

    def reset(self) -> None:
        """Forget previous calls; the next wait is skipped."""
        self._calls = 0
