# CRITICAL: Set Windows event loop policy FIRST, before any other imports
# This must be the very first thing that happens to fix psycopg compatibility
import sys
if sys.platform == "win32":
    import asyncio
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Load environment variables early
from dotenv import load_dotenv
load_dotenv()

# Standard imports
import time
import asyncio
from collections import defaultdict

# Import rate limiting defaults from api.config.settings
from api.config.settings import (
    RATE_LIMIT_REQUESTS,
    RATE_LIMIT_WINDOW,
    RATE_LIMIT_BURST,
    RATE_LIMIT_MAX_WAIT,
    THROTTLE_MAX_CONCURRENT,
)
from api.utils.debug import print__rate_limit_debug

BURST_WINDOW = 10  # seconds


class RateLimiter:
    """Sliding-window limiter with a burst window and per-IP concurrency.

    One instance lives on app.state, so separate apps (and tests) never share
    request history.
    """

    def __init__(
        self,
        requests: int = RATE_LIMIT_REQUESTS,
        window: float = RATE_LIMIT_WINDOW,
        burst: int = RATE_LIMIT_BURST,
        max_wait: float = RATE_LIMIT_MAX_WAIT,
        max_concurrent: int = THROTTLE_MAX_CONCURRENT,
        burst_window: float = BURST_WINDOW,
        max_attempts: int = 3,
    ):
        self.requests = requests
        self.window = window
        self.burst = burst
        self.max_wait = max_wait
        self.burst_window = burst_window
        self.max_attempts = max_attempts
        self.storage = defaultdict(list)
        self.semaphores = defaultdict(lambda: asyncio.Semaphore(max_concurrent))

    def check_with_throttling(self, client_ip: str) -> dict:
        """Check rate limits and return throttling information instead of boolean."""
        now = time.time()

        # Clean old entries
        self.storage[client_ip] = [
            timestamp for timestamp in self.storage[client_ip]
            if now - timestamp < self.window
        ]

        recent_requests = [
            timestamp for timestamp in self.storage[client_ip]
            if now - timestamp < self.burst_window
        ]
        window_requests = len(self.storage[client_ip])

        suggested_wait = 0
        if len(recent_requests) >= self.burst:
            # Wait until the oldest burst request expires
            suggested_wait = max(0, self.burst_window - (now - min(recent_requests)))
        elif window_requests >= self.requests:
            suggested_wait = max(0, self.window - (now - min(self.storage[client_ip])))

        return {
            "allowed": len(recent_requests) < self.burst and window_requests < self.requests,
            "suggested_wait": suggested_wait,
            "burst_count": len(recent_requests),
            "window_count": window_requests,
            "burst_limit": self.burst,
            "window_limit": self.requests,
        }

    async def wait_for_capacity(self, client_ip: str) -> bool:
        """Wait for the rate limit to allow the request, up to max_wait per attempt."""
        for attempt in range(self.max_attempts):
            rate_info = self.check_with_throttling(client_ip)

            if rate_info["allowed"]:
                self.storage[client_ip].append(time.time())
                return True

            if rate_info["suggested_wait"] <= 0:
                # Should be allowed but isn't - might be a race condition
                await asyncio.sleep(0.1)
                continue

            if rate_info["suggested_wait"] > self.max_wait:
                print__rate_limit_debug(
                    f"⚠️ Rate limit wait time ({rate_info['suggested_wait']:.1f}s) exceeds "
                    f"maximum ({self.max_wait}s) for {client_ip}"
                )
                return False

            print__rate_limit_debug(
                f"⏳ Throttling request from {client_ip}: waiting {rate_info['suggested_wait']:.1f}s "
                f"(burst: {rate_info['burst_count']}/{rate_info['burst_limit']}, "
                f"window: {rate_info['window_count']}/{rate_info['window_limit']}, "
                f"attempt {attempt + 1})"
            )
            await asyncio.sleep(rate_info["suggested_wait"])

        print__rate_limit_debug(
            f"❌ Rate limit exceeded after {self.max_attempts} attempts for {client_ip}"
        )
        return False
