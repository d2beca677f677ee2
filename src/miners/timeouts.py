"""
Timeout helpers for blocking API clients.

PyGithub is synchronous; these helpers run its calls in a worker thread under
a deadline so a slow endpoint never blocks a scan indefinitely. Failures and
timeouts are logged and turned into a fallback value.
"""

import asyncio
import time
from typing import Any, Callable, Optional, TypeVar

from config import logger

T = TypeVar("T")

SLOW_CALL_RATIO = 0.8


async def with_timeout(
    call: Callable[..., T], *args: Any, timeout: float
) -> T:
    """Run a blocking callable in a thread, raising TimeoutError past the deadline."""
    return await asyncio.wait_for(asyncio.to_thread(call, *args), timeout=timeout)


async def safe_api_call(
    call: Callable[..., T],
    *args: Any,
    timeout: float = 10.0,
    fallback: Optional[T] = None,
    name: str = "API call",
) -> Optional[T]:
    """
    Run a blocking API call with a timeout, returning ``fallback`` on failure.

    Args:
        call (Callable): Blocking function to run
        *args: Positional arguments for ``call``
        timeout (float): Deadline in seconds
        fallback (Optional[T]): Value returned on timeout or error
        name (str): Label used in log records

    Returns:
        Optional[T]: The call result, or ``fallback``
    """
    start = time.monotonic()
    try:
        result = await with_timeout(call, *args, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(
            {
                "message": "API call timed out",
                "call": name,
                "timeout_seconds": timeout,
            }
        )
        return fallback
    except Exception as e:
        logger.error(
            {
                "message": "API call failed",
                "call": name,
                "error": str(e),
                "duration_seconds": round(time.monotonic() - start, 3),
            }
        )
        return fallback

    duration = time.monotonic() - start
    if duration > timeout * SLOW_CALL_RATIO:
        logger.warning(
            {
                "message": "API call close to timeout",
                "call": name,
                "duration_seconds": round(duration, 3),
                "timeout_seconds": timeout,
            }
        )
    return result
