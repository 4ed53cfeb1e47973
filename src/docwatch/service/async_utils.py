"""Helpers for running coroutines from synchronous code."""

import asyncio
from typing import Any


def run_async(coro: Any) -> Any:
    """Run an async coroutine in a new event loop.

    This is useful for calling async functions from synchronous Flask routes
    and click commands. Creates a new event loop, runs the coroutine, and
    properly cleans up.

    Args:
        coro: An awaitable coroutine to execute

    Returns:
        The result of the coroutine
    """
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()
