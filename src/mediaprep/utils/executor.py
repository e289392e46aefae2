"""Helpers for running blocking Pillow and file work off the event loop."""

from __future__ import annotations

import asyncio
from typing import Callable, TypeVar

_T = TypeVar("_T")


async def run_blocking(func: Callable[..., _T], *args) -> _T:
    """Run ``func(*args)`` in the loop's default executor and await it."""

    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)
