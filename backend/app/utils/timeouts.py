from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


async def retry_async(
    func: Callable[[], Awaitable[T]],
    attempts: int,
    delay: float,
    *,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    """Await ``func`` up to ``attempts`` times, sleeping ``delay`` between tries.

    Only exceptions listed in ``retry_on`` trigger another attempt; anything
    else propagates immediately. The last retried exception is re-raised.
    """

    last_exc: BaseException | None = None
    for attempt in range(1, attempts + 1):
        try:
            return await func()
        except retry_on as exc:
            last_exc = exc
            if attempt < attempts:
                logger.warning("Attempt %s/%s failed: %s", attempt, attempts, exc)
                await asyncio.sleep(delay)
    if last_exc is None:
        raise RuntimeError("retry_async called with no attempts")
    raise last_exc
