"""
In-flight fetch registry - coalesces concurrent fetches of the same identifier.

The first request for an uncached identifier becomes the leader and runs the
fetch; requests arriving while it runs await the leader's future instead of
starting their own download. Entries are removed as soon as the fetch settles.
"""

import asyncio
from typing import Awaitable, Callable, Dict, Tuple, TypeVar

from core.errors import DownloadError
from core.logger import logger
from core.messages import ErrorMessages, LogMessages

T = TypeVar("T")


class InFlightRegistry:
    """Per-key single-flight on top of asyncio futures. Event-loop local."""

    def __init__(self):
        self._inflight: Dict[str, asyncio.Future] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._inflight

    def __len__(self) -> int:
        return len(self._inflight)

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> Tuple[T, bool]:
        """
        Run factory() once per key at a time.

        Returns:
            (result, leader) where leader is False if the result was shared
            from a fetch another request started

        Raises:
            Whatever factory() raised, for the leader and every waiter. If the
            leader is cancelled, waiters get DownloadError instead
        """
        existing = self._inflight.get(key)
        if existing is not None:
            logger.info(LogMessages.FETCH_JOINED.format(video_id=key))
            # shield: a cancelled waiter must not cancel the leader's future
            return await asyncio.shield(existing), False

        future = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            result = await factory()
        except Exception as e:
            future.set_exception(e)
            # Retrieve so an unobserved failure is not reported as "never retrieved"
            future.exception()
            raise
        except BaseException:
            # Leader cancelled: waiters get an ordinary error, not CancelledError
            future.set_exception(
                DownloadError(ErrorMessages.DOWNLOAD_CANCELLED.format(video_id=key))
            )
            future.exception()
            raise
        else:
            future.set_result(result)
            return result, True
        finally:
            if not future.done():
                future.cancel()
            self._inflight.pop(key, None)
