"""
Eviction Policy - Keeps the artifact store under its size budget.

Runs after a new artifact has been added. Removes the oldest artifact while
the store is over budget, up to max_evictions removals per pass. Store errors
are logged and swallowed: the request that triggered the pass has already
been answered.
"""

from pathlib import Path
from typing import List

from core.errors import NoArtifactsError, StoreIOError
from core.logger import format_exception_short, logger
from core.messages import LogMessages
from interfaces.artifact_store import IArtifactStore


class EvictionPolicy:
    """Oldest-first eviction under a byte budget."""

    def __init__(self, store: IArtifactStore, budget_bytes: int, max_evictions: int = 1):
        if max_evictions < 1:
            raise ValueError("max_evictions must be at least 1")
        self.store = store
        self.budget_bytes = budget_bytes
        self.max_evictions = max_evictions

    def maybe_evict(self) -> List[Path]:
        """
        Run one eviction pass.

        Eviction triggers only when the total size is strictly greater than
        the budget.

        Returns:
            Paths removed during this pass, oldest first (possibly empty)
        """
        evicted: List[Path] = []

        while len(evicted) < self.max_evictions:
            try:
                total = self.store.total_size()
            except StoreIOError as e:
                logger.error(format_exception_short(e, "Eviction size scan failed"))
                return evicted

            if total <= self.budget_bytes:
                if not evicted:
                    logger.debug(
                        LogMessages.EVICTION_SKIPPED.format(
                            total=total, budget=self.budget_bytes
                        )
                    )
                return evicted

            try:
                oldest = self.store.oldest()
            except NoArtifactsError as e:
                logger.warning(f"Store over budget but nothing to evict: {e}")
                return evicted
            except StoreIOError as e:
                logger.error(format_exception_short(e, "Eviction oldest lookup failed"))
                return evicted

            logger.info(
                LogMessages.EVICTING.format(
                    total=total, budget=self.budget_bytes, path=oldest
                )
            )
            try:
                self.store.remove(oldest)
            except StoreIOError as e:
                logger.error(f"Error deleting file: {e}")
                return evicted

            evicted.append(oldest)

        try:
            total = self.store.total_size()
        except StoreIOError as e:
            logger.error(format_exception_short(e, "Eviction size scan failed"))
            return evicted
        if total > self.budget_bytes:
            logger.warning(
                LogMessages.EVICTION_STILL_OVER.format(
                    count=len(evicted), total=total, budget=self.budget_bytes
                )
            )
        return evicted
