"""Async concurrency pool for warming many cache entries at once."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from imgcache.config.defaults import DEFAULT_MAX_WORKERS

if TYPE_CHECKING:
    from imgcache.core import CacheOrchestrator
    from imgcache.types import Outcome

logger = logging.getLogger(__name__)


class ConcurrencyPool:
    """Runs cache requests concurrently, bounded by a semaphore.

    Requests for the same filename are not deduplicated; exclusive
    create lets one of them win and the rest report DestinationExists.
    """

    def __init__(self, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._max_workers = max_workers

    @property
    def max_workers(self) -> int:
        return self._max_workers

    async def cache_batch(
        self,
        orchestrator: CacheOrchestrator,
        source_dir: str | Path,
        cache_dir: str | Path,
        filenames: Sequence[str],
    ) -> list[Outcome]:
        """Cache every filename; returns one Outcome per filename, in input order."""
        semaphore = asyncio.Semaphore(self._max_workers)

        async def worker(filename: str) -> Outcome:
            async with semaphore:
                return await orchestrator.cache_image(source_dir, cache_dir, filename)

        results = await asyncio.gather(*(worker(name) for name in filenames))

        failed = sum(1 for r in results if not r.succeeded)
        if failed:
            logger.warning("%d of %d cache requests failed", failed, len(results))
        return list(results)
