"""Top-level entry points: cache_image(), submit_cache_image(), CacheOrchestrator."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from imgcache.config.defaults import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CREATE_PARENTS,
    DEFAULT_IMAGE_FORMAT,
)
from imgcache.config.schema import CacheSettings
from imgcache.errors.exceptions import (
    ArgumentValidationError,
    ImgCacheError,
    InvalidDirectory,
    InvalidRequestPath,
)
from imgcache.formats.signatures import verify_image_format
from imgcache.naming.decoder import decode_filename
from imgcache.pipeline.stream import iter_file, stream_to_file
from imgcache.transforms.engine import PillowTransformEngine, TransformEngine
from imgcache.transforms.invoker import TransformInvoker
from imgcache.types import CacheRequest, Outcome, TransformSpec

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[bool, ImgCacheError | None], Any]


class CacheOrchestrator:
    """Materializes a missing cache entry from the master repository.

    One ``cache_image`` call runs the whole linear pipeline: directory
    checks, filename decoding, format verification, then either a plain
    copy or a transform, streamed into the cache with exclusive create.
    """

    def __init__(
        self,
        engine: TransformEngine | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        create_parents: bool = DEFAULT_CREATE_PARENTS,
        image_format: str = DEFAULT_IMAGE_FORMAT,
    ) -> None:
        self._invoker = TransformInvoker(engine, chunk_size=chunk_size)
        self._chunk_size = chunk_size
        self._create_parents = create_parents
        self._image_format = image_format

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any] | CacheSettings | None = None,
        engine: TransformEngine | None = None,
    ) -> CacheOrchestrator:
        """Build an orchestrator from a merged config dict or settings model."""
        if isinstance(config, CacheSettings):
            settings = config
        else:
            settings = CacheSettings.from_mapping(config or {})
        engine = engine or PillowTransformEngine(
            jpeg_quality=settings.jpeg_quality,
            max_dimension=settings.max_dimension,
        )
        return cls(
            engine=engine,
            chunk_size=settings.chunk_size,
            create_parents=settings.create_parents,
        )

    @property
    def invoker(self) -> TransformInvoker:
        return self._invoker

    async def cache_image(
        self,
        source_dir: str | Path,
        cache_dir: str | Path,
        filename: str,
    ) -> Outcome:
        """Cache ``filename`` into ``cache_dir``. Never raises for I/O failures."""
        request = CacheRequest(
            source_dir=os.fspath(source_dir),
            cache_dir=os.fspath(cache_dir),
            filename=filename,
        )
        try:
            destination = await self._materialize(request)
        except ImgCacheError as e:
            logger.warning("Caching '%s' failed: %s", filename, e)
            return Outcome.failed(e)

        logger.info("Cached '%s' at %s", filename, destination)
        return Outcome.ok(destination)

    async def _materialize(self, request: CacheRequest) -> Path:
        source_root = await _require_directory(request.source_dir, "source")
        cache_root = await _require_directory(request.cache_dir, "destination")

        name = request.filename.lstrip("/" + os.sep)
        if not name:
            raise InvalidRequestPath(request.filename)
        destination = _resolve_under(cache_root, name)

        decoded = decode_filename(name)
        if isinstance(decoded, TransformSpec):
            original = _resolve_under(source_root, decoded.original_filename)
            await verify_image_format(original, self._image_format)
            source = self._invoker.transform(
                original, decoded.operation, decoded.width, decoded.height
            )
        else:
            original = _resolve_under(source_root, decoded.filename)
            await verify_image_format(original, self._image_format)
            source = iter_file(original, self._chunk_size)

        await stream_to_file(source, destination, create_parents=self._create_parents)
        return destination


async def _require_directory(path: str, role: str) -> Path:
    if not path or not await asyncio.to_thread(os.path.isdir, path):
        raise InvalidDirectory(path, role)
    return Path(os.path.abspath(path))


def _resolve_under(root: Path, name: str) -> Path:
    """Join ``name`` onto ``root`` lexically, refusing anything that escapes it."""
    candidate = Path(os.path.normpath(root / name))
    if candidate == root or not candidate.is_relative_to(root):
        raise InvalidRequestPath(name, root)
    return candidate


# ── Module-level convenience functions ──


def cache_image(
    source_dir: str | Path,
    cache_dir: str | Path,
    filename: str,
    on_complete: CompletionCallback,
    *,
    orchestrator: CacheOrchestrator | None = None,
) -> Outcome:
    """Cache an image (sync wrapper).

    ``on_complete(succeeded, error)`` is called exactly once before the
    Outcome is returned. Argument-shape problems raise
    ArgumentValidationError before any I/O.
    """
    _validate_arguments(source_dir, cache_dir, filename, on_complete)
    orchestrator = orchestrator or CacheOrchestrator()
    outcome = asyncio.run(orchestrator.cache_image(source_dir, cache_dir, filename))
    on_complete(outcome.succeeded, outcome.error)
    return outcome


def submit_cache_image(
    source_dir: str | Path,
    cache_dir: str | Path,
    filename: str,
    on_complete: CompletionCallback,
    *,
    orchestrator: CacheOrchestrator | None = None,
) -> asyncio.Task[Outcome]:
    """Schedule a cache request on the running event loop.

    Arguments are validated synchronously; ``on_complete`` fires once
    when the returned task finishes.
    """
    _validate_arguments(source_dir, cache_dir, filename, on_complete)
    loop = asyncio.get_running_loop()
    orchestrator = orchestrator or CacheOrchestrator()
    task = loop.create_task(orchestrator.cache_image(source_dir, cache_dir, filename))

    def _deliver(done: asyncio.Task[Outcome]) -> None:
        if done.cancelled():
            logger.debug("Cache request for '%s' was cancelled", filename)
            return
        outcome = done.result()
        on_complete(outcome.succeeded, outcome.error)

    task.add_done_callback(_deliver)
    return task


def _validate_arguments(
    source_dir: object,
    cache_dir: object,
    filename: object,
    on_complete: object,
) -> None:
    if not isinstance(filename, str):
        raise ArgumentValidationError("filename string file path required")
    if not isinstance(cache_dir, (str, os.PathLike)):
        raise ArgumentValidationError("cache_dir string path required")
    if not isinstance(source_dir, (str, os.PathLike)):
        raise ArgumentValidationError("source_dir string path required")
    if not callable(on_complete):
        raise ArgumentValidationError("Callback required")
