"""Adapter exposing a transform engine's output as a chunked byte source."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from pathlib import Path

from imgcache.config.defaults import DEFAULT_CHUNK_SIZE
from imgcache.errors.exceptions import (
    ImgCacheError,
    InvalidTransformParameters,
    TransformEngineFailure,
)
from imgcache.pipeline.stream import iter_stream
from imgcache.transforms.engine import PillowTransformEngine, TransformEngine
from imgcache.types import Operation

logger = logging.getLogger(__name__)


class TransformInvoker:
    """Validates transform parameters and streams the engine's output.

    The returned iterator plugs into ``stream_to_file`` exactly like
    ``iter_file`` does for a plain copy.
    """

    def __init__(
        self,
        engine: TransformEngine | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._engine = engine or PillowTransformEngine()
        self._chunk_size = chunk_size

    @property
    def engine(self) -> TransformEngine:
        return self._engine

    def transform(
        self,
        source_path: str | Path,
        operation: Operation | str,
        width: int,
        height: int,
    ) -> AsyncIterator[bytes]:
        """Return a byte source for the transformed image.

        Raises InvalidTransformParameters immediately; the engine itself
        runs on first iteration.
        """
        op = _validate_parameters(operation, width, height)
        return self._stream(Path(source_path), op, width, height)

    async def _stream(
        self, source_path: Path, operation: Operation, width: int, height: int
    ) -> AsyncIterator[bytes]:
        try:
            output = await asyncio.to_thread(
                self._engine.transform, source_path, operation, width, height
            )
        except ImgCacheError:
            raise
        except Exception as e:
            raise TransformEngineFailure(
                f"{operation} of {source_path} to {width}x{height} failed: {e}", original=e
            ) from e

        try:
            async for chunk in iter_stream(output, self._chunk_size):
                yield chunk
        finally:
            output.close()


def _validate_parameters(operation: Operation | str, width: int, height: int) -> Operation:
    try:
        op = Operation(operation)
    except ValueError:
        raise InvalidTransformParameters(f"Unknown transform operation: {operation!r}") from None

    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidTransformParameters(f"{name} must be a positive integer, got {value!r}")
    return op
