"""Chunked source → destination streaming with exclusive-create writes."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from collections.abc import AsyncIterator
from pathlib import Path
from typing import BinaryIO

from imgcache.config.defaults import DEFAULT_CHUNK_SIZE
from imgcache.errors.exceptions import (
    DestinationExists,
    DestinationWriteError,
    SourceReadError,
)

logger = logging.getLogger(__name__)

_EXCLUSIVE_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0)


async def iter_file(path: str | Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield a file's bytes in chunks without loading it whole."""
    f = await asyncio.to_thread(open, path, "rb")
    try:
        async for chunk in iter_stream(f, chunk_size):
            yield chunk
    finally:
        f.close()


async def iter_stream(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield chunks from an open binary stream until EOF."""
    while True:
        chunk = await asyncio.to_thread(stream.read, chunk_size)
        if not chunk:
            return
        yield chunk


async def stream_to_file(
    source: AsyncIterator[bytes],
    destination: str | Path,
    create_parents: bool = False,
) -> int:
    """Copy ``source`` into a newly created ``destination``.

    The destination is opened with O_EXCL, so an existing file fails with
    DestinationExists and is left untouched. Any failure after the file is
    created removes it again. Returns the number of bytes written; raises
    exactly one of SourceReadError, DestinationWriteError or
    DestinationExists (or the source's own ImgCacheError) on failure.
    """
    destination = Path(destination)
    if create_parents:
        try:
            await asyncio.to_thread(destination.parent.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            await _close_source(source)
            raise DestinationWriteError(
                f"Cannot create parent of {destination}: {e}", path=destination, original=e
            ) from e

    try:
        out = await asyncio.to_thread(_open_exclusive, destination)
    except FileExistsError as e:
        await _close_source(source)
        raise DestinationExists(destination, e) from e
    except OSError as e:
        await _close_source(source)
        raise DestinationWriteError(
            f"Cannot create {destination}: {e}", path=destination, original=e
        ) from e

    completed = False
    try:
        written = await _pump(source, out, destination)
        try:
            await asyncio.to_thread(out.close)
        except OSError as e:
            raise DestinationWriteError(
                f"Cannot finish {destination}: {e}", path=destination, original=e
            ) from e
        completed = True
    finally:
        if not completed:
            # First error wins; cleanup errors are not reported
            with contextlib.suppress(OSError):
                out.close()
            _discard(destination)
        await _close_source(source)

    logger.debug("Wrote %d bytes to %s", written, destination)
    return written


async def _pump(source: AsyncIterator[bytes], out: BinaryIO, destination: Path) -> int:
    written = 0
    while True:
        try:
            chunk = await anext(source)
        except StopAsyncIteration:
            return written
        except OSError as e:
            raise SourceReadError(f"Error reading source: {e}", original=e) from e

        try:
            await asyncio.to_thread(out.write, chunk)
        except OSError as e:
            raise DestinationWriteError(
                f"Error writing {destination}: {e}", path=destination, original=e
            ) from e
        written += len(chunk)


def _open_exclusive(destination: Path) -> BinaryIO:
    fd = os.open(destination, _EXCLUSIVE_FLAGS, 0o644)
    return os.fdopen(fd, "wb")


def _discard(destination: Path) -> None:
    try:
        destination.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove incomplete %s: %s", destination, e)


async def _close_source(source: AsyncIterator[bytes]) -> None:
    aclose = getattr(source, "aclose", None)
    if aclose is not None:
        await aclose()
