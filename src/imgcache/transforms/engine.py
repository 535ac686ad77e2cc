"""Transform engines — pixel-level crop/resize behind a stream interface."""

from __future__ import annotations

import io
import logging
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO, Protocol

from PIL import Image, ImageOps

from imgcache.config.defaults import DEFAULT_JPEG_QUALITY, DEFAULT_MAX_DIMENSION
from imgcache.types import Operation

logger = logging.getLogger(__name__)


class TransformEngine(Protocol):
    """Anything that turns a source image into a readable transformed stream."""

    def transform(
        self, source_path: Path, operation: Operation, width: int, height: int
    ) -> BinaryIO: ...


# Registry of Pillow implementations per operation
_OPERATION_REGISTRY: dict[Operation, Callable[[Image.Image, tuple[int, int]], Image.Image]] = {}


def _register(operation: Operation) -> Callable:
    """Decorator to register a Pillow implementation of an operation."""
    def decorator(
        fn: Callable[[Image.Image, tuple[int, int]], Image.Image],
    ) -> Callable[[Image.Image, tuple[int, int]], Image.Image]:
        _OPERATION_REGISTRY[operation] = fn
        return fn
    return decorator


@_register(Operation.CROP)
def crop(img: Image.Image, size: tuple[int, int]) -> Image.Image:
    """Scale to cover ``size`` and centre-crop to exactly ``size``."""
    return ImageOps.fit(img, size, Image.Resampling.LANCZOS)


@_register(Operation.RESIZE)
def resize(img: Image.Image, size: tuple[int, int]) -> Image.Image:
    """Scale so the whole image fits inside ``size``, keeping aspect ratio."""
    return ImageOps.contain(img, size, Image.Resampling.LANCZOS)


class PillowTransformEngine:
    """Default engine: Pillow crop/resize, JPEG-encoded into memory."""

    def __init__(
        self,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY,
        max_dimension: int = DEFAULT_MAX_DIMENSION,
    ) -> None:
        self._jpeg_quality = jpeg_quality
        self._max_dimension = max_dimension

    def transform(
        self, source_path: Path, operation: Operation, width: int, height: int
    ) -> BinaryIO:
        if max(width, height) > self._max_dimension:
            raise ValueError(
                f"Requested {width}x{height} exceeds max dimension {self._max_dimension}"
            )
        apply = _OPERATION_REGISTRY[Operation(operation)]

        with Image.open(source_path) as img:
            oriented = ImageOps.exif_transpose(img)
            result = apply(oriented, (width, height))
            if result.mode not in ("RGB", "L"):
                result = result.convert("RGB")

            buf = io.BytesIO()
            result.save(buf, format="JPEG", quality=self._jpeg_quality)

        logger.debug(
            "%s %s -> %dx%d (%d bytes)", operation, source_path, *result.size, buf.tell()
        )
        buf.seek(0)
        return buf
