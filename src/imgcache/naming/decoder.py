"""Cache filename decoding — ``<width>x<height>_<crop|resize>_<original>``."""

from __future__ import annotations

import logging
import re

from imgcache.errors.exceptions import InvalidTransformParameters
from imgcache.types import DecodedFilename, Operation, PassthroughRequest, TransformSpec

logger = logging.getLogger(__name__)

_TRANSFORM_PATTERN = re.compile(r"([0-9]+)x([0-9]+)_(crop|resize)_(.+)", re.DOTALL)


def decode_filename(filename: str) -> DecodedFilename:
    """Decode a requested cache filename.

    ``"200x200_crop_test.jpg"`` decodes to a crop TransformSpec for
    ``test.jpg``; anything that does not match the whole pattern is a
    passthrough of the name as given. Dimensions are not range checked,
    but digit strings too long to become an int raise
    InvalidTransformParameters.
    """
    match = _TRANSFORM_PATTERN.fullmatch(filename)
    if match is None:
        logger.debug("'%s' has no transform prefix, passing through", filename)
        return PassthroughRequest(filename=filename)

    width, height, operation, original = match.groups()
    try:
        dimensions = int(width), int(height)
    except ValueError:
        # Digit strings beyond the interpreter's int conversion limit
        raise InvalidTransformParameters(
            f"Dimensions in '{filename[:64]}...' are too long to parse"
        ) from None

    spec = TransformSpec(
        operation=Operation(operation),
        width=dimensions[0],
        height=dimensions[1],
        original_filename=original,
    )
    logger.debug("Decoded '%s' as %s", filename, spec)
    return spec


def encode_filename(operation: Operation | str, width: int, height: int, original: str) -> str:
    """Build the cache filename that decodes back to the given transform."""
    return f"{width}x{height}_{Operation(operation).value}_{original}"
