"""Image format validation by magic-byte signature."""

from __future__ import annotations

import asyncio
import logging
import os
import stat
from pathlib import Path

from imgcache.errors.exceptions import NotAFile, ReadError, SignatureMismatch, UnsupportedFormat
from imgcache.types import SignatureRule

logger = logging.getLogger(__name__)

# Registry of supported formats, keyed by format name
_SIGNATURE_REGISTRY: dict[str, SignatureRule] = {}


def register_signature(format_name: str, magic: bytes) -> SignatureRule:
    """Register the leading bytes that identify ``format_name``."""
    if not magic:
        raise ValueError(f"Empty signature for format '{format_name}'")
    rule = SignatureRule(format_name=format_name, magic=bytes(magic))
    _SIGNATURE_REGISTRY[format_name] = rule
    return rule


def get_signature(format_name: str) -> SignatureRule:
    rule = _SIGNATURE_REGISTRY.get(format_name)
    if rule is None:
        raise UnsupportedFormat(format_name)
    return rule


def list_signatures() -> list[SignatureRule]:
    return sorted(_SIGNATURE_REGISTRY.values(), key=lambda r: r.format_name)


register_signature("jpeg", b"\xff\xd8")


async def verify_image_format(path: str | Path, format_name: str = "jpeg") -> SignatureRule:
    """Check that ``path`` is a regular file starting with the format's signature.

    Exactly one result per call: the matched rule is returned, or one of
    UnsupportedFormat, NotAFile, ReadError or SignatureMismatch is raised.
    """
    rule = get_signature(format_name)
    path = Path(path)

    if not await asyncio.to_thread(_is_regular_file, path):
        raise NotAFile(path)

    try:
        header = await asyncio.to_thread(_read_header, path, rule.length)
    except OSError as e:
        raise ReadError(path, e) from e

    if not rule.matches(header):
        raise SignatureMismatch(path, format_name, header)

    logger.debug("%s verified as %s", path, format_name)
    return rule


def _is_regular_file(path: Path) -> bool:
    try:
        return stat.S_ISREG(os.stat(path).st_mode)
    except (OSError, ValueError):
        return False


def _read_header(path: Path, length: int) -> bytes:
    # Short files yield fewer bytes and fail the comparison
    with open(path, "rb") as f:
        return f.read(length)
