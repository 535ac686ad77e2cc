"""Shared Pydantic models for imgcache."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

from imgcache.errors.exceptions import ImgCacheError

# ── Enums ──


class Operation(StrEnum):
    CROP = "crop"
    RESIZE = "resize"


# ── Request models ──


class CacheRequest(BaseModel):
    """Input to one orchestration run."""

    model_config = ConfigDict(frozen=True)

    source_dir: str
    cache_dir: str
    filename: str


class TransformSpec(BaseModel):
    """A cache filename of the form ``<w>x<h>_<op>_<original>``.

    Width and height are whatever the filename encodes; range checks
    happen in the transform invoker, not here.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["transform"] = "transform"
    operation: Operation
    width: int
    height: int
    original_filename: str


class PassthroughRequest(BaseModel):
    """A cache filename that names a master file to copy unmodified."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["passthrough"] = "passthrough"
    filename: str


DecodedFilename = TransformSpec | PassthroughRequest


class SignatureRule(BaseModel):
    """Leading-byte pattern identifying a supported image format."""

    model_config = ConfigDict(frozen=True)

    format_name: str
    magic: bytes

    @property
    def length(self) -> int:
        return len(self.magic)

    def matches(self, header: bytes) -> bool:
        return header == self.magic


# ── Result models ──


class Outcome(BaseModel):
    """Result of one cache request, delivered exactly once."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    succeeded: bool
    error: ImgCacheError | None = None
    destination: Path | None = None

    @classmethod
    def ok(cls, destination: Path | None = None) -> Outcome:
        return cls(succeeded=True, destination=destination)

    @classmethod
    def failed(cls, error: ImgCacheError) -> Outcome:
        return cls(succeeded=False, error=error)
