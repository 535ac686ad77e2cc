"""Error handling — one hierarchy for every failure an orchestration run can report."""

from imgcache.errors.exceptions import (
    ArgumentValidationError,
    DestinationExists,
    DestinationWriteError,
    ImgCacheError,
    InvalidDirectory,
    InvalidRequestPath,
    InvalidTransformParameters,
    NotAFile,
    ReadError,
    SignatureMismatch,
    SourceReadError,
    TransformEngineFailure,
    UnsupportedFormat,
)

__all__ = [
    "ImgCacheError",
    "ArgumentValidationError",
    "InvalidDirectory",
    "InvalidRequestPath",
    "UnsupportedFormat",
    "NotAFile",
    "ReadError",
    "SignatureMismatch",
    "SourceReadError",
    "DestinationWriteError",
    "DestinationExists",
    "InvalidTransformParameters",
    "TransformEngineFailure",
]
