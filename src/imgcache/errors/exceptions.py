"""Custom exception hierarchy for imgcache."""

from __future__ import annotations

from pathlib import Path


class ImgCacheError(Exception):
    """Base exception for all imgcache errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ArgumentValidationError(ImgCacheError, TypeError):
    """Entry point called with the wrong argument shape.

    Raised synchronously, never delivered through the completion callback.
    """


class InvalidDirectory(ImgCacheError):
    """Source or destination root is not an existing directory."""

    def __init__(self, path: str | Path, role: str = "source") -> None:
        label = "Master" if role == "source" else "Destination"
        super().__init__(f"{label} directory {path} is invalid")
        self.path = Path(path)
        self.role = role


class InvalidRequestPath(ImgCacheError):
    """Requested filename is empty or escapes its root directory."""

    def __init__(self, filename: str, root: str | Path | None = None) -> None:
        if root is None:
            message = f"Invalid request path: {filename!r}"
        else:
            message = f"Request path {filename!r} resolves outside {root}"
        super().__init__(message)
        self.filename = filename
        self.root = Path(root) if root is not None else None


# ── Format validation ──


class UnsupportedFormat(ImgCacheError):
    def __init__(self, format_name: str) -> None:
        super().__init__(f"{format_name} unsupported image format")
        self.format_name = format_name


class NotAFile(ImgCacheError):
    def __init__(self, path: str | Path) -> None:
        super().__init__(f"{path} is not a file")
        self.path = Path(path)


class ReadError(ImgCacheError):
    """Reading the signature bytes failed."""

    def __init__(self, path: str | Path, original: Exception | None = None) -> None:
        super().__init__(f"Cannot read {path}: {original}")
        self.path = Path(path)
        self.original = original


class SignatureMismatch(ImgCacheError):
    def __init__(self, path: str | Path, format_name: str, found: bytes = b"") -> None:
        super().__init__(f"{path} is not a valid {format_name.upper()} (header {found.hex() or 'empty'})")
        self.path = Path(path)
        self.format_name = format_name
        self.found = found


# ── Streaming ──


class SourceReadError(ImgCacheError):
    def __init__(self, message: str = "", original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


class DestinationWriteError(ImgCacheError):
    def __init__(
        self,
        message: str = "",
        path: str | Path | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None
        self.original = original


class DestinationExists(DestinationWriteError):
    """Exclusive create lost: another writer already owns the path."""

    def __init__(self, path: str | Path, original: Exception | None = None) -> None:
        super().__init__(f"Destination {path} already exists", path=path, original=original)


# ── Transforms ──


class InvalidTransformParameters(ImgCacheError):
    """Operation or dimensions rejected before reaching the engine."""


class TransformEngineFailure(ImgCacheError):
    def __init__(self, message: str = "", original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original
