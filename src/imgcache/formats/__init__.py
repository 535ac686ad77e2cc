"""Format validation — magic-byte signatures for supported image formats."""

from imgcache.formats.signatures import (
    get_signature,
    list_signatures,
    register_signature,
    verify_image_format,
)

__all__ = ["get_signature", "list_signatures", "register_signature", "verify_image_format"]
