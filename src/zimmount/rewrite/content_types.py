"""Content-type correction for archive assets with missing or generic types."""

from __future__ import annotations

import posixpath

# Extension -> (expected media type, corrected content type)
_EXTENSION_TYPES: dict[str, tuple[str, str]] = {
    ".css": ("text/css", "text/css; charset=utf-8"),
    ".js": ("application/javascript", "application/javascript; charset=utf-8"),
    ".png": ("image/png", "image/png"),
    ".jpg": ("image/jpeg", "image/jpeg"),
    ".jpeg": ("image/jpeg", "image/jpeg"),
    ".gif": ("image/gif", "image/gif"),
}

_GENERIC_TYPES = frozenset({"", "text/plain"})


def correct_content_type(path: str, declared: str) -> str:
    """Return the content type to send for a path.

    If the extension maps to a well-known type and the declared type is
    empty, text/plain, or of a different media type, the well-known type
    wins. Otherwise the declared type is returned unchanged.
    """
    extension = posixpath.splitext(path.lower())[1]
    known = _EXTENSION_TYPES.get(extension)
    if known is None:
        return declared

    expected, corrected = known
    media_type = declared.split(";", 1)[0].strip().lower()
    if media_type in _GENERIC_TYPES or not media_type.startswith(expected):
        return corrected
    return declared
