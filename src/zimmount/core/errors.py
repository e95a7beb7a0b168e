"""Error hierarchy for zimmount."""

from __future__ import annotations


class ZimmountError(Exception):
    """Base exception for all zimmount errors."""

    pass


class ConfigError(ZimmountError):
    """Configuration loading or validation error."""

    pass


class ArchiveOpenError(ZimmountError):
    """An archive file could not be opened as a content source."""

    pass


class ContentSourceError(ZimmountError):
    """A content source failed while serving a request."""

    pass


class ResolveError(ZimmountError):
    """A reference could not be resolved against a base directory."""

    pass


class HtmlRewriteError(ZimmountError):
    """An HTML body could not be parsed or serialized for rewriting."""

    pass


class ResponseCaptureError(ZimmountError):
    """A captured response was used after it was flushed."""

    pass
