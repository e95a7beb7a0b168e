"""Port interfaces for zimmount (hexagonal architecture)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from zimmount.core.models import ArchiveMetadata, SourceResponse


class ResponseSinkPort(ABC):
    """Port for the outbound side of one HTTP response."""

    @abstractmethod
    def set_header(self, name: str, value: str) -> None:
        """Set a response header, replacing any previous value.

        Args:
            name: Header name (case-insensitive).
            value: Header value.
        """

    @abstractmethod
    def write_status(self, status_code: int) -> None:
        """Write the response status code.

        Args:
            status_code: HTTP status code.
        """

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Write a chunk of the response body.

        Args:
            data: Body bytes to append.
        """


class ContentSourcePort(ABC):
    """Port for a read-only, path-addressed archive of documents."""

    @abstractmethod
    def serve(self, request_path: str) -> SourceResponse:
        """Look up a request path within the archive.

        Args:
            request_path: Path relative to the mount root ("" or "/" is the root).

        Returns:
            SourceResponse with status, headers, body and declared content type.

        Raises:
            ContentSourceError: If the archive cannot be read.
        """

    @abstractmethod
    def metadata(self) -> ArchiveMetadata:
        """Return descriptive metadata for the dashboard."""
