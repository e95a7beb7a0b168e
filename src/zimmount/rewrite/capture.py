"""Response capture: buffers status, headers and body until flushed."""

from __future__ import annotations

import logging

from zimmount.core.errors import ResponseCaptureError
from zimmount.core.interfaces import ResponseSinkPort

logger = logging.getLogger(__name__)

# Headers recomputed on flush rather than copied from the capture
_RECOMPUTED_HEADERS = frozenset({"content-type", "content-length"})


class ResponseCapture(ResponseSinkPort):
    """Response sink that holds everything in memory.

    The content source writes into the capture exactly as it would write
    into a real response. The owner inspects the buffered state, decides
    on the final body and content type, and then calls flush() once to
    emit a single status, header set and body into the real sink.
    """

    def __init__(self) -> None:
        self._headers: dict[str, tuple[str, str]] = {}
        self._status_code: int | None = None
        self._body = bytearray()
        self._flushed = False

    @property
    def status_code(self) -> int:
        """Captured status code (200 if none was written)."""
        return self._status_code if self._status_code is not None else 200

    @property
    def headers(self) -> dict[str, str]:
        """Captured headers with their original name casing."""
        return dict(self._headers.values())

    @property
    def body(self) -> bytes:
        """Captured body bytes."""
        return bytes(self._body)

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive lookup of a captured header."""
        entry = self._headers.get(name.lower())
        return entry[1] if entry is not None else default

    def set_header(self, name: str, value: str) -> None:
        self._check_open()
        self._headers[name.lower()] = (name, value)

    def write_status(self, status_code: int) -> None:
        self._check_open()
        if self._status_code is not None:
            logger.debug(
                "Ignoring superfluous status %d (already %d)", status_code, self._status_code
            )
            return
        self._status_code = status_code

    def write(self, data: bytes) -> None:
        self._check_open()
        self._body.extend(data)

    def flush(
        self,
        sink: ResponseSinkPort,
        body: bytes | None = None,
        content_type: str | None = None,
    ) -> None:
        """Emit the captured response into the real sink.

        Args:
            sink: The real response sink.
            body: Final body; defaults to the captured body.
            content_type: Final content type; defaults to the captured one.

        Raises:
            ResponseCaptureError: If the capture was already flushed.
        """
        self._check_open()
        self._flushed = True

        final_body = self.body if body is None else body
        final_type = self.get_header("Content-Type") if content_type is None else content_type

        for key, (name, value) in self._headers.items():
            if key in _RECOMPUTED_HEADERS:
                continue
            sink.set_header(name, value)
        if final_type:
            sink.set_header("Content-Type", final_type)
        sink.set_header("Content-Length", str(len(final_body)))
        sink.write_status(self.status_code)
        sink.write(final_body)

    def _check_open(self) -> None:
        if self._flushed:
            raise ResponseCaptureError("Response capture has already been flushed")
