"""Response sink that turns the final flushed response into a Starlette Response."""

from __future__ import annotations

from starlette.responses import Response

from zimmount.core.interfaces import ResponseSinkPort


class StarletteResponseSink(ResponseSinkPort):
    """Collects one status, header set and body, then builds a Response."""

    def __init__(self) -> None:
        self._headers: dict[str, str] = {}
        self._status_code = 200
        self._chunks: list[bytes] = []

    def set_header(self, name: str, value: str) -> None:
        for existing in list(self._headers):
            if existing.lower() == name.lower():
                del self._headers[existing]
        self._headers[name] = value

    def write_status(self, status_code: int) -> None:
        self._status_code = status_code

    def write(self, data: bytes) -> None:
        self._chunks.append(data)

    def to_response(self) -> Response:
        """Build the Starlette response from what was written."""
        return Response(
            content=b"".join(self._chunks),
            status_code=self._status_code,
            headers=self._headers,
        )
