"""Shared test fixtures for zimmount."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from zimmount.config import ZimmountConfig
from zimmount.core.interfaces import ContentSourcePort, ResponseSinkPort
from zimmount.core.models import ArchiveMetadata, Mount, SourceResponse
from zimmount.mounts.registry import MountRegistry

WIKI_PREFIX = "/zim/wiki/"

EINSTEIN_HTML = b"""<!DOCTYPE html>
<html>
<head>
<title>Einstein</title>
<link rel="stylesheet" href="../-/style.css">
</head>
<body>
<a href="../B/Other.html">Other</a>
<a href="/A/Einstein.html">Self</a>
<a href="https://example.org/x">External</a>
<a href="#section">Section</a>
<img src="../I/photo.png">
</body>
</html>
"""


class DictContentSource(ContentSourcePort):
    """In-memory content source: path -> (body, content type)."""

    def __init__(
        self,
        files: dict[str, tuple[bytes, str]],
        file_name: str = "wiki.zim",
        title: str = "Test Wiki",
    ) -> None:
        self.files = files
        self.file_name = file_name
        self.title = title
        self.requests: list[str] = []

    def serve(self, request_path: str) -> SourceResponse:
        self.requests.append(request_path)
        path = request_path.lstrip("/")
        if path not in self.files:
            return SourceResponse(status_code=404, body=b"Not found", content_type="text/plain")
        body, content_type = self.files[path]
        return SourceResponse(body=body, content_type=content_type)

    def metadata(self) -> ArchiveMetadata:
        return ArchiveMetadata(file_name=self.file_name, title=self.title)


class RecordingSink(ResponseSinkPort):
    """Response sink that records every call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []
        self.headers: dict[str, str] = {}
        self.status_code: int | None = None
        self.body = b""

    def set_header(self, name: str, value: str) -> None:
        self.calls.append(("set_header", (name, value)))
        self.headers[name] = value

    def write_status(self, status_code: int) -> None:
        self.calls.append(("write_status", status_code))
        self.status_code = status_code

    def write(self, data: bytes) -> None:
        self.calls.append(("write", data))
        self.body += data


@pytest.fixture()
def sink() -> RecordingSink:
    """A fresh recording sink."""
    return RecordingSink()


@pytest.fixture()
def wiki_files() -> dict[str, tuple[bytes, str]]:
    """A small archive: one article, one stylesheet, one image."""
    return {
        "A/Einstein.html": (EINSTEIN_HTML, "text/html"),
        "B/Other.html": (b"<html><head></head><body>Other</body></html>", "text/html"),
        "-/style.css": (b"body { color: black; }", "text/plain"),
        "I/photo.png": (b"\x89PNG\r\n\x1a\n", "image/png"),
    }


@pytest.fixture()
def make_mount() -> Callable[..., Mount]:
    """Factory for mounts backed by a DictContentSource."""

    def factory(
        files: dict[str, tuple[bytes, str]],
        name: str = "wiki",
        base_path: str = "/zim/",
    ) -> Mount:
        source = DictContentSource(files, file_name=f"{name}.zim")
        return Mount(
            name=name,
            url_prefix=f"{base_path}{name}/",
            content_source=source,
            metadata=source.metadata(),
        )

    return factory


@pytest.fixture()
def wiki_mount(make_mount: Callable[..., Mount], wiki_files: dict) -> Mount:
    """The wiki archive mounted at /zim/wiki/."""
    return make_mount(wiki_files)


@pytest.fixture()
def wiki_registry(wiki_mount: Mount) -> MountRegistry:
    """Registry holding only the wiki mount."""
    return MountRegistry([wiki_mount])


@pytest.fixture()
def test_config(tmp_path: Path) -> ZimmountConfig:
    """A config pointing at empty temp directories."""
    archives = tmp_path / "zim-content"
    static = tmp_path / "web-content"
    archives.mkdir()
    static.mkdir()
    return ZimmountConfig(archives_dir=str(archives), static_dir=str(static))
