"""ZIM archive content source backed by libzim.

libzim's reader is not thread-safe, so every call into one Archive is
serialized by a per-archive lock.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from urllib.parse import quote

from libzim.reader import Archive

from zimmount.core.errors import ArchiveOpenError, ContentSourceError
from zimmount.core.interfaces import ContentSourcePort
from zimmount.core.models import DEFAULT_DESCRIPTION, ArchiveMetadata, SourceResponse

logger = logging.getLogger(__name__)


class ZimContentSource(ContentSourcePort):
    """Serves entries of one ZIM archive by path."""

    def __init__(self, archive: Archive, file_name: str) -> None:
        self._archive = archive
        self._file_name = file_name
        self._lock = threading.Lock()

    @classmethod
    def open(cls, path: Path) -> ZimContentSource:
        """Open a ZIM file.

        Raises:
            ArchiveOpenError: If the file is not a readable ZIM archive.
        """
        try:
            archive = Archive(str(path))
        except Exception as e:
            raise ArchiveOpenError(f"Failed to open ZIM file {path.name!r}: {e}") from e
        return cls(archive, path.name)

    def serve(self, request_path: str) -> SourceResponse:
        """Look up an entry; the mount root redirects to the main page."""
        path = request_path.lstrip("/")
        with self._lock:
            try:
                if not path:
                    return self._main_page_redirect()
                return self._entry_response(path)
            except RuntimeError as e:
                raise ContentSourceError(
                    f"Failed to read {path!r} from {self._file_name}: {e}"
                ) from e

    def metadata(self) -> ArchiveMetadata:
        """Title of the main page and the Description metadata, with fallbacks."""
        title = self._file_name
        description = DEFAULT_DESCRIPTION
        with self._lock:
            try:
                raw = self._archive.get_metadata("Description")
                text = bytes(raw).decode("utf-8", "replace").strip()
                if text:
                    description = text
            except (KeyError, RuntimeError):
                logger.debug("No Description metadata in %s", self._file_name)

            try:
                if self._archive.has_main_entry and self._archive.main_entry.title:
                    title = self._archive.main_entry.title
            except RuntimeError:
                logger.debug("No main page title in %s", self._file_name)

        return ArchiveMetadata(file_name=self._file_name, title=title, description=description)

    def _main_page_redirect(self) -> SourceResponse:
        if not self._archive.has_main_entry:
            return _not_found("")
        entry = self._archive.main_entry
        if entry.is_redirect:
            entry = entry.get_redirect_entry()
        return _redirect("", entry.path)

    def _entry_response(self, path: str) -> SourceResponse:
        try:
            entry = self._archive.get_entry_by_path(path)
        except KeyError:
            return _not_found(path)
        if entry.is_redirect:
            return _redirect(path, entry.get_redirect_entry().path)
        item = entry.get_item()
        return SourceResponse(body=bytes(item.content), content_type=item.mimetype or "")


def _redirect(from_path: str, to_path: str) -> SourceResponse:
    # Relative to the directory of from_path, so it stays under the mount prefix
    up = "../" * from_path.count("/")
    return SourceResponse(status_code=302, headers={"Location": up + quote(to_path)})


def _not_found(path: str) -> SourceResponse:
    return SourceResponse(
        status_code=404,
        body=f"Not found: /{path}\n".encode(),
        content_type="text/plain; charset=utf-8",
    )
