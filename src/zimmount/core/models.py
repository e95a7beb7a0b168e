"""Domain models for zimmount."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from zimmount.core.interfaces import ResponseSinkPort

DEFAULT_DESCRIPTION = "Offline ZIM content"


def _require_dir_url(value: str) -> str:
    if not value or not value.startswith("/") or not value.endswith("/"):
        raise ValueError(f"Expected an absolute URL path ending with '/': {value!r}")
    return value


class ArchiveMetadata(BaseModel):
    """Descriptive metadata read from an archive when it is opened."""

    model_config = ConfigDict(frozen=True)

    file_name: str = Field(description="Archive file name (e.g. wikipedia.zim)")
    title: str = Field(description="Title of the archive's main page")
    description: str = Field(default=DEFAULT_DESCRIPTION, description="Archive description")


class Mount(BaseModel):
    """One archive served under a fixed URL prefix."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(description="Mount name (archive file name without extension)")
    url_prefix: str = Field(description="Absolute URL prefix, e.g. /zim/wikipedia/")
    content_source: Any = Field(description="ContentSourcePort serving the archive")
    metadata: ArchiveMetadata | None = Field(default=None, description="Metadata snapshot")

    @field_validator("url_prefix")
    @classmethod
    def validate_url_prefix(cls, v: str) -> str:
        """Validate the prefix is absolute and ends with a slash."""
        return _require_dir_url(v)


class MountEntry(BaseModel):
    """Read-only dashboard listing for one mount."""

    file_name: str
    title: str
    description: str
    access_url: str


class WebSite(BaseModel):
    """A custom static site listed on the dashboard."""

    name: str
    access_url: str


class RewriteContext(BaseModel):
    """Per-request URL context used to rewrite references in one document."""

    model_config = ConfigDict(frozen=True)

    mount_prefix: str = Field(description="URL prefix the mount is served under")
    current_dir: str = Field(description="URL prefix relative references resolve against")

    @field_validator("mount_prefix", "current_dir")
    @classmethod
    def validate_dir_url(cls, v: str) -> str:
        """Both values must be non-empty absolute paths ending with a slash."""
        return _require_dir_url(v)


class SourceResponse(BaseModel):
    """What a content source returns for one request path."""

    status_code: int = Field(default=200, description="HTTP status code")
    headers: dict[str, str] = Field(default_factory=dict, description="Extra response headers")
    body: bytes = Field(default=b"", description="Response body")
    content_type: str = Field(default="", description="Declared content type, may be empty")

    def write_to(self, sink: ResponseSinkPort) -> None:
        """Replay this response onto a response sink."""
        for name, value in self.headers.items():
            sink.set_header(name, value)
        if self.content_type:
            sink.set_header("Content-Type", self.content_type)
        sink.write_status(self.status_code)
        if self.body:
            sink.write(self.body)
