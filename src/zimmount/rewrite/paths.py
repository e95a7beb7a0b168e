"""URL path resolution for references inside mounted documents.

All functions here are pure string manipulations. URL prefixes passed in
are absolute paths ending with a slash, e.g. "/zim/wikipedia/".
"""

from __future__ import annotations

import posixpath
import re
from urllib.parse import SplitResult, urljoin, urlsplit

from zimmount.core.errors import ResolveError

# References with these prefixes are never rewritten
EXCLUDED_PREFIXES: tuple[str, ...] = ("http://", "https://", "#", "mailto:")

# Placeholder origin so relative resolution works on bare paths
_DUMMY_ORIGIN = "http://dummyhost"

# A '%' not followed by two hex digits
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def is_excluded(reference: str) -> bool:
    """True for external, fragment and mailto references."""
    return reference.startswith(EXCLUDED_PREFIXES)


def namespace_root(mount_prefix: str) -> str:
    """Return the shared root all mount prefixes live under.

    "/zim/wikipedia/" -> "/zim/".
    """
    parent = posixpath.dirname(mount_prefix.rstrip("/"))
    return parent.rstrip("/") + "/"


def current_dir(mount_prefix: str, request_path: str) -> str:
    """Return the URL directory relative references in a document resolve against.

    Args:
        mount_prefix: URL prefix of the mount, e.g. "/zim/wiki/".
        request_path: Path of the document within the mount, e.g. "/A/Einstein.html".

    Returns:
        Absolute URL directory ending with a slash, e.g. "/zim/wiki/A/".
    """
    path = request_path.lstrip("/")
    if not path:
        return mount_prefix

    directory = posixpath.dirname(path).rstrip("/")
    if not directory:
        return mount_prefix
    return f"{mount_prefix}{directory}/"


def _split(url: str, what: str) -> SplitResult:
    if _BAD_ESCAPE.search(url):
        raise ResolveError(f"Invalid percent escape in {what} {url!r}")
    if _CONTROL_CHARS.search(url):
        raise ResolveError(f"Control character in {what} {url!r}")
    try:
        return urlsplit(url)
    except ValueError as e:
        raise ResolveError(f"Cannot parse {what} {url!r}: {e}") from e


def resolve_relative(base_dir: str, reference: str) -> str:
    """Resolve a reference against a base directory and return the path.

    Dot segments are collapsed; a reference starting with '/' replaces
    the whole path.

    Raises:
        ResolveError: If the base or the reference is not a valid
            relative or absolute-path URL.
    """
    base = _split(base_dir, "base")
    if base.scheme or base.netloc:
        raise ResolveError(f"Base must be a URL path, got {base_dir!r}")
    ref = _split(reference, "reference")
    if ref.scheme:
        raise ResolveError(f"Reference has its own scheme: {reference!r}")
    if ":" in ref.path.split("/", 1)[0]:
        raise ResolveError(f"Colon in first path segment of {reference!r}")

    try:
        joined = urljoin(_DUMMY_ORIGIN + base_dir, reference)
    except ValueError as e:
        raise ResolveError(f"Cannot resolve {reference!r} against {base_dir!r}: {e}") from e
    return urlsplit(joined).path or "/"


def _with_suffix(path: str, reference: str) -> str:
    """Re-attach the query and fragment of a reference to a resolved path."""
    parts = urlsplit(reference)
    if parts.query:
        path = f"{path}?{parts.query}"
    if parts.fragment:
        path = f"{path}#{parts.fragment}"
    return path


def rewrite_reference(reference: str, mount_prefix: str, current_dir: str) -> str:
    """Rewrite a reference so it resolves inside the mount.

    Already-prefixed references are returned unchanged, so rewriting is
    idempotent. Root-relative references are moved under the mount
    prefix. Relative references are resolved against current_dir; if the
    result escaped the mount (past the namespace root, or to the server
    root) it is re-rooted under the mount prefix. References that cannot
    be resolved are returned unchanged.
    """
    if is_excluded(reference):
        return reference
    if reference.startswith(mount_prefix):
        return reference
    if reference.startswith("/"):
        return mount_prefix + reference[1:]

    try:
        resolved = resolve_relative(current_dir, reference)
    except ResolveError:
        return reference

    if resolved.startswith(mount_prefix):
        return _with_suffix(resolved, reference)

    root = namespace_root(mount_prefix)
    if resolved.startswith(root):
        return _with_suffix(mount_prefix + resolved[len(root) :], reference)
    return _with_suffix(mount_prefix + resolved.lstrip("/"), reference)
