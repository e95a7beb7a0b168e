"""Per-mount handler: captures a content source response and rewrites HTML."""

from __future__ import annotations

import logging
from urllib.parse import quote

from zimmount.core.errors import HtmlRewriteError
from zimmount.core.interfaces import ResponseSinkPort
from zimmount.core.models import Mount, RewriteContext
from zimmount.rewrite.capture import ResponseCapture
from zimmount.rewrite.content_types import correct_content_type
from zimmount.rewrite.html import HtmlRewriter, parse_charset
from zimmount.rewrite.paths import current_dir

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"

# Request paths arrive decoded; references in documents are percent-encoded
_PATH_SAFE = "/:@!$&'()*+,;="


class MountHandler:
    """Serves one mount, keeping links inside rewritten HTML under its prefix."""

    def __init__(self, mount: Mount, rewriter: HtmlRewriter | None = None) -> None:
        self._mount = mount
        self._rewriter = rewriter or HtmlRewriter()

    @property
    def mount(self) -> Mount:
        """The mount this handler serves."""
        return self._mount

    def handle(self, request_path: str, sink: ResponseSinkPort) -> None:
        """Serve a request path within the mount into the given sink.

        Successful responses get their content type corrected; HTML bodies
        are rewritten. If rewriting fails the original body is sent with
        the corrected content type. Content source errors propagate.
        """
        capture = ResponseCapture()
        self._mount.content_source.serve(request_path).write_to(capture)

        body = capture.body
        content_type = capture.get_header("Content-Type")

        if capture.status_code == 200:
            content_type = correct_content_type(request_path, content_type)
            if content_type.lower().startswith("text/html"):
                prefix = self._mount.url_prefix
                context = RewriteContext(
                    mount_prefix=prefix,
                    current_dir=current_dir(prefix, quote(request_path, safe=_PATH_SAFE)),
                )
                try:
                    body = self._rewriter.rewrite(body, context, parse_charset(content_type))
                    content_type = HTML_CONTENT_TYPE
                except HtmlRewriteError as e:
                    logger.warning(
                        "Serving %s%s without link rewriting: %s",
                        self._mount.url_prefix,
                        request_path.lstrip("/"),
                        e,
                    )

        capture.flush(sink, body=body, content_type=content_type)
