"""HTML rewriting: base-tag injection and link rewriting for mounted documents."""

from __future__ import annotations

from email.message import EmailMessage

from bs4 import BeautifulSoup, Tag

from zimmount.core.errors import HtmlRewriteError
from zimmount.core.models import RewriteContext
from zimmount.rewrite.paths import is_excluded, rewrite_reference

DEFAULT_PARSER = "html.parser"

# Attributes holding hyperlink targets and embedded resource sources
REWRITTEN_ATTRIBUTES: tuple[str, ...] = ("href", "src")


def parse_charset(content_type: str) -> str | None:
    """Return the charset parameter of a Content-Type value, if any."""
    if not content_type:
        return None
    msg = EmailMessage()
    msg["content-type"] = content_type
    return msg["content-type"].params.get("charset") or None


class HtmlRewriter:
    """Rewrites the links of an HTML document for one mount.

    The document is parsed into a tree, a single <base href> pointing at the
    mount prefix is placed first in the head, every href/src attribute is
    rewritten, and the tree is serialized back to UTF-8 bytes.
    """

    def __init__(self, parser: str = DEFAULT_PARSER) -> None:
        self.parser = parser

    def rewrite(
        self,
        html_bytes: bytes,
        context: RewriteContext,
        declared_charset: str | None = None,
    ) -> bytes:
        """Rewrite an HTML body.

        Raises:
            HtmlRewriteError: If the body cannot be parsed or serialized.
        """
        soup = self._parse(html_bytes, declared_charset)
        self._transform(soup, context)
        return self._serialize(soup)

    def _parse(self, html_bytes: bytes, declared_charset: str | None) -> BeautifulSoup:
        try:
            return BeautifulSoup(html_bytes, self.parser, from_encoding=declared_charset)
        except Exception as e:
            raise HtmlRewriteError(f"Failed to parse HTML: {e}") from e

    def _transform(self, soup: BeautifulSoup, context: RewriteContext) -> None:
        """Pre-order walk of the tree, mutating it in place."""
        base_inserted = False
        stack: list[Tag] = [soup]
        while stack:
            node = stack.pop()

            if node.name == "head" and not base_inserted:
                for old in node.find_all("base"):
                    old.decompose()
                node.insert(0, soup.new_tag("base", attrs={"href": context.mount_prefix}))
                base_inserted = True

            for attr in REWRITTEN_ATTRIBUTES:
                value = node.get(attr)
                if not isinstance(value, str) or is_excluded(value):
                    continue
                node[attr] = rewrite_reference(value, context.mount_prefix, context.current_dir)

            # Reversed so the first child is popped next
            stack.extend(child for child in reversed(node.contents) if isinstance(child, Tag))

    def _serialize(self, soup: BeautifulSoup) -> bytes:
        try:
            return soup.encode("utf-8")
        except Exception as e:
            raise HtmlRewriteError(f"Failed to render HTML: {e}") from e
