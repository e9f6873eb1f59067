"""Content-type aware decoding and rewriting of upstream bodies.

Bodies are first decoded according to their declared content type,
then textual results go through the literal rewrite rules. Binary
categories (fonts, images) are never rewritten, even if their bytes
happen to contain a rule's match string.
"""

import json
import math
from enum import Enum

from profile_mirror.entities import RewriteRule
from profile_mirror.errors import ContentDecodeError
from profile_mirror.protocols import HtmlRewriter


class ContentCategory(str, Enum):
    """Closed set of content categories the transformer distinguishes."""

    JSON = "json"
    HTML = "html"
    SCRIPT = "script"
    STYLE = "style"
    FONT = "font"
    IMAGE = "image"
    PLAIN_TEXT = "plain_text"

    @property
    def is_textual(self) -> bool:
        return self not in (ContentCategory.FONT, ContentCategory.IMAGE)


# Most specific markers first; the first category with a matching marker wins
_CATEGORY_MARKERS: tuple[tuple[ContentCategory, tuple[str, ...]], ...] = (
    (ContentCategory.JSON, ("application/json",)),
    (ContentCategory.HTML, ("text/html",)),
    (ContentCategory.SCRIPT, ("javascript", "ecmascript")),
    (ContentCategory.STYLE, ("text/css",)),
    (ContentCategory.FONT, ("font",)),
    (ContentCategory.IMAGE, ("image",)),
)


def classify_content_type(content_type: str | None) -> ContentCategory:
    """Classify a raw Content-Type header value.

    Matching is by substring containment, so parameters such as
    ``; charset=utf-8`` do not affect the result.

    Args:
        content_type: Header value, or None when absent

    Returns:
        The matching category; PLAIN_TEXT when absent or unmatched
    """
    if not content_type:
        return ContentCategory.PLAIN_TEXT

    lowered = content_type.lower()
    for category, markers in _CATEGORY_MARKERS:
        if any(marker in lowered for marker in markers):
            return category
    return ContentCategory.PLAIN_TEXT


class ContentTransformer:
    """Decodes bodies by content category and applies rewrite rules.

    Example:
        ```python
        transformer = ContentTransformer(
            rules=load_rewrite_rules(settings),
            html_rewriter=SoupHtmlRewriter(),
            inject_css="body { background: #fff; }",
        )
        body = transformer.render(response.content, response.content_type)
        ```
    """

    def __init__(
        self,
        rules: list[RewriteRule],
        html_rewriter: HtmlRewriter,
        inject_css: str = "",
        inject_js: str = "",
    ) -> None:
        """Initialize the transformer.

        Args:
            rules: Ordered rewrite rules.
            html_rewriter: Capability used to append fragments to <body>.
            inject_css: Contents of the injected <style> block.
            inject_js: Contents of the injected <script> block.
        """
        self._rules = list(rules)
        self._html_rewriter = html_rewriter
        self._fragments = [("style", inject_css), ("script", inject_js)]

    def transform(self, body: bytes, content_type: str | None) -> str | bytes:
        """Decode a body into text or opaque bytes according to its category.

        Args:
            body: Raw response bytes
            content_type: Declared Content-Type, or None

        Returns:
            Text for textual categories, the untouched bytes for fonts and images

        Raises:
            ContentDecodeError: If a JSON body cannot be parsed
        """
        category = classify_content_type(content_type)

        if category is ContentCategory.JSON:
            try:
                value = json.loads(body, parse_constant=_reject_constant, parse_float=_parse_float)
                return json.dumps(value, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
            except ValueError as e:
                raise ContentDecodeError(f"Malformed JSON body: {e}") from e

        if category is ContentCategory.HTML:
            return self._html_rewriter.append_to_body(_decode_text(body), self._fragments)

        if not category.is_textual:
            return body

        return _decode_text(body)

    def rewrite(self, text: str) -> str:
        """Apply every rule, in order, as a global literal replacement."""
        for rule in self._rules:
            text = rule.apply(text)
        return text

    def render(self, body: bytes, content_type: str | None) -> str | bytes:
        """Transform a body and rewrite it if the result is text."""
        result = self.transform(body, content_type)
        if isinstance(result, str):
            return self.rewrite(result)
        return result

    @property
    def rules(self) -> list[RewriteRule]:
        """Get the rewrite rules (for testing)."""
        return list(self._rules)


def _decode_text(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


def _parse_float(text: str) -> float | None:
    # Overflowing literals such as 1e999 serialize as null
    value = float(text)
    return value if math.isfinite(value) else None


def _reject_constant(name: str) -> float:
    # NaN and Infinity are not JSON
    raise ValueError(f"Invalid JSON constant {name}")
