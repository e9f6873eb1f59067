"""HTML rewriter protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class HtmlRewriter(Protocol):
    """Capability that inserts fragments at the end of a document body."""

    def append_to_body(self, html: str, fragments: list[tuple[str, str]]) -> str:
        """Append elements just before the close of ``<body>``.

        Args:
            html: The document
            fragments: (tag name, text content) pairs, appended in order

        Returns:
            The rewritten document
        """
        ...
