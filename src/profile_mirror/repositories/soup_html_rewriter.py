"""BeautifulSoup implementation of HtmlRewriter."""

import re

from bs4 import BeautifulSoup

BODY_CLOSE = re.compile(r"</body\s*>", re.IGNORECASE)


class SoupHtmlRewriter:
    """Appends elements to ``<body>`` using BeautifulSoup to build them.

    Only the new elements are serialized. They are spliced in before the
    last ``</body>`` of the original text, which is otherwise left
    byte-for-byte as received (void tags, entities and attribute spelling
    included). Documents without a closing body tag get the elements
    appended at the end. Script and style contents are emitted verbatim.
    """

    def append_to_body(self, html: str, fragments: list[tuple[str, str]]) -> str:
        soup = BeautifulSoup("", "html.parser")
        rendered = []
        for tag_name, text in fragments:
            element = soup.new_tag(tag_name)
            element.string = text
            rendered.append(str(element))
        injected = "".join(rendered)

        body_close = None
        for body_close in BODY_CLOSE.finditer(html):
            pass
        if body_close is None:
            return html + injected

        return html[: body_close.start()] + injected + html[body_close.start():]
