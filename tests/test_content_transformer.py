"""
Tests for content classification, decoding and rewriting.
"""

import json

import pytest

from profile_mirror.config import FLOATING_BAR_CLASS, FOOTER_CLASS, UPSTREAM_MAP_TOKEN, default_rewrite_rules
from profile_mirror.entities import RewriteRule
from profile_mirror.errors import ContentDecodeError
from profile_mirror.repositories import SoupHtmlRewriter
from profile_mirror.services import ContentCategory, ContentTransformer, classify_content_type

BASE_URL = "https://mirror.example.com"


@pytest.fixture
def transformer(test_settings):
    return ContentTransformer(
        rules=default_rewrite_rules(test_settings),
        html_rewriter=SoupHtmlRewriter(),
        inject_css=test_settings.inject_css,
        inject_js=test_settings.inject_js,
    )


@pytest.mark.parametrize(
    "content_type,expected",
    [
        (None, ContentCategory.PLAIN_TEXT),
        ("", ContentCategory.PLAIN_TEXT),
        ("application/json; charset=utf-8", ContentCategory.JSON),
        ("text/html; charset=UTF-8", ContentCategory.HTML),
        ("application/javascript", ContentCategory.SCRIPT),
        ("text/javascript", ContentCategory.SCRIPT),
        ("text/css", ContentCategory.STYLE),
        ("font/woff2", ContentCategory.FONT),
        ("image/png", ContentCategory.IMAGE),
        ("image/svg+xml", ContentCategory.IMAGE),
        ("application/manifest+json", ContentCategory.PLAIN_TEXT),
        ("text/plain", ContentCategory.PLAIN_TEXT),
    ],
)
def test_classify_content_type(content_type, expected):
    """Classification uses substring containment, ignoring parameters."""
    assert classify_content_type(content_type) is expected


def test_json_is_reserialized(transformer):
    """JSON is decoded and re-encoded in compact form."""
    result = transformer.transform(b'{ "a" : 1,\n "b": [1, 2] }', "application/json")
    assert result == '{"a":1,"b":[1,2]}'
    assert json.loads(result) == {"a": 1, "b": [1, 2]}


def test_malformed_json_raises(transformer):
    """A body claiming to be JSON but not parseable fails the request."""
    with pytest.raises(ContentDecodeError):
        transformer.transform(b"{not json", "application/json")


def test_html_gets_fragments_before_body_close(transformer):
    """A style block then a script block are appended at the end of <body>."""
    html = b"<html><head></head><body><p>profile</p></body></html>"
    result = transformer.transform(html, "text/html")

    assert "<p>profile</p>" in result
    assert "<style>body{margin:0}</style>" in result
    assert "<script>console.log('mirror')</script>" in result
    assert result.index("<p>profile</p>") < result.index("<style>") < result.index("<script>") < result.index("</body>")


def test_html_without_body_gets_fragments_appended(transformer):
    """Fragments still land in documents lacking a <body> element."""
    result = transformer.transform(b"<p>fragment</p>", "text/html")
    assert result.startswith("<p>fragment</p>")
    assert result.endswith("<script>console.log('mirror')</script>")


def test_images_and_fonts_stay_bytes(transformer):
    """Binary categories are returned untouched."""
    payload = b"\x89PNG" + b"https://api.bento.me"
    assert transformer.transform(payload, "image/png") is payload
    assert transformer.transform(payload, "font/woff2") is payload


def test_render_never_rewrites_images(transformer):
    """Image bytes containing a rule's match string are not substituted."""
    payload = b"\x89PNG https://api.bento.me " + UPSTREAM_MAP_TOKEN.encode()
    assert transformer.render(payload, "image/png") == payload


def test_absent_content_type_decodes_as_text(transformer):
    """Without a content type the body is treated as text and rewritten."""
    result = transformer.render(b"see https://api.bento.me/v1", None)
    assert result == f"see {BASE_URL}/api/v1"


def test_rewrite_rules(transformer, test_settings):
    """Every built-in rule is applied as a global literal replacement."""
    text = (
        f'fetch("https://api.bento.me/v1/a"); fetch("https://api.bento.me/v1/b");'
        f'img("https://storage.googleapis.com/b/x.png"); token="{UPSTREAM_MAP_TOKEN}";'
        f'<div class="{FOOTER_CLASS}"></div><a class="{FLOATING_BAR_CLASS}"></a>'
    )
    result = transformer.rewrite(text)

    assert "https://api.bento.me" not in result
    assert "https://storage.googleapis.com" not in result
    assert UPSTREAM_MAP_TOKEN not in result
    assert result.count(f"{BASE_URL}/api/v1/") == 2
    assert f"{BASE_URL}/googleapis_storage/b/x.png" in result
    assert f'token="{test_settings.map_token}"' in result
    assert '<div class="hidden"></div><a class="hidden"></a>' in result


def test_rewrite_is_idempotent(transformer):
    """Applying the rule list twice gives the same result as once."""
    text = f'https://api.bento.me/x {UPSTREAM_MAP_TOKEN} class="{FLOATING_BAR_CLASS}"'
    once = transformer.rewrite(text)
    assert transformer.rewrite(once) == once


def test_rule_order_matters():
    """Later rules see the output of earlier ones."""
    transformer = ContentTransformer(
        rules=[RewriteRule("a", "b"), RewriteRule("b", "c")],
        html_rewriter=SoupHtmlRewriter(),
    )
    assert transformer.rewrite("ab") == "cc"


def test_script_and_style_are_rewritten(transformer):
    """JavaScript and CSS bodies are decoded as text and rewritten."""
    js = transformer.render(b'const u="https://api.bento.me";', "application/javascript")
    css = transformer.render(b"a{background:url(https://storage.googleapis.com/x.png)}", "text/css")
    assert js == f'const u="{BASE_URL}/api";'
    assert css == f"a{{background:url({BASE_URL}/googleapis_storage/x.png)}}"


@pytest.mark.parametrize("payload", [b'{"a": NaN}', b'{"a": Infinity}', b"[-Infinity]"])
def test_non_standard_json_constants_raise(transformer, payload):
    """NaN and Infinity are not JSON and fail the request."""
    with pytest.raises(ContentDecodeError):
        transformer.transform(payload, "application/json")


def test_overflowing_json_number_becomes_null(transformer):
    """Numbers too large for a float serialize as null, never as Infinity."""
    assert transformer.transform(b'{"a": 1e999, "b": 1.5}', "application/json") == '{"a":null,"b":1.5}'


def test_html_outside_fragments_is_untouched(transformer):
    """Only the fragments are inserted; the rest of the markup is kept as received."""
    html = '<html><body><p>a&nbsp;b<br><input disabled></p></BODY></html>'
    result = transformer.transform(html.encode(), "text/html")

    injected = "<style>body{margin:0}</style><script>console.log('mirror')</script>"
    assert result == html.replace("</BODY>", injected + "</BODY>")


def test_html_fragments_go_before_last_body_close(transformer):
    """A closing body tag inside earlier markup does not receive the fragments."""
    html = "<body><script>var s = '</body>';</script></body>"
    result = transformer.transform(html.encode(), "text/html")

    assert result.startswith("<body><script>var s = '</body>';</script><style>")
    assert result.endswith("</script></body>")
