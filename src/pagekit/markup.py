"""HTML fragments and output encoders.

Fragment helpers return Markup so they can be dropped into autoescaped
templates as is. Arguments are escaped unless they are Markup already.
"""

import json
from urllib.parse import quote

from markupsafe import Markup, escape

from pagekit.core.pages import Page

_JS_REPLACEMENTS = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "'": "\\u0027",
}


def html_encode(value: str | None) -> str:
    return str(escape(value or ""))


def html_attribute_encode(value: str | None) -> str:
    return str(escape(value or ""))


def xml_encode(value: str | None) -> str:
    return str(escape(value or ""))


def xml_attribute_encode(value: str | None) -> str:
    return str(escape(value or ""))


def url_encode(value: str | None, encoding: str = "utf-8") -> str:
    return quote(value or "", safe="", encoding=encoding)


def javascript_encode(value: str | None, *, emit_quotes: bool = True) -> str:
    """Encode a string as a JavaScript string literal safe inside HTML."""
    encoded = json.dumps(value or "")
    for char, replacement in _JS_REPLACEMENTS.items():
        encoded = encoded.replace(char, replacement)
    return encoded if emit_quotes else encoded[1:-1]


def css_encode(value: str | None) -> str:
    """Escape every non-alphanumeric character as a CSS hex escape."""
    return "".join(
        char if char.isascii() and char.isalnum() else f"\\{ord(char):06X}"
        for char in value or ""
    )


def anchor(page: Page | None, inner_text: str | None = None) -> Markup:
    """Anchor linking to page, with the page name as text by default."""
    if page is None:
        return Markup('<a href="#">#</a>')
    text = inner_text if inner_text is not None else page.name
    return Markup('<a href="{0}">{1}</a>').format(page.link_url, text)


def img(url: str | None, alt: str, css_class: str | None = None) -> Markup:
    if not url:
        return Markup("")
    if css_class:
        return Markup('<img src="{0}" class="{1}" alt="{2}" />').format(url, css_class, alt)
    return Markup('<img src="{0}" alt="{1}" />').format(url, alt)


def figure(url: str | None, alt: str, caption: str) -> Markup:
    if not url:
        return Markup("")
    return Markup('<figure><img src="{0}" alt="{1}" /><figcaption>{2}</figcaption></figure>').format(
        url, alt, caption
    )


def div(text: str | None, css_class: str | None = None) -> Markup:
    if not text:
        return Markup("")
    if css_class:
        return Markup('<div class="{0}">{1}</div>').format(css_class, text)
    return Markup("<div>{0}</div>").format(text)
