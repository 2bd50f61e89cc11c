from __future__ import annotations

import re

from typografer.formatting.config import OutputFormat

# Named entities the service produces (and the quote pairs we emit), by code point.
ENTITY_CODEPOINTS: dict[str, int] = {
    "&laquo;": 171,
    "&raquo;": 187,
    "&lsaquo;": 8249,
    "&rsaquo;": 8250,
    "&bdquo;": 8222,
    "&ldquo;": 8220,
    "&rdquo;": 8221,
    "&lsquo;": 8216,
    "&rsquo;": 8217,
    "&sbquo;": 8218,
    "&quot;": 34,
    "&amp;": 38,
    "&lt;": 60,
    "&gt;": 62,
    "&nbsp;": 160,
    "&mdash;": 8212,
    "&ndash;": 8211,
}

_HTML_DECODES: tuple[tuple[str, str], ...] = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    # Last: decoding `&amp;` earlier would turn `&amp;lt;` into `<`.
    ("&amp;", "&"),
)

_named_entity_re = re.compile(r"&[a-zA-Z]+;")


def decode_html_entities(text: str) -> str:
    for src, dst in _HTML_DECODES:
        text = text.replace(src, dst)
    return text


def convert_entities(text: str, output: OutputFormat | str) -> str:
    """Render known named entities as `&#N;` or as literal characters.

    Unknown entities pass through unchanged.
    """

    output = OutputFormat(output)
    if output == OutputFormat.NAMED:
        return text

    def _repl(m: re.Match[str]) -> str:
        code = ENTITY_CODEPOINTS.get(m.group(0))
        if code is None:
            return m.group(0)
        if output == OutputFormat.NUMERIC:
            return f"&#{code};"
        return chr(code)

    return _named_entity_re.sub(_repl, text)
