from __future__ import annotations

import re

_ws_run_re = re.compile(r"\s+")


def normalize_br(text: str, br_tag: str) -> str:
    """Collapse repeated line breaks and drop the ones left dangling at the end.

    `br_tag` is literal text; it is escaped before any pattern is built from it.
    """

    if not br_tag:
        return text
    br = re.escape(br_tag)

    # Collapse consecutive breaks into the first one.
    text = re.sub(rf"({br})(?:\s*{br})+", lambda m: m.group(1), text, flags=re.IGNORECASE)
    # No horizontal whitespace before a break. Lookbehinds pin each match to the
    # start of a whitespace run so long runs are scanned once.
    text = re.sub(rf"(?<![ \t])[ \t]+(?={br})", "", text, flags=re.IGNORECASE)
    # Trailing break at end of text (`\s` covers U+00A0 as well).
    text = re.sub(rf"(?<!\s)\s*{br}\s*\Z", "", text, flags=re.IGNORECASE)
    return text


def clean_paragraphs(text: str, p_open: str, p_close: str, br_tag: str) -> str:
    """Tidy whitespace inside every `p_open ... p_close` pair.

    Whitespace between paragraphs is left as is.
    """

    if not p_open or not p_close:
        return text
    open_re = re.escape(p_open)
    close_re = re.escape(p_close)

    text = re.sub(rf"{open_re}\s+", lambda _m: p_open, text)
    if br_tag:
        br = re.escape(br_tag)
        text = re.sub(rf"(?<!\s)\s*{br}\s*{close_re}", lambda _m: p_close, text, flags=re.IGNORECASE)
    text = re.sub(rf"(?<!\s)\s+{close_re}", lambda _m: p_close, text)

    def _rewrap(m: re.Match[str]) -> str:
        content = _ws_run_re.sub(" ", m.group(1)).strip()
        return f"{p_open}{content}{p_close}"

    return re.sub(rf"{open_re}(.*?){close_re}", _rewrap, text, flags=re.DOTALL)
