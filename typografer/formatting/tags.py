from __future__ import annotations

import re
from collections.abc import Sequence

from typografer.formatting.config import OutputConfig

_service_br_re = re.compile(r"<br\s*/?>(\s*)", re.IGNORECASE)
_service_p_open_re = re.compile(r"<p\b[^>]*>", re.IGNORECASE)
_service_p_close_re = re.compile(r"</p\s*>", re.IGNORECASE)

_p_tag_re = re.compile(r"</?p\b[^>]*>", re.IGNORECASE)
_nobr_tag_re = re.compile(r"</?nobr\b[^>]*>", re.IGNORECASE)
_any_tag_re = re.compile(r"<[^>]+>")

_PRIVATE_USE = range(0xE000, 0xF900)


def map_service_tags(text: str, config: OutputConfig) -> str:
    """Replace the service's own `<br>`/`<p>` markers with the caller's tags."""

    if config.use_br:
        br = config.effective_br_tag
        # Function replacements keep backslashes in caller tags literal.
        text = _service_br_re.sub(lambda m: br + m.group(1), text)
    if config.use_p:
        p_open = config.effective_p_open
        p_close = config.effective_p_close
        text = _service_p_open_re.sub(lambda _m: p_open, text)
        text = _service_p_close_re.sub(lambda _m: p_close, text)
    return text


def _reserve_marker(text: str) -> str:
    """Return a marker string that does not occur anywhere in `text`."""

    for cp in _PRIVATE_USE:
        ch = chr(cp)
        if ch not in text:
            return ch
    # Every BMP private-use char is taken: a run longer than any existing one is still unique.
    longest = max(len(m.group(0)) for m in re.finditer("\ue000+", text))
    return "\ue000" * (longest + 1)


def _strip_all_tags(text: str) -> str:
    return _any_tag_re.sub("", text).strip()


def strip_html_keep_tags(text: str, keep: Sequence[str]) -> str:
    """Remove all markup except the literal tags listed in `keep`.

    Kept tags are swapped for placeholders built around a marker that is absent
    from the input, the rest is stripped, then the placeholders are restored.
    """

    if not keep:
        return _strip_all_tags(text)

    marker = _reserve_marker(text)
    placeholders = [f"{marker}{i}{marker}" for i in range(len(keep))]

    for tag, placeholder in zip(keep, placeholders):
        if tag:
            text = text.replace(tag, placeholder)

    text = _p_tag_re.sub("", text)
    text = _nobr_tag_re.sub("", text)
    text = _strip_all_tags(text)

    for tag, placeholder in zip(keep, placeholders):
        text = text.replace(placeholder, tag)
    return text
