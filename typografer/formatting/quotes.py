from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from typografer.formatting.config import QuoteStyle


@dataclass(frozen=True)
class QuotePair:
    """Opening/closing quote, stored as named entities.

    Keeping entity spellings lets the output-format pass render quotes the same
    way as every other entity.
    """

    open: str
    close: str


_QUOTE_PAIRS: dict[QuoteStyle, QuotePair] = {
    QuoteStyle.FRENCH: QuotePair("&laquo;", "&raquo;"),
    QuoteStyle.GERMAN: QuotePair("&bdquo;", "&ldquo;"),
    QuoteStyle.ENGLISH_DOUBLE: QuotePair("&ldquo;", "&rdquo;"),
    QuoteStyle.PROGRAMMER: QuotePair("&quot;", "&quot;"),
    QuoteStyle.ENGLISH_SINGLE: QuotePair("&lsquo;", "&rsquo;"),
}


def get_quote_pair(style: QuoteStyle | str) -> QuotePair:
    return _QUOTE_PAIRS[QuoteStyle(style)]


class QuoteRole(Enum):
    PRIMARY_OPEN = "primary_open"
    PRIMARY_CLOSE = "primary_close"
    SECONDARY_OPEN = "secondary_open"
    SECONDARY_CLOSE = "secondary_close"


# Every quote variant the service may return, with the role it plays.
# `&ldquo;`/`“` appear twice: the service uses the same glyph as the German
# closer and the English opener. The first entry in table order owns a source,
# not the later one, so `«a „b“»` keeps its inner closer. The English-opener
# entries never fire.
QUOTE_RULES: tuple[tuple[str, QuoteRole], ...] = (
    # Primary french « »
    ("&laquo;", QuoteRole.PRIMARY_OPEN),
    ("&raquo;", QuoteRole.PRIMARY_CLOSE),
    ("«", QuoteRole.PRIMARY_OPEN),
    ("»", QuoteRole.PRIMARY_CLOSE),
    # Secondary french ‹ ›
    ("&lsaquo;", QuoteRole.SECONDARY_OPEN),
    ("&rsaquo;", QuoteRole.SECONDARY_CLOSE),
    ("‹", QuoteRole.SECONDARY_OPEN),
    ("›", QuoteRole.SECONDARY_CLOSE),
    # German „ “ (secondary in RU nesting)
    ("&bdquo;", QuoteRole.SECONDARY_OPEN),
    ("&ldquo;", QuoteRole.SECONDARY_CLOSE),
    ("„", QuoteRole.SECONDARY_OPEN),
    ("“", QuoteRole.SECONDARY_CLOSE),
    # English “ ”
    ("&ldquo;", QuoteRole.PRIMARY_OPEN),
    ("&rdquo;", QuoteRole.PRIMARY_CLOSE),
    ("“", QuoteRole.PRIMARY_OPEN),
    ("”", QuoteRole.PRIMARY_CLOSE),
    # English ‘ ’ and low ‚ for singles
    ("&lsquo;", QuoteRole.SECONDARY_OPEN),
    ("&rsquo;", QuoteRole.SECONDARY_CLOSE),
    ("‘", QuoteRole.SECONDARY_OPEN),
    ("’", QuoteRole.SECONDARY_CLOSE),
    ("&sbquo;", QuoteRole.SECONDARY_OPEN),
    ("‚", QuoteRole.SECONDARY_OPEN),
)


def _resolve_roles() -> dict[str, QuoteRole]:
    roles: dict[str, QuoteRole] = {}
    for source, role in QUOTE_RULES:
        roles.setdefault(source, role)
    return roles


_SOURCE_ROLES = _resolve_roles()

# Longest first so an entity is never split by a shorter alternative.
_quote_source_re = re.compile("|".join(re.escape(s) for s in sorted(_SOURCE_ROLES, key=len, reverse=True)))


def normalize_quotes(text: str, quotes1: QuoteStyle | str, quotes2: QuoteStyle | str) -> str:
    """Rewrite every known quote variant to the caller's primary/secondary pair.

    All rules are applied in one pass over the input, so a replacement is never
    picked up again by a later rule.
    """

    p = get_quote_pair(quotes1)
    s = get_quote_pair(quotes2)
    targets = {
        QuoteRole.PRIMARY_OPEN: p.open,
        QuoteRole.PRIMARY_CLOSE: p.close,
        QuoteRole.SECONDARY_OPEN: s.open,
        QuoteRole.SECONDARY_CLOSE: s.close,
    }
    return _quote_source_re.sub(lambda m: targets[_SOURCE_ROLES[m.group(0)]], text)
