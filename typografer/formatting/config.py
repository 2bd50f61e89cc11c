from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# Service-side input limit (characters).
MAX_LEN = 65_536

DEFAULT_BR_TAG = "<br />"
DEFAULT_P_OPEN = "<p>"
DEFAULT_P_CLOSE = "</p>"


class QuoteStyle(StrEnum):
    FRENCH = "french"
    GERMAN = "german"
    ENGLISH_DOUBLE = "english-double"
    PROGRAMMER = "programmer"
    ENGLISH_SINGLE = "english-single"


class OutputFormat(StrEnum):
    NAMED = "named"
    NUMERIC = "numeric"
    UNICODE = "unicode"


@dataclass(frozen=True)
class OutputConfig:
    # Quote glyphs: quotes1 for the outer level, quotes2 for nested quotes.
    quotes1: QuoteStyle = QuoteStyle.FRENCH
    quotes2: QuoteStyle = QuoteStyle.GERMAN

    output_format: OutputFormat = OutputFormat.NAMED

    # Caller-chosen delimiters; matched as literal text, never as patterns.
    use_br: bool = False
    br_tag: str = DEFAULT_BR_TAG
    use_p: bool = False
    p_open: str = DEFAULT_P_OPEN
    p_close: str = DEFAULT_P_CLOSE

    @property
    def effective_br_tag(self) -> str:
        return self.br_tag or DEFAULT_BR_TAG

    @property
    def effective_p_open(self) -> str:
        return self.p_open or DEFAULT_P_OPEN

    @property
    def effective_p_close(self) -> str:
        return self.p_close or DEFAULT_P_CLOSE

    def preserved_tags(self) -> list[str]:
        """Tags that survive stripping, in allow-list order."""

        tags: list[str] = []
        if self.use_br:
            tags.append(self.effective_br_tag)
        if self.use_p:
            tags.append(self.effective_p_open)
            tags.append(self.effective_p_close)
        return tags
