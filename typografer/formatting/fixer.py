from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from typografer.formatting.config import MAX_LEN, OutputConfig
from typografer.formatting.entities import convert_entities, decode_html_entities
from typografer.formatting.quotes import normalize_quotes
from typografer.formatting.rules import clean_paragraphs, normalize_br
from typografer.formatting.tags import map_service_tags, strip_html_keep_tags
from typografer.service.client import call_typograf_resilient
from typografer.service.config import ServiceConfig

logger = logging.getLogger(__name__)


class EmptyInputError(ValueError):
    pass


@dataclass
class FormatResult:
    text: str
    stats: dict[str, int] = field(default_factory=dict)
    truncated: bool = False
    original_length: int = 0
    retries: int = 0


def _count_change(stats: dict[str, int], key: str, before: str, after: str) -> None:
    if before != after:
        stats[key] = stats.get(key, 0) + 1


def render_markup(raw: str, config: OutputConfig) -> FormatResult:
    """Re-render service markup into the caller's quotes, entities and delimiters."""

    stats: dict[str, int] = {}

    text = decode_html_entities(raw)
    _count_change(stats, "decode_html_entities", raw, text)

    prev, text = text, map_service_tags(text, config)
    _count_change(stats, "map_service_tags", prev, text)

    prev, text = text, strip_html_keep_tags(text, config.preserved_tags())
    _count_change(stats, "strip_tags", prev, text)

    prev, text = text, normalize_quotes(text, config.quotes1, config.quotes2)
    _count_change(stats, "normalize_quotes", prev, text)

    prev, text = text, convert_entities(text, config.output_format)
    _count_change(stats, "convert_entities", prev, text)

    br = config.effective_br_tag
    if config.use_br:
        prev, text = text, normalize_br(text, br)
        _count_change(stats, "normalize_br", prev, text)

    if config.use_p:
        prev, text = text, clean_paragraphs(text, config.effective_p_open, config.effective_p_close, br)
        _count_change(stats, "clean_paragraphs", prev, text)

    return FormatResult(text=text, stats=stats)


def typograf_text(
    text: str,
    config: OutputConfig,
    service: ServiceConfig | None = None,
    *,
    should_stop: Callable[[], bool] | None = None,
) -> FormatResult:
    if not text:
        raise EmptyInputError("no text: paste text to process with Typograf")

    original_length = len(text)
    # MAX_LEN counts code points; astral characters count once, not as UTF-16 pairs.
    truncated = original_length > MAX_LEN
    if truncated:
        logger.warning("input truncated: %s -> %s chars", original_length, MAX_LEN)
        text = text[:MAX_LEN]

    retries: list[int] = []

    def _on_retry(attempt: int, status_code: int | None, message: str) -> None:
        retries.append(attempt)
        logger.info("retrying Typograf (attempt %s, status=%s): %s", attempt, status_code, message)

    raw = call_typograf_resilient(
        service or ServiceConfig(), text, config, should_stop=should_stop, on_retry=_on_retry
    )

    result = render_markup(raw, config)
    result.retries = len(retries)
    result.truncated = truncated
    result.original_length = original_length
    return result
