from __future__ import annotations

import ipaddress
import logging
import threading
import time
from collections.abc import Callable
from urllib.parse import urlsplit

import httpx

from typografer.formatting.config import OutputConfig, QuoteStyle
from typografer.formatting.escaping import decode_xml_layer, escape_xml
from typografer.service.config import ServiceConfig

logger = logging.getLogger(__name__)


class TypografError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TypografResponseError(TypografError):
    """The service answered, but without the ProcessText result markers."""


class TypografCancelled(TypografError):
    pass


_RETRYABLE_STATUS = {408, 425, 429, 500, 502, 503, 504}

_RESULT_START = "<ProcessTextResult>"
_RESULT_END = "</ProcessTextResult>"

_HTTP_CLIENTS: dict[tuple[str, str, int], httpx.Client] = {}
_HTTP_CLIENTS_LOCK = threading.Lock()


def _is_loopback_host(host: str | None) -> bool:
    if not host:
        return False
    if host == "localhost":
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def _httpx_client_for_url(url: str, *, max_connections: int) -> httpx.Client:
    parts = urlsplit(url)
    host = parts.hostname or ""
    key = (parts.scheme, host, int(max_connections))
    with _HTTP_CLIENTS_LOCK:
        client = _HTTP_CLIENTS.get(key)
        if client is None:
            # Local test servers must not be routed through an env proxy.
            client = httpx.Client(
                limits=httpx.Limits(max_connections=max_connections),
                trust_env=not _is_loopback_host(host),
            )
            _HTTP_CLIENTS[key] = client
        return client


def close_http_clients() -> None:
    with _HTTP_CLIENTS_LOCK:
        clients = list(_HTTP_CLIENTS.values())
        _HTTP_CLIENTS.clear()
    for client in clients:
        client.close()


def build_soap_envelope(
    text: str,
    *,
    entity_type: int = 1,
    use_br: bool = False,
    use_p: bool = False,
    max_nobr: int = 0,
    quotes1: QuoteStyle | str = QuoteStyle.FRENCH,
    quotes2: QuoteStyle | str = QuoteStyle.GERMAN,
) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<soap:Envelope xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
        'xmlns:xsd="http://www.w3.org/2001/XMLSchema" '
        'xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/">\n'
        "<soap:Body>\n"
        ' <ProcessText xmlns="http://typograf.artlebedev.ru/webservices/">\n'
        f"  <text>{escape_xml(text)}</text>\n"
        f"  <entityType>{int(entity_type)}</entityType>\n"
        f"  <useBr>{1 if use_br else 0}</useBr>\n"
        f"  <useP>{1 if use_p else 0}</useP>\n"
        f"  <maxNobr>{int(max_nobr)}</maxNobr>\n"
        f"  <quotes1>{QuoteStyle(quotes1)}</quotes1>\n"
        f"  <quotes2>{QuoteStyle(quotes2)}</quotes2>\n"
        " </ProcessText>\n"
        "</soap:Body>\n"
        "</soap:Envelope>"
    )


def extract_result(raw: str) -> str:
    """Return the ProcessText result with one layer of XML escaping removed."""

    start = raw.find(_RESULT_START)
    end = raw.find(_RESULT_END)
    if start == -1 or end == -1 or end <= start:
        raise TypografResponseError("Invalid response from Typograf service")
    return decode_xml_layer(raw[start + len(_RESULT_START) : end])


def _http_post_soap(url: str, body: str, headers: dict[str, str], timeout: float, *, max_connections: int) -> str:
    client = _httpx_client_for_url(url, max_connections=max_connections)
    try:
        resp = client.post(
            url,
            content=body.encode("utf-8"),
            headers={"Content-Type": "text/xml; charset=utf-8", **headers},
            timeout=timeout,
        )
        resp.raise_for_status()
        return resp.text
    except httpx.HTTPStatusError as e:
        code = int(e.response.status_code)
        raise TypografError(f"HTTP {code} from Typograf: {e.response.text}", status_code=code) from e
    except httpx.RequestError as e:
        raise TypografError(f"Typograf request failed: {e}") from e


def call_typograf(
    cfg: ServiceConfig,
    text: str,
    config: OutputConfig,
    *,
    should_stop: Callable[[], bool] | None = None,
) -> str:
    """Send `text` to the service and return its raw markup result."""

    if should_stop is not None and should_stop():
        raise TypografCancelled("Typograf request cancelled")

    body = build_soap_envelope(
        text,
        entity_type=cfg.entity_type,
        use_br=config.use_br,
        use_p=config.use_p,
        max_nobr=cfg.max_nobr,
        quotes1=config.quotes1,
        quotes2=config.quotes2,
    )
    logger.info(
        "typograf call: chars=%s quotes1=%s quotes2=%s use_br=%s use_p=%s",
        len(text),
        config.quotes1,
        config.quotes2,
        config.use_br,
        config.use_p,
    )
    raw = _http_post_soap(
        cfg.url,
        body,
        headers={"SOAPAction": cfg.soap_action},
        timeout=cfg.timeout_seconds,
        max_connections=cfg.max_connections,
    )

    # No partial results once the caller has given up.
    if should_stop is not None and should_stop():
        raise TypografCancelled("Typograf request cancelled")
    return extract_result(raw)


def _is_retryable(e: TypografError) -> bool:
    if isinstance(e, (TypografResponseError, TypografCancelled)):
        return False
    return e.status_code is None or e.status_code in _RETRYABLE_STATUS


def call_typograf_resilient(
    cfg: ServiceConfig,
    text: str,
    config: OutputConfig,
    *,
    should_stop: Callable[[], bool] | None = None,
    on_retry: Callable[[int, int | None, str], None] | None = None,
) -> str:
    """Call the service, retrying transient failures up to `cfg.max_retries` times."""

    attempts = max(0, int(cfg.max_retries)) + 1

    for i in range(attempts):
        try:
            return call_typograf(cfg, text, config, should_stop=should_stop)
        except TypografError as e:
            if i >= attempts - 1 or not _is_retryable(e):
                logger.warning("typograf call failed: %s", e)
                raise
            logger.warning("typograf call failed (attempt %s/%s), retrying: %s", i + 1, attempts, e)
            if on_retry is not None:
                on_retry(i + 1, e.status_code, str(e))
        time.sleep(max(0.0, float(cfg.retry_backoff_seconds)) * (2**i))

    raise TypografError("Typograf call failed with unknown error")
