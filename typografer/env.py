from __future__ import annotations

import os

from typografer.formatting.config import (
    DEFAULT_BR_TAG,
    DEFAULT_P_CLOSE,
    DEFAULT_P_OPEN,
    OutputConfig,
    OutputFormat,
    QuoteStyle,
)
from typografer.service.config import ServiceConfig


def env_truthy(name: str) -> bool:
    v = str(os.getenv(name, "")).strip().lower()
    return v in {"1", "true", "yes", "y", "on"}


def env_str(name: str, default: str) -> str:
    # Delimiters may legitimately carry spaces (e.g. "<br />"); only empty means unset.
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw


def env_int(name: str, default: int) -> int:
    raw = str(os.getenv(name, "")).strip()
    if not raw:
        return default
    try:
        return int(raw)
    except Exception:
        return default


def env_float(name: str, default: float) -> float:
    raw = str(os.getenv(name, "")).strip()
    if not raw:
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _env_choice(name: str, enum_cls, default):  # noqa: ANN001
    raw = str(os.getenv(name, "")).strip().lower()
    if not raw:
        return default
    try:
        return enum_cls(raw)
    except ValueError as e:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"{name} must be one of: {allowed}") from e


def output_config_from_env() -> OutputConfig:
    return OutputConfig(
        quotes1=_env_choice("TYPOGRAFER_QUOTES1", QuoteStyle, QuoteStyle.FRENCH),
        quotes2=_env_choice("TYPOGRAFER_QUOTES2", QuoteStyle, QuoteStyle.GERMAN),
        output_format=_env_choice("TYPOGRAFER_OUTPUT_FORMAT", OutputFormat, OutputFormat.NAMED),
        use_br=env_truthy("TYPOGRAFER_USE_BR"),
        br_tag=env_str("TYPOGRAFER_BR_TAG", DEFAULT_BR_TAG),
        use_p=env_truthy("TYPOGRAFER_USE_P"),
        p_open=env_str("TYPOGRAFER_P_OPEN", DEFAULT_P_OPEN),
        p_close=env_str("TYPOGRAFER_P_CLOSE", DEFAULT_P_CLOSE),
    )


def service_config_from_env() -> ServiceConfig:
    defaults = ServiceConfig()
    return ServiceConfig(
        url=env_str("TYPOGRAFER_SERVICE_URL", defaults.url).strip(),
        timeout_seconds=env_float("TYPOGRAFER_TIMEOUT_SECONDS", defaults.timeout_seconds),
        max_nobr=env_int("TYPOGRAFER_MAX_NOBR", defaults.max_nobr),
        max_retries=env_int("TYPOGRAFER_MAX_RETRIES", defaults.max_retries),
        retry_backoff_seconds=env_float("TYPOGRAFER_RETRY_BACKOFF_SECONDS", defaults.retry_backoff_seconds),
    )
