from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceConfig:
    # Endpoint
    url: str = "https://typograf.artlebedev.ru/webservices/typograf.asmx"
    soap_action: str = '"http://typograf.artlebedev.ru/webservices/ProcessText"'
    timeout_seconds: float = 30.0

    # ProcessText flags. entity_type 1 = HTML named entities, which the pipeline expects.
    entity_type: int = 1
    max_nobr: int = 0

    # Resilience (off by default: a failed call surfaces immediately).
    max_retries: int = 0
    retry_backoff_seconds: float = 1.0

    max_connections: int = 4
