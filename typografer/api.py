from __future__ import annotations

import logging
import re
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict, replace
from pathlib import Path

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from typografer.env import output_config_from_env, service_config_from_env
from typografer.formatting.config import MAX_LEN, OutputConfig
from typografer.formatting.fixer import EmptyInputError, typograf_text
from typografer.logging_setup import configure_logging, log_settings_from_env
from typografer.models import (
    ErrorEnvelope,
    LimitsResponse,
    OutputOptions,
    OutputSettingsResponse,
    TypografRequest,
    TypografResponse,
)
from typografer.service.client import TypografError, close_http_clients

logger = logging.getLogger(__name__)

WORKDIR = Path(__file__).resolve().parent.parent

_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def _error_code_for_status(status_code: int) -> str:
    if status_code == 404:
        return "not_found"
    if status_code in {400, 413, 422}:
        return "bad_request"
    if status_code in {502, 504}:
        return "upstream_error"
    return "internal_error"


def _error(status_code: int, message: str, *, request_id: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": ErrorEnvelope(
                code=_error_code_for_status(status_code), message=message, request_id=request_id
            ).model_dump()
        },
    )


def _request_id_from_request(request: Request) -> str:
    existing = getattr(getattr(request, "state", object()), "request_id", None)
    if isinstance(existing, str) and existing:
        return existing

    incoming = str(request.headers.get("x-request-id", "") or "").strip()
    request_id = incoming if incoming and _REQUEST_ID_RE.fullmatch(incoming) else uuid.uuid4().hex

    request.state.request_id = request_id
    return request_id


def _output_config_from_options(opts: OutputOptions, defaults: OutputConfig) -> OutputConfig:
    overrides = {k: v for k, v in opts.model_dump().items() if v is not None}
    return replace(defaults, **overrides)


@asynccontextmanager
async def _lifespan(_app: FastAPI) -> AsyncIterator[None]:
    log_file = configure_logging(log_settings_from_env(WORKDIR / "logs"))
    if log_file is not None:
        logger.info("file logging enabled: %s", log_file)

    yield

    close_http_clients()


app = FastAPI(lifespan=_lifespan)


@app.exception_handler(HTTPException)
async def _http_exception_handler(_request: Request, exc: HTTPException):
    return _error(int(exc.status_code), str(exc.detail))


@app.exception_handler(RequestValidationError)
async def _validation_exception_handler(_request: Request, exc: RequestValidationError):
    msg = "bad request"
    errors = exc.errors()
    if errors:
        msg = errors[0].get("msg") or msg
    return _error(400, msg)


@app.exception_handler(Exception)
async def _unhandled_exception_handler(_request: Request, exc: Exception):
    logger.exception("unhandled error")
    return _error(500, str(exc))


@app.get("/healthz")
async def healthz():
    return {"ok": True}


@app.get("/api/v1/limits", response_model=LimitsResponse)
async def get_limits():
    return LimitsResponse(max_chars=MAX_LEN)


@app.get("/api/v1/settings/output", response_model=OutputSettingsResponse)
async def get_output_settings():
    try:
        defaults = output_config_from_env()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return OutputSettingsResponse(output=OutputOptions(**asdict(defaults)))


@app.post("/api/v1/typograf", response_model=TypografResponse)
async def typograf(request: Request, body: TypografRequest = Body(...)):
    request_id = _request_id_from_request(request)
    try:
        cfg = _output_config_from_options(body.options, output_config_from_env())
        service = service_config_from_env()
    except ValueError as e:
        return _error(400, str(e), request_id=request_id)

    try:
        result = await run_in_threadpool(typograf_text, body.text, cfg, service)
    except EmptyInputError as e:
        return _error(400, str(e), request_id=request_id)
    except TypografError as e:
        logger.warning("typograf failed: request_id=%s error=%s", request_id, e)
        return _error(502, str(e), request_id=request_id)

    notices: list[str] = []
    if result.truncated:
        notices.append(f"text was truncated to the {MAX_LEN:,} characters limit")
    if result.retries:
        notices.append(f"Typograf service was retried {result.retries} time(s)")

    return TypografResponse(
        text=result.text,
        truncated=result.truncated,
        original_length=result.original_length,
        notices=notices,
        stats=result.stats,
        retries=result.retries,
    )
