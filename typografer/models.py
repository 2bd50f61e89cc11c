from __future__ import annotations

from pydantic import BaseModel, Field

from typografer.formatting.config import OutputFormat, QuoteStyle


class ErrorEnvelope(BaseModel):
    code: str
    message: str
    request_id: str | None = None


class OutputOptions(BaseModel):
    # None means "use the server default" (environment or built-in).
    quotes1: QuoteStyle | None = None
    quotes2: QuoteStyle | None = None
    output_format: OutputFormat | None = None
    use_br: bool | None = None
    br_tag: str | None = None
    use_p: bool | None = None
    p_open: str | None = None
    p_close: str | None = None


class TypografRequest(BaseModel):
    text: str = ""
    options: OutputOptions = Field(default_factory=OutputOptions)


class TypografResponse(BaseModel):
    text: str
    truncated: bool = False
    original_length: int
    notices: list[str] = Field(default_factory=list)
    stats: dict[str, int] = Field(default_factory=dict)
    retries: int = 0


class LimitsResponse(BaseModel):
    max_chars: int


class OutputSettingsResponse(BaseModel):
    output: OutputOptions
