from __future__ import annotations

import logging
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

from typografer.env import env_int, env_str, env_truthy

LOG_FILENAME = "typografer.log"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogSettings:
    log_dir: Path
    enabled: bool = True
    level: str = "INFO"
    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 5

    @property
    def log_file(self) -> Path:
        return (self.log_dir / LOG_FILENAME).resolve()


def log_settings_from_env(default_dir: Path) -> LogSettings:
    """Read TYPOGRAFER_LOG_* settings; unset values keep the service defaults."""

    base = LogSettings(log_dir=default_dir)
    level = env_str("TYPOGRAFER_LOG_LEVEL", base.level).strip().upper()
    return LogSettings(
        log_dir=Path(env_str("TYPOGRAFER_LOG_DIR", str(default_dir))),
        enabled=not env_truthy("TYPOGRAFER_DISABLE_FILE_LOG"),
        level=level or base.level,
        max_bytes=max(0, env_int("TYPOGRAFER_LOG_MAX_BYTES", base.max_bytes)),
        backup_count=max(0, env_int("TYPOGRAFER_LOG_BACKUPS", base.backup_count)),
    )


def _existing_handler(root: logging.Logger, log_file: Path) -> logging.Handler | None:
    for h in root.handlers:
        base = getattr(h, "baseFilename", None)
        if base and Path(str(base)).resolve() == log_file:
            return h
    return None


def configure_logging(settings: LogSettings) -> Path | None:
    """Route the `typografer` loggers to a rotating file next to uvicorn's output.

    Returns the log file in use, or None when file logging is disabled. Calling
    it again with the same directory reuses the handler already attached.
    """

    pkg_logger = logging.getLogger("typografer")
    if settings.level in logging.getLevelNamesMapping():
        pkg_logger.setLevel(settings.level)
    else:
        pkg_logger.setLevel(logging.INFO)
        logger.warning("ignoring unknown TYPOGRAFER_LOG_LEVEL=%s", settings.level)

    if not settings.enabled:
        return None

    root = logging.getLogger()
    log_file = settings.log_file
    if _existing_handler(root, log_file) is not None:
        return log_file

    settings.log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=settings.max_bytes,
        backupCount=settings.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    return log_file
