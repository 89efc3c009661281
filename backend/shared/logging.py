"""
Structured logging for the ledger service.

Output format and level come from LOG_FORMAT ("json" or "console") and
LOG_LEVEL. Every HTTP request gets a short request id bound to the log
context, plus the game id when the path addresses one game, so all lines
a request produces (engine, session, repository) can be grepped together.
"""

from __future__ import annotations

import logging
import re
import sys
import time
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Literal
from uuid import uuid4

import structlog
from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

    from starlette.types import ASGIApp, Message, Receive, Scope, Send

LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

_GAME_PATH = re.compile(r"^/games/(?P<game_id>[^/]+)")

logger = structlog.get_logger()


class LogSettings(BaseSettings):
    model_config = {"env_prefix": "LOG_"}

    format: Literal["json", "console", ""] = ""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("format", mode="before")
    @classmethod
    def _lower_format(cls, v: object) -> object:
        return v.lower() if isinstance(v, str) else v

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @property
    def json_mode(self) -> bool:
        return self.format == "json"

    @property
    def level_number(self) -> int:
        return logging.getLevelNamesMapping()[self.level]


def _jsonable_values(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Log enums by value and pydantic models (account refs, settings) as plain dicts."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
        elif isinstance(value, BaseModel):
            event_dict[key] = value.model_dump(mode="json")
    return event_dict


def _formatter(settings: LogSettings, *, colors: bool) -> logging.Formatter:
    if settings.json_mode:
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def _is_test() -> bool:
    return "pytest" in sys.modules


def clear_log_context() -> None:
    structlog.contextvars.clear_contextvars()


def setup_logging(log_dir: Path | str | None = None, settings: LogSettings | None = None) -> Path | None:
    """Route structlog through stdlib handlers on stdout and, outside tests, a log file.

    The file is named after the server start time inside log_dir.
    Returns its path, or None when no file handler was added.
    """
    settings = settings or LogSettings()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _jsonable_values,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.setLevel(settings.level_number)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    # RequestLoggingMiddleware already writes one line per request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(_formatter(settings, colors=sys.stdout.isatty()))
    root.addHandler(stdout_handler)

    if not log_dir or _is_test():
        return None
    log_path = Path(log_dir) / f"{datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)}.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path)
    file_handler.setFormatter(_formatter(settings, colors=False))
    root.addHandler(file_handler)
    return log_path


class RequestLoggingMiddleware:
    """Bind request_id (and game_id for /games/{id}/...) and log each finished request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope["path"]
        context: dict[str, str] = {"request_id": uuid4().hex[:8]}
        match = _GAME_PATH.match(path)
        if match is not None:
            context["game_id"] = match["game_id"]

        status_code = 500
        started = time.perf_counter()

        async def send_with_status(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        with structlog.contextvars.bound_contextvars(**context):
            try:
                await self.app(scope, receive, send_with_status)
            finally:
                logger.info(
                    "request finished",
                    method=scope["method"],
                    path=path,
                    status=status_code,
                    duration_ms=round((time.perf_counter() - started) * 1000, 1),
                )
