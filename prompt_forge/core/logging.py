"""structlog setup for Prompt Forge.

Log events are snake_case names with keyword context, e.g.
``logger.info("prompt_refined", idea_length=42)``. Outside production the
events are rendered as coloured console lines; in production each event is
one JSON object per line.

Credentials never reach the output: values under SENSITIVE_KEYS are masked
before rendering, whether they were passed to the call or bound to the
context.

Usage:
    from prompt_forge.core.logging import configure_logging, get_logger

    configure_logging()            # once, at process start
    logger = get_logger(__name__)  # per module
"""

import logging
import sys
from collections.abc import MutableMapping
from os import getenv
from typing import Any, cast

import structlog
from structlog.types import Processor

# Chatty at INFO level
QUIET_LOGGERS = ("anthropic", "httpx", "httpcore")

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "current_password",
        "new_password",
        "password_hash",
        "recaptcha_token",
        "token",
        "access_token",
        "api_key",
        "secret",
        "authorization",
    }
)
REDACTED = "***"


def redact_sensitive(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor masking credential values."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        if event_dict[key] is not None:
            event_dict[key] = REDACTED
    return event_dict


def _is_development() -> bool:
    return getenv("ENVIRONMENT", "development").lower() != "production"


def _processors(development: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        redact_sensitive,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if development:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    return processors


def configure_logging(
    development: bool | None = None,
    log_level: str | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        development: Console output when True, JSON when False. Defaults to
            True unless ENVIRONMENT is "production".
        log_level: DEBUG, INFO, WARNING or ERROR. Defaults to the LOG_LEVEL
            env var, then INFO. Unknown names fall back to INFO.
    """
    if development is None:
        development = _is_development()
    level_name = (log_level or getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=_processors(development),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # force=True replaces handlers installed by uvicorn or pytest
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)
    logging.getLogger().setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, normally ``get_logger(__name__)``."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def bind_contextvars(**kwargs: Any) -> None:
    """Attach request-scoped context to every later event on this task.

    Example:
        bind_contextvars(user_id="u-123", action="refine_prompt")
        logger.info("refine_request_completed")  # carries user_id and action
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_contextvars() -> None:
    structlog.contextvars.clear_contextvars()


def unbind_contextvars(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)
