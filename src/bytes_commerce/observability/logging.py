"""Structured logging configuration for bytes-commerce.

Configures structlog for JSON-formatted logging correlated by provisioning
run. Client modules log through stdlib ``logging`` and are rendered by the
same formatter.

Usage::

    from bytes_commerce.observability.logging import configure_logging, get_logger

    configure_logging()  # Call once at startup
    logger = get_logger()
    logger.info("basket_created", basket_id=100)
"""

from __future__ import annotations

import logging
import os
import re
import sys
from contextvars import ContextVar

import structlog

# Correlation ID for the provisioning run currently executing in this context.
provisioning_id_ctx: ContextVar[str | None] = ContextVar("provisioning_id", default=None)

_configured = False

_REDACT_PATTERNS = (
    (re.compile(r"(Bearer\s+)[^\s\"']+"), r"\1[REDACTED]"),
    (re.compile(r"(access_token[\"']?\s*[=:]\s*[\"']?)[^\s,\"'&}]+", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"(client_secret[\"']?\s*[=:]\s*[\"']?)[^\s,\"'&}]+", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"(password[\"']?\s*[=:]\s*[\"']?)[^\s,\"'&}]+", re.IGNORECASE), r"\1[REDACTED]"),
)

_SECRET_KEYS = frozenset({"access_token", "client_secret", "password", "authorization", "token"})


def redact(text: str) -> str:
    for pattern, replacement in _REDACT_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def _add_provisioning_id(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict,
) -> dict:
    """Inject the current provisioning_id from context into every log entry."""
    pid = provisioning_id_ctx.get()
    if pid is not None:
        event_dict["provisioning_id"] = pid
    return event_dict


def redact_secrets(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict,
) -> dict:
    """Mask tokens and credentials in keys and string values."""
    for key, value in list(event_dict.items()):
        if key.lower() in _SECRET_KEYS:
            event_dict[key] = "[REDACTED]"
        elif isinstance(value, str):
            event_dict[key] = redact(value)
    return event_dict


def configure_logging(
    *,
    level: str | None = None,
    json_output: bool | None = None,
) -> None:
    """Configure structlog and stdlib logging.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
            Defaults to LOG_LEVEL env var or INFO.
        json_output: If True, emit JSON lines. If False, emit
            human-readable console output. Defaults to LOG_FORMAT
            env var == "json".
    """
    global _configured
    if _configured:
        return
    _configured = True

    level = level or os.environ.get("LOG_LEVEL", "INFO")
    if json_output is None:
        json_output = os.environ.get("LOG_FORMAT", "json") == "json"

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        _add_provisioning_id,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        redact_secrets,
    ]

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # Logs go to stderr; stdout carries command output.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Quiet noisy libraries.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _route_to_stdlib() -> None:
    """Send structlog events through stdlib logging until configured.

    Routed events obey the host's stdlib handlers and levels. A later
    ``configure_logging`` (or host ``structlog.configure``) replaces this.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _add_provisioning_id,
            redact_secrets,
            structlog.stdlib.render_to_log_kwargs,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to the given name."""
    if not structlog.is_configured():
        _route_to_stdlib()
    return structlog.get_logger(name)
