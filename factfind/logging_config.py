"""
Structured logging for the extraction engine and API.

structlog renders JSON in production and coloured console output in
development. Every entry is stamped with the service name and environment;
entries emitted while serving a request carry its ``trace_id``, and entries
emitted during an extraction carry the question being answered.

Usage:
    from factfind.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("smart_extraction_complete", fields_extracted=2)
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import AbstractContextManager, nullcontext
from contextvars import ContextVar
from typing import Any

import structlog

from factfind.config import get_settings

# Set by RequestIdMiddleware for the lifetime of one API request
trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")

_configured = False


def _inject_trace_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    trace_id = trace_id_var.get("")
    if trace_id:
        event_dict["trace_id"] = trace_id
    return event_dict


def _add_service_fields(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    settings = get_settings()
    event_dict.setdefault("service", settings.service_name)
    event_dict.setdefault("environment", settings.environment.value)
    return event_dict


def generate_trace_id() -> str:
    """Short random ID used when a request arrives without ``X-Request-ID``."""
    return uuid.uuid4().hex[:12]


def extraction_log_context(question_id: str) -> AbstractContextManager:
    """Bind the question being answered to every entry logged inside the block."""
    if not question_id:
        return nullcontext()
    return structlog.contextvars.bound_contextvars(question_id=question_id)


def setup_logging() -> None:
    """
    Configure structlog and route stdlib logging through it.

    Safe to call more than once; only the first call configures anything.
    """
    global _configured
    if _configured:
        return

    settings = get_settings()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _inject_trace_id,
        _add_service_fields,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_production:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # uvicorn and fastapi log through stdlib; render them the same way
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())

    for noisy in ("httpx", "httpcore", "uvicorn.access", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
