"""Structured logging — JSON in prod, coloured console in dev."""

from __future__ import annotations

import logging
import sys

import structlog

_configured = False


def setup_logging(level: str = "INFO", env: str = "dev") -> None:
    """Configure structlog processors and stdlib integration.  Idempotent."""
    global _configured
    if _configured:
        return

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if env == "dev":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

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
    root.setLevel(level.upper())

    # httpx logs every request at INFO, web3 every RPC call at DEBUG
    for name in ("httpx", "httpcore", "web3"):
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))
    _configured = True


def redact_url(url: str) -> str:
    """Show scheme and host only; RPC URLs often embed API keys."""
    from urllib.parse import urlparse

    parsed = urlparse(url)
    if not parsed.hostname:
        return url[:30] + "..."
    return f"{parsed.scheme}://{parsed.hostname}"
