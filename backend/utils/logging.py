"""
Logging utilities for the keyword suggestion backend.

Provides standardized logger configuration following security and privacy rules.

CRITICAL SECURITY RULES:
- NEVER log Supabase Auth tokens, self-issued tokens, API keys or secrets
- NEVER log passwords submitted to /auth/login
- NEVER log full crawled page bodies or raw model output beyond a short preview

Acceptable logging:
- High-level events (e.g., "Keyword generation started for facility 42")
- Non-sensitive metadata (e.g., "business_type='レストラン'")
- Workflow steps and their outcome (e.g., "GBP crawl failed: timeout")
- Error categories and sanitized error messages
"""

import logging
import time
from typing import Awaitable, Callable, Optional

from fastapi import Request, Response

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level_name: str = "INFO") -> None:
    """Configure the root logger once for the whole process."""
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(level=level, format=_LOG_FORMAT)


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level; when omitted the logger inherits
            the root level set by configure_logging()

    Returns:
        Configured logger instance

    Usage:
        >>> from backend.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred")
    """
    logger = logging.getLogger(name)

    if level is not None:
        logger.setLevel(level)

    # Add handler if not already configured (avoid duplicate handlers)
    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt=_LOG_FORMAT,
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


_http_logger = logging.getLogger("backend.http")


async def log_requests(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """HTTP middleware: one line per request with status and duration."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000

    message = f"{request.method} {request.url.path} {response.status_code} {duration_ms:.0f}ms"
    if response.status_code >= 400:
        _http_logger.warning(message)
    else:
        _http_logger.info(message)

    return response
