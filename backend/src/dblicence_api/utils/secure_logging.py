"""Logging helpers that keep connection details and credentials out of production logs."""

import logging
import re
from functools import lru_cache

from dblicence_api.config import get_settings

_DSN_PATTERN = re.compile(r"(postgresql(\+asyncpg)?|postgres|http|https)://[^\s'\"]+")
_CREDENTIAL_PATTERN = re.compile(r"(password|passwd|pwd|authorization)\s*[=:]\s*[^\s,;]+", re.I)
_PATH_PATTERN = re.compile(r"['\"]?(/[A-Za-z0-9_.\-]+){2,}['\"]?")
_MAX_LENGTH = 200


@lru_cache(maxsize=1)
def is_debug_mode() -> bool:
    """Check if application is running in debug mode."""
    return get_settings().debug


def sanitize_exception_message(error: Exception) -> str:
    """Reduce an exception message to something safe for production logs.

    Database DSNs, alert service URLs, credential assignments and file
    system paths are replaced by placeholders and the result is truncated.

    Args:
        error: The exception to sanitize

    Returns:
        Sanitized error message
    """
    text = str(error) or type(error).__name__
    text = _DSN_PATTERN.sub("[URL]", text)
    text = _CREDENTIAL_PATTERN.sub(r"\1=[REDACTED]", text)
    text = _PATH_PATTERN.sub("[PATH]", text)
    if len(text) > _MAX_LENGTH:
        text = text[: _MAX_LENGTH - 3] + "..."
    return text


def _log(logger: logging.Logger, level: int, message: str, error: Exception | None) -> None:
    if error is None:
        logger.log(level, message)
    elif is_debug_mode():
        logger.log(level, f"{message}: {error}", exc_info=level >= logging.ERROR)
    else:
        logger.log(level, f"{message}: {sanitize_exception_message(error)}")


def log_error(logger: logging.Logger, message: str, error: Exception | None = None) -> None:
    """Log an error, with full exception details only in debug mode.

    Args:
        logger: The logger instance to use
        message: Generic log message without sensitive data
        error: Optional exception to include
    """
    _log(logger, logging.ERROR, message, error)


def log_warning(logger: logging.Logger, message: str, error: Exception | None = None) -> None:
    """Log a warning, with full exception details only in debug mode.

    Args:
        logger: The logger instance to use
        message: Generic log message without sensitive data
        error: Optional exception to include
    """
    _log(logger, logging.WARNING, message, error)
