"""Standardized Error Handling Utilities

Provides the png2flic exception hierarchy and the helpers that turn
third-party failures (Pillow, OS errors) into it with consistent logging.
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path


class ErrorLevel(Enum):
    """Error severity levels for consistent logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class Png2FlicError(Exception):
    """Base exception class for all png2flic errors."""

    def __init__(
        self, message: str, cause: Exception | None = None, context: dict | None = None
    ):
        super().__init__(message)
        self.cause = cause
        self.context = context or {}

    @property
    def source(self) -> Path | None:
        """Source file the error refers to, when there is one."""
        return self.context.get("source")

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.cause:
            return f"{base_msg} (caused by: {self.cause})"
        return base_msg


class ConfigurationError(Png2FlicError):
    """Raised when an option is missing or invalid."""

    pass


class ResourceError(Png2FlicError):
    """Raised when the output destination cannot be opened."""

    pass


class DecodeError(Png2FlicError):
    """Raised when a source image cannot be decoded into pixels and palette."""

    pass


class ValidationError(Png2FlicError):
    """Raised when a decoded image does not fit the target frame."""

    check = "validation"


class PaletteTooLarge(ValidationError):
    check = "palette size"


class HeightMismatch(ValidationError):
    check = "height"


class WidthMismatch(ValidationError):
    check = "width"


class StrideMismatch(ValidationError):
    check = "row stride"


class PixelCountMismatch(ValidationError):
    check = "pixel count"


def handle_error(
    error: Exception,
    operation: str,
    error_type: type[Png2FlicError] = DecodeError,
    level: ErrorLevel = ErrorLevel.ERROR,
    context: dict | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Log *error* and re-raise it as *error_type*.

    Args:
        error: Original exception that occurred
        operation: Description of operation that failed
        error_type: Type of Png2FlicError to raise
        level: Logging level for the error
        context: Additional context information (e.g. ``source``)
        logger: Logger to use (defaults to module logger)

    Raises:
        Png2FlicError: Always, as *error_type*, chained to *error*
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    message = f"Failed to {operation}: {error}"

    error_context = dict(context or {})
    error_context.update(
        {
            "operation": operation,
            "original_error_type": type(error).__name__,
        }
    )

    log_message = f"🚨 {operation.capitalize()} failed: {error}"
    context_str = ", ".join(f"{k}={v}" for k, v in error_context.items())
    if context_str:
        log_message += f" (context: {context_str})"

    log_func = getattr(logger, level.value)
    log_func(log_message)

    if level in [ErrorLevel.ERROR, ErrorLevel.CRITICAL]:
        logger.debug(f"Traceback for {operation}: {traceback.format_exc()}")

    raise error_type(message, cause=error, context=error_context) from error


@contextmanager
def error_context(
    operation: str,
    error_type: type[Png2FlicError] = DecodeError,
    level: ErrorLevel = ErrorLevel.ERROR,
    context: dict | None = None,
    logger: logging.Logger | None = None,
) -> Iterator[None]:
    """Context manager for standardized error handling.

    Usage:
        with error_context("decode PNG", DecodeError, context={"source": path}):
            Image.open(path)

    Png2FlicError instances pass through unchanged; any other exception is
    logged and converted to *error_type*.
    """
    try:
        yield
    except Png2FlicError:
        raise
    except Exception as e:
        handle_error(e, operation, error_type, level, context, logger)


def log_warning_with_context(
    message: str, context: dict | None = None, logger: logging.Logger | None = None
) -> None:
    """Log a warning with standardized context formatting."""
    if logger is None:
        logger = logging.getLogger(__name__)

    warning_msg = f"⚠️  {message}"
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        warning_msg += f" (context: {context_str})"

    logger.warning(warning_msg)


def describe_error(error: Png2FlicError) -> str:
    """Render *error* as the single diagnostic line shown to users."""
    if isinstance(error, ValidationError):
        reason = f"{error.check} check failed: {error.args[0]}"
    else:
        reason = str(error)

    if error.source is not None:
        return f"{error.source}: {reason}"
    return reason
