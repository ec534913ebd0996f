"""I/O utilities: logging setup and the scoped output destination."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

from .error_handling import ResourceError

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO", log_file: Path | None = None) -> logging.Logger:
    """Set up logging configuration for png2flic.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file that receives a copy of every record

    Returns:
        Configured logger instance
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    return logging.getLogger("png2flic")


@contextmanager
def open_output(path: Path) -> Iterator[BinaryIO]:
    """Open *path* for binary writing and close it exactly once on exit.

    Nothing is removed on failure: whatever was written so far stays on disk.

    Raises:
        ResourceError: If the destination cannot be opened
    """
    try:
        fp = open(path, "wb")
    except OSError as e:
        logger.error(f"🚨 Failed to open output file {path}: {e}")
        raise ResourceError(
            f'Failed to open output file "{path}"', cause=e, context={"output": path}
        ) from e

    try:
        yield fp
    finally:
        fp.close()
