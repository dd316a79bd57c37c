"""
Logging for PyObstacles.

All package messages go through the ``pyobstacles`` logger, configured on
import from the environment:

- PYOBSTACLES_LOG_LEVEL: level name or number (default INFO)
- PYOBSTACLES_LOG_FORMAT: ``default`` or ``json``
- PYOBSTACLES_LOG_FILE: optional file that receives a copy of every record

Per-cycle warnings (dropped prediction records, overwritten registry
entries) are emitted at WARNING; construction timings at DEBUG.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Iterator, List, Optional, TypeVar, Union

F = TypeVar("F", bound=Callable[..., Any])

LOGGER_NAME = "pyobstacles"

LOG_LEVEL_ENV = "PYOBSTACLES_LOG_LEVEL"
LOG_FORMAT_ENV = "PYOBSTACLES_LOG_FORMAT"
LOG_FILE_ENV = "PYOBSTACLES_LOG_FILE"

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FORMAT = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'

LevelLike = Union[int, str]


def _resolve_level(level: Optional[LevelLike]) -> int:
    """Turn a level number or name into a logging level.

    None reads PYOBSTACLES_LOG_LEVEL. Unknown names fall back to INFO.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def _resolve_format(format_str: Optional[str]) -> str:
    if format_str is not None:
        return format_str
    if os.environ.get(LOG_FORMAT_ENV, "default").lower() == "json":
        return JSON_FORMAT
    return DEFAULT_FORMAT


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever sys.stderr is at emit time."""

    def __init__(self):
        super().__init__(sys.stderr)

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)


_logger = logging.getLogger(LOGGER_NAME)
_handlers: List[logging.Handler] = []


def setup_logging(
    level: Optional[LevelLike] = None,
    format_str: Optional[str] = None,
    log_file: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """Configure the ``pyobstacles`` logger.

    Args:
        level: Level number or name (default: from env or INFO).
        format_str: Record format (default: from env, plain or json).
        log_file: File that also receives records (default: from env).
        force: Replace handlers installed by an earlier call.

    Returns:
        The package logger.
    """
    if _handlers and not force:
        return _logger

    for handler in _handlers:
        _logger.removeHandler(handler)
        handler.close()
    _handlers.clear()

    _logger.setLevel(_resolve_level(level))
    _logger.propagate = False
    formatter = logging.Formatter(_resolve_format(format_str))

    handlers: List[logging.Handler] = [_StderrHandler()]
    file_path = log_file or os.environ.get(LOG_FILE_ENV)
    if file_path:
        handlers.append(logging.FileHandler(file_path))

    for handler in handlers:
        handler.setFormatter(formatter)
        _logger.addHandler(handler)
        _handlers.append(handler)

    return _logger


def get_logger() -> logging.Logger:
    """Return the package logger, configuring it on first use."""
    if not _handlers:
        setup_logging()
    return _logger


def LOG_DEBUG(msg: str, *args: Any) -> None:
    get_logger().debug(msg, *args)


def LOG_WARN(msg: str, *args: Any) -> None:
    get_logger().warning(msg, *args)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


@contextmanager
def profile_scope(name: str, level: int = logging.DEBUG) -> Iterator[None]:
    """Log how long the enclosed block took.

    Example:
        with profile_scope("build registry"):
            registry = IndexedObstacles.from_obstacles(obstacles)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        get_logger().log(level, "%s took %.3f ms", name, _elapsed_ms(start))


def timed(func: F) -> F:
    """Log each call's duration at DEBUG, keyed by the function name."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            get_logger().debug("%s took %.3f ms", func.__qualname__, _elapsed_ms(start))

    return wrapper  # type: ignore


setup_logging()
