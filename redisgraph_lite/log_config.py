"""Logging configuration for redisgraph-lite.

Uses loguru with a filtered stderr handler and an optional rotating file sink.

Environment variables for log level control:
- REDISGRAPH_LITE_LOG_LEVEL: Global log level (default: INFO)
- REDISGRAPH_LITE_LOG_CATALOG: Catalog resolver log level
- REDISGRAPH_LITE_LOG_DECODER: Entity/row decoder log level
- REDISGRAPH_LITE_LOG_DIR: Directory for rotating log files (disabled if unset)
"""

import os
import sys
from contextlib import contextmanager
from pathlib import Path
from time import perf_counter

from loguru import logger

# Get global log level from environment
_global_log_level = os.getenv("REDISGRAPH_LITE_LOG_LEVEL", "INFO").upper()

# Component-specific log level overrides
_component_log_levels: dict[str, str] = {
    "catalog": os.getenv("REDISGRAPH_LITE_LOG_CATALOG", "").upper(),
    "decoder": os.getenv("REDISGRAPH_LITE_LOG_DECODER", "").upper(),
}


def _log_filter(record) -> bool:
    """Filter log records based on global and component-specific log levels."""
    name = record["extra"].get("name", "")

    for component, level in _component_log_levels.items():
        if level and component in name:
            try:
                return record["level"].no >= logger.level(level).no
            except ValueError:
                pass  # Invalid level, fall through to global

    try:
        return record["level"].no >= logger.level(_global_log_level).no
    except ValueError:
        return True


# Remove default handler
logger.remove()

# Console handler - uses filter for level control (allows component overrides)
logger.add(
    sys.stderr,
    level=0,  # Accept all, let filter decide
    filter=_log_filter,
    format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    colorize=True,
)

_log_dir = os.getenv("REDISGRAPH_LITE_LOG_DIR")
if _log_dir:
    Path(_log_dir).mkdir(parents=True, exist_ok=True)
    logger.add(
        Path(_log_dir) / "redisgraph_{time:YYYY-MM-DD}.log",
        level="DEBUG",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
        enqueue=True,
    )


def get_logger(name: str):
    """Get a logger with the given component name bound to context.

    Args:
        name: Module or component name

    Returns:
        Logger instance with name bound
    """
    return logger.bind(name=name)


@contextmanager
def log_timing(operation: str, log_instance=None, level: str = "debug"):
    """Context manager for timing operations with automatic logging.

    Args:
        operation: Description of the operation being timed
        log_instance: Logger instance (uses global logger if None)
        level: Log level for the timing message (default: debug)

    Yields:
        dict with 'elapsed_ms' key (populated after context exits)

    Example:
        with log_timing("GRAPH.QUERY", log) as timing:
            reply = await transport.send(...)
    """
    log_fn = log_instance or logger.bind(name="redisgraph_lite")
    timing = {"elapsed_ms": 0.0}
    start = perf_counter()
    try:
        yield timing
    finally:
        timing["elapsed_ms"] = (perf_counter() - start) * 1000
        getattr(log_fn, level)(f"{operation}: {timing['elapsed_ms']:.1f}ms")


__all__ = ["logger", "get_logger", "log_timing"]
