"""
Structured logging helpers on top of Loguru.

Records logged through StructuredLogger carry the id of the probe cycle
that produced them, so one search can be followed across the store and
gateway clients.
"""

from loguru import logger
from contextvars import ContextVar
from typing import Optional
from functools import wraps
import inspect
import time

# Identifies the probe cycle a log record belongs to
probe_id_var: ContextVar[Optional[str]] = ContextVar("probe_id", default=None)


class StructuredLogger:
    """Loguru bound to the current probe id plus any extra fields"""

    @staticmethod
    def bind(**fields):
        extra = {"probe_id": probe_id_var.get(), **fields}
        return logger.bind(**{k: v for k, v in extra.items() if v is not None})

    @staticmethod
    def log(level: str, message: str, **fields):
        StructuredLogger.bind(**fields).log(level, message)

    @staticmethod
    def info(message: str, **fields):
        StructuredLogger.log("INFO", message, **fields)

    @staticmethod
    def warning(message: str, **fields):
        StructuredLogger.log("WARNING", message, **fields)

    @staticmethod
    def error(message: str, **fields):
        StructuredLogger.log("ERROR", message, **fields)

    @staticmethod
    def debug(message: str, **fields):
        StructuredLogger.log("DEBUG", message, **fields)


def log_execution_time(func):
    """Decorator logging how long a coroutine took, and its error if it raised"""
    if not inspect.iscoroutinefunction(func):
        raise TypeError("log_execution_time only wraps coroutine functions")

    @wraps(func)
    async def timed(*args, **kwargs):
        started = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            StructuredLogger.error(
                f"{func.__qualname__} raised",
                function=func.__name__,
                duration=round(time.perf_counter() - started, 3),
                error=str(e),
            )
            raise
        finally:
            elapsed = round(time.perf_counter() - started, 3)
            StructuredLogger.debug(
                f"{func.__qualname__} took {elapsed}s",
                function=func.__name__,
                duration=elapsed,
            )

    return timed


def log_http_request(
    method: str,
    url: str,
    status_code: Optional[int] = None,
    duration: Optional[float] = None,
    **fields,
):
    """Log one outgoing call to the store or the model API.

    A missing status means the request never got a response.
    """
    failed = status_code is None or status_code >= 400
    StructuredLogger.log(
        "ERROR" if failed else "DEBUG",
        f"HTTP {method} {url} {'failed' if failed else f'-> {status_code}'}",
        type="http_request",
        method=method,
        url=url,
        status_code=status_code,
        duration=round(duration, 3) if duration is not None else None,
        **fields,
    )


__all__ = [
    "logger",
    "StructuredLogger",
    "log_execution_time",
    "log_http_request",
    "probe_id_var",
]
