"""Instrumentation for calls to the REST backend."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from browse_app.logging_config import ensure_correlation_id, get_logger, log_event

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _preview_kwargs(kwargs: dict, max_keys: int = 6) -> dict:
    preview = dict(list(kwargs.items())[:max_keys])
    if len(kwargs) > max_keys:
        preview["truncated"] = True
    return preview


def instrument_call(name: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log start, completion and failure of a backend call with its duration."""

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()
            log_event(
                LOGGER,
                logging.DEBUG,
                "backend_call_started",
                call=name,
                correlation_id=correlation_id,
                kwargs=_preview_kwargs(kwargs),
            )
            try:
                result = func(*args, **kwargs)
            except Exception:
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "backend_call_failed",
                    call=name,
                    correlation_id=correlation_id,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                )
                raise
            log_event(
                LOGGER,
                logging.INFO,
                "backend_call_completed",
                call=name,
                correlation_id=correlation_id,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_call"]
