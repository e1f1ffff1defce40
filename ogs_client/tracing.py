# ogs_client/tracing.py

"""
tracing
~~~~~~~

This module provides components for context-aware logging of service calls.
"""

import functools
from typing import Any, Callable

import structlog

logger = structlog.get_logger(__name__)


def trace_call(func: Callable) -> Callable:
    """A decorator to add structured tracing to an async service method."""
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        service_name = args[0].__class__.__name__
        logger.debug("Entering service call.", service=service_name, call=func.__name__)
        result = await func(*args, **kwargs)
        logger.debug("Exiting service call.", service=service_name, call=func.__name__)
        return result
    return wrapper
