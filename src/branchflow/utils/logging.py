from __future__ import annotations
import inspect
import logging
from functools import wraps
from typing import Any, Callable


def log_calls(logger_name: str | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to log function calls at DEBUG level with basic error logging.

    Coroutine functions are wrapped with a coroutine so the call is logged when
    it is awaited, not when the coroutine object is created.
    """

    def _decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        name = logger_name or func.__module__
        logger = logging.getLogger(name)

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def _async_wrapper(*args: Any, **kwargs: Any) -> Any:
                logger.debug("Calling %s args=%s kwargs=%s", func.__qualname__, args, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    logger.exception("Error in %s: %s", func.__qualname__, e)
                    raise
                logger.debug("%s returned %r", func.__qualname__, result)
                return result

            return _async_wrapper

        @wraps(func)
        def _wrapper(*args: Any, **kwargs: Any) -> Any:
            logger.debug("Calling %s args=%s kwargs=%s", func.__qualname__, args, kwargs)
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.exception("Error in %s: %s", func.__qualname__, e)
                raise
            logger.debug("%s returned %r", func.__qualname__, result)
            return result

        return _wrapper

    return _decorator
