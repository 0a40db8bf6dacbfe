# runner/retry.py
import asyncio
import functools
import random
from typing import Any, Callable, Dict, Optional, Tuple, Type
from .logger import log

def async_retry(
    retries: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    jitter: bool = True,
    describe: Optional[Callable[..., Dict[str, Any]]] = None,
):
    """
    Retry an async callable with exponential backoff.

    Args:
        retries: extra attempts after the first one
        delay: seconds before the first retry
        backoff: multiplier applied to the delay after each failure
        exceptions: exception types that trigger a retry; anything else propagates at once
        jitter: scale each wait by a random factor in [0.5, 1.5)
        describe: called with the wrapped function's arguments; the returned
            dict (e.g. {"url": ...}) is added to every retry log line
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            context = describe(*args, **kwargs) if describe else {}
            current_delay = delay

            for attempt in range(retries + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt == retries:
                        log("ERROR", "retry_failed", f"{func.__name__} gave up after {attempt + 1} attempts",
                            attempts=attempt + 1, error=str(e), **context)
                        raise

                    wait_time = current_delay * (0.5 + random.random()) if jitter else current_delay
                    log("WARN", "retry_attempt", f"Retrying {func.__name__} in {wait_time:.2f}s",
                        attempt=attempt + 1, retries=retries, error=str(e), **context)
                    await asyncio.sleep(wait_time)
                    current_delay *= backoff
        return wrapper
    return decorator
