import time
from functools import wraps


def time_func(func, num_decimals: int = 6):
    """Logs the wall time of `func` through the caller's logger, if it has one."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - start_time

        self_ = args[0] if args else None
        if self_ is not None and hasattr(self_, "logger") and hasattr(self_.logger, "debug"):
            self_.logger.debug(f"Function '{func.__name__}' executed in {elapsed:.{num_decimals}f} seconds.")
        elif kwargs.get("logger") and hasattr(kwargs["logger"], "debug"):
            kwargs["logger"].debug(f"Function '{func.__name__}' executed in {elapsed:.{num_decimals}f} seconds.")
        return result

    return wrapper
