"""
Centralized error handling decorators.

Provides reusable decorators for common error handling patterns:
- Exception suppression with logging
- Error logging with context
"""
from typing import Callable, TypeVar, ParamSpec, Any, Optional
from functools import wraps

from tweenchain.logging.logger import get_logger

P = ParamSpec('P')
T = TypeVar('T')

logger = get_logger(__name__)


def suppress_exceptions(
    logger_instance: Optional[Any] = None,
    message: str = "Operation failed",
    return_value: Any = None,
    log_level: str = "error"
) -> Callable[[Callable[P, T]], Callable[P, Optional[T]]]:
    """
    Decorator to suppress exceptions and log them.
    
    Args:
        logger_instance: Logger to use (defaults to module logger)
        message: Error message prefix
        return_value: Value to return on exception
        log_level: Logging level ('debug', 'info', 'warning', 'error')
    
    Returns:
        Decorated function that suppresses exceptions
    
    Example:
        @suppress_exceptions(logger, "Invalid curve asset", return_value=None)
        def make_adapter(asset) -> CurveAdapter:
            return CurveAdapter(*parse(asset))
    """
    def decorator(func: Callable[P, T]) -> Callable[P, Optional[T]]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> Optional[T]:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                log = logger_instance or logger
                log_method = getattr(log, log_level, log.error)
                log_method(f"{message}: {e}", exc_info=True)
                return return_value
        return wrapper
    return decorator


def log_errors(
    logger_instance: Optional[Any] = None,
    message: str = "Error in {func_name}",
    log_level: str = "error",
    reraise: bool = True
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator to log errors with context before optionally re-raising.
    
    Args:
        logger_instance: Logger to use (defaults to module logger)
        message: Error message template (can use {func_name} placeholder)
        log_level: Logging level ('debug', 'info', 'warning', 'error')
        reraise: Whether to re-raise the exception after logging
    
    Returns:
        Decorated function that logs errors
    
    Example:
        @log_errors(logger, "Scheduled action failed", reraise=False)
        def _run(self, action) -> None:
            action()
    """
    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                log = logger_instance or logger
                log_method = getattr(log, log_level, log.error)
                error_msg = message.format(func_name=func.__name__)
                log_method(f"{error_msg}: {e}", exc_info=True)
                
                if reraise:
                    raise
                return None  # type: ignore
        return wrapper
    return decorator


