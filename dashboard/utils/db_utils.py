"""
Query helpers shared by the dashboard data functions.

Holds the single error type callers see, the decorator that turns any
failure into it, and the small filter/pagination builders.
"""
import logging
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement

from db.model import Customer

# Configure logging
logger = logging.getLogger(__name__)

T = TypeVar('T')

class DataFetchError(Exception):
    """Raised when a dashboard read fails. Carries only a generic message."""
    pass

def handle_db_errors(
    message: str
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator that logs any failure and re-raises it as ``DataFetchError(message)``.

    The original exception is logged with its traceback and then dropped,
    so the caller only ever sees the generic message.
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Database Error in {func.__name__}: {str(e)}", exc_info=True)
            # Raised outside the except block so no __context__ is attached
            raise DataFetchError(message)
        return wrapper
    return decorator

def contains_filter(query: str) -> ColumnElement:
    """Customer name OR email contains ``query`` (LIKE, store collation)."""
    return or_(
        Customer.name.contains(query, autoescape=True),
        Customer.email.contains(query, autoescape=True),
    )

def page_offset(current_page: int, page_size: int) -> int:
    """Row offset of a 1-indexed page. Pages below 1 are treated as page 1."""
    if current_page < 1:
        logger.warning(f"Page {current_page} is out of range; using page 1")
        current_page = 1
    return (current_page - 1) * page_size
