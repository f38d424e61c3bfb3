"""Data access layer for the invoice dashboard."""
from .data_fetcher import ITEMS_PER_PAGE, QueryService
from .utils.db_utils import DataFetchError

__all__ = ["ITEMS_PER_PAGE", "DataFetchError", "QueryService"]
