"""
Formatting and aggregation helpers for dashboard data.

This module provides the currency and date formatting used on dashboard
cards and tables, the paid/pending invoice aggregation, and the helpers
that lay out the revenue chart axis and the pagination control.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, Union

import pandas as pd
from dateutil import parser

# Configure logging
logger = logging.getLogger(__name__)

INVOICE_STATUSES = ("paid", "pending")

def format_currency(amount: int) -> str:
    """Format an amount in cents as a US dollar string, e.g. ``"$1,234.56"``."""
    dollars = amount / 100
    sign = "-" if dollars < 0 else ""
    return f"{sign}${abs(dollars):,.2f}"

def format_date_to_local(value: Union[str, date, datetime]) -> str:
    """Render a date the way the dashboard tables show it, e.g. ``"Dec 6, 2022"``."""
    if isinstance(value, str):
        value = parser.isoparse(value)
    return f"{value.strftime('%b')} {value.day}, {value.year}"

def summarize_invoice_totals(invoices: Iterable[Mapping[str, Any]]) -> Dict[str, int]:
    """Sum invoice amounts (in cents) per status.

    Only "paid" and "pending" are reported; any other status is ignored.

    Args:
        invoices: Records with ``status`` and ``amount`` keys.

    Returns:
        ``{"paid": <cents>, "pending": <cents>}``
    """
    df = pd.DataFrame(list(invoices), columns=["status", "amount"])
    totals = df.groupby("status")["amount"].sum() if not df.empty else pd.Series(dtype="int64")

    unknown = set(totals.index) - set(INVOICE_STATUSES)
    if unknown:
        logger.debug(f"Ignoring invoices with unrecognised status: {sorted(unknown)}")

    return {status: int(totals.get(status, 0)) for status in INVOICE_STATUSES}

def generate_y_axis(revenue: Sequence[Any]) -> Tuple[List[str], int]:
    """Build the revenue chart's y-axis labels.

    The top label is the highest monthly amount rounded up to the next
    thousand; labels step down by 1000 to zero.

    Args:
        revenue: Records with an ``amount`` attribute (whole dollars).

    Returns:
        (labels, top_label), e.g. (["$5K", "$4K", ..., "$0K"], 5000)
    """
    amounts = pd.Series([record.amount for record in revenue], dtype="float64")
    highest = amounts.max() if not amounts.empty else 0
    top_label = int(-(-highest // 1000) * 1000)

    labels = [f"${i // 1000}K" for i in range(top_label, -1, -1000)]
    return labels, top_label

def generate_pagination(current_page: int, total_pages: int) -> List[Union[int, str]]:
    """Pages to show in the pagination control, with "..." for gaps."""
    # Show every page when there are few enough
    if total_pages <= 7:
        return list(range(1, total_pages + 1))

    # Near the start: first 3, ellipsis, last 2
    if current_page <= 3:
        return [1, 2, 3, "...", total_pages - 1, total_pages]

    # Near the end: first 2, ellipsis, last 3
    if current_page >= total_pages - 2:
        return [1, 2, "...", total_pages - 2, total_pages - 1, total_pages]

    # Somewhere in the middle
    return [
        1,
        "...",
        current_page - 1,
        current_page,
        current_page + 1,
        "...",
        total_pages,
    ]
