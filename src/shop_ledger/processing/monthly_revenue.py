"""Revenue bucketed by calendar month for the overview chart."""

from collections.abc import Iterable
from decimal import Decimal

from shop_ledger.models.order import Order
from shop_ledger.models.report import MonthlyRevenue
from shop_ledger.processing.order_calculator import active_orders
from shop_ledger.utils.date_utils import MONTH_ABBREVIATIONS, month_abbreviation, normalize_date
from shop_ledger.utils.decimal_utils import ZERO, is_positive
from shop_ledger.utils.logging_config import get_logger

logger = get_logger(__name__)


def monthly_revenue(orders: Iterable[Order]) -> list[MonthlyRevenue]:
    """Bucket non-cancelled order revenue by month name.

    Months are keyed by name only, so March 2023 and March 2024 land in the
    same bucket. Orders whose date cannot be normalized are skipped.

    Args:
        orders: Orders from a snapshot. Not modified.

    Returns:
        Entries in calendar order (Jan..Dec), only for months whose revenue
        is greater than zero.
    """
    return bucket_monthly_revenue(orders)[0]


def count_undated_orders(orders: Iterable[Order]) -> int:
    """Number of active orders left out of the monthly series for lack of a date."""
    return bucket_monthly_revenue(orders)[1]


def bucket_monthly_revenue(orders: Iterable[Order]) -> tuple[list[MonthlyRevenue], int]:
    """Compute the monthly series and the undated-order count in one pass.

    Returns:
        Tuple of (series as returned by monthly_revenue(), number of active
        orders skipped for lack of a readable date).
    """
    totals: dict[str, Decimal] = {}
    skipped = 0

    for order in active_orders(orders):
        order_date = normalize_date(order.order_date)
        if order_date is None:
            skipped += 1
            logger.debug(f"Skipping order {order.id} with unreadable date: {order.order_date!r}")
            continue
        month = month_abbreviation(order_date)
        totals[month] = totals.get(month, ZERO) + order.price

    series = [
        MonthlyRevenue(month=month, revenue=totals[month])
        for month in MONTH_ABBREVIATIONS
        if month in totals and is_positive(totals[month])
    ]
    return series, skipped
