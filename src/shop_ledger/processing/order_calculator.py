"""Order profit and aggregate totals."""

from collections.abc import Iterable
from decimal import Decimal

from shop_ledger.models.order import Order
from shop_ledger.models.report import OrderSummary
from shop_ledger.utils.decimal_utils import sum_amounts
from shop_ledger.utils.logging_config import get_logger

logger = get_logger(__name__)


def compute_order_profit(order: Order) -> Decimal:
    """Profit of a single order: price minus cost, shipping and fees.

    Defined for every order regardless of status.

    Args:
        order: The order.

    Returns:
        Profit as Decimal (negative for a loss).
    """
    return order.price - (order.cost + order.shipping_cost + order.additional_fees)


def active_orders(orders: Iterable[Order]) -> list[Order]:
    """Return the orders that count toward totals (all but Cancelled)."""
    return [order for order in orders if order.is_active]


def summarize_orders(orders: Iterable[Order]) -> OrderSummary:
    """Aggregate revenue, expenses and order count over non-cancelled orders.

    Cancelled orders contribute nothing. Input values are not sanitized:
    a NaN price or cost propagates into the totals.

    Args:
        orders: Orders from a snapshot. Not modified.

    Returns:
        OrderSummary; profit and margin are derived from its totals.
    """
    included = active_orders(orders)

    total_revenue = sum_amounts(order.price for order in included)
    total_expenses = sum_amounts(order.total_expenses for order in included)

    summary = OrderSummary(
        total_orders=len(included),
        total_revenue=total_revenue,
        total_expenses=total_expenses,
    )

    logger.debug(
        f"Summarized {summary.total_orders} orders: "
        f"revenue={summary.total_revenue}, expenses={summary.total_expenses}"
    )
    return summary
