"""Aggregation of orders and capital entries into dashboard metrics."""

from shop_ledger.processing.capital_summarizer import summarize_capital
from shop_ledger.processing.dashboard import build_overview, build_summary_request
from shop_ledger.processing.monthly_revenue import (
    bucket_monthly_revenue,
    count_undated_orders,
    monthly_revenue,
)
from shop_ledger.processing.order_calculator import (
    active_orders,
    compute_order_profit,
    summarize_orders,
)

__all__ = [
    "compute_order_profit",
    "active_orders",
    "summarize_orders",
    "monthly_revenue",
    "bucket_monthly_revenue",
    "count_undated_orders",
    "summarize_capital",
    "build_overview",
    "build_summary_request",
]
