"""Overview metrics assembled from a snapshot."""

from shop_ledger.models.report import DashboardOverview
from shop_ledger.processing.ai.models import DEFAULT_END_DATE, DEFAULT_START_DATE, SummaryRequest
from shop_ledger.processing.capital_summarizer import summarize_capital
from shop_ledger.processing.monthly_revenue import bucket_monthly_revenue
from shop_ledger.processing.order_calculator import summarize_orders
from shop_ledger.snapshot import DashboardSnapshot
from shop_ledger.utils.logging_config import get_logger

logger = get_logger(__name__)


def build_overview(snapshot: DashboardSnapshot) -> DashboardOverview:
    """Compute every overview aggregate from one snapshot.

    Args:
        snapshot: Orders and capital entries as loaded from the store.

    Returns:
        DashboardOverview with order totals, the monthly series and the
        capital position.
    """
    series, skipped = bucket_monthly_revenue(snapshot.orders)
    overview = DashboardOverview(
        orders=summarize_orders(snapshot.orders),
        monthly_revenue=series,
        capital=summarize_capital(snapshot.capital),
        skipped_dates=skipped,
    )

    if overview.skipped_dates:
        # Still counted in the totals, just missing from the chart
        logger.info(f"{overview.skipped_dates} order(s) left out of the monthly chart")

    return overview


def build_summary_request(
    overview: DashboardOverview,
    start_date: str = DEFAULT_START_DATE,
    end_date: str = DEFAULT_END_DATE,
) -> SummaryRequest:
    """Package the overview's order totals for the AI summary."""
    return SummaryRequest.from_order_summary(overview.orders, start_date, end_date)
