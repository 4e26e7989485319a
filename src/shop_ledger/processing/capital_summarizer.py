"""Capital ledger totals."""

from collections.abc import Iterable

from shop_ledger.models.capital import CapitalEntry, CapitalType
from shop_ledger.models.report import CapitalSummary
from shop_ledger.utils.decimal_utils import sum_amounts
from shop_ledger.utils.logging_config import get_logger

logger = get_logger(__name__)


def summarize_capital(entries: Iterable[CapitalEntry]) -> CapitalSummary:
    """Sum deposits and withdrawals.

    Stored amounts are positive; the entry type decides which total they
    count toward. An empty ledger gives all-zero totals.

    Args:
        entries: Capital entries from a snapshot. Not modified.

    Returns:
        CapitalSummary with net_capital = deposits - withdrawals.
    """
    entries = list(entries)

    total_deposits = sum_amounts(
        entry.amount for entry in entries if entry.entry_type is CapitalType.DEPOSIT
    )
    total_withdrawals = sum_amounts(
        entry.amount for entry in entries if entry.entry_type is CapitalType.WITHDRAWAL
    )

    summary = CapitalSummary(
        total_deposits=total_deposits,
        total_withdrawals=total_withdrawals,
    )
    logger.debug(
        f"Summarized {len(entries)} capital entries: "
        f"deposits={total_deposits}, withdrawals={total_withdrawals}"
    )
    return summary
