"""Report data models for the dashboard aggregates."""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class OrderSummary:
    """Totals over the non-cancelled orders of a snapshot.

    Profit and margin are derived from revenue and expenses so they can
    never disagree with them.

    Attributes:
        total_orders: Number of orders included in the totals.
        total_revenue: Sum of order prices.
        total_expenses: Sum of cost, shipping and fees.
    """

    total_orders: int = 0
    total_revenue: Decimal = field(default_factory=lambda: Decimal("0"))
    total_expenses: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def total_profit(self) -> Decimal:
        """Revenue minus expenses."""
        return self.total_revenue - self.total_expenses

    @property
    def profit_margin(self) -> Decimal:
        """Profit as a percentage of revenue, zero when there is no revenue."""
        revenue = self.total_revenue
        if revenue.is_nan() or revenue <= 0:
            return Decimal("0")
        return self.total_profit / revenue * 100

    def to_dict(self) -> dict[str, object]:
        return {
            "totalOrders": self.total_orders,
            "totalRevenue": self.total_revenue,
            "totalExpenses": self.total_expenses,
            "totalProfit": self.total_profit,
            "profitMargin": self.profit_margin,
        }


@dataclass(frozen=True)
class MonthlyRevenue:
    """One bar of the revenue chart.

    Attributes:
        month: English month abbreviation ("Jan".."Dec").
        revenue: Revenue accumulated for that month across all years.
    """

    month: str
    revenue: Decimal

    def to_dict(self) -> dict[str, object]:
        return {"month": self.month, "revenue": self.revenue}


@dataclass(frozen=True)
class CapitalSummary:
    """Net position of the capital ledger.

    Attributes:
        total_deposits: Sum of deposit amounts.
        total_withdrawals: Sum of withdrawal amounts.
    """

    total_deposits: Decimal = field(default_factory=lambda: Decimal("0"))
    total_withdrawals: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def net_capital(self) -> Decimal:
        """Deposits minus withdrawals."""
        return self.total_deposits - self.total_withdrawals

    def to_dict(self) -> dict[str, object]:
        return {
            "totalDeposits": self.total_deposits,
            "totalWithdrawals": self.total_withdrawals,
            "netCapital": self.net_capital,
        }


@dataclass
class DashboardOverview:
    """Everything the overview page shows, computed from one snapshot.

    Attributes:
        orders: Order totals.
        monthly_revenue: Chart series in calendar order.
        capital: Capital ledger position.
        skipped_dates: Number of active orders left out of the chart
            because their date could not be read.
    """

    orders: OrderSummary
    monthly_revenue: list[MonthlyRevenue] = field(default_factory=list)
    capital: CapitalSummary = field(default_factory=CapitalSummary)
    skipped_dates: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "orders": self.orders.to_dict(),
            "monthlyRevenue": [m.to_dict() for m in self.monthly_revenue],
            "capital": self.capital.to_dict(),
            "skippedDates": self.skipped_dates,
        }
