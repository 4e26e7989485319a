"""Request, result and state models for the AI dashboard summary."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from shop_ledger.models.report import OrderSummary
from shop_ledger.utils.decimal_utils import round_money

DEFAULT_START_DATE = "the beginning of time"
DEFAULT_END_DATE = "today"


class RequestState(Enum):
    """Lifecycle of a summary request."""

    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class SummaryRequest:
    """Metrics sent to the text generation service.

    Monetary fields and the margin are rounded to 2 decimals when built
    from an OrderSummary.

    Attributes:
        total_orders: Number of non-cancelled orders.
        profit_margin: Profit margin percentage.
        total_revenue: Total revenue.
        total_expenses: Total expenses.
        start_date: Free-text start of the period (e.g., "the beginning of time").
        end_date: Free-text end of the period (e.g., "today").
    """

    total_orders: int
    profit_margin: Decimal
    total_revenue: Decimal
    total_expenses: Decimal
    start_date: str = DEFAULT_START_DATE
    end_date: str = DEFAULT_END_DATE

    def __post_init__(self) -> None:
        if self.total_orders < 0:
            raise ValueError(f"total_orders must be >= 0, got {self.total_orders}")

    @classmethod
    def from_order_summary(
        cls,
        summary: OrderSummary,
        start_date: str = DEFAULT_START_DATE,
        end_date: str = DEFAULT_END_DATE,
    ) -> "SummaryRequest":
        """Build a request from order totals, rounding to 2 decimals."""
        return cls(
            total_orders=summary.total_orders,
            profit_margin=round_money(summary.profit_margin),
            total_revenue=round_money(summary.total_revenue),
            total_expenses=round_money(summary.total_expenses),
            start_date=start_date,
            end_date=end_date,
        )

    def to_dict(self) -> dict[str, object]:
        """Serialize with the field names of the request schema."""
        return {
            "totalOrders": self.total_orders,
            "profitMargin": float(self.profit_margin),
            "totalRevenue": float(self.total_revenue),
            "totalExpenses": float(self.total_expenses),
            "startDate": self.start_date,
            "endDate": self.end_date,
        }


@dataclass(frozen=True)
class SummaryResult:
    """Generated prose for the dashboard.

    Attributes:
        summary: The summary text.
        input_tokens: Prompt tokens used.
        output_tokens: Completion tokens used.
    """

    summary: str
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass
class AIUsageStats:
    """Cumulative AI usage for a session.

    Attributes:
        total_requests: Completed API requests.
        failed_requests: Requests that raised.
        total_input_tokens: Prompt tokens used.
        total_output_tokens: Completion tokens used.
    """

    total_requests: int = 0
    failed_requests: int = 0
    total_input_tokens: int = 0
    total_output_tokens: int = 0

    def add_request(self, input_tokens: int, output_tokens: int) -> None:
        """Record a completed request."""
        self.total_requests += 1
        self.total_input_tokens += input_tokens
        self.total_output_tokens += output_tokens

    def add_failure(self) -> None:
        self.failed_requests += 1


@dataclass
class SummaryRequestStatus:
    """Snapshot of a tracker's state.

    result is set only in SUCCEEDED, error only in FAILED.
    """

    state: RequestState = RequestState.IDLE
    result: SummaryResult | None = None
    error: str | None = None
    history: list[RequestState] = field(default_factory=list)
