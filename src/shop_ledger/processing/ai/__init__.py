"""AI-generated dashboard summaries.

Example usage:
    from shop_ledger.processing.ai import DashboardSummarizer, SummaryRequest

    summarizer = DashboardSummarizer.create()
    if summarizer.is_available:
        request = SummaryRequest.from_order_summary(order_summary)
        print(summarizer.generate(request).summary)
"""

from shop_ledger.processing.ai.client import (
    AIClient,
    AIClientConfig,
    AIClientError,
    APIKeyNotFoundError,
)
from shop_ledger.processing.ai.models import (
    AIUsageStats,
    RequestState,
    SummaryRequest,
    SummaryRequestStatus,
    SummaryResult,
)
from shop_ledger.processing.ai.summarizer import (
    GENERIC_FAILURE_MESSAGE,
    DashboardSummarizer,
    RequestInFlightError,
    SummaryGenerationError,
    SummaryRequestTracker,
)

__all__ = [
    # Summarizer
    "DashboardSummarizer",
    "SummaryRequestTracker",
    # Client
    "AIClient",
    "AIClientConfig",
    # Errors
    "AIClientError",
    "APIKeyNotFoundError",
    "SummaryGenerationError",
    "RequestInFlightError",
    "GENERIC_FAILURE_MESSAGE",
    # Models
    "SummaryRequest",
    "SummaryResult",
    "SummaryRequestStatus",
    "RequestState",
    "AIUsageStats",
]
