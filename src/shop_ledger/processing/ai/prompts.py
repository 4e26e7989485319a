"""Prompt templates for the AI dashboard summary."""

from shop_ledger.processing.ai.models import SummaryRequest

# System prompt for summary generation
SUMMARY_SYSTEM_PROMPT = """You are an expert in summarizing business metrics \
for Etsy store owners. Write a concise, plain-language summary of the store's \
performance from the metrics you are given. Mention revenue, expenses, profit \
margin and order volume, and point out anything notable.

Response format: Raw JSON only - no markdown code blocks, no explanation outside the JSON."""


def build_summary_prompt(request: SummaryRequest) -> str:
    """Build the user prompt for a dashboard summary.

    Args:
        request: Metrics and period descriptors.

    Returns:
        Formatted prompt string.
    """
    return f"""Given the following metrics for the period between \
{request.start_date} and {request.end_date}, generate a concise summary of the \
Etsy business performance.

Total Orders: {request.total_orders}
Profit Margin: {request.profit_margin:f}%
Total Revenue: {request.total_revenue:f}
Total Expenses: {request.total_expenses:f}

Respond with JSON only:
{{"summary": "..."}}"""
