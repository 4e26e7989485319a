"""AI-generated prose summary of the dashboard metrics."""

import threading
from dataclasses import dataclass, replace

from shop_ledger.processing.ai.client import AIClient, AIClientConfig, AIClientError
from shop_ledger.processing.ai.models import (
    RequestState,
    SummaryRequest,
    SummaryRequestStatus,
    SummaryResult,
)
from shop_ledger.processing.ai.prompts import SUMMARY_SYSTEM_PROMPT, build_summary_prompt
from shop_ledger.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to generate summary. Please try again."


class SummaryGenerationError(Exception):
    """Raised when a summary could not be produced, for any reason.

    The message is always GENERIC_FAILURE_MESSAGE; the underlying error is
    chained as __cause__.
    """

    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE):
        super().__init__(message)


class RequestInFlightError(Exception):
    """Raised when a summary is requested while another one is running."""

    pass


@dataclass
class DashboardSummarizer:
    """Turns dashboard metrics into a short prose summary.

    Attributes:
        client: AI API client.
    """

    client: AIClient

    @classmethod
    def create(
        cls,
        api_key_env: str = "ANTHROPIC_API_KEY",
        model: str = "claude-sonnet-4-5-20250929",
        max_tokens: int = 400,
        timeout: float = 60.0,
    ) -> "DashboardSummarizer":
        """Create a summarizer with its own client."""
        client_config = AIClientConfig(
            api_key_env=api_key_env,
            model=model,
            max_tokens=max_tokens,
            timeout=timeout,
        )
        return cls(client=AIClient(config=client_config))

    @property
    def is_available(self) -> bool:
        """Check if the AI service can be reached (API key is set)."""
        return self.client.is_available

    def generate(self, request: SummaryRequest) -> SummaryResult:
        """Generate a summary for the given metrics.

        Makes exactly one call to the text generation service.

        Args:
            request: Metrics and period descriptors.

        Returns:
            SummaryResult with the generated text.

        Raises:
            SummaryGenerationError: If the call fails or the response does
                not contain a summary string.
        """
        prompt = build_summary_prompt(request)

        try:
            with LogContext(logger, "dashboard summary", total_orders=request.total_orders):
                response, input_tokens, output_tokens = self.client.send_message(
                    SUMMARY_SYSTEM_PROMPT, prompt
                )
                data = self.client.parse_json_response(response)
                summary = data.get("summary")
                if not isinstance(summary, str) or not summary.strip():
                    raise ValueError(f"Response has no summary text: {response[:100]}")
        except (AIClientError, ValueError) as e:
            raise SummaryGenerationError() from e

        return SummaryResult(
            summary=summary.strip(),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )


class SummaryRequestTracker:
    """Tracks one user-triggered summary request at a time.

    States move IDLE -> IN_FLIGHT -> SUCCEEDED or FAILED. A new request may
    start from any state except IN_FLIGHT; there is no cancellation. The
    status history holds the latest cycle: the state the request started
    from, IN_FLIGHT, then the outcome.
    """

    def __init__(self, summarizer: DashboardSummarizer):
        self.summarizer = summarizer
        self._lock = threading.Lock()
        self._status = SummaryRequestStatus(history=[RequestState.IDLE])

    @property
    def status(self) -> SummaryRequestStatus:
        """Copy of the current status."""
        with self._lock:
            return replace(self._status, history=list(self._status.history))

    @property
    def state(self) -> RequestState:
        return self._status.state

    @property
    def is_in_flight(self) -> bool:
        return self._status.state is RequestState.IN_FLIGHT

    def _transition(
        self,
        state: RequestState,
        result: SummaryResult | None = None,
        error: str | None = None,
    ) -> None:
        self._status.state = state
        self._status.result = result
        self._status.error = error
        self._status.history.append(state)

    def run(self, request: SummaryRequest) -> SummaryRequestStatus:
        """Run a summary request to completion.

        Failures are recorded in the returned status rather than raised.

        Args:
            request: Metrics and period descriptors.

        Returns:
            The status after the request finished (SUCCEEDED or FAILED).

        Raises:
            RequestInFlightError: If a request is already running.
        """
        with self._lock:
            if self._status.state is RequestState.IN_FLIGHT:
                raise RequestInFlightError("A summary request is already in flight")
            # History covers the current cycle only
            self._status.history = [self._status.state]
            self._transition(RequestState.IN_FLIGHT)

        try:
            result = self.summarizer.generate(request)
        except SummaryGenerationError as e:
            logger.warning(f"Summary generation failed: {e.__cause__}")
            with self._lock:
                self._transition(RequestState.FAILED, error=str(e))
        except Exception:
            logger.exception("Unexpected error during summary generation")
            with self._lock:
                self._transition(RequestState.FAILED, error=GENERIC_FAILURE_MESSAGE)
        else:
            with self._lock:
                self._transition(RequestState.SUCCEEDED, result=result)

        return self.status
