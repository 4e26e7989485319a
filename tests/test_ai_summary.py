"""Tests for the AI dashboard summary."""

import threading
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from shop_ledger.models.report import OrderSummary
from shop_ledger.processing.ai.client import AIClient, AIClientConfig, AIClientError
from shop_ledger.processing.ai.models import (
    AIUsageStats,
    RequestState,
    SummaryRequest,
    SummaryResult,
)
from shop_ledger.processing.ai.prompts import build_summary_prompt
from shop_ledger.processing.ai.summarizer import (
    GENERIC_FAILURE_MESSAGE,
    DashboardSummarizer,
    RequestInFlightError,
    SummaryGenerationError,
    SummaryRequestTracker,
)


def create_request() -> SummaryRequest:
    return SummaryRequest(
        total_orders=3,
        profit_margin=Decimal("45.68"),
        total_revenue=Decimal("445.50"),
        total_expenses=Decimal("242.00"),
    )


def mock_client(response: str = '{"summary": "Revenue is healthy."}') -> MagicMock:
    """AIClient double returning a fixed response."""
    client = MagicMock(spec=AIClient)
    client.is_available = True
    client.send_message.return_value = (response, 120, 30)
    client.parse_json_response.side_effect = AIClient().parse_json_response
    return client


class TestSummaryRequest:
    """Tests for SummaryRequest."""

    def test_from_order_summary_rounds(self) -> None:
        summary = OrderSummary(
            total_orders=3,
            total_revenue=Decimal("445.5"),
            total_expenses=Decimal("242"),
        )

        request = SummaryRequest.from_order_summary(summary)

        assert request.total_revenue == Decimal("445.50")
        assert request.total_expenses == Decimal("242.00")
        assert request.profit_margin == Decimal("45.68")
        assert request.start_date == "the beginning of time"
        assert request.end_date == "today"

    def test_to_dict_schema(self) -> None:
        data = create_request().to_dict()

        assert data == {
            "totalOrders": 3,
            "profitMargin": 45.68,
            "totalRevenue": 445.5,
            "totalExpenses": 242.0,
            "startDate": "the beginning of time",
            "endDate": "today",
        }

    def test_negative_order_count_rejected(self) -> None:
        with pytest.raises(ValueError):
            SummaryRequest(
                total_orders=-1,
                profit_margin=Decimal("0"),
                total_revenue=Decimal("0"),
                total_expenses=Decimal("0"),
            )

    def test_prompt_lists_metrics(self) -> None:
        prompt = build_summary_prompt(create_request())

        assert "between the beginning of time and today" in prompt
        assert "Total Orders: 3" in prompt
        assert "Profit Margin: 45.68%" in prompt
        assert "Total Revenue: 445.50" in prompt
        assert "Total Expenses: 242.00" in prompt
        assert '{"summary": "..."}' in prompt


class TestAIClient:
    """Tests for AIClient."""

    def test_is_available_without_key(self) -> None:
        client = AIClient(config=AIClientConfig(api_key_env="TEST_SHOP_AI_KEY"))
        with patch.dict("os.environ", {}, clear=True):
            assert client.is_available is False

    def test_is_available_with_key(self) -> None:
        client = AIClient(config=AIClientConfig(api_key_env="TEST_SHOP_AI_KEY"))
        with patch.dict("os.environ", {"TEST_SHOP_AI_KEY": "sk-test"}):
            assert client.is_available is True

    def test_send_message_single_attempt(self) -> None:
        client = AIClient()
        sdk = MagicMock()
        response = MagicMock()
        response.content = [SimpleNamespace(type="text", text='{"summary": "ok"}')]
        response.usage.input_tokens = 100
        response.usage.output_tokens = 20
        sdk.messages.create.return_value = response
        client._client = sdk
        client._initialized = True

        text, input_tokens, output_tokens = client.send_message("system", "prompt")

        assert text == '{"summary": "ok"}'
        assert (input_tokens, output_tokens) == (100, 20)
        sdk.messages.create.assert_called_once()
        assert sdk.messages.create.call_args.kwargs["max_tokens"] == 400
        assert client.usage_stats.total_requests == 1

    def test_send_message_failure_not_retried(self) -> None:
        client = AIClient()
        sdk = MagicMock()
        sdk.messages.create.side_effect = ConnectionError("network down")
        client._client = sdk
        client._initialized = True

        with pytest.raises(AIClientError, match="network down"):
            client.send_message("system", "prompt")

        assert sdk.messages.create.call_count == 1
        assert client.usage_stats.failed_requests == 1

    def _client_returning(self, response: object) -> tuple[AIClient, MagicMock]:
        client = AIClient()
        sdk = MagicMock()
        sdk.messages.create.return_value = response
        client._client = sdk
        client._initialized = True
        return client, sdk

    def test_non_text_block_is_client_error(self) -> None:
        response = SimpleNamespace(
            content=[SimpleNamespace(type="tool_use")],
            usage=SimpleNamespace(input_tokens=10, output_tokens=2),
        )
        client, _ = self._client_returning(response)

        with pytest.raises(AIClientError, match="no text content"):
            client.send_message("system", "prompt")

        assert client.usage_stats.failed_requests == 1

    def test_text_blocks_joined_around_other_blocks(self) -> None:
        response = SimpleNamespace(
            content=[
                SimpleNamespace(type="text", text='{"summary": '),
                SimpleNamespace(type="tool_use"),
                SimpleNamespace(type="text", text='"ok"}'),
            ],
            usage=SimpleNamespace(input_tokens=10, output_tokens=2),
        )
        client, _ = self._client_returning(response)

        text, _, _ = client.send_message("system", "prompt")

        assert text == '{"summary": "ok"}'

    def test_missing_usage_is_client_error(self) -> None:
        response = SimpleNamespace(
            content=[SimpleNamespace(type="text", text="hi")],
            usage=None,
        )
        client, _ = self._client_returning(response)

        with pytest.raises(AIClientError, match="Malformed response"):
            client.send_message("system", "prompt")

    def test_missing_sdk_is_client_error(self) -> None:
        client = AIClient(config=AIClientConfig(api_key_env="TEST_SHOP_AI_KEY"))
        with (
            patch.dict("os.environ", {"TEST_SHOP_AI_KEY": "sk-test"}),
            patch.dict("sys.modules", {"anthropic": None}),
        ):
            with pytest.raises(AIClientError, match="anthropic package not installed"):
                client.send_message("system", "prompt")

    def test_missing_key_raises(self) -> None:
        client = AIClient(config=AIClientConfig(api_key_env="TEST_SHOP_AI_KEY"))
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(AIClientError, match="TEST_SHOP_AI_KEY"):
                client.send_message("system", "prompt")

    def test_parse_json_plain(self) -> None:
        assert AIClient().parse_json_response('{"summary": "x"}') == {"summary": "x"}

    def test_parse_json_with_fences(self) -> None:
        response = 'Here you go:\n```json\n{"summary": "Sales {up} 10%"}\n```'
        assert AIClient().parse_json_response(response) == {"summary": "Sales {up} 10%"}

    def test_parse_json_missing(self) -> None:
        with pytest.raises(ValueError):
            AIClient().parse_json_response("no json here")


class TestDashboardSummarizer:
    """Tests for DashboardSummarizer."""

    def test_generate_success(self) -> None:
        client = mock_client()
        summarizer = DashboardSummarizer(client=client)

        result = summarizer.generate(create_request())

        assert result == SummaryResult(summary="Revenue is healthy.", input_tokens=120, output_tokens=30)
        client.send_message.assert_called_once()

    def test_transport_failure_is_generic(self) -> None:
        client = mock_client()
        client.send_message.side_effect = AIClientError("Request failed: timeout")
        summarizer = DashboardSummarizer(client=client)

        with pytest.raises(SummaryGenerationError) as exc_info:
            summarizer.generate(create_request())

        assert str(exc_info.value) == GENERIC_FAILURE_MESSAGE
        assert isinstance(exc_info.value.__cause__, AIClientError)
        assert client.send_message.call_count == 1

    @pytest.mark.parametrize(
        "response",
        ["not json", '{"text": "wrong key"}', '{"summary": ""}', '{"summary": 42}'],
    )
    def test_bad_response_is_generic(self, response: str) -> None:
        summarizer = DashboardSummarizer(client=mock_client(response))

        with pytest.raises(SummaryGenerationError, match="Failed to generate summary"):
            summarizer.generate(create_request())

    def test_non_text_response_is_generic(self) -> None:
        """A reply without text blocks surfaces as the generic failure."""
        client = AIClient()
        sdk = MagicMock()
        sdk.messages.create.return_value = SimpleNamespace(
            content=[SimpleNamespace(type="tool_use")],
            usage=SimpleNamespace(input_tokens=10, output_tokens=0),
        )
        client._client = sdk
        client._initialized = True
        summarizer = DashboardSummarizer(client=client)

        with pytest.raises(SummaryGenerationError) as exc_info:
            summarizer.generate(create_request())

        assert str(exc_info.value) == GENERIC_FAILURE_MESSAGE
        assert isinstance(exc_info.value.__cause__, AIClientError)

    def test_create_passes_settings(self) -> None:
        summarizer = DashboardSummarizer.create(
            api_key_env="OTHER_KEY", model="m", max_tokens=50, timeout=5
        )

        assert summarizer.client.config == AIClientConfig(
            api_key_env="OTHER_KEY", model="m", max_tokens=50, timeout=5
        )


class TestSummaryRequestTracker:
    """Tests for SummaryRequestTracker."""

    def test_starts_idle(self) -> None:
        tracker = SummaryRequestTracker(DashboardSummarizer(client=mock_client()))

        assert tracker.state is RequestState.IDLE
        assert tracker.is_in_flight is False

    def test_success_transitions(self) -> None:
        tracker = SummaryRequestTracker(DashboardSummarizer(client=mock_client()))

        status = tracker.run(create_request())

        assert status.state is RequestState.SUCCEEDED
        assert status.result is not None
        assert status.result.summary == "Revenue is healthy."
        assert status.error is None
        assert status.history == [
            RequestState.IDLE,
            RequestState.IN_FLIGHT,
            RequestState.SUCCEEDED,
        ]

    def test_failure_recorded_not_raised(self) -> None:
        client = mock_client()
        client.send_message.side_effect = AIClientError("boom")
        tracker = SummaryRequestTracker(DashboardSummarizer(client=client))

        status = tracker.run(create_request())

        assert status.state is RequestState.FAILED
        assert status.error == GENERIC_FAILURE_MESSAGE
        assert status.result is None

    def test_unexpected_error_is_generic(self) -> None:
        summarizer = MagicMock(spec=DashboardSummarizer)
        summarizer.generate.side_effect = RuntimeError("bug")
        tracker = SummaryRequestTracker(summarizer)

        status = tracker.run(create_request())

        assert status.state is RequestState.FAILED
        assert status.error == GENERIC_FAILURE_MESSAGE

    def test_rerun_after_failure(self) -> None:
        client = mock_client()
        client.send_message.side_effect = [
            AIClientError("boom"),
            ('{"summary": "Second try worked."}', 10, 5),
        ]
        tracker = SummaryRequestTracker(DashboardSummarizer(client=client))

        assert tracker.run(create_request()).state is RequestState.FAILED
        status = tracker.run(create_request())

        assert status.state is RequestState.SUCCEEDED
        assert status.history == [
            RequestState.FAILED,
            RequestState.IN_FLIGHT,
            RequestState.SUCCEEDED,
        ]

    def test_history_bounded_across_runs(self) -> None:
        """A long-lived tracker keeps only the latest request cycle."""
        tracker = SummaryRequestTracker(DashboardSummarizer(client=mock_client()))

        for _ in range(50):
            status = tracker.run(create_request())

        assert status.history == [
            RequestState.SUCCEEDED,
            RequestState.IN_FLIGHT,
            RequestState.SUCCEEDED,
        ]

    def test_second_request_while_in_flight_rejected(self) -> None:
        started = threading.Event()
        release = threading.Event()

        def slow_generate(request: SummaryRequest) -> SummaryResult:
            started.set()
            release.wait(timeout=5)
            return SummaryResult(summary="done")

        summarizer = MagicMock(spec=DashboardSummarizer)
        summarizer.generate.side_effect = slow_generate
        tracker = SummaryRequestTracker(summarizer)

        worker = threading.Thread(target=tracker.run, args=(create_request(),))
        worker.start()
        try:
            assert started.wait(timeout=5)
            assert tracker.is_in_flight is True
            with pytest.raises(RequestInFlightError):
                tracker.run(create_request())
        finally:
            release.set()
            worker.join(timeout=5)

        assert tracker.state is RequestState.SUCCEEDED
        assert summarizer.generate.call_count == 1

    def test_status_is_a_copy(self) -> None:
        tracker = SummaryRequestTracker(DashboardSummarizer(client=mock_client()))

        status = tracker.status
        status.history.append(RequestState.FAILED)

        assert tracker.status.history == [RequestState.IDLE]


class TestAIUsageStats:
    """Tests for AIUsageStats."""

    def test_accumulates(self) -> None:
        stats = AIUsageStats()
        stats.add_request(100, 20)
        stats.add_request(50, 10)
        stats.add_failure()

        assert stats.total_requests == 2
        assert stats.failed_requests == 1
        assert stats.total_input_tokens == 150
        assert stats.total_output_tokens == 30
