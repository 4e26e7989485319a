"""Anthropic API client wrapper for summary generation."""

import json
import os
from dataclasses import dataclass, field
from typing import Any

from shop_ledger.processing.ai.models import AIUsageStats
from shop_ledger.utils.logging_config import get_logger

logger = get_logger(__name__)


class AIClientError(Exception):
    """Base exception for AI client errors."""

    pass


class APIKeyNotFoundError(AIClientError):
    """Raised when API key is not found."""

    pass


@dataclass
class AIClientConfig:
    """Configuration for the AI client.

    Attributes:
        api_key_env: Environment variable name for API key.
        model: Model to use for requests.
        max_tokens: Maximum tokens for response.
        timeout: Transport timeout in seconds, enforced by the SDK.
    """

    api_key_env: str = "ANTHROPIC_API_KEY"
    model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 400
    timeout: float = 60.0


@dataclass
class AIClient:
    """Thin wrapper over the Anthropic Messages API.

    The client connects lazily on first use and makes exactly one attempt
    per message; retrying is left to whoever invoked the request.
    """

    config: AIClientConfig = field(default_factory=AIClientConfig)
    usage_stats: AIUsageStats = field(default_factory=AIUsageStats)
    _client: Any = field(default=None, init=False, repr=False)
    _initialized: bool = field(default=False, init=False)

    @property
    def is_available(self) -> bool:
        """Check if AI client can be initialized (API key exists)."""
        return bool(os.environ.get(self.config.api_key_env))

    def _ensure_initialized(self) -> None:
        """Lazily initialize the Anthropic client."""
        if self._initialized:
            return

        api_key = os.environ.get(self.config.api_key_env)
        if not api_key:
            raise APIKeyNotFoundError(
                f"API key not found in environment variable: {self.config.api_key_env}"
            )

        try:
            import anthropic

            self._client = anthropic.Anthropic(api_key=api_key, timeout=self.config.timeout)
            self._initialized = True
            logger.info(f"AI client initialized with model: {self.config.model}")
        except ImportError as err:
            raise AIClientError(
                "anthropic package not installed. Run: pip install anthropic"
            ) from err

    def send_message(
        self,
        system_prompt: str,
        user_prompt: str,
    ) -> tuple[str, int, int]:
        """Send a single message and return the response text.

        Args:
            system_prompt: The system prompt.
            user_prompt: The user prompt.

        Returns:
            Tuple of (response_text, input_tokens, output_tokens).

        Raises:
            APIKeyNotFoundError: If the API key is not set.
            AIClientError: If the request fails or the response carries no text.
        """
        self._ensure_initialized()

        try:
            response = self._client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except Exception as e:
            self.usage_stats.add_failure()
            raise AIClientError(f"Request failed: {e}") from e

        try:
            content = "".join(
                block.text
                for block in response.content or []
                if getattr(block, "type", None) == "text"
            )
            input_tokens = response.usage.input_tokens
            output_tokens = response.usage.output_tokens
        except (AttributeError, TypeError) as e:
            self.usage_stats.add_failure()
            raise AIClientError(f"Malformed response: {e}") from e

        if not content:
            self.usage_stats.add_failure()
            raise AIClientError("Response contains no text content")

        self.usage_stats.add_request(input_tokens, output_tokens)

        logger.debug(f"Request completed: {input_tokens} in, {output_tokens} out")
        return content, input_tokens, output_tokens

    def parse_json_response(self, response: str) -> dict[str, Any]:
        """Parse a JSON object from the AI response.

        Tolerates text or code fences around the object.

        Args:
            response: The response string.

        Returns:
            Parsed JSON object.

        Raises:
            ValueError: If no JSON object can be parsed.
        """
        try:
            result = json.loads(response)
        except json.JSONDecodeError:
            result = None
        if isinstance(result, dict):
            return result

        start = response.find("{")
        if start == -1:
            raise ValueError(f"No JSON found in response: {response[:100]}")

        # Scan for the matching close brace, ignoring braces inside strings
        depth = 0
        in_string = False
        escaped = False
        for i, char in enumerate(response[start:], start):
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    try:
                        result = json.loads(response[start : i + 1])
                    except json.JSONDecodeError:
                        break
                    if isinstance(result, dict):
                        return result
                    break

        raise ValueError(f"Could not parse JSON from response: {response[:200]}")
