"""Claude API client wrapper with model fallback and tolerant JSON parsing."""

import json
import logging
import re
from typing import Any

from anthropic import Anthropic, AuthenticationError, PermissionDeniedError

from config_loader import get_anthropic_api_key

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"

# Markers of a credentials problem rather than a model problem
AUTH_STATUS_PATTERN = re.compile(r"\b40[13]\b")
AUTH_FAILURE_MARKERS = ("api key", "api_key_invalid", "x-api-key", "authentication", "unauthorized")


class ModelAuthError(Exception):
    """The API rejected our credentials; trying other models is pointless."""

    def __init__(self, model: str, original: Exception):
        super().__init__(f"Model {model} rejected credentials: {original}")
        self.model = model
        self.original = original


class AllModelsFailedError(Exception):
    """Every candidate model failed or returned empty text."""

    def __init__(self, attempts: list[dict]):
        models = ", ".join(a["model"] for a in attempts) or "none"
        super().__init__(f"All model attempts failed ({models})")
        self.attempts = attempts


def is_auth_failure(error: Exception) -> bool:
    """Check whether an error signals invalid or unauthorized credentials."""
    if isinstance(error, (AuthenticationError, PermissionDeniedError)):
        return True
    message = str(error).lower()
    if AUTH_STATUS_PATTERN.search(message):
        return True
    return any(marker in message for marker in AUTH_FAILURE_MARKERS)


class ClaudeClient:
    """Wrapper for Claude API with ordered model fallback, JSON parsing, and token tracking."""

    def __init__(self, model: str | None = None, anthropic_client: Any = None):
        """Initialize the Claude client.

        Args:
            model: Optional model override. Defaults to DEFAULT_MODEL.
            anthropic_client: Pre-built SDK client. If None, one is created
                from ANTHROPIC_API_KEY.
        """
        self.client = anthropic_client or Anthropic(api_key=get_anthropic_api_key())
        self.model = model or DEFAULT_MODEL
        self.total_input_tokens = 0
        self.total_output_tokens = 0

    def complete(self, system: str, user: str, model: str | None = None, max_tokens: int = 4096) -> str:
        """Make a single Claude API call.

        Returns:
            The text content of Claude's response (may be empty).
        """
        response = self.client.messages.create(
            model=model or self.model,
            max_tokens=max_tokens,
            system=system,
            messages=[{"role": "user", "content": user}],
        )

        # Track token usage
        usage = getattr(response, "usage", None)
        if usage is not None:
            self.total_input_tokens += getattr(usage, "input_tokens", 0) or 0
            self.total_output_tokens += getattr(usage, "output_tokens", 0) or 0

        return "".join(
            getattr(block, "text", "") or ""
            for block in response.content
            if getattr(block, "type", "text") == "text"
        )

    def complete_with_fallback(
        self,
        system: str,
        user: str,
        models: list[str],
        max_tokens: int = 4096,
    ) -> tuple[str, str]:
        """Try each model once, in order, until one returns non-empty text.

        Args:
            system: System prompt
            user: User message content
            models: Candidate model identifiers in order of preference
            max_tokens: Maximum tokens in response

        Returns:
            Tuple of (response text, model that produced it)

        Raises:
            ModelAuthError: On the first credentials failure; remaining models are skipped.
            AllModelsFailedError: If no model produced text.
        """
        attempts = []

        for model in models:
            logger.info("Trying model %s", model)
            try:
                text = self.complete(system, user, model=model, max_tokens=max_tokens)
            except Exception as e:
                if is_auth_failure(e):
                    logger.error("Model %s rejected credentials: %s", model, e)
                    raise ModelAuthError(model, e) from e
                logger.warning("Model %s failed: %s", model, e)
                attempts.append({"model": model, "message": str(e)})
                continue

            if not text.strip():
                logger.warning("Model %s returned an empty response", model)
                attempts.append({"model": model, "message": "Empty response"})
                continue

            logger.info("Model %s succeeded", model)
            return text, model

        raise AllModelsFailedError(attempts)

    @staticmethod
    def parse_json_response(text: str) -> dict[str, Any]:
        """Extract and parse a JSON object from Claude's response.

        Strict parsing of the fence-stripped text comes first. When that
        fails, best-effort recovery parses the span from the first '{' to
        the last '}'.

        Args:
            text: Raw response text from Claude

        Returns:
            Parsed JSON object as a dictionary

        Raises:
            ValueError: If no JSON object can be recovered
        """
        cleaned = (text or "").replace("```json", "").replace("```", "").strip()

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError:
            parsed = ClaudeClient.recover_json_object(cleaned)

        if not isinstance(parsed, dict):
            raise ValueError("Response does not contain a JSON object")
        return parsed

    @staticmethod
    def recover_json_object(text: str) -> Any:
        """Best-effort recovery: parse the outermost '{'...'}' span of free text.

        Raises:
            ValueError: If there is no such span or it is not valid JSON.
        """
        first = text.find("{")
        last = text.rfind("}")
        if first == -1 or last <= first:
            raise ValueError("No JSON object found in response")

        try:
            return json.loads(text[first:last + 1])
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON response: {e}") from e

    def get_token_usage(self) -> dict[str, int]:
        """Get cumulative token usage for this client instance.

        Returns:
            Dictionary with input_tokens, output_tokens, and total_tokens
        """
        return {
            "input_tokens": self.total_input_tokens,
            "output_tokens": self.total_output_tokens,
            "total_tokens": self.total_input_tokens + self.total_output_tokens,
        }
