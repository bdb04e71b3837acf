"""Text-understanding service boundary.

Defines the capability the capture pipeline needs (system prompt and text in,
raw model text out) and its Claude-backed implementation.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import anthropic

from .errors import ConfigurationError, ExtractionTimeoutError, ServiceError

if TYPE_CHECKING:
    from ..config import ExtractionConfig

logger = logging.getLogger(__name__)


class ExtractionService(Protocol):
    """Protocol for the remote text-understanding call."""

    def complete(
        self,
        system: str,
        text: str,
        *,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Return the model's raw text answer for text under system.

        Raises:
            ConfigurationError: If the credential is missing or rejected.
            ServiceError: If the service answers with an error.
            ExtractionTimeoutError: If no answer arrives in time.
        """
        ...


@dataclass
class ClaudeServiceConfig:
    """Configuration for the Claude extraction service."""

    api_key: str
    model: str = "claude-sonnet-4-20250514"
    timeout_seconds: float = 30.0

    @classmethod
    def from_env(cls, extraction: "ExtractionConfig | None" = None) -> "ClaudeServiceConfig":
        """Create config from environment variables.

        Args:
            extraction: Optional extraction settings for model and timeout.

        Returns:
            ClaudeServiceConfig with API key from environment.

        Raises:
            ConfigurationError: If ANTHROPIC_API_KEY is not set.
        """
        api_key = os.environ.get("ANTHROPIC_API_KEY", "").strip()
        if not api_key:
            raise ConfigurationError(
                "ANTHROPIC_API_KEY environment variable is not set. "
                "Set it to enable free-text capture."
            )
        if extraction is None:
            return cls(api_key=api_key)
        return cls(
            api_key=api_key,
            model=extraction.model,
            timeout_seconds=extraction.timeout_seconds,
        )


class ClaudeExtractionService:
    """Extraction service backed by the Claude Messages API."""

    def __init__(self, config: ClaudeServiceConfig) -> None:
        """Initialize the service.

        Args:
            config: Configuration for the service.
        """
        self._config = config
        # Retrying is left to the caller
        self._client = anthropic.Anthropic(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_retries=0,
        )

    @property
    def model(self) -> str:
        """Model selector sent with every request."""
        return self._config.model

    def complete(
        self,
        system: str,
        text: str,
        *,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Send one message to Claude and return its text.

        Raises:
            ConfigurationError: If authentication fails.
            ExtractionTimeoutError: If the request times out.
            ServiceError: If the API returns an error or cannot be reached.
        """
        start_time = time.time()

        try:
            response = self._client.messages.create(
                model=self._config.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system,
                messages=[{"role": "user", "content": text}],
            )
        except anthropic.AuthenticationError as e:
            raise ConfigurationError(
                "Invalid API key. Please check your ANTHROPIC_API_KEY."
            ) from e
        except anthropic.APITimeoutError as e:
            # Timeout is a subclass of the connection error
            raise ExtractionTimeoutError(
                f"Extraction timed out after {self._config.timeout_seconds} seconds."
            ) from e
        except anthropic.APIConnectionError as e:
            raise ServiceError(f"Failed to connect to extraction service: {e}") from e
        except anthropic.APIStatusError as e:
            raise ServiceError(
                f"Extraction service error: {e.message}",
                status_code=e.status_code,
            ) from e

        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Extraction call completed in {latency_ms}ms ({self._config.model})")

        if not response.content:
            return ""
        return getattr(response.content[0], "text", "") or ""


__all__ = [
    "ClaudeExtractionService",
    "ClaudeServiceConfig",
    "ExtractionService",
]
