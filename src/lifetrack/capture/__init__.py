"""Capture module for lifetrack.

Turns free-text captures into structured records with caching, batching and
incremental re-parsing.
"""

from typing import TYPE_CHECKING

from .batch import BatchCoordinator
from .cache import PatternCache
from .errors import (
    CaptureError,
    ConfigurationError,
    ExtractionTimeoutError,
    MalformedResponseError,
    PartialSaveError,
    ServiceError,
)
from .extractor import CaptureExtractor
from .mock import MockExtractionService
from .models import CaptureRequest, ExtractionResult
from .normalizer import KeyStrategy, cache_key, content_key, fuzzy_key, normalize
from .planner import CapturePlanner, GoalPlan
from .records import CapturedRecords, materialize
from .reparse import ReparseResult, reparse_if_changed
from .service import ClaudeExtractionService, ClaudeServiceConfig, ExtractionService

if TYPE_CHECKING:
    from ..config import CacheConfig, ExtractionConfig


def create_extraction_service(
    config: "ExtractionConfig | None" = None,
    use_mock: bool = False,
) -> ExtractionService:
    """Create an extraction service instance.

    Args:
        config: Extraction configuration
        use_mock: If True, return mock implementation for testing

    Returns:
        ExtractionService implementation

    Raises:
        ConfigurationError: If the Claude credential is missing.
    """
    if use_mock or (config is not None and config.provider == "mock"):
        return MockExtractionService()

    if config is not None and config.provider != "claude":
        raise ConfigurationError(f"Unknown extraction provider: {config.provider}")

    return ClaudeExtractionService(ClaudeServiceConfig.from_env(config))


def create_extractor(
    service: ExtractionService,
    config: "ExtractionConfig | None" = None,
    cache_config: "CacheConfig | None" = None,
    cache: PatternCache | None = None,
) -> CaptureExtractor:
    """Create a capture extractor wired to the given settings.

    Args:
        service: Service to call on cache misses
        config: Extraction configuration
        cache_config: Cache key configuration
        cache: Shared cache; a fresh one is created if omitted

    Returns:
        Configured CaptureExtractor
    """
    strategy = KeyStrategy.FUZZY
    if cache_config is not None:
        try:
            strategy = KeyStrategy(cache_config.key_strategy)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown cache key strategy: {cache_config.key_strategy}"
            ) from e

    if config is None:
        return CaptureExtractor(service, cache=cache, key_strategy=strategy)

    return CaptureExtractor(
        service,
        cache=cache,
        key_strategy=strategy,
        max_tokens=config.max_tokens,
        temperature=config.temperature,
    )


__all__ = [
    "BatchCoordinator",
    "CaptureError",
    "CaptureExtractor",
    "CapturePlanner",
    "CaptureRequest",
    "CapturedRecords",
    "ClaudeExtractionService",
    "ClaudeServiceConfig",
    "ConfigurationError",
    "ExtractionResult",
    "ExtractionService",
    "ExtractionTimeoutError",
    "GoalPlan",
    "KeyStrategy",
    "MalformedResponseError",
    "MockExtractionService",
    "PartialSaveError",
    "PatternCache",
    "ReparseResult",
    "ServiceError",
    "cache_key",
    "content_key",
    "create_extraction_service",
    "create_extractor",
    "fuzzy_key",
    "materialize",
    "normalize",
    "reparse_if_changed",
]
