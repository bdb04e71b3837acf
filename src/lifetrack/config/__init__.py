"""Configuration module for lifetrack.

This module provides configuration loading and profile management.
"""

from dataclasses import dataclass, field


@dataclass
class ExtractionConfig:
    """Text-understanding service configuration."""

    provider: str = "claude"
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1024
    batch_max_tokens: int = 4096
    temperature: float = 0.1
    timeout_seconds: float = 30.0


@dataclass
class CacheConfig:
    """Pattern cache configuration."""

    key_strategy: str = "fuzzy"


@dataclass
class AnalyticsConfig:
    """Analytics bucketing configuration."""

    # IANA zone name for calendar-date truncation; None uses the system zone
    timezone: str | None = None


@dataclass
class StorageConfig:
    """MongoDB storage configuration."""

    enabled: bool = False
    uri: str = "mongodb://localhost:27017"
    database: str = "lifetrack"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class LifeTrackConfig:
    """Main lifetrack configuration."""

    user_id: str = "default"
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Public API
__all__ = [
    "AnalyticsConfig",
    "CacheConfig",
    "ExtractionConfig",
    "LifeTrackConfig",
    "LoggingConfig",
    "StorageConfig",
]
