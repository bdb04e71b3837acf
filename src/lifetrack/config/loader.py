"""YAML configuration loader with inheritance support.

Supports:
- Loading YAML config files
- Config inheritance via 'extends' key
- Deep merging of nested config
"""

from pathlib import Path
from typing import Any

import yaml

from . import (
    AnalyticsConfig,
    CacheConfig,
    ExtractionConfig,
    LifeTrackConfig,
    LoggingConfig,
    StorageConfig,
)
from .profiles import get_profile_path

DEFAULT_CONFIG_DIR = Path(__file__).parent.parent.parent.parent / "config"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values from override take precedence. Nested dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_with_inheritance(path: Path, _chain: frozenset[Path] = frozenset()) -> dict[str, Any]:
    """Load YAML file with inheritance support.

    If the file contains an 'extends' key, the base config is loaded first
    and merged with the current config.

    Raises:
        FileNotFoundError: If the file or one of its bases is missing.
        ValueError: If the 'extends' chain loops back on itself.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    resolved = path.resolve()
    if resolved in _chain:
        raise ValueError(f"Config inheritance cycle at {path}")

    with open(path) as f:
        config = yaml.safe_load(f) or {}

    if "extends" in config:
        base_name = config.pop("extends")
        base_config = load_yaml_with_inheritance(path.parent / base_name, _chain | {resolved})
        config = deep_merge(base_config, config)

    return config



def dict_to_config(data: dict[str, Any]) -> LifeTrackConfig:
    """Convert raw dict to typed LifeTrackConfig dataclass."""
    root = data.get("lifetrack", {}) or {}

    # YAML sections may be present but empty
    def section(key: str) -> dict[str, Any]:
        value = root.get(key, {})
        return value if value is not None else {}

    return LifeTrackConfig(
        user_id=root.get("user_id", "default"),
        extraction=ExtractionConfig(**section("extraction")),
        cache=CacheConfig(**section("cache")),
        analytics=AnalyticsConfig(**section("analytics")),
        storage=StorageConfig(**section("storage")),
        logging=LoggingConfig(**section("logging")),
    )


class YAMLConfigLoader:
    """YAML configuration loader implementation."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader with optional config directory.

        Args:
            config_dir: Directory containing config files.
                        Defaults to 'config' relative to project root.
        """
        self._config_dir = config_dir if config_dir is not None else DEFAULT_CONFIG_DIR

    def load(self, path: Path) -> LifeTrackConfig:
        """Load configuration from file path.

        Args:
            path: Path to YAML config file

        Returns:
            Parsed LifeTrackConfig
        """
        return dict_to_config(load_yaml_with_inheritance(path))

    def load_profile(self, profile: str) -> LifeTrackConfig:
        """Load configuration by profile name.

        Args:
            profile: Profile name (e.g., 'dev', 'prod')

        Returns:
            Parsed LifeTrackConfig for the profile
        """
        return self.load(self._config_dir / f"{profile}.yaml")

    @property
    def config_dir(self) -> Path:
        """Directory holding the profile files."""
        return self._config_dir


def load_config(path: str | Path | None = None, profile: str | None = None) -> LifeTrackConfig:
    """Load lifetrack configuration.

    Args:
        path: Direct path to config file (takes precedence)
        profile: Profile name ('dev', 'prod', 'test') if path not given

    Returns:
        Parsed LifeTrackConfig

    Examples:
        >>> config = load_config(profile="dev")
        >>> config = load_config(path="/path/to/config.yaml")
    """
    loader = YAMLConfigLoader()

    if path is not None:
        return loader.load(Path(path))
    if profile is not None:
        return loader.load_profile(profile)

    return loader.load(get_profile_path(config_dir=loader.config_dir))


__all__ = [
    "DEFAULT_CONFIG_DIR",
    "YAMLConfigLoader",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
]
