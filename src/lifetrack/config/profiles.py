"""Configuration profile management."""

import os
from enum import Enum
from pathlib import Path

PROFILE_ENV_VAR = "LIFETRACK_PROFILE"


class Profile(Enum):
    """Available configuration profiles."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


def detect_profile() -> Profile:
    """Detect the configuration profile from LIFETRACK_PROFILE.

    Returns:
        Profile enum value; DEV when unset or unrecognized
    """
    env_profile = os.environ.get(PROFILE_ENV_VAR, "").strip().lower()
    try:
        return Profile(env_profile)
    except ValueError:
        return Profile.DEV


def get_profile_path(profile: Profile | None = None, config_dir: Path | None = None) -> Path:
    """Get path to profile configuration file.

    Args:
        profile: Profile to use, or None to auto-detect
        config_dir: Configuration directory, or None for default

    Returns:
        Path to profile YAML file
    """
    if profile is None:
        profile = detect_profile()

    if config_dir is None:
        from .loader import DEFAULT_CONFIG_DIR

        config_dir = DEFAULT_CONFIG_DIR

    return config_dir / f"{profile.value}.yaml"


__all__ = [
    "PROFILE_ENV_VAR",
    "Profile",
    "detect_profile",
    "get_profile_path",
]
