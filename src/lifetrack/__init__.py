"""lifetrack - free-text capture and derived metrics for personal life tracking.

lifetrack provides:
- Free-text capture into tasks, habits, goals, nutrition, fitness and notes
  (Claude), with caching, batching and incremental re-parsing
- Habit streaks, weighted goal progress and time-bucketed analytics

Usage:
    python -m lifetrack capture "ran 5k and had oatmeal for breakfast"
    python -m lifetrack --profile prod dashboard
"""

__version__ = "0.1.0"

from .config import LifeTrackConfig
from .config.loader import load_config

__all__ = [
    "LifeTrackConfig",
    "__version__",
    "load_config",
]
