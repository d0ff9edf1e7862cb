"""
Host-side features (oracles) that feed external data into contracts as
feature operations.
"""

from .timer import TimerFeature, TIMER_FEATURE, CURRENT_TIME_KEY

__all__ = [
    "TimerFeature",
    "TIMER_FEATURE",
    "CURRENT_TIME_KEY",
]
