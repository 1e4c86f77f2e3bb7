"""
Histogram services.

Weighted accumulators filled once per accepted event.
"""

from .glauber_histogram import GlauberHistogram, Profile, XAxis, DEFAULT_X_AXES
from .cumulant_histogram import GlauberCumulantHistogram

__all__ = [
    "GlauberHistogram",
    "GlauberCumulantHistogram",
    "Profile",
    "XAxis",
    "DEFAULT_X_AXES",
]
