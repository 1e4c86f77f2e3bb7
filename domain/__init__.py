"""
Domain models for the Glauber analysis.

Pure data structures with validation, no business logic.
"""

from .events import GlauberEvent, SENTINEL, ECCENTRICITY_ORDERS, is_available
from .variations import VariationType
from .binning import AxisBinning, AnalysisBinning
from .statistics import FileStatistics, RunStatistics
from .config import AnalysisConfig, MULTIPLICITY_MODES
from .errors import ConfigurationError

__all__ = [
    "GlauberEvent",
    "SENTINEL",
    "ECCENTRICITY_ORDERS",
    "is_available",
    "VariationType",
    "AxisBinning",
    "AnalysisBinning",
    "FileStatistics",
    "RunStatistics",
    "AnalysisConfig",
    "MULTIPLICITY_MODES",
    "ConfigurationError",
]
