"""
Analysis services.

The event-loop controller that turns Glauber trees into tables.
"""

from .glauber_analysis import GlauberAnalysis, GeometryQuantity, GEOMETRY_QUANTITIES, CENTRALITY_INDEX

__all__ = [
    "GlauberAnalysis",
    "GeometryQuantity",
    "GEOMETRY_QUANTITIES",
    "CENTRALITY_INDEX",
]
