"""
Centrality services.

Centrality tables, re-weighting and multiplicity models.
"""

from .centrality import (
    Centrality,
    CentralityModel,
    NegativeBinomial,
    ReweightingParameters,
)
from .multiplicity import (
    MultiplicityStrategy,
    TreeMultiplicity,
    NegativeBinomialMultiplicity,
    create_multiplicity_strategy,
)

__all__ = [
    "Centrality",
    "CentralityModel",
    "NegativeBinomial",
    "ReweightingParameters",
    "MultiplicityStrategy",
    "TreeMultiplicity",
    "NegativeBinomialMultiplicity",
    "create_multiplicity_strategy",
]
