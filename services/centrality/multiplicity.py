"""
Multiplicity strategies.

The analysis takes the multiplicity stored in the tree. Re-deriving it from
Npart and Ncoll with the negative binomial model is kept as an alternative
for studies where the centrality bins change with the model parameters.
"""

from abc import ABC, abstractmethod

import numpy as np

from domain.events import GlauberEvent
from .centrality import CentralityModel


class MultiplicityStrategy(ABC):
    """Base class for computing the multiplicity of an event."""

    @abstractmethod
    def get_multiplicity(self, event: GlauberEvent) -> float:
        pass


class TreeMultiplicity(MultiplicityStrategy):
    """Use the multiplicity stored with the event."""

    def get_multiplicity(self, event: GlauberEvent) -> float:
        return float(event.multiplicity)


class NegativeBinomialMultiplicity(MultiplicityStrategy):
    """Sample the multiplicity from Npart and Ncoll."""

    def __init__(self, centrality_model: CentralityModel, rng: np.random.Generator, index: int = 0):
        self.negative_binomial = centrality_model.get_negative_binomial(index)
        self.rng = rng

    def get_multiplicity(self, event: GlauberEvent) -> float:
        return self.negative_binomial.get_multiplicity(event.npart, event.ncoll, self.rng)


def create_multiplicity_strategy(
    mode: str,
    centrality_model: CentralityModel,
    rng: np.random.Generator
) -> MultiplicityStrategy:
    """
    Build the strategy named in the configuration.

    Args:
        mode: "tree" or "nbd"
    """
    if mode == "tree":
        return TreeMultiplicity()
    if mode == "nbd":
        return NegativeBinomialMultiplicity(centrality_model, rng)
    raise ValueError(f"Unknown multiplicity mode '{mode}'")
