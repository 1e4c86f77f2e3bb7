"""
Centrality definitions for Glauber analyses.

A CentralityModel holds, per collision system, a short list of centrality
tables (index 0: default, 1: small npp / large x, 2: large npp / small x).
Each table maps multiplicity to a 5%-wide centrality class and provides the
re-weighting correction used to reject events at low multiplicity.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from domain.variations import VariationType

CLASS_WIDTH_PERCENT = 5.0

# Reference multiplicity lower edges, most peripheral (75-80%) first
AUAU_200GEV_CUTS = (10, 15, 21, 31, 42, 56, 72, 91, 114, 140, 171, 208, 251, 302, 364, 441)

BUILTIN_DEFINITIONS = {
    "auau_200gev": {
        "reweighting": {"p0": 0.90, "p1": 0.050, "p0_error": 0.02, "p1_error": 0.003},
        "tables": [
            {"npp": 2.43, "k": 2.00, "x": 0.13, "cuts": list(AUAU_200GEV_CUTS)},
            {"npp": 2.31, "k": 2.00, "x": 0.14, "cuts": list(AUAU_200GEV_CUTS)},
            {"npp": 2.55, "k": 2.00, "x": 0.12, "cuts": list(AUAU_200GEV_CUTS)},
        ],
    },
}


@dataclass(frozen=True)
class NegativeBinomial:
    """
    Two-component multiplicity model.

    Each of the (1-x)*Npart/2 + x*Ncoll sources emits particles following a
    negative binomial distribution with mean npp and shape k.
    """

    npp: float
    k: float
    x: float

    def __post_init__(self):
        if self.npp <= 0:
            raise ValueError(f"npp must be positive, got {self.npp}")
        if self.k <= 0:
            raise ValueError(f"k must be positive, got {self.k}")
        if not 0.0 <= self.x <= 1.0:
            raise ValueError(f"x must be in [0, 1], got {self.x}")

    def n_sources(self, npart: float, ncoll: float) -> float:
        return (1.0 - self.x) * npart / 2.0 + self.x * ncoll

    def mean_multiplicity(self, npart: float, ncoll: float) -> float:
        return self.npp * self.n_sources(npart, ncoll)

    def get_multiplicity(self, npart: float, ncoll: float, rng: np.random.Generator) -> float:
        """Sample a multiplicity; a sum of m NBD(k) draws is NBD(m*k)."""
        sources = self.n_sources(npart, ncoll)
        if sources <= 0:
            return 0.0
        p = self.k / (self.k + self.npp)
        return float(rng.negative_binomial(self.k * sources, p))


@dataclass(frozen=True)
class ReweightingParameters:
    """Parameters of w(mult) = 1 - p0 * exp(-p1 * mult)."""

    p0: float
    p1: float
    p0_error: float = 0.0
    p1_error: float = 0.0

    def shifted(self, variation: VariationType) -> "ReweightingParameters":
        """Parameters moved by two standard deviations for lowrw/highrw."""
        if variation is VariationType.LOW_RW:
            return ReweightingParameters(self.p0 + 2 * self.p0_error, self.p1 - 2 * self.p1_error)
        if variation is VariationType.HIGH_RW:
            return ReweightingParameters(self.p0 - 2 * self.p0_error, self.p1 + 2 * self.p1_error)
        return self


class Centrality:
    """One centrality table: multiplicity cuts, re-weighting and NBD parameters."""

    def __init__(
        self,
        cuts: list[float],
        reweighting: ReweightingParameters,
        negative_binomial: NegativeBinomial
    ):
        if not cuts:
            raise ValueError("cuts cannot be empty")
        if any(b <= a for a, b in zip(cuts, cuts[1:])):
            raise ValueError(f"cuts must be strictly increasing, got {cuts}")
        self.cuts = np.asarray(cuts, dtype=float)
        self.reweighting_parameters = reweighting
        self.negative_binomial = negative_binomial

    @property
    def n_classes(self) -> int:
        return len(self.cuts)

    @property
    def labels(self) -> list[str]:
        """Class labels, most peripheral first (e.g. '75-80%')."""
        top = self.n_classes * CLASS_WIDTH_PERCENT
        return [
            f"{top - (i + 1) * CLASS_WIDTH_PERCENT:g}-{top - i * CLASS_WIDTH_PERCENT:g}%"
            for i in range(self.n_classes)
        ]

    def centrality_bin(self, multiplicity: float) -> int:
        """
        Centrality class of a multiplicity.

        Returns:
            0 for the most peripheral class up to n_classes-1 for the most
            central one, -1 below the lowest cut
        """
        return int(np.searchsorted(self.cuts, multiplicity, side="right")) - 1

    def reweighting(
        self,
        multiplicity: float,
        variation: VariationType = VariationType.DEFAULT
    ) -> float:
        """Acceptance probability for an event, clipped to [0, 1]."""
        params = self.reweighting_parameters.shifted(variation)
        weight = 1.0 - params.p0 * math.exp(-params.p1 * multiplicity)
        return min(max(weight, 0.0), 1.0)


class CentralityModel:
    """
    Centrality tables for one collision system.

    The system label (e.g. "AuAu_200GeV") is matched case-insensitively
    against the built-in definitions and any passed in from configuration.
    """

    def __init__(self, system: str, definitions: Optional[dict] = None):
        self.system = system
        self.logger = logging.getLogger(self.__class__.__name__)

        known = dict(BUILTIN_DEFINITIONS)
        known.update({name.lower(): value for name, value in (definitions or {}).items()})

        key = system.lower()
        if key not in known:
            raise ValueError(f"Unknown collision system '{system}', known: {sorted(known)}")

        self._centralities = self._build(known[key])
        self.logger.debug(f"Loaded {len(self._centralities)} centrality tables for {system}")

    @staticmethod
    def _build(definition: dict) -> list[Centrality]:
        rw = definition["reweighting"]
        reweighting = ReweightingParameters(
            p0=float(rw["p0"]),
            p1=float(rw["p1"]),
            p0_error=float(rw.get("p0_error", 0.0)),
            p1_error=float(rw.get("p1_error", 0.0)),
        )
        tables = definition["tables"]
        if not tables:
            raise ValueError("centrality definition has no tables")
        return [
            Centrality(
                cuts=[float(c) for c in table["cuts"]],
                reweighting=reweighting,
                negative_binomial=NegativeBinomial(
                    npp=float(table["npp"]), k=float(table["k"]), x=float(table["x"])
                ),
            )
            for table in tables
        ]

    def get_centrality(self, index: int = 0) -> Centrality:
        if index < 0 or index >= len(self._centralities):
            raise IndexError(
                f"Centrality index {index} out of range [0, {len(self._centralities)})"
            )
        return self._centralities[index]

    def get_negative_binomial(self, index: int = 0) -> NegativeBinomial:
        return self.get_centrality(index).negative_binomial

    def __len__(self) -> int:
        return len(self._centralities)
