"""
Histogram binning domain models.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class AxisBinning:
    """Fixed-width binning over the inclusive range [low, high]."""

    nbins: int
    low: float
    high: float

    def __post_init__(self):
        if self.nbins <= 0:
            raise ValueError(f"nbins must be positive, got {self.nbins}")
        if self.high <= self.low:
            raise ValueError(f"high ({self.high}) must be greater than low ({self.low})")

    @property
    def edges(self) -> np.ndarray:
        return np.linspace(self.low, self.high, self.nbins + 1)

    def find_bin(self, value: float) -> int:
        """Bin index containing value, or -1 when out of range."""
        if value < self.low or value > self.high:
            return -1
        index = int((value - self.low) / (self.high - self.low) * self.nbins)
        # upper edge belongs to the last bin
        return min(index, self.nbins - 1)

    @classmethod
    def from_dict(cls, binning_dict: dict) -> "AxisBinning":
        return cls(
            nbins=int(binning_dict["nbins"]),
            low=float(binning_dict["low"]),
            high=float(binning_dict["high"]),
        )


@dataclass(frozen=True)
class AnalysisBinning:
    """Binning of every accumulator in one analysis run."""

    impact_parameter: AxisBinning = AxisBinning(200, 0.0, 20.0)
    npart: AxisBinning = AxisBinning(500, 0.0, 500.0)
    ncoll: AxisBinning = AxisBinning(1600, 0.0, 1600.0)
    multiplicity: AxisBinning = AxisBinning(1000, 0.0, 1000.0)
    area: AxisBinning = AxisBinning(100, 0.0, 50.0)
    eccentricity_rp: AxisBinning = AxisBinning(100, -1.0, 1.0)
    eccentricity_pp: AxisBinning = AxisBinning(50, 0.0, 1.0)

    @classmethod
    def from_dict(cls, binning_dict: dict) -> "AnalysisBinning":
        """
        Create binning from a dictionary, falling back to defaults for missing keys.

        Args:
            binning_dict: Mapping of axis name to {nbins, low, high}
        """
        defaults = cls()
        kwargs = {}
        for name in defaults.__dataclass_fields__:
            if name in binning_dict:
                kwargs[name] = AxisBinning.from_dict(binning_dict[name])
        unknown = set(binning_dict) - set(defaults.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown binning entries: {sorted(unknown)}")
        return cls(**kwargs)
