"""
GlauberHistogram - Weighted accumulator for one Glauber quantity.

Keeps a 1-D histogram of the quantity itself and profiles of its weighted
moments against each x-axis (Npart, multiplicity, centrality class). At the
end of the run the profiles are normalized into mean/error tables.
"""

import logging
import os
from enum import Enum
from typing import Any, Optional

import numpy as np

from domain.binning import AxisBinning
from domain.events import GlauberEvent
from domain.variations import VariationType


class XAxis(Enum):
    """Quantities the accumulated value is profiled against."""

    NPART = "npart"
    MULTIPLICITY = "mult"
    CENTRALITY = "centrality"

    def __str__(self) -> str:
        return self.value


DEFAULT_X_AXES = {
    XAxis.NPART: AxisBinning(500, 0.0, 500.0),
    XAxis.MULTIPLICITY: AxisBinning(1000, 0.0, 1000.0),
    XAxis.CENTRALITY: AxisBinning(16, 0.0, 16.0),
}


class Profile:
    """Weighted sums of powers of a value in bins of an x-axis."""

    def __init__(self, binning: AxisBinning, powers: tuple[int, ...]):
        self.binning = binning
        self.sum_w = np.zeros(binning.nbins)
        self.sum_w2 = np.zeros(binning.nbins)
        self.sum_wv = {p: np.zeros(binning.nbins) for p in powers}

    def fill(self, x: float, value: float, weight: float) -> None:
        index = self.binning.find_bin(x)
        if index < 0:
            return
        self.sum_w[index] += weight
        self.sum_w2[index] += weight * weight
        for power, sums in self.sum_wv.items():
            sums[index] += weight * value ** power

    @property
    def centers(self) -> np.ndarray:
        edges = self.binning.edges
        return 0.5 * (edges[:-1] + edges[1:])

    @property
    def filled(self) -> np.ndarray:
        return self.sum_w > 0

    def moment(self, power: int) -> np.ndarray:
        """Weighted mean of value**power per bin, NaN in empty bins."""
        with np.errstate(divide="ignore", invalid="ignore"):
            return np.where(self.filled, self.sum_wv[power] / self.sum_w, np.nan)

    def effective_entries(self) -> np.ndarray:
        with np.errstate(divide="ignore", invalid="ignore"):
            return np.where(self.sum_w2 > 0, self.sum_w ** 2 / self.sum_w2, 0.0)

    def moment_error(self, power: int) -> np.ndarray:
        """Standard error of moment(power); needs 2*power to be accumulated."""
        variance = self.moment(2 * power) - self.moment(power) ** 2
        with np.errstate(divide="ignore", invalid="ignore"):
            return np.sqrt(np.clip(variance, 0.0, None) / self.effective_entries())


class GlauberHistogram:
    """
    Accumulator for one quantity (impact parameter, Npart, area, ...).

    Lifecycle per event: set_axis() then fill(); once per run: finish().
    """

    POWERS: tuple[int, ...] = (1, 2)

    def __init__(
        self,
        name: str,
        title: str,
        axis_label: str,
        nbins: int,
        low: float,
        high: float,
        x_axes: Optional[dict[XAxis, AxisBinning]] = None
    ):
        """
        Initialize accumulator.

        Args:
            name: Unique name, used for output objects and table files
            title: Descriptive title (the variation type)
            axis_label: Label of the accumulated quantity
            nbins, low, high: Binning of the value histogram
            x_axes: Binning of each profile x-axis
        """
        if not name:
            raise ValueError("name cannot be empty")
        self.name = name
        self.title = title
        self.axis_label = axis_label
        self.binning = AxisBinning(nbins, low, high)
        self.logger = logging.getLogger(self.__class__.__name__)

        self._counts = np.zeros(nbins)
        self._sum_w2 = np.zeros(nbins)
        self._entries = 0
        self._total_weight = 0.0

        x_axes = x_axes or DEFAULT_X_AXES
        self._profiles = {axis: Profile(binning, self.POWERS) for axis, binning in x_axes.items()}
        self._x: dict[XAxis, float] = {}
        self._table_dir: Optional[str] = None
        self._finished = False

    def set_table_directory(self, table_dir: str) -> None:
        self._table_dir = table_dir

    def set_axis(
        self,
        event: GlauberEvent,
        centrality_model,
        variation: VariationType,
        multiplicity: Optional[float] = None
    ) -> None:
        """
        Place the current event on every x-axis.

        Centrality is taken from the default table (index 0). The multiplicity
        and centrality axes use *multiplicity* when given, the tree value
        otherwise.
        """
        if multiplicity is None:
            multiplicity = event.multiplicity
        centrality = centrality_model.get_centrality(0)
        self._x = {
            XAxis.NPART: float(event.npart),
            XAxis.MULTIPLICITY: float(multiplicity),
            XAxis.CENTRALITY: float(centrality.centrality_bin(multiplicity)),
        }

    def fill(self, value: float, weight: float = 1.0) -> None:
        """Accumulate weight at value; out-of-range values are dropped from the histogram."""
        self._entries += 1
        self._total_weight += weight

        index = self.binning.find_bin(value)
        if index >= 0:
            self._counts[index] += weight
            self._sum_w2[index] += weight * weight

        for axis, profile in self._profiles.items():
            if axis in self._x:
                profile.fill(self._x[axis], value, weight)

    @property
    def entries(self) -> int:
        return self._entries

    @property
    def total_weight(self) -> float:
        return self._total_weight

    @property
    def counts(self) -> np.ndarray:
        return self._counts.copy()

    def profile(self, axis: XAxis) -> Profile:
        return self._profiles[axis]

    def finish(self, variation: VariationType) -> dict[str, Any]:
        """
        Normalize the profiles, write the text tables and return output objects.

        Args:
            variation: Variation type used to tag tables and object names

        Returns:
            Mapping of object name to writable object (histogram tuple or
            dict of arrays) for the output file
        """
        if self._finished:
            self.logger.warning(f"{self.name} has already been finished")
        self._finished = True

        objects = {f"h{self.name}_{variation}": (self._counts.copy(), self.binning.edges)}
        for axis, profile in self._profiles.items():
            columns = self._summarize(profile)
            objects[f"g{self.name}_vs_{axis}_{variation}"] = columns
            if self._table_dir is not None:
                self._write_table(axis, variation, columns)

        self.logger.debug(
            f"Finished {self.name} ({variation}): {self._entries} entries, "
            f"total weight {self._total_weight:g}"
        )
        return objects

    def _summarize(self, profile: Profile) -> dict[str, np.ndarray]:
        """Per-bin weighted mean and its error."""
        return {
            "x": profile.centers,
            "mean": profile.moment(1),
            "error": profile.moment_error(1),
            "sumw": profile.sum_w.copy(),
        }

    def _write_table(self, axis: XAxis, variation: VariationType, columns: dict[str, np.ndarray]) -> str:
        path = os.path.join(self._table_dir, f"table_{self.name}_{variation}_vs_{axis}.txt")
        filled = columns["sumw"] > 0
        data = np.column_stack([values[filled] for values in columns.values()])
        header = f"{self.axis_label} vs {axis} ({self.title})\n" + "  ".join(columns)
        np.savetxt(path, data, fmt="%.6e", header=header)
        self.logger.debug(f"Wrote table {path}")
        return path
