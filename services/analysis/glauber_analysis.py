"""
GlauberAnalysis - Event loop over Glauber MC trees.

Reads events one at a time, optionally rejects them by re-weighting,
fills every accumulator and writes tables and the output file at the end.
"""

import logging
import os
import time
from dataclasses import dataclass
from datetime import datetime
from operator import attrgetter
from typing import Callable, Optional

import numpy as np
from tqdm import tqdm

from domain.binning import AnalysisBinning, AxisBinning
from domain.errors import ConfigurationError
from domain.events import ECCENTRICITY_ORDERS, GlauberEvent, is_available
from domain.statistics import FileStatistics, RunStatistics
from domain.variations import VariationType
from services.centrality import CentralityModel, MultiplicityStrategy, TreeMultiplicity
from services.histograms import GlauberCumulantHistogram, GlauberHistogram, XAxis
from services.io import GlauberTreeReader, OutputFile

# Centrality table used for re-weighting and x-axes
CENTRALITY_INDEX = 0


@dataclass(frozen=True)
class GeometryQuantity:
    """An accumulator filled with the geometry weight, skipped on sentinel values."""

    name: str
    axis_label: str
    binning: str
    getter: Callable[[GlauberEvent], float]
    cumulant: bool = False


def _pp_eccentricity(order: int, modified: bool) -> Callable[[GlauberEvent], float]:
    return lambda event: event.participant_plane_eccentricity(order, modified)


GEOMETRY_QUANTITIES = (
    GeometryQuantity("AreaRP", "#LTS_{RP}#GT", "area", attrgetter("area_rp")),
    GeometryQuantity("AreaPP", "#LTS_{PP}#GT", "area", attrgetter("area_pp")),
    GeometryQuantity("EccRP", "#LT#varepsilon_{RP}#GT", "eccentricity_rp", attrgetter("ecc_rp2"), cumulant=True),
    GeometryQuantity("EccRPM", "#LT#varepsilon_{RP}#GT", "eccentricity_rp", attrgetter("ecc_rp2_mod"), cumulant=True),
) + tuple(
    GeometryQuantity(
        f"{prefix}_{io}",
        f"#LT#varepsilon_{{PP,{order}}}#GT",
        "eccentricity_pp",
        _pp_eccentricity(order, modified),
        cumulant=True,
    )
    for prefix, modified in (("EccPP", False), ("EccPPM", True))
    for io, order in enumerate(ECCENTRICITY_ORDERS)
)


class GlauberAnalysis:
    """
    Run controller for one variation type.

    Lifecycle: initialize() once, process_file()/process_file_list() for the
    input, finalize() once. Unit weighting and re-weighting are fixed before
    the first event is processed.
    """

    def __init__(
        self,
        variation: VariationType,
        centrality_model: CentralityModel,
        rng: np.random.Generator,
        event_source: Optional[GlauberTreeReader] = None,
        multiplicity_strategy: Optional[MultiplicityStrategy] = None,
        binning: Optional[AnalysisBinning] = None,
        unit_weight: bool = False,
        reweighting: bool = False,
        show_progress: bool = False
    ):
        """
        Initialize analysis.

        Args:
            variation: Variation type tagging titles, tables and outputs
            centrality_model: Centrality tables for the collision system
            rng: Uniform random source, used only for re-weighting decisions
            event_source: Reader for the input trees
            multiplicity_strategy: How to obtain the event multiplicity
            binning: Histogram binning
            unit_weight: Weight geometry quantities by 1 instead of multiplicity
            reweighting: Reject events with the re-weighting probability
            show_progress: Show a progress bar over input files
        """
        self.variation = variation
        self.centrality_model = centrality_model
        self.rng = rng
        self.event_source = event_source or GlauberTreeReader()
        self.multiplicity_strategy = multiplicity_strategy or TreeMultiplicity()
        self.binning = binning or AnalysisBinning()
        self.show_progress = show_progress
        self.logger = logging.getLogger(self.__class__.__name__)

        self._unit_weight = unit_weight
        self._reweighting = reweighting
        self._started = False
        self._finalized = False

        self._n_events = 0
        self._files: list[FileStatistics] = []
        self._start_time = datetime.now()
        self._end_time: Optional[datetime] = None

        self.output_file: Optional[OutputFile] = None
        self.histograms: dict[str, GlauberHistogram] = {}
        self._event_wise: list[tuple[GlauberHistogram, Callable[[GlauberEvent, float], float]]] = []
        self._geometry: list[tuple[GlauberHistogram, Callable[[GlauberEvent], float]]] = []

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------

    @property
    def unit_weight(self) -> bool:
        return self._unit_weight

    @property
    def reweighting(self) -> bool:
        return self._reweighting

    def unit_weight_on(self) -> None:
        self._check_not_started("unit weight")
        self._unit_weight = True

    def reweighting_on(self) -> None:
        self._check_not_started("re-weighting")
        self._reweighting = True

    def _check_not_started(self, flag: str) -> None:
        if self._started:
            raise RuntimeError(f"Cannot change {flag} after events have been processed")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, output_path: str, table_dir: str) -> None:
        """
        Open the output file and book the accumulators.

        Does nothing if the output file is already open.

        Raises:
            RuntimeError: If the analysis has already been finalized
            ConfigurationError: If table_dir does not exist or the output
                file cannot be created
        """
        if self._finalized:
            raise RuntimeError("Cannot initialize() after finalize()")
        if self.output_file is not None and self.output_file.is_open:
            return

        if not os.path.isdir(table_dir):
            self.logger.error(f"Can't find table directory {table_dir}")
            raise ConfigurationError(f"Table directory does not exist: {table_dir}")

        output_file = OutputFile(output_path)
        try:
            output_file.open()
        except OSError as e:
            self.logger.error(f"Can't open output file {output_path}: {e}")
            raise ConfigurationError(f"Cannot create output file {output_path}") from e
        self.output_file = output_file

        self._book_histograms(table_dir)
        self.logger.info(
            f"Initialized {self.variation} ({self.variation.description}): "
            f"{len(self.histograms)} accumulators, unit_weight={self._unit_weight}, "
            f"reweighting={self._reweighting}"
        )

    def _book_histograms(self, table_dir: str) -> None:
        self.histograms = {}
        self._event_wise = []
        self._geometry = []
        title = str(self.variation)
        x_axes = self._x_axes()

        def book(cls, name: str, axis_label: str, binning: AxisBinning) -> GlauberHistogram:
            hist = cls(name, title, axis_label, binning.nbins, binning.low, binning.high, x_axes=x_axes)
            hist.set_table_directory(table_dir)
            self.histograms[name] = hist
            return hist

        event_wise = (
            ("ImpactParameter", "impact parameter b (fm)", self.binning.impact_parameter, lambda e, m: e.b),
            ("Npart", "N_{part}", self.binning.npart, lambda e, m: e.npart),
            ("Ncoll", "N_{coll}", self.binning.ncoll, lambda e, m: e.ncoll),
            ("Multiplicity", "Multiplicity", self.binning.multiplicity, lambda e, m: m),
        )
        for name, axis_label, binning, getter in event_wise:
            self._event_wise.append((book(GlauberHistogram, name, axis_label, binning), getter))

        for quantity in GEOMETRY_QUANTITIES:
            cls = GlauberCumulantHistogram if quantity.cumulant else GlauberHistogram
            binning = getattr(self.binning, quantity.binning)
            hist = book(cls, quantity.name, quantity.axis_label, binning)
            self._geometry.append((hist, quantity.getter))

        self.histograms = dict(sorted(self.histograms.items()))

    def _x_axes(self) -> dict[XAxis, AxisBinning]:
        n_classes = self.centrality_model.get_centrality(CENTRALITY_INDEX).n_classes
        return {
            XAxis.NPART: self.binning.npart,
            XAxis.MULTIPLICITY: self.binning.multiplicity,
            XAxis.CENTRALITY: AxisBinning(n_classes, 0.0, float(n_classes)),
        }

    def process_event(self, event: GlauberEvent) -> bool:
        """
        Fill every accumulator with one event.

        Returns:
            False if the event was rejected by re-weighting, True otherwise
        """
        self._started = True
        multiplicity = self.multiplicity_strategy.get_multiplicity(event)

        if self._reweighting:
            centrality = self.centrality_model.get_centrality(CENTRALITY_INDEX)
            probability = centrality.reweighting(multiplicity, self.variation)
            if self.rng.random() > probability:
                return False

        for hist in self.histograms.values():
            hist.set_axis(event, self.centrality_model, self.variation, multiplicity)

        for hist, getter in self._event_wise:
            hist.fill(getter(event, multiplicity), 1.0)

        weight = 1.0 if self._unit_weight else float(multiplicity)
        for hist, getter in self._geometry:
            value = getter(event)
            if is_available(value):
                hist.fill(value, weight)

        return True

    def process_file(self, path: str) -> int:
        """
        Process every entry of one input file.

        Returns:
            Number of accepted events in this file
        """
        self._require_initialized()
        start = time.time()

        self.event_source.open(path)
        try:
            n_entries = self.event_source.entry_count()
            accepted = 0
            for index in range(n_entries):
                self.event_source.clear()
                event = self.event_source.get_entry(index)
                if self.process_event(event):
                    accepted += 1
                    self._n_events += 1
        finally:
            self.event_source.close()

        elapsed = time.time() - start
        self._files.append(FileStatistics(path, n_entries, accepted, elapsed))
        self.logger.info(f"Processed {path}: {accepted}/{n_entries} events accepted ({elapsed:.1f}s)")
        return accepted

    def process_file_list(self, list_path: str) -> int:
        """
        Process every file named in a newline-delimited list, in order.

        Returns:
            Total number of accepted events so far

        Raises:
            ConfigurationError: If the list file cannot be opened
        """
        try:
            with open(list_path, "r") as f:
                paths = [line.strip() for line in f if line.strip()]
        except OSError as e:
            self.logger.error(f"Can't find input list {list_path}: {e}")
            raise ConfigurationError(f"Cannot open input list {list_path}") from e

        self.logger.info(f"Found {len(paths)} input files in {list_path}")
        for path in tqdm(paths, desc="Processing files", disable=not self.show_progress):
            self.process_file(path)
        return self._n_events

    def finalize(self) -> RunStatistics:
        """
        Finish every accumulator, then write and close the output file.

        Must be called exactly once, after all input has been processed.
        """
        self._require_initialized()
        if self._finalized:
            raise RuntimeError("finalize() has already been called")

        for hist in self.histograms.values():
            for name, obj in hist.finish(self.variation).items():
                self.output_file.register(name, obj)

        self.output_file.write()
        self.output_file.close()
        self._finalized = True
        self._end_time = datetime.now()

        self.logger.info(
            f"Finished {self.variation}: {self._n_events} accepted events, "
            f"output written to {self.output_file.path}"
        )
        return self.statistics

    def _require_initialized(self) -> None:
        if self.output_file is None:
            raise RuntimeError("initialize() must be called first")

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    @property
    def n_events(self) -> int:
        """Number of accepted events."""
        return self._n_events

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    @property
    def statistics(self) -> RunStatistics:
        return RunStatistics(
            files_processed=len(self._files),
            entries_read=sum(f.entries for f in self._files),
            accepted_events=self._n_events,
            start_time=self._start_time,
            end_time=self._end_time,
            files=tuple(self._files),
        )
