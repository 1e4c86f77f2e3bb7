"""
AnalysisExecutor - High-level analysis orchestrator.

Wires together all services from an AnalysisConfig and runs the event loop:
  initialize -> process input files -> finalize -> save run statistics
"""

import json
import logging
import os
from typing import Optional

import numpy as np

from domain.config import AnalysisConfig
from domain.statistics import RunStatistics
from services.analysis import GlauberAnalysis
from services.centrality import CentralityModel, create_multiplicity_strategy
from services.io import GlauberTreeReader


class AnalysisExecutor:
    """
    High-level analysis executor.

    Responsible for:
    1. Creating all services with dependency injection
    2. Running the analysis over the configured input
    3. Returning and saving run statistics
    """

    def __init__(self, config: AnalysisConfig, rng: Optional[np.random.Generator] = None):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        # One generator per run for re-weighting decisions
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.analysis = self._build_analysis()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> RunStatistics:
        """Execute the analysis and return its statistics."""
        config = self.config
        self.logger.info(f"Running {config.variation} analysis for {config.system}")

        self.analysis.initialize(config.output_path, config.table_dir)

        if config.input_list is not None:
            self.analysis.process_file_list(config.input_list)
        else:
            for path in config.input_files:
                self.analysis.process_file(path)

        statistics = self.analysis.finalize()
        self._log_results(statistics)
        return statistics

    def save_stats(self, stats_path: str, statistics: RunStatistics) -> None:
        """
        Save run statistics as JSON.

        Args:
            stats_path: Destination file
            statistics: Statistics returned by run()
        """
        stats = {
            "run_name": self.config.run_name,
            "type": str(self.config.variation),
            "description": self.config.variation.description,
            "system": self.config.system,
            "unit_weight": self.config.unit_weight,
            "reweighting": self.config.reweighting,
            "multiplicity_mode": self.config.multiplicity_mode,
            "seed": self.config.seed,
            "output_path": self.config.output_path,
            "statistics": statistics.to_dict(),
        }

        stats_dir = os.path.dirname(stats_path)
        if stats_dir:
            os.makedirs(stats_dir, exist_ok=True)
        with open(stats_path, "w") as f:
            json.dump(stats, f, indent=2, default=str)

        self.logger.info(f"Saved run stats to: {stats_path}")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_analysis(self) -> GlauberAnalysis:
        config = self.config
        centrality_model = CentralityModel(config.system, config.centrality_definitions)
        # NBD sampling draws from a child stream; self.rng only makes re-weighting decisions
        strategy = create_multiplicity_strategy(config.multiplicity_mode, centrality_model, self.rng.spawn(1)[0])

        return GlauberAnalysis(
            variation=config.variation,
            centrality_model=centrality_model,
            rng=self.rng,
            event_source=GlauberTreeReader(config.tree_name),
            multiplicity_strategy=strategy,
            binning=config.binning,
            unit_weight=config.unit_weight,
            reweighting=config.reweighting,
            show_progress=config.show_progress_bar,
        )

    def _log_results(self, statistics: RunStatistics) -> None:
        self.logger.info("=" * 60)
        self.logger.info("Analysis summary")
        self.logger.info(f"  Files processed:  {statistics.files_processed}")
        self.logger.info(f"  Entries read:     {statistics.entries_read}")
        self.logger.info(f"  Accepted events:  {statistics.accepted_events}")
        self.logger.info(f"  Acceptance rate:  {statistics.acceptance_rate:.1f}%")
        self.logger.info(f"  Total time:       {statistics.total_time_sec:.1f}s")
        self.logger.info("=" * 60)
