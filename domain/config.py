"""
Configuration domain models.

Validated configuration objects for an analysis run.
"""

from dataclasses import dataclass, field
from typing import Optional

from .binning import AnalysisBinning
from .variations import VariationType

MULTIPLICITY_MODES = ("tree", "nbd")


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Complete analysis configuration.

    Immutable configuration object validated at creation.
    """

    # Model selection
    variation: VariationType
    system: str

    # Paths
    output_path: str
    table_dir: str
    input_list: Optional[str] = None
    input_files: tuple[str, ...] = field(default_factory=tuple)

    # Weighting
    unit_weight: bool = False
    reweighting: bool = False
    multiplicity_mode: str = "tree"
    seed: Optional[int] = None

    # Reading
    tree_name: str = "tree"
    show_progress_bar: bool = True

    # Histograms and centrality tables
    binning: AnalysisBinning = field(default_factory=AnalysisBinning)
    centrality_definitions: dict = field(default_factory=dict)

    # Run metadata
    run_name: str = "glauber_analysis"

    def __post_init__(self):
        """Validate analysis configuration."""
        if not self.system:
            raise ValueError("system cannot be empty")
        if not self.output_path:
            raise ValueError("output_path cannot be empty")
        if not self.table_dir:
            raise ValueError("table_dir cannot be empty")
        if self.input_list is None and not self.input_files:
            raise ValueError("either input_list or input_files must be given")
        if self.input_list is not None and self.input_files:
            raise ValueError("input_list and input_files are mutually exclusive")
        if self.multiplicity_mode not in MULTIPLICITY_MODES:
            raise ValueError(
                f"multiplicity_mode must be one of {MULTIPLICITY_MODES}, got {self.multiplicity_mode}"
            )
        if not self.tree_name:
            raise ValueError("tree_name cannot be empty")

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'AnalysisConfig':
        """
        Create AnalysisConfig from a dictionary (e.g., loaded from YAML).

        Args:
            config_dict: Dictionary with configuration values

        Returns:
            Validated AnalysisConfig instance
        """
        analysis_dict = config_dict.get("analysis", {})
        run_metadata = config_dict.get("run_metadata", {})

        input_files = analysis_dict.get("input_files") or []
        seed = analysis_dict.get("seed")

        return cls(
            variation=VariationType.from_name(analysis_dict.get("type", "default")),
            system=analysis_dict.get("system", ""),
            output_path=analysis_dict.get("output_path", ""),
            table_dir=analysis_dict.get("table_dir", ""),
            input_list=analysis_dict.get("input_list"),
            input_files=tuple(input_files),
            unit_weight=bool(analysis_dict.get("unit_weight", False)),
            reweighting=bool(analysis_dict.get("reweighting", False)),
            multiplicity_mode=analysis_dict.get("multiplicity_mode", "tree"),
            seed=int(seed) if seed is not None else None,
            tree_name=analysis_dict.get("tree_name", "tree"),
            show_progress_bar=analysis_dict.get("show_progress_bar", True),
            binning=AnalysisBinning.from_dict(config_dict.get("binning") or {}),
            centrality_definitions=dict(config_dict.get("centrality") or {}),
            run_name=run_metadata.get("run_name", "glauber_analysis"),
        )
