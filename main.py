#!/usr/bin/env python3
"""
Main entry point for the Glauber MC analysis.

Supports:
  - Single run for one variation type, configured from YAML
  - Command line overrides of the YAML values (--type, --reweighting, ...)
  - Shared run directory via --run-dir, or a timestamped one under
    run_metadata.base_output_dir

Exits with status 1 on a fatal configuration error (missing table
directory, output file that cannot be created, unreadable input list).
"""

import sys
import os
import logging
import argparse
import yaml

from domain.config import AnalysisConfig
from domain.errors import ConfigurationError
from pipeline.executor import AnalysisExecutor
from utils.paths import create_timestamped_run_dir, update_config_paths_with_run_dir


def setup_logging(level: str = "INFO"):
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def load_config(config_path: str) -> dict:
    """Load configuration from YAML file."""
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Glauber MC analysis - tables and histograms per variation type",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with the default config
  python main.py

  # Systematic variation with re-weighting
  python main.py --type lowrw --reweighting --input-list lists/lowrw.list

  # Event-wise (unit) weights, explicit outputs
  python main.py --unit-weight --output out/default.root --table-dir out/tables

  # Dry-run to validate config
  python main.py --dry-run
        """
    )

    parser.add_argument(
        "--config", type=str, default="config.yaml",
        help="Path to configuration file (default: config.yaml)"
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Validate configuration without running the analysis"
    )

    # --- Analysis overrides ---
    analysis_group = parser.add_argument_group("Analysis Options")
    analysis_group.add_argument("--type", type=str, default=None, help="Variation type (e.g. default, gauss, lowrw)")
    analysis_group.add_argument("--system", type=str, default=None, help="Collision system (e.g. AuAu_200GeV)")
    analysis_group.add_argument("--unit-weight", action="store_true", default=None,
                                help="Weight geometry quantities by 1 instead of multiplicity")
    analysis_group.add_argument("--reweighting", action="store_true", default=None,
                                help="Apply the re-weighting rejection")
    analysis_group.add_argument("--multiplicity-mode", type=str, default=None, choices=["tree", "nbd"],
                                help="Take multiplicity from the tree or sample it from Npart/Ncoll")
    analysis_group.add_argument("--seed", type=int, default=None, help="Random seed")

    # --- Paths ---
    io_group = parser.add_argument_group("Input/Output Options")
    inputs = io_group.add_mutually_exclusive_group()
    inputs.add_argument("--input-list", type=str, default=None, help="Text file with one input ROOT file per line")
    inputs.add_argument("--input", type=str, nargs="+", default=None, help="Input ROOT file(s)")
    io_group.add_argument("--output", type=str, default=None, help="Output ROOT file")
    io_group.add_argument("--table-dir", type=str, default=None, help="Existing directory for text tables")
    io_group.add_argument("--run-dir", type=str, default=None,
                          help="Run directory for output, tables and stats")
    io_group.add_argument("--stats", type=str, default=None, help="Write run statistics JSON to this path")

    return parser.parse_args(argv)


def apply_cli_overrides(config_dict: dict, args) -> dict:
    """Override YAML analysis values with the ones given on the command line."""
    updated_config = dict(config_dict)
    analysis = dict(updated_config.get("analysis", {}))

    overrides = {
        "type": args.type,
        "system": args.system,
        "unit_weight": args.unit_weight,
        "reweighting": args.reweighting,
        "multiplicity_mode": args.multiplicity_mode,
        "seed": args.seed,
        "output_path": args.output,
        "table_dir": args.table_dir,
    }
    for key, value in overrides.items():
        if value is not None:
            analysis[key] = value

    if args.input_list is not None:
        analysis["input_list"] = args.input_list
        analysis.pop("input_files", None)
    elif args.input is not None:
        analysis["input_files"] = args.input
        analysis.pop("input_list", None)

    updated_config["analysis"] = analysis
    return updated_config


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("Glauber MC Analysis")
    logger.info("=" * 60)

    try:
        logger.info(f"Loading configuration from: {args.config}")
        config_dict = apply_cli_overrides(load_config(args.config), args)

        # Determine run directory
        run_dir = args.run_dir
        base_output = config_dict.get("run_metadata", {}).get("base_output_dir")
        if run_dir:
            os.makedirs(run_dir, exist_ok=True)
            logger.info(f"Using shared run directory: {run_dir}")
        elif base_output:
            run_name = config_dict.get("run_metadata", {}).get("run_name", "glauber_analysis")
            variation = config_dict.get("analysis", {}).get("type", "default")
            run_dir = create_timestamped_run_dir(base_output, run_name, variation)
            logger.info(f"Created timestamped run directory: {run_dir}")

        if run_dir:
            config_dict = update_config_paths_with_run_dir(config_dict, run_dir)

        # Create validated config
        config = AnalysisConfig.from_dict(config_dict)
        logger.info("Configuration loaded and validated successfully")
        logger.info(f"Variation: {config.variation} ({config.variation.description}), system: {config.system}")

        if args.dry_run:
            logger.info("Dry run mode - configuration is valid, exiting")
            logger.info(f"Output file: {config.output_path}")
            logger.info(f"Table directory: {config.table_dir}")
            return 0

        executor = AnalysisExecutor(config)
        statistics = executor.run()

        stats_path = args.stats
        if stats_path is None and run_dir:
            stats_path = os.path.join(run_dir, "logs", f"stats_{config.variation}.json")
        if stats_path:
            executor.save_stats(stats_path, statistics)

        logger.info(f"✓ Analysis completed: {statistics.accepted_events} events accepted")
        return 0

    except ConfigurationError as e:
        logger.error(f"Fatal configuration error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
