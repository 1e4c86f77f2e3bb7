"""
Path utilities for analysis runs.

Handles timestamped run directories and output path management.
"""

import os
from datetime import datetime


def create_timestamped_run_dir(base_output_dir: str, run_name: str = "glauber_analysis",
                               variation: str = None) -> str:
    """
    Create ``<base>/<run_name>[_<variation>]_<YYYYmmdd_HHMMSS>``.

    Separate variation runs started in the same second get distinct
    directories as long as their types differ.
    """
    parts = [run_name or "run"]
    if variation:
        parts.append(variation)
    parts.append(datetime.now().strftime("%Y%m%d_%H%M%S"))

    run_dir = os.path.join(base_output_dir, "_".join(parts))
    os.makedirs(run_dir, exist_ok=True)
    return run_dir


def _set_if_relative(config: dict, key: str, value: str):
    """Only overwrite a path if it's missing or relative (not an absolute override)."""
    if not config.get(key) or not os.path.isabs(config[key]):
        config[key] = value


def update_config_paths_with_run_dir(config_dict: dict, run_dir: str) -> dict:
    """
    Point the output file and table directory into the run directory.

    Relative paths from YAML are replaced with the standard layout under
    *run_dir*; absolute paths already set in the config are left untouched.

    Standard layout under run_dir:
        glauber_<type>.root - output file
        tables/             - text tables
        logs/               - run statistics

    Args:
        config_dict: Configuration dictionary
        run_dir: Run directory path

    Returns:
        Updated configuration dictionary
    """
    updated_config = config_dict.copy()
    analysis_config = dict(updated_config.get("analysis", {}))

    for d in ("tables", "logs"):
        os.makedirs(os.path.join(run_dir, d), exist_ok=True)

    variation = analysis_config.get("type", "default")
    _set_if_relative(analysis_config, "output_path", os.path.join(run_dir, f"glauber_{variation}.root"))
    _set_if_relative(analysis_config, "table_dir", os.path.join(run_dir, "tables"))

    updated_config["analysis"] = analysis_config
    return updated_config
