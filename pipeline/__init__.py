"""
Pipeline execution layer.

High-level executor that wires together all components.
"""

from .executor import AnalysisExecutor

__all__ = ["AnalysisExecutor"]
