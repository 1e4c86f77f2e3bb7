"""
Input/output services.

Reading Glauber trees and writing the analysis output file.
"""

from .event_source import GlauberTreeReader
from .output_file import OutputFile

__all__ = [
    "GlauberTreeReader",
    "OutputFile",
]
