"""
OutputFile service - The single ROOT container written per analysis run.

Objects are buffered by name and written once, in name order, with uproot.
"""

import logging
from typing import Any, Optional

import uproot


class OutputFile:
    """
    Buffered writer for one output ROOT file.

    Histograms are registered as (counts, edges) tuples, graphs and tables as
    dicts of equal-length numpy arrays (written as TTrees).
    """

    def __init__(self, path: str):
        self.path = path
        self.logger = logging.getLogger(self.__class__.__name__)
        self._file: Optional[uproot.WritableDirectory] = None
        self._objects: dict[str, Any] = {}
        self._written = False

    def open(self) -> None:
        """
        Create (or recreate) the file on disk.

        Raises:
            OSError: If the file cannot be created
        """
        if self._file is not None:
            return
        self._file = uproot.recreate(self.path)
        self.logger.info(f"Opened output file: {self.path}")

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def register(self, name: str, obj: Any) -> None:
        """Buffer an object for writing; names must be unique."""
        if not self.is_open:
            raise RuntimeError(f"Output file {self.path} is not open")
        if name in self._objects:
            raise ValueError(f"Object '{name}' already registered in {self.path}")
        self._objects[name] = obj

    def sorted_names(self) -> list[str]:
        return sorted(self._objects)

    def write(self) -> None:
        """Write every registered object in name order. Allowed once."""
        if not self.is_open:
            raise RuntimeError(f"Output file {self.path} is not open")
        if self._written:
            raise RuntimeError(f"Output file {self.path} has already been written")

        for name in self.sorted_names():
            self._file[name] = self._objects[name]
        self._written = True
        self.logger.debug(f"Wrote {len(self._objects)} objects to {self.path}")

    def close(self) -> None:
        if self._file is None:
            return
        self._file.close()
        self._file = None
        self.logger.info(f"Closed output file: {self.path}")
