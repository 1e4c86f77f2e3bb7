"""
GlauberTreeReader service - Sequential access to Glauber MC trees.

Reads the event tree of one ROOT file with uproot, one entry at a time.
"""

import logging
from typing import Optional

import awkward as ak
import numpy as np
import uproot

from domain.events import GlauberEvent, SENTINEL

# Tree branch -> GlauberEvent field
REQUIRED_BRANCHES = {
    "b": "b",
    "npart": "npart",
    "ncoll": "ncoll",
    "mult": "multiplicity",
}

OPTIONAL_BRANCHES = {
    "sRP": "area_rp",
    "sPP": "area_pp",
    "eccRP2": "ecc_rp2",
    "eccRP2M": "ecc_rp2_mod",
    "eccPP2": "ecc_pp2",
    "eccPP2M": "ecc_pp2_mod",
    "eccPP3": "ecc_pp3",
    "eccPP3M": "ecc_pp3_mod",
    "eccPP4": "ecc_pp4",
    "eccPP4M": "ecc_pp4_mod",
}


class GlauberTreeReader:
    """
    Event source over a single Glauber tree.

    The reader is reused across files: open() a path, walk its entries with
    get_entry(), then close() before opening the next one.
    """

    def __init__(self, tree_name: str = "tree"):
        self.tree_name = tree_name
        self.logger = logging.getLogger(self.__class__.__name__)
        self._columns: dict[str, np.ndarray] = {}
        self._n_entries = 0
        self._path: Optional[str] = None
        self._event: Optional[GlauberEvent] = None

    def open(self, path: str) -> None:
        """
        Open a ROOT file and load its event branches.

        Args:
            path: Path or URI to the ROOT file

        Raises:
            KeyError: If the tree or one of the required branches is missing
        """
        if self._path is not None:
            self.close()

        with uproot.open(path) as root_file:
            tree = root_file[self.tree_name]
            available = set(tree.keys())

            missing = [name for name in REQUIRED_BRANCHES if name not in available]
            if missing:
                raise KeyError(f"Tree '{self.tree_name}' in {path} is missing branches: {missing}")

            branches = [name for name in (*REQUIRED_BRANCHES, *OPTIONAL_BRANCHES) if name in available]
            events = tree.arrays(branches, library="ak")
            self._n_entries = int(tree.num_entries)

        self._columns = {name: ak.to_numpy(events[name]) for name in events.fields}
        for name in OPTIONAL_BRANCHES:
            if name not in self._columns:
                self.logger.debug(f"Branch {name} not found in {path}, using sentinel")
                self._columns[name] = np.full(self._n_entries, SENTINEL)

        self._path = path
        self.logger.debug(f"Opened {path}: {self._n_entries} entries")

    def entry_count(self) -> int:
        return self._n_entries

    def get_entry(self, index: int) -> GlauberEvent:
        """
        Load the entry at index and make it the current event.

        Raises:
            RuntimeError: If no file is open
            IndexError: If index is out of range
        """
        if self._path is None:
            raise RuntimeError("No file is open")
        if index < 0 or index >= self._n_entries:
            raise IndexError(f"Entry {index} out of range [0, {self._n_entries})")

        values = {
            field_name: self._columns[branch][index]
            for branch, field_name in {**REQUIRED_BRANCHES, **OPTIONAL_BRANCHES}.items()
        }
        self._event = GlauberEvent(
            b=float(values.pop("b")),
            npart=int(values.pop("npart")),
            ncoll=int(values.pop("ncoll")),
            multiplicity=float(values.pop("multiplicity")),
            **{name: float(value) for name, value in values.items()},
        )
        return self._event

    def clear(self) -> None:
        """Forget the current event."""
        self._event = None

    def close(self) -> None:
        if self._path is not None:
            self.logger.debug(f"Closed {self._path}")
        self._columns = {}
        self._n_entries = 0
        self._path = None
        self._event = None

    @property
    def is_open(self) -> bool:
        return self._path is not None

    @property
    def event(self) -> GlauberEvent:
        if self._event is None:
            raise RuntimeError("No current event, call get_entry() first")
        return self._event

    # Scalar accessors of the current event

    def get_b(self) -> float:
        return self.event.b

    def get_npart(self) -> int:
        return self.event.npart

    def get_ncoll(self) -> int:
        return self.event.ncoll

    def get_multiplicity(self) -> float:
        return self.event.multiplicity

    def get_area_rp(self) -> float:
        return self.event.area_rp

    def get_area_pp(self) -> float:
        return self.event.area_pp

    def get_ecc_rp2(self, modified: bool = False) -> float:
        return self.event.ecc_rp2_mod if modified else self.event.ecc_rp2

    def get_ecc_pp(self, order: int, modified: bool = False) -> float:
        return self.event.participant_plane_eccentricity(order, modified)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
