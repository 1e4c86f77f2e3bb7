"""
Shared fixtures for the Glauber analysis tests.
"""

import numpy as np
import pytest
import uproot

from domain.events import GlauberEvent, SENTINEL
from services.centrality import CentralityModel


def make_event(
    b=5.0,
    npart=150,
    ncoll=400,
    multiplicity=100.0,
    geometry=0.3,
    area=10.0
) -> GlauberEvent:
    """Event with every field set; geometry=SENTINEL marks areas and eccentricities missing."""
    if geometry == SENTINEL:
        area = SENTINEL
    return GlauberEvent(
        b=b,
        npart=npart,
        ncoll=ncoll,
        multiplicity=multiplicity,
        area_rp=area,
        area_pp=area,
        ecc_rp2=geometry,
        ecc_rp2_mod=geometry,
        ecc_pp2=geometry,
        ecc_pp2_mod=geometry,
        ecc_pp3=geometry,
        ecc_pp3_mod=geometry,
        ecc_pp4=geometry,
        ecc_pp4_mod=geometry,
    )


class FakeEventSource:
    """In-memory event source keyed by path."""

    def __init__(self, files: dict):
        self.files = files
        self.opened: list[str] = []
        self.closed = 0
        self._events = None
        self._current = None

    def open(self, path):
        self.opened.append(path)
        self._events = list(self.files[path])

    def entry_count(self):
        return len(self._events)

    def get_entry(self, index):
        self._current = self._events[index]
        return self._current

    def clear(self):
        self._current = None

    def close(self):
        self.closed += 1
        self._events = None


class FixedRandom:
    """Uniform source always returning the same value."""

    def __init__(self, value: float):
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value


def reweighting_definition(p0: float, p1: float) -> dict:
    """Centrality definition whose re-weighting is 1 - p0 * exp(-p1 * mult)."""
    return {
        "test": {
            "reweighting": {"p0": p0, "p1": p1},
            "tables": [
                {"npp": 2.0, "k": 2.0, "x": 0.1, "cuts": [10, 20, 50, 80, 120, 200]},
            ],
        }
    }


def write_glauber_tree(path, events, tree_name="tree", optional=True):
    """Write events to a ROOT file with the branch layout of the tree reader."""
    branches = {
        "b": np.array([e.b for e in events], dtype=np.float64),
        "npart": np.array([e.npart for e in events], dtype=np.int32),
        "ncoll": np.array([e.ncoll for e in events], dtype=np.int32),
        "mult": np.array([e.multiplicity for e in events], dtype=np.float64),
    }
    if optional:
        optional_fields = {
            "sRP": "area_rp", "sPP": "area_pp",
            "eccRP2": "ecc_rp2", "eccRP2M": "ecc_rp2_mod",
            "eccPP2": "ecc_pp2", "eccPP2M": "ecc_pp2_mod",
            "eccPP3": "ecc_pp3", "eccPP3M": "ecc_pp3_mod",
            "eccPP4": "ecc_pp4", "eccPP4M": "ecc_pp4_mod",
        }
        for branch, field_name in optional_fields.items():
            branches[branch] = np.array([getattr(e, field_name) for e in events], dtype=np.float64)

    with uproot.recreate(str(path)) as f:
        f[tree_name] = branches
    return str(path)


@pytest.fixture
def centrality_model():
    return CentralityModel("AuAu_200GeV")


@pytest.fixture
def table_dir(tmp_path):
    path = tmp_path / "tables"
    path.mkdir()
    return str(path)


@pytest.fixture
def output_path(tmp_path):
    return str(tmp_path / "glauber_default.root")
