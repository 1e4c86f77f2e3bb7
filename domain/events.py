"""
Event-related domain models.

Immutable data structures representing one simulated Glauber collision.
"""

from dataclasses import dataclass

SENTINEL = -9999.0

# Participant-plane eccentricity fields keyed by (order, modified)
_PP_ECCENTRICITY_FIELDS = {
    (2, False): "ecc_pp2",
    (2, True): "ecc_pp2_mod",
    (3, False): "ecc_pp3",
    (3, True): "ecc_pp3_mod",
    (4, False): "ecc_pp4",
    (4, True): "ecc_pp4_mod",
}

ECCENTRICITY_ORDERS = (2, 3, 4)


def is_available(value: float) -> bool:
    """Sentinel-valued fields (<= -9999) were not computed for the event."""
    return value > SENTINEL


@dataclass(frozen=True)
class GlauberEvent:
    """A single collision read from a Glauber tree."""

    b: float
    npart: int
    ncoll: int
    multiplicity: float
    area_rp: float = SENTINEL
    area_pp: float = SENTINEL
    ecc_rp2: float = SENTINEL
    ecc_rp2_mod: float = SENTINEL
    ecc_pp2: float = SENTINEL
    ecc_pp2_mod: float = SENTINEL
    ecc_pp3: float = SENTINEL
    ecc_pp3_mod: float = SENTINEL
    ecc_pp4: float = SENTINEL
    ecc_pp4_mod: float = SENTINEL

    def __post_init__(self):
        """Validate the event."""
        if self.npart < 0:
            raise ValueError(f"npart must be non-negative, got {self.npart}")
        if self.ncoll < 0:
            raise ValueError(f"ncoll must be non-negative, got {self.ncoll}")

    def participant_plane_eccentricity(self, order: int, modified: bool = False) -> float:
        """
        Participant-plane eccentricity of the given harmonic order.

        Args:
            order: Harmonic order (2, 3 or 4)
            modified: Return the modified variant

        Returns:
            Eccentricity value, possibly the sentinel
        """
        try:
            field_name = _PP_ECCENTRICITY_FIELDS[(order, modified)]
        except KeyError:
            raise ValueError(f"eccentricity order must be one of {ECCENTRICITY_ORDERS}, got {order}")
        return getattr(self, field_name)
