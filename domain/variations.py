"""
Systematic variation types of the Glauber model.

Each type selects a set of output files and tables; it carries no runtime state.
"""

from enum import Enum


class VariationType(Enum):
    """The twelve fixed systematic variants."""

    DEFAULT = ("default", "default")
    SMALL = ("small", "small R, large d")
    LARGE = ("large", "large R, small d")
    SMALL_XSEC = ("smallXsec", "small #sigma_{NN}")
    LARGE_XSEC = ("largeXsec", "large #sigma_{NN}")
    GAUSS = ("gauss", "gaussian overlap")
    SMALL_NPP = ("smallNpp", "small n_{pp}, large x")
    LARGE_NPP = ("largeNpp", "large n_{pp}, small x")
    SMALL_TOTAL = ("smallTotal", "-5% total cross section")
    LARGE_TOTAL = ("largeTotal", "+5% total cross section")
    LOW_RW = ("lowrw", "+2(-2) sigma p0 (p1) parameter for re-weighting")
    HIGH_RW = ("highrw", "-2(+2) sigma p0 (p1) parameter for re-weighting")

    @property
    def type_name(self) -> str:
        return self.value[0]

    @property
    def description(self) -> str:
        return self.value[1]

    @classmethod
    def from_name(cls, name: str) -> "VariationType":
        """
        Look up a variation by its string identifier.

        Raises:
            ValueError: If the name is not one of the fixed identifiers
        """
        for variation in cls:
            if variation.type_name == name:
                return variation
        known = ", ".join(v.type_name for v in cls)
        raise ValueError(f"Unknown variation type '{name}', expected one of: {known}")

    def __str__(self) -> str:
        return self.type_name
