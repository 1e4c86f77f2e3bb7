"""
GlauberCumulantHistogram - Eccentricity accumulator with cumulants.

Same fill/finish contract as GlauberHistogram; the profiles additionally
export the two- and four-particle cumulant eccentricities

    eps{2} = sqrt(<eps^2>)
    eps{4} = (2 <eps^2>^2 - <eps^4>)^(1/4)
"""

import numpy as np

from .glauber_histogram import GlauberHistogram, Profile


class GlauberCumulantHistogram(GlauberHistogram):
    """Accumulator for eccentricities of a given order and frame."""

    POWERS = (1, 2, 4, 8)

    def _summarize(self, profile: Profile) -> dict[str, np.ndarray]:
        columns = super()._summarize(profile)

        ecc2 = profile.moment(2)
        ecc4 = profile.moment(4)
        ecc2_error = profile.moment_error(2)
        ecc4_error = profile.moment_error(4)

        with np.errstate(divide="ignore", invalid="ignore"):
            cumulant2 = np.sqrt(ecc2)
            cumulant2_error = ecc2_error / (2.0 * cumulant2)

            c4 = 2.0 * ecc2 ** 2 - ecc4
            cumulant4 = np.where(c4 > 0, np.power(np.clip(c4, 0.0, None), 0.25), np.nan)
            c4_error = np.sqrt((4.0 * ecc2 * ecc2_error) ** 2 + ecc4_error ** 2)
            cumulant4_error = c4_error / (4.0 * cumulant4 ** 3)

        columns.update({
            "ecc2": cumulant2,
            "ecc2_error": cumulant2_error,
            "ecc4": cumulant4,
            "ecc4_error": cumulant4_error,
        })
        return columns
