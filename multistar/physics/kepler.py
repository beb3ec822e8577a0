"""
Keplerian relations for placing binary stars on their orbits.

Functions:
    total_semimajor_axis: Kepler's third law in AU, years and solar masses
    partition_semimajor_axis: Split a relative orbit between the two components
    arcsec_to_au: Angular to physical separation at a distance in light years
    projected_primary_axis: a1 sin i from the primary's velocity semi-amplitude
    eccentric_anomaly_from_true: Eccentric anomaly for a true anomaly
    mean_anomaly_from_eccentric: Kepler's equation
    mean_anomaly_at_primary_minimum: Mean anomaly at the epoch of primary eclipse
    besselian_mean_anomaly: Mean anomaly at J2000 from a Besselian epoch

Dependencies:
    numpy: Trigonometry and vectorizable arithmetic
    logging: Warnings for degenerate inputs
"""

import logging
import numpy as np
from typing import Optional, Tuple

from ..config import (
    AU_PER_LIGHT_YEAR,
    BESSELIAN_REFERENCE_YEAR,
    DAYS_PER_JULIAN_YEAR,
    KM_PER_AU,
    SECONDS_PER_DAY,
)

logger = logging.getLogger(__name__)


def total_semimajor_axis(period_years: float, total_mass: float) -> float:
    """
    Relative semimajor axis from Kepler's third law, a^3 = P^2 M.

    Args:
        period_years: Orbital period in years
        total_mass: Sum of the component masses in solar masses

    Returns:
        Semimajor axis in AU
    """
    return float(np.cbrt(period_years ** 2 * total_mass))


def partition_semimajor_axis(total_axis: float, mass_primary: float,
                             mass_secondary: float) -> Tuple[float, float]:
    """
    Axes of the primary and secondary about the barycenter.

    Each component's axis is inversely proportional to its mass, so
    a1 / a2 == M_B / M_A.
    """
    total_mass = mass_primary + mass_secondary
    return (total_axis * mass_secondary / total_mass,
            total_axis * mass_primary / total_mass)


def arcsec_to_au(arcsec: float, distance_ly: float) -> float:
    """Physical separation of an angular separation, 2 d tan(theta / 2)."""
    separation_ly = 2.0 * distance_ly * np.tan(np.radians(arcsec / 3600.0) / 2.0)
    return float(separation_ly * AU_PER_LIGHT_YEAR)


def projected_primary_axis(k1_km_s: float, period_years: float, eccentricity: float) -> float:
    """
    a1 sin i in AU from the primary's radial velocity semi-amplitude.

    Bischoff et al. (2017), AN 338, 671, equation 5:
    a1 sin i = K1 P sqrt(1 - e^2) / (2 pi).
    """
    period_s = period_years * DAYS_PER_JULIAN_YEAR * SECONDS_PER_DAY
    return float(k1_km_s * period_s * np.sqrt(1.0 - eccentricity ** 2) / (2.0 * np.pi) / KM_PER_AU)


def eccentric_anomaly_from_true(true_anomaly_rad: float, e: float) -> float:
    """E = acos((cos nu + e) / (1 + e cos nu)), in [0, pi]."""
    cos_nu = np.cos(true_anomaly_rad)
    return float(np.arccos(np.clip((cos_nu + e) / (1.0 + e * cos_nu), -1.0, 1.0)))


def mean_anomaly_from_eccentric(eccentric_anomaly_rad: float, e: float) -> float:
    """Kepler's equation M = E - e sin E."""
    return float(eccentric_anomaly_rad - e * np.sin(eccentric_anomaly_rad))


def mean_anomaly_at_primary_minimum(periastron_arg_deg: Optional[float], e: float) -> float:
    """
    Mean anomaly at the epoch of primary minimum.

    At primary eclipse the secondary lies on the line of sight, so the true
    anomaly is 90 degrees minus the argument of periastron.

    Args:
        periastron_arg_deg: Argument of periastron in degrees (None counts as 0)
        e: Eccentricity

    Returns:
        Mean anomaly in degrees, in [0, 360)
    """
    true_anomaly = np.radians((90.0 - (periastron_arg_deg or 0.0)) % 360.0)
    eccentric_anomaly = eccentric_anomaly_from_true(true_anomaly, e)
    mean_anomaly = np.degrees(mean_anomaly_from_eccentric(eccentric_anomaly, e))
    if true_anomaly > np.pi:
        mean_anomaly = 360.0 - mean_anomaly
    return float(mean_anomaly)


def besselian_mean_anomaly(epoch_year: float, period_years: float) -> float:
    """Mean anomaly at J2000 for a periastron passage given as a Besselian year."""
    if period_years == 0:
        logger.warning("Zero period; cannot derive a mean anomaly")
        return 0.0
    phase = ((BESSELIAN_REFERENCE_YEAR - epoch_year) / period_years) % 1.0
    return float(phase * 360.0)
