"""
Photometric relations used to fill in missing stellar magnitudes.

Functions:
    bolometric_correction: Reed (1998) bolometric correction from temperature
    stefan_boltzmann_luminosity: Luminosity from radius and temperature
    absolute_magnitude_from_luminosity: Visual absolute magnitude from L and Teff
    apparent_to_absolute_magnitude: Distance modulus with distances in light years
    trim_spectral_type: Earliest type of a spectral type range

Dependencies:
    numpy: Polynomial evaluation and logarithms
"""

import re
import logging

import numpy as np

from ..config import (
    BOLOMETRIC_CORRECTION_COEFFS,
    SOLAR_BOLOMETRIC_MAGNITUDE,
    SOLAR_RADIUS_KM,
    SOLAR_LUMINOSITY_W,
    STEFAN_BOLTZMANN,
    LY_PER_PARSEC,
)

logger = logging.getLogger(__name__)

_SPECTRAL_RANGE = re.compile(r'([OBAFGKM]\d)[-/][OBAFGKM]*\d([IV]+)')


def bolometric_correction(teff: float) -> float:
    """
    Bolometric correction for a given effective temperature.

    Reed (1998), JRASC 92, 36, "The Composite Observational-Theoretical HR
    Diagram": BC = -8.499 x^4 + 13.421 x^3 - 8.131 x^2 - 3.901 x - 0.438
    with x = log10(Teff) - 4.

    Args:
        teff: Effective temperature in kelvin

    Returns:
        Bolometric correction in magnitudes
    """
    x = np.log10(teff) - 4.0
    return float(np.polyval(BOLOMETRIC_CORRECTION_COEFFS, x))


def stefan_boltzmann_luminosity(radius_solar: float, teff: float) -> float:
    """Luminosity in solar units, L = 4 pi R^2 sigma T^4."""
    radius_m = radius_solar * SOLAR_RADIUS_KM * 1000.0
    luminosity_w = 4.0 * np.pi * radius_m ** 2 * STEFAN_BOLTZMANN * teff ** 4
    return float(luminosity_w / SOLAR_LUMINOSITY_W)


def absolute_magnitude_from_luminosity(luminosity: float, teff: float) -> float:
    """
    Visual absolute magnitude from luminosity and temperature.

    Args:
        luminosity: Luminosity in solar units
        teff: Effective temperature in kelvin

    Returns:
        M_V = M_bol - BC
    """
    bolometric_magnitude = SOLAR_BOLOMETRIC_MAGNITUDE - 2.5 * np.log10(luminosity)
    return float(bolometric_magnitude - bolometric_correction(teff))


def apparent_to_absolute_magnitude(apparent_magnitude: float, distance_ly: float) -> float:
    """M = m - 5 log10(d / 10 pc), with the distance in light years."""
    return float(apparent_magnitude - 5.0 * np.log10(distance_ly / (10.0 * LY_PER_PARSEC)))


def trim_spectral_type(sptype: str) -> str:
    """
    Reduce a spectral type range to its earliest type and luminosity class.

    Examples:
        >>> trim_spectral_type("K0-K1III")
        'K0III'
        >>> trim_spectral_type("G8/K0IV")
        'G8IV'
    """
    if not sptype:
        return sptype
    match = _SPECTRAL_RANGE.search(sptype)
    if match:
        return match.group(1) + match.group(2)
    return sptype
