# tests/test_photometry.py
"""Tests for the photometric relations."""

import numpy as np
import pytest

from multistar.config import LY_PER_PARSEC
from multistar.physics.photometry import (
    absolute_magnitude_from_luminosity,
    apparent_to_absolute_magnitude,
    bolometric_correction,
    stefan_boltzmann_luminosity,
    trim_spectral_type,
)


class TestBolometricCorrection:

    def test_constant_term_at_10000_k(self):
        """At log10(Teff) = 4 only the constant term remains."""
        assert np.isclose(bolometric_correction(10000.0), -0.438)

    def test_solar_temperature(self):
        assert bolometric_correction(5772.0) == pytest.approx(-0.180, abs=0.002)


class TestLuminosity:

    def test_sun(self):
        """The nominal Sun has one solar luminosity."""
        assert stefan_boltzmann_luminosity(1.0, 5772.0) == pytest.approx(1.0, rel=1e-3)

    def test_scales_with_radius_squared(self):
        ratio = stefan_boltzmann_luminosity(2.0, 5000.0) / stefan_boltzmann_luminosity(1.0, 5000.0)
        assert np.isclose(ratio, 4.0)

    def test_solar_absolute_magnitude(self):
        assert absolute_magnitude_from_luminosity(1.0, 5772.0) == pytest.approx(4.920, abs=0.005)

    def test_brighter_star_has_smaller_magnitude(self):
        assert absolute_magnitude_from_luminosity(100.0, 5772.0) == \
            pytest.approx(absolute_magnitude_from_luminosity(1.0, 5772.0) - 5.0)


class TestDistanceModulus:

    def test_ten_parsecs(self):
        assert np.isclose(apparent_to_absolute_magnitude(5.0, 10.0 * LY_PER_PARSEC), 5.0)

    def test_hundred_parsecs(self):
        assert np.isclose(apparent_to_absolute_magnitude(5.0, 100.0 * LY_PER_PARSEC), 0.0)


class TestTrimSpectralType:

    @pytest.mark.parametrize("sptype,expected", [
        ("K0-K1III", "K0III"),
        ("G8/K0IV", "G8IV"),
        ("G2V", "G2V"),
        ("", ""),
    ])
    def test_trim(self, sptype, expected):
        assert trim_spectral_type(sptype) == expected
