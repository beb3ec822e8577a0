# tests/test_orbits.py
"""Tests for the ecliptic orbit transformation and the per-row orbit solution."""

import numpy as np
import pytest

from multistar.config import (
    CATALOG_COLUMNS,
    LY_PER_PARSEC,
    NOTE_PARAMETER_UNKNOWN,
    NOTE_PRIMARY_MINIMUM,
)
from multistar.data.records import normalize_row
from multistar.physics.orbits import (
    place_unbound_pair,
    relative_axis_to_au,
    semimajor_axes,
    solve_orbit,
    tidal_rotation_hours,
    transform_to_ecliptic,
)

ROW_WIDTH = max(CATALOG_COLUMNS.values()) + 1
TEN_PARSECS_LY = 10.0 * LY_PER_PARSEC


def make_record(**fields):
    cells = [''] * ROW_WIDTH
    fields.setdefault('index', '1')
    fields.setdefault('multiplicity', 'AB')
    fields.setdefault('ra', '06 40 00')
    fields.setdefault('dec', '+30 00 00')
    for name, value in fields.items():
        cells[CATALOG_COLUMNS[name]] = value
    return normalize_row(cells)


class TestTransformToEcliptic:
    """Plane-of-sky to J2000 ecliptic rotation."""

    def test_results_are_in_range(self):
        for inclination in (0.0, 30.0, 120.0, 179.0):
            i, node, arg = transform_to_ecliptic(100.0, 30.0, inclination, 40.0, 250.0)
            assert 0.0 <= i <= 180.0
            assert 0.0 <= node < 360.0
            assert 0.0 <= arg < 360.0

    def test_edge_on_orbit_is_nudged(self):
        """Exactly 90 degrees is transformed as 89.99999 without a division error."""
        with np.errstate(all='raise'):
            edge_on = transform_to_ecliptic(100.0, 30.0, 90.0, 40.0, 10.0)
        assert edge_on == transform_to_ecliptic(100.0, 30.0, 89.99999, 40.0, 10.0)
        assert all(np.isfinite(edge_on))

    def test_zero_declination_is_replaced(self):
        assert transform_to_ecliptic(100.0, 0.0, 30.0, 40.0, 10.0) == \
            transform_to_ecliptic(100.0, None, 30.0, 40.0, 10.0)

    def test_reversed_orbit(self):
        """Reversing the orbital motion mirrors the ecliptic inclination and node."""
        i_direct, node_direct, _ = transform_to_ecliptic(100.0, 30.0, 0.0, 40.0, 0.0)
        i_reverse, node_reverse, _ = transform_to_ecliptic(100.0, 30.0, 180.0, 40.0, 0.0)
        assert np.isclose(i_direct + i_reverse, 180.0, atol=1e-6)
        assert np.isclose((node_reverse - node_direct) % 360.0, 180.0, atol=1e-6)

    def test_missing_values_count_as_zero(self):
        result = transform_to_ecliptic(None, 45.0, None, None, None)
        assert result == transform_to_ecliptic(0.0, 45.0, 0.0, 0.0, 0.0)


class TestSemimajorAxes:

    def test_units(self):
        assert relative_axis_to_au(2.0, 'a', None) == 2.0
        assert relative_axis_to_au(215.032, 'r', None) == pytest.approx(1.0)
        assert relative_axis_to_au(1.0, 's', TEN_PARSECS_LY) == pytest.approx(10.0, rel=1e-3)
        assert relative_axis_to_au(1000.0, 'm', TEN_PARSECS_LY) == pytest.approx(10.0, rel=1e-3)

    def test_unusable_axes(self):
        assert relative_axis_to_au(1.0, 's', None) is None
        assert relative_axis_to_au(1.0, 'x', 10.0) is None

    def test_photocentric_axis_belongs_to_primary(self):
        record = make_record(semimajor_axis='1.0', axis_unit='a', axis_is_photocentric='a0')
        total, a1, a2 = semimajor_axes(record, 10.0, 1.0, 0.5, None)
        assert a1 == pytest.approx(1.0)
        assert a2 == pytest.approx(2.0)
        assert total == pytest.approx(3.0)

    def test_relative_axis_without_masses_is_not_split(self):
        record = make_record(semimajor_axis='4.0', axis_unit='a')
        assert semimajor_axes(record, 10.0, None, 0.5, None) == (4.0, None, None)

    def test_no_axis_and_no_masses(self):
        record = make_record(period='10')
        assert semimajor_axes(record, 10.0, None, None, None) == (None, None, None)


class TestSolveOrbit:
    """Orbital elements of both components of a row."""

    def test_no_period(self):
        assert solve_orbit(make_record(), 1.0, 1.0, 10.0) is None

    def test_kepler_third_law_split(self):
        """P = 10 yr, masses 1.0 and 0.5: a = 150^(1/3) AU, split 1:2."""
        solution = solve_orbit(make_record(period='10', mass_a='1.0', mass_b='0.5'), 1.0, 0.5, 30.0)

        assert solution.semimajor_axis_total == pytest.approx(150.0 ** (1.0 / 3.0))
        assert solution.semimajor_axis_primary == pytest.approx(solution.semimajor_axis_total / 3.0)
        assert solution.semimajor_axis_primary / solution.semimajor_axis_secondary == pytest.approx(0.5)
        assert solution.axis_primary == "1.77"
        assert solution.axis_secondary == "3.54"
        assert solution.period == "10"

    def test_unoriented_orbit(self):
        """Without inclination, node or epoch nothing is oriented."""
        solution = solve_orbit(make_record(period='10'), 1.0, 0.5, 30.0)
        assert solution.inclination == ''
        assert solution.ascending_node == ''
        assert solution.inclination_note == NOTE_PARAMETER_UNKNOWN
        assert solution.node_note == NOTE_PARAMETER_UNKNOWN
        assert solution.periastron_secondary == "180"
        assert solution.periastron_note == ''
        assert not solution.fully_specified

    def test_period_in_days(self):
        solution = solve_orbit(make_record(period='365.25', period_unit='d'), 1.0, 1.0, 30.0)
        assert solution.period_years == pytest.approx(1.0)
        assert solution.period == "1.0000"

    def test_edge_on_inclination(self):
        record = make_record(period='10', inclination='90', node='40', periastron_arg='10',
                             eccentricity='0.3')
        solution = solve_orbit(record, 1.0, 1.0, 30.0)
        assert solution.inclination not in ('', 'nan')
        assert 0.0 <= float(solution.inclination) <= 180.0

    def test_precision_follows_inputs(self):
        record = make_record(period='10', inclination='45.25', node='120.5', periastron_arg='33.4',
                             periastron_owner='1', semimajor_axis='2.50', axis_unit='a')
        solution = solve_orbit(record, 1.0, 1.0, 30.0)
        assert len(solution.inclination.split('.')[1]) == 2
        assert len(solution.periastron_primary.split('.')[1]) == 1
        assert solution.axis_primary == "1.25"

    def test_periastron_owner(self):
        primary_owned = solve_orbit(make_record(period='10', periastron_arg='30', periastron_owner='1'),
                                    1.0, 1.0, 30.0)
        secondary_owned = solve_orbit(make_record(period='10', periastron_arg='30', periastron_owner='2'),
                                      1.0, 1.0, 30.0)
        assert primary_owned.periastron_primary == secondary_owned.periastron_secondary
        assert (float(primary_owned.periastron_secondary) - float(primary_owned.periastron_primary)) % 360 \
            == pytest.approx(180.0)

    def test_inclination_from_k1(self):
        record = make_record(period='1', k1='10')
        solution = solve_orbit(record, 1.0, 1.0, 30.0)
        assert "about 32 degrees" in solution.inclination_note

    def test_k1_inconsistent_with_axis(self):
        record = make_record(period='1', k1='100')
        solution = solve_orbit(record, 1.0, 1.0, 30.0)
        assert solution.inclination_note == NOTE_PARAMETER_UNKNOWN

    def test_fully_specified(self):
        record = make_record(period='10', inclination='60', node='40', flip='no')
        assert solve_orbit(record, 1.0, 1.0, 30.0).fully_specified
        record = make_record(period='10', inclination='60', flip='yes')
        assert not solve_orbit(record, 1.0, 1.0, 30.0).fully_specified

    def test_flip_changes_orientation(self):
        plain = solve_orbit(make_record(period='10', inclination='60', node='40'), 1.0, 1.0, 30.0)
        flipped = solve_orbit(make_record(period='10', inclination='60', node='40', flip='yes'),
                              1.0, 1.0, 30.0)
        assert plain.inclination != flipped.inclination

    def test_julian_epoch_is_kept(self):
        record = make_record(period='10', epoch='2450000.5', epoch_unit='JD', inclination='60.0')
        assert solve_orbit(record, 1.0, 1.0, 30.0).epoch == '2450000.5'

    def test_besselian_epoch_becomes_mean_anomaly(self):
        record = make_record(period='20', epoch='1990', epoch_unit='B', inclination='45.0')
        solution = solve_orbit(record, 1.0, 1.0, 30.0)
        assert solution.mean_anomaly == "180.0"
        assert solution.epoch == ''

    def test_primary_minimum_of_circular_orbit(self):
        record = make_record(period='0.01', epoch='2450000.5', epoch_unit='JD',
                             epoch_is_primary_minimum='Tmin', inclination='85')
        solution = solve_orbit(record, 1.0, 1.0, 30.0)
        assert solution.mean_anomaly == "90"
        assert solution.epoch_note == NOTE_PRIMARY_MINIMUM


class TestUnboundPairs:

    def test_single_position(self):
        placement = place_unbound_pair(make_record(), 1.0, 1.0)
        assert not placement.separate_positions
        assert placement.ra_barycenter == placement.ra_secondary

    def test_mass_weighted_barycenter(self):
        record = make_record(ra='01 00 00', dec='+10 00 00', ra_b='01 00 04', dec_b='+10 00 30')
        placement = place_unbound_pair(record, 3.0, 1.0)
        assert placement.separate_positions
        assert placement.ra_barycenter == pytest.approx(0.75 * record.ra + 0.25 * record.ra_b)
        assert placement.dec_barycenter == pytest.approx(0.75 * record.dec + 0.25 * record.dec_b)

    def test_unknown_masses_use_primary_position(self):
        record = make_record(ra_b='06 40 05')
        placement = place_unbound_pair(record, None, 1.0)
        assert placement.ra_barycenter == record.ra
        assert placement.dec_secondary == record.dec


class TestTidalRotation:

    def test_tight_circular_orbit(self):
        assert tidal_rotation_hours(0.01, "0.01", 0.0) == "90"
        assert tidal_rotation_hours(0.5, "0.50", 0.005) == "4400"

    def test_wide_or_eccentric_orbit(self):
        assert tidal_rotation_hours(2.0, "2.0", 0.0) is None
        assert tidal_rotation_hours(0.5, "0.5", 0.05) is None
        assert tidal_rotation_hours(None, "", None) is None
