# tests/test_estimation.py
"""Tests for the parameter estimation fallback chains."""

import pytest

from multistar.config import (
    LY_PER_PARSEC,
    NOTE_MAG_FROM_LUMINOSITY,
    NOTE_MAG_FROM_MASS,
    NOTE_MAG_FROM_RADIUS,
    NOTE_MAG_FROM_SPTYPE,
    NOTE_MAG_GUESS_FROM_MASS,
    NOTE_MAG_WHITE_DWARF,
    NOTE_MASS_GUESS,
    NOTE_SPTYPE_FROM_ABSMAG,
    NOTE_SPTYPE_FROM_APPMAG,
    NOTE_SPTYPE_FROM_MASS,
    NOTE_SPTYPE_FROM_TEMPERATURE,
    SOLAR_RADIUS_KM,
)
from multistar.data.records import PairRecord
from multistar.physics.estimation import (
    ComponentInputs,
    ParameterEstimator,
    component_inputs,
    run_chain,
)
from multistar.physics.photometry import absolute_magnitude_from_luminosity


@pytest.fixture(scope="module")
def estimator():
    return ParameterEstimator()


class TestRunChain:
    """Ordered fallback evaluation."""

    def test_first_matching_predicate_wins(self):
        chain = [
            (lambda c: False, lambda c: ('never', 'a')),
            (lambda c: True, lambda c: ('second', 'b')),
            (lambda c: True, lambda c: ('third', 'c')),
        ]
        assert run_chain(chain, ComponentInputs()) == ('second', 'b')

    def test_empty_result_falls_through(self):
        chain = [
            (lambda c: True, lambda c: (None, 'a')),
            (lambda c: True, lambda c: ('fallback', 'b')),
        ]
        assert run_chain(chain, ComponentInputs()) == ('fallback', 'b')

    def test_nothing_matches(self):
        assert run_chain([(lambda c: False, lambda c: (1, 'x'))], ComponentInputs()) == (None, '')


class TestComponentInputs:

    def test_log_values_are_expanded(self):
        record = PairRecord(index=1, teff_a=3.7612, teff_is_log=True, lum_b=2.0, lum_is_log=True)
        primary = component_inputs(record, 'a', None)
        secondary = component_inputs(record, 'b', None)
        assert primary.teff == pytest.approx(10 ** 3.7612)
        assert secondary.luminosity == pytest.approx(100.0)

    def test_spectral_range_is_trimmed(self):
        record = PairRecord(index=1, sptype_a='K0-K1III')
        assert component_inputs(record, 'a', None).sptype == 'K0III'

    def test_barycenter_marker(self):
        record = PairRecord(index=1, sptype_b='*')
        assert component_inputs(record, 'b', None).is_barycenter


class TestSpectralTypeChain:

    def test_given(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(sptype='G2V'))
        assert (estimate.sptype, estimate.sptype_note) == ('G2V', '')

    def test_from_temperature(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(teff=5770.0))
        assert (estimate.sptype, estimate.sptype_note) == ('G2V', NOTE_SPTYPE_FROM_TEMPERATURE)

    def test_temperature_before_mass(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(teff=5770.0, mass=0.5))
        assert estimate.sptype == 'G2V'

    def test_from_mass(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(mass=1.0))
        assert (estimate.sptype, estimate.sptype_note) == ('G3V', NOTE_SPTYPE_FROM_MASS)

    def test_from_absolute_magnitude(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(magnitude=4.79, magnitude_type='MV'))
        assert (estimate.sptype, estimate.sptype_note) == ('G2V', NOTE_SPTYPE_FROM_ABSMAG)

    def test_from_apparent_magnitude(self, estimator):
        inputs = ComponentInputs(magnitude=4.79, magnitude_type='mV', distance_ly=10.0 * LY_PER_PARSEC)
        estimate = estimator.estimate_component(inputs)
        assert (estimate.sptype, estimate.sptype_note) == ('G2V', NOTE_SPTYPE_FROM_APPMAG)

    def test_apparent_magnitude_needs_distance(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(magnitude=4.79, magnitude_type='mV'))
        assert estimate.sptype == ''


class TestMagnitudeChain:

    def test_given_apparent(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(sptype='G2V', magnitude=3.5,
                                                                magnitude_type='mV'))
        assert estimate.apparent_magnitude == 3.5
        assert estimate.absolute_magnitude is None
        assert estimate.magnitude_note == ''

    def test_given_apparent_keeps_its_text(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(sptype='G2V', magnitude=5.1,
                                                                magnitude_text='5.10', magnitude_type='mV'))
        assert estimate.apparent_magnitude_text == '5.10'

    def test_absolute_magnitude_has_no_apparent_text(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(sptype='G2V', magnitude=5.1,
                                                                magnitude_text='5.10', magnitude_type='MV'))
        assert estimate.apparent_magnitude_text == ''

    def test_from_luminosity(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(sptype='G2V', luminosity=2.0, teff=5800.0))
        assert estimate.absolute_magnitude == pytest.approx(absolute_magnitude_from_luminosity(2.0, 5800.0))
        assert estimate.magnitude_note == NOTE_MAG_FROM_LUMINOSITY

    def test_from_radius(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(sptype='G2V', radius=1.0, teff=5772.0))
        assert estimate.absolute_magnitude == pytest.approx(4.92, abs=0.01)
        assert estimate.magnitude_note == NOTE_MAG_FROM_RADIUS
        assert estimate.radius_km == pytest.approx(SOLAR_RADIUS_KM)

    def test_from_spectral_type(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(sptype='G2V'))
        assert estimate.absolute_magnitude == pytest.approx(4.79)
        assert estimate.magnitude_note == NOTE_MAG_FROM_SPTYPE

    def test_from_spectral_type_estimated_from_mass(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(mass=1.0))
        assert estimate.absolute_magnitude == pytest.approx(4.86)
        assert estimate.magnitude_note == NOTE_MAG_FROM_MASS

    def test_white_dwarf(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(sptype='DA2'))
        assert estimate.absolute_magnitude == 13.0
        assert estimate.magnitude_note == NOTE_MAG_WHITE_DWARF

    def test_guess_from_mass(self, estimator):
        """An evolved type has no tabulated magnitude; the mass gives a rough one."""
        estimate = estimator.estimate_component(ComponentInputs(sptype='K0III', mass=1.0))
        assert estimate.absolute_magnitude == pytest.approx(4.86)
        assert estimate.magnitude_note == NOTE_MAG_GUESS_FROM_MASS

    def test_no_estimate(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(sptype='K0III'))
        assert estimate.apparent_magnitude is None
        assert estimate.absolute_magnitude is None
        assert estimate.magnitude_note == ''


class TestMassChain:

    def test_given_mass_keeps_its_text(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(sptype='G2V', mass=1.10, mass_text='1.10'))
        assert estimate.mass == 1.10
        assert estimate.mass_text == '1.10'
        assert not estimate.mass_is_estimated

    def test_guess_from_spectral_type(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(sptype='K0III'))
        assert estimate.mass == pytest.approx(10 ** 0.46)
        assert estimate.mass_note == NOTE_MASS_GUESS
        assert estimate.mass_is_estimated

    def test_unmatched_type_has_no_mass(self, estimator):
        estimate = estimator.estimate_component(ComponentInputs(sptype='DA2'))
        assert estimate.mass is None
        assert estimate.mass_note == ''


class TestEstimatePair:

    def test_both_components(self, estimator):
        record = PairRecord(index=1, sptype_a='G2V', mass_b=0.5, source_text={'mass_b': '0.5'})
        primary, secondary = estimator.estimate_pair(record, 30.0)
        assert primary.sptype == 'G2V'
        assert primary.mass == pytest.approx(1.02)
        assert secondary.sptype == 'M1V'
        assert secondary.mass == 0.5
        assert secondary.mass_text == '0.5'
