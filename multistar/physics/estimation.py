"""
Estimation of missing stellar parameters through ordered fallback chains.

Each chain is a list of (predicate, estimator) pairs. The first pair whose
predicate holds produces the value and a provenance note; when no predicate
holds the value stays empty. Estimators are pure functions of the component
inputs and the reference tables.

Chains:
    spectral type: given, temperature, mass, absolute magnitude, apparent magnitude
    magnitude: given apparent, given absolute, luminosity or radius with
        temperature, main-sequence spectral type, white dwarf, mass
    mass: given, spectral type

Dependencies:
    numpy: Logarithms in the photometric relations
"""

import re
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from ..config import (
    APPARENT_MAGNITUDE_FLAG,
    ABSOLUTE_MAGNITUDE_FLAG,
    BARYCENTER_SPECTRAL_TYPE,
    SOLAR_RADIUS_KM,
    WHITE_DWARF_ABSOLUTE_MAGNITUDE,
    NOTE_SPTYPE_FROM_TEMPERATURE,
    NOTE_SPTYPE_FROM_MASS,
    NOTE_SPTYPE_FROM_ABSMAG,
    NOTE_SPTYPE_FROM_APPMAG,
    NOTE_MAG_FROM_RADIUS,
    NOTE_MAG_FROM_LUMINOSITY,
    NOTE_MAG_FROM_SPTYPE,
    NOTE_MAG_FROM_MASS,
    NOTE_MAG_WHITE_DWARF,
    NOTE_MAG_GUESS_FROM_MASS,
    NOTE_MASS_GUESS,
)
from ..data.records import PairRecord
from ..data.reference_tables import ReferenceTables, ABSMAG_SPECTRAL_TYPE_PATTERN
from .photometry import (
    absolute_magnitude_from_luminosity,
    apparent_to_absolute_magnitude,
    stefan_boltzmann_luminosity,
    trim_spectral_type,
)

logger = logging.getLogger(__name__)

_WHITE_DWARF = re.compile(r'^D')


@dataclass
class ComponentInputs:
    """Measured parameters of one component, with logarithmic values expanded."""
    sptype: str = ''
    teff: Optional[float] = None
    luminosity: Optional[float] = None
    radius: Optional[float] = None
    mass: Optional[float] = None
    mass_text: str = ''
    magnitude: Optional[float] = None
    magnitude_text: str = ''
    magnitude_type: str = ''
    distance_ly: Optional[float] = None
    is_barycenter: bool = False


@dataclass
class ComponentEstimate:
    """Parameters of one component after estimation, each with its provenance note."""
    sptype: str = ''
    sptype_note: str = ''
    apparent_magnitude: Optional[float] = None
    apparent_magnitude_text: str = ''
    absolute_magnitude: Optional[float] = None
    magnitude_note: str = ''
    mass: Optional[float] = None
    mass_text: str = ''
    mass_note: str = ''
    radius_km: Optional[float] = None
    is_barycenter: bool = False

    @property
    def mass_is_estimated(self) -> bool:
        return bool(self.mass_note)


Predicate = Callable[[ComponentInputs], bool]
Estimator = Callable[[ComponentInputs], Tuple[Any, str]]
FallbackChain = List[Tuple[Predicate, Estimator]]


def run_chain(chain: FallbackChain, inputs: ComponentInputs) -> Tuple[Any, str]:
    """Evaluate a fallback chain; (None, "") when no predicate holds."""
    for predicate, estimator in chain:
        if predicate(inputs):
            value, note = estimator(inputs)
            if value is not None:
                return value, note
    return None, ''


def _positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def component_inputs(record: PairRecord, component: str, distance_ly: Optional[float]) -> ComponentInputs:
    """
    Collect the inputs of the primary ('a') or secondary ('b') component.

    Luminosities and temperatures flagged as logarithms are exponentiated
    and spectral type ranges are trimmed to their earliest type.
    """
    luminosity = getattr(record, f'lum_{component}')
    teff = getattr(record, f'teff_{component}')
    if record.lum_is_log and luminosity is not None:
        luminosity = 10 ** luminosity
    if record.teff_is_log and teff is not None:
        teff = 10 ** teff

    sptype = getattr(record, f'sptype_{component}')
    return ComponentInputs(
        sptype=trim_spectral_type(sptype),
        teff=teff,
        luminosity=luminosity,
        radius=getattr(record, f'radius_{component}'),
        mass=getattr(record, f'mass_{component}'),
        mass_text=record.source_text.get(f'mass_{component}', ''),
        magnitude=getattr(record, f'mag_{component}'),
        magnitude_text=record.source_text.get(f'mag_{component}', ''),
        magnitude_type=record.mag_type,
        distance_ly=distance_ly,
        is_barycenter=sptype == BARYCENTER_SPECTRAL_TYPE,
    )


class ParameterEstimator:
    """Fills missing spectral types, magnitudes and masses of a pair's components."""

    def __init__(self, tables: Optional[ReferenceTables] = None):
        self.tables = tables if tables is not None else ReferenceTables()
        self.sptype_chain: FallbackChain = [
            (lambda c: bool(c.sptype), lambda c: (c.sptype, '')),
            (lambda c: _positive(c.teff),
             lambda c: (self.tables.temperature_to_sptype(c.teff), NOTE_SPTYPE_FROM_TEMPERATURE)),
            (lambda c: _positive(c.mass),
             lambda c: (self.tables.mass_to_sptype(c.mass), NOTE_SPTYPE_FROM_MASS)),
            (lambda c: c.magnitude is not None and c.magnitude_type == ABSOLUTE_MAGNITUDE_FLAG,
             lambda c: (self.tables.absmag_to_sptype(c.magnitude), NOTE_SPTYPE_FROM_ABSMAG)),
            (lambda c: c.magnitude is not None and c.magnitude_type == APPARENT_MAGNITUDE_FLAG
             and _positive(c.distance_ly),
             lambda c: (self.tables.absmag_to_sptype(
                 apparent_to_absolute_magnitude(c.magnitude, c.distance_ly)), NOTE_SPTYPE_FROM_APPMAG)),
        ]
        self.mass_chain: FallbackChain = [
            (lambda c: c.mass is not None, lambda c: (c.mass, '')),
            (lambda c: bool(c.sptype), lambda c: (self.tables.sptype_to_mass(c.sptype), NOTE_MASS_GUESS)),
        ]

    def magnitude_chain(self, sptype: str, sptype_note: str) -> FallbackChain:
        """
        Fallback chain for the magnitude, given the (possibly estimated) spectral type.

        Estimators return ((kind, value), note) where kind is 'apparent' or 'absolute'.
        """
        def from_sptype(c: ComponentInputs) -> Tuple[Any, str]:
            absmag = self.tables.sptype_to_absmag(sptype)
            note = NOTE_MAG_FROM_MASS if sptype_note == NOTE_SPTYPE_FROM_MASS else NOTE_MAG_FROM_SPTYPE
            return (('absolute', absmag) if absmag is not None else None), note

        def from_mass(c: ComponentInputs) -> Tuple[Any, str]:
            guess = self.tables.mass_to_sptype(c.mass)
            absmag = self.tables.sptype_to_absmag(guess) if guess else None
            return (('absolute', absmag) if absmag is not None else None), NOTE_MAG_GUESS_FROM_MASS

        return [
            (lambda c: c.magnitude is not None and c.magnitude_type == APPARENT_MAGNITUDE_FLAG,
             lambda c: (('apparent', c.magnitude), '')),
            (lambda c: c.magnitude is not None and c.magnitude_type == ABSOLUTE_MAGNITUDE_FLAG,
             lambda c: (('absolute', c.magnitude), '')),
            (lambda c: _positive(c.luminosity) and _positive(c.teff),
             lambda c: (('absolute', absolute_magnitude_from_luminosity(c.luminosity, c.teff)),
                        NOTE_MAG_FROM_LUMINOSITY)),
            (lambda c: _positive(c.radius) and _positive(c.teff),
             lambda c: (('absolute', absolute_magnitude_from_luminosity(
                 stefan_boltzmann_luminosity(c.radius, c.teff), c.teff)), NOTE_MAG_FROM_RADIUS)),
            (lambda c: bool(ABSMAG_SPECTRAL_TYPE_PATTERN.search(sptype or '')), from_sptype),
            (lambda c: bool(_WHITE_DWARF.match(sptype or '')),
             lambda c: (('absolute', WHITE_DWARF_ABSOLUTE_MAGNITUDE), NOTE_MAG_WHITE_DWARF)),
            (lambda c: _positive(c.mass), from_mass),
        ]

    def estimate_component(self, inputs: ComponentInputs) -> ComponentEstimate:
        """Run all chains for one component."""
        sptype, sptype_note = run_chain(self.sptype_chain, inputs)
        sptype = sptype or ''

        magnitude, magnitude_note = run_chain(self.magnitude_chain(sptype, sptype_note), inputs)
        apparent = absolute = None
        apparent_text = ''
        if magnitude is not None:
            kind, value = magnitude
            if kind == 'apparent':
                apparent = value
                apparent_text = inputs.magnitude_text
            else:
                absolute = value
        else:
            logger.debug(f"No magnitude estimate for spectral type '{sptype}'")

        mass, mass_note = run_chain(self.mass_chain, ComponentInputs(
            sptype=sptype, mass=inputs.mass, mass_text=inputs.mass_text))
        mass_text = inputs.mass_text if inputs.mass is not None else ''

        radius_km = inputs.radius * SOLAR_RADIUS_KM if _positive(inputs.radius) else None

        return ComponentEstimate(
            sptype=sptype,
            sptype_note=sptype_note,
            apparent_magnitude=apparent,
            apparent_magnitude_text=apparent_text,
            absolute_magnitude=absolute,
            magnitude_note=magnitude_note,
            mass=mass,
            mass_text=mass_text,
            mass_note=mass_note,
            radius_km=radius_km,
            is_barycenter=inputs.is_barycenter,
        )

    def estimate_pair(self, record: PairRecord,
                      distance_ly: Optional[float]) -> Tuple[ComponentEstimate, ComponentEstimate]:
        """Estimates for the primary and secondary of a row."""
        return (
            self.estimate_component(component_inputs(record, 'a', distance_ly)),
            self.estimate_component(component_inputs(record, 'b', distance_ly)),
        )
