"""
Serialization of assembled objects into Celestia's .stc format.

Each object becomes one record: a "Barycenter" or "Replace" keyword for
barycenters and stars that replace existing definitions, the Hipparcos
number, the colon-joined names, and a block with the position (or the
barycenter it orbits), the stellar parameters, the orbit and the rotation.
"""

import logging
from typing import Iterable, List

from ..config import (
    STC_HEADER,
    RA_DEC_DECIMALS,
    DISTANCE_DECIMALS,
    MAGNITUDE_DECIMALS,
    RADIUS_SIG_FIGS,
    NOTE_FULLY_SPECIFIED,
    NOTE_TIDAL_LOCKING,
    NOTE_INCLINATION_FROM_K1,
)
from ..hierarchy.assembler import CelestialObject
from ..utils.formatting import format_magnitude, format_plain, format_sig_figs

log = logging.getLogger(__name__)

_K1_NOTE_PREFIX = NOTE_INCLINATION_FROM_K1.split('{')[0]


def _note(text: str) -> str:
    return f" # {text}" if text else ''


def _inclination_note(text: str) -> str:
    # The K1 estimate is long, so it goes on its own comment line
    if text.startswith(_K1_NOTE_PREFIX):
        return f"\n\t\t# {text}"
    return _note(text)


def _strip_trailing_point(text: str) -> str:
    return text[:-1] if text.endswith('.') else text


def format_header(obj: CelestialObject) -> str:
    """First line of a record: keyword, Hipparcos number and names."""
    parts = []
    if obj.is_barycenter:
        parts.append('Barycenter')
    elif obj.duplicate:
        parts.append('Replace')
    if obj.hip:
        parts.append(obj.hip)
    parts.append(f'"{":".join(obj.names)}"')
    return ' '.join(parts)


def format_position(obj: CelestialObject) -> List[str]:
    if obj.has_orbit:
        return [f'\tOrbitBarycenter "{obj.parent}"']
    return [
        f"\tRA {obj.ra or 0.0:.{RA_DEC_DECIMALS}f}",
        f"\tDec {obj.dec or 0.0:.{RA_DEC_DECIMALS}f}{_note(obj.axis_note)}",
        f"\tDistance {obj.distance_ly or 0.0:.{DISTANCE_DECIMALS}f}",
    ]


def format_stellar_parameters(obj: CelestialObject) -> List[str]:
    lines = [f'\tSpectralType "{obj.sptype}"{_note(obj.sptype_note)}']
    if obj.apparent_magnitude is not None:
        magnitude = obj.apparent_magnitude_text or format_plain(obj.apparent_magnitude)
        lines.append(f"\tAppMag {magnitude}{_note(obj.magnitude_note)}")
    elif obj.absolute_magnitude is not None:
        magnitude = format_magnitude(obj.absolute_magnitude, MAGNITUDE_DECIMALS)
        lines.append(f"\tAbsMag {magnitude}{_note(obj.magnitude_note)}")
    else:
        log.debug(f"No magnitude for '{obj.first_name}'")
    if obj.radius_km:
        lines.append(f"\tRadius {format_sig_figs(obj.radius_km, RADIUS_SIG_FIGS)}")
    return lines


def format_orbit(obj: CelestialObject) -> List[str]:
    """EllipticalOrbit block; only elements that are known are written."""
    fully_specified = f"       # {NOTE_FULLY_SPECIFIED}" if obj.fully_specified else ''
    lines = [
        '',
        f"\tEllipticalOrbit {{{fully_specified}",
        f"\t\tPeriod          {obj.period}",
        f"\t\tSemiMajorAxis   {_strip_trailing_point(obj.semimajor_axis)}{_note(obj.axis_note)}",
    ]
    if obj.eccentricity:
        lines.append(f"\t\tEccentricity    {obj.eccentricity_text or format_plain(obj.eccentricity)}")
    if obj.inclination:
        lines.append(f"\t\tInclination     {obj.inclination}{_inclination_note(obj.inclination_note)}")
    if obj.ascending_node:
        lines.append(f"\t\tAscendingNode   {obj.ascending_node}{_note(obj.node_note)}")
    if obj.periastron_arg:
        lines.append(f"\t\tArgOfPericenter {obj.periastron_arg}{_note(obj.periastron_note)}")
    if obj.epoch:
        lines.append(f"\t\tEpoch           {obj.epoch}{_note(obj.epoch_note)}")
    if obj.mean_anomaly:
        lines.append(f"\t\tMeanAnomaly     {obj.mean_anomaly}")
    lines.append('\t}')
    return lines


def format_rotation(obj: CelestialObject) -> List[str]:
    """Uniform rotation for tidally locked stars with a known orbit plane, else a period."""
    if not obj.rotation_period_hours:
        return []
    if obj.tidally_locked and obj.inclination:
        lines = [
            '',
            f"\t# {NOTE_TIDAL_LOCKING}",
            '\tUniformRotation {',
            f"\t\tPeriod          {obj.rotation_period_hours}",
            f"\t\tInclination     {obj.inclination}",
        ]
        if obj.ascending_node:
            lines.append(f"\t\tAscendingNode   {obj.ascending_node}")
        lines.append('\t}')
        return lines
    note = NOTE_TIDAL_LOCKING if obj.tidally_locked else f"{obj.rotation_period_days} d"
    return ['', f"\tRotationPeriod {obj.rotation_period_hours} # {note}"]


def format_object(obj: CelestialObject) -> str:
    """One complete .stc record."""
    lines = ['', format_header(obj), '{']
    lines.extend(format_position(obj))
    if not obj.is_barycenter:
        lines.extend(format_stellar_parameters(obj))
    if obj.has_orbit:
        lines.extend(format_orbit(obj))
    if not obj.is_barycenter:
        lines.extend(format_rotation(obj))
    lines.append('}')
    return '\n'.join(lines) + '\n'


def render_stc(objects: Iterable[CelestialObject]) -> str:
    """
    Render objects, already in output order, after the catalog header.

    Args:
        objects: Barycenters and stars, parents before their children

    Returns:
        Complete .stc file contents
    """
    return STC_HEADER + ''.join(format_object(obj) for obj in objects)
