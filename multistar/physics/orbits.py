"""
Transformation of plane-of-sky orbits into the J2000 ecliptic frame.

Visual and spectroscopic orbits are quoted relative to the plane of the sky.
Celestia expects orbital elements in the J2000 ecliptic frame, so the
inclination, ascending node and argument of periastron are rotated using the
equations of Grant Hutchison's star orbit translation spreadsheet
(starorbs.xls). The pair's orbit is then split between its two components.

Functions:
    transform_to_ecliptic: Plane-of-sky (i, node, arg) to ecliptic elements
    solve_orbit: Orbital elements of both components of a row
    place_unbound_pair: Positions of a pair without an orbit
    tidal_rotation_hours: Rotation period of a tidally locked star

Dependencies:
    numpy: Spherical trigonometry with IEEE division semantics
    logging: Notices for skipped axis partitions
"""

import math
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..config import (
    OBLIQUITY_DEG,
    DEFAULT_DECLINATION_DEG,
    EDGE_ON_INCLINATION_DEG,
    EDGE_ON_INCLINATION_NUDGED_DEG,
    DEFAULT_SECONDARY_PERIASTRON_DEG,
    CIRCULAR_PRIMARY_MINIMUM_MEAN_ANOMALY_DEG,
    UNKNOWN_SPECTROSCOPIC_INCLINATION_DEG,
    AU_PER_SOLAR_RADIUS,
    DAYS_PER_JULIAN_YEAR,
    HOURS_PER_DAY,
    TIDAL_LOCK_MAX_PERIOD_YEARS,
    TIDAL_LOCK_MAX_ECCENTRICITY,
    DEFAULT_AXIS_SIG_FIGS,
    DEFAULT_ANGLE_DECIMALS,
    DEFAULT_PERIASTRON_DECIMALS,
    PERIOD_UNIT_DAYS,
    EPOCH_UNIT_JULIAN,
    EPOCH_UNIT_BESSELIAN,
    AXIS_UNIT_AU,
    AXIS_UNIT_SOLAR_RADII,
    AXIS_UNIT_ARCSEC,
    AXIS_UNIT_MILLIARCSEC,
    PERIASTRON_OWNER_PRIMARY,
    PERIASTRON_OWNER_SECONDARY,
    NOTE_PARAMETER_UNKNOWN,
    NOTE_INCLINATION_FROM_K1,
    NOTE_PRIMARY_MINIMUM,
)
from ..data.records import PairRecord
from ..utils.formatting import format_sig_figs, format_decimals, count_sig_figs
from .kepler import (
    arcsec_to_au,
    besselian_mean_anomaly,
    mean_anomaly_at_primary_minimum,
    partition_semimajor_axis,
    projected_primary_axis,
    total_semimajor_axis,
)

logger = logging.getLogger(__name__)


@dataclass
class OrbitSolution:
    """Orbital elements of a pair in the ecliptic frame, formatted for output."""
    period_years: float
    period: str
    eccentricity: Optional[float] = None
    eccentricity_text: str = ''
    semimajor_axis_total: Optional[float] = None
    semimajor_axis_primary: Optional[float] = None
    semimajor_axis_secondary: Optional[float] = None
    axis_primary: str = ''
    axis_secondary: str = ''
    inclination: str = ''
    ascending_node: str = ''
    periastron_primary: str = ''
    periastron_secondary: str = ''
    mean_anomaly: str = ''
    epoch: str = ''
    inclination_note: str = ''
    node_note: str = ''
    periastron_note: str = ''
    epoch_note: str = ''
    fully_specified: bool = False


@dataclass
class PairPlacement:
    """Absolute positions of a pair that has no orbit."""
    ra_barycenter: Optional[float]
    dec_barycenter: Optional[float]
    ra_primary: Optional[float]
    dec_primary: Optional[float]
    ra_secondary: Optional[float]
    dec_secondary: Optional[float]
    separate_positions: bool


def transform_to_ecliptic(ra: Optional[float], dec: Optional[float], inclination: Optional[float],
                          node: Optional[float], periastron_arg: Optional[float]) -> Tuple[float, float, float]:
    """
    Rotate plane-of-sky orbital angles into the J2000 ecliptic frame.

    Missing values count as zero. A zero declination is replaced by a tiny
    one and an edge-on inclination of exactly 90 degrees is nudged, both to
    keep the spherical trigonometry away from divisions by zero.

    Args:
        ra: Right ascension of the system in degrees
        dec: Declination of the system in degrees
        inclination: Plane-of-sky inclination in degrees
        node: Position angle of the ascending node in degrees
        periastron_arg: Argument of periastron in degrees

    Returns:
        (inclination, ascending node, argument of periastron) in degrees,
        the last two in [0, 360)
    """
    ra = ra or 0.0
    dec = dec or DEFAULT_DECLINATION_DEG
    inclination = inclination or 0.0
    node = node or 0.0
    periastron_arg = periastron_arg or 0.0
    if inclination == EDGE_ON_INCLINATION_DEG:
        inclination = EDGE_ON_INCLINATION_NUDGED_DEG

    with np.errstate(divide='ignore', invalid='ignore'):
        alpha0 = np.float64(np.radians(ra)) - np.pi
        delta0 = -np.float64(np.radians(dec))
        l270 = np.float64(np.radians(node))
        b = np.float64(np.radians(90.0 - inclination))
        epsilon = np.radians(OBLIQUITY_DEG)

        # Orbit pole in equatorial coordinates
        denominator = np.sin(b) * np.cos(delta0) - np.cos(b) * np.sin(delta0) * np.sin(l270)
        alpha = np.arctan(np.cos(b) * np.cos(l270) / denominator) + alpha0
        if denominator < 0:
            alpha += np.pi
        delta = np.arcsin(np.cos(b) * np.cos(delta0) * np.sin(l270) + np.sin(b) * np.sin(delta0))

        # Orbit pole in ecliptic coordinates
        lam = np.arctan((np.sin(alpha) * np.cos(epsilon) + np.tan(delta) * np.sin(epsilon)) / np.cos(alpha))
        if np.cos(alpha) < 0:
            lam += np.pi
        beta = np.arcsin(np.sin(delta) * np.cos(epsilon) - np.cos(delta) * np.sin(epsilon) * np.sin(alpha))

        # Ascending node direction, to measure the shift of the periastron
        om270 = np.float64(np.radians(node - 270.0))
        delta_om = np.arcsin(np.cos(delta0) * np.sin(om270))
        alpha_om = np.arctan(np.cos(om270) / -np.sin(delta0) / np.sin(om270)) + alpha0
        if -np.sin(delta0) * np.sin(om270) < 0:
            alpha_om += np.pi
        lam_om = np.arctan((np.sin(alpha_om) * np.cos(epsilon) + np.tan(delta_om) * np.sin(epsilon))
                           / np.cos(alpha_om))
        if np.cos(alpha_om) < 0:
            lam_om += np.pi
        beta_om = np.arcsin(np.sin(delta_om) * np.cos(epsilon)
                            - np.cos(delta_om) * np.sin(epsilon) * np.sin(alpha_om))

        d = np.arccos(np.clip(np.cos(beta_om) * np.cos(lam_om - lam - np.pi / 2), -1.0, 1.0))
        if beta_om < 0:
            d = -d

    final_inclination = 90.0 - np.degrees(beta)
    final_node = (np.degrees(lam) + 90.0) % 360.0
    final_periastron = (periastron_arg + np.degrees(d)) % 360.0
    return float(final_inclination), float(final_node), float(final_periastron)


def relative_axis_to_au(value: float, unit: str, distance_ly: Optional[float]) -> Optional[float]:
    """Convert a quoted semimajor axis to AU; None for unknown units or distances."""
    if unit == AXIS_UNIT_AU:
        return value
    if unit == AXIS_UNIT_SOLAR_RADII:
        return value * AU_PER_SOLAR_RADIUS
    if unit in (AXIS_UNIT_ARCSEC, AXIS_UNIT_MILLIARCSEC):
        if not distance_ly:
            logger.debug("Angular semimajor axis without a distance")
            return None
        arcsec = value if unit == AXIS_UNIT_ARCSEC else value / 1000.0
        return arcsec_to_au(arcsec, distance_ly)
    logger.debug(f"Unknown semimajor axis unit '{unit}'")
    return None


def _masses_known(mass_primary: Optional[float], mass_secondary: Optional[float]) -> bool:
    return (mass_primary is not None and mass_secondary is not None
            and mass_primary > 0 and mass_secondary > 0)


def semimajor_axes(record: PairRecord, period_years: float, mass_primary: Optional[float],
                   mass_secondary: Optional[float],
                   distance_ly: Optional[float]) -> Tuple[Optional[float], Optional[float], Optional[float]]:
    """
    Total, primary and secondary semimajor axes in AU.

    Without a quoted axis the total comes from Kepler's third law. A relative
    axis is split inversely by mass; a photocentric axis is the primary's own
    and the secondary's follows from the mass ratio. Partitions that need an
    unknown mass are skipped.
    """
    masses_known = _masses_known(mass_primary, mass_secondary)

    if record.semimajor_axis is None:
        if not masses_known:
            logger.debug(f"Row {record.index}: no axis and unknown masses, axis left empty")
            return None, None, None
        total = total_semimajor_axis(period_years, mass_primary + mass_secondary)
        return (total,) + partition_semimajor_axis(total, mass_primary, mass_secondary)

    quoted = relative_axis_to_au(record.semimajor_axis, record.axis_unit, distance_ly)
    if quoted is None:
        return None, None, None

    if not record.axis_is_photocentric:
        if not masses_known:
            logger.debug(f"Row {record.index}: unknown masses, relative axis not split")
            return quoted, None, None
        return (quoted,) + partition_semimajor_axis(quoted, mass_primary, mass_secondary)

    if not masses_known:
        return None, quoted, None
    secondary = quoted / (mass_secondary / mass_primary)
    return quoted + secondary, quoted, secondary


def solve_orbit(record: PairRecord, mass_primary: Optional[float], mass_secondary: Optional[float],
                distance_ly: Optional[float]) -> Optional[OrbitSolution]:
    """
    Ecliptic-frame orbital elements for both components of a row.

    Args:
        record: Row with a period
        mass_primary: Primary mass in solar masses, possibly estimated
        mass_secondary: Secondary mass in solar masses, possibly estimated
        distance_ly: Distance of the system in light years

    Returns:
        OrbitSolution, or None when the row has no period
    """
    if record.period is None:
        return None

    period_years = record.period
    if record.period_unit == PERIOD_UNIT_DAYS:
        period_years = record.period / DAYS_PER_JULIAN_YEAR

    eccentricity = record.eccentricity
    has_epoch = record.epoch is not None
    solution = OrbitSolution(
        period_years=period_years,
        period=format_sig_figs(period_years, record.sig_figs.get('period', 0)),
        eccentricity=eccentricity,
        eccentricity_text=record.source_text.get('eccentricity', ''),
    )

    mean_anomaly = None
    if has_epoch:
        if record.epoch_unit == EPOCH_UNIT_JULIAN:
            solution.epoch = record.source_text['epoch']
        elif record.epoch_unit == EPOCH_UNIT_BESSELIAN:
            mean_anomaly = besselian_mean_anomaly(record.epoch, period_years)

    total, axis_primary, axis_secondary = semimajor_axes(
        record, period_years, mass_primary, mass_secondary, distance_ly)
    solution.semimajor_axis_total = total
    solution.semimajor_axis_primary = axis_primary
    solution.semimajor_axis_secondary = axis_secondary

    # Inclination of single-lined spectroscopic binaries from K1
    inclination = record.inclination
    inclination_decimals = record.decimals.get('inclination', 0) if inclination is not None else None
    if inclination is None and record.k1 is not None:
        projected = projected_primary_axis(record.k1, period_years, eccentricity or 0.0)
        if axis_primary and projected <= axis_primary:
            inclination = float(math.floor(np.degrees(np.arcsin(projected / axis_primary))))
            solution.inclination_note = NOTE_INCLINATION_FROM_K1.format(inclination=int(inclination))
        else:
            inclination = UNKNOWN_SPECTROSCOPIC_INCLINATION_DEG
            solution.inclination_note = NOTE_PARAMETER_UNKNOWN
        inclination_decimals = 0

    if inclination is not None and record.flip:
        inclination = -inclination

    ecliptic_inclination, ecliptic_node, quoted_periastron = transform_to_ecliptic(
        record.ra, record.dec, inclination, record.node, record.periastron_arg)

    # Which component the quoted argument of periastron belongs to
    periastron_primary = periastron_secondary = None
    if not record.periastron_owner:
        if has_epoch:
            periastron_secondary = quoted_periastron
            periastron_primary = (quoted_periastron + 180.0) % 360.0
        else:
            periastron_secondary = DEFAULT_SECONDARY_PERIASTRON_DEG
    elif record.periastron_owner == PERIASTRON_OWNER_PRIMARY:
        periastron_primary = quoted_periastron
        periastron_secondary = (quoted_periastron + 180.0) % 360.0
    elif record.periastron_owner == PERIASTRON_OWNER_SECONDARY:
        periastron_secondary = quoted_periastron
        periastron_primary = (quoted_periastron + 180.0) % 360.0
    else:
        logger.warning(f"Row {record.index}: unknown periastron owner '{record.periastron_owner}'")

    if inclination is None:
        solution.inclination_note = NOTE_PARAMETER_UNKNOWN
    if record.node is None:
        solution.node_note = NOTE_PARAMETER_UNKNOWN
    if record.periastron_arg is None:
        solution.periastron_note = NOTE_PARAMETER_UNKNOWN
    if periastron_secondary == DEFAULT_SECONDARY_PERIASTRON_DEG:
        solution.periastron_note = ''

    if record.epoch_is_primary_minimum:
        if not eccentricity:
            mean_anomaly = CIRCULAR_PRIMARY_MINIMUM_MEAN_ANOMALY_DEG
            solution.periastron_note = ''
        else:
            mean_anomaly = mean_anomaly_at_primary_minimum(record.periastron_arg, eccentricity)
        solution.epoch_note = NOTE_PRIMARY_MINIMUM

    # Output precision follows the inputs
    axis_sig_figs = DEFAULT_AXIS_SIG_FIGS
    if record.semimajor_axis is not None:
        axis_sig_figs = record.sig_figs.get('semimajor_axis', DEFAULT_AXIS_SIG_FIGS)
    angle_decimals = DEFAULT_ANGLE_DECIMALS if inclination_decimals is None else inclination_decimals
    if record.periastron_arg is not None:
        periastron_decimals = record.decimals.get('periastron_arg', DEFAULT_PERIASTRON_DECIMALS)
    elif has_epoch:
        periastron_decimals = angle_decimals
    else:
        periastron_decimals = DEFAULT_PERIASTRON_DECIMALS

    if axis_primary is not None:
        solution.axis_primary = format_sig_figs(axis_primary, axis_sig_figs)
    if axis_secondary is not None:
        solution.axis_secondary = format_sig_figs(axis_secondary, axis_sig_figs)
    if periastron_primary is not None:
        solution.periastron_primary = format_decimals(periastron_primary, periastron_decimals)
    if periastron_secondary is not None:
        solution.periastron_secondary = format_decimals(periastron_secondary, periastron_decimals)

    if has_epoch:
        if mean_anomaly is not None:
            solution.mean_anomaly = format_decimals(mean_anomaly, angle_decimals)
    else:
        solution.epoch = ''

    # Without an epoch, inclination or node there is nothing to orient
    if has_epoch or inclination is not None or record.node is not None:
        solution.inclination = format_decimals(ecliptic_inclination, angle_decimals)
        solution.ascending_node = format_decimals(ecliptic_node, angle_decimals)

    solution.fully_specified = record.node is not None and record.flip is not None
    return solution


def place_unbound_pair(record: PairRecord, mass_primary: Optional[float],
                       mass_secondary: Optional[float]) -> PairPlacement:
    """
    Positions of a pair without an orbit.

    With a separate secondary position the barycenter sits at the
    mass-weighted mean of the two; otherwise every object takes the row
    position.
    """
    if record.ra_b is None:
        return PairPlacement(record.ra, record.dec, record.ra, record.dec,
                             record.ra, record.dec, separate_positions=False)

    dec_secondary = record.dec_b if record.dec_b is not None else record.dec
    if _masses_known(mass_primary, mass_secondary) and record.ra is not None and record.dec is not None:
        weights = np.array([mass_primary, mass_secondary])
        ra_barycenter = float(np.average([record.ra, record.ra_b], weights=weights))
        dec_barycenter = float(np.average([record.dec, dec_secondary], weights=weights))
    else:
        logger.debug(f"Row {record.index}: unknown masses, barycenter placed on the primary")
        ra_barycenter, dec_barycenter = record.ra, record.dec

    return PairPlacement(ra_barycenter, dec_barycenter, record.ra, record.dec,
                         record.ra_b, dec_secondary, separate_positions=True)


def tidal_rotation_hours(period_years: Optional[float], period_text: str,
                         eccentricity: Optional[float]) -> Optional[str]:
    """
    Rotation period of a star assumed to be tidally locked to its orbit.

    Args:
        period_years: Orbital period in years
        period_text: Formatted orbital period, whose significant figures are kept
        eccentricity: Orbital eccentricity (None counts as circular)

    Returns:
        Rotation period in hours, or None when the orbit is not tight and circular
    """
    if not period_years or period_years >= TIDAL_LOCK_MAX_PERIOD_YEARS:
        return None
    if eccentricity and eccentricity >= TIDAL_LOCK_MAX_ECCENTRICITY:
        return None
    hours = period_years * DAYS_PER_JULIAN_YEAR * HOURS_PER_DAY
    return format_sig_figs(hours, count_sig_figs(period_text))
