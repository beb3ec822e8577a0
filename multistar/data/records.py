"""
Typed representation of one row of the stellar-pair catalog.

The catalog is a fixed-layout, tab-delimited table where every row describes
one gravitationally associated pair. Row order carries meaning (it is the only
signal for reconstructing each system's hierarchy), so records keep their
index and are never reordered beyond a stable sort on it.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import astropy.units as u
from astropy.coordinates import Angle

from ..config import (
    CATALOG_COLUMNS,
    NAME_LIST_SEPARATOR,
    LOG_FLAG_VALUE,
    FLIP_NEGATE_VALUE,
    BARYCENTER_SPECTRAL_TYPE,
)
from ..utils.formatting import count_sig_figs, count_decimal_digits
from ..utils.io import safe_float, safe_int

log = logging.getLogger(__name__)

# Numeric columns whose source precision is kept for output formatting
NUMERIC_FIELDS = (
    'parallax', 'distance_pc', 'mag_a', 'mag_b',
    'mass_a', 'mass_b', 'radius_a', 'radius_b', 'lum_a', 'lum_b',
    'teff_a', 'teff_b', 'rotation_period_a', 'period', 'semimajor_axis',
    'eccentricity', 'inclination', 'node', 'periastron_arg', 'epoch', 'k1',
)


@dataclass
class PairRecord:
    """One catalog row: a pair of components and the orbit that binds them."""
    index: int
    hip: str = ''
    hd: str = ''
    ads: str = ''
    ccdm: str = ''
    proper_names: List[str] = field(default_factory=list)
    other_names: List[str] = field(default_factory=list)
    names_primary: List[str] = field(default_factory=list)
    names_secondary: List[str] = field(default_factory=list)
    bayer: str = ''
    flamsteed: str = ''
    multiplicity: str = ''

    # Positions in degrees
    ra: Optional[float] = None
    dec: Optional[float] = None
    ra_b: Optional[float] = None
    dec_b: Optional[float] = None

    # Distance
    parallax: Optional[float] = None
    distance_pc: Optional[float] = None

    # Photometry and physical parameters
    mag_a: Optional[float] = None
    mag_b: Optional[float] = None
    mag_type: str = ''
    sptype_a: str = ''
    sptype_b: str = ''
    mass_a: Optional[float] = None
    mass_b: Optional[float] = None
    radius_a: Optional[float] = None
    radius_b: Optional[float] = None
    lum_a: Optional[float] = None
    lum_b: Optional[float] = None
    lum_is_log: bool = False
    teff_a: Optional[float] = None
    teff_b: Optional[float] = None
    teff_is_log: bool = False
    rotation_period_a: Optional[float] = None

    # Orbital elements
    period: Optional[float] = None
    period_unit: str = ''
    semimajor_axis: Optional[float] = None
    axis_is_photocentric: bool = False
    axis_unit: str = ''
    eccentricity: Optional[float] = None
    inclination: Optional[float] = None
    node: Optional[float] = None
    periastron_arg: Optional[float] = None
    periastron_owner: str = ''
    epoch: Optional[float] = None
    epoch_is_primary_minimum: bool = False
    epoch_unit: str = ''
    flip: Optional[bool] = None
    k1: Optional[float] = None

    # Source text and precision of the numeric fields
    source_text: Dict[str, str] = field(default_factory=dict)
    sig_figs: Dict[str, int] = field(default_factory=dict)
    decimals: Dict[str, int] = field(default_factory=dict)

    @property
    def primary_is_barycenter(self) -> bool:
        return self.sptype_a == BARYCENTER_SPECTRAL_TYPE

    @property
    def secondary_is_barycenter(self) -> bool:
        return self.sptype_b == BARYCENTER_SPECTRAL_TYPE

    @property
    def candidate_names(self) -> List[str]:
        """All names that identify the system this row belongs to."""
        names = list(self.proper_names)
        if self.bayer:
            names.append(self.bayer)
        if self.flamsteed:
            names.append(self.flamsteed)
        names.extend(self.other_names)
        if self.ads:
            names.append(f"ADS {self.ads}")
        if self.ccdm:
            names.append(f"CCDM J{self.ccdm}")
        return names


def parse_sexagesimal(text: str, unit: u.Unit) -> Optional[float]:
    """
    Convert a space-separated sexagesimal string to decimal degrees.

    The sign is taken from the first character so that "-00 30 00" stays
    negative. Missing minute or second fields count as zero.

    Args:
        text: Value such as "12 34 56.7" or "+05 06 07"
        unit: astropy unit of the leading field (hourangle or deg)

    Returns:
        Angle in degrees, or None when the text is empty or malformed
    """
    if not text or not text.strip():
        return None
    text = text.strip()
    negative = text.startswith('-')
    parts = text.lstrip('+-').split()
    if not parts:
        return None
    parts = (parts + ['0', '0'])[:3]
    try:
        degrees = Angle(':'.join(parts), unit=unit).degree
    except (ValueError, TypeError):
        log.debug(f"Could not parse sexagesimal value '{text}'")
        return None
    return -degrees if negative else degrees


def split_name_list(text: str) -> List[str]:
    """Split a colon separated name list, dropping empty entries."""
    if not text:
        return []
    return [name.strip() for name in text.split(NAME_LIST_SEPARATOR) if name.strip()]


def parse_flip(text: str) -> Optional[bool]:
    """True to negate the inclination, False when handedness is known, None when unknown."""
    if not text:
        return None
    return text == FLIP_NEGATE_VALUE


def normalize_row(cells: Sequence[str]) -> PairRecord:
    """
    Parse one raw catalog row into a PairRecord.

    Never raises on malformed content: unparseable numeric cells become None
    and missing trailing columns are treated as empty.

    Args:
        cells: Cell strings of one data row, in column order

    Returns:
        Parsed PairRecord
    """
    def cell(name: str) -> str:
        position = CATALOG_COLUMNS[name]
        if position >= len(cells) or cells[position] is None:
            return ''
        return str(cells[position]).strip()

    index = safe_int(cell('index'))
    if index is None:
        log.warning(f"Row without a valid index: {cell('index')!r}; using 0")
        index = 0

    record = PairRecord(
        index=index,
        hip=cell('hip'),
        hd=cell('hd'),
        ads=cell('ads'),
        ccdm=cell('ccdm'),
        proper_names=split_name_list(cell('proper_names')),
        other_names=split_name_list(cell('other_names')),
        names_primary=split_name_list(cell('names_primary')),
        names_secondary=split_name_list(cell('names_secondary')),
        bayer=cell('bayer'),
        flamsteed=cell('flamsteed'),
        multiplicity=cell('multiplicity'),
        ra=parse_sexagesimal(cell('ra'), u.hourangle),
        dec=parse_sexagesimal(cell('dec'), u.deg),
        ra_b=parse_sexagesimal(cell('ra_b'), u.hourangle),
        dec_b=parse_sexagesimal(cell('dec_b'), u.deg),
        mag_type=cell('mag_type'),
        sptype_a=cell('sptype_a'),
        sptype_b=cell('sptype_b'),
        lum_is_log=cell('lum_is_log') == LOG_FLAG_VALUE,
        teff_is_log=cell('teff_is_log') == LOG_FLAG_VALUE,
        period_unit=cell('period_unit'),
        axis_is_photocentric=bool(cell('axis_is_photocentric')),
        axis_unit=cell('axis_unit'),
        periastron_owner=cell('periastron_owner'),
        epoch_is_primary_minimum=bool(cell('epoch_is_primary_minimum')),
        epoch_unit=cell('epoch_unit'),
        flip=parse_flip(cell('flip')),
    )

    for name in NUMERIC_FIELDS:
        text = cell(name)
        value = safe_float(text)
        setattr(record, name, value)
        if value is not None:
            record.source_text[name] = text
            record.sig_figs[name] = count_sig_figs(text)
            record.decimals[name] = count_decimal_digits(text)

    return record


def normalize_rows(rows: Sequence[Sequence[str]]) -> List[PairRecord]:
    """Normalize every row and order them by index, keeping file order for ties."""
    records = [normalize_row(cells) for cells in rows]
    return sorted(records, key=lambda record: record.index)
