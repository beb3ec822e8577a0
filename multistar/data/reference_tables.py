"""
Static stellar reference tables and nearest-match lookup services.

Effective temperatures, main-sequence masses and absolute magnitudes per
spectral type follow E. Mamajek, "A Modern Mean Dwarf Stellar Color and
Effective Temperature Sequence"
(http://www.pas.rochester.edu/~emamajek/EEM_dwarf_UBVIJHK_colors_Teff.txt).
Masses of evolved stars (and of main-sequence O5-O6 stars) come from
Straizys & Kuriliene (1981), Ap&SS 80, 353, Table 6, where they are given
as log10(M / M_sun).
"""

import re
import logging
from typing import Dict, Optional

import numpy as np

from ..exceptions import ReferenceTableError

log = logging.getLogger(__name__)

# Spectral type -> effective temperature (K), main sequence
SPECTRAL_TYPE_TEFF = {
    'O5V': 41500, 'O6V': 39000, 'O7V': 36500, 'O8V': 34500, 'O9V': 32500, 'B0V': 31500,
    'B1V': 26000, 'B2V': 20600, 'B3V': 17000, 'B4V': 16700, 'B5V': 15700, 'B6V': 14500,
    'B7V': 14000, 'B8V': 12500, 'B9V': 10700, 'A0V': 9700, 'A1V': 9200, 'A2V': 8840,
    'A3V': 8550, 'A4V': 8270, 'A5V': 8080, 'A6V': 8000, 'A7V': 7800, 'A8V': 7500,
    'A9V': 7440, 'F0V': 7220, 'F1V': 7030, 'F2V': 6810, 'F3V': 6720, 'F4V': 6640,
    'F5V': 6510, 'F6V': 6340, 'F7V': 6240, 'F8V': 6170, 'F9V': 6060, 'G0V': 5920,
    'G1V': 5880, 'G2V': 5770, 'G3V': 5720, 'G4V': 5680, 'G5V': 5660, 'G6V': 5590,
    'G7V': 5530, 'G8V': 5490, 'G9V': 5340, 'K0V': 5280, 'K1V': 5170, 'K2V': 5040,
    'K3V': 4830, 'K4V': 4600, 'K5V': 4410, 'K6V': 4230, 'K7V': 4070, 'K8V': 4000,
    'K9V': 3940, 'M0V': 3870, 'M1V': 3700, 'M2V': 3550, 'M3V': 3410, 'M4V': 3200,
    'M5V': 3030, 'M6V': 2850, 'M7V': 2650, 'M8V': 2500, 'M9V': 2400,
}

# Spectral type -> mass (solar masses), all luminosity classes
SPECTRAL_TYPE_MASS = {
    'O5V': 10 ** 1.81, 'O5IV': 10 ** 1.85, 'O5III': 10 ** 1.89, 'O5II': 10 ** 1.90, 'O5Ib': 10 ** 1.92, 'O5Iab': 10 ** 1.99,
    'O6V': 10 ** 1.70, 'O6IV': 10 ** 1.76, 'O6III': 10 ** 1.80, 'O6II': 10 ** 1.80, 'O6Ib': 10 ** 1.87, 'O6Iab': 10 ** 1.91, 'O6Ia': 10 ** 2.00,
    'O7V': 28, 'O7IV': 10 ** 1.65, 'O7III': 10 ** 1.68, 'O7II': 10 ** 1.71, 'O7Ib': 10 ** 1.76, 'O7Iab': 10 ** 1.83, 'O7Ia': 10 ** 1.92,
    'O8V': 22.9, 'O8IV': 10 ** 1.54, 'O8III': 10 ** 1.60, 'O8II': 10 ** 1.65, 'O8Ib': 10 ** 1.72, 'O8Iab': 10 ** 1.76, 'O8Ia': 10 ** 1.90,
    'O9V': 19.7, 'O9IV': 10 ** 1.45, 'O9III': 10 ** 1.49, 'O9II': 10 ** 1.58, 'O9Ib': 10 ** 1.66, 'O9Iab': 10 ** 1.72, 'O9Ia': 10 ** 1.83,
    'B0V': 17.5, 'B0IV': 10 ** 1.34, 'B0III': 10 ** 1.40, 'B0II': 10 ** 1.40, 'B0Ib': 10 ** 1.48, 'B0Iab': 10 ** 1.56, 'B0Ia': 10 ** 1.70,
    'B1V': 11, 'B1IV': 10 ** 1.18, 'B1III': 10 ** 1.23, 'B1II': 10 ** 1.28, 'B1Ib': 10 ** 1.38, 'B1Iab': 10 ** 1.46, 'B1Ia': 10 ** 1.64,
    'B2V': 7.3, 'B2IV': 10 ** 1.04, 'B2III': 10 ** 1.08, 'B2II': 10 ** 1.18, 'B2Ib': 10 ** 1.30, 'B2Iab': 10 ** 1.38, 'B2Ia': 10 ** 1.54,
    'B3V': 5.4, 'B3IV': 10 ** 0.88, 'B3III': 10 ** 0.94, 'B3II': 10 ** 1.11, 'B3Ib': 10 ** 1.23, 'B3Iab': 10 ** 1.32, 'B3Ia': 10 ** 1.45,
    'B4V': 5.0,
    'B5V': 4.6, 'B5IV': 10 ** 0.72, 'B5III': 10 ** 0.74, 'B5II': 10 ** 1.00, 'B5Ib': 10 ** 1.18, 'B5Iab': 10 ** 1.26, 'B5Ia': 10 ** 1.40,
    'B6V': 4.0, 'B6IV': 10 ** 0.64, 'B6III': 10 ** 0.68, 'B6II': 10 ** 0.94, 'B6Ib': 10 ** 1.15, 'B6Iab': 10 ** 1.26, 'B6Ia': 10 ** 1.38,
    'B7V': 3.9, 'B7IV': 10 ** 0.57, 'B7III': 10 ** 0.60, 'B7II': 10 ** 0.91, 'B7Ib': 10 ** 1.11, 'B7Iab': 10 ** 1.23, 'B7Ia': 10 ** 1.36,
    'B8V': 3.4, 'B8IV': 10 ** 0.49, 'B8III': 10 ** 0.52, 'B8II': 10 ** 0.88, 'B8Ib': 10 ** 1.08, 'B8Iab': 10 ** 1.20, 'B8Ia': 10 ** 1.34,
    'B9V': 2.8, 'B9IV': 10 ** 0.45, 'B9III': 10 ** 0.49, 'B9II': 10 ** 0.85, 'B9Ib': 10 ** 1.04, 'B9Iab': 10 ** 1.20, 'B9Ia': 10 ** 1.32,
    'A0V': 2.3, 'A0IV': 10 ** 0.39, 'A0III': 10 ** 0.43, 'A0II': 10 ** 0.81, 'A0Ib': 10 ** 1.04, 'A0Iab': 10 ** 1.18, 'A0Ia': 10 ** 1.30,
    'A1V': 2.15, 'A1IV': 10 ** 0.36, 'A1III': 10 ** 0.41, 'A1II': 10 ** 0.78, 'A1Ib': 10 ** 1.00, 'A1Iab': 10 ** 1.18, 'A1Ia': 10 ** 1.30,
    'A2V': 2.05, 'A2IV': 10 ** 0.34, 'A2III': 10 ** 0.39, 'A2II': 10 ** 0.75, 'A2Ib': 10 ** 0.98, 'A2Iab': 10 ** 1.15, 'A2Ia': 10 ** 1.30,
    'A3V': 2.00, 'A3IV': 10 ** 0.32, 'A3III': 10 ** 0.36, 'A3II': 10 ** 0.75, 'A3Ib': 10 ** 0.97, 'A3Iab': 10 ** 1.11, 'A3Ia': 10 ** 1.30,
    'A4V': 1.90,
    'A5V': 1.85, 'A5IV': 10 ** 0.29, 'A5III': 10 ** 0.33, 'A5II': 10 ** 0.74, 'A5Ib': 10 ** 0.95, 'A5Iab': 10 ** 1.11, 'A5Ia': 10 ** 1.30,
    'A6V': 1.83,
    'A7V': 1.76, 'A7IV': 10 ** 0.26, 'A7III': 10 ** 0.30, 'A7II': 10 ** 0.73, 'A7Ib': 10 ** 0.94, 'A7Iab': 10 ** 1.15, 'A7Ia': 10 ** 1.32,
    'A8V': 1.76,
    'A9V': 1.67,
    'F0V': 1.59, 'F0IV': 10 ** 0.20, 'F0III': 10 ** 0.23, 'F0II': 10 ** 0.72, 'F0Ib': 10 ** 0.93, 'F0Iab': 10 ** 1.20, 'F0Ia': 10 ** 1.38,
    'F1V': 1.50,
    'F2V': 1.44, 'F2IV': 10 ** 0.16, 'F2III': 10 ** 0.20, 'F2II': 10 ** 0.72, 'F2Ib': 10 ** 0.93, 'F2Iab': 10 ** 1.20, 'F2Ia': 10 ** 1.40,
    'F3V': 1.43,
    'F4V': 1.39,
    'F5V': 1.33, 'F5IV': 10 ** 0.13, 'F5III': 10 ** 0.18, 'F5II': 10 ** 0.72, 'F5Ib': 10 ** 0.93, 'F5Iab': 10 ** 1.26, 'F5Ia': 10 ** 1.40,
    'F6V': 1.25,
    'F7V': 1.21,
    'F8V': 1.18, 'F8IV': 10 ** 0.11, 'F8II': 10 ** 0.72, 'F8Ib': 10 ** 0.93, 'F8Iab': 10 ** 1.28, 'F8Ia': 10 ** 1.41,
    'F9V': 1.14,
    'G0V': 1.08, 'G0IV': 10 ** 0.10, 'G0II': 10 ** 0.72, 'G0Ib': 10 ** 0.93, 'G0Iab': 10 ** 1.30, 'G0Ia': 10 ** 1.43,
    'G1V': 1.07,
    'G2V': 1.02, 'G2IV': 10 ** 0.10, 'G2III': 10 ** 0.33, 'G2II': 10 ** 0.72, 'G2Ib': 10 ** 0.93, 'G2Iab': 10 ** 1.30, 'G2Ia': 10 ** 1.45,
    'G3V': 1.00,
    'G4V': 0.99,
    'G5V': 0.98, 'G5IV': 10 ** 0.08, 'G5III': 10 ** 0.39, 'G5II': 10 ** 0.73, 'G5Ib': 10 ** 0.94, 'G5Iab': 10 ** 1.32, 'G5Ia': 10 ** 1.46,
    'G6V': 0.97,
    'G7V': 0.96,
    'G8V': 0.94, 'G8IV': 10 ** 0.08, 'G8III': 10 ** 0.42, 'G8II': 10 ** 0.76, 'G8Ib': 10 ** 0.94, 'G8Iab': 10 ** 1.32, 'G8Ia': 10 ** 1.46,
    'G9V': 0.90,
    'K0V': 0.87, 'K0IV': 10 ** 0.11, 'K0III': 10 ** 0.46, 'K0II': 10 ** 0.78, 'K0Ib': 10 ** 0.96, 'K0Iab': 10 ** 1.30, 'K0Ia': 10 ** 1.45,
    'K1V': 0.85, 'K1IV': 10 ** 0.13, 'K1III': 10 ** 0.46, 'K1II': 10 ** 0.78, 'K1Ib': 10 ** 0.96, 'K1Iab': 10 ** 1.30, 'K1Ia': 10 ** 1.45,
    'K2V': 0.78, 'K2III': 10 ** 0.45, 'K2II': 10 ** 0.79, 'K2Ib': 10 ** 0.98, 'K2Iab': 10 ** 1.28, 'K2Ia': 10 ** 1.43,
    'K3V': 0.75, 'K3III': 10 ** 0.38, 'K3II': 10 ** 0.80, 'K3Ib': 10 ** 1.00, 'K3Iab': 10 ** 1.30, 'K3Ia': 10 ** 1.43,
    'K4V': 0.72, 'K4III': 10 ** 0.36,
    'K5V': 0.68, 'K5III': 10 ** 0.37, 'K5II': 10 ** 0.83, 'K5Ib': 10 ** 1.08, 'K5Iab': 10 ** 1.30, 'K5Ia': 10 ** 1.45,
    'K6V': 0.65,
    'K7V': 0.63,
    'K8V': 0.59,
    'K9V': 0.56,
    'M0V': 0.55, 'M0III': 10 ** 0.48, 'M0II': 10 ** 0.83, 'M0Ib': 10 ** 1.15, 'M0Iab': 10 ** 1.32, 'M0Ia': 10 ** 1.46,
    'M1V': 0.49, 'M1III': 10 ** 0.54, 'M1II': 10 ** 0.83, 'M1Ib': 10 ** 1.18, 'M1Iab': 10 ** 1.34, 'M1Ia': 10 ** 1.48,
    'M2V': 0.44, 'M2III': 10 ** 0.54, 'M2II': 10 ** 0.81, 'M2Ib': 10 ** 1.18, 'M2Iab': 10 ** 1.36, 'M2Ia': 10 ** 1.50,
    'M3V': 0.36, 'M3III': 10 ** 0.52, 'M3II': 10 ** 0.84, 'M3Ib': 10 ** 1.20, 'M3Iab': 10 ** 1.38, 'M3Ia': 10 ** 1.56,
    'M4V': 0.22, 'M4III': 10 ** 0.51,
    'M5V': 0.16, 'M5III': 10 ** 0.41,
    'M6V': 0.10, 'M6III': 10 ** 0.40,
    'M7V': 0.090,
    'M8V': 0.082,
    'M9V': 0.079,
}

# Spectral type -> absolute V magnitude, main sequence
SPECTRAL_TYPE_ABSMAG = {
    'O3V': -5.7, 'O4V': -5.5, 'O5V': -5.4, 'O6V': -5.1, 'O7V': -4.8, 'O8V': -4.5,
    'O9V': -4.2, 'B0V': -4.0, 'B1V': -3.1, 'B2V': -1.7, 'B3V': -1.1, 'B4V': -1.0,
    'B5V': -0.9, 'B6V': -0.5, 'B7V': -0.4, 'B8V': -0.2, 'B9V': 0.7, 'A0V': 1.11,
    'A1V': 1.34, 'A2V': 1.48, 'A3V': 1.55, 'A4V': 1.76, 'A5V': 1.84, 'A6V': 1.89,
    'A7V': 2.07, 'A8V': 2.29, 'A9V': 2.30, 'F0V': 2.51, 'F1V': 2.79, 'F2V': 2.99,
    'F3V': 3.08, 'F4V': 3.23, 'F5V': 3.40, 'F6V': 3.70, 'F7V': 3.87, 'F8V': 4.01,
    'F9V': 4.15, 'G0V': 4.45, 'G1V': 4.50, 'G2V': 4.79, 'G3V': 4.86, 'G4V': 4.94,
    'G5V': 4.98, 'G6V': 5.13, 'G7V': 5.18, 'G8V': 5.32, 'G9V': 5.55, 'K0V': 5.76,
    'K1V': 5.89, 'K2V': 6.19, 'K3V': 6.57, 'K4V': 6.98, 'K5V': 7.36, 'K6V': 7.80,
    'K7V': 8.15, 'K8V': 8.47, 'K9V': 8.69, 'M0V': 8.91, 'M1V': 9.69, 'M2V': 10.30,
    'M3V': 11.14, 'M4V': 12.80, 'M5V': 14.30, 'M6V': 16.62, 'M7V': 17.81, 'M8V': 18.84,
    'M9V': 19.36,
}

MAIN_SEQUENCE_KEY_PATTERN = re.compile(r'\dV')
MASS_SPECTRAL_TYPE_PATTERN = re.compile(r'([OBAFGKM])(\d)+[/.-]?\d?([-/IabV*]+)')
ABSMAG_SPECTRAL_TYPE_PATTERN = re.compile(r'([OBAFGKM])(\d)+[/.-]?\d?([-V*]+)')
TABULATED_LUMINOSITY_CLASSES = ('V', 'IV', 'III', 'II', 'Ib', 'Iab', 'Ia')
SUPERGIANT_CLASSES = ('II', 'Ib', 'Iab', 'Ia')


class LookupTable:
    """A spectral-type keyed table searchable by nearest value."""

    def __init__(self, name: str, entries: Dict[str, float]):
        if not entries:
            raise ReferenceTableError(f"Reference table '{name}' is empty")
        try:
            values = np.array([float(value) for value in entries.values()], dtype=float)
        except (TypeError, ValueError) as e:
            raise ReferenceTableError(f"Reference table '{name}' has non-numeric values: {e}")
        if not np.all(np.isfinite(values)):
            raise ReferenceTableError(f"Reference table '{name}' has non-finite values")

        self.name = name
        self.entries = dict(entries)
        self.keys = np.array(list(entries.keys()), dtype=object)
        self.values = values

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: str) -> Optional[float]:
        return self.entries.get(key)

    def nearest(self, value: float, mask: Optional[np.ndarray] = None) -> Optional[str]:
        """
        Key whose value is closest to the given one.

        Ties go to the entry listed first in the table.

        Args:
            value: Value to match
            mask: Optional boolean array restricting the candidate entries

        Returns:
            Matching spectral type, or None if no entry is eligible
        """
        differences = np.abs(self.values - value)
        if mask is not None:
            if not mask.any():
                return None
            differences = np.where(mask, differences, np.inf)
        return str(self.keys[int(np.argmin(differences))])


class ReferenceTables:
    """
    Lookup services over the temperature, mass and absolute magnitude tables.

    Tables can be replaced for testing; by default the module-level tables
    are used.
    """

    def __init__(self,
                 teff_table: Optional[Dict[str, float]] = None,
                 mass_table: Optional[Dict[str, float]] = None,
                 absmag_table: Optional[Dict[str, float]] = None):
        self.teff = LookupTable('teff', SPECTRAL_TYPE_TEFF if teff_table is None else teff_table)
        self.mass = LookupTable('mass', SPECTRAL_TYPE_MASS if mass_table is None else mass_table)
        self.absmag = LookupTable('absmag', SPECTRAL_TYPE_ABSMAG if absmag_table is None else absmag_table)
        self._main_sequence_mask = np.array(
            [bool(MAIN_SEQUENCE_KEY_PATTERN.search(key)) for key in self.mass.keys]
        )
        log.debug(f"Reference tables ready: {len(self.teff)} temperatures, "
                  f"{len(self.mass)} masses, {len(self.absmag)} magnitudes")

    def temperature_to_sptype(self, teff: float) -> Optional[str]:
        return self.teff.nearest(teff)

    def mass_to_sptype(self, mass: float) -> Optional[str]:
        """Nearest main-sequence spectral type for a mass."""
        return self.mass.nearest(mass, mask=self._main_sequence_mask)

    def absmag_to_sptype(self, absmag: float) -> Optional[str]:
        return self.absmag.nearest(absmag)

    def sptype_to_absmag(self, sptype: str) -> Optional[float]:
        """
        Absolute magnitude of a main-sequence spectral type with a subclass.

        Only the class letter, the first subclass digit and the first
        luminosity character are used ("G2.5V" -> "G2V").
        """
        match = ABSMAG_SPECTRAL_TYPE_PATTERN.search(sptype or '')
        if not match:
            return None
        key = match.group(1) + match.group(2) + match.group(3)[0]
        return self.absmag.get(key)

    def sptype_to_mass(self, sptype: str) -> Optional[float]:
        """
        Mass for a full spectral type, any luminosity class.

        The luminosity class is normalized to one of the tabulated classes
        and subclasses missing from the evolved-star table are moved to the
        nearest tabulated one.

        Args:
            sptype: Spectral type such as "K0III", "G2V" or "B8IV-V"

        Returns:
            Mass in solar masses, or None if the type cannot be matched
        """
        match = MASS_SPECTRAL_TYPE_PATTERN.search(sptype or '')
        if not match:
            return None
        spectral_class, subclass, luminosity = match.group(1), int(match.group(2)), match.group(3)

        luminosity = normalize_luminosity_class(luminosity)
        if luminosity is None:
            return None

        subclass = round_to_tabulated_subclass(spectral_class, subclass, luminosity)
        return self.mass.get(f"{spectral_class}{subclass}{luminosity}")


def normalize_luminosity_class(luminosity: str) -> Optional[str]:
    """Map a luminosity class string onto the classes of the mass table."""
    if luminosity in TABULATED_LUMINOSITY_CLASSES:
        return luminosity
    if 'I' not in luminosity and 'V' not in luminosity:
        return None
    if luminosity.startswith('V') or luminosity == 'IV-V':
        return 'V'
    if 'V' in luminosity:
        return 'IV'
    if 'III' in luminosity:
        return 'III'
    if 'II' in luminosity:
        return 'II'
    if 'Ib' in luminosity:
        return 'Ib'
    if 'Iab' in luminosity or luminosity == 'I':
        return 'Iab'
    if 'Ia' in luminosity:
        return 'Ia'
    return luminosity


def round_to_tabulated_subclass(spectral_class: str, subclass: int, luminosity: str) -> int:
    """Nearest subclass present in the evolved-star mass table."""
    if luminosity == 'V':
        return subclass

    if spectral_class == 'O' and subclass < 5:
        subclass = 5
    elif spectral_class in ('B', 'A') and subclass == 4:
        subclass = 5
    elif spectral_class == 'A' and subclass > 5:
        subclass = 7
    elif spectral_class in ('F', 'G'):
        if subclass in (1, 3):
            subclass = 2
        elif subclass in (4, 6):
            subclass = 5
        elif subclass > 6:
            subclass = 8
    elif spectral_class == 'K' and subclass > 5:
        subclass = 5
    elif spectral_class == 'M' and subclass > 6:
        subclass = 6

    if luminosity == 'IV':
        # M-type subgiants are not tabulated and are left unmatched
        if spectral_class == 'K' and subclass > 1:
            subclass = 1
    elif luminosity == 'III':
        if spectral_class == 'F' and subclass == 8:
            subclass = 5
        elif spectral_class == 'G' and subclass == 0:
            subclass = 2
    elif luminosity in SUPERGIANT_CLASSES:
        if spectral_class == 'O' and subclass == 5 and luminosity == 'Ia':
            subclass = 6
        elif spectral_class == 'K' and subclass == 4:
            subclass = 5
        elif spectral_class == 'M' and subclass > 3:
            subclass = 3

    return subclass
