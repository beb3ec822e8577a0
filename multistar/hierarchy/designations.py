"""
Component designations and the assignment of names to hierarchy levels.

A multiplicity code such as "AB", "Aa" or "AB-C" identifies the pair a
catalog row describes. Splitting the code gives the designations of its two
components ("AB" -> "A", "B"), and every name attached to the row is turned
into a barycenter name and two component names with the matching suffixes.

Names that only apply to part of a system are remembered in a
DesignationLedger so that later rows describing a sub-pair can give them
second-level suffixes ("Aa", "Ab").
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import (
    DESIGNATION_RANK,
    UNKNOWN_DESIGNATION_RANK,
    ROOT_MULTIPLICITY_CODE,
    PRIMARY_LIST_DESIGNATION_PREFIXES,
    TYCHO_CATALOG_FACTORS,
)
from ..data.records import PairRecord

log = logging.getLogger(__name__)

_TWO_UPPER = re.compile(r'^[A-Z][A-Z]$')
_UPPER_LOWER = re.compile(r'^[A-Z][a-z]$')
_AC_B = re.compile(r'^(A[C-Z])B')
_A_CD = re.compile(r'^A([C-Z][C-Z])')
_THREE_LETTERS = re.compile(r'^[A-Z]{3}$')
_CROSS_ID = re.compile(r'^(ADS |CCDM J)(\d+|\d+[-+]\d+)\s*([A-Za-z]+)$')
_ADS = re.compile(r'^(\d+)\s*(\S*)$')
_CCDM = re.compile(r'^(\d+[-+]\d+)([A-Za-z]*)$')
_TYCHO = re.compile(r'TYC (\d+)-(\d+)-(\d+)')
_HIPPARCOS = re.compile(r'HIP (\d+)')
_DOUBLE_HIPPARCOS = re.compile(r'(\d+)/(\d+)')
_COMPONENT_LETTER_SUFFIX = re.compile(r' (A|B|C)$')


def split_designation(designation: str, code: str = '',
                      next_code: Optional[str] = None) -> Tuple[str, str]:
    """
    Designations of the two components of a pair.

    Args:
        designation: Designation to split ("A", "AB", "Aa", "AB-C", ...)
        code: Multiplicity code of the row, used when the designation itself
            carries no hyphen
        next_code: Multiplicity code of the following row, used to resolve
            three-letter codes such as "ABC"

    Returns:
        (primary, secondary) designations, ("", "") when unknown

    Examples:
        >>> split_designation("A")
        ('Aa', 'Ab')
        >>> split_designation("AB-C")
        ('AB', 'C')
    """
    if len(designation) == 1:
        return designation + 'a', designation + 'b'

    if len(designation) == 2:
        if _TWO_UPPER.match(designation):
            return designation[0], designation[1]
        if _UPPER_LOWER.match(designation):
            return designation + '1', designation + '2'
        return '', ''

    match = _AC_B.match(designation)
    if match:
        return match.group(1), 'B'
    match = _A_CD.match(designation)
    if match:
        return 'A', match.group(1)

    for hyphenated in (designation, code):
        if hyphenated and '-' in hyphenated:
            primary, _, secondary = hyphenated.rpartition('-')
            if primary and secondary:
                return primary, secondary

    if _THREE_LETTERS.match(designation):
        if next_code == designation[:2]:
            return designation[:2], designation[2]
        if next_code == designation[1:]:
            return designation[0], designation[1:]
        log.warning(f"Ambiguous designation '{designation}' (next row: '{next_code}'); "
                    f"assuming {designation[:-1]}-{designation[-1]}")
        return designation[:-1], designation[-1]

    return '', ''


def canonical_code(code: str, next_code: Optional[str] = None) -> str:
    """
    Code used to rank a pair in the hierarchy.

    Three-letter codes are rewritten in their hyphenated form once the next
    row tells which pair they group ("ABC" followed by "AB" -> "AB-C").
    """
    if _THREE_LETTERS.match(code) and not _AC_B.match(code) and not _A_CD.match(code):
        primary, secondary = split_designation(code, code, next_code)
        return f"{primary}-{secondary}"
    return code


def designation_rank(code: str) -> int:
    """Output order of a designation within its system."""
    rank = DESIGNATION_RANK.get(code)
    if rank is None:
        log.warning(f"Unknown component designation '{code}'; placing it at the root of its system")
        return UNKNOWN_DESIGNATION_RANK
    return rank


def is_hyphenated(code: str) -> bool:
    return bool(re.match(r'^.+-.+$', code or ''))


def strip_components(names: Iterable[str]) -> List[str]:
    """
    Remove component letters from ADS and CCDM identifiers.

    Examples:
        >>> strip_components(["ADS 1234 AB", "CCDM J01234+5678C", "Sirius"])
        ['ADS 1234', 'CCDM J01234+5678', 'Sirius']
    """
    stripped = []
    for name in names:
        match = _CROSS_ID.match(name)
        stripped.append(match.group(1) + match.group(2) if match else name)
    return stripped


def get_sibling(parent_suffix: Optional[str], child_suffix: Optional[str]) -> Optional[str]:
    """
    Suffix of the other member of a pair, given the pair's and one member's.

    Examples:
        >>> get_sibling("AB-C", "AB")
        'C'
    """
    if not parent_suffix or not child_suffix:
        return None
    if child_suffix in parent_suffix:
        return parent_suffix.replace(child_suffix, '', 1).replace('-', '', 1)
    return parent_suffix


def tycho_catalog_number(match: 're.Match') -> str:
    """Celestia catalog number of a Tycho identifier TYC a-b-c."""
    a, b, c = (int(part) for part in match.groups())
    factor_a, factor_b, factor_c = TYCHO_CATALOG_FACTORS
    return str(c * factor_c + b * factor_b + a * factor_a)


class DesignationLedger:
    """Names first seen applying to only part of a system, with the code of that row."""

    def __init__(self):
        self._codes: Dict[str, str] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._codes

    def __len__(self) -> int:
        return len(self._codes)

    def record(self, name: str, code: str) -> None:
        self._codes[name] = code

    def deferred_code(self, name: str) -> Optional[str]:
        """Stored code of a partial name, None when absent or stored without a code."""
        return self._codes.get(name) or None


@dataclass
class ResolvedNames:
    """Names and catalog numbers for the barycenter and both components of one row."""
    barycenter: List[str] = field(default_factory=list)
    primary: List[str] = field(default_factory=list)
    secondary: List[str] = field(default_factory=list)
    hip_barycenter: str = ''
    hip_primary: str = ''
    hip_secondary: str = ''
    primary_code: str = ''
    secondary_code: str = ''

    @property
    def first_barycenter_name(self) -> str:
        return self.barycenter[0] if self.barycenter else ''


class DesignationResolver:
    """
    Assigns hierarchical suffixes to every name of a row.

    Names are handled in a fixed priority order: proper names, the residues
    of the component name lists, Bayer and Flamsteed designations, other
    names, ADS and CCDM identifiers, and finally HD/SAO designations.
    """

    def __init__(self, ledger: Optional[DesignationLedger] = None):
        self.ledger = ledger if ledger is not None else DesignationLedger()

    def resolve(self, record: PairRecord, system_names: Sequence[str], is_new_system: bool,
                next_record: Optional[PairRecord] = None, previous_hip: str = '') -> ResolvedNames:
        """
        Names of the barycenter and components described by a row.

        Args:
            record: The row being processed
            system_names: Names of the open system (after segmentation)
            is_new_system: Whether this row opened the system
            next_record: The following row, for three-letter codes
            previous_hip: Hipparcos field of the previous row

        Returns:
            ResolvedNames with the three name lists and catalog numbers
        """
        code = record.multiplicity
        next_code = next_record.multiplicity if next_record is not None else None
        primary, secondary = split_designation(code, code, next_code)
        resolved = ResolvedNames(primary_code=primary, secondary_code=secondary)

        primary_residues, primary_designations, hip_primary = self._sort_name_list(
            record.names_primary, secondary_list=False)
        secondary_residues, secondary_designations, hip_secondary = self._sort_name_list(
            record.names_secondary, secondary_list=True)

        for name in record.proper_names:
            self._classify(resolved, name, code, primary, secondary,
                           system_names, is_new_system, letter_suffix=False)
        resolved.primary.extend(primary_residues)
        resolved.secondary.extend(secondary_residues)
        for name in (record.bayer, record.flamsteed):
            if name:
                self._classify(resolved, name, code, primary, secondary,
                               system_names, is_new_system, letter_suffix=True)
        for name in record.other_names:
            self._classify(resolved, name, code, primary, secondary,
                           system_names, is_new_system, letter_suffix=False)

        self._add_cross_identifiers(resolved, record, primary, secondary)

        resolved.primary.extend(primary_designations)
        resolved.secondary.extend(secondary_designations)

        self._assign_hipparcos(resolved, record.hip, previous_hip, hip_primary, hip_secondary)
        return resolved

    def _classify(self, resolved: ResolvedNames, name: str, code: str, primary: str,
                  secondary: str, system_names: Sequence[str], is_new_system: bool,
                  letter_suffix: bool) -> None:
        if any(name in system_name for system_name in system_names):
            if (code == ROOT_MULTIPLICITY_CODE and is_new_system) or is_hyphenated(code):
                resolved.barycenter.append(name)
            else:
                resolved.barycenter.append(_suffixed(name, code))
            if letter_suffix and _COMPONENT_LETTER_SUFFIX.search(name):
                resolved.primary.append(name + 'a')
                resolved.secondary.append(name + 'b')
            else:
                resolved.primary.append(_suffixed(name, primary))
                resolved.secondary.append(_suffixed(name, secondary))
            return

        stored_code = self.ledger.deferred_code(name)
        if stored_code is not None:
            stored_primary, stored_secondary = split_designation(stored_code, stored_code)
            if code == stored_primary:
                level = 'A'
            elif code == stored_secondary:
                level = 'B'
            else:
                log.debug(f"Partial name '{name}' does not apply to pair '{code}'")
                return
            resolved.barycenter.append(f"{name} {level}")
            resolved.primary.append(f"{name} {level}a")
            resolved.secondary.append(f"{name} {level}b")
            return

        self.ledger.record(name, code)
        resolved.barycenter.append(name)
        resolved.primary.append(f"{name} A")
        resolved.secondary.append(f"{name} B")

    @staticmethod
    def _sort_name_list(names: Sequence[str], secondary_list: bool) -> Tuple[List[str], List[str], str]:
        """Split a component name list into residues, HD/SAO designations and a catalog number."""
        residues: List[str] = []
        designations: List[str] = []
        catalog_number = ''
        for name in names:
            if name.startswith(PRIMARY_LIST_DESIGNATION_PREFIXES):
                designations.append(name)
                continue
            hip_match = _HIPPARCOS.search(name) if secondary_list else None
            if hip_match:
                catalog_number = hip_match.group(1)
                continue
            tycho_match = _TYCHO.search(name)
            if tycho_match:
                catalog_number = tycho_catalog_number(tycho_match)
                continue
            residues.append(name)
        return residues, designations, catalog_number

    @staticmethod
    def _add_cross_identifiers(resolved: ResolvedNames, record: PairRecord,
                               primary: str, secondary: str) -> None:
        if record.ads:
            match = _ADS.match(record.ads)
            number = match.group(1) if match else record.ads
            if match and match.group(2):
                primary, secondary = split_designation(match.group(2), record.multiplicity)
            resolved.barycenter.append(f"ADS {record.ads}")
            resolved.primary.append(f"ADS {number} {primary}")
            resolved.secondary.append(f"ADS {number} {secondary}")

        if record.ccdm:
            match = _CCDM.match(record.ccdm)
            number = match.group(1) if match else record.ccdm
            if match and match.group(2):
                primary, secondary = split_designation(match.group(2), record.multiplicity)
            resolved.barycenter.append(f"CCDM J{record.ccdm}")
            resolved.primary.append(f"CCDM J{number}{primary}")
            resolved.secondary.append(f"CCDM J{number}{secondary}")

    @staticmethod
    def _assign_hipparcos(resolved: ResolvedNames, hip: str, previous_hip: str,
                          hip_primary: str, hip_secondary: str) -> None:
        hip_barycenter = ''
        if hip != previous_hip:
            hip_barycenter = hip

            double = _DOUBLE_HIPPARCOS.search(hip)
            if double:
                first, last_digits = double.group(1), double.group(2)
                hip_barycenter = ''
                hip_primary = first
                hip_secondary = first[:-len(last_digits)] + last_digits

            # An HD number only on the secondary means the HIP number belongs to the primary
            primary_has_hd = any('HD' in name for name in resolved.primary)
            secondary_has_hd = any('HD' in name for name in resolved.secondary)
            if not (hip_primary and hip_secondary) and not primary_has_hd and secondary_has_hd:
                hip_barycenter = ''
                hip_primary = hip

            if hip and hip_secondary and not hip_primary:
                hip_barycenter = ''
                hip_primary = hip

        resolved.hip_barycenter = hip_barycenter
        resolved.hip_primary = hip_primary
        resolved.hip_secondary = hip_secondary


def _suffixed(name: str, suffix: str) -> str:
    return f"{name} {suffix}" if suffix else name
