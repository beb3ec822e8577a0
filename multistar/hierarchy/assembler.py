"""
Assembly of per-row results into the hierarchy of output objects.

Every row produces a barycenter and its two components. Objects are keyed by
the system they belong to and the rank of their designation, so a component
written by one row ("A" of an "AB" pair) becomes the barycenter of a later
row describing the "A" pair. When that happens the rows are merged: names
and catalog numbers are completed and the mass ratio of the sub-pair
replaces the "*" placeholder in the notes of the levels above.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

from ..config import (
    NOTE_MASS_RATIO,
    NOTE_MASS_RATIOS_APPROXIMATE,
    HYPHENATED_NAME_REWRITE,
    CROSS_CATALOG_PREFIXES,
    ROOT_MULTIPLICITY_CODE,
    UNKNOWN_DESIGNATION_RANK,
)
from ..data.records import PairRecord
from ..physics.estimation import ComponentEstimate
from ..physics.orbits import OrbitSolution, PairPlacement, tidal_rotation_hours
from ..utils.formatting import format_plain
from .designations import ResolvedNames, designation_rank, get_sibling, split_designation

log = logging.getLogger(__name__)

PLACEHOLDER = '*'
_RESOLVED_RATIO = re.compile(r'Mass ratio ([*(\d].*[*)\d])')
_ADS_SUFFIX = re.compile(r'ADS \d+ (.+)')
_CCDM_SUFFIX = re.compile(r'CCDM J\d+[+-]\d+([A-Z]*)')
_ADS_CHILD = re.compile(r'\d+ (.+)')
_CCDM_CHILD = re.compile(r'\d+[+-]\d+([A-Z]*)')
_BARE_ADS = re.compile(r'ADS \d+ $')
_BARE_CCDM = re.compile(r'CCDM J\d+[+-]\d+$')


@dataclass(frozen=True, order=True)
class ObjectKey:
    """Position of an object in the output: system first, then designation rank."""
    system_index: int
    rank: int
    # Set only for unknown designations, which all share one rank
    designation: str = ''


def object_key(system_index: int, code: str) -> ObjectKey:
    rank = designation_rank(code)
    return ObjectKey(system_index, rank, code if rank == UNKNOWN_DESIGNATION_RANK else '')


@dataclass
class CelestialObject:
    """A barycenter or star of the output catalog."""
    names: List[str]
    is_barycenter: bool
    multiplicity: str
    hip: str = ''
    parent: str = ''
    ra: Optional[float] = None
    dec: Optional[float] = None
    distance_ly: Optional[float] = None

    # Physical parameters (stars only)
    sptype: str = ''
    sptype_note: str = ''
    apparent_magnitude: Optional[float] = None
    apparent_magnitude_text: str = ''
    absolute_magnitude: Optional[float] = None
    magnitude_note: str = ''
    radius_km: Optional[float] = None
    mass: Optional[float] = None
    mass_note: str = ''

    # Orbit about the parent, already formatted
    axis_note: str = ''
    period_years: Optional[float] = None
    period: str = ''
    semimajor_axis: str = ''
    eccentricity: Optional[float] = None
    eccentricity_text: str = ''
    inclination: str = ''
    ascending_node: str = ''
    periastron_arg: str = ''
    mean_anomaly: str = ''
    epoch: str = ''
    inclination_note: str = ''
    node_note: str = ''
    periastron_note: str = ''
    epoch_note: str = ''
    fully_specified: bool = False

    # Rotation
    rotation_period_hours: str = ''
    rotation_period_days: str = ''
    tidally_locked: bool = False

    duplicate: bool = False

    @property
    def first_name(self) -> str:
        return self.names[0] if self.names else ''

    @property
    def has_orbit(self) -> bool:
        return bool(self.parent and self.period and self.semimajor_axis)


@dataclass
class PairOutcome:
    """Everything computed for one row, ready to be merged into the hierarchy."""
    system_index: int
    record: PairRecord
    code: str
    names: ResolvedNames
    primary: ComponentEstimate
    secondary: ComponentEstimate
    distance_ly: Optional[float] = None
    orbit: Optional[OrbitSolution] = None
    placement: Optional[PairPlacement] = None
    duplicate: bool = False


def mass_ratio_note(primary: ComponentEstimate, secondary: ComponentEstimate) -> str:
    """
    Note describing the mass ratio of a pair.

    Components that are themselves barycenters are written as "*" until the
    row describing them fills in their own ratio.
    """
    parts = []
    for component in (primary, secondary):
        if component.is_barycenter:
            parts.append(PLACEHOLDER)
        elif component.mass_is_estimated or component.mass is None:
            return NOTE_MASS_RATIOS_APPROXIMATE
        else:
            parts.append(component.mass_text or format_plain(component.mass))
    return NOTE_MASS_RATIO.format(primary=parts[0], secondary=parts[1])


def ratio_insert(note: str) -> str:
    """Text that replaces a placeholder in the level above: "(ratio)" or "*"."""
    match = _RESOLVED_RATIO.search(note or '')
    return f"({match.group(1)})" if match else PLACEHOLDER


class HierarchicalAssembler:
    """Persistent map of output objects, merged row by row."""

    def __init__(self):
        self.objects: Dict[ObjectKey, CelestialObject] = {}

    def __len__(self) -> int:
        return len(self.objects)

    def key(self, system_index: int, code: str) -> ObjectKey:
        return object_key(system_index, code)

    def get(self, system_index: int, code: str) -> Optional[CelestialObject]:
        return self.objects.get(self.key(system_index, code))

    def find_by_name(self, system_index: int, name: str) -> Optional[CelestialObject]:
        """Object of a system whose first name is the given one."""
        for key in sorted(self.objects):
            if key.system_index == system_index and self.objects[key].first_name == name:
                return self.objects[key]
        return None

    def ordered_objects(self) -> Iterator[Tuple[ObjectKey, CelestialObject]]:
        """Objects in output order, parents before children."""
        for key in sorted(self.objects):
            yield key, self.objects[key]

    def add(self, outcome: PairOutcome) -> None:
        """
        Merge one row into the hierarchy.

        Creates the row's barycenter (or merges into the object already at its
        rank), then writes the primary and secondary at the ranks of the
        code's halves.
        """
        note = mass_ratio_note(outcome.primary, outcome.secondary)
        separate_positions = outcome.placement is not None and outcome.placement.separate_positions
        barycenter_note = note if separate_positions else ''
        component_note = '' if separate_positions else note

        key = self.key(outcome.system_index, outcome.code)
        stored = self.objects.get(key)
        if stored is None:
            self.objects[key] = self._barycenter(outcome, barycenter_note)
        else:
            self._merge(outcome, stored, note)

        primary_code, secondary_code = outcome.names.primary_code, outcome.names.secondary_code
        if not primary_code or not secondary_code:
            # Components would land on the barycenter's own rank
            log.warning(f"Row {outcome.record.index}: cannot split designation "
                        f"'{outcome.code}'; components skipped")
            return
        self.objects[self.key(outcome.system_index, primary_code)] = self._component(
            outcome, outcome.primary, primary=True, axis_note=component_note)
        self.objects[self.key(outcome.system_index, secondary_code)] = self._component(
            outcome, outcome.secondary, primary=False, axis_note=component_note)

    def _barycenter(self, outcome: PairOutcome, axis_note: str) -> CelestialObject:
        record = outcome.record
        ra, dec = record.ra, record.dec
        if outcome.placement is not None:
            ra, dec = outcome.placement.ra_barycenter, outcome.placement.dec_barycenter
        return CelestialObject(
            names=list(outcome.names.barycenter),
            is_barycenter=True,
            multiplicity=outcome.code,
            hip=outcome.names.hip_barycenter,
            ra=ra,
            dec=dec,
            distance_ly=outcome.distance_ly,
            axis_note=axis_note,
            duplicate=outcome.duplicate,
        )

    def _component(self, outcome: PairOutcome, estimate: ComponentEstimate, primary: bool,
                   axis_note: str) -> CelestialObject:
        record = outcome.record
        names = outcome.names
        obj = CelestialObject(
            names=list(names.primary if primary else names.secondary),
            is_barycenter=estimate.is_barycenter,
            multiplicity=outcome.code,
            hip=names.hip_primary if primary else names.hip_secondary,
            parent=names.first_barycenter_name,
            ra=record.ra,
            dec=record.dec,
            distance_ly=outcome.distance_ly,
            sptype=estimate.sptype,
            sptype_note=estimate.sptype_note,
            apparent_magnitude=estimate.apparent_magnitude,
            apparent_magnitude_text=estimate.apparent_magnitude_text,
            absolute_magnitude=estimate.absolute_magnitude,
            magnitude_note=estimate.magnitude_note,
            radius_km=estimate.radius_km,
            mass=estimate.mass,
            mass_note=estimate.mass_note,
            axis_note=axis_note,
            duplicate=outcome.duplicate,
        )

        if outcome.placement is not None:
            placement = outcome.placement
            obj.ra = placement.ra_primary if primary else placement.ra_secondary
            obj.dec = placement.dec_primary if primary else placement.dec_secondary

        orbit = outcome.orbit
        if orbit is not None:
            obj.period_years = orbit.period_years
            obj.period = orbit.period
            obj.semimajor_axis = orbit.axis_primary if primary else orbit.axis_secondary
            obj.eccentricity = orbit.eccentricity
            obj.eccentricity_text = orbit.eccentricity_text
            obj.inclination = orbit.inclination
            obj.ascending_node = orbit.ascending_node
            obj.periastron_arg = orbit.periastron_primary if primary else orbit.periastron_secondary
            obj.mean_anomaly = orbit.mean_anomaly
            obj.epoch = orbit.epoch
            obj.inclination_note = orbit.inclination_note
            obj.node_note = orbit.node_note
            obj.periastron_note = orbit.periastron_note
            obj.epoch_note = orbit.epoch_note
            obj.fully_specified = orbit.fully_specified

        if not obj.is_barycenter:
            if primary and record.rotation_period_a is not None:
                obj.rotation_period_hours = format_plain(record.rotation_period_a * 24.0)
                obj.rotation_period_days = record.source_text.get('rotation_period_a', '')
            elif orbit is not None:
                hours = tidal_rotation_hours(orbit.period_years, orbit.period, orbit.eccentricity)
                if hours is not None:
                    obj.rotation_period_hours = hours
                    obj.tidally_locked = True
        return obj

    def _merge(self, outcome: PairOutcome, stored: CelestialObject, note: str) -> None:
        names = outcome.names
        system_index = outcome.system_index

        if names.hip_barycenter and (not names.hip_primary or names.hip_secondary):
            stored.hip = names.hip_barycenter

        if len(stored.names) <= len(names.barycenter):
            stored.names = list(names.barycenter)

        level_code = stored.multiplicity
        insert = ratio_insert(note)
        # A level's barycenter is also a component of the level above; fill it once
        updated: Set[int] = set()
        self._insert_ratio(system_index, level_code, insert, updated)

        self._fill_cross_catalog_siblings(outcome, level_code)

        if outcome.code == 'A' and level_code == ROOT_MULTIPLICITY_CODE:
            self._separate_colliding_barycenter(outcome, level_code)

        # Propagate the ratio up to the system root
        visited = {level_code}
        level = self.get(system_index, level_code)
        while level is not None and level.parent:
            ancestor = self.find_by_name(system_index, level.parent)
            if ancestor is None or ancestor.multiplicity in visited:
                break
            level_code = ancestor.multiplicity
            visited.add(level_code)
            self._insert_ratio(system_index, level_code, insert, updated)
            level = self.get(system_index, level_code)

    def _level_objects(self, system_index: int, level_code: str) -> List[CelestialObject]:
        primary_code, secondary_code = split_designation(level_code, level_code)
        objects = []
        for code in (level_code, primary_code, secondary_code):
            obj = self.objects.get(object_key(system_index, code))
            if obj is not None and all(obj is not seen for seen in objects):
                objects.append(obj)
        return objects

    def _insert_ratio(self, system_index: int, level_code: str, insert: str, updated: Set[int]) -> None:
        for obj in self._level_objects(system_index, level_code):
            if id(obj) in updated:
                continue
            updated.add(id(obj))
            obj.axis_note = obj.axis_note.replace(PLACEHOLDER, insert, 1)

    def _fill_cross_catalog_siblings(self, outcome: PairOutcome, level_code: str) -> None:
        """Complete bare "ADS n " and "CCDM Jn" component names from the sub-pair's suffix."""
        record = outcome.record
        system_index = outcome.system_index
        ads_match = _ADS_CHILD.search(record.ads)
        ccdm_match = _CCDM_CHILD.search(record.ccdm)
        ads_child = ads_match.group(1) if ads_match else None
        ccdm_child = ccdm_match.group(1) if ccdm_match else None

        level = self.get(system_index, level_code)
        if level is None:
            return
        ads_parent = ccdm_parent = None
        for name in level.names:
            match = _ADS_SUFFIX.search(name)
            if match:
                ads_parent = match.group(1)
                continue
            match = _CCDM_SUFFIX.search(name)
            if match:
                ccdm_parent = match.group(1)

        ads_sibling = get_sibling(ads_parent, ads_child)
        ccdm_sibling = get_sibling(ccdm_parent, ccdm_child)
        primary_code, secondary_code = split_designation(level_code, level_code)
        for code in (primary_code, secondary_code):
            obj = self.get(system_index, code)
            if obj is None:
                continue
            for position, name in enumerate(obj.names):
                if ads_sibling and _BARE_ADS.search(name):
                    obj.names[position] = name + ads_sibling
                elif ccdm_sibling and _BARE_CCDM.search(name):
                    obj.names[position] = name + ccdm_sibling

    def _separate_colliding_barycenter(self, outcome: PairOutcome, level_code: str) -> None:
        """
        Rename an "AB" barycenter to "A-B" when a star of the "A" pair would be
        called "... Ab", which Celestia cannot tell apart from "... AB".
        """
        system_index = outcome.system_index
        primary_code, secondary_code = split_designation(level_code, level_code)
        primary = self.get(system_index, primary_code)
        if primary is None or not primary.parent:
            return
        if (outcome.names.first_barycenter_name + 'b').lower() != primary.parent.lower():
            return

        old, new = HYPHENATED_NAME_REWRITE
        renamed_parent = primary.parent.replace(old, new, 1)

        barycenter = self.get(system_index, level_code)
        if barycenter is not None:
            # The referenced name is renamed even when it is a catalog identifier
            barycenter.names = [
                name.replace(old, new, 1)
                if name == primary.parent or not name.startswith(CROSS_CATALOG_PREFIXES) else name
                for name in barycenter.names
            ]

        log.debug(f"Renaming barycenter '{primary.parent}' to '{renamed_parent}'")
        for code in (primary_code, secondary_code):
            child = self.get(system_index, code)
            if child is not None:
                child.parent = renamed_parent
