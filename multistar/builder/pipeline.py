"""
Catalog conversion pipeline.

CatalogPipeline owns all cross-row state of a conversion (designation ledger,
open system, assembled objects, last known distance, previous Hipparcos
field) and drives the rows through segmentation, name resolution, parameter
estimation and orbit solution before merging them into the hierarchy.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from ..config import LY_PER_PARSEC
from ..data.records import PairRecord, normalize_rows
from ..data.reference_tables import ReferenceTables
from ..data.registry import BarycenterRegistry
from ..exceptions import ConversionProcessError, MultistarError
from ..hierarchy.assembler import HierarchicalAssembler, PairOutcome
from ..hierarchy.designations import DesignationLedger, DesignationResolver, canonical_code
from ..hierarchy.segmenter import SegmentedRow, SystemSegmenter
from ..physics.estimation import ParameterEstimator
from ..physics.orbits import place_unbound_pair, solve_orbit
from ..utils.io import PathLike, load_catalog_table, table_to_rows, write_text_file
from .stc_writer import render_stc

log = logging.getLogger(__name__)

STATS_KEYS = {
    'ROWS': 'rows_processed',
    'SYSTEMS': 'systems_added',
    'DUPLICATES': 'systems_replaced',
    'OBJECTS': 'objects',
    'STARS': 'stars_added',
}


def row_distance_ly(record: PairRecord) -> Optional[float]:
    """Distance of a row in light years, from its distance column or else its parallax."""
    if record.distance_pc:
        return record.distance_pc * LY_PER_PARSEC
    if record.parallax:
        return LY_PER_PARSEC * (1000.0 / record.parallax)
    return None


class CatalogPipeline:
    """
    Converts an ordered table of stellar pairs into a Celestia star catalog.

    The pipeline is single pass and deterministic: rows are processed in
    ascending index order and the same input always gives the same output.
    """

    def __init__(self, registry: Optional[BarycenterRegistry] = None,
                 tables: Optional[ReferenceTables] = None):
        """
        Initialize the pipeline.

        Args:
            registry: Barycenters already defined in another catalog
            tables: Stellar reference tables for parameter estimation
        """
        self.registry = registry if registry is not None else BarycenterRegistry()
        self.ledger = DesignationLedger()
        self.segmenter = SystemSegmenter()
        self.resolver = DesignationResolver(self.ledger)
        self.estimator = ParameterEstimator(tables)
        self.assembler = HierarchicalAssembler()
        self.last_distance_ly: Optional[float] = None
        self.previous_hip = ''
        self._stats = {key: 0 for key in STATS_KEYS.values()}

    def process_row(self, row: SegmentedRow) -> PairOutcome:
        """Resolve, estimate and place one segmented row, then merge it into the hierarchy."""
        record = row.record

        # Rows without a distance inherit the previous row's
        distance_ly = row_distance_ly(record)
        if distance_ly is not None:
            self.last_distance_ly = distance_ly
        distance_ly = self.last_distance_ly

        names = self.resolver.resolve(record, row.system_names, row.is_new_system,
                                      row.next_record, self.previous_hip)
        primary, secondary = self.estimator.estimate_pair(record, distance_ly)

        orbit = solve_orbit(record, primary.mass, secondary.mass, distance_ly)
        placement = None
        if orbit is None:
            placement = place_unbound_pair(record, primary.mass, secondary.mass)

        next_code = row.next_record.multiplicity if row.next_record is not None else None
        duplicate = self.registry.is_duplicate(record.hip, record.multiplicity)
        outcome = PairOutcome(
            system_index=row.system_index,
            record=record,
            code=canonical_code(record.multiplicity, next_code),
            names=names,
            primary=primary,
            secondary=secondary,
            distance_ly=distance_ly,
            orbit=orbit,
            placement=placement,
            duplicate=duplicate,
        )
        self.assembler.add(outcome)

        self.previous_hip = record.hip
        self._stats[STATS_KEYS['ROWS']] += 1
        if row.is_new_system:
            if duplicate:
                self._stats[STATS_KEYS['DUPLICATES']] += 1
            else:
                self._stats[STATS_KEYS['SYSTEMS']] += 1
        return outcome

    def process_records(self, records: Iterable[PairRecord]) -> None:
        for row in self.segmenter.segment(list(records)):
            self.process_row(row)

    def process_rows(self, rows: Sequence[Sequence[str]]) -> None:
        """Normalize raw catalog rows and process them in index order."""
        self.process_records(normalize_rows(rows))

    def render(self) -> str:
        """The assembled hierarchy as .stc text."""
        return render_stc(obj for _, obj in self.assembler.ordered_objects())

    def get_statistics(self) -> Dict[str, int]:
        """Get current processing statistics."""
        stats = self._stats.copy()
        objects = [obj for _, obj in self.assembler.ordered_objects()]
        stats[STATS_KEYS['OBJECTS']] = len(objects)
        stats[STATS_KEYS['STARS']] = sum(1 for obj in objects if not obj.is_barycenter)
        return stats

    def log_summary(self):
        stats = self.get_statistics()
        log.info(f"{stats[STATS_KEYS['STARS']]} stars in "
                 f"{stats[STATS_KEYS['SYSTEMS']]} systems newly added")
        if stats[STATS_KEYS['DUPLICATES']]:
            log.info(f"{stats[STATS_KEYS['DUPLICATES']]} systems replace existing barycenters")

    def run(self, catalog_path: PathLike, output_path: PathLike) -> Dict[str, int]:
        """
        Convert a catalog file into an .stc file.

        Args:
            catalog_path: Tab-delimited pair catalog
            output_path: Destination .stc file

        Returns:
            Processing statistics

        Raises:
            ConversionProcessError: If any stage of the conversion fails
        """
        try:
            log.info(f"Reading catalog: {catalog_path}")
            rows: List[List[str]] = table_to_rows(load_catalog_table(catalog_path))
            log.info(f"Processing {len(rows)} rows...")
            self.process_rows(rows)
            log.info(f"Writing {len(self.assembler)} objects to {output_path}")
            write_text_file(self.render(), output_path)
        except MultistarError as e:
            raise ConversionProcessError(f"Conversion of '{catalog_path}' failed: {e}") from e
        except (ValueError, TypeError, KeyError, ArithmeticError) as e:
            log.exception(f"Unexpected error while converting '{catalog_path}'")
            raise ConversionProcessError(f"Conversion of '{catalog_path}' failed: {e}") from e

        self.log_summary()
        return self.get_statistics()
