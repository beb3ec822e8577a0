"""
Segmentation of the ordered row stream into star systems.

A system is the maximal run of consecutive rows that share at least one
name (ADS and CCDM identifiers compared without their component letters).
A row whose multiplicity code repeats the code of the system's first row
also starts a new system: a repeated "AB" means another system rather than a
deeper pair of the same one. This is a heuristic; a catalog that repeats a
code inside one system would be split in two.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence

from ..data.records import PairRecord
from .designations import strip_components

log = logging.getLogger(__name__)


@dataclass
class SegmentedRow:
    """A row, the row after it, and whether it opens a new system."""
    record: PairRecord
    next_record: Optional[PairRecord]
    is_new_system: bool
    system_index: int
    system_names: List[str]


class SystemSegmenter:
    """Tracks the open system and decides where each new one begins."""

    def __init__(self):
        self.current_names: List[str] = []
        self.current_code: Optional[str] = None
        self.system_index: Optional[int] = None
        self.systems_opened = 0

    def is_new_system(self, record: PairRecord) -> bool:
        """Whether a row starts a new system, without changing the state."""
        candidate = set(strip_components(record.candidate_names))
        current = set(strip_components(self.current_names))
        if not candidate & current:
            return True
        return record.multiplicity == self.current_code

    def advance(self, record: PairRecord) -> bool:
        """
        Consume one row.

        Returns:
            True when the row opened a new system
        """
        new_system = self.is_new_system(record)
        if new_system:
            self.current_names = record.candidate_names
            self.current_code = record.multiplicity
            self.system_index = record.index
            self.systems_opened += 1
            log.debug(f"New system at row {record.index}: {self.current_names}")
        return new_system

    def segment(self, records: Sequence[PairRecord]) -> Iterator[SegmentedRow]:
        """
        Iterate over rows with a one-row lookahead.

        Args:
            records: Rows in processing order

        Yields:
            SegmentedRow for every input row, in order
        """
        for record, next_record in _with_lookahead(records):
            new_system = self.advance(record)
            yield SegmentedRow(
                record=record,
                next_record=next_record,
                is_new_system=new_system,
                system_index=self.system_index,
                system_names=list(self.current_names),
            )


def _with_lookahead(records: Iterable[PairRecord]) -> Iterator[tuple]:
    iterator = iter(records)
    try:
        current = next(iterator)
    except StopIteration:
        return
    for following in iterator:
        yield current, following
        current = following
    yield current, None
