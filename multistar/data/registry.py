"""Registry of barycenters that already exist in a reference .stc catalog."""

import logging
from typing import Iterable, Optional

from ..config import ROOT_MULTIPLICITY_CODE
from ..utils.io import PathLike, load_existing_barycenters

log = logging.getLogger(__name__)


class BarycenterRegistry:
    """Hipparcos numbers of barycenters defined elsewhere, used to flag replacements."""

    def __init__(self, hip_numbers: Iterable[str] = ()):
        self._hip_numbers = {str(number).strip() for number in hip_numbers if str(number).strip()}

    @classmethod
    def from_stc_file(cls, filepath: Optional[PathLike]) -> 'BarycenterRegistry':
        return cls(load_existing_barycenters(filepath))

    def __len__(self) -> int:
        return len(self._hip_numbers)

    def __contains__(self, hip: str) -> bool:
        return bool(hip) and hip in self._hip_numbers

    def is_duplicate(self, hip: str, multiplicity: str) -> bool:
        """A root pair whose Hipparcos number is already in the reference catalog."""
        return multiplicity == ROOT_MULTIPLICITY_CODE and hip in self
