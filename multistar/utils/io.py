import re
import logging
from pathlib import Path
from typing import List, Optional, Set, Union

import pandas as pd

from ..config import ENCODING_FALLBACK_ORDER, EXISTING_BARYCENTER_PATTERN
from ..exceptions import CatalogParsingError, FileFormatError, OutputWriteError

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_catalog_table(filepath: PathLike) -> pd.DataFrame:
    """Loads the tab-delimited pair catalog as a table of raw strings.

    Every cell is kept as text (empty cells become empty strings) so that
    the row normalizer can decide presence and precision itself.

    Args:
        filepath: Path to the catalog file. The first row is a header.

    Returns:
        DataFrame with one row per catalog line, in file order.

    Raises:
        CatalogParsingError: If the file cannot be found, read or parsed.
    """
    for encoding in ENCODING_FALLBACK_ORDER:
        try:
            log.debug(f"Attempting to read catalog with encoding: {encoding}")
            df = pd.read_csv(
                filepath,
                sep='\t',
                header=0,
                dtype=str,
                keep_default_na=False,
                quoting=3,  # csv.QUOTE_NONE: names may contain quote characters
                encoding=encoding,
            )
            log.info(f"Catalog loaded successfully. Rows: {len(df)}, Encoding: {encoding}")
            return df

        except UnicodeDecodeError:
            log.debug(f"Encoding {encoding} failed, trying next...")
            continue
        except FileNotFoundError as e:
            log.error(f"File not found: {e}")
            raise CatalogParsingError(f"File not found: {filepath}")
        except PermissionError as e:
            log.error(f"Permission denied: {e}")
            raise CatalogParsingError(f"Permission denied accessing file: {filepath}")
        except pd.errors.EmptyDataError as e:
            log.error(f"Empty data file: {e}")
            raise CatalogParsingError(f"File contains no data: {filepath}")
        except pd.errors.ParserError as e:
            log.error(f"Data parsing error: {e}")
            raise CatalogParsingError(f"Could not parse tab-delimited catalog: {filepath}")

    log.error(f"Could not decode file with any supported encoding: {filepath}")
    raise CatalogParsingError(f"Could not decode file '{filepath}' with any supported encoding")


def table_to_rows(df: pd.DataFrame) -> List[List[str]]:
    """Convert a raw catalog table into lists of cell strings, in file order."""
    return [[str(value) for value in row] for row in df.itertuples(index=False, name=None)]


def load_existing_barycenters(filepath: Optional[PathLike]) -> Set[str]:
    """Collects the Hipparcos numbers of barycenters in an existing .stc file.

    Args:
        filepath: Path to the reference .stc file, or None for no registry.

    Returns:
        Set of Hipparcos numbers (as strings).

    Raises:
        FileFormatError: If the file is given but cannot be read.
    """
    if filepath is None:
        return set()

    pattern = re.compile(EXISTING_BARYCENTER_PATTERN)
    try:
        with open(filepath, 'r', encoding='utf-8', errors='replace') as handle:
            existing = {match.group(1) for line in handle for match in [pattern.search(line)] if match}
    except FileNotFoundError:
        raise FileFormatError(f"Existing .stc file not found: {filepath}")
    except OSError as e:
        raise FileFormatError(f"Could not read existing .stc file '{filepath}': {e}")

    log.info(f"Loaded {len(existing)} existing barycenters from {filepath}")
    return existing


def write_text_file(text: str, filepath: PathLike) -> None:
    """Writes the generated catalog to disk.

    Raises:
        OutputWriteError: If the file cannot be written.
    """
    try:
        with open(filepath, 'w', encoding='utf-8', newline='\n') as handle:
            handle.write(text)
        log.info(f"Output successfully saved to {filepath}")
    except FileNotFoundError as e:
        log.error(f"Directory not found when saving to {filepath}: {e}")
        raise OutputWriteError(f"Directory not found: {filepath}")
    except PermissionError as e:
        log.error(f"Permission denied when saving to {filepath}: {e}")
        raise OutputWriteError(f"Permission denied: {filepath}")
    except OSError as e:
        log.error(f"OS error when saving to {filepath}: {e}")
        raise OutputWriteError(f"OS error (disk space, path length, etc.): {e}")


# === Cell Parsing ===
# A cell is present when it is non-empty and parseable; anything else is None

def safe_int(cell: str) -> Optional[int]:
    """Integer value of a catalog cell, or None when empty or malformed."""
    try:
        text = cell.strip()
        return int(text) if text else None
    except (ValueError, AttributeError):
        return None


def safe_float(cell: str) -> Optional[float]:
    """
    Numeric value of a catalog cell.

    Args:
        cell: Raw cell text, surrounding whitespace allowed

    Returns:
        The value, or None when the cell is empty or not a number
    """
    try:
        text = cell.strip()
        return float(text) if text else None
    except (ValueError, AttributeError):
        return None
