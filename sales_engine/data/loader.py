"""
CSV discovery and loading for the six sales collections.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

import pandas as pd

from sales_engine.config import CSV_FILES, DATA_FOLDER

logger = logging.getLogger(__name__)

Row = dict[str, str]


# ---------------------------------------------------------------------------
# CSV discovery
# ---------------------------------------------------------------------------

def discover_csvs(folder: Path = DATA_FOLDER) -> dict[str, Path]:
    """Map each collection to its CSV in ``folder``; missing files are left out."""
    found: dict[str, Path] = {}
    if not folder.exists():
        return found
    for collection, filename in CSV_FILES.items():
        path = folder / filename
        if path.is_file():
            found[collection] = path
    return found


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def read_rows(filepath: Path) -> list[Row]:
    """Read one CSV as a list of string-valued rows.

    Everything stays a string; entity converters own the typing, so ids like
    ``"007"`` and cent amounts are never reinterpreted by pandas.
    """
    df = pd.read_csv(filepath, dtype=str, keep_default_na=False)
    df.columns = [str(c).strip() for c in df.columns]
    return df.to_dict("records")


def load_rows(paths: Mapping[str, str | Path]) -> dict[str, list[Row]]:
    """Load every collection in ``paths`` (collection name → CSV path)."""
    unknown = set(paths) - set(CSV_FILES)
    if unknown:
        raise ValueError(f"Unknown collections: {sorted(unknown)}")

    rows: dict[str, list[Row]] = {}
    for collection, path in paths.items():
        rows[collection] = read_rows(Path(path))
        logger.info("Loaded %s: %d rows from %s", collection, len(rows[collection]), path)
    return rows
