"""Startup seed data for the catalog.

The default set is the handful of titles the desk has always been opened
with. A seed file can replace it: either CSV with a ``title,author[,isbn]``
header, or a JSON array of objects with the same keys.
"""

import csv
import io
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from library_catalog.catalog import Catalog
from library_catalog.errors import CatalogError

logger = logging.getLogger(__name__)

SeedRow = Dict[str, Optional[str]]

DEFAULT_SEED: List[SeedRow] = [
    {"title": "Java Programming", "author": "James Gosling"},
    {"title": "Data Structures", "author": "Mark Allen Weiss"},
    {"title": "Algorithm Design", "author": "Jon Kleinberg"},
    {"title": "The 48 Laws of Power", "author": "Robert Greene"},
    {"title": "Mastery", "author": "Robert Greene"},
    {"title": "The 33 Strategies of War", "author": "Robert Greene"},
    {"title": "On the Origin of Species", "author": "Charles Darwin"},
]


def read_seed_file(file_path: Union[str, Path]) -> List[SeedRow]:
    """Parse a seed file into rows. Raises FileNotFoundError / ValueError."""
    path = Path(file_path)
    with open(path, "r", encoding="utf-8") as f:
        content = f.read().strip()

    if not content:
        return []

    if path.suffix.lower() == ".json" or content.startswith("["):
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON seed file {path}: {e}") from e
        if not isinstance(data, list):
            raise ValueError(f"Seed file {path} must contain a JSON array")
        return [row for row in data if isinstance(row, dict)]

    reader = csv.DictReader(io.StringIO(content))
    rows = []
    for row in reader:
        # header names are matched case-insensitively ("Title", "ISBN", ...);
        # fields beyond the header land under the None key and are dropped
        rows.append({k.strip().lower(): (v or "").strip() for k, v in row.items() if k is not None})
    return rows


def load_seed(catalog: Catalog, rows: Optional[List[SeedRow]] = None) -> int:
    """Add seed rows to the catalog and return how many were added.

    Rows the catalog rejects are skipped with a warning; the rest still load.
    """
    if rows is None:
        rows = DEFAULT_SEED

    added = 0
    for i, row in enumerate(rows, 1):
        fields = [row.get("title"), row.get("author"), row.get("isbn")]
        if any(value is not None and not isinstance(value, str) for value in fields):
            logger.warning(f"Skipping seed row {i}: title, author and isbn must be text")
            continue
        try:
            catalog.add(fields[0] or "", fields[1] or "", fields[2] or None)
            added += 1
        except CatalogError as e:
            logger.warning(f"Skipping seed row {i}: {e}")
    logger.info(f"Seed loaded: {added}/{len(rows)} books")
    return added
