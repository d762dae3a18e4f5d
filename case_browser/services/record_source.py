from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

import pandas as pd

from case_browser.core.exceptions import ConfigError
from case_browser.core.paths import is_missing

logger = logging.getLogger(__name__)


def _unflatten(row: Dict[str, Any]) -> Dict[str, Any]:
    """{"client.name": "A"} -> {"client": {"name": "A"}}; NaN cells become None."""
    nested: Dict[str, Any] = {}
    for key, value in row.items():
        parts = str(key).split(".")
        target = nested
        for part in parts[:-1]:
            child = target.get(part)
            if not isinstance(child, dict):
                child = {}
                target[part] = child
            target = child
        target[parts[-1]] = None if is_missing(value) else value
    return nested


def records_from_frame(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Turn a flat DataFrame with dotted column names into nested records."""
    return [_unflatten(row) for row in df.to_dict("records")]


def load_records(path: Path) -> List[Dict[str, Any]]:
    """
    Load table records from disk.

    - .json: a list of objects (nested objects kept as-is)
    - .csv:  read with pandas; dotted headers become nested dicts

    :raises ConfigError: unsupported suffix or a JSON file that is not a list
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ConfigError(f"{path.name}: expected a JSON list of records")
        records = [r for r in data if isinstance(r, dict)]
        if len(records) != len(data):
            logger.warning("Skipped %d non-object entries in %s", len(data) - len(records), path.name)
    elif suffix == ".csv":
        # ids / codes stay strings; pandas would otherwise turn "007" into 7
        df = pd.read_csv(path, dtype={"id": str})
        records = records_from_frame(df)
    else:
        raise ConfigError(f"Unsupported records file '{path.name}' (expected .json or .csv)")

    logger.info("Loaded records", extra={"path": str(path), "n_records": len(records)})
    return records


class PagedRecordSource:
    """
    Caller-side cursor for infinite-scroll tables.

    Holds the full list and hands it out in batches; the table only ever sees
    what has been fetched so far.
    """

    def __init__(self, records: Sequence[Any], batch_size: int = 20):
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self._records = list(records)
        self.batch_size = batch_size
        self.offset = 0

    @property
    def has_more(self) -> bool:
        return self.offset < len(self._records)

    @property
    def total(self) -> int:
        return len(self._records)

    def loaded(self) -> List[Any]:
        return self._records[:self.offset]

    def fetch_next(self) -> List[Any]:
        """Advance the cursor by one batch and return the newly loaded records."""
        batch = self._records[self.offset:self.offset + self.batch_size]
        self.offset += len(batch)
        return batch

    def load_until(self, offset: int) -> List[Any]:
        """Restore a cursor position (e.g. from a UI store) and return the loaded records."""
        self.offset = min(max(int(offset), 0), len(self._records))
        return self.loaded()

    def reset(self) -> None:
        self.offset = 0
