"""In-memory table store used to hand tables in and out of a pipeline run."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


def table_name_from_file(path: str | Path) -> str:
    """``all-profiles.csv`` -> ``all_profiles``."""
    return Path(path).stem.replace("-", "_")


def read_table_csv(path: str | Path, header_row: int | None = None) -> pd.DataFrame:
    """Read one CSV table.

    Energy model CSV files often carry a line with units above the header,
    e.g. ``,,p.u.``. With ``header_row=None`` the first line is taken as such
    a units line if it has an empty cell and the second line looks like a
    header (no empty and no numeric cells). Units lines without empty cells
    need an explicit ``header_row=1``.
    """
    if header_row is None:
        header_row = 1 if _has_units_line(path) else 0
        if header_row:
            logger.debug("Skipping units line of %s", path)
    return pd.read_csv(path, header=header_row)


def _has_units_line(path: str | Path) -> bool:
    head = pd.read_csv(path, header=None, nrows=2, dtype=str, keep_default_na=False)
    if len(head) < 2:
        return False
    first, second = head.iloc[0], head.iloc[1]
    if not (first == "").any() or (second == "").any():
        return False
    return not pd.to_numeric(second, errors="coerce").notna().any()


class TableStore:
    """Named pandas DataFrames with a small read/write contract.

    Examples
    --------
    >>> store = TableStore.from_csv_folder("data")
    >>> store.names()
    ['all_profiles', 'assets_data', 'flows_data']
    >>> store.register("rep_periods_data", frame)
    """

    def __init__(self, tables: dict[str, pd.DataFrame] | None = None) -> None:
        self._tables: dict[str, pd.DataFrame] = {}
        for name, table in (tables or {}).items():
            self.register(name, table)

    @classmethod
    def from_csv_folder(
        cls, folder: str | Path, header_row: int | None = None
    ) -> TableStore:
        """Register every ``*.csv`` file of ``folder`` under its table name."""
        folder = Path(folder)
        if not folder.is_dir():
            raise FileNotFoundError(f"Data folder not found: {folder}")
        store = cls()
        for path in sorted(folder.glob("*.csv")):
            store.register(table_name_from_file(path), read_table_csv(path, header_row))
        logger.info("Read %d tables from %s", len(store), folder)
        return store

    def to_csv_folder(self, folder: str | Path, names: list[str] | None = None) -> None:
        """Write the given tables (default: all) as ``<name>.csv`` into ``folder``."""
        folder = Path(folder)
        folder.mkdir(parents=True, exist_ok=True)
        for name in names if names is not None else self.names():
            self[name].to_csv(folder / f"{name}.csv", index=False)

    def register(self, name: str, table: pd.DataFrame) -> None:
        """Add or replace a table."""
        if not isinstance(table, pd.DataFrame):
            raise TypeError(
                f"table {name!r} must be a pandas DataFrame, got {type(table).__name__}"
            )
        self._tables[name] = table

    def drop(self, name: str) -> None:
        self._tables.pop(name, None)

    def names(self) -> list[str]:
        return sorted(self._tables)

    def __getitem__(self, name: str) -> pd.DataFrame:
        try:
            return self._tables[name]
        except KeyError:
            raise KeyError(
                f"Table {name!r} not found. Available tables: {self.names()}"
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._tables)
