from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

import numpy as np


@dataclass(frozen=True, eq=False)
class Row:
    """One record of the loaded table.

    Rows compare by identity. ``row_id`` is assigned at load and survives
    ``replace``, so a modified copy still counts as the same logical row.
    """

    row_id: int
    values: Mapping[str, Any] = field(default_factory=dict)

    def __getitem__(self, attr: str) -> Any:
        return self.values[attr]

    def get(self, attr: str, default: Any = None) -> Any:
        return self.values.get(attr, default)

    def replace(self, **changes: Any) -> "Row":
        merged = dict(self.values)
        merged.update(changes)
        return Row(self.row_id, merged)

    def same_as(self, other: Optional["Row"]) -> bool:
        return other is not None and other.row_id == self.row_id


@dataclass(frozen=True)
class Dataset:
    rows: tuple[Row, ...] = ()
    id_attribute: str = "car"
    attributes: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    @property
    def numeric_attributes(self) -> list[str]:
        return [a for a in self.attributes if a != self.id_attribute]

    def values(self, attr: str) -> list[Any]:
        return [row[attr] for row in self.rows]

    def find(self, row_id: Any) -> Optional[Row]:
        try:
            key = int(row_id)
        except (TypeError, ValueError):
            return None
        for row in self.rows:
            if row.row_id == key:
                return row
        return None

    def duplicate_ids(self) -> list[str]:
        seen: set[str] = set()
        dupes: list[str] = []
        for name in self.values(self.id_attribute):
            if name in seen and name not in dupes:
                dupes.append(name)
            seen.add(name)
        return dupes

    def without(self, row_id: int) -> "Dataset":
        rows = tuple(r for r in self.rows if r.row_id != row_id)
        return Dataset(rows, self.id_attribute, self.attributes)

    def with_row(self, row: Row) -> "Dataset":
        if any(r.row_id == row.row_id for r in self.rows):
            raise ValueError(f"Row already present: {row.row_id}")
        return Dataset(self.rows + (row,), self.id_attribute, self.attributes)

    def replace_row(self, row: Row) -> "Dataset":
        if self.find(row.row_id) is None:
            raise KeyError(f"Unknown row: {row.row_id}")
        rows = tuple(row if r.row_id == row.row_id else r for r in self.rows)
        return Dataset(rows, self.id_attribute, self.attributes)


def make_dataset(
    records: Iterable[Mapping[str, Any]],
    id_attribute: str,
    attributes: Optional[Iterable[str]] = None,
) -> Dataset:
    rows = tuple(Row(i, dict(rec)) for i, rec in enumerate(records))
    if attributes is None:
        attributes = list(rows[0].values.keys()) if rows else [id_attribute]
    return Dataset(rows, id_attribute, tuple(attributes))


def extent(dataset: Dataset, attr: str) -> tuple[float, float]:
    """Return (min, max) of ``attr``; NaN anywhere poisons the result."""
    arr = np.asarray(dataset.values(attr), dtype=float)
    if arr.size == 0 or np.isnan(arr).any():
        return math.nan, math.nan
    return float(arr.min()), float(arr.max())


def require_numeric_attribute(dataset: Dataset, attr: str) -> str:
    if attr not in dataset.numeric_attributes:
        raise KeyError(f"Unknown numeric attribute: {attr}")
    return attr


def format_value(value: Any) -> str:
    """Render a cell the way it reads in the source table (21.0 -> "21")."""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if value.is_integer():
            return str(int(value))
    return str(value)
