from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from linked_charts.core.datasets import Dataset, Row

DEFAULT_ID_COLUMN = "car"
SAMPLE_DATA_PATH = Path(__file__).resolve().parent / "mtcars.csv"


class DatasetLoadError(ValueError):
    """Raised once when the input table cannot be turned into a Dataset."""


def coerce_numeric_columns(df: pd.DataFrame, id_column: str) -> pd.DataFrame:
    """Convert every column except ``id_column`` to float; bad cells become NaN."""
    out = df.copy()
    for c in out.columns:
        if c == id_column:
            out[c] = out[c].astype(str)
        else:
            out[c] = pd.to_numeric(out[c], errors="coerce").astype(float)
    return out


def frame_to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """DataFrame -> list-of-dicts with plain Python scalars."""
    out: List[Dict[str, Any]] = []
    for rec in df.to_dict(orient="records"):
        clean: Dict[str, Any] = {}
        for k, v in rec.items():
            if hasattr(v, "item"):
                v = v.item()
            clean[str(k)] = v
        out.append(clean)
    return out


def dataset_from_frame(df: pd.DataFrame, id_column: str = DEFAULT_ID_COLUMN) -> Dataset:
    if id_column not in df.columns:
        raise DatasetLoadError(f"Identifier column '{id_column}' not found.")
    df = coerce_numeric_columns(df, id_column)
    rows = tuple(Row(i, rec) for i, rec in enumerate(frame_to_records(df)))
    return Dataset(rows=rows, id_attribute=id_column, attributes=tuple(str(c) for c in df.columns))


def load_csv_dataset(
    path: Union[str, Path],
    id_column: str = DEFAULT_ID_COLUMN,
    sep: str = ",",
) -> Dataset:
    """
    Load a delimited table with a header row.

    Every column except ``id_column`` is parsed as float. Rows get a
    ``row_id`` in file order, which is what selection and the scatterplot
    key on.
    """
    path = Path(path)
    if not path.is_file():
        raise DatasetLoadError(f"Dataset file not found: {path}")
    try:
        df = pd.read_csv(path, sep=sep, dtype=str, keep_default_na=False)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise DatasetLoadError(f"Could not parse {path.name}: {exc}") from exc
    if df.columns.empty:
        raise DatasetLoadError(f"No columns found in {path.name}.")
    return dataset_from_frame(df, id_column)


def load_sample_dataset() -> Dataset:
    return load_csv_dataset(SAMPLE_DATA_PATH, DEFAULT_ID_COLUMN)
