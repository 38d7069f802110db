from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from linked_charts.core.datasets import Dataset, Row, require_numeric_attribute
from linked_charts.core.marks import DEFAULT_DURATION_MS


@dataclass
class ViewSettings:
    data_path: str = ""
    id_column: str = "car"
    x_attribute: str = "mpg"
    y_attribute: str = "hp"
    bar_attribute: str = "mpg"
    transition_ms: float = DEFAULT_DURATION_MS


@dataclass
class UIState:
    """Shared, UI-agnostic selection state read by both charts on every redraw."""

    x_attribute: str
    y_attribute: str
    bar_attribute: str
    selection: Optional[Row] = None


def _pick(dataset: Dataset, preferred: str, fallback_index: int) -> str:
    numeric = dataset.numeric_attributes
    if preferred in numeric:
        return preferred
    if not numeric:
        raise ValueError("Dataset has no numeric attributes.")
    return numeric[min(fallback_index, len(numeric) - 1)]


def initial_state(dataset: Dataset, settings: Optional[ViewSettings] = None) -> UIState:
    settings = settings or ViewSettings()
    return UIState(
        x_attribute=_pick(dataset, settings.x_attribute, 0),
        y_attribute=_pick(dataset, settings.y_attribute, 1),
        bar_attribute=_pick(dataset, settings.bar_attribute, 0),
    )


def set_x_attribute(state: UIState, dataset: Dataset, attr: str) -> None:
    state.x_attribute = require_numeric_attribute(dataset, str(attr))


def set_y_attribute(state: UIState, dataset: Dataset, attr: str) -> None:
    state.y_attribute = require_numeric_attribute(dataset, str(attr))


def set_bar_attribute(state: UIState, dataset: Dataset, attr: str) -> None:
    state.bar_attribute = require_numeric_attribute(dataset, str(attr))


def set_selection(state: UIState, row: Optional[Row]) -> None:
    state.selection = row


def clear_selection(state: UIState) -> None:
    state.selection = None
