from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Optional

from linked_charts.core.barchart import BarChart, BarDims
from linked_charts.core.datasets import Dataset, Row
from linked_charts.core.marks import Clock, monotonic_ms
from linked_charts.core.scatterplot import ScatterDims, Scatterplot
from linked_charts.core.state import (
    UIState,
    ViewSettings,
    clear_selection,
    initial_state,
    set_bar_attribute,
    set_selection,
    set_x_attribute,
    set_y_attribute,
)
from linked_charts.utils.log import log_event, log_exception

SCATTER_MOUNT = "scatterPlot"
BAR_MOUNT = "barChart"

CONTROL_SETTERS = {
    "xattr": set_x_attribute,
    "yattr": set_y_attribute,
    "barattr": set_bar_attribute,
}


def redraw(dataset: Dataset, state: UIState, scatter: Scatterplot, bar: BarChart) -> None:
    """Push the current dataset and state into both charts."""
    scatter.update(dataset, state.x_attribute, state.y_attribute, state.selection)
    bar.update(dataset, dataset.id_attribute, state.bar_attribute, state.selection)


@dataclass
class Session:
    """Owns the dataset, the shared UI state and the two chart components.

    ``lock`` serialises state changes and the redraw that follows them. It is
    re-entrant because a chart's hover handler redraws from inside an event
    that already holds it.
    """

    dataset: Dataset
    state: UIState
    scatter: Scatterplot
    bar: BarChart
    settings: ViewSettings = field(default_factory=ViewSettings)
    redraw_count: int = 0
    lock: Any = field(default_factory=threading.RLock, repr=False, compare=False)

    def redraw(self) -> None:
        with self.lock:
            redraw(self.dataset, self.state, self.scatter, self.bar)
            self.redraw_count += 1


def create_session(
    dataset: Dataset,
    settings: Optional[ViewSettings] = None,
    clock: Clock = monotonic_ms,
    scatter_dims: ScatterDims = ScatterDims(),
    bar_dims: BarDims = BarDims(),
) -> Session:
    settings = settings or ViewSettings()
    if dataset.duplicate_ids():
        log_event("create_session", f"duplicate identifiers: {dataset.duplicate_ids()}")
    scatter = Scatterplot(SCATTER_MOUNT, dims=scatter_dims, clock=clock, duration=settings.transition_ms)
    bar = BarChart(BAR_MOUNT, dims=bar_dims, clock=clock, duration=settings.transition_ms)
    session = Session(
        dataset=dataset,
        state=initial_state(dataset, settings),
        scatter=scatter,
        bar=bar,
        settings=settings,
    )

    def on_enter(row: Row) -> None:
        hover_enter(session, row)

    def on_leave(row: Row) -> None:
        hover_leave(session)

    for chart in (scatter, bar):
        chart.on_enter = on_enter
        chart.on_leave = on_leave
    return session


def safe_redraw(session: Session, context: str = "redraw") -> bool:
    """Redraw from an event handler; failures are logged, never raised."""
    try:
        session.redraw()
    except Exception:
        log_exception(context)
        return False
    return True


def hover_enter(session: Session, row: Row) -> None:
    with session.lock:
        set_selection(session.state, row)
        safe_redraw(session, "hover_enter")


def hover_leave(session: Session) -> None:
    with session.lock:
        clear_selection(session.state)
        safe_redraw(session, "hover_leave")


def apply_control(session: Session, control_id: str, value: Any) -> None:
    """Route an attribute dropdown change into the state, then redraw."""
    setter = CONTROL_SETTERS.get(control_id)
    if setter is None:
        raise KeyError(f"Unknown control: {control_id}")
    with session.lock:
        setter(session.state, session.dataset, value)
        safe_redraw(session, f"control:{control_id}")


def replace_dataset(session: Session, dataset: Dataset) -> None:
    with session.lock:
        session.dataset = dataset
        safe_redraw(session, "replace_dataset")
