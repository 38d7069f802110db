from __future__ import annotations

from typing import Any, Hashable, Optional

import dash_bootstrap_components as dbc
from dash import Dash, Input, Output, dcc, html, no_update

from linked_charts.core.datasets import Dataset
from linked_charts.core.orchestrator import (
    BAR_MOUNT,
    CONTROL_SETTERS,
    SCATTER_MOUNT,
    Session,
    apply_control,
    create_session,
)
from linked_charts.core.state import ViewSettings
from linked_charts.data.loaders import load_csv_dataset, load_sample_dataset
from linked_charts.plotting.figures import bar_figure, scatter_figure
from linked_charts.utils.log import log_event

CONTROL_LABELS = {
    "xattr": "X attribute",
    "yattr": "Y attribute",
    "barattr": "Bar attribute",
}

GRAPH_CONFIG = {"displayModeBar": False}


def _hovered_key(hover_data: Optional[dict[str, Any]]) -> Optional[Hashable]:
    if not isinstance(hover_data, dict):
        return None
    points = hover_data.get("points") or []
    if not points:
        return None
    return points[0].get("customdata")


def _selected_key(session: Session, chart_id: str) -> Optional[Hashable]:
    row = session.state.selection
    if row is None:
        return None
    if chart_id == BAR_MOUNT:
        return row.get(session.dataset.id_attribute)
    return row.row_id


def handle_event(session: Session, trigger: Optional[str], value: Any) -> bool:
    """Apply one UI event to the session. Returns False when nothing changed."""
    if trigger in CONTROL_SETTERS:
        if not value:
            return False
        apply_control(session, trigger, value)
        return True
    charts = {SCATTER_MOUNT: session.scatter, BAR_MOUNT: session.bar}
    chart = charts.get(trigger)
    if chart is None:
        return False
    key = _hovered_key(value)
    if key is not None:
        chart.handle_enter(key)
        return True
    leaving = _selected_key(session, trigger)
    if leaving is None:
        return False
    chart.handle_leave(leaving)
    return True


def _attribute_dropdown(control_id: str, columns: list[str], value: str) -> html.Div:
    return html.Div(
        [
            dbc.Label(CONTROL_LABELS[control_id], html_for=control_id),
            dcc.Dropdown(
                id=control_id,
                options=[{"label": c, "value": c} for c in columns],
                value=value,
                clearable=False,
            ),
        ]
    )


def _root_layout(session: Session) -> dbc.Container:
    columns = session.dataset.numeric_attributes
    state = session.state
    controls = dbc.Row(
        [
            dbc.Col(_attribute_dropdown("xattr", columns, state.x_attribute), md=4),
            dbc.Col(_attribute_dropdown("yattr", columns, state.y_attribute), md=4),
            dbc.Col(_attribute_dropdown("barattr", columns, state.bar_attribute), md=4),
        ],
        className="mb-3",
    )
    charts = dbc.Row(
        [
            dbc.Col(
                dcc.Graph(
                    id=SCATTER_MOUNT,
                    figure=scatter_figure(session.scatter),
                    clear_on_unhover=True,
                    animate=True,
                    config=GRAPH_CONFIG,
                ),
                md="auto",
            ),
            dbc.Col(
                dcc.Graph(
                    id=BAR_MOUNT,
                    figure=bar_figure(session.bar),
                    clear_on_unhover=True,
                    animate=True,
                    config=GRAPH_CONFIG,
                ),
                md="auto",
            ),
        ]
    )
    return dbc.Container([html.H3("Linked Charts"), controls, charts], fluid=True)


def create_app(
    dataset: Optional[Dataset] = None,
    settings: Optional[ViewSettings] = None,
    session: Optional[Session] = None,
) -> Dash:
    settings = settings or ViewSettings()
    if session is None:
        if dataset is None:
            if settings.data_path:
                dataset = load_csv_dataset(settings.data_path, settings.id_column)
            else:
                dataset = load_sample_dataset()
        session = create_session(dataset, settings)
        session.redraw()
    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.LUX],
        title="Linked Charts",
    )

    # rebuilt on every page load so a reload shows the current session
    def serve_layout() -> dbc.Container:
        with session.lock:
            return _root_layout(session)

    app.layout = serve_layout
    _register_callbacks(app, session)
    return app


def _register_callbacks(app: Dash, session: Session) -> None:
    @app.callback(
        Output(SCATTER_MOUNT, "figure"),
        Output(BAR_MOUNT, "figure"),
        Input("xattr", "value"),
        Input("yattr", "value"),
        Input("barattr", "value"),
        Input(SCATTER_MOUNT, "hoverData"),
        Input(BAR_MOUNT, "hoverData"),
        prevent_initial_call=True,
    )
    def _on_event(x_value, y_value, bar_value, scatter_hover, bar_hover):
        from dash import ctx

        trigger = ctx.triggered_id
        values = {
            "xattr": x_value,
            "yattr": y_value,
            "barattr": bar_value,
            SCATTER_MOUNT: scatter_hover,
            BAR_MOUNT: bar_hover,
        }
        return event_figures(session, trigger, values.get(trigger))


def event_figures(session: Session, trigger: Optional[str], value: Any):
    """Apply one event and build both figures from the state it left behind."""
    with session.lock:
        try:
            changed = handle_event(session, trigger, value)
        except KeyError as exc:
            log_event("dash_event", f"{trigger}: {exc}")
            return no_update, no_update
        if not changed:
            return no_update, no_update
        return scatter_figure(session.scatter), bar_figure(session.bar)


def main(**run_kwargs) -> None:
    settings = run_kwargs.pop("settings", None)
    app = create_app(settings=settings)
    app.run(**run_kwargs)
