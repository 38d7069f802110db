"""Dash wiring: layout contents and event routing into the session."""

from __future__ import annotations

import threading

import pytest
from dash import no_update

from linked_charts.app import build_parser, settings_from_args
from linked_charts.core.orchestrator import BAR_MOUNT, SCATTER_MOUNT, create_session
from linked_charts.plotting.figures import SELECTED_COLOR
from linked_charts.ui.dash_app import create_app, event_figures, handle_event

pytestmark = pytest.mark.unit


def _hover(key):
    return {"points": [{"customdata": key}]}


@pytest.fixture
def session(cars, clock):
    s = create_session(cars, clock=clock)
    s.redraw()
    return s


def _components(component) -> dict:
    found = {}
    stack = [component]
    while stack:
        node = stack.pop()
        if isinstance(node, (list, tuple)):
            stack.extend(node)
            continue
        cid = getattr(node, "id", None)
        if cid:
            found[cid] = node
        children = getattr(node, "children", None)
        if children is not None and not isinstance(children, str):
            stack.append(children)
    return found


def _selected_keys(fig) -> list:
    trace = fig.data[0]
    return [k for k, c in zip(trace.customdata, trace.marker.color) if c == SELECTED_COLOR]


def test_layout_has_controls_and_both_graphs(cars) -> None:
    app = create_app(dataset=cars)
    ids = set(_components(app.layout()))
    assert {"xattr", "yattr", "barattr", SCATTER_MOUNT, BAR_MOUNT} <= ids


def test_reloaded_page_reflects_current_session(session, cars) -> None:
    app = create_app(session=session)
    mazda = cars.rows[0]
    handle_event(session, "xattr", "hp")
    handle_event(session, SCATTER_MOUNT, _hover(mazda.row_id))

    page = _components(app.layout())
    assert page["xattr"].value == "hp"
    assert page[SCATTER_MOUNT].figure.layout.xaxis.title.text == "hp"
    assert _selected_keys(page[SCATTER_MOUNT].figure) == [mazda.row_id]
    assert _selected_keys(page[BAR_MOUNT].figure) == ["Mazda RX4"]


def test_scatter_hover_then_unhover(session, cars) -> None:
    row = cars.rows[2]
    assert handle_event(session, SCATTER_MOUNT, _hover(row.row_id)) is True
    assert session.state.selection is row
    assert [m.key for m in session.bar.highlighted] == [row["car"]]

    assert handle_event(session, SCATTER_MOUNT, None) is True
    assert session.state.selection is None
    assert handle_event(session, SCATTER_MOUNT, None) is False


def test_bar_hover_then_unhover(session, cars) -> None:
    row = cars.rows[4]
    handle_event(session, BAR_MOUNT, _hover(row["car"]))
    assert session.state.selection is row
    handle_event(session, BAR_MOUNT, {"points": []})
    assert session.state.selection is None


def test_dropdown_change_routes_to_state(session) -> None:
    assert handle_event(session, "yattr", "mpg") is True
    assert session.state.y_attribute == "mpg"
    assert handle_event(session, "yattr", None) is False
    with pytest.raises(KeyError):
        handle_event(session, "xattr", "car")


def test_unknown_trigger_is_ignored(session) -> None:
    assert handle_event(session, None, None) is False
    assert handle_event(session, "something-else", 1) is False


def test_event_figures_skip_rejected_and_empty_events(session) -> None:
    assert event_figures(session, "xattr", "car") == (no_update, no_update)
    assert event_figures(session, SCATTER_MOUNT, None) == (no_update, no_update)
    scatter_fig, bar_fig = event_figures(session, "barattr", "hp")
    assert list(bar_fig.data[0].customdata)[0] == "Duster 360"
    assert scatter_fig.layout.xaxis.title.text == "mpg"


def test_concurrent_events_each_get_their_own_figures(session, cars) -> None:
    results = {row.row_id: [] for row in cars}

    def hover_repeatedly(row) -> None:
        for _ in range(10):
            scatter_fig, bar_fig = event_figures(session, SCATTER_MOUNT, _hover(row.row_id))
            results[row.row_id].append((_selected_keys(scatter_fig), _selected_keys(bar_fig)))

    threads = [threading.Thread(target=hover_repeatedly, args=(row,)) for row in cars]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    for row in cars:
        assert results[row.row_id] == [([row.row_id], [row["car"]])] * 10


def test_launcher_arguments_become_settings() -> None:
    ns = build_parser().parse_args(["--data", "cars.csv", "--x-attr", "wt", "--port", "9000"])
    settings = settings_from_args(ns)
    assert settings.data_path == "cars.csv"
    assert settings.x_attribute == "wt"
    assert settings.y_attribute == "hp"
    assert ns.port == 9000
