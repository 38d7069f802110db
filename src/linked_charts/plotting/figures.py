from __future__ import annotations

from typing import Any

import plotly.graph_objects as go

from linked_charts.core.barchart import BarChart
from linked_charts.core.marks import Axis
from linked_charts.core.scatterplot import Scatterplot

MARK_COLOR = "steelblue"
SELECTED_COLOR = "#e6550d"
TEMPLATE = "plotly_white"


def _axis_layout(axis: Axis, pixel_range: list[float]) -> dict[str, Any]:
    return dict(
        range=pixel_range,
        tickmode="array",
        tickvals=axis.tickvals,
        ticktext=axis.ticktext,
        showgrid=False,
        zeroline=False,
        showline=True,
        fixedrange=True,
    )


def _transition(duration: float) -> dict[str, Any]:
    return dict(duration=int(duration), easing="cubic-in-out")


def mark_colors(marks) -> list[str]:
    return [SELECTED_COLOR if m.highlighted else MARK_COLOR for m in marks]


def scatter_figure(chart: Scatterplot) -> go.Figure:
    """Draw the scatterplot's marks and axes in its own pixel space."""
    marks = list(chart.marks)
    dims = chart.dims
    fig = go.Figure(
        go.Scatter(
            x=[m.attrs.get("cx") for m in marks],
            y=[m.attrs.get("cy") for m in marks],
            ids=[str(m.key) for m in marks],
            customdata=[m.key for m in marks],
            hovertext=[m.title for m in marks],
            hoverinfo="text",
            mode="markers",
            marker=dict(size=dims.radius * 2, color=mark_colors(marks)),
        )
    )
    fig.update_layout(
        template=TEMPLATE,
        width=dims.width + dims.margin * 2,
        height=dims.height + dims.margin * 2,
        margin=dict(l=dims.margin, r=dims.margin, t=dims.margin, b=dims.margin),
        xaxis=_axis_layout(chart.xaxis, [0, dims.width]),
        yaxis=_axis_layout(chart.yaxis, [dims.height, 0]),
        xaxis_title=chart.x_attr,
        yaxis_title=chart.y_attr,
        showlegend=False,
        hovermode="closest",
        transition=_transition(chart.duration),
        uirevision=chart.mount,
    )
    return fig


def bar_figure(chart: BarChart) -> go.Figure:
    """Draw horizontal bars with the name axis on the left, largest value on top."""
    marks = list(chart.marks)
    dims = chart.dims
    fig = go.Figure(
        go.Bar(
            orientation="h",
            x=[m.attrs.get("width") for m in marks],
            y=[m.attrs.get("y", 0.0) + m.attrs.get("height", 0.0) / 2 for m in marks],
            width=[m.attrs.get("height") for m in marks],
            base=[m.attrs.get("x", 0.0) for m in marks],
            ids=[str(m.key) for m in marks],
            customdata=[m.key for m in marks],
            hovertext=[m.title for m in marks],
            hoverinfo="text",
            marker=dict(color=mark_colors(marks)),
        )
    )
    fig.update_layout(
        template=TEMPLATE,
        width=dims.width + dims.left_margin,
        height=dims.height + dims.bottom_margin,
        margin=dict(l=dims.left_margin, r=10, t=0, b=dims.bottom_margin),
        xaxis=_axis_layout(chart.xaxis, [0, dims.width]),
        yaxis=_axis_layout(chart.yaxis, [dims.height, 0]),
        showlegend=False,
        hovermode="closest",
        transition=_transition(chart.yaxis.duration or chart.duration),
        uirevision=chart.mount,
    )
    return fig
