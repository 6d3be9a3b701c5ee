"""Reusable Streamlit UI components for rank-history.

All public render_* functions draw directly into the current Streamlit
context.  Formatting and figure assembly (format_grouped, build_tooltip_lines,
build_rank_chart) are kept pure so they can be tested without a Streamlit
runtime.
"""

from __future__ import annotations

import html
import math

import numpy as np
import plotly.graph_objects as go
import streamlit as st

from stats.series import ChartData, PlayerSeries, PlotPoint
from stats.views import AnnotationSpec, get_view_spec, project_view, resolve_axis_range

# ---------------------------------------------------------------------------
# Style constants
# ---------------------------------------------------------------------------

NA_PLACEHOLDER = "N/A"

CHART_KEY = "rank_chart"

_TEXT_COLOR = "#a0a0a0"
_GRID_COLOR = "#1a4875"
_TOOLTIP_BG = "#080224"
_TOOLTIP_BORDER = "#383264"

_LINE_WIDTH = 2
_HOVER_MARKER_SIZE = 10
_CHART_HEIGHT = 520

# Player names are data, never template text: a name may contain "%{" or "<".
_HOVER_TEMPLATE = (
    "Player: %{customdata[0]}<br>"
    "Score: %{customdata[1]}<br>"
    "Rank: %{customdata[2]}<br>"
    "League: %{customdata[3]}"
    "<extra></extra>"
)


# ---------------------------------------------------------------------------
# Formatting helpers (pure, no Streamlit calls)
# ---------------------------------------------------------------------------

def _is_missing(value: float | None) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def format_grouped(value: float | None) -> str:
    """Return *value* with thousands separators ('31,000'), or 'N/A'.

    Whole numbers drop the decimal part; fractions keep up to 3 places.
    """
    if _is_missing(value):
        return NA_PLACEHOLDER
    number = float(value)
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,.3f}".rstrip("0").rstrip(".")


def format_rank(value: float | None) -> str:
    """Rank display text; absent (or zero) ranks show the placeholder."""
    if _is_missing(value) or not value:
        return NA_PLACEHOLDER
    return format_grouped(value)


def _tooltip_fields(point: PlotPoint) -> tuple[str, str, str]:
    league = point.league if point.league is not None else NA_PLACEHOLDER
    return format_grouped(point.score), format_rank(point.rank), league


def build_tooltip_lines(player: str, point: PlotPoint) -> list[str]:
    """Return the hover lines for one point: player, score, rank, league."""
    score, rank, league = _tooltip_fields(point)
    return [
        f"Player: {player}",
        f"Score: {score}",
        f"Rank: {rank}",
        f"League: {league}",
    ]


def _tooltip_customdata(series: PlayerSeries) -> np.ndarray:
    """One row per point: player, score, rank, league.

    Text fields are HTML-escaped because Plotly renders hover text as markup.
    """
    player = html.escape(series.player, quote=False)
    rows = [
        (player, score, rank, html.escape(league, quote=False))
        for score, rank, league in map(_tooltip_fields, series.points)
    ]
    return np.array(rows, dtype=object).reshape(-1, 4)


def _y_values(series: PlayerSeries, value_field: str) -> list[float | None]:
    return [getattr(p, value_field) for p in series.points]


# ---------------------------------------------------------------------------
# Figure assembly (pure)
# ---------------------------------------------------------------------------

def _add_player_trace(fig: go.Figure, series: PlayerSeries, value_field: str) -> None:
    fig.add_trace(
        go.Scatter(
            x=[p.x for p in series.points],
            y=_y_values(series, value_field),
            mode="lines",
            name=series.player,
            line=dict(color=series.color, width=_LINE_WIDTH, shape="linear"),
            marker=dict(color=series.color, size=_HOVER_MARKER_SIZE, symbol="circle"),
            customdata=_tooltip_customdata(series),
            hovertemplate=_HOVER_TEMPLATE,
            connectgaps=False,
        )
    )


def _add_annotation(fig: go.Figure, annotation: AnnotationSpec) -> None:
    layer = "below" if annotation.below_data else "above"
    if annotation.kind == "box":
        fig.add_hrect(
            y0=annotation.y_min,
            y1=annotation.y_max,
            fillcolor=annotation.color,
            line_width=0,
            layer=layer,
            name=annotation.name,
        )
    else:
        fig.add_hline(
            y=annotation.y_min,
            line_color=annotation.color,
            line_width=annotation.width,
            layer=layer,
            name=annotation.name,
        )


def build_rank_chart(chart_data: ChartData, view: str) -> go.Figure:
    """Build the rank history line chart for *view*.

    One line per player series, x categories in label order, y-axis and
    threshold overlays taken from project_view().
    """
    spec = get_view_spec(view)
    projection = project_view(view)
    fig = go.Figure()

    all_values: list[float | None] = []
    for series in chart_data.series:
        _add_player_trace(fig, series, spec.value_field)
        all_values.extend(_y_values(series, spec.value_field))

    for annotation in projection.annotations:
        _add_annotation(fig, annotation)

    axis = projection.axis
    fig.update_xaxes(
        type="category",
        categoryorder="array",
        categoryarray=list(chart_data.labels),
        showgrid=False,
    )
    fig.update_yaxes(
        range=resolve_axis_range(axis, all_values),
        dtick=axis.step,
        title=dict(text=axis.title, font=dict(color="#ffffff")),
        showgrid=True,
        gridcolor=_GRID_COLOR,
        zeroline=False,
        tickformat=",d",
    )
    fig.update_layout(
        template="plotly_dark",
        height=_CHART_HEIGHT,
        margin=dict(l=80, r=10, t=40, b=40),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
        font=dict(color=_TEXT_COLOR),
        showlegend=True,
        legend=dict(
            orientation="h",
            yanchor="bottom",
            y=1.02,
            xanchor="center",
            x=0.5,
            font=dict(color="#ffffff"),
        ),
        hovermode="closest",
        hoverlabel=dict(
            bgcolor=_TOOLTIP_BG,
            bordercolor=_TOOLTIP_BORDER,
            font=dict(color="#ffffff"),
        ),
    )
    return fig


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render_rank_chart(fig: go.Figure | None) -> None:
    """Draw *fig* under a fixed element key so a rerun replaces the chart."""
    if fig is None:
        st.info("No rank data to display.")
        return

    st.plotly_chart(
        fig,
        width="stretch",
        config={"displayModeBar": False},
        key=CHART_KEY,
    )
