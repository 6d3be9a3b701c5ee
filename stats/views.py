"""View projection: maps the score/rank toggle to axis and overlay settings.

ViewSpec / VIEW_REGISTRY describe the two y-axis views.  project_view() is a
pure function that assembles an immutable ViewProjection from the registry;
the chart binder never edits a projection in place, it asks for a new one
whenever the view changes.

Overlay note
------------
Each view carries one shaded threshold zone and one threshold line.  For
``score`` these mark the Diamond league floor (40,000); for ``rank`` they mark
the top 500 leaderboard positions.  The rank axis is reversed so rank 1 is
drawn at the top.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

ViewName = Literal["score", "rank"]

DEFAULT_VIEW: ViewName = "score"


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AxisSpec:
    """Y-axis settings for one view.

    Attributes
    ----------
    title : str
        Axis title shown next to the ticks.
    minimum : float
        Hard lower bound of the axis.
    suggested_max : float
        Upper bound used unless the data goes higher.
    step : float
        Tick spacing.
    reversed : bool
        True when smaller values should be drawn higher.
    """

    title: str
    minimum: float
    suggested_max: float
    step: float
    reversed: bool


@dataclass(frozen=True)
class AnnotationSpec:
    """A named non-data overlay: a shaded ``"box"`` or a horizontal ``"line"``."""

    name: str
    kind: Literal["box", "line"]
    y_min: float
    y_max: float
    color: str
    width: int = 0
    below_data: bool = True


@dataclass(frozen=True)
class ViewProjection:
    view: ViewName
    axis: AxisSpec
    annotations: tuple[AnnotationSpec, ...]


@dataclass(frozen=True)
class ViewSpec:
    """Registry entry for one view.

    ``value_field`` names the PlotPoint attribute plotted on the y-axis.
    """

    key: ViewName
    label: str
    value_field: str
    axis: AxisSpec
    annotations: tuple[AnnotationSpec, ...]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

VIEW_REGISTRY: dict[str, ViewSpec] = {
    "score": ViewSpec(
        key="score",
        label="Rank Score",
        value_field="score",
        axis=AxisSpec(
            title="Rank Score",
            minimum=30000,
            suggested_max=50000,
            step=2500,
            reversed=False,
        ),
        annotations=(
            AnnotationSpec(
                name="diamondZone",
                kind="box",
                y_min=40000,
                y_max=50000,
                color="rgba(0, 251, 255, 0.1)",
                below_data=False,
            ),
            AnnotationSpec(
                name="diamondLine",
                kind="line",
                y_min=40000,
                y_max=40000,
                color="rgba(0, 251, 255, 0.6)",
                width=3,
            ),
        ),
    ),
    "rank": ViewSpec(
        key="rank",
        label="Leaderboard Rank",
        value_field="rank",
        axis=AxisSpec(
            title="Leaderboard Rank",
            minimum=1,
            suggested_max=1000,
            step=250,
            reversed=True,
        ),
        annotations=(
            AnnotationSpec(
                name="top500Zone",
                kind="box",
                y_min=1,
                y_max=500,
                color="rgba(255, 0, 0, 0.1)",
            ),
            AnnotationSpec(
                name="top500Line",
                kind="line",
                y_min=500,
                y_max=500,
                color="rgba(255, 0, 0, 0.6)",
                width=3,
                below_data=False,
            ),
        ),
    ),
}

VIEW_OPTIONS: list[str] = list(VIEW_REGISTRY)


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------

def get_view_spec(view: str) -> ViewSpec:
    """Return the registry entry for *view*.

    Raises
    ------
    ValueError
        When *view* is not a registered view.
    """
    spec = VIEW_REGISTRY.get(view)
    if spec is None:
        raise ValueError(f"Unknown view {view!r}; expected one of {VIEW_OPTIONS}.")
    return spec


def project_view(view: str) -> ViewProjection:
    """Return the axis and annotation settings for *view* (pure)."""
    spec = get_view_spec(view)
    return ViewProjection(view=spec.key, axis=spec.axis, annotations=spec.annotations)


def view_label(view: str) -> str:
    return get_view_spec(view).label


def resolve_axis_range(axis: AxisSpec, values: list[float]) -> list[float]:
    """Return the drawn ``[start, end]`` range for *axis*.

    The upper bound is the suggested maximum unless the data exceeds it.
    Reversed axes return the bounds flipped.
    """
    finite = [v for v in values if v is not None and not math.isnan(v)]
    upper = max([axis.suggested_max, *finite])
    bounds = [axis.minimum, upper]
    return bounds[::-1] if axis.reversed else bounds
