"""Session controller: owns the one View State and the one live chart.

A Streamlit rerun re-executes app.py top to bottom, so the controller is kept
in ``st.session_state`` under ``SESSION_KEY`` and fetched with get_session().
Every state change goes through a method here; nothing else mutates the
ViewState.

The chart handle (``figure``) is replaced wholesale on every update: the old
figure reference is dropped before the new one is built, so at most one
figure is live at any time.
"""

from __future__ import annotations

from collections.abc import Callable, MutableMapping
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from stats.seasons import ALL_SEASONS, default_season, get_season_options, resolve_season
from stats.series import DEFAULT_PALETTE, ChartData, build_chart_data
from stats.views import DEFAULT_VIEW, ViewProjection, get_view_spec, project_view

SESSION_KEY = "_rank_chart_session"

FigureBuilder = Callable[[ChartData, str], Any]


@dataclass
class ViewState:
    """Everything the page needs to redraw the chart.

    Attributes
    ----------
    view : str
        ``"score"`` or ``"rank"``.
    season : str
        A member of ``season_options``; ``"All"`` disables filtering.
    season_chosen : bool
        True once the user picked a season; disables the default policy.
    season_options : list[str]
        ``"All"`` followed by seasons in discovery order.
    chart_data : ChartData
        Labels and series currently drawn.
    """

    view: str = DEFAULT_VIEW
    season: str = ALL_SEASONS
    season_chosen: bool = False
    season_options: list[str] = field(default_factory=lambda: [ALL_SEASONS])
    chart_data: ChartData = field(default_factory=ChartData)


class RankChartSession:
    def __init__(
        self,
        figure_builder: FigureBuilder | None = None,
        palette: tuple[str, ...] = DEFAULT_PALETTE,
    ) -> None:
        self.state = ViewState()
        self.figure: Any = None
        self._records: pd.DataFrame | None = None
        self._figure_builder = figure_builder
        self._palette = palette

    @property
    def records(self) -> pd.DataFrame | None:
        return self._records

    @property
    def projection(self) -> ViewProjection:
        return project_view(self.state.view)

    def load(self, records: pd.DataFrame) -> None:
        """Adopt a normalized record set (no-op when it is the same object).

        Recomputes the season options, keeps the current season when it still
        exists, applies the default-season policy and rebuilds the chart.
        """
        if records is self._records:
            return
        self._records = records

        options = get_season_options(records)
        current = resolve_season(self.state.season, options)
        chosen = self.state.season_chosen and current == self.state.season
        self.state.season_options = options
        self.state.season_chosen = chosen
        self.state.season = default_season(options[1:], current, chosen)
        self._rebuild()

    def select_season(self, season: str) -> None:
        """User-initiated season change; unknown seasons fall back to ``"All"``."""
        self.state.season = resolve_season(season, self.state.season_options)
        self.state.season_chosen = True
        self._rebuild()

    def select_view(self, view: str) -> None:
        """User-initiated view change; only the projection is recomputed.

        Raises
        ------
        ValueError
            When *view* is not a registered view.
        """
        get_view_spec(view)
        self.state.view = view
        self._refresh_figure()

    def _rebuild(self) -> None:
        if self._records is None:
            self.state.chart_data = ChartData()
        else:
            self.state.chart_data = build_chart_data(
                self._records, self.state.season, palette=self._palette
            )
        self._refresh_figure()

    def _refresh_figure(self) -> None:
        self.figure = None
        if self._figure_builder is None or self.state.chart_data.is_empty:
            return
        self.figure = self._figure_builder(self.state.chart_data, self.state.view)


def get_session(
    store: MutableMapping[str, Any],
    figure_builder: FigureBuilder | None = None,
    key: str = SESSION_KEY,
) -> RankChartSession:
    """Return the session stored under *key*, creating it on first use."""
    if key not in store:
        store[key] = RankChartSession(figure_builder=figure_builder)
    return store[key]
