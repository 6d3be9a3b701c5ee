"""Series building: turns normalized records into chart-ready player series.

Usage
-----
    from stats.records import normalize_records
    from stats.series import build_chart_data

    records = normalize_records(raw_df)
    chart_data = build_chart_data(records, "S1")
    chart_data.labels   # ("1 Jan", "2 Jan", ...)
    chart_data.series   # (PlayerSeries("Alice", (PlotPoint(...), ...), "#ff0df7"), ...)

build_chart_data() is pure: the same records and season always produce an
equal ChartData, and a call for another season shares nothing with the
previous result.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import pandas as pd

from data.loader import LEAGUE_COL, PLAYER_COL, RANK_COL, SCORE_COL, SEASON_COL, TIMESTAMP_COL
from stats.records import DATE_LABEL_COL, format_date_label
from stats.seasons import ALL_SEASONS

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Player line colors, assigned by first-seen order and cycled.
DEFAULT_PALETTE: tuple[str, ...] = ("#ff0df7", "#ff7a0d", "#0dff25")


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlotPoint:
    """One player-date observation.

    ``rank``, ``score``, ``league`` and ``season`` are None when the source
    row left them empty.
    """

    x: str
    score: float | None
    rank: float | None
    league: str | None
    season: str | None


@dataclass(frozen=True)
class PlayerSeries:
    player: str
    points: tuple[PlotPoint, ...]
    color: str


@dataclass(frozen=True)
class ChartData:
    labels: tuple[str, ...] = ()
    series: tuple[PlayerSeries, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.series


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _optional_number(value: object) -> float | None:
    if value is None or value is pd.NA:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _optional_text(value: object) -> str | None:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return str(value)


def color_for_index(index: int, palette: tuple[str, ...] = DEFAULT_PALETTE) -> str:
    """Return the palette color for the *index*-th player (cycling)."""
    return palette[index % len(palette)]


def filter_by_season(records: pd.DataFrame, season: str | None) -> pd.DataFrame:
    """Return the rows of *season*; ``"All"``/None/empty means no filtering."""
    if not season or season == ALL_SEASONS or SEASON_COL not in records.columns:
        return records
    return records[records[SEASON_COL].isin([season])]


def _date_labels(records: pd.DataFrame) -> pd.Series:
    # Prefer the label derived by normalize_records; fall back to the timestamp.
    if DATE_LABEL_COL in records.columns:
        return records[DATE_LABEL_COL]
    return records[TIMESTAMP_COL].map(format_date_label)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

def build_chart_data(
    records: pd.DataFrame,
    season: str | None = ALL_SEASONS,
    palette: tuple[str, ...] = DEFAULT_PALETTE,
) -> ChartData:
    """Return labels and one series per player for *season*.

    *records* must already be normalized (chronologically sorted).  Labels are
    the distinct date labels in first-seen order; players keep first-seen
    order and get ``palette[i % len(palette)]``.  Points sharing a label are
    all kept.
    """
    filtered = filter_by_season(records, season)
    if filtered.empty:
        return ChartData()

    date_labels = _date_labels(filtered).tolist()
    labels = tuple(dict.fromkeys(date_labels))

    grouped: dict[str, list[PlotPoint]] = {}
    for row, x in zip(filtered.to_dict("records"), date_labels, strict=True):
        point = PlotPoint(
            x=x,
            score=_optional_number(row.get(SCORE_COL)),
            rank=_optional_number(row.get(RANK_COL)),
            league=_optional_text(row.get(LEAGUE_COL)),
            season=_optional_text(row.get(SEASON_COL)),
        )
        grouped.setdefault(str(row[PLAYER_COL]), []).append(point)

    series = tuple(
        PlayerSeries(player=player, points=tuple(points), color=color_for_index(i, palette))
        for i, (player, points) in enumerate(grouped.items())
    )
    return ChartData(labels=labels, series=series)
