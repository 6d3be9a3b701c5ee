"""Season indexing: the season selector's options and default selection."""

from __future__ import annotations

import pandas as pd

from data.loader import SEASON_COL

ALL_SEASONS = "All"
ALL_SEASONS_LABEL = "All Seasons"


def get_seasons(records: pd.DataFrame) -> list[str]:
    """Return distinct non-null season labels in first-seen order (not sorted)."""
    if records.empty or SEASON_COL not in records.columns:
        return []
    values = records[SEASON_COL].dropna()
    return [str(s) for s in values.unique()]


def get_season_options(records: pd.DataFrame) -> list[str]:
    """Return the selector options: ``"All"`` first, then discovery order."""
    return [ALL_SEASONS] + get_seasons(records)


def default_season(
    seasons: list[str],
    current: str = ALL_SEASONS,
    explicitly_chosen: bool = False,
) -> str:
    """Apply the default-season policy.

    Until the user has picked a season, an ``"All"`` selection is replaced by
    the first discovered season.  With no seasons ``"All"`` stays selected.
    """
    if explicitly_chosen or current != ALL_SEASONS:
        return current
    return seasons[0] if seasons else ALL_SEASONS


def resolve_season(season: str | None, options: list[str]) -> str:
    """Return *season* if it is a known option, else ``"All"``."""
    if season is None or season not in options:
        return ALL_SEASONS
    return season


def season_option_label(value: str) -> str:
    """Display text for a selector option."""
    return ALL_SEASONS_LABEL if value == ALL_SEASONS else value
