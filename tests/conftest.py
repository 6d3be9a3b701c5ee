"""Shared test fixtures for rank-history."""

from __future__ import annotations

from collections.abc import Callable

import pandas as pd
import pytest


def _expand(value: object, n: int) -> list[object]:
    if isinstance(value, list):
        if not value:
            return [None] * n
        return (value * ((n // len(value)) + 1))[:n]
    return [value] * n


@pytest.fixture
def rank_df_factory() -> Callable[..., pd.DataFrame]:
    """Return a factory for raw rank-history frames shaped like the CSV read.

    All values are strings (the loader reads with ``dtype=str``).  One row is
    produced per (day, player), players in the given order within each day.

    Signature:
        _factory(
            players: tuple[str, ...] = ("Alice",),
            n_days: int = 3,
            season: str | list | None = "S1",
            start: str = "2024-01-01",
            base_score: int = 31000,
            with_rank: bool = True,
            league: str = "Platinum",
        ) -> pd.DataFrame

    A list ``season`` is cycled per row.
    """

    def _factory(
        players: tuple[str, ...] = ("Alice",),
        n_days: int = 3,
        season: str | list | None = "S1",
        start: str = "2024-01-01",
        base_score: int = 31000,
        with_rank: bool = True,
        league: str = "Platinum",
    ) -> pd.DataFrame:
        rows: list[dict[str, object]] = []
        start_ts = pd.Timestamp(start)
        for day in range(n_days):
            date = start_ts + pd.Timedelta(days=day)
            for i, player in enumerate(players):
                rows.append(
                    {
                        "recordedAt": f"{date:%Y-%m-%d} 12:{i:02d}:00",
                        "steamName": player,
                        "rankScore": str(base_score + day * 1000 + i * 100),
                        "rank": str(900 - day * 10 - i) if with_rank else None,
                        "league": league,
                    }
                )
        seasons = _expand(season, len(rows))
        for row, s in zip(rows, seasons):
            row["season"] = s
        return pd.DataFrame(rows, columns=["recordedAt", "steamName", "rankScore", "rank", "league", "season"])

    return _factory


@pytest.fixture
def split_season_df() -> pd.DataFrame:
    """Two players across two seasons, rows deliberately out of order."""
    return pd.DataFrame(
        [
            {"recordedAt": "2024-02-02 09:00:00", "steamName": "Alice", "rankScore": "36000", "rank": "400", "league": "Gold", "season": "s2"},
            {"recordedAt": "2024-01-01 09:00:00", "steamName": "Alice", "rankScore": "31000", "rank": "800", "league": "Silver", "season": "s1"},
            {"recordedAt": "2024-01-01 10:00:00", "steamName": "Bob", "rankScore": "30500", "rank": "850", "league": "Silver", "season": "S1"},
            {"recordedAt": "2024-02-01 09:00:00", "steamName": "Bob", "rankScore": "35000", "rank": "450", "league": "Gold", "season": "S2"},
            {"recordedAt": "2024-01-02 09:00:00", "steamName": "Alice", "rankScore": "32000", "rank": "700", "league": "Silver", "season": "S1"},
        ]
    )
