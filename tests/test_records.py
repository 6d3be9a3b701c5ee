"""Unit tests for stats/records.py."""

import pandas as pd
import pytest

from stats.records import (
    DATE_LABEL_COL,
    INSTANT_COL,
    INVALID_DATE_LABEL,
    format_date_label,
    normalize_records,
)


def _raw(rows: list[dict]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=["recordedAt", "steamName", "rankScore", "rank", "league", "season"])


# ---------------------------------------------------------------------------
# format_date_label
# ---------------------------------------------------------------------------

class TestFormatDateLabel:
    @pytest.mark.parametrize("timestamp,expected", [
        ("2024-01-05 10:15:00", "5 Jan"),
        ("2024-01-05 23:59:59", "5 Jan"),
        ("2024-12-31", "31 Dec"),
        ("2024-03-09T08:00:00", "9 Mar"),
    ])
    def test_uses_date_component_only(self, timestamp, expected):
        assert format_date_label(timestamp) == expected

    def test_unparseable_returns_invalid_label(self):
        assert format_date_label("garbage") == INVALID_DATE_LABEL

    def test_none_returns_invalid_label(self):
        assert format_date_label(None) == INVALID_DATE_LABEL


# ---------------------------------------------------------------------------
# normalize_records
# ---------------------------------------------------------------------------

class TestNormalizeRecords:
    def test_drops_rows_missing_timestamp_or_player(self):
        df = _raw([
            {"recordedAt": "2024-01-01 10:00:00", "steamName": "Alice", "rankScore": "31000"},
            {"recordedAt": None, "steamName": "Bob", "rankScore": "30000"},
            {"recordedAt": "2024-01-01 11:00:00", "steamName": "", "rankScore": "30000"},
            {"recordedAt": "2024-01-01 12:00:00", "steamName": "   ", "rankScore": "30000"},
            {"recordedAt": "", "steamName": "Carol", "rankScore": "30000"},
        ])
        out = normalize_records(df)
        assert out["steamName"].tolist() == ["Alice"]

    def test_player_identifier_kept_verbatim(self):
        df = _raw([
            {"recordedAt": "2024-01-01 10:00:00", "steamName": "Alice", "rankScore": "31000"},
            {"recordedAt": "2024-01-01 11:00:00", "steamName": " Alice ", "rankScore": "30000"},
        ])
        out = normalize_records(df)
        assert out["steamName"].tolist() == ["Alice", " Alice "]

    def test_sorted_chronologically(self):
        df = _raw([
            {"recordedAt": "2024-01-03 10:00:00", "steamName": "Alice", "rankScore": "33000"},
            {"recordedAt": "2024-01-01 10:00:00", "steamName": "Alice", "rankScore": "31000"},
            {"recordedAt": "2024-01-02 10:00:00", "steamName": "Alice", "rankScore": "32000"},
        ])
        out = normalize_records(df)
        assert out["rankScore"].tolist() == [31000, 32000, 33000]

    def test_sort_is_stable_for_equal_timestamps(self):
        df = _raw([
            {"recordedAt": "2024-01-02 10:00:00", "steamName": "Late", "rankScore": "1"},
            {"recordedAt": "2024-01-01 10:00:00", "steamName": "First", "rankScore": "1"},
            {"recordedAt": "2024-01-01 10:00:00", "steamName": "Second", "rankScore": "1"},
            {"recordedAt": "2024-01-01 10:00:00", "steamName": "Third", "rankScore": "1"},
        ])
        out = normalize_records(df)
        assert out["steamName"].tolist() == ["First", "Second", "Third", "Late"]

    def test_season_upper_cased(self):
        df = _raw([
            {"recordedAt": "2024-01-01 10:00:00", "steamName": "Alice", "rankScore": "1", "season": "s1"},
            {"recordedAt": "2024-01-02 10:00:00", "steamName": "Alice", "rankScore": "1", "season": "Open Beta"},
        ])
        out = normalize_records(df)
        assert out["season"].tolist() == ["S1", "OPEN BETA"]

    def test_absent_season_left_absent(self):
        df = _raw([{"recordedAt": "2024-01-01 10:00:00", "steamName": "Alice", "rankScore": "1", "season": None}])
        out = normalize_records(df)
        assert pd.isna(out["season"].iloc[0])

    def test_numeric_season_stringified(self):
        df = pd.DataFrame([
            {"recordedAt": "2024-01-01 10:00:00", "steamName": "Alice", "rankScore": 1, "season": 3.0},
        ])
        out = normalize_records(df)
        assert out["season"].iloc[0] == "3"

    def test_numeric_coercion(self):
        df = _raw([
            {"recordedAt": "2024-01-01 10:00:00", "steamName": "Alice", "rankScore": "31000", "rank": "abc"},
        ])
        out = normalize_records(df)
        assert out["rankScore"].iloc[0] == 31000
        assert pd.isna(out["rank"].iloc[0])

    def test_date_label_column_added(self):
        df = _raw([{"recordedAt": "2024-01-05 22:00:00", "steamName": "Alice", "rankScore": "1"}])
        out = normalize_records(df)
        assert out[DATE_LABEL_COL].iloc[0] == "5 Jan"
        assert INSTANT_COL in out.columns

    def test_unparseable_timestamp_sorts_last_by_default(self):
        df = _raw([
            {"recordedAt": "garbage", "steamName": "Bad", "rankScore": "1"},
            {"recordedAt": "2024-01-02 10:00:00", "steamName": "Alice", "rankScore": "1"},
            {"recordedAt": "2024-01-01 10:00:00", "steamName": "Bob", "rankScore": "1"},
        ])
        out = normalize_records(df)
        assert out["steamName"].tolist() == ["Bob", "Alice", "Bad"]
        assert out[DATE_LABEL_COL].iloc[-1] == INVALID_DATE_LABEL

    def test_unparseable_timestamp_dropped_when_strict(self):
        df = _raw([
            {"recordedAt": "garbage", "steamName": "Bad", "rankScore": "1"},
            {"recordedAt": "2024-01-02 10:00:00", "steamName": "Alice", "rankScore": "1"},
        ])
        out = normalize_records(df, drop_unparseable=True)
        assert out["steamName"].tolist() == ["Alice"]

    def test_case_varying_headers(self):
        df = pd.DataFrame([{"RECORDEDAT": "2024-01-01 10:00:00", "SteamName": "Alice", "RankScore": "31000"}])
        out = normalize_records(df)
        assert out["steamName"].tolist() == ["Alice"]

    def test_index_is_reset(self):
        df = _raw([
            {"recordedAt": "2024-01-02 10:00:00", "steamName": "Alice", "rankScore": "1"},
            {"recordedAt": "2024-01-01 10:00:00", "steamName": "Alice", "rankScore": "1"},
        ])
        out = normalize_records(df)
        assert out.index.tolist() == [0, 1]

    def test_does_not_mutate_input(self):
        df = _raw([{"recordedAt": "2024-01-01 10:00:00", "steamName": "Alice", "rankScore": "1", "season": "s1"}])
        normalize_records(df)
        assert df["season"].iloc[0] == "s1"
        assert INSTANT_COL not in df.columns

    def test_empty_input(self):
        out = normalize_records(_raw([]))
        assert out.empty
        assert DATE_LABEL_COL in out.columns

    def test_missing_required_column_gives_empty(self):
        out = normalize_records(pd.DataFrame({"recordedAt": ["2024-01-01"], "rankScore": ["1"]}))
        assert out.empty

    def test_all_rows_invalid_gives_empty(self):
        df = _raw([{"recordedAt": None, "steamName": None, "rankScore": "1"}])
        assert normalize_records(df).empty
