"""Row normalization for raw rank history tables.

normalize_records() is the single entry point: it takes the raw frame read
by data.loader and returns the cleaned, chronologically sorted frame every
other stats module consumes.

Timestamp note
--------------
Timestamps are parsed best-effort.  A row whose timestamp cannot be parsed is
kept and sorts after every parseable row (ties keep input order); pass
``drop_unparseable=True`` to discard such rows instead.  Its x-label is
``INVALID_DATE_LABEL``.

The x-label is derived once here (``_date_label``) from the date component
of the timestamp only, so time-of-day never leaks into the axis.
"""

from __future__ import annotations

import pandas as pd

from data.loader import (
    CANONICAL_COLS,
    PLAYER_COL,
    RANK_COL,
    SCORE_COL,
    SEASON_COL,
    TIMESTAMP_COL,
    canonicalize_columns,
    missing_required_cols,
)

INSTANT_COL = "_instant"
DATE_LABEL_COL = "_date_label"
INVALID_DATE_LABEL = "Invalid Date"


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _clean_text(series: pd.Series) -> pd.Series:
    """Strip strings and turn blanks/NaN into pd.NA."""
    def _one(value: object) -> object:
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return pd.NA
        text = str(value).strip()
        return text if text else pd.NA

    return series.map(_one).astype("object")


def _normalize_season(value: object) -> object:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return pd.NA
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text.upper() if text else pd.NA


def format_date_label(timestamp: object) -> str:
    """Return the day/month label for *timestamp*, e.g. ``'5 Jan'``.

    Only the date component (text before the first space) is used.
    """
    if timestamp is None or (not isinstance(timestamp, str) and pd.isna(timestamp)):
        return INVALID_DATE_LABEL
    date_part = str(timestamp).strip().split(" ")[0]
    parsed = pd.to_datetime(date_part, errors="coerce")
    if pd.isna(parsed):
        return INVALID_DATE_LABEL
    return f"{parsed.day} {parsed.strftime('%b')}"


def parse_instants(timestamps: pd.Series) -> pd.Series:
    """Parse timestamps to UTC instants; unparseable values become NaT."""
    if timestamps.empty:
        return pd.Series(pd.NaT, index=timestamps.index, dtype="datetime64[ns, UTC]")
    return pd.to_datetime(timestamps, errors="coerce", utc=True, format="mixed")


def _empty_records() -> pd.DataFrame:
    return pd.DataFrame(columns=CANONICAL_COLS + [INSTANT_COL, DATE_LABEL_COL])


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------

def normalize_records(df: pd.DataFrame, drop_unparseable: bool = False) -> pd.DataFrame:
    """Return a cleaned copy of *df* sorted by timestamp ascending.

    - rows without a timestamp or player identifier are dropped silently;
      a whitespace-only player counts as missing, other players are kept
      verbatim (" Alice " and "Alice" are distinct)
    - season is upper-cased where present and left as NA where absent
    - ``rankScore`` and ``rank`` are coerced to numeric (invalid → NaN)
    - derived ``_instant`` (UTC) and ``_date_label`` columns are added
    - sort is stable: equal instants keep their input order
    """
    out = canonicalize_columns(df)
    if missing_required_cols(out) or out.empty:
        return _empty_records()

    out = out.copy()
    out[TIMESTAMP_COL] = _clean_text(out[TIMESTAMP_COL])
    # Player identifiers are kept as written; blank ones only decide the drop.
    has_player = _clean_text(out[PLAYER_COL]).notna()
    out = out[out[TIMESTAMP_COL].notna() & has_player].copy()
    if out.empty:
        return _empty_records()

    out[SEASON_COL] = out[SEASON_COL].map(_normalize_season).astype("object")
    out[SCORE_COL] = pd.to_numeric(out[SCORE_COL], errors="coerce")
    out[RANK_COL] = pd.to_numeric(out[RANK_COL], errors="coerce")

    out[INSTANT_COL] = parse_instants(out[TIMESTAMP_COL])
    if drop_unparseable:
        out = out[out[INSTANT_COL].notna()].copy()
    out[DATE_LABEL_COL] = out[TIMESTAMP_COL].map(format_date_label)

    out = out.sort_values(INSTANT_COL, kind="mergesort", na_position="last")
    return out.reset_index(drop=True)
