"""Data loading layer: reads the rank history CSV with Streamlit caching."""

import logging
import os
from collections.abc import Callable

import pandas as pd
import streamlit as st

logger = logging.getLogger(__name__)

# Cache TTL
_TTL_RANKS = 900  # 15 min

DEFAULT_CSV_SOURCE = "rank_data.csv"
CSV_SOURCE_ENV = "RANK_DATA_CSV"

# Canonical column contract
TIMESTAMP_COL = "recordedAt"
PLAYER_COL = "steamName"
SCORE_COL = "rankScore"
RANK_COL = "rank"
LEAGUE_COL = "league"
SEASON_COL = "season"

REQUIRED_COLS = [TIMESTAMP_COL, PLAYER_COL, SCORE_COL]
OPTIONAL_COLS = [RANK_COL, LEAGUE_COL, SEASON_COL]
CANONICAL_COLS = REQUIRED_COLS + OPTIONAL_COLS

_LOAD_ERRORS = (
    OSError,
    UnicodeDecodeError,
    pd.errors.ParserError,
    pd.errors.EmptyDataError,
)


def get_csv_source() -> str:
    """Return the configured CSV path or URL (env override, then default)."""
    return os.environ.get(CSV_SOURCE_ENV, "").strip() or DEFAULT_CSV_SOURCE


def _empty_rank_df(reason: str | None = None) -> pd.DataFrame:
    df = pd.DataFrame(columns=CANONICAL_COLS)
    if reason:
        df.attrs["warning"] = reason
    return df


def _find_col_case_insensitive(df: pd.DataFrame, candidates: list[str]) -> str | None:
    lowered = {str(col).strip().lower(): col for col in df.columns}
    for candidate in candidates:
        key = str(candidate).strip().lower()
        if key in lowered:
            return str(lowered[key])
    return None


def canonicalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename producer headers onto the canonical column names.

    Matching is case-insensitive and ignores surrounding whitespace.  Optional
    columns that are absent are added as all-NA so downstream code can rely on
    the full contract.  Unknown columns are kept as-is.
    """
    renames: dict[str, str] = {}
    for canonical in CANONICAL_COLS:
        found = _find_col_case_insensitive(df, [canonical])
        if found is not None and found != canonical:
            renames[found] = canonical

    out = df.rename(columns=renames)
    for col in OPTIONAL_COLS:
        if col not in out.columns:
            out[col] = pd.Series(pd.NA, index=out.index, dtype="object")
    return out


def missing_required_cols(df: pd.DataFrame) -> list[str]:
    return [c for c in REQUIRED_COLS if c not in df.columns]


# ---------------------------------------------------------------------------
# Pure fetch function (no cache; called by the cached wrapper, testable directly)
# ---------------------------------------------------------------------------

def _fetch_rank_csv(source: str) -> pd.DataFrame:
    """Return the raw rank history table read from *source* (path or URL).

    Every column is read as text; numeric coercion happens in the normalizer.
    On any read/parse failure a diagnostic is logged and an empty frame with
    ``attrs["warning"]`` is returned instead of raising.
    """
    try:
        df = pd.read_csv(source, dtype=str, skip_blank_lines=True)
    except _LOAD_ERRORS as exc:
        logger.error("Error loading CSV from %s: %s", source, exc)
        return _empty_rank_df(reason=f"Could not load rank data from {source}.")

    df = canonicalize_columns(df)
    missing = missing_required_cols(df)
    if missing:
        logger.warning("CSV from %s is missing required columns: %s", source, missing)
        return _empty_rank_df(reason=f"Rank data is missing required columns: {', '.join(missing)}.")

    logger.info("Loaded %d rows from %s", len(df), source)
    return df


# ---------------------------------------------------------------------------
# Cached wrapper (used by the Streamlit app)
# ---------------------------------------------------------------------------

@st.cache_data(ttl=_TTL_RANKS, show_spinner=False)
def get_rank_data(source: str) -> pd.DataFrame:
    """Cached raw rank history table."""
    return _fetch_rank_csv(source)


def frame_fingerprint(df: pd.DataFrame) -> int:
    """Content hash of *df*: headers, cell values and row order."""
    cells = pd.util.hash_pandas_object(df.reset_index(drop=True), index=True).sum()
    headers = pd.util.hash_pandas_object(pd.Series(df.columns, dtype=object), index=False).sum()
    return int(cells) ^ int(headers)


def get_normalized_cached(
    df: pd.DataFrame,
    cache: dict[tuple[str, int], pd.DataFrame],
    source: str,
    normalize: Callable[[pd.DataFrame], pd.DataFrame],
    log_fn: Callable[[str], None] | None = None,
) -> pd.DataFrame:
    """Return a memoized normalized DataFrame keyed by (source, content hash).

    Only the latest entry is kept: a refreshed CSV replaces the previous one.
    """
    cache_key = (source, frame_fingerprint(df))
    if cache_key in cache:
        if log_fn is not None:
            log_fn(f"[normalize_records] cache hit: {cache_key}")
        return cache[cache_key]

    if log_fn is not None:
        log_fn(f"[normalize_records] cache miss: {cache_key}")

    normalized = normalize(df)
    cache.clear()
    cache[cache_key] = normalized
    return normalized
