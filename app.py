import logging

import streamlit as st

from data.loader import get_csv_source, get_normalized_cached, get_rank_data
from stats.records import normalize_records
from stats.seasons import season_option_label
from stats.session import get_session
from stats.views import VIEW_OPTIONS, view_label
from ui.components import build_rank_chart, render_rank_chart
from ui.glossary import render_glossary

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("rank_history")

st.set_page_config(
    page_title="Rank History",
    page_icon="📈",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_NORMALIZED_CACHE_KEY = "_normalized_records_cache"


# ---------------------------------------------------------------------------
# Load + normalize
# ---------------------------------------------------------------------------

source = get_csv_source()

with st.spinner("Loading rank history…"):
    raw_df = get_rank_data(source)

if "warning" in raw_df.attrs:
    st.warning(raw_df.attrs["warning"])

normalized_cache = st.session_state.setdefault(_NORMALIZED_CACHE_KEY, {})
records = get_normalized_cached(
    raw_df,
    normalized_cache,
    source,
    normalize_records,
    log_fn=logger.debug,
)

session = get_session(st.session_state, figure_builder=build_rank_chart)
session.load(records)
state = session.state


# ---------------------------------------------------------------------------
# Controls
# ---------------------------------------------------------------------------

st.title("📈 Rank History")

season_col, view_col = st.columns([2, 3])

with season_col:
    selected_season = st.selectbox(
        "Season",
        options=state.season_options,
        index=state.season_options.index(state.season),
        format_func=season_option_label,
        key="season_select",
    )

with view_col:
    selected_view = st.radio(
        "View",
        options=VIEW_OPTIONS,
        index=VIEW_OPTIONS.index(state.view),
        format_func=view_label,
        horizontal=True,
        key="view_toggle",
    )

if selected_season is not None and selected_season != state.season:
    session.select_season(selected_season)

if selected_view != state.view:
    session.select_view(selected_view)


# ---------------------------------------------------------------------------
# Chart
# ---------------------------------------------------------------------------

render_rank_chart(session.figure)

if not state.chart_data.is_empty:
    st.caption(
        f"{len(state.chart_data.series)} players · "
        f"{len(state.chart_data.labels)} days · "
        f"{season_option_label(state.season)}"
    )

st.divider()

render_glossary()
