"""Glossary definitions and threshold explainer for rank-history.

All content lives in module-level constants so it can be tested independently
of a Streamlit runtime. The render_glossary() function wires it into the UI.
"""

from __future__ import annotations

import streamlit as st

from stats.views import VIEW_REGISTRY, ViewSpec

# ---------------------------------------------------------------------------
# Term definitions
# ---------------------------------------------------------------------------

TERM_DEFINITIONS: dict[str, str] = {
    "View": (
        "Which value the y-axis shows: the raw Rank Score, or the player's "
        "position on the leaderboard. Switching views keeps the same players "
        "and dates."
    ),
    "Season": (
        "A competitive period. Snapshots are tagged with the season they were "
        "recorded in; choose All Seasons to see every snapshot on one timeline."
    ),
    "Series": (
        "One player's line: every snapshot recorded for that player in the "
        "selected season, oldest first. Several snapshots on the same day all "
        "appear on that day."
    ),
    "Annotation": (
        "A shaded zone and a threshold line drawn behind the data to mark a "
        "notable range."
    ),
}

VIEW_NOTES: dict[str, str] = {
    "score": "Higher is better. The shaded band marks Diamond league (40,000+).",
    "rank": "Lower is better, so the axis is flipped and rank 1 sits at the top. "
            "The shaded band marks the top 500.",
}


def _format_bound(value: float) -> str:
    return f"{int(value):,}" if float(value).is_integer() else f"{value:,}"


def threshold_caption(spec: ViewSpec) -> str:
    """Return a one-line summary of a view's overlays, e.g. 'Zone 1–500 · Line at 500'."""
    parts: list[str] = []
    for annotation in spec.annotations:
        if annotation.kind == "box":
            parts.append(f"Zone {_format_bound(annotation.y_min)}–{_format_bound(annotation.y_max)}")
        else:
            parts.append(f"Line at {_format_bound(annotation.y_min)}")
    return " · ".join(parts)


def render_glossary() -> None:
    with st.expander("Glossary & How to Read the Chart", expanded=False):
        st.markdown("#### Views")
        for key, spec in VIEW_REGISTRY.items():
            st.markdown(f"**{spec.label}**")
            st.markdown(VIEW_NOTES.get(key, ""))
            st.caption(threshold_caption(spec))
        st.divider()

        st.markdown("#### Terms")
        for term, definition in TERM_DEFINITIONS.items():
            st.markdown(f"**{term}**: {definition}")
