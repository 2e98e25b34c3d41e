import logging
from contextlib import contextmanager
from typing import Optional

import pandas as pd
import streamlit as st
from dotenv import load_dotenv
from pydantic import ValidationError

from core.config import EXPORT_FILE_NAME, StatusLabels, load_settings
from core.data import DatasetLoadError, export_csv, load_candidates
from core.formatting import chip_row_html, format_pct
from core.metrics_stats import compute_statistics
from core.query import (
    SORT_KEYS,
    QueryState,
    apply_query,
    distinct_sites,
    distinct_statuses,
    normalize_query,
    query_chips,
    query_params,
    show_more,
    toggle_sort,
    update_filters,
    visible_rows,
)
from core.records import FIELD_LABELS
from core.schemas import QueryStateModel

load_dotenv()
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

SETTINGS = load_settings()
TABLE_COLUMNS = ["rank"] + list(FIELD_LABELS)
COLUMN_TITLES = {"rank": "#", **FIELD_LABELS}


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


@st.cache_data(show_spinner="Loading results…")
def cached_candidates(url: str) -> pd.DataFrame:
    return load_candidates(SETTINGS, url=url)


def initial_state() -> QueryState:
    try:
        model = QueryStateModel(**dict(st.query_params))
    except ValidationError:
        logger.warning("ignoring invalid query parameters: %s", dict(st.query_params))
        model = QueryStateModel(visible_count=SETTINGS.page_size)
    return normalize_query(model.model_dump(), page_size=SETTINGS.page_size)


def current_state() -> QueryState:
    if "query_state" not in st.session_state:
        st.session_state["query_state"] = initial_state()
    return st.session_state["query_state"]


def set_state(state: QueryState) -> None:
    st.session_state["query_state"] = state
    params = query_params(state, page_size=SETTINGS.page_size)
    if params != dict(st.query_params):
        st.query_params.clear()
        st.query_params.update(params)


def render_stat(col, title: str, value, subtitle: Optional[str] = None):
    col.metric(title, f"{value:,}" if isinstance(value, int) else value, help=subtitle)


def render_statistics(df: pd.DataFrame, labels: StatusLabels):
    stats = compute_statistics(df, labels)
    summary = stats["summary"]
    c1, c2, c3, c4, c5 = st.columns(5)
    render_stat(c1, "Convoked", summary["convoked"])
    render_stat(c2, "Presented", summary["presented"], format_pct(summary["presentation_rate"], "of convoked"))
    render_stat(c3, "Not presented", summary["not_presented"], format_pct(summary["absence_rate"], "absent"))
    render_stat(c4, "Approved", summary["approved"], format_pct(summary["pass_rate"], "of presented"))
    render_stat(c5, "Failed", summary["failed"])

    charts = stats["charts"]
    left, right = st.columns([3, 2])
    with left:
        with card("By site"):
            if "by_site" in charts:
                st.vega_lite_chart(charts["by_site"], use_container_width=True)
            st.dataframe(pd.DataFrame(stats["by_site"]), hide_index=True, use_container_width=True)
    with right:
        with card("Outcome distribution"):
            if "distribution" in charts:
                st.vega_lite_chart(charts["distribution"], use_container_width=True)
    with card("By exam day"):
        if "by_day" in charts:
            st.vega_lite_chart(charts["by_day"], use_container_width=True)
        st.dataframe(pd.DataFrame(stats["by_day"]), hide_index=True, use_container_width=True)


def render_table(df: pd.DataFrame):
    state = current_state()
    page_size = SETTINGS.page_size

    f1, f2, f3 = st.columns([5, 3, 3])
    search_text = f1.text_input("Search candidate", state.search_text, placeholder="Surname or name…")
    sites = distinct_sites(df)
    statuses = distinct_statuses(df)
    site = f2.selectbox("Site", sites, index=sites.index(state.site) if state.site in sites else 0)
    status = f3.selectbox("Status", statuses, index=statuses.index(state.status) if state.status in statuses else 0)
    state = update_filters(state, page_size=page_size, search_text=search_text, site=site, status=status)

    s1, s2 = st.columns([3, 2])
    sort_key = s1.selectbox(
        "Sort by",
        SORT_KEYS,
        index=SORT_KEYS.index(state.sort_key),
        format_func=lambda k: COLUMN_TITLES.get(k, k),
    )
    if sort_key != state.sort_key:
        state = toggle_sort(state, sort_key)
    if s2.button("Reverse order"):
        state = toggle_sort(state, state.sort_key)
    set_state(state)

    view = apply_query(df, state)
    st.markdown(chip_row_html(query_chips(state, len(view))), unsafe_allow_html=True)

    shown = visible_rows(view, state)
    display = shown[TABLE_COLUMNS].rename(columns=COLUMN_TITLES)
    st.dataframe(display, hide_index=True, use_container_width=True)

    b1, b2 = st.columns(2)
    if len(view) > len(shown) and b1.button(f"Show more ({len(view) - len(shown)} remaining)"):
        set_state(show_more(state, page_size=page_size))
        st.rerun()
    b2.download_button(
        "Export CSV",
        data=export_csv(view).encode("utf-8"),
        file_name=EXPORT_FILE_NAME,
        mime="text/csv",
    )


# ---------- UI setup ----------
st.set_page_config(page_title="Phase 1 Results", layout="wide")
inject_base_styles()
st.title("Phase 1 Results")
st.caption("Unofficial lookup of provisional phase 1 results.")

try:
    candidates = cached_candidates(SETTINGS.csv_url)
except DatasetLoadError as exc:
    st.error(f"Could not load the results. Please try again later. ({exc})")
    st.stop()

if candidates.empty:
    st.warning("The results sheet has no candidates yet.")
    st.stop()

tab_table, tab_stats = st.tabs(["Results", "Statistics"])
with tab_table:
    render_table(candidates)
with tab_stats:
    render_statistics(candidates, SETTINGS.labels)
