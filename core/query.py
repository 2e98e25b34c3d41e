from __future__ import annotations

import unicodedata
from dataclasses import asdict, dataclass, replace
from typing import Dict, List, Mapping, Optional

import pandas as pd

from core.config import DEFAULT_PAGE_SIZE
from core.records import CANDIDATE_FIELDS


ALL = "ALL"
SORT_KEYS = ("rank",) + CANDIDATE_FIELDS
DIRECTIONS = ("asc", "desc")
FILTER_FIELDS = ("search_text", "site", "status")


@dataclass(frozen=True)
class QueryState:
    search_text: str = ""
    site: str = ALL
    status: str = ALL
    sort_key: str = "rank"
    sort_direction: str = "asc"
    visible_count: int = DEFAULT_PAGE_SIZE


def normalize_query(raw: Mapping[str, object], *, page_size: int = DEFAULT_PAGE_SIZE) -> QueryState:
    search_text = str(raw.get("search_text") or "")
    site = str(raw.get("site") or ALL)
    status = str(raw.get("status") or ALL)

    sort_key = str(raw.get("sort_key") or "rank")
    if sort_key not in SORT_KEYS:
        sort_key = "rank"
    sort_direction = str(raw.get("sort_direction") or "asc").lower()
    if sort_direction not in DIRECTIONS:
        sort_direction = "asc"

    visible_count = raw.get("visible_count", page_size)
    try:
        visible_count = int(visible_count)
    except Exception:
        visible_count = page_size
    if visible_count < 1:
        visible_count = page_size

    return QueryState(
        search_text=search_text,
        site=site,
        status=status,
        sort_key=sort_key,
        sort_direction=sort_direction,
        visible_count=visible_count,
    )


def update_filters(state: QueryState, *, page_size: int = DEFAULT_PAGE_SIZE, **changes: str) -> QueryState:
    """New state with the given search/site/status; a changed filter rewinds paging."""
    unknown = set(changes) - set(FILTER_FIELDS)
    if unknown:
        raise TypeError(f"unknown filter field(s): {', '.join(sorted(unknown))}")
    new_state = replace(state, **changes)
    if any(getattr(new_state, f) != getattr(state, f) for f in FILTER_FIELDS):
        new_state = replace(new_state, visible_count=page_size)
    return new_state


def toggle_sort(state: QueryState, key: str) -> QueryState:
    if key not in SORT_KEYS:
        return state
    direction = "asc"
    if state.sort_key == key and state.sort_direction == "asc":
        direction = "desc"
    return replace(state, sort_key=key, sort_direction=direction)


def show_more(state: QueryState, *, page_size: int = DEFAULT_PAGE_SIZE) -> QueryState:
    return replace(state, visible_count=state.visible_count + page_size)


def fold_text(value: object) -> str:
    """Lower-case and strip accents: "José" -> "jose"."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    decomposed = unicodedata.normalize("NFD", str(value))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).lower()


def apply_query(df: pd.DataFrame, state: QueryState) -> pd.DataFrame:
    """Filtered and ordered copy of the candidate frame for the table view."""
    if df.empty:
        return df.copy()

    mask = pd.Series(True, index=df.index)
    needle = fold_text(state.search_text)
    if needle:
        mask &= df["full_name"].map(fold_text).str.contains(needle, regex=False)
    if state.site != ALL:
        mask &= df["exam_site"] == state.site
    if state.status != ALL:
        mask &= df["provisional_status"] == state.status

    view = df[mask]
    sort_key = state.sort_key if state.sort_key in df.columns else "rank"
    return view.sort_values(
        sort_key,
        ascending=state.sort_direction != "desc",
        kind="stable",
        na_position="last",
    ).copy()


def visible_rows(view: pd.DataFrame, state: QueryState) -> pd.DataFrame:
    return view.head(max(0, state.visible_count))


def _distinct(df: pd.DataFrame, column: str) -> List[str]:
    if df.empty or column not in df.columns:
        return [ALL]
    values = {str(v) for v in df[column].dropna() if str(v)}
    return [ALL] + sorted(values)


def distinct_sites(df: pd.DataFrame) -> List[str]:
    return _distinct(df, "exam_site")


def distinct_statuses(df: pd.DataFrame) -> List[str]:
    return _distinct(df, "provisional_status")


def query_chips(state: QueryState, total: Optional[int] = None) -> List[str]:
    parts = [
        f"Search: {state.search_text}" if state.search_text else "Search: none",
        "Site: All" if state.site == ALL else f"Site: {state.site}",
        "Status: All" if state.status == ALL else f"Status: {state.status}",
        f"Sort: {state.sort_key} {state.sort_direction}",
    ]
    if total is not None:
        parts.append(f"Rows: {total}")
    return parts


def query_params(state: QueryState, *, page_size: int = DEFAULT_PAGE_SIZE) -> Dict[str, str]:
    """URL parameters for the non-default parts of ``state``."""
    defaults = asdict(QueryState(visible_count=page_size))
    return {k: str(v) for k, v in asdict(state).items() if v != defaults[k]}
