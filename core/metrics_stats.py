from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

import pandas as pd

from core.charts import day_chart, distribution_chart, site_chart, to_vega_spec
from core.config import StatusLabels
from core.scores import UNSCORED_TOKENS


GROUP_COLUMNS = ["name", "convoked", "presented", "not_presented", "approved", "failed", "pass_rate"]


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def _pct(part: int, whole: int) -> float:
    return part / whole * 100 if whole else 0.0


def _status(df: pd.DataFrame) -> pd.Series:
    return df["provisional_status"].fillna("").astype(str).str.strip().str.upper()


def is_presented(df: pd.DataFrame, labels: StatusLabels = StatusLabels()) -> pd.Series:
    """Sat the exam: has a real phase-1 total, or carries a pass/fail verdict."""
    if df.empty:
        return pd.Series(dtype=bool, index=df.index)
    total = df["total_phase1"].fillna("").astype(str).str.strip()
    scored = ~total.isin(UNSCORED_TOKENS)
    verdict = _status(df).isin({labels.passed.strip().upper(), labels.failed.strip().upper()})
    return scored | verdict


def is_approved(df: pd.DataFrame, labels: StatusLabels = StatusLabels()) -> pd.Series:
    if df.empty:
        return pd.Series(dtype=bool, index=df.index)
    return _status(df) == labels.passed.strip().upper()


def summarize(df: pd.DataFrame, labels: StatusLabels = StatusLabels()) -> Dict[str, Any]:
    convoked = int(len(df))
    presented = int(is_presented(df, labels).sum())
    approved = int(is_approved(df, labels).sum())
    presentation_rate = round_half_up(_pct(presented, convoked), 1)
    return {
        "convoked": convoked,
        "presented": presented,
        "not_presented": convoked - presented,
        "approved": approved,
        "failed": presented - approved,
        "presentation_rate": presentation_rate,
        "absence_rate": round_half_up(100 - presentation_rate, 1) if convoked else 0.0,
        "pass_rate": round_half_up(_pct(approved, presented), 1),
    }


def group_stats(df: pd.DataFrame, column: str, labels: StatusLabels = StatusLabels()) -> pd.DataFrame:
    """Counts per trimmed non-empty value of ``column``, in first-appearance order."""
    if df.empty or column not in df.columns:
        return pd.DataFrame(columns=GROUP_COLUMNS)

    flags = pd.DataFrame(
        {
            "name": df[column].fillna("").astype(str).str.strip(),
            "presented": is_presented(df, labels).astype(int),
            "approved": is_approved(df, labels).astype(int),
        }
    )
    flags = flags[flags["name"] != ""]
    if flags.empty:
        return pd.DataFrame(columns=GROUP_COLUMNS)

    grouped = (
        flags.groupby("name", sort=False)
        .agg(convoked=("presented", "size"), presented=("presented", "sum"), approved=("approved", "sum"))
        .reset_index()
    )
    grouped["not_presented"] = grouped["convoked"] - grouped["presented"]
    grouped["failed"] = grouped["presented"] - grouped["approved"]
    grouped["pass_rate"] = [
        int(round_half_up(_pct(a, p), 0)) for a, p in zip(grouped["approved"], grouped["presented"])
    ]
    for col in ["convoked", "presented", "not_presented", "approved", "failed"]:
        grouped[col] = grouped[col].astype(int)
    return grouped[GROUP_COLUMNS]


def site_groups(df: pd.DataFrame, labels: StatusLabels = StatusLabels()) -> List[Dict[str, Any]]:
    grouped = group_stats(df, "exam_site", labels)
    if grouped.empty:
        return []
    return grouped.sort_values("convoked", ascending=False, kind="stable").to_dict(orient="records")


def day_groups(df: pd.DataFrame, labels: StatusLabels = StatusLabels()) -> List[Dict[str, Any]]:
    grouped = group_stats(df, "exam_day", labels)
    if grouped.empty:
        return []
    return grouped.sort_values("name", kind="stable").to_dict(orient="records")


def status_distribution(summary: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [
        {"name": "Approved", "value": summary["approved"]},
        {"name": "Failed", "value": summary["failed"]},
        {"name": "Not presented", "value": summary["not_presented"]},
    ]


def compute_statistics(df: pd.DataFrame, labels: StatusLabels = StatusLabels()) -> Dict[str, Any]:
    """Statistics payload over the complete dataset, independent of any table query."""
    summary = summarize(df, labels)
    by_site = site_groups(df, labels)
    by_day = day_groups(df, labels)
    distribution = status_distribution(summary)

    charts: Dict[str, Any] = {}
    if by_site:
        charts["by_site"] = to_vega_spec(site_chart(by_site))
    if by_day:
        charts["by_day"] = to_vega_spec(day_chart(by_day))
    if summary["convoked"]:
        charts["distribution"] = to_vega_spec(distribution_chart(distribution))

    return {
        "summary": summary,
        "by_site": by_site,
        "by_day": by_day,
        "distribution": distribution,
        "charts": charts,
    }
