from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

OUTCOME_COLORS = {"Approved": "#10b981", "Failed": "#f43f5e", "Not presented": "#94a3b8"}


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def _long_counts(groups: List[Dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame(groups, columns=["name", "convoked", "presented", "approved", "failed", "pass_rate"])
    return df.melt(
        id_vars=["name", "pass_rate"],
        value_vars=["convoked", "presented", "approved"],
        var_name="metric",
        value_name="count",
    )


def site_chart(groups: List[Dict[str, Any]]) -> alt.Chart:
    long_df = _long_counts(groups)
    order = [g["name"] for g in groups]
    return (
        alt.Chart(long_df)
        .mark_bar()
        .encode(
            y=alt.Y("name:N", title="Site", sort=order),
            x=alt.X("count:Q", title="Candidates"),
            yOffset=alt.YOffset("metric:N", sort=["convoked", "presented", "approved"]),
            color=alt.Color("metric:N", title="Metric"),
            tooltip=["name", "metric", alt.Tooltip("count:Q", format=","), alt.Tooltip("pass_rate:Q", title="% approved")],
        )
        .properties(height=max(160, 60 * len(order)))
    )


def day_chart(groups: List[Dict[str, Any]]) -> alt.Chart:
    long_df = _long_counts(groups)
    bars = (
        alt.Chart(long_df)
        .mark_bar()
        .encode(
            x=alt.X("name:N", title="Exam day", sort=None),
            xOffset=alt.XOffset("metric:N", sort=["convoked", "presented", "approved"]),
            y=alt.Y("count:Q", title="Candidates"),
            color=alt.Color("metric:N", title="Metric"),
            tooltip=["name", "metric", alt.Tooltip("count:Q", format=",")],
        )
    )
    rate = (
        alt.Chart(pd.DataFrame(groups, columns=["name", "pass_rate"]))
        .mark_line(point=True, color="#f59e0b")
        .encode(
            x=alt.X("name:N", sort=None),
            y=alt.Y("pass_rate:Q", title="% approved", scale=alt.Scale(domain=[0, 100])),
            tooltip=["name", alt.Tooltip("pass_rate:Q", title="% approved")],
        )
    )
    return alt.layer(bars, rate).resolve_scale(y="independent").properties(height=260)


def distribution_chart(slices: List[Dict[str, Any]]) -> alt.Chart:
    df = pd.DataFrame(slices, columns=["name", "value"])
    return (
        alt.Chart(df)
        .mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("value:Q"),
            color=alt.Color(
                "name:N",
                title="Outcome",
                scale=alt.Scale(domain=list(OUTCOME_COLORS), range=list(OUTCOME_COLORS.values())),
            ),
            tooltip=["name", alt.Tooltip("value:Q", format=",")],
        )
        .properties(height=260)
    )
