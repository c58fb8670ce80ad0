from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

PALETTE = ["#3B82F6", "#10B981", "#F59E0B", "#EF4444", "#8B5CF6", "#EC4899"]


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def pairs_frame(pairs: Sequence[Tuple[str, int]], value_col: str = "value") -> pd.DataFrame:
    return pd.DataFrame(list(pairs), columns=["name", value_col])


def pairs_records(pairs: Sequence[Tuple[str, int]], value_col: str = "value") -> List[Dict[str, Any]]:
    return [{"name": name, value_col: int(value)} for name, value in pairs]


def share_pie(pairs: Sequence[Tuple[str, int]], title: str) -> alt.Chart:
    df = pairs_frame(pairs)
    total = int(df["value"].sum()) if not df.empty else 0
    df["share"] = df["value"] / total if total else 0.0
    df["index"] = range(len(df))
    order = df["name"].tolist()
    return (
        alt.Chart(df, title=title)
        .mark_arc(outerRadius=100)
        .encode(
            theta=alt.Theta("value:Q"),
            color=alt.Color("name:N", title=None, sort=order, scale=alt.Scale(range=PALETTE)),
            order=alt.Order("index:Q"),
            tooltip=["name:N", "value:Q", alt.Tooltip("share:Q", title="Share", format=".0%")],
        )
        .properties(height=300)
    )


def count_bar(pairs: Sequence[Tuple[str, int]], title: str) -> alt.Chart:
    df = pairs_frame(pairs, "count")
    return (
        alt.Chart(df, title=title)
        .mark_bar(color="#3B82F6")
        .encode(
            x=alt.X("name:N", title=None, sort=None, axis=alt.Axis(labelAngle=-45)),
            y=alt.Y("count:Q", title="Projects", axis=alt.Axis(tickMinStep=1, gridDash=[3, 3])),
            tooltip=["name:N", "count:Q"],
        )
        .properties(height=300)
    )


def ageing_bar(pairs: Sequence[Tuple[str, int]], title: str) -> alt.Chart:
    df = pairs_frame(pairs, "ageing")
    return (
        alt.Chart(df, title=title)
        .mark_bar(color="#F59E0B")
        .encode(
            y=alt.Y("name:N", title=None, sort=None, axis=alt.Axis(labelLimit=120)),
            x=alt.X("ageing:Q", title="Days", axis=alt.Axis(gridDash=[3, 3])),
            tooltip=["name:N", alt.Tooltip("ageing:Q", title="Ageing (days)")],
        )
        .properties(height=300)
    )
