from __future__ import annotations

import numpy as np
import pandas as pd


def assign_ranks(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of the candidate frame with a competitive 1-based ``rank``.

    Ranks come from a stable descending sort on ``score`` over the whole
    collection in source order, so equal scores keep source precedence.
    Each row finds its slot through its ``position`` tag, which stays unique
    even when two rows carry identical values. Unscored rows still take a
    slot in the ordering but get ``<NA>``.
    """
    out = df.sort_values("position", kind="stable").copy()
    if out.empty:
        out["rank"] = pd.Series(dtype="Int64")
        return out

    ordered = out.sort_values("score", ascending=False, kind="stable", na_position="last")
    slots = pd.Series(np.arange(1, len(ordered) + 1), index=ordered["position"].to_numpy())
    out["rank"] = out["position"].map(slots).astype("Int64").mask(out["score"].isna())
    return out
