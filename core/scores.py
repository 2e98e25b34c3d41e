from __future__ import annotations

import re
from typing import Optional

import pandas as pd


UNSCORED_TOKENS = frozenset({"", "---", "#N/A"})
SCORE_PATTERN = re.compile(r"[+-]?\d+(?:\.\d+)?", re.ASCII)


def is_unscored_text(value: object) -> bool:
    """True for the placeholders the source uses when no score was captured."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return True
    return str(value) in UNSCORED_TOKENS


def parse_score(value: object) -> Optional[float]:
    """Parse a decimal-comma score like "8,75" -> 8.75; None means unscored."""
    if is_unscored_text(value):
        return None
    text = str(value).strip().replace(",", ".", 1)
    if not SCORE_PATTERN.fullmatch(text):
        return None
    return float(text)


def parse_score_series(values: pd.Series) -> pd.Series:
    parsed = values.map(parse_score)
    return pd.to_numeric(parsed, errors="coerce").astype(float)
