from __future__ import annotations

import math

import pandas as pd
import pytest

from core.scores import is_unscored_text, parse_score, parse_score_series


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("8,5", 8.5),
        ("8,50", 8.5),
        ("10", 10.0),
        (" 7,25 ", 7.25),
        ("0,0", 0.0),
    ],
)
def test_parse_score_decimal_comma(raw, expected):
    assert parse_score(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["", "---", "#N/A", None, float("nan")])
def test_sentinels_are_unscored(raw):
    assert is_unscored_text(raw)
    assert parse_score(raw) is None


@pytest.mark.parametrize(
    "raw",
    ["abc", "#n/a", "1,234,5", "-", "nan", "inf", "8,5 pts", "1_0", "1_000,5", "\u0661\u0662", "\uff18,5", "1e3", "8,"],
)
def test_unparseable_fails_closed(raw):
    assert parse_score(raw) is None


def test_sentinel_match_is_exact():
    assert not is_unscored_text(" --- ")
    assert parse_score(" --- ") is None


def test_parse_score_series_uses_nan_for_unscored():
    out = parse_score_series(pd.Series(["8,5", "---", "x", "9"]))
    assert out.dtype == float
    assert out.iloc[0] == 8.5
    assert math.isnan(out.iloc[1]) and math.isnan(out.iloc[2])
    assert out.iloc[3] == 9.0
