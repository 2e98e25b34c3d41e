from __future__ import annotations

import html
from typing import Iterable, Optional


def chip_row_html(texts: Iterable[str]) -> str:
    """Chip markup with every label HTML-escaped."""
    chips = "".join(f"<span class='chip'>{html.escape(str(t))}</span>" for t in texts)
    return f"<div class='chip-row'>{chips}</div>"


def format_pct(value: Optional[float], suffix: str = "") -> str:
    if value is None:
        return "N/A"
    text = f"{float(value):.1f}%"
    return f"{text} {suffix}" if suffix else text
