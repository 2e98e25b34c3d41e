from __future__ import annotations

import csv
import io
import logging
from typing import List, Optional

import pandas as pd
import requests

from core.config import Settings, StatusLabels, load_settings
from core.ranking import assign_ranks
from core.records import CANDIDATE_FIELDS, FIELD_LABELS, normalize_frame


RANK_EXPORT_COLUMN = "RANKING"

logger = logging.getLogger(__name__)


class DatasetLoadError(RuntimeError):
    """The results sheet could not be fetched or parsed; nothing was loaded."""


def fetch_csv_text(url: str, *, timeout: float) -> str:
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    if not response.encoding or response.encoding.lower() == "iso-8859-1":
        response.encoding = "utf-8"
    return response.text


def read_rows(csv_text: str) -> pd.DataFrame:
    """Parse CSV text into a frame of raw strings keyed by the source headers."""
    text = csv_text.lstrip("\ufeff")
    return pd.read_csv(
        io.StringIO(text),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        index_col=False,
    )


def parse_candidates(csv_text: str, labels: StatusLabels = StatusLabels()) -> pd.DataFrame:
    raw = read_rows(csv_text)
    return assign_ranks(normalize_frame(raw, labels))


def load_candidates(settings: Optional[Settings] = None, *, url: Optional[str] = None) -> pd.DataFrame:
    """Fetch and parse the whole dataset once; any failure is a single DatasetLoadError."""
    settings = settings or load_settings()
    url = url or settings.csv_url
    try:
        csv_text = fetch_csv_text(url, timeout=settings.request_timeout)
        df = parse_candidates(csv_text, settings.labels)
    except requests.RequestException as exc:
        logger.exception("fetching results sheet failed")
        raise DatasetLoadError(f"could not download results: {exc}") from exc
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        logger.exception("parsing results sheet failed")
        raise DatasetLoadError(f"could not parse results: {exc}") from exc

    scored = int(df["rank"].notna().sum()) if not df.empty else 0
    logger.info("loaded %d candidates (%d scored) from %s", len(df), scored, url)
    return df


def export_frame(view: pd.DataFrame) -> pd.DataFrame:
    cols: List[str] = [c for c in CANDIDATE_FIELDS if c in view.columns]
    out = view[cols].rename(columns=FIELD_LABELS)
    if "rank" in view.columns:
        out[RANK_EXPORT_COLUMN] = view["rank"].astype("Int64")
    return out


def export_csv(view: pd.DataFrame) -> str:
    """Serialize the current table view with the source headers."""
    return export_frame(view).to_csv(
        index=False,
        sep=",",
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\r\n",
        na_rep="",
    )
