from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional


DEFAULT_CSV_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vRGCk1vz2oHVRJ0C_NPEg4KuE3iWJZFYO0u3LZ5-bbY5wdy5Zn4fE5lN_QyNI8ACo1f-429O-zBR2gX/pub?output=csv"
)
DEFAULT_PAGE_SIZE = 100
DEFAULT_TIMEOUT = 30.0
EXPORT_FILE_NAME = "resultados_fase1.csv"


@dataclass(frozen=True)
class StatusLabels:
    """Source vocabulary for the status columns (compared trimmed and upper-cased)."""

    passed: str = "APTO/A"
    failed: str = "NO APTO/A"
    admitted: str = "ADMITIDO/A"
    excluded: str = "EXCLUIDO/A"


@dataclass(frozen=True)
class Settings:
    csv_url: str = DEFAULT_CSV_URL
    request_timeout: float = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE
    labels: StatusLabels = field(default_factory=StatusLabels)


def _label(env: Mapping[str, str], name: str, default: str) -> str:
    value = (env.get(name) or "").strip()
    return value or default


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env

    timeout = env.get("RESULTS_REQUEST_TIMEOUT", DEFAULT_TIMEOUT)
    try:
        timeout = float(timeout)
    except Exception:
        timeout = DEFAULT_TIMEOUT
    if timeout <= 0:
        timeout = DEFAULT_TIMEOUT

    page_size = env.get("RESULTS_PAGE_SIZE", DEFAULT_PAGE_SIZE)
    try:
        page_size = int(page_size)
    except Exception:
        page_size = DEFAULT_PAGE_SIZE
    page_size = max(1, min(5000, page_size))

    defaults = StatusLabels()
    labels = StatusLabels(
        passed=_label(env, "RESULTS_PASS_LABEL", defaults.passed),
        failed=_label(env, "RESULTS_FAIL_LABEL", defaults.failed),
        admitted=_label(env, "RESULTS_ADMITTED_LABEL", defaults.admitted),
        excluded=_label(env, "RESULTS_EXCLUDED_LABEL", defaults.excluded),
    )
    return Settings(
        csv_url=_label(env, "RESULTS_CSV_URL", DEFAULT_CSV_URL),
        request_timeout=timeout,
        page_size=page_size,
        labels=labels,
    )
