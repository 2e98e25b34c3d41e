from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Dict, Iterable, List, Mapping

import pandas as pd

from core.config import StatusLabels
from core.scores import parse_score_series


# Exact header labels of the published results sheet.
SOURCE_COLUMNS = {
    "IDENTIFICADOR": "identifier",
    "APELLIDOS Y NOMBRE": "full_name",
    "ADMITIDO/EXCLUIDO": "admission_status",
    "DIA EXAMEN": "exam_day",
    "SEDE DE EXAMEN": "exam_site",
    "AULA/SALA": "exam_room",
    "CONOCIMIENTOS GENERALES": "general_knowledge",
    "CONOCIMIENTOS IDIOMA INGLÉS": "english",
    "APTITUDES": "aptitude",
    "PERSONALIDAD": "personality",
    "TOTAL FASE 1": "total_phase1",
    "ESTADO PROVISIONAL": "provisional_status",
}
FIELD_LABELS = {v: k for k, v in SOURCE_COLUMNS.items()}
SCORE_FIELDS = ("general_knowledge", "english", "aptitude", "personality")


class ProvisionalStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    UNKNOWN = "unknown"


class AdmissionStatus(str, Enum):
    ADMITTED = "admitted"
    EXCLUDED = "excluded"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Candidate:
    identifier: str = ""
    full_name: str = ""
    admission_status: str = ""
    exam_day: str = ""
    exam_site: str = ""
    exam_room: str = ""
    general_knowledge: str = ""
    english: str = ""
    aptitude: str = ""
    personality: str = ""
    total_phase1: str = ""
    provisional_status: str = ""
    position: int = 0

    @property
    def score_fields(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in SCORE_FIELDS}


CANDIDATE_FIELDS = tuple(f.name for f in fields(Candidate) if f.name != "position")
FRAME_COLUMNS = list(CANDIDATE_FIELDS) + ["position", "score", "outcome", "admission", "rank"]


def _text(value: object) -> str:
    if value is None:
        return ""
    if not isinstance(value, str) and pd.isna(value):
        return ""
    return str(value)


def _canon(value: object) -> str:
    return _text(value).strip().upper()


def classify_provisional(value: object, labels: StatusLabels = StatusLabels()) -> ProvisionalStatus:
    s = _canon(value)
    if s and s == labels.passed.strip().upper():
        return ProvisionalStatus.PASS
    if s and s == labels.failed.strip().upper():
        return ProvisionalStatus.FAIL
    return ProvisionalStatus.UNKNOWN


def classify_admission(value: object, labels: StatusLabels = StatusLabels()) -> AdmissionStatus:
    s = _canon(value)
    if s and s == labels.admitted.strip().upper():
        return AdmissionStatus.ADMITTED
    if s and s == labels.excluded.strip().upper():
        return AdmissionStatus.EXCLUDED
    return AdmissionStatus.UNKNOWN


def normalize_row(row: Mapping[str, object], position: int = 0) -> Candidate:
    """Coerce one parsed CSV row (keyed by source label) into a Candidate."""
    values = {attr: _text(row.get(label)) for label, attr in SOURCE_COLUMNS.items()}
    return Candidate(position=int(position), **values)


def normalize_rows(rows: Iterable[Mapping[str, object]]) -> List[Candidate]:
    return [normalize_row(row, position=i) for i, row in enumerate(rows)]


def candidates_frame(candidates: Iterable[Candidate], labels: StatusLabels = StatusLabels()) -> pd.DataFrame:
    records = [asdict(c) for c in candidates]
    df = pd.DataFrame(records, columns=list(CANDIDATE_FIELDS) + ["position"])
    for col in CANDIDATE_FIELDS:
        df[col] = df[col].astype(object)
    df["position"] = df["position"].astype(int)
    df["score"] = parse_score_series(df["total_phase1"])
    df["outcome"] = df["provisional_status"].map(lambda v: classify_provisional(v, labels).value).astype(object)
    df["admission"] = df["admission_status"].map(lambda v: classify_admission(v, labels).value).astype(object)
    df["rank"] = pd.Series(pd.NA, index=df.index, dtype="Int64")
    return df[FRAME_COLUMNS]


def normalize_frame(raw: pd.DataFrame, labels: StatusLabels = StatusLabels()) -> pd.DataFrame:
    """Raw string frame (source headers) -> candidate frame, one row per source row."""
    return candidates_frame(normalize_rows(raw.to_dict(orient="records")), labels)


def frame_to_candidates(df: pd.DataFrame) -> List[Candidate]:
    cols = list(CANDIDATE_FIELDS) + ["position"]
    return [Candidate(**row) for row in df[cols].to_dict(orient="records")]
