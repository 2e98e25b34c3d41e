from __future__ import annotations

import pandas as pd

from core.config import StatusLabels
from core.records import (
    CANDIDATE_FIELDS,
    AdmissionStatus,
    Candidate,
    ProvisionalStatus,
    candidates_frame,
    classify_admission,
    classify_provisional,
    frame_to_candidates,
    normalize_frame,
    normalize_row,
    normalize_rows,
)


def test_missing_keys_become_empty_strings():
    c = normalize_row({})
    assert isinstance(c, Candidate)
    assert all(getattr(c, f) == "" for f in CANDIDATE_FIELDS)
    assert c.position == 0


def test_normalize_row_maps_source_labels():
    c = normalize_row(
        {
            "IDENTIFICADOR": "***1234A",
            "APELLIDOS Y NOMBRE": "GARCÍA, JOSÉ",
            "SEDE DE EXAMEN": "MADRID",
            "CONOCIMIENTOS IDIOMA INGLÉS": "8,0",
            "TOTAL FASE 1": "8,5",
            "ESTADO PROVISIONAL": None,
            "UNRELATED": "ignored",
        },
        position=7,
    )
    assert c.identifier == "***1234A"
    assert c.full_name == "GARCÍA, JOSÉ"
    assert c.exam_site == "MADRID"
    assert c.english == "8,0"
    assert c.total_phase1 == "8,5"
    assert c.provisional_status == ""
    assert c.position == 7
    assert c.score_fields == {"general_knowledge": "", "english": "8,0", "aptitude": "", "personality": ""}


def test_nan_and_non_string_values_are_coerced():
    c = normalize_row({"IDENTIFICADOR": 42, "TOTAL FASE 1": float("nan")})
    assert c.identifier == "42"
    assert c.total_phase1 == ""


def test_normalize_rows_tags_source_order():
    rows = [{"IDENTIFICADOR": "X"}, {"IDENTIFICADOR": "X"}, {"IDENTIFICADOR": "Y"}]
    out = normalize_rows(rows)
    assert [c.position for c in out] == [0, 1, 2]
    assert out[0] != out[1]


def test_classify_status_uses_configured_labels():
    assert classify_provisional(" apto/a ") is ProvisionalStatus.PASS
    assert classify_provisional("NO APTO/A") is ProvisionalStatus.FAIL
    assert classify_provisional("") is ProvisionalStatus.UNKNOWN
    assert classify_provisional("PENDIENTE") is ProvisionalStatus.UNKNOWN
    labels = StatusLabels(passed="PASS", failed="FAIL")
    assert classify_provisional("pass", labels) is ProvisionalStatus.PASS
    assert classify_provisional("APTO/A", labels) is ProvisionalStatus.UNKNOWN
    assert classify_admission("ADMITIDO/A") is AdmissionStatus.ADMITTED
    assert classify_admission("excluido/a") is AdmissionStatus.EXCLUDED
    assert classify_admission(None) is AdmissionStatus.UNKNOWN


def test_candidates_frame_columns_and_derived_values():
    df = candidates_frame(
        normalize_rows(
            [
                {"TOTAL FASE 1": "8,5", "ESTADO PROVISIONAL": "APTO/A", "ADMITIDO/EXCLUIDO": "ADMITIDO/A"},
                {"TOTAL FASE 1": "---"},
            ]
        )
    )
    assert list(df["position"]) == [0, 1]
    assert df.loc[0, "score"] == 8.5
    assert pd.isna(df.loc[1, "score"])
    assert list(df["outcome"]) == ["pass", "unknown"]
    assert list(df["admission"]) == ["admitted", "unknown"]
    assert df["rank"].isna().all()


def test_empty_frame_keeps_columns():
    df = normalize_frame(pd.DataFrame())
    assert df.empty
    assert "total_phase1" in df.columns and "rank" in df.columns


def test_frame_to_candidates_roundtrip():
    originals = normalize_rows([{"IDENTIFICADOR": "A", "TOTAL FASE 1": "5"}, {"IDENTIFICADOR": "B"}])
    assert frame_to_candidates(candidates_frame(originals)) == originals
