from __future__ import annotations

import pytest

from core.data import parse_candidates


HEADER = (
    "IDENTIFICADOR,APELLIDOS Y NOMBRE,ADMITIDO/EXCLUIDO,DIA EXAMEN,SEDE DE EXAMEN,AULA/SALA,"
    "CONOCIMIENTOS GENERALES,CONOCIMIENTOS IDIOMA INGLÉS,APTITUDES,PERSONALIDAD,TOTAL FASE 1,ESTADO PROVISIONAL"
)

SAMPLE_CSV = "\n".join(
    [
        HEADER,
        '***1234A,"GARCÍA LÓPEZ, JOSÉ",ADMITIDO/A,2025-03-01,MADRID,A1,"7,5","8,0","6,5",APTO/A,"8,5",APTO/A',
        '***2345B,"PÉREZ RUIZ, ANA",ADMITIDO/A,2025-03-01,MADRID,A1,"7,0","8,5","7,0",APTO/A,"8,50",NO APTO/A',
        "",
        '***3456C,"SÁNCHEZ GIL, LUIS",ADMITIDO/A,2025-03-02,BARCELONA,B2,---,---,---,---,---,',
        '***4567D,"MARTÍN DÍAZ, EVA",ADMITIDO/A,2025-03-02,BARCELONA,B2,,,,,#N/A,APTO/A',
        '***5678E,"ROMERO VEGA, JUAN",EXCLUIDO/A,,,,,,,,,',
        '***6789F,"NAVARRO TORRES, MARÍA",ADMITIDO/A,2025-03-01,BARCELONA,B1,"9,0","9,5","9,0",APTO/A,"9,25",APTO/A',
        "",
    ]
)


@pytest.fixture
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture
def candidates(sample_csv):
    return parse_candidates(sample_csv)
