from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.query import ALL, QueryState, normalize_query
from core.schemas import QueryStateModel


def test_model_defaults_map_to_default_state():
    assert normalize_query(QueryStateModel().model_dump()) == QueryState()


def test_model_coerces_url_strings():
    model = QueryStateModel(search_text="jose", site="MADRID", sort_direction="desc", visible_count="200")
    state = normalize_query(model.model_dump())
    assert state.site == "MADRID"
    assert state.status == ALL
    assert state.sort_direction == "desc"
    assert state.visible_count == 200


@pytest.mark.parametrize("bad", [{"sort_direction": "sideways"}, {"visible_count": 0}, {"visible_count": "lots"}])
def test_model_rejects_invalid_values(bad):
    with pytest.raises(ValidationError):
        QueryStateModel(**bad)
