from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from core.config import DEFAULT_PAGE_SIZE
from core.query import ALL


class QueryStateModel(BaseModel):
    search_text: str = ""
    site: str = ALL
    status: str = ALL
    sort_key: str = "rank"
    sort_direction: Literal["asc", "desc"] = "asc"
    visible_count: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
