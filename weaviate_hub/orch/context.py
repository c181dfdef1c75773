from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .filters import FilterValue
from .query import field_list


@dataclass(frozen=True)
class SearchContext:
    """Per-call state shared by the pipeline stages. Nothing here outlives a call."""

    collection: str
    has_page: bool = False
    where: Optional[FilterValue] = None
    max_concurrency: int = 0
    strict_page: bool = False
    fields: List[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.fields:
            object.__setattr__(self, "fields", field_list(self.has_page))
