from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .query import CHUNK_ID_FIELD, CONTENT_FIELD, PAGE_FIELD, SOURCE_FIELD


logger = logging.getLogger(__name__)

# (document id, page); page is None unless grouping by page
GroupKey = Tuple[str, Optional[int]]


def parse_chunk_ref(ref: str) -> Optional[Tuple[str, int]]:
    """Split `"<documentId>_<position>"` at its last underscore.

    Returns None when the position is not a non-negative integer.
    """
    doc_id, sep, pos_text = str(ref).rpartition("_")
    if not sep or not doc_id or not (pos_text.isascii() and pos_text.isdigit()):
        return None
    return doc_id, int(pos_text)


def _page(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Hit:
    content: str
    doc_chunk_id: str
    source: str = ""
    page_number: Optional[int] = None

    @classmethod
    def from_object(cls, obj: dict, has_page: bool = False) -> "Hit":
        return cls(
            content=str(obj.get(CONTENT_FIELD) or ""),
            doc_chunk_id=str(obj.get(CHUNK_ID_FIELD) or ""),
            source=str(obj.get(SOURCE_FIELD) or ""),
            page_number=_page(obj.get(PAGE_FIELD)) if has_page else None,
        )


@dataclass
class Group:
    doc_id: str
    page: Optional[int] = None
    source: str = ""
    chunks: Dict[int, str] = field(default_factory=dict)
    seed_positions: Set[int] = field(default_factory=set)

    def add_seed(self, position: int, content: str) -> None:
        self.chunks[position] = content
        self.seed_positions.add(position)

    def merged(self) -> str:
        return "".join(self.chunks[p] for p in sorted(self.chunks))


def group_key(doc_id: str, hit: Hit, has_page: bool) -> GroupKey:
    if has_page and hit.page_number is not None:
        return doc_id, hit.page_number
    return doc_id, None


def group_hits(hits: Iterable[Hit], has_page: bool) -> Tuple[Dict[GroupKey, Group], Set[str]]:
    """Partition ranked hits into per-document (or per-page) groups of seed chunks."""
    groups: Dict[GroupKey, Group] = {}
    doc_ids: Set[str] = set()
    for hit in hits:
        parsed = parse_chunk_ref(hit.doc_chunk_id)
        if parsed is None:
            logger.debug(f"Skipping hit with unparseable chunk id {hit.doc_chunk_id!r}")
            continue
        doc_id, position = parsed
        doc_ids.add(doc_id)
        key = group_key(doc_id, hit, has_page)
        group = groups.get(key)
        if group is None:
            group = Group(doc_id=doc_id, page=key[1], source=hit.source)
            groups[key] = group
        elif not group.source:
            group.source = hit.source
        group.add_seed(position, hit.content)
    return groups, doc_ids


def aggregate_groups(groups: Iterable[Group]) -> List[dict]:
    results: List[dict] = []
    for g in groups:
        record = {"content": g.merged(), "source": g.source}
        if g.page is not None:
            record["page_number"] = g.page
        results.append(record)
    return results
