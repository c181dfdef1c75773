from __future__ import annotations

import json
import re

from .filters import FilterValue, conjoin, equal_text, like_text, to_graphql_value


CONTENT_FIELD = "content"
SOURCE_FIELD = "source"
CHUNK_ID_FIELD = "doc_chunk_id"
PAGE_FIELD = "page_number"

_COLLECTION_RE = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")


def check_collection(collection: str) -> str:
    if not isinstance(collection, str) or not _COLLECTION_RE.match(collection):
        raise ValueError(f"Invalid collection name: {collection!r}")
    return collection


def field_list(has_page: bool) -> list[str]:
    fields = [CONTENT_FIELD, SOURCE_FIELD, CHUNK_ID_FIELD]
    if has_page:
        fields.append(PAGE_FIELD)
    return fields


def chunk_ref(doc_id: str, position: int) -> str:
    return f"{doc_id}_{position}"


def hybrid_query(collection: str, query: str, fields: list[str], top_k: int = 5, where: FilterValue | None = None) -> str:
    args = [f'hybrid:{{query: {json.dumps(query, ensure_ascii=False)}, properties:["{CONTENT_FIELD}"]}}']
    if where is not None:
        args.append(f"where:{to_graphql_value(where)}")
    args.append(f"limit: {int(top_k)}")
    return _get(collection, args, fields)


def chunk_count_query(collection: str, doc_id: str) -> str:
    where = to_graphql_value(like_text(CHUNK_ID_FIELD, f"{doc_id}*"))
    return f"""{{
  Aggregate {{
    {collection}(
      where:{where}
    ){{ meta {{ count }} }}
  }}
}}"""


def point_fetch_query(collection: str, doc_id: str, position: int, fields: list[str], where: FilterValue | None = None) -> str:
    clause = conjoin(equal_text(CHUNK_ID_FIELD, chunk_ref(doc_id, position)), where)
    return _get(collection, [f"where:{to_graphql_value(clause)}", "limit:1"], fields)


def _get(collection: str, args: list[str], fields: list[str]) -> str:
    arg_block = "\n      ".join(args)
    field_block = "\n      ".join(fields)
    return f"""{{
  Get {{
    {collection}(
      {arg_block}
    ) {{
      {field_block}
    }}
  }}
}}"""


def get_objects(data: dict, collection: str) -> list[dict]:
    rows = ((data or {}).get("Get") or {}).get(collection) or []
    return [r for r in rows if isinstance(r, dict)]


def get_count(data: dict, collection: str) -> int:
    rows = ((data or {}).get("Aggregate") or {}).get(collection) or []
    if not rows:
        return 0
    return int(((rows[0] or {}).get("meta") or {}).get("count") or 0)
