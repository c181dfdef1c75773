from __future__ import annotations

import logging
from typing import List, Optional

from ..config import Settings, get_settings
from ..db.weaviate import WeaviateClient, connect
from .context import SearchContext
from .extension import extend_groups
from .filters import FilterValue
from .grouping import Hit, aggregate_groups, group_hits
from .query import PAGE_FIELD, check_collection, get_objects, hybrid_query


logger = logging.getLogger(__name__)


async def hybrid_search_with_extension(
    client: WeaviateClient,
    collection: str,
    query: str,
    where: Optional[FilterValue] = None,
    top_k: int = 5,
    ext_k: int = 0,
    settings: Optional[Settings] = None,
) -> List[dict]:
    """Hybrid search, then widen every hit with its neighbouring chunks.

    Schema check -> search -> group -> extend (ext_k > 0) -> aggregate. Hits are
    grouped per document, or per document page when the collection has a
    `page_number` property, and each group comes back as one passage whose
    chunks are joined in position order.
    """
    settings = settings or get_settings()
    check_collection(collection)
    top_k, ext_k = int(top_k), int(ext_k)
    if top_k < 0 or ext_k < 0:
        raise ValueError("topK and extK must be >= 0")

    has_page = await client.has_property(collection, PAGE_FIELD)
    ctx = SearchContext(
        collection=collection,
        has_page=has_page,
        where=where,
        max_concurrency=settings.max_concurrency,
        strict_page=settings.strict_page_neighbors,
    )

    data = await client.graphql(hybrid_query(collection, query, ctx.fields, top_k, where))
    hits = [Hit.from_object(obj, has_page) for obj in get_objects(data, collection)]
    groups, doc_ids = group_hits(hits, has_page)
    logger.info(f"Hybrid search on {collection}: {len(hits)} hits in {len(groups)} groups (page grouping={has_page})")

    await extend_groups(client, ctx, groups, doc_ids, ext_k, bound=settings.extension_bound)
    return aggregate_groups(groups.values())


async def run_search(
    collection: str,
    query: str,
    where: Optional[FilterValue] = None,
    top_k: int = 5,
    ext_k: int = 0,
) -> List[dict]:
    settings = get_settings()
    async with connect() as http:
        return await hybrid_search_with_extension(
            WeaviateClient(http), collection, query, where=where, top_k=top_k, ext_k=ext_k, settings=settings
        )
