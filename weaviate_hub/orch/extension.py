from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from ..db.weaviate import WeaviateClient
from .context import SearchContext
from .grouping import Group, GroupKey, Hit, parse_chunk_ref
from .query import chunk_count_query, get_count, get_objects, point_fetch_query


logger = logging.getLogger(__name__)

# (document id, position) of a chunk some group still needs
NeighborKey = Tuple[str, int]


@dataclass(frozen=True)
class FetchedChunk:
    doc_id: str
    requested_position: int
    position: Optional[int] = None  # None: no match, or the match had a bad id
    content: str = ""
    page_number: Optional[int] = None


async def gather_settled(aws: Iterable[Awaitable], limit: int = 0) -> list:
    """Await everything, at most `limit` at a time (0 = no cap).

    Every awaitable settles before this returns; the first failure, if any, is
    then re-raised.
    """
    aws = list(aws)
    if limit > 0:
        sem = asyncio.Semaphore(limit)

        async def _bounded(aw):
            async with sem:
                return await aw

        aws = [_bounded(aw) for aw in aws]
    results = await asyncio.gather(*aws, return_exceptions=True)
    for r in results:
        if isinstance(r, BaseException):
            raise r
    return results


def plan_neighbor_requests(
    groups: Mapping[GroupKey, Group],
    ext_k: int,
    totals: Optional[Mapping[str, int]] = None,
) -> Dict[NeighborKey, Set[GroupKey]]:
    """Collect the missing positions within `ext_k` of every seed.

    The result maps each physical chunk to every group that wants it, so a
    chunk shared by several groups is fetched once. Positions below zero are
    never requested; with `totals`, neither are positions past a document's
    last chunk.
    """
    requests: Dict[NeighborKey, Set[GroupKey]] = {}
    if ext_k <= 0:
        return requests
    for key, group in groups.items():
        total = None if totals is None else totals.get(group.doc_id, 0)
        wanted: Set[int] = set()
        for seed in sorted(group.seed_positions):
            for i in range(1, ext_k + 1):
                if seed - i >= 0:
                    wanted.add(seed - i)
                if total is None or seed + i < total:
                    wanted.add(seed + i)
        for pos in sorted(wanted.difference(group.chunks)):
            requests.setdefault((group.doc_id, pos), set()).add(key)
    return requests


async def fetch_chunk_counts(client: WeaviateClient, ctx: SearchContext, doc_ids: Iterable[str]) -> Dict[str, int]:
    doc_ids = sorted(set(doc_ids))

    async def _count(doc_id: str) -> int:
        data = await client.graphql(chunk_count_query(ctx.collection, doc_id))
        return get_count(data, ctx.collection)

    counts = await gather_settled((_count(d) for d in doc_ids), ctx.max_concurrency)
    return dict(zip(doc_ids, counts))


async def fetch_chunk(client: WeaviateClient, ctx: SearchContext, doc_id: str, position: int) -> FetchedChunk:
    data = await client.graphql(point_fetch_query(ctx.collection, doc_id, position, ctx.fields, ctx.where))
    rows = get_objects(data, ctx.collection)
    if not rows:
        return FetchedChunk(doc_id, position)
    hit = Hit.from_object(rows[0], ctx.has_page)
    parsed = parse_chunk_ref(hit.doc_chunk_id)
    if parsed is None:
        logger.debug(f"Discarding neighbour with unparseable chunk id {hit.doc_chunk_id!r}")
        return FetchedChunk(doc_id, position)
    return FetchedChunk(doc_id, position, parsed[1], hit.content, hit.page_number)


async def fetch_neighbors(
    client: WeaviateClient,
    ctx: SearchContext,
    requests: Mapping[NeighborKey, Set[GroupKey]],
) -> List[FetchedChunk]:
    keys = sorted(requests)
    return await gather_settled((fetch_chunk(client, ctx, d, p) for d, p in keys), ctx.max_concurrency)


def merge_fetched(
    groups: Mapping[GroupKey, Group],
    requests: Mapping[NeighborKey, Set[GroupKey]],
    fetched: Iterable[FetchedChunk],
    strict_page: bool = False,
) -> int:
    """Write fetched chunks into the groups that asked for them.

    Runs after every fetch has settled. Positions a group already holds are
    left alone. With `strict_page`, a page group only takes chunks whose own
    page matches. Returns the number of chunks inserted.
    """
    inserted = 0
    for item in fetched:
        if item.position is None:
            continue
        for key in requests.get((item.doc_id, item.requested_position), ()):
            group = groups.get(key)
            if group is None or item.position in group.chunks:
                continue
            if strict_page and group.page is not None and item.page_number != group.page:
                continue
            group.chunks[item.position] = item.content
            inserted += 1
    return inserted


async def extend_groups(
    client: WeaviateClient,
    ctx: SearchContext,
    groups: Dict[GroupKey, Group],
    doc_ids: Set[str],
    ext_k: int,
    bound: str = "count",
) -> int:
    """Add up to `ext_k` neighbours on each side of every seed chunk, in place."""
    if ext_k <= 0 or not groups:
        return 0
    totals = await fetch_chunk_counts(client, ctx, doc_ids) if bound == "count" else None
    requests = plan_neighbor_requests(groups, ext_k, totals)
    if not requests:
        return 0
    fetched = await fetch_neighbors(client, ctx, requests)
    inserted = merge_fetched(groups, requests, fetched, strict_page=ctx.strict_page)
    logger.info(f"Context extension: {len(requests)} neighbour fetches, {inserted} chunks attached")
    return inserted
