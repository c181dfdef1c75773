#!/usr/bin/env python3
"""
Verify a Weaviate collection is ready for hybrid search with context extension.

This script checks:
1. Weaviate readiness
2. The collection's properties (content, source, doc_chunk_id, page_number)
3. A sample query, with and without context extension
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from weaviate_hub.db.weaviate import WeaviateClient, connect, health_check
from weaviate_hub.orch.search import run_search

REQUIRED = ("content", "source", "doc_chunk_id")


async def verify_collection(collection: str) -> bool:
    print("=" * 60)
    print(f"Verifying Weaviate collection {collection}")
    print("=" * 60)

    health = await health_check()
    if health.get("status") != "ok":
        print(f"\n  Weaviate not ready: {health.get('error')}")
        return False
    print("\n  Weaviate: ready")

    async with connect() as http:
        cls = await WeaviateClient(http).get_class(collection)
    names = {p.get("name") for p in cls.get("properties") or []}
    missing = [n for n in REQUIRED if n not in names]
    for name in REQUIRED + ("page_number",):
        print(f"  {name:15s} {'present' if name in names else 'missing'}")
    if missing:
        print(f"\n  Missing required properties: {', '.join(missing)}")
        return False
    if "page_number" not in names:
        print("\n  No page_number: results are grouped per document")
    return True


async def sample_query(collection: str, query: str, top_k: int, ext_k: int) -> None:
    for k in sorted({0, ext_k}):
        results = await run_search(collection, query, top_k=top_k, ext_k=k)
        print(f"\n  extK={k}: {len(results)} passages")
        print("-" * 60)
        for r in results:
            page = f" p.{r['page_number']}" if "page_number" in r else ""
            print(f"  [{r['source']}{page}] {len(r['content'])} chars: {r['content'][:80]!r}")


def main() -> bool:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("collection")
    parser.add_argument("--query", default="")
    parser.add_argument("--top-k", type=int, default=5)
    parser.add_argument("--ext-k", type=int, default=1)
    args = parser.parse_args()

    if not asyncio.run(verify_collection(args.collection)):
        return False
    if args.query:
        asyncio.run(sample_query(args.collection, args.query, args.top_k, args.ext_k))
    print("\n" + "=" * 60)
    print("Verification complete")
    print("=" * 60)
    return True


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
