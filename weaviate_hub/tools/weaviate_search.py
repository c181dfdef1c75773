from __future__ import annotations

import json
from typing import Annotated, Any

from mcp.types import TextContent
from pydantic import Field

from ..orch.search import run_search


TOOL_NAME = "Weaviate_Hybrid_Search_with_Extension"
TOOL_DESCRIPTION = "Hybrid search in Weaviate with context extension"


def to_text_blocks(results: list[dict]) -> list[TextContent]:
	return [TextContent(type="text", text=json.dumps(r, indent=2, ensure_ascii=False)) for r in results]


async def weaviate_hybrid_search(collection: str, query: str, where: Any = None, topK: int = 5, extK: int = 0) -> list[TextContent]:
	"""Hybrid search over `collection`, each hit widened by `extK` chunks per side.

	Returns one text block per document (or document page) holding the JSON
	record `{content, source, page_number?}`.
	"""
	results = await run_search(collection, query, where=where, top_k=topK, ext_k=extK)
	return to_text_blocks(results)


def register(mcp):
	@mcp.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION)
	async def weaviate_hybrid_search_tool(
		collection: Annotated[str, Field(description="The name of the Weaviate collection to query. This should be the name of the collection where your documents are stored.")],
		query: Annotated[str, Field(description="The search query or requirements from the user. This is the main input for the hybrid search.")],
		where: Annotated[Any, Field(description="Optional Weaviate where filter, e.g. {\"path\": [\"source\"], \"operator\": \"Equal\", \"valueText\": \"report.pdf\"}. Applied to the search and to every context extension fetch.")] = None,
		topK: Annotated[int, Field(ge=0, description="The number of top results to return from the hybrid search. Default is 5.")] = 5,
		extK: Annotated[int, Field(ge=0, description="The number of additional chunks to include before and after each topK result. Default is 0.")] = 0,
	) -> list[TextContent]:
		return await weaviate_hybrid_search(collection, query, where=where, topK=topK, extK=extK)
