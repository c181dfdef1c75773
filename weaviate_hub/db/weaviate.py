from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ..config import get_settings


logger = logging.getLogger(__name__)


class WeaviateQueryError(Exception):
    """Raised when Weaviate answers a GraphQL request with a non-empty `errors` payload."""

    def __init__(self, errors: Any):
        self.errors = errors
        super().__init__(json.dumps(errors, ensure_ascii=False, default=str))


@dataclass
class WeaviateConnInfo:
    base_url: str
    api_key: str | None
    timeout: float


def get_connection_params() -> WeaviateConnInfo:
    settings = get_settings()
    return WeaviateConnInfo(
        base_url=settings.weaviate_url,
        api_key=settings.weaviate_api_key,
        timeout=settings.http_timeout_sec,
    )


def connect(base_url_override: str | None = None, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Return an AsyncClient bound to the Weaviate REST root.

    Use it as an async context manager; `transport` lets tests plug in an
    `httpx.MockTransport`.
    """
    info = get_connection_params()
    headers = {"Content-Type": "application/json"}
    if info.api_key:
        headers["Authorization"] = f"Bearer {info.api_key}"
    return httpx.AsyncClient(
        base_url=base_url_override or info.base_url,
        headers=headers,
        timeout=info.timeout,
        transport=transport,
    )


class WeaviateClient:
    """Thin async wrapper over the Weaviate GraphQL and schema endpoints."""

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    async def graphql(self, query: str) -> dict:
        resp = await self.http.post("/v1/graphql", json={"query": query})
        if resp.is_error and "application/json" not in resp.headers.get("content-type", ""):
            resp.raise_for_status()
        payload = resp.json()
        if not isinstance(payload, dict):
            raise WeaviateQueryError([{"message": f"expected a JSON object, got {type(payload).__name__}", "body": payload}])
        if payload.get("errors"):
            raise WeaviateQueryError(payload["errors"])
        resp.raise_for_status()
        return payload.get("data") or {}

    async def get_class(self, collection: str) -> dict:
        resp = await self.http.get(f"/v1/schema/{collection}")
        resp.raise_for_status()
        return resp.json()

    async def has_property(self, collection: str, name: str) -> bool:
        # Schema read failures never reach the caller; the capability is simply off.
        try:
            cls = await self.get_class(collection)
        except (httpx.HTTPError, ValueError) as e:
            logger.debug(f"Schema read for {collection} failed: {e}")
            return False
        if not isinstance(cls, dict):
            return False
        props = cls.get("properties") or []
        return any(isinstance(p, dict) and p.get("name") == name for p in props)

    async def list_classes(self) -> list[dict]:
        resp = await self.http.get("/v1/schema")
        resp.raise_for_status()
        return list((resp.json() or {}).get("classes") or [])

    async def is_ready(self) -> bool:
        resp = await self.http.get("/v1/.well-known/ready")
        return resp.is_success


async def health_check() -> dict:
    try:
        async with connect() as http:
            ready = await WeaviateClient(http).is_ready()
        return {"status": "ok"} if ready else {"status": "error", "error": "weaviate is not ready"}
    except httpx.HTTPError as e:
        return {"status": "error", "error": str(e)}


async def describe_schema() -> dict:
    """Return collection names with their property names."""
    async with connect() as http:
        classes = await WeaviateClient(http).list_classes()
    out: dict[str, list[str]] = {}
    for cls in classes:
        name = cls.get("class")
        if not name:
            continue
        out[name] = [p.get("name") for p in (cls.get("properties") or []) if p.get("name")]
    return {"status": "ok", "collections": out}
