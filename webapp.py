from __future__ import annotations

import asyncio
import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mcp.types import TextContent

from weaviate_hub.db.weaviate import health_check
from weaviate_hub.tools import discover_tool_specs_via_dummy, invoke_tool_via_dummy


# Load local environment variables for development parity
load_dotenv(override=True)

app = FastAPI()

_cors_env = os.getenv("CORS_ORIGINS", "*").strip()
if _cors_env == "*":
	origins = ["*"]
else:
	origins = [o.strip() for o in _cors_env.split(",") if o.strip()]
app.add_middleware(
	CORSMiddleware,
	allow_origins=origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)


def _jsonable(result):
	if isinstance(result, list):
		return [_jsonable(r) for r in result]
	if isinstance(result, TextContent):
		return result.model_dump()
	return result


@app.get("/health")
async def health():
	# Lightweight liveness endpoint
	return {"status": "ok"}


@app.get("/api/status")
async def api_status():
	return {"weaviate": await health_check()}


@app.get("/api/mcp_tools")
async def api_mcp_tools():
	specs = discover_tool_specs_via_dummy()
	for s in specs:
		s.setdefault("description", "")
		s.setdefault("module", "")
		# defaults may be non-JSON sentinels
		for p in s.get("parameters") or []:
			if "default" in p and not isinstance(p["default"], (str, int, float, bool, type(None))):
				p["default"] = str(p["default"])
	return {"tools": specs}


@app.post("/api/mcp_invoke")
async def api_mcp_invoke(payload: dict, request: Request):
	"""Invoke an MCP tool by name with arguments.

	Body: { "name": string, "args": object }
	Auth: when API_TOKEN is set, requests must send Authorization: Bearer <token>
	"""
	token = os.getenv("API_TOKEN")
	if token and request.headers.get("authorization") != f"Bearer {token}":
		return JSONResponse({"error": "Unauthorized"}, status_code=401)
	name = (payload.get("name") or "").strip()
	args = payload.get("args") or {}
	if not name:
		return JSONResponse({"error": "name is required"}, status_code=400)
	try:
		fn, kwargs = invoke_tool_via_dummy(name, **args)
	except ValueError as e:
		return JSONResponse({"error": str(e)}, status_code=404)
	try:
		# Tools may be async
		if asyncio.iscoroutinefunction(fn):
			result = await fn(**kwargs)
		else:
			result = fn(**kwargs)
		return {"status": "ok", "result": _jsonable(result)}
	except Exception as e:
		return JSONResponse({"error": str(e)}, status_code=500)
