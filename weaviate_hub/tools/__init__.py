from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from typing import Callable


logger = logging.getLogger(__name__)


def auto_register_tools(mcp: object) -> None:
	"""Register every module in this package that exposes `register(mcp)`."""
	package = importlib.import_module(__name__)
	for _finder, name, _ispkg in pkgutil.iter_modules(package.__path__, __name__ + "."):
		try:
			mod = importlib.import_module(name)
		except ImportError as e:
			# One broken tool module must not take the server down
			logger.warning(f"Skipping tool module {name}: {e}")
			continue
		register = getattr(mod, "register", None)
		if callable(register):
			register(mcp)


def register_backend_tools(mcp: object) -> None:
	"""Register Weaviate health and schema tools."""
	from ..db.weaviate import describe_schema, health_check

	@mcp.tool()
	async def weaviate_health() -> dict:
		"""Weaviate readiness check."""
		return await health_check()

	@mcp.tool()
	async def weaviate_schema() -> dict:
		"""List Weaviate collections and their property names."""
		return await describe_schema()


class _CollectingMCP:
	"""Stands in for FastMCP and keeps every decorated tool by its public name."""

	def __init__(self):
		self.tools: dict[str, tuple[Callable, dict]] = {}

	def tool(self, *args, **kwargs):  # parity with FastMCP signature
		def decorator(fn):
			self.tools.setdefault(kwargs.get("name") or fn.__name__, (fn, kwargs))
			return fn
		return decorator


def _collect_tools() -> dict[str, tuple[Callable, dict]]:
	mcp = _CollectingMCP()
	auto_register_tools(mcp)
	register_backend_tools(mcp)
	return mcp.tools


def _describe_parameters(fn: Callable) -> list[dict]:
	params = []
	for param in inspect.signature(fn).parameters.values():
		info: dict[str, object] = {"name": param.name}
		if param.annotation is not inspect.Parameter.empty:
			info["type"] = str(param.annotation)
		if param.default is not inspect.Parameter.empty:
			info["default"] = param.default
		params.append(info)
	return params


def discover_tool_specs_via_dummy() -> list[dict]:
	"""Describe every tool without a running MCP server.

	Each call registers the tools into a collecting stand-in and returns
	fresh records of name, description, module and parameters.
	"""
	specs = []
	for name, (fn, kwargs) in _collect_tools().items():
		specs.append({
			"name": name,
			"description": (kwargs.get("description") or fn.__doc__ or "").strip(),
			"module": fn.__module__,
			"parameters": _describe_parameters(fn),
		})
	return specs


def invoke_tool_via_dummy(tool_name: str, **kwargs):
	"""Look up a tool by its public name; returns `(fn, kwargs)` for the caller to run."""
	entry = _collect_tools().get(tool_name)
	if entry is None:
		raise ValueError(f"Tool not found: {tool_name}")
	return entry[0], kwargs
