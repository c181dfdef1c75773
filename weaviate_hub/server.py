import logging

from mcp.server.fastmcp import FastMCP
from .tools import auto_register_tools, register_backend_tools
from .config import get_settings


mcp = FastMCP("weaviate-hub")


@mcp.tool()
def health() -> str:
	"""Simple health check."""
	return "ok"


def main() -> None:
	settings = get_settings()
	# stdout carries the MCP stdio stream; basicConfig logs to stderr
	logging.basicConfig(level=settings.log_level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
	auto_register_tools(mcp)
	register_backend_tools(mcp)
	logging.getLogger(__name__).info(f"Serving Weaviate tools for {settings.weaviate_url} over {settings.mcp_transport}")
	mcp.run(transport=settings.mcp_transport)


if __name__ == "__main__":
	main()
