import os
from dataclasses import dataclass
from dotenv import load_dotenv


EXTENSION_BOUNDS = ("count", "none")


@dataclass
class Settings:
	weaviate_url: str = "http://localhost:8080"
	weaviate_api_key: str | None = None
	http_timeout_sec: float = 60.0
	extension_bound: str = "count"
	strict_page_neighbors: bool = False
	max_concurrency: int = 0
	log_level: str = "INFO"
	mcp_transport: str = "stdio"
	web_port: int = 8000


def _flag(name: str, default: str = "0") -> bool:
	return os.getenv(name, default) in ("1", "true", "True")


def get_settings() -> Settings:
	# Load .env if present
	load_dotenv(override=False)
	bound = (os.getenv("WEAVIATE_EXTENSION_BOUND") or "count").strip().lower()
	if bound not in EXTENSION_BOUNDS:
		raise ValueError(f"WEAVIATE_EXTENSION_BOUND must be one of {EXTENSION_BOUNDS}, got {bound!r}")
	return Settings(
		weaviate_url=(os.getenv("WEAVIATE_URL") or "http://localhost:8080").rstrip("/"),
		weaviate_api_key=os.getenv("WEAVIATE_API_KEY") or None,
		http_timeout_sec=float(os.getenv("WEAVIATE_TIMEOUT_SEC", "60")),
		extension_bound=bound,
		strict_page_neighbors=_flag("WEAVIATE_STRICT_PAGE_NEIGHBORS"),
		max_concurrency=max(0, int(os.getenv("WEAVIATE_MAX_CONCURRENCY", "0") or 0)),
		log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
		mcp_transport=(os.getenv("MCP_TRANSPORT") or "stdio").strip(),
		web_port=int(os.getenv("WEB_PORT", "8000")),
	)
