from __future__ import annotations

import os
import subprocess
import sys

from dotenv import load_dotenv


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


def start_mcp_server() -> subprocess.Popen:
    return subprocess.Popen([sys.executable, "server.py"])


def start_web_ui(host: str, port: str) -> subprocess.Popen:
    args = [sys.executable, "-m", "uvicorn", "webapp:app", "--host", host, "--port", port]
    if _truthy(os.getenv("WEB_RELOAD", "0")):
        args.append("--reload")
    return subprocess.Popen(args)


def main():
    load_dotenv(override=True)
    host = os.getenv("WEB_HOST", "127.0.0.1")
    port = os.getenv("WEB_PORT", "8000")
    procs = [start_mcp_server(), start_web_ui(host, port)]
    print("Weaviate Hub is running:")
    print(f"- MCP server ({os.getenv('MCP_TRANSPORT', 'stdio')}), pid {procs[0].pid}")
    print(f"- Web UI: http://{host}:{port}, pid {procs[1].pid}")
    print(f"- Weaviate: {os.getenv('WEAVIATE_URL', 'http://localhost:8080')}")
    try:
        for proc in procs:
            proc.wait()
    except KeyboardInterrupt:
        for proc in procs:
            proc.terminate()


if __name__ == "__main__":
    main()
