"""Unit tests for the FastAPI tool endpoints in webapp.py."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

import webapp
from weaviate_hub.tools.weaviate_search import TOOL_NAME


@pytest.fixture
def client(monkeypatch) -> TestClient:
    monkeypatch.delenv("API_TOKEN", raising=False)
    return TestClient(webapp.app)


class TestEndpoints:
    """Health, discovery and invocation."""

    def test_health(self, client: TestClient) -> None:
        assert client.get("/health").json() == {"status": "ok"}

    def test_mcp_tools(self, client: TestClient) -> None:
        tools = client.get("/api/mcp_tools").json()["tools"]
        assert TOOL_NAME in {t["name"] for t in tools}

    def test_invoke_requires_name(self, client: TestClient) -> None:
        resp = client.post("/api/mcp_invoke", json={"args": {}})
        assert resp.status_code == 400

    def test_invoke_unknown_tool(self, client: TestClient) -> None:
        resp = client.post("/api/mcp_invoke", json={"name": "nope"})
        assert resp.status_code == 404

    def test_invoke_search(self, client: TestClient) -> None:
        results = [{"content": "BCD", "source": "doc.pdf"}]
        with patch("weaviate_hub.tools.weaviate_search.run_search", new=AsyncMock(return_value=results)):
            resp = client.post(
                "/api/mcp_invoke",
                json={"name": TOOL_NAME, "args": {"collection": "Docs", "query": "q", "extK": 1}},
            )
        assert resp.status_code == 200
        block = resp.json()["result"][0]
        assert block["type"] == "text"
        assert '"content": "BCD"' in block["text"]

    def test_invoke_failure_is_500(self, client: TestClient) -> None:
        with patch("weaviate_hub.tools.weaviate_search.run_search", new=AsyncMock(side_effect=RuntimeError("down"))):
            resp = client.post("/api/mcp_invoke", json={"name": TOOL_NAME, "args": {"collection": "Docs", "query": "q"}})
        assert resp.status_code == 500
        assert resp.json() == {"error": "down"}

    def test_token_required_when_configured(self, client: TestClient, monkeypatch) -> None:
        monkeypatch.setenv("API_TOKEN", "t")
        assert client.post("/api/mcp_invoke", json={"name": "nope"}).status_code == 401
        resp = client.post("/api/mcp_invoke", json={"name": "nope"}, headers={"Authorization": "Bearer t"})
        assert resp.status_code == 404
