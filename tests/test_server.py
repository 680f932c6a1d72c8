import asyncio
import json

import pytest

from anti_search import server
from anti_search.gateway import Capability
from anti_search.schemas import UpstreamResponse


class StubGateway:
    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    def invoke(self, prompt, capabilities):
        self.calls.append((prompt, tuple(capabilities)))
        if isinstance(self.payload, UpstreamResponse):
            return self.payload
        return UpstreamResponse.model_validate(self.payload)


@pytest.fixture
def stub(monkeypatch):
    def install(payload):
        gateway = StubGateway(payload)
        monkeypatch.setattr(server, "gateway", gateway)
        return gateway

    return install


def test_tools_registered():
    tools = {tool.name: tool for tool in asyncio.run(server.mcp.list_tools())}

    assert set(tools) == {"web_search", "read_url", "grounded_search"}
    assert tools["web_search"].description == "Search the web using Google Search via Antigravity"
    assert tools["web_search"].inputSchema["required"] == ["query"]
    assert tools["read_url"].inputSchema["required"] == ["url"]
    assert "instruction" in tools["read_url"].inputSchema["properties"]
    assert tools["grounded_search"].annotations.readOnlyHint is True


def test_web_search(stub, grounded_payload):
    gateway = stub(grounded_payload)

    data = json.loads(asyncio.run(server.web_search("python 3.13")))

    assert gateway.calls == [("python 3.13", (Capability.SEARCH,))]
    assert data["query"] == "python 3.13"
    assert len(data["sources"]) == 3
    assert set(data["sources"][0]) == {"url", "site", "snippet"}


def test_grounded_search_uses_both_capabilities(stub, grounded_payload):
    gateway = stub(grounded_payload)

    data = json.loads(asyncio.run(server.grounded_search("python 3.13")))

    assert gateway.calls == [("python 3.13", (Capability.SEARCH, Capability.URL_CONTEXT))]
    assert data["sources"][0]["context"] == "Python 3.13 was released\n\nin October 2024."


def test_read_url_default_prompt(stub):
    gateway = stub(
        {
            "candidates": [
                {
                    "content": {"parts": [{"text": "A page about examples."}]},
                    "urlContextMetadata": {
                        "urlMetadata": [
                            {"retrievedUrl": "https://example.com", "urlRetrievalStatus": "URL_RETRIEVAL_STATUS_SUCCESS"}
                        ]
                    },
                }
            ]
        }
    )

    data = json.loads(asyncio.run(server.read_url("https://example.com")))

    assert gateway.calls == [("Summarize the content from https://example.com", (Capability.URL_CONTEXT,))]
    assert data == {"url": "https://example.com", "status": "success", "content": "A page about examples."}


def test_read_url_with_instruction(stub):
    gateway = stub({"candidates": [{"content": {"parts": [{"text": "- point"}]}}]})

    data = json.loads(asyncio.run(server.read_url("https://example.com", "extract key points")))

    assert gateway.calls[0][0] == "extract key points: https://example.com"
    assert data["status"] == "failed"


def test_transport_failure_returns_error_json(stub):
    stub(UpstreamResponse.failure("Gateway request failed: connection refused"))

    for result in (
        asyncio.run(server.web_search("q")),
        asyncio.run(server.grounded_search("q")),
        asyncio.run(server.read_url("https://example.com")),
    ):
        assert json.loads(result) == {"error": "Gateway request failed: connection refused"}


def test_no_candidates_returns_no_results(stub):
    stub({"candidates": []})
    assert json.loads(asyncio.run(server.web_search("q"))) == {"error": "No results"}
