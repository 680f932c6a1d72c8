# anti_search/server.py
import asyncio
from typing import Annotated, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from .gateway import Capability, GatewayClient, build_url_prompt
from .logger import get_logger, setup_logging
from .normalizer import normalize_grounded, normalize_search, normalize_url, to_json

SERVER_NAME = "anti-search"
SERVER_VERSION = "1.1.1"

logger = get_logger(__name__)

mcp = FastMCP(SERVER_NAME)
gateway = GatewayClient()


async def _invoke(prompt: str, *capabilities: Capability):
    # requests blocks; keep the event loop free for concurrent tool calls.
    return await asyncio.to_thread(gateway.invoke, prompt, capabilities)


@mcp.tool(
    description="Search the web using Google Search via Antigravity",
    annotations={
        "title": "Web Search",
        "readOnlyHint": True,
        "openWorldHint": True,
    },
)
async def web_search(
    query: Annotated[str, Field(description="Search query")],
) -> str:
    """Returns JSON: {query, answer, sources: [{url, site, snippet}]} or {error}."""
    response = await _invoke(query, Capability.SEARCH)
    return to_json(normalize_search(response, query))


@mcp.tool(
    description="Read and summarize content from a URL",
    annotations={
        "title": "Read URL",
        "readOnlyHint": True,
        "openWorldHint": True,
    },
)
async def read_url(
    url: Annotated[str, Field(description="URL to read")],
    instruction: Annotated[
        Optional[str],
        Field(description="Specific instruction for reading (e.g., 'summarize', 'extract key points')"),
    ] = None,
) -> str:
    """Returns JSON: {url, status, content} or {error}."""
    response = await _invoke(build_url_prompt(url, instruction), Capability.URL_CONTEXT)
    return to_json(normalize_url(response, url))


@mcp.tool(
    description="Search the web and read URLs for comprehensive research",
    annotations={
        "title": "Grounded Search",
        "readOnlyHint": True,
        "openWorldHint": True,
    },
)
async def grounded_search(
    query: Annotated[str, Field(description="Research query")],
) -> str:
    """Returns JSON: {query, answer, sources: [{url, site, context}]} or {error}."""
    response = await _invoke(query, Capability.SEARCH, Capability.URL_CONTEXT)
    return to_json(normalize_grounded(response, query))


def main():
    setup_logging()
    logger.info(f"{SERVER_NAME} MCP server running (v{SERVER_VERSION}, gateway {gateway.endpoint})")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
