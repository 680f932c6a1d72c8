"""MCP server exposing Gemini-grounded web search and URL reading through a local gateway."""

from .gateway import Capability, GatewayClient, build_url_prompt
from .normalizer import aggregate_citations, normalize_grounded, normalize_search, normalize_url, to_json

__all__ = [
    "Capability",
    "GatewayClient",
    "build_url_prompt",
    "aggregate_citations",
    "normalize_grounded",
    "normalize_search",
    "normalize_url",
    "to_json",
]
