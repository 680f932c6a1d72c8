"""
Reshape raw gateway replies into the tool result schemas.

All fallbacks (empty strings, empty lists, error messages) are resolved by
the helpers at the top of this module so the three normalizers cannot drift
apart.
"""

import json
from typing import Dict, List, Optional, Union

from pydantic import BaseModel

from .logger import get_logger
from .schemas import (
    Candidate,
    ErrorResult,
    GroundedResult,
    GroundedSource,
    GroundingChunk,
    GroundingSupport,
    SearchResult,
    SearchSource,
    UpstreamResponse,
    UrlMetadata,
    UrlResult,
)

logger = get_logger(__name__)

UNKNOWN_ERROR = "Unknown error"
NO_RESULTS = "No results"
SNIPPET_LIMIT = 300
SNIPPET_SEPARATOR = " "
CONTEXT_SEPARATOR = "\n\n"
URL_RETRIEVAL_SUCCESS = "URL_RETRIEVAL_STATUS_SUCCESS"


# ── defaults ──────────────────────────────────────────────────

def _check_reply(response: UpstreamResponse) -> Union[Candidate, ErrorResult]:
    """Return the first candidate, or the error result that replaces it."""
    if response.error is not None:
        message = response.error.message or UNKNOWN_ERROR
        logger.info(f"Upstream reported error: {message} (code={response.error.code})")
        return ErrorResult(error=message)

    candidate = response.first_candidate
    if candidate is None:
        return ErrorResult(error=NO_RESULTS)
    return candidate


def _answer_text(candidate: Candidate) -> str:
    parts = candidate.content.parts if candidate.content else None
    if not parts or parts[0] is None:
        return ""
    return parts[0].text or ""


def _chunks(candidate: Candidate) -> List[Optional[GroundingChunk]]:
    # None entries keep their slot; chunk positions are what supports refer to.
    meta = candidate.grounding_metadata
    return (meta.grounding_chunks if meta else None) or []


def _supports(candidate: Candidate) -> List[Optional[GroundingSupport]]:
    meta = candidate.grounding_metadata
    return (meta.grounding_supports if meta else None) or []


def _url_metadata(candidate: Candidate) -> List[Optional[UrlMetadata]]:
    meta = candidate.url_context_metadata
    return (meta.url_metadata if meta else None) or []


def _chunk_url(chunk: Optional[GroundingChunk]) -> str:
    if chunk is None or chunk.web is None:
        return ""
    return chunk.web.uri or ""


def _chunk_site(chunk: Optional[GroundingChunk]) -> str:
    if chunk is None or chunk.web is None:
        return ""
    return chunk.web.domain or chunk.web.title or ""


# ── citations ─────────────────────────────────────────────────

def aggregate_citations(supports: List[Optional[GroundingSupport]]) -> Dict[int, List[str]]:
    """
    Map each grounding chunk index to the answer segments that cite it.

    Chunks are referenced only by their position in ``groundingChunks``.
    Texts are appended in encounter order; a chunk cited by several
    segments keeps all of them.
    """
    cited: Dict[int, List[str]] = {}
    for support in supports:
        if support is None:
            continue
        text = (support.segment.text if support.segment else None) or ""
        for idx in support.grounding_chunk_indices or []:
            if idx is None:
                continue
            cited.setdefault(idx, []).append(text)
    return cited


# ── normalizers ───────────────────────────────────────────────

def normalize_search(response: UpstreamResponse, query: str) -> Union[SearchResult, ErrorResult]:
    checked = _check_reply(response)
    if isinstance(checked, ErrorResult):
        return checked

    cited = aggregate_citations(_supports(checked))
    sources = [
        SearchSource(
            url=_chunk_url(chunk),
            site=_chunk_site(chunk),
            snippet=SNIPPET_SEPARATOR.join(cited.get(i, []))[:SNIPPET_LIMIT],
        )
        for i, chunk in enumerate(_chunks(checked))
    ]
    return SearchResult(query=query, answer=_answer_text(checked), sources=sources)


def normalize_grounded(response: UpstreamResponse, query: str) -> Union[GroundedResult, ErrorResult]:
    """Like normalize_search, but keeps the full citing text for each source."""
    checked = _check_reply(response)
    if isinstance(checked, ErrorResult):
        return checked

    cited = aggregate_citations(_supports(checked))
    sources = [
        GroundedSource(
            url=_chunk_url(chunk),
            site=_chunk_site(chunk),
            context=CONTEXT_SEPARATOR.join(cited.get(i, [])),
        )
        for i, chunk in enumerate(_chunks(checked))
    ]
    return GroundedResult(query=query, answer=_answer_text(checked), sources=sources)


def _match_url(entries: List[Optional[UrlMetadata]], url: str) -> Optional[UrlMetadata]:
    for entry in entries:
        if entry is not None and entry.retrieved_url == url:
            return entry
    return entries[0] if entries else None


def normalize_url(response: UpstreamResponse, url: str) -> Union[UrlResult, ErrorResult]:
    checked = _check_reply(response)
    if isinstance(checked, ErrorResult):
        return checked

    entry = _match_url(_url_metadata(checked), url)
    retrieved = (entry.retrieved_url if entry else None) or url
    succeeded = entry is not None and entry.url_retrieval_status == URL_RETRIEVAL_SUCCESS

    return UrlResult(
        url=retrieved,
        status="success" if succeeded else "failed",
        content=_answer_text(checked),
    )


def to_json(result: BaseModel) -> str:
    """Serialize a result as the text block returned to the MCP client."""
    return json.dumps(result.model_dump(), indent=2, ensure_ascii=False)
