"""
Wire and result models.

Upstream models mirror the Gemini ``generateContent`` reply. Every field is
optional and unknown keys are ignored, since the gateway is not guaranteed
to follow the schema. A value of the wrong type is dropped to None on its
own, so one bad field or list item never rejects the rest of the reply.
Result models are what the tools hand back.
"""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, WrapValidator, field_validator
from pydantic.alias_generators import to_camel


def _drop_invalid(value: Any, handler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        return None


Lenient = WrapValidator(_drop_invalid)


class UpstreamModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


# ── upstream reply ────────────────────────────────────────────

class UpstreamError(UpstreamModel):
    message: Annotated[Optional[str], Lenient] = None
    code: Annotated[Optional[Union[int, str]], Lenient] = None


class Part(UpstreamModel):
    text: Annotated[Optional[str], Lenient] = None


class Content(UpstreamModel):
    parts: Annotated[Optional[List[Annotated[Optional[Part], Lenient]]], Lenient] = None


class WebChunk(UpstreamModel):
    uri: Annotated[Optional[str], Lenient] = None
    title: Annotated[Optional[str], Lenient] = None
    domain: Annotated[Optional[str], Lenient] = None


class GroundingChunk(UpstreamModel):
    web: Annotated[Optional[WebChunk], Lenient] = None


class Segment(UpstreamModel):
    text: Annotated[Optional[str], Lenient] = None


class GroundingSupport(UpstreamModel):
    segment: Annotated[Optional[Segment], Lenient] = None
    grounding_chunk_indices: Annotated[Optional[List[Annotated[Optional[int], Lenient]]], Lenient] = None


class GroundingMetadata(UpstreamModel):
    web_search_queries: Optional[List[Any]] = None
    grounding_chunks: Annotated[Optional[List[Annotated[Optional[GroundingChunk], Lenient]]], Lenient] = None
    grounding_supports: Annotated[Optional[List[Annotated[Optional[GroundingSupport], Lenient]]], Lenient] = None


class UrlMetadata(UpstreamModel):
    retrieved_url: Annotated[Optional[str], Lenient] = None
    url_retrieval_status: Annotated[Optional[str], Lenient] = None


class UrlContextMetadata(UpstreamModel):
    url_metadata: Annotated[Optional[List[Annotated[Optional[UrlMetadata], Lenient]]], Lenient] = None


class Candidate(UpstreamModel):
    content: Annotated[Optional[Content], Lenient] = None
    grounding_metadata: Annotated[Optional[GroundingMetadata], Lenient] = None
    url_context_metadata: Annotated[Optional[UrlContextMetadata], Lenient] = None


class UpstreamResponse(UpstreamModel):
    candidates: Annotated[Optional[List[Annotated[Optional[Candidate], Lenient]]], Lenient] = None
    error: Annotated[Optional[UpstreamError], Lenient] = None

    @field_validator("error", mode="before")
    @classmethod
    def _coerce_error(cls, value):
        # Some proxies answer {"error": "..."}; any other non-empty value still counts as an error.
        if isinstance(value, str):
            return {"message": value} if value else None
        if value is None or isinstance(value, dict):
            return value
        return {} if value else None

    @property
    def first_candidate(self) -> Optional[Candidate]:
        """Only the first candidate is ever consulted; None when absent or unreadable."""
        return self.candidates[0] if self.candidates else None

    @classmethod
    def failure(cls, message: str) -> "UpstreamResponse":
        return cls(error=UpstreamError(message=message))


# ── tool results ──────────────────────────────────────────────

class SearchSource(BaseModel):
    url: str = Field(description="source URL")
    site: str = Field(description="source domain, or its title when no domain is known")
    snippet: str = Field(description="cited answer text, at most 300 characters")


class SearchResult(BaseModel):
    """Compact answer for interactive web search."""
    query: str
    answer: str
    sources: List[SearchSource] = Field(default_factory=list)


class GroundedSource(BaseModel):
    url: str = Field(description="source URL")
    site: str = Field(description="source domain, or its title when no domain is known")
    context: str = Field(description="every answer segment citing this source, untruncated")


class GroundedResult(BaseModel):
    """Research answer with full citation context per source."""
    query: str
    answer: str
    sources: List[GroundedSource] = Field(default_factory=list)


class UrlResult(BaseModel):
    url: str
    status: Literal["success", "failed"]
    content: str


class ErrorResult(BaseModel):
    error: str
