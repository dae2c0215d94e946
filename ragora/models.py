"""
Ragora SDK - Data Models

Dataclasses for requests and responses. Response payloads are untyped
JSON, so every ``from_dict`` coerces its input: wrong or missing
fields fall back to defaults instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union


# ============================================================
# Coercion helpers
# ============================================================

def is_record(value: Any) -> bool:
    """Check if a decoded JSON value is an object."""
    return isinstance(value, dict)


def as_str(value: Any, default: str = "") -> str:
    """Return ``value`` if it is a string, else ``default``."""
    return value if isinstance(value, str) else default


def as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def as_float(value: Any, default: float = 0.0) -> float:
    """Return ``value`` as a finite float, else ``default``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    try:
        number = float(value)
    except OverflowError:
        return default
    return number if math.isfinite(number) else default


def as_optional_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return default


def as_optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    return as_int(value) if isinstance(value, (int, float)) else None


def as_bool(value: Any, default: bool = False) -> bool:
    return value if isinstance(value, bool) else default


def as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _unwrap(data: Any) -> Dict[str, Any]:
    """Single-resource responses are sometimes wrapped in ``{"data": {...}}``."""
    data = as_dict(data)
    inner = data.get("data")
    return inner if isinstance(inner, dict) else data


# ============================================================
# Response Metadata
# ============================================================

@dataclass
class ResponseMetadata:
    """Metadata extracted from Ragora response headers."""
    request_id: Optional[str] = None
    api_version: Optional[str] = None
    cost_usd: Optional[float] = None
    balance_remaining_usd: Optional[float] = None
    rate_limit_limit: Optional[int] = None
    rate_limit_remaining: Optional[int] = None
    rate_limit_reset: Optional[int] = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> ResponseMetadata:
        """Create from HTTP response headers (case-insensitive mapping)."""
        def safe_float(key: str) -> Optional[float]:
            raw = headers.get(key)
            if raw:
                try:
                    value = float(raw)
                except ValueError:
                    return None
                return value if math.isfinite(value) else None
            return None

        def safe_int(key: str) -> Optional[int]:
            raw = headers.get(key)
            if raw:
                try:
                    return int(raw.strip())
                except ValueError:
                    return None
            return None

        return cls(
            request_id=headers.get("X-Request-ID") or None,
            api_version=headers.get("X-Ragora-API-Version") or None,
            cost_usd=safe_float("X-Ragora-Cost-USD"),
            balance_remaining_usd=safe_float("X-Ragora-Balance-Remaining-USD"),
            rate_limit_limit=safe_int("X-RateLimit-Limit"),
            rate_limit_remaining=safe_int("X-RateLimit-Remaining"),
            rate_limit_reset=safe_int("X-RateLimit-Reset"),
        )


# ============================================================
# Search Models
# ============================================================

@dataclass
class SearchResult:
    """A retrieved document chunk."""
    id: str
    content: str
    score: float
    metadata: Dict[str, Any] = field(default_factory=dict)
    document_id: Optional[str] = None
    collection_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SearchResult:
        """
        Coerce an untyped record into a SearchResult.

        ``score`` is always a finite float (0.0 when missing or not a
        number), ``content`` always a string (``text`` is accepted as an
        alias) and ``id`` always a string.
        """
        content = data.get("content")
        if not isinstance(content, str):
            content = as_str(data.get("text"))

        return cls(
            id=as_optional_str(data.get("id")) or "",
            content=content,
            score=as_float(data.get("score")),
            metadata=dict(as_dict(data.get("metadata"))),
            document_id=as_optional_str(data.get("document_id", data.get("documentId"))),
            collection_id=as_optional_str(data.get("collection_id", data.get("collectionId"))),
        )


def parse_sources(data: Mapping[str, Any]) -> List[SearchResult]:
    """
    Extract RAG sources from a chat payload.

    ``ragora_stats.sources`` wins over a top-level ``sources`` list.
    Entries that are not objects are skipped.
    """
    stats = data.get("ragora_stats")
    raw = None
    if is_record(stats) and isinstance(stats.get("sources"), list):
        raw = stats["sources"]
    if raw is None:
        raw = as_list(data.get("sources"))
    return [SearchResult.from_dict(item) for item in raw if is_record(item)]


@dataclass
class SearchResponse:
    """Response from a search request."""
    results: List[SearchResult]
    query: str
    total: int
    object: Optional[str] = None
    fragments: Optional[List[Dict[str, Any]]] = None
    system_instruction: Optional[str] = None
    knowledge_graph: Optional[Dict[str, Any]] = None
    knowledge_graph_summary: Optional[str] = None
    graph_debug: Optional[Dict[str, Any]] = None
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        query: str,
        meta: Optional[ResponseMetadata] = None
    ) -> SearchResponse:
        """Create from API response."""
        data = as_dict(data)
        results = [
            SearchResult.from_dict(r)
            for r in as_list(data.get("results"))
            if is_record(r)
        ]
        graph = data.get("knowledge_graph", data.get("global_graph_context"))
        fragments = data.get("fragments")

        return cls(
            results=results,
            query=query,
            total=len(results),
            object=as_optional_str(data.get("object")),
            fragments=[f for f in fragments if is_record(f)]
            if isinstance(fragments, list) else None,
            system_instruction=as_optional_str(data.get("system_instruction")),
            knowledge_graph=graph if is_record(graph) else None,
            knowledge_graph_summary=as_optional_str(data.get("knowledge_graph_summary")),
            graph_debug=data.get("graph_debug") if is_record(data.get("graph_debug")) else None,
            meta=meta or ResponseMetadata(),
        )


# ============================================================
# Chat Models
# ============================================================

@dataclass
class ChatMessage:
    """A chat message."""
    role: str
    content: str

    @classmethod
    def system(cls, content: str) -> ChatMessage:
        """Create a system message."""
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> ChatMessage:
        """Create a user message."""
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> ChatMessage:
        """Create an assistant message."""
        return cls(role="assistant", content=content)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ChatMessage:
        return cls(
            role=as_str(data.get("role"), "assistant"),
            content=as_str(data.get("content")),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class ChatChoice:
    """A completion choice."""
    index: int
    message: ChatMessage
    finish_reason: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ChatChoice:
        return cls(
            index=as_int(data.get("index")),
            message=ChatMessage.from_dict(as_dict(data.get("message"))),
            finish_reason=as_optional_str(data.get("finish_reason")),
        )


@dataclass
class ChatUsage:
    """Token usage information."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ChatUsage:
        return cls(
            prompt_tokens=as_int(data.get("prompt_tokens")),
            completion_tokens=as_int(data.get("completion_tokens")),
            total_tokens=as_int(data.get("total_tokens")),
        )


@dataclass
class ChatResponse:
    """Response from a chat completion."""
    id: str
    object: str
    created: int
    model: str
    choices: List[ChatChoice]
    usage: Optional[ChatUsage] = None
    sources: List[SearchResult] = field(default_factory=list)
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        meta: Optional[ResponseMetadata] = None
    ) -> ChatResponse:
        """Create ChatResponse from API response dictionary."""
        data = as_dict(data)
        usage = data.get("usage")

        return cls(
            id=as_str(data.get("id")),
            object=as_str(data.get("object"), "chat.completion"),
            created=as_int(data.get("created")),
            model=as_str(data.get("model")),
            choices=[
                ChatChoice.from_dict(c)
                for c in as_list(data.get("choices"))
                if is_record(c)
            ],
            usage=ChatUsage.from_dict(usage) if is_record(usage) else None,
            sources=parse_sources(data),
            meta=meta or ResponseMetadata(),
        )

    @property
    def content(self) -> str:
        """Content of the first choice."""
        if not self.choices:
            return ""
        return self.choices[0].message.content

    @property
    def finish_reason(self) -> Optional[str]:
        if not self.choices:
            return None
        return self.choices[0].finish_reason


@dataclass(frozen=True)
class ChatStreamChunk:
    """One incremental piece of a streamed chat completion."""
    content: str = ""
    finish_reason: Optional[str] = None
    sources: List[SearchResult] = field(default_factory=list)


# ============================================================
# Credit Models
# ============================================================

@dataclass
class CreditBalance:
    """Current credit balance."""
    balance_usd: float
    currency: str = "USD"
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        meta: Optional[ResponseMetadata] = None
    ) -> CreditBalance:
        data = as_dict(data)
        return cls(
            balance_usd=as_float(data.get("balance_usd")),
            currency=as_str(data.get("currency")) or "USD",
            meta=meta or ResponseMetadata(),
        )


# ============================================================
# Collection Models
# ============================================================

@dataclass
class Collection:
    """A document collection."""
    id: str
    name: str
    owner_id: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    total_documents: int = 0
    total_vectors: int = 0
    total_chunks: int = 0
    total_size_bytes: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        meta: Optional[ResponseMetadata] = None
    ) -> Collection:
        """Create from API response (unwraps a ``data`` envelope)."""
        data = _unwrap(data)
        return cls(
            id=as_optional_str(data.get("id")) or "",
            name=as_str(data.get("name")),
            owner_id=as_optional_str(data.get("owner_id")),
            slug=as_optional_str(data.get("slug")),
            description=as_optional_str(data.get("description")),
            total_documents=as_int(data.get("total_documents")),
            total_vectors=as_int(data.get("total_vectors")),
            total_chunks=as_int(data.get("total_chunks")),
            total_size_bytes=as_int(data.get("total_size_bytes")),
            created_at=as_optional_str(data.get("created_at")),
            updated_at=as_optional_str(data.get("updated_at")),
            meta=meta or ResponseMetadata(),
        )


@dataclass
class CollectionList:
    """A page of collections."""
    data: List[Collection]
    total: int = 0
    limit: int = 0
    offset: int = 0
    has_more: bool = False
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        meta: Optional[ResponseMetadata] = None
    ) -> CollectionList:
        data = as_dict(data)
        items = [Collection.from_dict(c) for c in as_list(data.get("data")) if is_record(c)]
        return cls(
            data=items,
            total=as_int(data.get("total"), len(items)),
            limit=as_int(data.get("limit")),
            offset=as_int(data.get("offset")),
            has_more=as_bool(data.get("has_more", data.get("hasMore"))),
            meta=meta or ResponseMetadata(),
        )


@dataclass
class DeleteResponse:
    """Result of a delete operation."""
    message: str
    id: str
    deleted_at: Optional[str] = None
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        resource_id: str,
        default_message: str = "Deleted",
        meta: Optional[ResponseMetadata] = None
    ) -> DeleteResponse:
        data = as_dict(data)
        return cls(
            message=as_str(data.get("message")) or default_message,
            id=as_optional_str(data.get("id")) or resource_id,
            deleted_at=as_optional_str(data.get("deleted_at")),
            meta=meta or ResponseMetadata(),
        )


# ============================================================
# Document Models
# ============================================================

@dataclass
class Document:
    """A document stored in a collection."""
    id: str
    filename: str
    status: str
    mime_type: Optional[str] = None
    size_bytes: Optional[int] = None
    vector_count: int = 0
    chunk_count: int = 0
    collection_id: Optional[str] = None
    progress_percent: Optional[float] = None
    progress_stage: Optional[str] = None
    error_message: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Document:
        return cls(
            id=as_optional_str(data.get("id")) or "",
            filename=as_str(data.get("filename", data.get("file_name"))),
            status=as_str(data.get("status"), "unknown"),
            mime_type=as_optional_str(data.get("mime_type")),
            size_bytes=as_optional_int(data.get("file_size_bytes", data.get("size_bytes"))),
            vector_count=as_int(data.get("vector_count")),
            chunk_count=as_int(data.get("chunk_count")),
            collection_id=as_optional_str(data.get("collection_id")),
            progress_percent=as_optional_float(data.get("progress_percent")),
            progress_stage=as_optional_str(data.get("progress_stage")),
            error_message=as_optional_str(data.get("error_message")),
            created_at=as_optional_str(data.get("created_at")),
            updated_at=as_optional_str(data.get("updated_at")),
        )


@dataclass
class DocumentList:
    """A page of documents."""
    data: List[Document]
    total: int = 0
    limit: int = 0
    offset: int = 0
    has_more: bool = False
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        meta: Optional[ResponseMetadata] = None
    ) -> DocumentList:
        data = as_dict(data)
        items = [Document.from_dict(d) for d in as_list(data.get("data")) if is_record(d)]
        return cls(
            data=items,
            total=as_int(data.get("total"), len(items)),
            limit=as_int(data.get("limit")),
            offset=as_int(data.get("offset")),
            has_more=as_bool(data.get("has_more", data.get("hasMore"))),
            meta=meta or ResponseMetadata(),
        )


@dataclass
class DocumentStatus:
    """Processing status of a document."""
    id: str
    status: str
    filename: str = ""
    mime_type: Optional[str] = None
    vector_count: int = 0
    chunk_count: int = 0
    progress_percent: Optional[float] = None
    progress_stage: Optional[str] = None
    eta_seconds: Optional[float] = None
    has_transcript: bool = False
    is_active: bool = True
    version_number: int = 1
    created_at: Optional[str] = None
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        document_id: str = "",
        meta: Optional[ResponseMetadata] = None
    ) -> DocumentStatus:
        data = as_dict(data)
        return cls(
            id=as_optional_str(data.get("id")) or document_id,
            status=as_str(data.get("status"), "unknown"),
            filename=as_str(data.get("filename")),
            mime_type=as_optional_str(data.get("mime_type")),
            vector_count=as_int(data.get("vector_count")),
            chunk_count=as_int(data.get("chunk_count")),
            progress_percent=as_optional_float(data.get("progress_percent")),
            progress_stage=as_optional_str(data.get("progress_stage")),
            eta_seconds=as_optional_float(data.get("eta_seconds")),
            has_transcript=as_bool(data.get("has_transcript")),
            is_active=as_bool(data.get("is_active"), True),
            version_number=as_int(data.get("version_number"), 1),
            created_at=as_optional_str(data.get("created_at")),
            meta=meta or ResponseMetadata(),
        )

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @property
    def is_failed(self) -> bool:
        return self.status == "failed"


@dataclass
class UploadResponse:
    """Result of a document upload."""
    id: str
    filename: str
    status: str
    collection_id: str
    message: Optional[str] = None
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        filename: str,
        collection_id: Optional[str] = None,
        meta: Optional[ResponseMetadata] = None
    ) -> UploadResponse:
        data = as_dict(data)
        return cls(
            id=as_optional_str(data.get("id")) or "",
            filename=as_str(data.get("file_name")) or filename,
            status=as_str(data.get("status")) or "processing",
            collection_id=as_str(data.get("collection_id")) or collection_id or "",
            message=as_optional_str(data.get("message")),
            meta=meta or ResponseMetadata(),
        )


# ============================================================
# Marketplace Models
# ============================================================

@dataclass
class Listing:
    """A pricing option for a marketplace product."""
    id: str
    product_id: str
    seller_id: str
    type: str
    price_amount_usd: float = 0.0
    price_interval: Optional[str] = None
    price_per_retrieval_usd: Optional[float] = None
    is_active: bool = True
    buyer_count: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Listing:
        return cls(
            id=as_optional_str(data.get("id")) or "",
            product_id=as_str(data.get("product_id")),
            seller_id=as_str(data.get("seller_id")),
            type=as_str(data.get("type"), "free"),
            price_amount_usd=as_float(data.get("price_amount_usd")),
            price_interval=as_optional_str(data.get("price_interval")),
            price_per_retrieval_usd=as_optional_float(data.get("price_per_retrieval_usd")),
            is_active=as_bool(data.get("is_active"), True),
            buyer_count=as_optional_int(data.get("buyer_count")),
            created_at=as_optional_str(data.get("created_at")),
            updated_at=as_optional_str(data.get("updated_at")),
        )


@dataclass
class Seller:
    """Seller of a marketplace product."""
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


@dataclass
class Category:
    """Marketplace category."""
    id: str
    slug: str
    name: str


@dataclass
class MarketplaceProduct:
    """A product listed on the marketplace."""
    id: str
    seller_id: str
    slug: str
    title: str
    status: str
    collection_id: Optional[str] = None
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    average_rating: float = 0.0
    review_count: int = 0
    total_vectors: int = 0
    total_chunks: int = 0
    access_count: int = 0
    data_size: Optional[str] = None
    is_trending: Optional[bool] = None
    is_verified: Optional[bool] = None
    seller: Optional[Seller] = None
    categories: Optional[List[Category]] = None
    listings: Optional[List[Listing]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        meta: Optional[ResponseMetadata] = None
    ) -> MarketplaceProduct:
        """Create from API response."""
        data = _unwrap(data)

        seller = None
        seller_data = data.get("seller")
        if is_record(seller_data):
            seller = Seller(
                id=as_optional_str(seller_data.get("id")) or "",
                name=as_optional_str(seller_data.get("full_name"))
                or as_optional_str(seller_data.get("name")),
                email=as_optional_str(seller_data.get("email")),
            )

        categories = None
        if isinstance(data.get("categories"), list):
            categories = [
                Category(
                    id=as_optional_str(c.get("id")) or "",
                    slug=as_str(c.get("slug")),
                    name=as_str(c.get("name")),
                )
                for c in data["categories"]
                if is_record(c)
            ]

        listings = None
        if isinstance(data.get("listings"), list):
            listings = [Listing.from_dict(item) for item in data["listings"] if is_record(item)]

        is_trending = data.get("is_trending")
        is_verified = data.get("is_verified")

        return cls(
            id=as_optional_str(data.get("id")) or "",
            seller_id=as_str(data.get("seller_id")),
            slug=as_str(data.get("slug")),
            title=as_str(data.get("title")),
            status=as_str(data.get("status"), "active"),
            collection_id=as_optional_str(data.get("collection_id")),
            description=as_optional_str(data.get("description")),
            thumbnail_url=as_optional_str(data.get("thumbnail_url")),
            average_rating=as_float(data.get("average_rating")),
            review_count=as_int(data.get("review_count")),
            total_vectors=as_int(data.get("total_vectors")),
            total_chunks=as_int(data.get("total_chunks")),
            access_count=as_int(data.get("access_count")),
            data_size=as_optional_str(data.get("data_size")),
            is_trending=is_trending if isinstance(is_trending, bool) else None,
            is_verified=is_verified if isinstance(is_verified, bool) else None,
            seller=seller,
            categories=categories,
            listings=listings,
            created_at=as_optional_str(data.get("created_at")),
            updated_at=as_optional_str(data.get("updated_at")),
            meta=meta or ResponseMetadata(),
        )


@dataclass
class MarketplaceList:
    """A page of marketplace products."""
    data: List[MarketplaceProduct]
    total: int = 0
    limit: int = 0
    offset: int = 0
    has_more: bool = False
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        meta: Optional[ResponseMetadata] = None
    ) -> MarketplaceList:
        data = as_dict(data)
        items = [
            MarketplaceProduct.from_dict(p)
            for p in as_list(data.get("data"))
            if is_record(p)
        ]
        return cls(
            data=items,
            total=as_int(data.get("total"), len(items)),
            limit=as_int(data.get("limit")),
            offset=as_int(data.get("offset")),
            has_more=as_bool(data.get("has_more", data.get("hasMore"))),
            meta=meta or ResponseMetadata(),
        )


# ============================================================
# Agent Models
# ============================================================

@dataclass
class Agent:
    """A server-side conversational agent."""
    id: str
    name: str
    description: Optional[str] = None
    collection_ids: List[str] = field(default_factory=list)
    system_prompt: Optional[str] = None
    model: Optional[str] = None
    budget_config: Dict[str, Any] = field(default_factory=dict)
    status: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        meta: Optional[ResponseMetadata] = None
    ) -> Agent:
        data = _unwrap(data)
        return cls(
            id=as_optional_str(data.get("id")) or "",
            name=as_str(data.get("name")),
            description=as_optional_str(data.get("description")),
            collection_ids=[
                c for c in as_list(data.get("collection_ids")) if isinstance(c, str)
            ],
            system_prompt=as_optional_str(data.get("system_prompt")),
            model=as_optional_str(data.get("model")),
            budget_config=dict(as_dict(data.get("budget_config"))),
            status=as_optional_str(data.get("status")),
            created_at=as_optional_str(data.get("created_at")),
            updated_at=as_optional_str(data.get("updated_at")),
            meta=meta or ResponseMetadata(),
        )


@dataclass
class AgentList:
    """Agents owned by the API key."""
    agents: List[Agent]
    total: int = 0
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        meta: Optional[ResponseMetadata] = None
    ) -> AgentList:
        data = as_dict(data)
        raw = data.get("agents", data.get("data"))
        agents = [Agent.from_dict(a) for a in as_list(raw) if is_record(a)]
        return cls(
            agents=agents,
            total=as_int(data.get("total"), len(agents)),
            meta=meta or ResponseMetadata(),
        )


@dataclass
class AgentChatResponse:
    """Reply from an agent chat turn."""
    message: str
    session_id: str
    citations: List[Dict[str, Any]] = field(default_factory=list)
    stats: Optional[Dict[str, Any]] = None
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        meta: Optional[ResponseMetadata] = None
    ) -> AgentChatResponse:
        data = as_dict(data)
        message = data.get("message")
        if is_record(message):
            message = message.get("content")
        if not isinstance(message, str):
            choices = as_list(data.get("choices"))
            first = choices[0] if choices and is_record(choices[0]) else {}
            message = as_str(as_dict(first.get("message")).get("content"))

        stats = data.get("stats", data.get("ragora_stats"))

        return cls(
            message=message,
            session_id=as_str(data.get("session_id")),
            citations=[c for c in as_list(data.get("citations")) if is_record(c)],
            stats=stats if is_record(stats) else None,
            meta=meta or ResponseMetadata(),
        )


@dataclass(frozen=True)
class AgentChatStreamChunk:
    """One incremental piece of a streamed agent reply."""
    content: str = ""
    session_id: Optional[str] = None
    stats: Optional[Dict[str, Any]] = None
    done: bool = False


@dataclass
class AgentSession:
    """A conversation session with an agent."""
    id: str
    agent_id: str = ""
    status: str = "open"
    message_count: int = 0
    title: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AgentSession:
        return cls(
            id=as_optional_str(data.get("id")) or "",
            agent_id=as_str(data.get("agent_id")),
            status=as_str(data.get("status"), "open"),
            message_count=as_int(data.get("message_count")),
            title=as_optional_str(data.get("title")),
            created_at=as_optional_str(data.get("created_at")),
            updated_at=as_optional_str(data.get("updated_at")),
        )


@dataclass
class AgentSessionList:
    """Sessions of an agent."""
    sessions: List[AgentSession]
    total: int = 0
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        meta: Optional[ResponseMetadata] = None
    ) -> AgentSessionList:
        data = as_dict(data)
        raw = data.get("sessions", data.get("data"))
        sessions = [AgentSession.from_dict(s) for s in as_list(raw) if is_record(s)]
        return cls(
            sessions=sessions,
            total=as_int(data.get("total"), len(sessions)),
            meta=meta or ResponseMetadata(),
        )


@dataclass
class AgentMessage:
    """A message stored in an agent session."""
    role: str
    content: str
    id: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AgentMessage:
        return cls(
            role=as_str(data.get("role"), "assistant"),
            content=as_str(data.get("content")),
            id=as_optional_str(data.get("id")),
            created_at=as_optional_str(data.get("created_at")),
        )


@dataclass
class AgentSessionDetail:
    """A session together with its messages."""
    session: AgentSession
    messages: List[AgentMessage] = field(default_factory=list)
    meta: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        meta: Optional[ResponseMetadata] = None
    ) -> AgentSessionDetail:
        data = as_dict(data)
        session_data = data.get("session")
        if not is_record(session_data):
            session_data = data
        return cls(
            session=AgentSession.from_dict(session_data),
            messages=[
                AgentMessage.from_dict(m)
                for m in as_list(data.get("messages"))
                if is_record(m)
            ],
            meta=meta or ResponseMetadata(),
        )


MessageInput = Union[ChatMessage, Dict[str, Any]]
