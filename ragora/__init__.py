"""
Ragora Python SDK

Retrieval, RAG chat, documents and agents on the Ragora API.

Quick Start:
    from ragora import RagoraClient

    client = RagoraClient(api_key="sk_xxx")

    # Search a collection
    results = client.search("refund policy", collection_id="docs")
    for result in results.results:
        print(result.score, result.content)

    # RAG chat
    response = client.chat("What is our refund policy?", collection_id="docs")
    print(response.content)

    # With streaming
    for chunk in client.chat_stream("Summarize the handbook", collection_id="docs"):
        print(chunk.content, end="", flush=True)

    # Async usage
    async_client = AsyncRagoraClient(api_key="sk_xxx")
    response = await async_client.chat("Hello!")
"""

from ._base import __version__
from .client import RagoraClient
from .async_client import AsyncRagoraClient
from .models import (
    ResponseMetadata,
    SearchResult,
    SearchResponse,
    ChatMessage,
    ChatChoice,
    ChatUsage,
    ChatResponse,
    ChatStreamChunk,
    CreditBalance,
    Collection,
    CollectionList,
    DeleteResponse,
    Document,
    DocumentList,
    DocumentStatus,
    UploadResponse,
    Listing,
    Seller,
    Category,
    MarketplaceProduct,
    MarketplaceList,
    Agent,
    AgentList,
    AgentChatResponse,
    AgentChatStreamChunk,
    AgentSession,
    AgentSessionList,
    AgentMessage,
    AgentSessionDetail,
)
from .errors import (
    APIError,
    APIErrorDetail,
    RagoraError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    InvalidRequestError,
    ServerError,
    TimeoutError,
    ConnectionError,
    StreamError,
    DocumentProcessingError,
    is_retryable_error,
)
from .streaming import (
    SSEEvent,
    SSEDecoder,
    ChatStream,
    AsyncChatStream,
    interpret_chat_event,
    interpret_agent_event,
)
from .utils import set_api_key, search, chat, chat_stream

__all__ = [
    "__version__",
    # Clients
    "RagoraClient",
    "AsyncRagoraClient",
    # Models
    "ResponseMetadata",
    "SearchResult",
    "SearchResponse",
    "ChatMessage",
    "ChatChoice",
    "ChatUsage",
    "ChatResponse",
    "ChatStreamChunk",
    "CreditBalance",
    "Collection",
    "CollectionList",
    "DeleteResponse",
    "Document",
    "DocumentList",
    "DocumentStatus",
    "UploadResponse",
    "Listing",
    "Seller",
    "Category",
    "MarketplaceProduct",
    "MarketplaceList",
    "Agent",
    "AgentList",
    "AgentChatResponse",
    "AgentChatStreamChunk",
    "AgentSession",
    "AgentSessionList",
    "AgentMessage",
    "AgentSessionDetail",
    # Errors
    "APIError",
    "APIErrorDetail",
    "RagoraError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "InvalidRequestError",
    "ServerError",
    "TimeoutError",
    "ConnectionError",
    "StreamError",
    "DocumentProcessingError",
    "is_retryable_error",
    # Streaming
    "SSEEvent",
    "SSEDecoder",
    "ChatStream",
    "AsyncChatStream",
    "interpret_chat_event",
    "interpret_agent_event",
    # Convenience functions
    "set_api_key",
    "search",
    "chat",
    "chat_stream",
]
