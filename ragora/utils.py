"""
Ragora SDK - Utility Functions

Convenience functions for quick usage without creating a client.
"""

from typing import Any, Optional, Sequence, Union

from ._base import CollectionIds
from .client import RagoraClient
from .models import ChatResponse, MessageInput, SearchResponse
from .streaming import ChatStream


# Default client instance (created lazily)
_default_client: Optional[RagoraClient] = None


def _get_default_client() -> RagoraClient:
    """Get or create the default client."""
    global _default_client
    if _default_client is None:
        _default_client = RagoraClient()
    return _default_client


def set_api_key(api_key: str) -> None:
    """
    Set the default API key.

    This allows using the convenience functions without
    explicitly creating a client.

    Args:
        api_key: Your Ragora API key.

    Example:
        >>> import ragora
        >>> ragora.set_api_key("sk_xxx")
        >>> results = ragora.search("refund policy", collection_id="docs")
    """
    global _default_client
    if _default_client is not None:
        _default_client.close()
    _default_client = RagoraClient(api_key=api_key)


def search(
    query: str,
    collection_id: Optional[CollectionIds] = None,
    top_k: int = 5,
    **kwargs: Any
) -> SearchResponse:
    """
    Quick search function using the default client.

    Example:
        >>> import ragora
        >>> for result in ragora.search("refund policy").results:
        ...     print(result.score, result.content)
    """
    return _get_default_client().search(query, collection_id=collection_id, top_k=top_k, **kwargs)


def chat(
    messages: Union[str, Sequence[MessageInput]],
    collection_id: Optional[CollectionIds] = None,
    **kwargs: Any
) -> ChatResponse:
    """
    Quick chat function using the default client.

    Example:
        >>> import ragora
        >>> response = ragora.chat("What is our refund policy?", collection_id="docs")
        >>> print(response.content)
    """
    return _get_default_client().chat(messages, collection_id=collection_id, **kwargs)


def chat_stream(
    messages: Union[str, Sequence[MessageInput]],
    collection_id: Optional[CollectionIds] = None,
    **kwargs: Any
) -> ChatStream:
    """
    Quick streaming chat function using the default client.

    Example:
        >>> import ragora
        >>> with ragora.chat_stream("Tell me a story") as stream:
        ...     for chunk in stream:
        ...         print(chunk.content, end="")
    """
    return _get_default_client().chat_stream(messages, collection_id=collection_id, **kwargs)
