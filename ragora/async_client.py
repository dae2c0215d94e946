"""
Ragora SDK - Async Client

Async client for non-blocking API interactions.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import httpx

from ._base import (
    DEFAULT_CHAT_MODEL,
    DEFAULT_TIMEOUT,
    BaseRagoraClient,
    CollectionIds,
    FileInput,
    compact,
    logger,
    read_upload,
)
from .errors import (
    ConnectionError,
    DocumentProcessingError,
    TimeoutError,
)
from .models import (
    Agent,
    AgentChatResponse,
    AgentList,
    AgentSessionDetail,
    AgentSessionList,
    ChatResponse,
    Collection,
    CollectionList,
    CreditBalance,
    DeleteResponse,
    DocumentList,
    DocumentStatus,
    MarketplaceList,
    MarketplaceProduct,
    MessageInput,
    ResponseMetadata,
    SearchResponse,
    UploadResponse,
)
from .streaming import AsyncChatStream, interpret_agent_event, interpret_chat_event


class AsyncRagoraClient(BaseRagoraClient):
    """
    Ragora Async Python Client.

    Same surface as RagoraClient, with coroutine methods and async
    streams.

    Args:
        api_key: Your Ragora API key. If not provided, reads from RAGORA_API_KEY env var.
        base_url: API base URL. Defaults to RAGORA_BASE_URL or https://api.ragora.app
        timeout: Seconds allowed for connecting and for each read. Defaults to 30.
        http_client: Optional pre-configured ``httpx.AsyncClient``.
            It is not closed by ``aclose()``.

    Example:
        >>> async with AsyncRagoraClient(api_key="sk_xxx") as client:
        ...     async for chunk in client.chat_stream("Explain RAG", collection_id="docs"):
        ...         print(chunk.content, end="", flush=True)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(api_key=api_key, base_url=base_url, timeout=timeout)
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self._http_timeout)

    async def search(
        self,
        query: str,
        collection_id: Optional[CollectionIds] = None,
        top_k: int = 5,
        **options: Any
    ) -> SearchResponse:
        """
        Search for relevant document chunks asynchronously.

        See ``RagoraClient.search`` for the accepted options.
        """
        payload = self._search_payload(query, collection_id=collection_id, top_k=top_k, **options)
        data, meta = await self._request("POST", "/v1/retrieve", json=payload)
        return SearchResponse.from_dict(data, query=query, meta=meta)

    async def chat(
        self,
        messages: Union[str, Sequence[MessageInput]],
        collection_id: Optional[CollectionIds] = None,
        model: str = DEFAULT_CHAT_MODEL,
        temperature: Optional[float] = 0.7,
        max_tokens: Optional[int] = None,
        top_k: Optional[int] = None,
        **options: Any
    ) -> ChatResponse:
        """Generate a chat completion asynchronously."""
        payload = self._chat_payload(
            messages,
            stream=False,
            collection_id=collection_id,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            top_k=top_k,
            **options
        )
        data, meta = await self._request("POST", "/v1/chat/completions", json=payload)
        return ChatResponse.from_dict(data, meta=meta)

    def chat_stream(
        self,
        messages: Union[str, Sequence[MessageInput]],
        collection_id: Optional[CollectionIds] = None,
        model: str = DEFAULT_CHAT_MODEL,
        temperature: Optional[float] = 0.7,
        max_tokens: Optional[int] = None,
        top_k: Optional[int] = None,
        **options: Any
    ) -> AsyncChatStream:
        """
        Stream a chat completion asynchronously.

        Not a coroutine: returns an AsyncChatStream that sends the
        request on the first pull. Use it with ``async with`` (or call
        ``aclose()``) when the loop may stop early.

        Example:
            >>> async with client.chat_stream("Tell me a story") as stream:
            ...     async for chunk in stream:
            ...         print(chunk.content, end="", flush=True)
        """
        payload = self._chat_payload(
            messages,
            stream=True,
            collection_id=collection_id,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            top_k=top_k,
            **options
        )
        return AsyncChatStream(
            lambda: self._open_stream("/v1/chat/completions", json=payload),
            interpret_chat_event,
        )

    async def get_balance(self) -> CreditBalance:
        """Get the current credit balance."""
        data, meta = await self._request("GET", "/v1/credits/balance")
        return CreditBalance.from_dict(data, meta=meta)

    async def list_collections(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        search: Optional[str] = None
    ) -> CollectionList:
        data, meta = await self._request(
            "GET",
            "/v1/collections",
            params={"limit": limit, "offset": offset, "search": search},
        )
        return CollectionList.from_dict(data, meta=meta)

    async def get_collection(self, collection_id: str) -> Collection:
        data, meta = await self._request("GET", "/v1/collections", collection_id)
        return Collection.from_dict(data, meta=meta)

    async def create_collection(
        self,
        name: str,
        description: Optional[str] = None,
        slug: Optional[str] = None
    ) -> Collection:
        data, meta = await self._request(
            "POST",
            "/v1/collections",
            json=compact({"name": name, "description": description, "slug": slug}),
        )
        return Collection.from_dict(data, meta=meta)

    async def update_collection(
        self,
        collection_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        slug: Optional[str] = None,
        capability_config: Optional[Dict[str, Any]] = None
    ) -> Collection:
        data, meta = await self._request(
            "PATCH",
            "/v1/collections",
            collection_id,
            json=compact({
                "name": name,
                "description": description,
                "slug": slug,
                "capability_config": capability_config,
            }),
        )
        return Collection.from_dict(data, meta=meta)

    async def delete_collection(self, collection_id: str) -> DeleteResponse:
        data, meta = await self._request("DELETE", "/v1/collections", collection_id)
        return DeleteResponse.from_dict(data, collection_id, "Collection deleted", meta=meta)

    async def upload_document(
        self,
        file: FileInput,
        filename: Optional[str] = None,
        collection_id: Optional[str] = None
    ) -> UploadResponse:
        """Upload a document for processing asynchronously."""
        name, content = read_upload(file, filename)
        data, meta = await self._request(
            "POST",
            "/v1/documents",
            files={"file": (name, content)},
            data=compact({"collection_id": collection_id}),
        )
        return UploadResponse.from_dict(data, filename=name, collection_id=collection_id, meta=meta)

    async def get_document_status(self, document_id: str) -> DocumentStatus:
        data, meta = await self._request("GET", "/v1/documents", document_id, "status")
        return DocumentStatus.from_dict(data, document_id=document_id, meta=meta)

    async def list_documents(
        self,
        collection_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> DocumentList:
        data, meta = await self._request(
            "GET",
            "/v1/documents",
            params={"collection_id": collection_id, "limit": limit, "offset": offset},
        )
        return DocumentList.from_dict(data, meta=meta)

    async def delete_document(self, document_id: str) -> DeleteResponse:
        data, meta = await self._request("DELETE", "/v1/documents", document_id)
        return DeleteResponse.from_dict(data, document_id, "Document deleted", meta=meta)

    async def wait_for_document(
        self,
        document_id: str,
        timeout: float = 300.0,
        poll_interval: float = 2.0
    ) -> DocumentStatus:
        """
        Poll until a document finishes processing.

        Raises:
            DocumentProcessingError: If processing failed.
            TimeoutError: If processing did not finish in time.
        """
        started = time.monotonic()

        while True:
            status = await self.get_document_status(document_id)

            if status.is_completed:
                return status
            if status.is_failed:
                raise DocumentProcessingError(
                    f"Document processing failed: {status.progress_stage or 'unknown error'}",
                    document_id=document_id,
                )
            if time.monotonic() - started >= timeout:
                raise TimeoutError(f"Timeout waiting for document {document_id} to process")

            await asyncio.sleep(poll_interval)

    async def list_marketplace(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        search: Optional[str] = None,
        category: Optional[str] = None,
        trending: bool = False
    ) -> MarketplaceList:
        data, meta = await self._request(
            "GET",
            "/v1/marketplace",
            params={
                "limit": limit,
                "offset": offset,
                "search": search,
                "category": category,
                "trending": "true" if trending else None,
            },
        )
        return MarketplaceList.from_dict(data, meta=meta)

    async def get_marketplace_product(self, id_or_slug: str) -> MarketplaceProduct:
        data, meta = await self._request("GET", "/v1/marketplace", id_or_slug)
        return MarketplaceProduct.from_dict(data, meta=meta)

    async def create_agent(
        self,
        name: str,
        collection_ids: Optional[List[str]] = None,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
        budget_config: Optional[Dict[str, Any]] = None,
        description: Optional[str] = None
    ) -> Agent:
        data, meta = await self._request(
            "POST",
            "/v1/agents",
            json=self._agent_payload(
                name=name,
                description=description,
                collection_ids=collection_ids,
                system_prompt=system_prompt,
                model=model,
                budget_config=budget_config,
            ),
        )
        return Agent.from_dict(data, meta=meta)

    async def list_agents(self) -> AgentList:
        data, meta = await self._request("GET", "/v1/agents")
        return AgentList.from_dict(data, meta=meta)

    async def get_agent(self, agent_id: str) -> Agent:
        data, meta = await self._request("GET", "/v1/agents", agent_id)
        return Agent.from_dict(data, meta=meta)

    async def update_agent(
        self,
        agent_id: str,
        name: Optional[str] = None,
        collection_ids: Optional[List[str]] = None,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
        budget_config: Optional[Dict[str, Any]] = None,
        description: Optional[str] = None
    ) -> Agent:
        data, meta = await self._request(
            "PATCH",
            "/v1/agents",
            agent_id,
            json=self._agent_payload(
                name=name,
                description=description,
                collection_ids=collection_ids,
                system_prompt=system_prompt,
                model=model,
                budget_config=budget_config,
            ),
        )
        return Agent.from_dict(data, meta=meta)

    async def delete_agent(self, agent_id: str) -> DeleteResponse:
        data, meta = await self._request("DELETE", "/v1/agents", agent_id)
        return DeleteResponse.from_dict(data, agent_id, "Agent deleted", meta=meta)

    async def agent_chat(
        self,
        agent_id: str,
        message: str,
        session_id: Optional[str] = None
    ) -> AgentChatResponse:
        """Send a message to an agent asynchronously."""
        data, meta = await self._request(
            "POST",
            "/v1/agents",
            agent_id,
            "chat",
            json=compact({"message": message, "session_id": session_id, "stream": False}),
        )
        return AgentChatResponse.from_dict(data, meta=meta)

    def agent_chat_stream(
        self,
        agent_id: str,
        message: str,
        session_id: Optional[str] = None
    ) -> AsyncChatStream:
        """Stream an agent reply as AgentChatStreamChunk objects."""
        payload = compact({"message": message, "session_id": session_id, "stream": True})
        return AsyncChatStream(
            lambda: self._open_stream("/v1/agents", agent_id, "chat", json=payload),
            interpret_agent_event,
        )

    async def list_agent_sessions(self, agent_id: str) -> AgentSessionList:
        data, meta = await self._request("GET", "/v1/agents", agent_id, "sessions")
        return AgentSessionList.from_dict(data, meta=meta)

    async def get_agent_session(self, agent_id: str, session_id: str) -> AgentSessionDetail:
        data, meta = await self._request("GET", "/v1/agents", agent_id, "sessions", session_id)
        return AgentSessionDetail.from_dict(data, meta=meta)

    async def delete_agent_session(self, agent_id: str, session_id: str) -> DeleteResponse:
        data, meta = await self._request("DELETE", "/v1/agents", agent_id, "sessions", session_id)
        return DeleteResponse.from_dict(data, session_id, "Session deleted", meta=meta)

    # ============================================================
    # Private methods
    # ============================================================

    async def _request(
        self,
        method: str,
        path: str,
        *segments: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None
    ) -> Tuple[Any, ResponseMetadata]:
        """Make an async HTTP request and map errors."""
        url = self._url(path, *segments)
        logger.debug(f"{method} {url}")

        try:
            response = await self._client.request(
                method,
                url,
                json=json,
                params=compact(params) if params else None,
                files=files,
                data=data,
                headers=self._headers(),
                timeout=self._http_timeout,
            )
        except httpx.TimeoutException as e:
            raise TimeoutError("Request timed out") from e
        except httpx.RequestError as e:
            raise ConnectionError(f"Request failed: {e}") from e

        return self._parse_body(response)

    async def _open_stream(self, path: str, *segments: str, json: Dict[str, Any]) -> httpx.Response:
        url = self._url(path, *segments)
        logger.debug(f"POST {url} (stream)")

        request = self._client.build_request(
            "POST",
            url,
            json=json,
            headers=self._headers(stream=True),
            timeout=self._http_timeout,
        )
        try:
            response = await self._client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise TimeoutError("Request timed out") from e
        except httpx.RequestError as e:
            raise ConnectionError(f"Request failed: {e}") from e

        if response.status_code >= 400:
            try:
                await response.aread()
            except httpx.TransportError:
                logger.debug("Could not read error body of streaming response")
            finally:
                await response.aclose()
            raise self._error_from_response(response)

        return response

    async def aclose(self):
        """Close the HTTP client."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()
