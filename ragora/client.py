"""
Ragora SDK - Synchronous Client

Main client for synchronous API interactions.
"""

from __future__ import annotations

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
from .streaming import ChatStream, interpret_agent_event, interpret_chat_event


class RagoraClient(BaseRagoraClient):
    """
    Ragora Python Client.

    Wraps the Ragora API: retrieval, RAG chat (plain and streaming),
    collections, documents, marketplace, credits and agents.

    Args:
        api_key: Your Ragora API key. If not provided, reads from RAGORA_API_KEY env var.
        base_url: API base URL. Defaults to RAGORA_BASE_URL or https://api.ragora.app
        timeout: Seconds allowed for connecting and for each read. Defaults to 30.
        http_client: Optional pre-configured ``httpx.Client`` (proxies, tests).
            It is not closed by ``close()``.

    Example:
        >>> client = RagoraClient(api_key="sk_xxx")
        >>> results = client.search("How do refunds work?", collection_id="support-docs")
        >>> for result in results.results:
        ...     print(result.score, result.content[:80])
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ):
        super().__init__(api_key=api_key, base_url=base_url, timeout=timeout)
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=self._http_timeout)

    # ============================================================
    # Search
    # ============================================================

    def search(
        self,
        query: str,
        collection_id: Optional[CollectionIds] = None,
        top_k: int = 5,
        **options: Any
    ) -> SearchResponse:
        """
        Search for relevant document chunks.

        Args:
            query: Search query.
            collection_id: Collection ID or slug, or a list of them.
                Omit to search all accessible collections.
            top_k: Number of results to return.
            **options: Extra retrieval options: threshold, filters,
                source_type, source_name, version, version_mode,
                document_keys, custom_tags, domain, domain_filter_mode,
                enable_reranker, graph_filter, temporal_filter.

        Returns:
            SearchResponse with the matching chunks.
        """
        payload = self._search_payload(query, collection_id=collection_id, top_k=top_k, **options)
        data, meta = self._request("POST", "/v1/retrieve", json=payload)
        return SearchResponse.from_dict(data, query=query, meta=meta)

    # ============================================================
    # Chat
    # ============================================================

    def chat(
        self,
        messages: Union[str, Sequence[MessageInput]],
        collection_id: Optional[CollectionIds] = None,
        model: str = DEFAULT_CHAT_MODEL,
        temperature: Optional[float] = 0.7,
        max_tokens: Optional[int] = None,
        top_k: Optional[int] = None,
        **options: Any
    ) -> ChatResponse:
        """
        Generate a chat completion grounded in your collections.

        Args:
            messages: A user message string, or a list of ChatMessage
                objects / dicts with 'role' and 'content'.
            collection_id: Collection ID or slug, or a list of them.
            model: Model to use (e.g. "openai/gpt-4o-mini").
            temperature: Sampling temperature (0-2).
            max_tokens: Maximum tokens to generate.
            top_k: Number of chunks to retrieve for context.
            **options: product_ids, source_type, source_name, version,
                custom_tags, filters, enable_reranker, metadata.

        Returns:
            ChatResponse with the completion and the sources used.
        """
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
        data, meta = self._request("POST", "/v1/chat/completions", json=payload)
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
    ) -> ChatStream:
        """
        Stream a chat completion.

        Takes the same arguments as ``chat``. The request is sent when
        iteration starts.

        Yields:
            ChatStreamChunk objects. Sources arrive in their own chunk
            with empty content.

        Example:
            >>> with client.chat_stream("Tell me about RAG") as stream:
            ...     for chunk in stream:
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
        return ChatStream(
            lambda: self._open_stream("/v1/chat/completions", json=payload),
            interpret_chat_event,
        )

    # ============================================================
    # Credits
    # ============================================================

    def get_balance(self) -> CreditBalance:
        """Get the current credit balance."""
        data, meta = self._request("GET", "/v1/credits/balance")
        return CreditBalance.from_dict(data, meta=meta)

    # ============================================================
    # Collections
    # ============================================================

    def list_collections(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        search: Optional[str] = None
    ) -> CollectionList:
        """
        List your collections.

        Args:
            limit: Page size (max 100).
            offset: Pagination offset.
            search: Optional name filter.
        """
        data, meta = self._request(
            "GET",
            "/v1/collections",
            params={"limit": limit, "offset": offset, "search": search},
        )
        return CollectionList.from_dict(data, meta=meta)

    def get_collection(self, collection_id: str) -> Collection:
        """Get a collection by ID or slug."""
        data, meta = self._request("GET", "/v1/collections", collection_id)
        return Collection.from_dict(data, meta=meta)

    def create_collection(
        self,
        name: str,
        description: Optional[str] = None,
        slug: Optional[str] = None
    ) -> Collection:
        """Create a new collection."""
        data, meta = self._request(
            "POST",
            "/v1/collections",
            json=compact({"name": name, "description": description, "slug": slug}),
        )
        return Collection.from_dict(data, meta=meta)

    def update_collection(
        self,
        collection_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        slug: Optional[str] = None,
        capability_config: Optional[Dict[str, Any]] = None
    ) -> Collection:
        """Update a collection. Only the given fields change."""
        data, meta = self._request(
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

    def delete_collection(self, collection_id: str) -> DeleteResponse:
        """Delete a collection and all its documents."""
        data, meta = self._request("DELETE", "/v1/collections", collection_id)
        return DeleteResponse.from_dict(data, collection_id, "Collection deleted", meta=meta)

    # ============================================================
    # Documents
    # ============================================================

    def upload_document(
        self,
        file: FileInput,
        filename: Optional[str] = None,
        collection_id: Optional[str] = None
    ) -> UploadResponse:
        """
        Upload a document for processing.

        Args:
            file: Raw bytes, a binary file object, or a path.
            filename: Filename to report. Required for raw bytes.
            collection_id: Target collection ID or slug. Uses the
                default collection if omitted.

        Returns:
            UploadResponse; processing continues server-side, see
            ``wait_for_document``.
        """
        name, content = read_upload(file, filename)
        data, meta = self._request(
            "POST",
            "/v1/documents",
            files={"file": (name, content)},
            data=compact({"collection_id": collection_id}),
        )
        return UploadResponse.from_dict(data, filename=name, collection_id=collection_id, meta=meta)

    def get_document_status(self, document_id: str) -> DocumentStatus:
        """Get the processing status of a document."""
        data, meta = self._request("GET", "/v1/documents", document_id, "status")
        return DocumentStatus.from_dict(data, document_id=document_id, meta=meta)

    def list_documents(
        self,
        collection_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> DocumentList:
        """List documents, optionally within one collection."""
        data, meta = self._request(
            "GET",
            "/v1/documents",
            params={"collection_id": collection_id, "limit": limit, "offset": offset},
        )
        return DocumentList.from_dict(data, meta=meta)

    def delete_document(self, document_id: str) -> DeleteResponse:
        """Delete a document."""
        data, meta = self._request("DELETE", "/v1/documents", document_id)
        return DeleteResponse.from_dict(data, document_id, "Document deleted", meta=meta)

    def wait_for_document(
        self,
        document_id: str,
        timeout: float = 300.0,
        poll_interval: float = 2.0
    ) -> DocumentStatus:
        """
        Poll until a document finishes processing.

        Args:
            document_id: Document to wait for.
            timeout: Maximum seconds to wait.
            poll_interval: Seconds between status checks.

        Returns:
            The final DocumentStatus.

        Raises:
            DocumentProcessingError: If processing failed.
            TimeoutError: If processing did not finish in time.
        """
        started = time.monotonic()

        while True:
            status = self.get_document_status(document_id)

            if status.is_completed:
                return status
            if status.is_failed:
                raise DocumentProcessingError(
                    f"Document processing failed: {status.progress_stage or 'unknown error'}",
                    document_id=document_id,
                )
            if time.monotonic() - started >= timeout:
                raise TimeoutError(f"Timeout waiting for document {document_id} to process")

            time.sleep(poll_interval)

    # ============================================================
    # Marketplace
    # ============================================================

    def list_marketplace(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        search: Optional[str] = None,
        category: Optional[str] = None,
        trending: bool = False
    ) -> MarketplaceList:
        """List public marketplace products."""
        data, meta = self._request(
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

    def get_marketplace_product(self, id_or_slug: str) -> MarketplaceProduct:
        """Get a marketplace product by ID or slug."""
        data, meta = self._request("GET", "/v1/marketplace", id_or_slug)
        return MarketplaceProduct.from_dict(data, meta=meta)

    # ============================================================
    # Agents
    # ============================================================

    def create_agent(
        self,
        name: str,
        collection_ids: Optional[List[str]] = None,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
        budget_config: Optional[Dict[str, Any]] = None,
        description: Optional[str] = None
    ) -> Agent:
        """
        Create an agent.

        Search, memory and tool calls run server-side; the agent only
        needs collections to draw knowledge from.
        """
        data, meta = self._request(
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

    def list_agents(self) -> AgentList:
        """List your agents."""
        data, meta = self._request("GET", "/v1/agents")
        return AgentList.from_dict(data, meta=meta)

    def get_agent(self, agent_id: str) -> Agent:
        """Get an agent by ID."""
        data, meta = self._request("GET", "/v1/agents", agent_id)
        return Agent.from_dict(data, meta=meta)

    def update_agent(
        self,
        agent_id: str,
        name: Optional[str] = None,
        collection_ids: Optional[List[str]] = None,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
        budget_config: Optional[Dict[str, Any]] = None,
        description: Optional[str] = None
    ) -> Agent:
        """Update an agent. Only the given fields change."""
        data, meta = self._request(
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

    def delete_agent(self, agent_id: str) -> DeleteResponse:
        """Delete an agent."""
        data, meta = self._request("DELETE", "/v1/agents", agent_id)
        return DeleteResponse.from_dict(data, agent_id, "Agent deleted", meta=meta)

    def agent_chat(
        self,
        agent_id: str,
        message: str,
        session_id: Optional[str] = None
    ) -> AgentChatResponse:
        """
        Send a message to an agent.

        Args:
            agent_id: Agent to talk to.
            message: User message.
            session_id: Continue an existing session; omit to start one.

        Returns:
            AgentChatResponse. Pass its ``session_id`` back to continue
            the conversation.
        """
        data, meta = self._request(
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
    ) -> ChatStream:
        """
        Stream an agent reply.

        Yields:
            AgentChatStreamChunk objects; the last one has ``done=True``.
        """
        payload = compact({"message": message, "session_id": session_id, "stream": True})
        return ChatStream(
            lambda: self._open_stream("/v1/agents", agent_id, "chat", json=payload),
            interpret_agent_event,
        )

    def list_agent_sessions(self, agent_id: str) -> AgentSessionList:
        """List the sessions of an agent."""
        data, meta = self._request("GET", "/v1/agents", agent_id, "sessions")
        return AgentSessionList.from_dict(data, meta=meta)

    def get_agent_session(self, agent_id: str, session_id: str) -> AgentSessionDetail:
        """Get a session with its messages."""
        data, meta = self._request("GET", "/v1/agents", agent_id, "sessions", session_id)
        return AgentSessionDetail.from_dict(data, meta=meta)

    def delete_agent_session(self, agent_id: str, session_id: str) -> DeleteResponse:
        """Delete a session and its server-side memory."""
        data, meta = self._request("DELETE", "/v1/agents", agent_id, "sessions", session_id)
        return DeleteResponse.from_dict(data, session_id, "Session deleted", meta=meta)

    # ============================================================
    # Private methods
    # ============================================================

    def _request(
        self,
        method: str,
        path: str,
        *segments: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None
    ) -> Tuple[Any, ResponseMetadata]:
        """Make an HTTP request and map errors."""
        url = self._url(path, *segments)
        logger.debug(f"{method} {url}")

        try:
            response = self._client.request(
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

    def _open_stream(self, path: str, *segments: str, json: Dict[str, Any]) -> httpx.Response:
        """Send a streaming request; non-2xx responses raise before any chunk is read."""
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
            response = self._client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise TimeoutError("Request timed out") from e
        except httpx.RequestError as e:
            raise ConnectionError(f"Request failed: {e}") from e

        if response.status_code >= 400:
            try:
                response.read()
            except httpx.TransportError:
                logger.debug("Could not read error body of streaming response")
            finally:
                response.close()
            raise self._error_from_response(response)

        return response

    # ============================================================
    # Context Manager
    # ============================================================

    def close(self):
        """Close the HTTP client."""
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
