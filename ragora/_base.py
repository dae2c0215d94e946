"""
Ragora SDK - Shared Client Logic

Configuration, request building and response mapping shared by the
sync and async clients. Transport lives in the subclasses.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Sequence, Tuple, Union
from urllib.parse import quote

import httpx

from .errors import AuthenticationError, RagoraError
from .models import ChatMessage, MessageInput, ResponseMetadata


__version__ = "0.1.0"

logger = logging.getLogger("ragora.http")

DEFAULT_BASE_URL = "https://api.ragora.app"
DEFAULT_TIMEOUT = 30.0
DEFAULT_CHAT_MODEL = "gpt-4o-mini"

CollectionIds = Union[str, Sequence[str]]
FileInput = Union[bytes, BinaryIO, str, Path]


def compact(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None."""
    return {k: v for k, v in payload.items() if v is not None}


def collection_ids(collection_id: Optional[CollectionIds]) -> Optional[List[str]]:
    """Normalize a single collection ID or a list of them."""
    if collection_id is None:
        return None
    if isinstance(collection_id, str):
        return [collection_id]
    return list(collection_id)


def normalize_messages(
    messages: Union[str, Sequence[MessageInput]]
) -> List[Dict[str, Any]]:
    """Normalize a string, ChatMessage objects or dicts to a list of dicts."""
    if isinstance(messages, str):
        return [{"role": "user", "content": messages}]

    normalized = []
    for m in messages:
        if isinstance(m, ChatMessage):
            normalized.append(m.to_dict())
        elif isinstance(m, dict):
            normalized.append(m)
        else:
            raise TypeError(f"Unsupported message type: {type(m).__name__}")
    return normalized


def read_upload(file: FileInput, filename: Optional[str]) -> Tuple[str, bytes]:
    """Resolve upload content and filename from bytes, a file object or a path."""
    if isinstance(file, (str, Path)):
        path = Path(file)
        return filename or path.name, path.read_bytes()

    if isinstance(file, (bytes, bytearray)):
        if not filename:
            raise ValueError("filename is required when uploading raw bytes")
        return filename, bytes(file)

    name = filename or os.path.basename(getattr(file, "name", "") or "")
    if not name:
        raise ValueError("filename is required when the file object has no name")
    return name, file.read()


class BaseRagoraClient:
    """
    Configuration and request/response mapping for Ragora clients.

    Args:
        api_key: Your Ragora API key. If not provided, reads from RAGORA_API_KEY env var.
        base_url: API base URL. Defaults to RAGORA_BASE_URL or https://api.ragora.app
        timeout: Seconds allowed for connecting and for each read. Defaults to 30.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.api_key = api_key or os.getenv("RAGORA_API_KEY")
        if not self.api_key:
            raise AuthenticationError(
                "API key required. Set RAGORA_API_KEY environment variable or pass api_key parameter."
            )

        self._base_url = (
            base_url or os.getenv("RAGORA_BASE_URL") or DEFAULT_BASE_URL
        ).rstrip("/")
        self._timeout = timeout
        # Applies per read, so an active stream keeps extending its deadline
        self._http_timeout = httpx.Timeout(timeout)

    @property
    def base_url(self) -> str:
        """Base URL for API requests."""
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    def _url(self, path: str, *segments: str) -> str:
        suffix = "".join(f"/{quote(str(s), safe='')}" for s in segments)
        return f"{self._base_url}{path}{suffix}"

    def _headers(self, stream: bool = False) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "text/event-stream" if stream else "application/json",
            "User-Agent": f"ragora-python/{__version__}",
        }

    # ============================================================
    # Payload builders
    # ============================================================

    def _search_payload(
        self,
        query: str,
        collection_id: Optional[CollectionIds] = None,
        top_k: int = 5,
        threshold: Optional[float] = None,
        filters: Optional[Dict[str, Any]] = None,
        source_type: Optional[List[str]] = None,
        source_name: Optional[List[str]] = None,
        version: Optional[List[str]] = None,
        version_mode: Optional[str] = None,
        document_keys: Optional[List[str]] = None,
        custom_tags: Optional[List[str]] = None,
        domain: Optional[List[str]] = None,
        domain_filter_mode: Optional[str] = None,
        enable_reranker: Optional[bool] = None,
        graph_filter: Optional[Dict[str, Any]] = None,
        temporal_filter: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return compact({
            "collection_ids": collection_ids(collection_id),
            "query": query,
            "top_k": top_k,
            "threshold": threshold,
            "filters": filters,
            "source_type": source_type,
            "source_name": source_name,
            "version": version,
            "version_mode": version_mode,
            "document_keys": document_keys,
            "custom_tags": custom_tags,
            "domain": domain,
            "domain_filter_mode": domain_filter_mode,
            "enable_reranker": enable_reranker,
            "graph_filter": compact(graph_filter) if graph_filter else None,
            "temporal_filter": compact(temporal_filter) if temporal_filter else None,
        })

    def _chat_payload(
        self,
        messages: Union[str, Sequence[MessageInput]],
        stream: bool,
        collection_id: Optional[CollectionIds] = None,
        product_ids: Optional[List[str]] = None,
        model: str = DEFAULT_CHAT_MODEL,
        temperature: Optional[float] = 0.7,
        max_tokens: Optional[int] = None,
        top_k: Optional[int] = None,
        source_type: Optional[List[str]] = None,
        source_name: Optional[List[str]] = None,
        version: Optional[List[str]] = None,
        custom_tags: Optional[List[str]] = None,
        filters: Optional[Dict[str, Any]] = None,
        enable_reranker: Optional[bool] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return compact({
            "collection_ids": collection_ids(collection_id),
            "product_ids": product_ids,
            "messages": normalize_messages(messages),
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "top_k": top_k,
            "source_type": source_type,
            "source_name": source_name,
            "version": version,
            "custom_tags": custom_tags,
            "filters": filters,
            "enable_reranker": enable_reranker,
            "metadata": compact(metadata) if metadata else None,
            "stream": stream,
        })

    def _agent_payload(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        collection_ids: Optional[List[str]] = None,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
        budget_config: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return compact({
            "name": name,
            "description": description,
            "collection_ids": collection_ids,
            "system_prompt": system_prompt,
            "model": model,
            "budget_config": budget_config,
        })

    # ============================================================
    # Response handling
    # ============================================================

    def _parse_body(self, response: httpx.Response) -> Tuple[Any, ResponseMetadata]:
        """Map a fully read response to (decoded body, metadata), raising on errors."""
        meta = ResponseMetadata.from_headers(response.headers)

        if response.status_code >= 400:
            raise self._error_from_response(response, meta)

        if not response.content:
            return {}, meta
        try:
            return response.json(), meta
        except ValueError as e:
            raise RagoraError(
                "Invalid JSON in API response",
                status_code=response.status_code,
                request_id=meta.request_id,
            ) from e

    def _error_from_response(
        self,
        response: httpx.Response,
        meta: Optional[ResponseMetadata] = None,
    ) -> RagoraError:
        meta = meta or ResponseMetadata.from_headers(response.headers)

        try:
            body = response.json()
        except (ValueError, httpx.ResponseNotRead):
            body = None

        retry_after = None
        raw_retry_after = response.headers.get("Retry-After")
        if raw_retry_after:
            try:
                retry_after = int(raw_retry_after)
            except ValueError:
                retry_after = None

        logger.warning(
            f"API request failed: status={response.status_code}, request_id={meta.request_id}"
        )

        return RagoraError.from_response(
            response.status_code,
            body,
            request_id=meta.request_id,
            reason=response.reason_phrase,
            retry_after=retry_after,
        )
