"""
Ragora Python SDK - Async Client Tests
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from tests.helpers import delta, sse
from ragora import (
    AsyncChatStream,
    AsyncRagoraClient,
    DocumentProcessingError,
    NotFoundError,
    RateLimitError,
    ResponseMetadata,
    TimeoutError,
)


class TestAsyncRagoraClient:
    """Tests for the async client."""

    def test_client_creation(self):
        client = AsyncRagoraClient(api_key="test_key", timeout=10.0)
        assert client.api_key == "test_key"
        assert client.timeout == 10.0

    @pytest.mark.asyncio
    async def test_search(self, mock_api):
        mock_api.reply(200, json={"results": [{"id": "c1", "content": "x", "score": 0.5}]})
        client = mock_api.async_client()

        response = await client.search("q", collection_id="docs")

        assert mock_api.last_request.url.path == "/v1/retrieve"
        assert response.results[0].score == 0.5
        await client.aclose()

    @pytest.mark.asyncio
    async def test_chat(self, mock_api, mock_chat_response):
        mock_api.reply(200, json=mock_chat_response, headers={"X-Request-ID": "req_1"})
        client = mock_api.async_client()

        response = await client.chat("How long do refunds take?")

        assert response.content == "Refunds take 5 days."
        assert response.meta.request_id == "req_1"
        assert mock_api.last_json()["stream"] is False

    @pytest.mark.asyncio
    async def test_chat_with_patched_request(self, mock_chat_response):
        client = AsyncRagoraClient(api_key="test_key")
        with patch.object(client, "_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = (mock_chat_response, ResponseMetadata())

            response = await client.chat("Hi", collection_id=["a", "b"])

            assert response.usage.prompt_tokens == 120
            assert mock_request.call_args.kwargs["json"]["collection_ids"] == ["a", "b"]
        await client.aclose()

    def test_chat_stream_is_not_a_coroutine(self):
        client = AsyncRagoraClient(api_key="test_key")
        stream = client.chat_stream("Hi")
        assert isinstance(stream, AsyncChatStream)

    @pytest.mark.asyncio
    async def test_chat_stream(self, mock_api):
        body = (
            sse({"sources": [{"id": "s1"}]}, event="ragora_metadata")
            + sse(delta("Hi"))
            + sse(delta(finish_reason="stop"))
            + sse("[DONE]")
        )
        mock_api.reply(200, content=body.encode(), headers={"content-type": "text/event-stream"})
        client = mock_api.async_client()

        chunks = [chunk async for chunk in client.chat_stream("Hi")]

        assert [c.content for c in chunks] == ["", "Hi", ""]
        assert chunks[0].sources[0].id == "s1"
        assert chunks[-1].finish_reason == "stop"

    @pytest.mark.asyncio
    async def test_agent_chat_stream(self, mock_api):
        body = sse({"content": "Done", "session_id": "s1", "done": True}) + sse("[DONE]")
        mock_api.reply(200, content=body.encode())
        client = mock_api.async_client()

        chunks = [chunk async for chunk in client.agent_chat_stream("a1", "Hi")]

        assert mock_api.last_request.url.path == "/v1/agents/a1/chat"
        assert chunks[0].done is True
        assert chunks[0].session_id == "s1"

    @pytest.mark.asyncio
    async def test_error_mapping(self, mock_api):
        mock_api.reply(404, json={"message": "Collection not found"})
        client = mock_api.async_client()

        with pytest.raises(NotFoundError) as exc_info:
            await client.get_collection("missing")

        assert exc_info.value.message == "Collection not found"

    @pytest.mark.asyncio
    async def test_rate_limit(self, mock_api):
        mock_api.reply(429, json={"error": {"code": "rate_limited", "message": "Slow down"}})
        client = mock_api.async_client()

        with pytest.raises(RateLimitError) as exc_info:
            await client.get_balance()

        assert exc_info.value.retry_after == 60
        assert exc_info.value.is_retryable

    @pytest.mark.asyncio
    async def test_timeout(self, mock_api):
        def slow(request):
            raise httpx.ConnectTimeout("slow")

        mock_api.reply_with(slow)
        client = mock_api.async_client()

        with pytest.raises(TimeoutError):
            await client.list_agents()

    @pytest.mark.asyncio
    async def test_upload_document(self, mock_api):
        mock_api.reply(200, json={"id": "doc-1", "status": "pending"})
        client = mock_api.async_client()

        upload = await client.upload_document(b"text", filename="a.txt")

        assert mock_api.last_request.headers["content-type"].startswith("multipart/form-data")
        assert upload.status == "pending"

    @pytest.mark.asyncio
    async def test_wait_for_document(self, mock_api):
        mock_api.reply(200, json={"status": "processing"})
        mock_api.reply(200, json={"status": "completed"})
        client = mock_api.async_client()

        with patch("ragora.async_client.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            status = await client.wait_for_document("doc-1", poll_interval=1.5)

        assert status.is_completed
        mock_sleep.assert_awaited_once_with(1.5)

    @pytest.mark.asyncio
    async def test_wait_for_document_failed(self, mock_api):
        mock_api.reply(200, json={"status": "failed"})
        client = mock_api.async_client()

        with pytest.raises(DocumentProcessingError):
            await client.wait_for_document("doc-1")

    @pytest.mark.asyncio
    async def test_agent_session_endpoints(self, mock_api):
        mock_api.reply(200, json={"data": [{"id": "s1"}]})
        client = mock_api.async_client()

        sessions = await client.list_agent_sessions("a1")
        assert [s.id for s in sessions.sessions] == ["s1"]

        mock_api.reply(200, json={"id": "s1", "messages": []})
        detail = await client.get_agent_session("a1", "s1")
        assert detail.session.id == "s1"

    @pytest.mark.asyncio
    async def test_context_manager(self):
        async with AsyncRagoraClient(api_key="test_key") as client:
            pass
        assert client._client.is_closed
