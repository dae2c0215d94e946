"""
Ragora SDK - Test Helpers

SSE body builders and the MockTransport request recorder shared by the
test modules.
"""

import json
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx

from ragora import AsyncRagoraClient, RagoraClient


BASE_URL = "https://api.test.ragora.app"


# ============================================================
# SSE helpers
# ============================================================

def sse(data: Any, event: Optional[str] = None) -> str:
    """Render one SSE frame; dicts are JSON encoded."""
    payload = data if isinstance(data, str) else json.dumps(data, ensure_ascii=False)
    lines = []
    if event:
        lines.append(f"event: {event}")
    lines.append(f"data: {payload}")
    return "\n".join(lines) + "\n\n"


def delta(content: str = "", finish_reason: Optional[str] = None) -> Dict[str, Any]:
    """OpenAI-style streaming chunk payload."""
    return {
        "object": "chat.completion.chunk",
        "choices": [{
            "index": 0,
            "delta": {"content": content} if content else {},
            "finish_reason": finish_reason,
        }],
    }


def byte_stream(*parts: bytes) -> Iterable[bytes]:
    """Yield body parts one by one, so each is a separate read."""
    for part in parts:
        yield part


def failing_stream(parts: List[bytes], error: Exception) -> Iterable[bytes]:
    """Yield body parts, then fail like a dropped connection."""
    for part in parts:
        yield part
    raise error


async def async_byte_stream(*parts: bytes):
    for part in parts:
        yield part


async def async_failing_stream(parts: List[bytes], error: Exception):
    for part in parts:
        yield part
    raise error


# ============================================================
# Mock transport
# ============================================================

class RecordingHandler:
    """
    MockTransport handler that records requests and replies from a queue.

    Usage:
        def test_something(mock_api):
            mock_api.reply(200, json={"results": []})
            client = mock_api.client()
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responses: List[Callable[[httpx.Request], httpx.Response]] = []
        self._last: Optional[Callable[[httpx.Request], httpx.Response]] = None

    def reply(self, status_code: int = 200, **kwargs) -> None:
        self._responses.append(lambda request: httpx.Response(status_code, **kwargs))

    def reply_with(self, factory: Callable[[httpx.Request], httpx.Response]) -> None:
        self._responses.append(factory)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        # the last queued reply keeps answering once the queue is drained
        if self._responses:
            self._last = self._responses.pop(0)
        if self._last is None:
            return httpx.Response(500, json={"error": "no mock response queued"})
        return self._last(request)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.last_request.content)

    def client(self, **kwargs) -> RagoraClient:
        http_client = httpx.Client(transport=httpx.MockTransport(self))
        return RagoraClient(
            api_key="test_key",
            base_url=BASE_URL,
            http_client=http_client,
            **kwargs
        )

    def async_client(self, **kwargs) -> AsyncRagoraClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(self))
        return AsyncRagoraClient(
            api_key="test_key",
            base_url=BASE_URL,
            http_client=http_client,
            **kwargs
        )
