"""
Ragora SDK - Pytest Configuration

Configures:
- Clients backed by httpx.MockTransport (no network)
- Standard response bodies
"""

import pytest

from tests.helpers import RecordingHandler


@pytest.fixture
def mock_api() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def mock_chat_response():
    """Standard RAG chat completion body."""
    return {
        "id": "chatcmpl-test123",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "Refunds take 5 days."},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 120, "completion_tokens": 6, "total_tokens": 126},
        "sources": [
            {"id": "chunk-1", "content": "Refunds are processed in 5 days.", "score": 0.91,
             "document_id": "doc-1"}
        ],
    }
