"""
Ragora Python SDK - Model Tests
"""

import httpx
import pytest

from ragora.models import (
    AgentSessionDetail,
    ChatMessage,
    ChatResponse,
    CollectionList,
    DocumentStatus,
    MarketplaceProduct,
    ResponseMetadata,
    SearchResponse,
    SearchResult,
    as_float,
    as_int,
    as_optional_float,
    as_optional_str,
    parse_sources,
)


class TestCoercion:
    """Tests for coercion helpers."""

    @pytest.mark.parametrize("value,expected", [
        (1, 1.0),
        (0.25, 0.25),
        ("0.5", 0.0),
        (None, 0.0),
        (True, 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
    ])
    def test_as_float(self, value, expected):
        assert as_float(value) == expected

    def test_huge_integers_fall_back(self):
        huge = int("1" * 400)
        assert as_float(huge) == 0.0
        assert as_float(-huge, 1.5) == 1.5
        assert as_optional_float(huge) is None
        assert as_optional_float(7) == 7.0

    def test_as_int(self):
        assert as_int(3.9) == 3
        assert as_int("3") == 0
        assert as_int(False, 5) == 5

    def test_as_optional_str(self):
        assert as_optional_str(12) == "12"
        assert as_optional_str(True) is None
        assert as_optional_str(["x"]) is None


class TestSearchModels:
    """Tests for search result coercion."""

    def test_search_result_defaults(self):
        result = SearchResult.from_dict({})
        assert result.id == ""
        assert result.content == ""
        assert result.score == 0.0
        assert result.metadata == {}

    def test_search_result_huge_score(self):
        result = SearchResult.from_dict({"id": "a", "score": 10 ** 400})
        assert result.score == 0.0

    def test_search_result_camel_case_ids(self):
        result = SearchResult.from_dict({"id": "c", "documentId": "d", "collectionId": "k"})
        assert result.document_id == "d"
        assert result.collection_id == "k"

    def test_parse_sources_falls_back_to_top_level(self):
        data = {"ragora_stats": {"tokens": 3}, "sources": [{"id": "top"}]}
        assert [s.id for s in parse_sources(data)] == ["top"]

    def test_search_response_skips_non_objects(self):
        response = SearchResponse.from_dict({"results": [{"id": "a"}, None, 3]}, query="q")
        assert response.total == 1

    def test_search_response_graph_context(self):
        response = SearchResponse.from_dict(
            {"results": [], "global_graph_context": {"entities": []}, "fragments": [{"id": 1}, "x"]},
            query="q",
        )
        assert response.knowledge_graph == {"entities": []}
        assert response.fragments == [{"id": 1}]

    def test_non_object_body(self):
        response = SearchResponse.from_dict(["unexpected"], query="q")
        assert response.results == []


class TestChatModels:
    """Tests for chat models."""

    def test_message_constructors(self):
        assert ChatMessage.user("Hi").to_dict() == {"role": "user", "content": "Hi"}
        assert ChatMessage.system("S").role == "system"
        assert ChatMessage.assistant("A").role == "assistant"

    def test_empty_response(self):
        response = ChatResponse.from_dict({})
        assert response.content == ""
        assert response.finish_reason is None
        assert response.usage is None
        assert response.sources == []


class TestResponseMetadata:
    """Tests for header metadata."""

    def test_from_headers(self):
        headers = httpx.Headers({
            "x-request-id": "req_1",
            "x-ragora-api-version": "2024-10-01",
            "x-ragora-cost-usd": "0.002",
            "x-ratelimit-reset": "1700000000",
        })
        meta = ResponseMetadata.from_headers(headers)

        assert meta.request_id == "req_1"
        assert meta.api_version == "2024-10-01"
        assert meta.cost_usd == 0.002
        assert meta.rate_limit_reset == 1700000000
        assert meta.rate_limit_limit is None

    def test_invalid_numbers_ignored(self):
        meta = ResponseMetadata.from_headers(
            httpx.Headers({"x-ragora-cost-usd": "abc", "x-ratelimit-limit": "1.5"})
        )
        assert meta.cost_usd is None
        assert meta.rate_limit_limit is None


class TestResourceModels:
    """Tests for collection, document, marketplace and agent models."""

    def test_collection_list_has_more_aliases(self):
        assert CollectionList.from_dict({"data": [], "has_more": True}).has_more
        assert CollectionList.from_dict({"data": [], "hasMore": True}).has_more

    def test_document_status_flags(self):
        assert DocumentStatus.from_dict({"status": "completed"}).is_completed
        assert DocumentStatus.from_dict({"status": "failed"}).is_failed
        status = DocumentStatus.from_dict({}, document_id="doc-1")
        assert status.id == "doc-1"
        assert status.status == "unknown"
        assert status.is_active is True

    def test_marketplace_seller_name_fallback(self):
        product = MarketplaceProduct.from_dict({"id": "p", "seller": {"id": "u", "name": "Plain"}})
        assert product.seller.name == "Plain"
        assert product.categories is None
        assert product.status == "active"

    def test_session_detail_flat_body(self):
        detail = AgentSessionDetail.from_dict({
            "id": "s1",
            "agent_id": "a1",
            "messages": [{"role": "user", "content": "Hi"}, "junk"],
        })
        assert detail.session.id == "s1"
        assert len(detail.messages) == 1
