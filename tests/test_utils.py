"""
Ragora Python SDK - Convenience Function Tests
"""

from unittest.mock import MagicMock, patch

import ragora
from ragora import utils


class TestConvenienceFunctions:
    """Tests for module-level helpers."""

    def setup_method(self):
        utils._default_client = None

    def teardown_method(self):
        utils._default_client = None

    def test_set_api_key(self):
        ragora.set_api_key("sk_module")
        assert utils._default_client.api_key == "sk_module"

    def test_set_api_key_replaces_client(self):
        ragora.set_api_key("first")
        first = utils._default_client
        ragora.set_api_key("second")
        assert utils._default_client is not first
        assert first._client.is_closed

    def test_functions_delegate_to_default_client(self):
        client = MagicMock()
        utils._default_client = client

        ragora.search("q", collection_id="docs", threshold=0.3)
        client.search.assert_called_once_with("q", collection_id="docs", top_k=5, threshold=0.3)

        ragora.chat("Hi", model="x")
        client.chat.assert_called_once_with("Hi", collection_id=None, model="x")

        ragora.chat_stream("Hi")
        client.chat_stream.assert_called_once_with("Hi", collection_id=None)

    def test_default_client_from_env(self):
        with patch.dict("os.environ", {"RAGORA_API_KEY": "env_key"}):
            client = utils._get_default_client()
        assert client.api_key == "env_key"
        assert utils._get_default_client() is client

    def test_default_client_created_once(self, mocker):
        factory = mocker.patch("ragora.utils.RagoraClient")

        ragora.chat("Hi")
        ragora.chat("Again")

        factory.assert_called_once_with()
        assert factory.return_value.chat.call_count == 2
