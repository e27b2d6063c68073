"""Tests for AIClientFactory, AIRequestContext and the OpenAI chat adapter."""
import pytest
from unittest.mock import patch, MagicMock

from backend.ai.chat_completion import OpenAIChatCompletionClient
from backend.ai.client_factory import (
    AIClientFactory,
    AIRequestContext,
    _clean_value,
    _property_header,
)
from backend.settings import Settings

pytestmark = pytest.mark.unit


def _settings(**overrides) -> Settings:
    values = dict(
        _env_file=None,
        environment="test",
        openai_api_key="sk-test",
        chat_model="gpt-4o-mini",
        helicone_enabled=False,
        helicone_api_key=None,
    )
    values.update(overrides)
    return Settings(**values)


class TestAIRequestContext:
    """Tests for AIRequestContext tracking headers."""

    def test_empty_context(self):
        """Only the environment header is always present."""
        assert AIRequestContext().to_tracking_headers("test") == {"Helicone-Property-Environment": "test"}

    def test_full_context(self):
        context = AIRequestContext(
            user_id="user123",
            session_id="session456",
            feature_name="fitness_ai_chat",
            custom_properties={"model": "gpt-4o-mini"},
        )
        headers = context.to_tracking_headers("production")

        assert headers["Helicone-User-Id"] == "user123"
        assert headers["Helicone-Session-Id"] == "session456"
        assert headers["Helicone-Property-Feature"] == "fitness_ai_chat"
        assert headers["Helicone-Property-Model"] == "gpt-4o-mini"
        assert headers["Helicone-Property-Environment"] == "production"

    def test_values_cannot_inject_headers(self):
        context = AIRequestContext(session_id="abc\r\nX-Evil: 1", custom_properties={"key": "value\nwith\r\nbreaks"})

        headers = context.to_tracking_headers("test")

        assert headers["Helicone-Session-Id"] == "abcX-Evil: 1"
        assert headers["Helicone-Property-Key"] == "valuewithbreaks"

    def test_invalid_property_names_are_skipped(self):
        context = AIRequestContext(custom_properties={"invalid@key!": "value"})

        assert list(context.to_tracking_headers("test")) == ["Helicone-Property-Environment"]


class TestHeaderHelpers:

    def test_clean_value_drops_control_and_non_ascii(self):
        assert _clean_value("test\x00value\x1fé") == "testvalue"

    def test_property_header_title_cased(self):
        assert _property_header("session_kind") == "Helicone-Property-Session-Kind"

    def test_property_header_invalid(self):
        assert _property_header("invalid@key!") is None


class TestAIClientFactory:
    """Tests for AIClientFactory."""

    def test_missing_api_key(self):
        factory = AIClientFactory(_settings(openai_api_key=None))

        with pytest.raises(ValueError, match="OpenAI API key not configured"):
            factory.create_openai_client()

    @patch("openai.OpenAI")
    def test_direct_client(self, mock_openai):
        AIClientFactory(_settings(), timeout=30.0).create_openai_client()

        mock_openai.assert_called_once_with(api_key="sk-test", timeout=30.0)

    @patch("backend.ai.client_factory.httpx.Client")
    @patch("openai.OpenAI")
    def test_helicone_client_carries_only_auth(self, mock_openai, mock_httpx):
        factory = AIClientFactory(_settings(helicone_enabled=True, helicone_api_key="hk-test"))

        factory.create_openai_client()

        kwargs = mock_openai.call_args.kwargs
        assert kwargs["base_url"] == "https://oai.helicone.ai/v1"
        assert kwargs["default_headers"] == {"Helicone-Auth": "Bearer hk-test"}
        assert kwargs["http_client"] is mock_httpx.return_value

    @patch("openai.OpenAI")
    def test_helicone_without_key_falls_back(self, mock_openai):
        factory = AIClientFactory(_settings(helicone_enabled=True, helicone_api_key=None))

        factory.create_openai_client()

        assert "base_url" not in mock_openai.call_args.kwargs
        assert factory.request_headers(AIRequestContext(user_id="user-1")) == {}

    def test_request_headers_with_helicone(self):
        factory = AIClientFactory(_settings(helicone_enabled=True, helicone_api_key="hk-test"))

        headers = factory.request_headers(AIRequestContext(user_id="user-1", session_id="s-1"))

        assert headers["Helicone-User-Id"] == "user-1"
        assert headers["Helicone-Session-Id"] == "s-1"
        assert headers["Helicone-Property-Environment"] == "test"


class TestOpenAIChatCompletionClient:
    """Tests for the chat-completions adapter."""

    def _response(self, content):
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = content
        return response

    def _factory(self, openai_client, headers=None) -> MagicMock:
        factory = MagicMock()
        factory.create_openai_client.return_value = openai_client
        factory.request_headers.return_value = headers or {}
        return factory

    def test_complete(self):
        openai_client = MagicMock()
        openai_client.chat.completions.create.return_value = self._response("Do 20 squats 🏋️")
        factory = self._factory(openai_client, headers={"Helicone-User-Id": "user-1"})

        reply = OpenAIChatCompletionClient(_settings(), factory=factory).complete(
            [{"role": "user", "content": "hi"}], user_id="user-1", session_id="s-1"
        )

        assert reply == "Do 20 squats 🏋️"
        call = openai_client.chat.completions.create.call_args.kwargs
        assert call["model"] == "gpt-4o-mini"
        assert call["max_tokens"] == 500
        assert call["extra_headers"] == {"Helicone-User-Id": "user-1"}
        context = factory.request_headers.call_args.args[0]
        assert context.user_id == "user-1"
        assert context.session_id == "s-1"

    def test_client_is_built_once_across_calls(self):
        openai_client = MagicMock()
        openai_client.chat.completions.create.return_value = self._response("ok")
        factory = self._factory(openai_client)
        completion = OpenAIChatCompletionClient(_settings(), factory=factory)

        for user in ("user-1", "user-2", "user-3"):
            completion.complete([{"role": "user", "content": "hi"}], user_id=user)

        factory.create_openai_client.assert_called_once()
        assert openai_client.chat.completions.create.call_count == 3

    def test_close_releases_client(self):
        openai_client = MagicMock()
        openai_client.chat.completions.create.return_value = self._response("ok")
        factory = self._factory(openai_client)
        completion = OpenAIChatCompletionClient(_settings(), factory=factory)
        completion.complete([{"role": "user", "content": "hi"}])

        completion.close()
        completion.close()

        openai_client.close.assert_called_once()

    def test_close_before_first_call(self):
        factory = self._factory(MagicMock())

        OpenAIChatCompletionClient(_settings(), factory=factory).close()

        factory.create_openai_client.assert_not_called()

    def test_empty_reply_raises(self):
        openai_client = MagicMock()
        openai_client.chat.completions.create.return_value = self._response(None)

        with pytest.raises(ValueError):
            OpenAIChatCompletionClient(_settings(), factory=self._factory(openai_client)).complete(
                [{"role": "user", "content": "hi"}]
            )
