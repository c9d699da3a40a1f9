# tests/test_llm_fallback.py
#
# Tests for the LLM provider chain and the Ollama health probe.
# HTTP and SDK clients are mocked; no real calls are made.

from unittest.mock import patch, MagicMock

import openai
import pytest
import requests

from digital_twin import config
from digital_twin.services.llm_fallback import (
    generate_text, check_ollama, ollama_completion, openai_completion, gemini_completion,
    ProviderUnavailable, STATIC_PROVIDER, STATIC_REPLY,
)


def _failing(error):
    provider = MagicMock(side_effect=error)
    return provider


class TestGenerateText:
    """The first provider that answers wins."""

    def test_first_success_short_circuits(self):
        first = MagicMock(return_value="from first")
        second = MagicMock(return_value="from second")

        result = generate_text("hello", providers=[("first", first), ("second", second)])

        assert result.text == "from first"
        assert result.provider == "first"
        assert result.errors == []
        second.assert_not_called()

    def test_falls_through_on_connection_error(self):
        down = _failing(requests.ConnectionError("refused"))
        up = MagicMock(return_value="ok")

        result = generate_text("hello", system="be brief", providers=[("ollama", down), ("openai", up)])

        assert result.provider == "openai"
        assert result.text == "ok"
        assert [name for name, _ in result.errors] == ["ollama"]
        up.assert_called_once_with("hello", "be brief")

    def test_unconfigured_provider_is_skipped(self):
        missing = _failing(ProviderUnavailable("no key"))
        up = MagicMock(return_value="ok")

        result = generate_text("hello", providers=[("openai", missing), ("gemini", up)])

        assert result.provider == "gemini"
        assert result.errors == [("openai", "no key")]

    def test_all_failures_return_static_reply(self):
        providers = [
            ("ollama", _failing(requests.Timeout("slow"))),
            ("openai", _failing(ValueError("empty"))),
            ("gemini", _failing(KeyError("candidates"))),
        ]

        result = generate_text("hello", providers=providers)

        assert result.provider == STATIC_PROVIDER
        assert result.text == STATIC_REPLY
        assert result.is_fallback
        assert len(result.errors) == 3

    def test_unexpected_errors_propagate(self):
        with pytest.raises(RuntimeError):
            generate_text("hello", providers=[("broken", _failing(RuntimeError("bug")))])


class TestProviders:

    @patch('digital_twin.services.llm_fallback.requests.post')
    def test_ollama_completion(self, mock_post):
        mock_post.return_value.json.return_value = {"response": "  hi there \n"}

        assert ollama_completion("say hi", "system prompt") == "hi there"

        url = mock_post.call_args.args[0]
        payload = mock_post.call_args.kwargs["json"]
        assert url == f"{config.OLLAMA_URL}/api/generate"
        assert payload["prompt"] == "say hi"
        assert payload["system"] == "system prompt"
        assert payload["stream"] is False

    @patch('digital_twin.services.llm_fallback.requests.post')
    def test_ollama_empty_response_is_an_error(self, mock_post):
        mock_post.return_value.json.return_value = {"response": "   "}
        with pytest.raises(ValueError):
            ollama_completion("say hi")

    def test_openai_without_key_is_unavailable(self):
        with patch.object(config, "OPENAI_API_KEY", None):
            with pytest.raises(ProviderUnavailable):
                openai_completion("hello")

    @patch('digital_twin.services.llm_fallback.openai.OpenAI')
    def test_openai_completion(self, mock_openai):
        response = MagicMock()
        response.choices[0].message.content = " answer "
        mock_openai.return_value.chat.completions.create.return_value = response

        with patch.object(config, "OPENAI_API_KEY", "sk-test"):
            assert openai_completion("question", "system") == "answer"

        messages = mock_openai.return_value.chat.completions.create.call_args.kwargs["messages"]
        assert messages[0] == {"role": "system", "content": "system"}
        assert messages[1] == {"role": "user", "content": "question"}

    def test_gemini_without_key_is_unavailable(self):
        with patch.object(config, "GEMINI_API_KEY", None):
            with pytest.raises(ProviderUnavailable):
                gemini_completion("hello")

    @patch('digital_twin.services.llm_fallback.requests.post')
    def test_gemini_completion(self, mock_post):
        mock_post.return_value.json.return_value = {
            "candidates": [{"content": {"parts": [{"text": "gemini says hi"}]}}]
        }
        with patch.object(config, "GEMINI_API_KEY", "g-key"):
            assert gemini_completion("say hi") == "gemini says hi"
        assert mock_post.call_args.kwargs["params"] == {"key": "g-key"}

    def test_openai_errors_are_provider_errors(self):
        error = openai.APIConnectionError(request=MagicMock())
        up = MagicMock(return_value="fallback worked")
        result = generate_text("hello", providers=[("openai", _failing(error)), ("gemini", up)])
        assert result.provider == "gemini"


class TestCheckOllama:

    @patch('digital_twin.services.llm_fallback.requests.get')
    def test_healthy(self, mock_get):
        mock_get.return_value.raise_for_status.return_value = None

        status = check_ollama()

        assert status.ollama is True
        assert status.error is None
        assert mock_get.call_args.args[0] == f"{config.OLLAMA_URL}/api/tags"
        assert status.checked_at.tzinfo is None

    @patch('digital_twin.services.llm_fallback.requests.get')
    def test_unreachable(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")

        status = check_ollama()

        assert status.ollama is False
        assert "refused" in status.error
        assert status.to_dict()["ollama"] is False
