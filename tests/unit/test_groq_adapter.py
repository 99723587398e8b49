# tests/unit/test_groq_adapter.py

import json

import groq
import httpx
import pytest
from unittest.mock import Mock, patch
from octave_poet.llm.base_llm import LLMConfig, LLMError, LLMConnectionError
from octave_poet.llm.groq_adapter import GroqAdapter

REQUEST = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")


def _response(content="Test response"):
    mock_response = Mock()
    mock_response.choices = [Mock()]
    mock_response.choices[0].message.content = content
    mock_response.choices[0].finish_reason = "stop"
    mock_response.model = "llama-3.1-8b-instant"
    mock_response.usage.prompt_tokens = 10
    mock_response.usage.completion_tokens = 5
    mock_response.usage.total_tokens = 15
    mock_response.id = "test-id"
    return mock_response


class TestGroqAdapter:
    """Test Groq adapter with a patched client"""

    def test_init_without_api_key(self):
        with pytest.raises(LLMError, match="Groq API key is required"):
            GroqAdapter(LLMConfig(model_name="llama-3.1-8b-instant"))

    @patch('octave_poet.llm.groq_adapter.groq.Groq')
    def test_init_success(self, mock_groq_class):
        config = LLMConfig(model_name="llama-3.1-8b-instant", api_key="test-key", timeout=30)

        adapter = GroqAdapter(config)

        assert adapter.config == config
        mock_groq_class.assert_called_once_with(api_key="test-key", base_url=None, timeout=30)

    @patch('octave_poet.llm.groq_adapter.groq.Groq')
    def test_generate(self, mock_groq_class):
        mock_groq_class.return_value.chat.completions.create.return_value = _response()
        adapter = GroqAdapter(LLMConfig(model_name="llama-3.1-8b-instant", api_key="test-key"))

        assert adapter.generate("Test prompt") == "Test response"

    @patch('octave_poet.llm.groq_adapter.groq.Groq')
    def test_generate_structured_uses_json_mode(self, mock_groq_class):
        mock_client = mock_groq_class.return_value
        mock_client.chat.completions.create.return_value = _response('{"ok": true}')
        adapter = GroqAdapter(LLMConfig(model_name="llama-3.1-8b-instant", api_key="test-key"))
        schema = {"type": "object", "properties": {"ok": {"type": "boolean"}}}

        result = adapter.generate_structured("poem", schema=schema, schema_name="poem_validation",
                                             system_prompt="Inspect", temperature=0.0)

        assert result == '{"ok": true}'
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        system = kwargs["messages"][0]
        assert system["role"] == "system"
        assert system["content"].startswith("Inspect\n\n")
        assert json.dumps(schema, indent=2) in system["content"]
        assert kwargs["messages"][1] == {"role": "user", "content": "poem"}

    @patch('octave_poet.llm.groq_adapter.groq.Groq')
    def test_connection_error_is_translated(self, mock_groq_class):
        mock_groq_class.return_value.chat.completions.create.side_effect = groq.APIConnectionError(request=REQUEST)
        adapter = GroqAdapter(LLMConfig(model_name="llama-3.1-8b-instant", api_key="test-key"))

        with pytest.raises(LLMConnectionError):
            adapter.generate("Test prompt")

    @patch('octave_poet.llm.groq_adapter.groq.Groq')
    def test_empty_choices_raise_llm_error(self, mock_groq_class):
        response = _response()
        response.choices = []
        mock_groq_class.return_value.chat.completions.create.return_value = response
        adapter = GroqAdapter(LLMConfig(model_name="llama-3.1-8b-instant", api_key="test-key"))

        with pytest.raises(LLMError, match="no choices"):
            adapter.generate("Test prompt")

    @patch('octave_poet.llm.groq_adapter.groq.Groq')
    def test_is_available(self, mock_groq_class):
        mock_client = mock_groq_class.return_value
        adapter = GroqAdapter(LLMConfig(model_name="llama-3.1-8b-instant", api_key="test-key"))

        assert adapter.is_available() is True

        mock_client.chat.completions.create.side_effect = groq.APIConnectionError(request=REQUEST)
        assert adapter.is_available() is False

    @patch('octave_poet.llm.groq_adapter.groq.Groq')
    def test_get_model_info(self, mock_groq_class):
        adapter = GroqAdapter(LLMConfig(model_name="llama-3.1-8b-instant", api_key="test-key"))

        info = adapter.get_model_info()

        assert info["provider"] == "groq"
        assert info["supports_structured_output"] is False
