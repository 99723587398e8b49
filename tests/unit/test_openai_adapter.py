# tests/unit/test_openai_adapter.py

import httpx
import openai
import pytest
from unittest.mock import Mock, patch
from octave_poet.llm.base_llm import LLMConfig, LLMError, LLMTimeoutError, LLMConnectionError
from octave_poet.llm.openai_adapter import OpenAIAdapter
from octave_poet.models.validation import validation_result_schema

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _response(content="Test response"):
    mock_response = Mock()
    mock_response.choices = [Mock()]
    mock_response.choices[0].message.content = content
    mock_response.choices[0].message.refusal = None
    mock_response.choices[0].finish_reason = "stop"
    mock_response.model = "gpt-4.1-nano"
    mock_response.usage.prompt_tokens = 10
    mock_response.usage.completion_tokens = 5
    mock_response.usage.total_tokens = 15
    mock_response.id = "test-id"
    mock_response.created = 1700000000
    return mock_response


class TestOpenAIAdapter:
    """Test OpenAI adapter with a patched client"""

    def test_init_without_api_key(self):
        with pytest.raises(LLMError, match="OpenAI API key is required"):
            OpenAIAdapter(LLMConfig(model_name="gpt-4.1-nano"))

    @patch('octave_poet.llm.openai_adapter.openai.OpenAI')
    def test_init_success(self, mock_openai_class):
        config = LLMConfig(model_name="gpt-4.1-nano", api_key="test-key", timeout=30)

        adapter = OpenAIAdapter(config)

        assert adapter.config == config
        mock_openai_class.assert_called_once_with(api_key="test-key", base_url=None, timeout=30)

    @patch('octave_poet.llm.openai_adapter.openai.OpenAI')
    def test_generate_sends_system_and_user_turns(self, mock_openai_class):
        mock_client = mock_openai_class.return_value
        mock_client.chat.completions.create.return_value = _response()
        adapter = OpenAIAdapter(LLMConfig(model_name="gpt-4.1-nano", api_key="test-key", temperature=1.0))

        result = adapter.generate("romance", system_prompt="You are a poet")

        assert result == "Test response"
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"] == [
            {"role": "system", "content": "You are a poet"},
            {"role": "user", "content": "romance"},
        ]
        assert kwargs["model"] == "gpt-4.1-nano"
        assert kwargs["temperature"] == 1.0
        assert "response_format" not in kwargs

    @patch('octave_poet.llm.openai_adapter.openai.OpenAI')
    def test_generate_with_metadata(self, mock_openai_class):
        mock_openai_class.return_value.chat.completions.create.return_value = _response()
        adapter = OpenAIAdapter(LLMConfig(model_name="gpt-4.1-nano", api_key="test-key"))

        result = adapter.generate_with_metadata("Test prompt")

        assert result.content == "Test response"
        assert result.usage["total_tokens"] == 15
        assert result.finish_reason == "stop"
        assert result.metadata["id"] == "test-id"

    @patch('octave_poet.llm.openai_adapter.openai.OpenAI')
    def test_generate_structured_uses_strict_json_schema(self, mock_openai_class):
        mock_client = mock_openai_class.return_value
        mock_client.chat.completions.create.return_value = _response('{"ok": true}')
        adapter = OpenAIAdapter(LLMConfig(model_name="gpt-4.1-nano", api_key="test-key", temperature=0.0))
        schema = validation_result_schema()

        result = adapter.generate_structured("poem text", schema=schema, schema_name="poem_validation",
                                             system_prompt="Inspect", temperature=0.0)

        assert result == '{"ok": true}'
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {
            "type": "json_schema",
            "json_schema": {"name": "poem_validation", "schema": schema, "strict": True},
        }
        assert kwargs["temperature"] == 0.0

    @patch('octave_poet.llm.openai_adapter.openai.OpenAI')
    def test_empty_choices_raise_llm_error(self, mock_openai_class):
        response = _response()
        response.choices = []
        mock_openai_class.return_value.chat.completions.create.return_value = response
        adapter = OpenAIAdapter(LLMConfig(model_name="gpt-4.1-nano", api_key="test-key"))

        with pytest.raises(LLMError, match="no choices"):
            adapter.generate("Test prompt")

    @patch('octave_poet.llm.openai_adapter.openai.OpenAI')
    def test_timeout_is_translated(self, mock_openai_class):
        mock_openai_class.return_value.chat.completions.create.side_effect = openai.APITimeoutError(request=REQUEST)
        adapter = OpenAIAdapter(LLMConfig(model_name="gpt-4.1-nano", api_key="test-key"))

        with pytest.raises(LLMTimeoutError):
            adapter.generate("Test prompt")

    @patch('octave_poet.llm.openai_adapter.openai.OpenAI')
    def test_connection_error_is_translated(self, mock_openai_class):
        mock_openai_class.return_value.chat.completions.create.side_effect = openai.APIConnectionError(request=REQUEST)
        adapter = OpenAIAdapter(LLMConfig(model_name="gpt-4.1-nano", api_key="test-key"))

        with pytest.raises(LLMConnectionError):
            adapter.generate("Test prompt")

    @patch('octave_poet.llm.openai_adapter.openai.OpenAI')
    def test_is_available(self, mock_openai_class):
        mock_client = mock_openai_class.return_value
        adapter = OpenAIAdapter(LLMConfig(model_name="gpt-4.1-nano", api_key="test-key"))

        assert adapter.is_available() is True

        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(request=REQUEST)
        assert adapter.is_available() is False

    @patch('octave_poet.llm.openai_adapter.openai.OpenAI')
    def test_close_closes_client(self, mock_openai_class):
        with OpenAIAdapter(LLMConfig(model_name="gpt-4.1-nano", api_key="test-key")) as adapter:
            assert adapter.client is mock_openai_class.return_value

        mock_openai_class.return_value.close.assert_called_once()

    @patch('octave_poet.llm.openai_adapter.openai.OpenAI')
    def test_get_model_info(self, mock_openai_class):
        adapter = OpenAIAdapter(LLMConfig(model_name="gpt-4.1-nano", api_key="test-key"))

        info = adapter.get_model_info()

        assert info["provider"] == "openai"
        assert info["model"] == "gpt-4.1-nano"
        assert info["supports_structured_output"] is True
        assert info["context_length"] == 1047576
