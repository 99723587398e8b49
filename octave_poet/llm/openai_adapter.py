# octave_poet/llm/openai_adapter.py

import time
from typing import Optional, Dict, Any, List

import openai

from .base_llm import BaseLLM, LLMConfig, LLMResponse, LLMError, LLMConnectionError, LLMTimeoutError, LLMRateLimitError, LLMInvalidRequestError

class OpenAIAdapter(BaseLLM):
    """OpenAI LLM adapter using the official OpenAI Python client."""

    def __init__(self, config: LLMConfig):
        super().__init__(config)

        if not config.api_key:
            raise LLMError("OpenAI API key is required")

        # Initialize OpenAI client
        self.client = openai.OpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout
        )

        self.logger.info(f"Initialized OpenAI adapter with model: {config.model_name}")

    def generate_with_metadata(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> LLMResponse:
        """Generate response with full metadata using OpenAI API."""
        messages = self._build_messages(prompt, system_prompt)
        return self._complete(messages, **kwargs)

    def generate_structured(self, prompt: str, schema: Dict[str, Any], schema_name: str = "response",
                            system_prompt: Optional[str] = None, **kwargs) -> str:
        """Generate a response constrained by a strict JSON schema."""
        messages = self._build_messages(prompt, system_prompt)
        response_format = {
            "type": "json_schema",
            "json_schema": {
                "name": schema_name,
                "schema": schema,
                "strict": True
            }
        }
        response = self._complete(messages, response_format=response_format, **kwargs)
        return response.content

    def _complete(self, messages: List[Dict[str, str]], **kwargs) -> LLMResponse:
        """Run one chat completion and translate provider errors."""
        try:
            # Merge parameters
            params = self._merge_params(**kwargs)

            # Make API call
            self.logger.debug(f"Making OpenAI API call with model: {params['model']}")
            start_time = time.time()

            # Prepare API parameters, filtering out None values
            api_params = {"messages": messages}
            for k, v in params.items():
                if v is not None:
                    api_params[k] = v

            response = self.client.chat.completions.create(**api_params)

            end_time = time.time()

            # Extract response data
            if not response.choices:
                self.logger.error("OpenAI API returned no choices")
                raise LLMError("OpenAI API returned no choices")
            choice = response.choices[0]
            content = choice.message.content or ""

            # Build usage info
            usage = None
            if response.usage:
                usage = {
                    "prompt_tokens": response.usage.prompt_tokens,
                    "completion_tokens": response.usage.completion_tokens,
                    "total_tokens": response.usage.total_tokens
                }

            # Build metadata
            metadata = {
                "response_time": end_time - start_time,
                "model": response.model,
                "created": response.created,
                "id": response.id,
                "system_fingerprint": getattr(response, 'system_fingerprint', None),
                "refusal": getattr(choice.message, 'refusal', None)
            }

            self.logger.debug(f"OpenAI API call completed in {metadata['response_time']:.2f}s")

            return LLMResponse(
                content=content,
                model=response.model,
                usage=usage,
                finish_reason=choice.finish_reason,
                metadata=metadata
            )

        except openai.AuthenticationError as e:
            self.logger.error(f"OpenAI authentication error: {e}")
            raise LLMConnectionError(f"Authentication failed: {e}") from e

        except openai.RateLimitError as e:
            self.logger.error(f"OpenAI rate limit error: {e}")
            raise LLMRateLimitError(f"Rate limit exceeded: {e}") from e

        except openai.APITimeoutError as e:
            self.logger.error(f"OpenAI timeout error: {e}")
            raise LLMTimeoutError(f"Request timed out: {e}") from e

        except openai.BadRequestError as e:
            self.logger.error(f"OpenAI bad request error: {e}")
            raise LLMInvalidRequestError(f"Invalid request: {e}") from e

        except openai.APIConnectionError as e:
            self.logger.error(f"OpenAI connection error: {e}")
            raise LLMConnectionError(f"Connection failed: {e}") from e

        except openai.OpenAIError as e:
            self._handle_error(e)

    def is_available(self) -> bool:
        """Check if OpenAI service is available."""
        try:
            # Make a minimal API call to check availability
            self.client.chat.completions.create(
                model=self.config.model_name,
                messages=[{"role": "user", "content": "test"}],
                max_tokens=1,
                temperature=0
            )
            return True
        except openai.OpenAIError as e:
            self.logger.warning(f"OpenAI availability check failed: {e}")
            return False

    def get_model_info(self) -> Dict[str, Any]:
        """Get information about the current model."""
        info = super().get_model_info()
        info.update({
            "provider": "openai",
            "supports_structured_output": True,
            "context_length": self._get_context_length(self.config.model_name)
        })
        return info

    def _get_context_length(self, model_name: str) -> int:
        """Get context length for OpenAI models."""
        context_lengths = {
            "gpt-4.1-nano": 1047576,
            "gpt-4.1-mini": 1047576,
            "gpt-4.1": 1047576,
            "gpt-4o-mini": 128000,
            "gpt-4o": 128000,
            "gpt-4-turbo": 128000,
        }

        # Check for exact match first
        if model_name in context_lengths:
            return context_lengths[model_name]

        # Check for partial matches
        for model_prefix, length in context_lengths.items():
            if model_name.startswith(model_prefix):
                return length

        # Default fallback
        return 128000
