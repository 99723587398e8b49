# octave_poet/llm/anthropic_adapter.py

import json
import time
from typing import Optional, Dict, Any, List

import anthropic

from .base_llm import BaseLLM, LLMConfig, LLMResponse, LLMError, LLMConnectionError, LLMTimeoutError, LLMRateLimitError, LLMInvalidRequestError

class AnthropicAdapter(BaseLLM):
    """Anthropic LLM adapter using the official Anthropic Python client."""

    DEFAULT_MAX_TOKENS = 1000

    def __init__(self, config: LLMConfig):
        super().__init__(config)

        if not config.api_key:
            raise LLMError("Anthropic API key is required")

        # Initialize Anthropic client
        self.client = anthropic.Anthropic(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout
        )

        self.logger.info(f"Initialized Anthropic adapter with model: {config.model_name}")

    def generate_with_metadata(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> LLMResponse:
        """Generate response with full metadata using Anthropic API."""
        return self._create_message(prompt, system_prompt, **kwargs)

    def generate_structured(self, prompt: str, schema: Dict[str, Any], schema_name: str = "response",
                            system_prompt: Optional[str] = None, **kwargs) -> str:
        """
        Generate a response constrained to a shape.

        The shape is offered as the only tool and the model is forced to call
        it; the tool input is returned re-serialized as JSON.
        """
        tools = [{
            "name": schema_name,
            "description": f"Record the {schema_name} in the required structure",
            "input_schema": schema
        }]
        tool_choice = {"type": "tool", "name": schema_name}
        response = self._create_message(prompt, system_prompt, tools=tools, tool_choice=tool_choice, **kwargs)
        return response.content

    def _create_message(self, prompt: str, system_prompt: Optional[str], **kwargs) -> LLMResponse:
        try:
            # Merge parameters (this filters out unsupported parameters)
            params = self._merge_params(**kwargs)

            # Make API call
            self.logger.debug(f"Making Anthropic API call with model: {params['model']}")
            start_time = time.time()

            # Prepare API parameters
            api_params = {
                "model": params["model"],
                "max_tokens": params.get("max_tokens") or self.DEFAULT_MAX_TOKENS,
                "messages": [{"role": "user", "content": prompt}]
            }
            if system_prompt:
                api_params["system"] = system_prompt

            # Add all other parameters from merged params (they're already filtered)
            for k, v in params.items():
                if k not in ["model", "max_tokens", "messages"] and v is not None:
                    api_params[k] = v

            response = self.client.messages.create(**api_params)

            end_time = time.time()

            # Extract response data
            content = self._extract_content(response.content)

            # Build usage info
            usage = None
            if response.usage:
                usage = {
                    "input_tokens": response.usage.input_tokens,
                    "output_tokens": response.usage.output_tokens,
                    "total_tokens": response.usage.input_tokens + response.usage.output_tokens
                }

            # Build metadata
            metadata = {
                "response_time": end_time - start_time,
                "model": response.model,
                "id": response.id,
                "stop_reason": response.stop_reason,
                "stop_sequence": response.stop_sequence
            }

            self.logger.debug(f"Anthropic API call completed in {metadata['response_time']:.2f}s")

            return LLMResponse(
                content=content,
                model=response.model,
                usage=usage,
                finish_reason=response.stop_reason,
                metadata=metadata
            )

        except anthropic.AuthenticationError as e:
            self.logger.error(f"Anthropic authentication error: {e}")
            raise LLMConnectionError(f"Authentication failed: {e}") from e

        except anthropic.RateLimitError as e:
            self.logger.error(f"Anthropic rate limit error: {e}")
            raise LLMRateLimitError(f"Rate limit exceeded: {e}") from e

        except anthropic.APITimeoutError as e:
            self.logger.error(f"Anthropic timeout error: {e}")
            raise LLMTimeoutError(f"Request timed out: {e}") from e

        except anthropic.BadRequestError as e:
            self.logger.error(f"Anthropic bad request error: {e}")
            raise LLMInvalidRequestError(f"Invalid request: {e}") from e

        except anthropic.APIConnectionError as e:
            self.logger.error(f"Anthropic connection error: {e}")
            raise LLMConnectionError(f"Connection failed: {e}") from e

        except anthropic.AnthropicError as e:
            self._handle_error(e)

    def _extract_content(self, blocks: List[Any]) -> str:
        """Text of the reply, or the JSON input of a forced tool call"""
        if not blocks:
            return ""

        for block in blocks:
            if getattr(block, "type", None) == "tool_use":
                return json.dumps(block.input)

        return "".join(getattr(block, "text", "") for block in blocks)

    def is_available(self) -> bool:
        """Check if Anthropic service is available."""
        try:
            # Make a minimal API call to check availability
            self.client.messages.create(
                model=self.config.model_name,
                max_tokens=1,
                messages=[{"role": "user", "content": "test"}]
            )
            return True
        except anthropic.AnthropicError as e:
            self.logger.warning(f"Anthropic availability check failed: {e}")
            return False

    def get_model_info(self) -> Dict[str, Any]:
        """Get information about the current model."""
        info = super().get_model_info()
        info.update({
            "provider": "anthropic",
            "supports_structured_output": True,
            "context_length": 200000
        })
        return info

    def _merge_params(self, **kwargs) -> Dict[str, Any]:
        """
        Merge configuration with runtime parameters, filtering out unsupported parameters.

        Args:
            **kwargs: Runtime parameters

        Returns:
            Merged parameters dictionary with only Anthropic-supported parameters
        """
        # Start with basic parameters that Anthropic supports
        params = {
            'model': self.config.model_name,
        }

        # Add supported parameters only if they're not None
        if self.config.temperature is not None:
            params['temperature'] = self.config.temperature
        if self.config.max_tokens is not None:
            params['max_tokens'] = self.config.max_tokens
        if self.config.top_p is not None and self.config.top_p < 1.0:
            params['top_p'] = self.config.top_p

        # Add extra params from config (filter out unsupported ones)
        for k, v in self.config.extra_params.items():
            if k not in ['frequency_penalty', 'presence_penalty'] and v is not None:
                params[k] = v

        # Override with runtime kwargs (filter out unsupported ones)
        for k, v in kwargs.items():
            if k not in ['frequency_penalty', 'presence_penalty'] and v is not None:
                params[k] = v

        return params
