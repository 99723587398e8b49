# octave_poet/llm/groq_adapter.py

import json
import time
from typing import Optional, Dict, Any, List

import groq

from .base_llm import BaseLLM, LLMConfig, LLMResponse, LLMError, LLMConnectionError, LLMTimeoutError, LLMRateLimitError, LLMInvalidRequestError

class GroqAdapter(BaseLLM):
    """Groq LLM adapter using the official Groq Python client."""

    def __init__(self, config: LLMConfig):
        super().__init__(config)

        if not config.api_key:
            raise LLMError("Groq API key is required")

        # Initialize Groq client
        self.client = groq.Groq(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout
        )

        self.logger.info(f"Initialized Groq adapter with model: {config.model_name}")

    def generate_with_metadata(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> LLMResponse:
        """Generate response with full metadata using Groq API."""
        messages = self._build_messages(prompt, system_prompt)
        return self._complete(messages, **kwargs)

    def generate_structured(self, prompt: str, schema: Dict[str, Any], schema_name: str = "response",
                            system_prompt: Optional[str] = None, **kwargs) -> str:
        """
        Generate a JSON response.

        Groq's JSON mode guarantees a JSON object but not a shape, so the
        schema is appended to the system instruction.
        """
        schema_text = json.dumps(schema, indent=2)
        shape_instruction = f"Respond with a single JSON object named {schema_name} matching this JSON Schema:\n{schema_text}"
        system = f"{system_prompt}\n\n{shape_instruction}" if system_prompt else shape_instruction

        messages = self._build_messages(prompt, system)
        response = self._complete(messages, response_format={"type": "json_object"}, **kwargs)
        return response.content

    def _complete(self, messages: List[Dict[str, str]], **kwargs) -> LLMResponse:
        try:
            # Merge parameters
            params = self._merge_params(**kwargs)

            # Make API call
            self.logger.debug(f"Making Groq API call with model: {params['model']}")
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
                self.logger.error("Groq API returned no choices")
                raise LLMError("Groq API returned no choices")
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
                "id": response.id,
                "created": getattr(response, 'created', None),
                "system_fingerprint": getattr(response, 'system_fingerprint', None)
            }

            self.logger.debug(f"Groq API call completed in {metadata['response_time']:.2f}s")

            return LLMResponse(
                content=content,
                model=response.model,
                usage=usage,
                finish_reason=choice.finish_reason,
                metadata=metadata
            )

        except groq.AuthenticationError as e:
            self.logger.error(f"Groq authentication error: {e}")
            raise LLMConnectionError(f"Authentication failed: {e}") from e

        except groq.RateLimitError as e:
            self.logger.error(f"Groq rate limit error: {e}")
            raise LLMRateLimitError(f"Rate limit exceeded: {e}") from e

        except groq.APITimeoutError as e:
            self.logger.error(f"Groq timeout error: {e}")
            raise LLMTimeoutError(f"Request timed out: {e}") from e

        except groq.BadRequestError as e:
            self.logger.error(f"Groq bad request error: {e}")
            raise LLMInvalidRequestError(f"Invalid request: {e}") from e

        except groq.APIConnectionError as e:
            self.logger.error(f"Groq connection error: {e}")
            raise LLMConnectionError(f"Connection failed: {e}") from e

        except groq.GroqError as e:
            self._handle_error(e)

    def is_available(self) -> bool:
        """Check if Groq service is available."""
        try:
            # Make a minimal API call to check availability
            self.client.chat.completions.create(
                model=self.config.model_name,
                messages=[{"role": "user", "content": "test"}],
                max_tokens=1,
                temperature=0
            )
            return True
        except groq.GroqError as e:
            self.logger.warning(f"Groq availability check failed: {e}")
            return False

    def get_model_info(self) -> Dict[str, Any]:
        """Get information about the current model."""
        info = super().get_model_info()
        info.update({
            "provider": "groq",
            "supports_structured_output": False,  # JSON mode only
            "context_length": 8192
        })
        return info
