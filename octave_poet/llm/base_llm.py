# octave_poet/llm/base_llm.py

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List
from dataclasses import dataclass
import json
import logging

@dataclass
class LLMConfig:
    """Configuration for LLM providers"""
    model_name: str
    temperature: float = 0.7
    max_tokens: Optional[int] = None
    top_p: float = 1.0
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0
    timeout: int = 320
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    extra_params: Dict[str, Any] = None

    def __post_init__(self):
        if self.extra_params is None:
            self.extra_params = {}

@dataclass
class LLMResponse:
    """Response from LLM provider"""
    content: str
    model: str
    usage: Optional[Dict[str, int]] = None
    finish_reason: Optional[str] = None
    metadata: Dict[str, Any] = None

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = {}

class LLMError(Exception):
    """Base exception for LLM-related errors"""
    pass

class LLMConnectionError(LLMError):
    """Raised when connection to LLM provider fails"""
    pass

class LLMTimeoutError(LLMError):
    """Raised when LLM request times out"""
    pass

class LLMRateLimitError(LLMError):
    """Raised when rate limit is exceeded"""
    pass

class LLMInvalidRequestError(LLMError):
    """Raised when request is invalid"""
    pass

class BaseLLM(ABC):
    """
    Abstract base class for text-generation collaborators.

    A request is an optional system instruction, the user turn, and an
    optional output-shape constraint (a JSON Schema). Provider adapters
    translate provider failures into the LLMError hierarchy.

    Instances own a client connection and are meant to be closed explicitly,
    or used as context managers.
    """

    def __init__(self, config: LLMConfig):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self._validate_config()

    @property
    def model_name(self) -> str:
        return self.config.model_name

    def generate(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> str:
        """
        Generate text response from prompt.

        Args:
            prompt: User turn text
            system_prompt: Optional system instruction
            **kwargs: Additional parameters to override config

        Returns:
            Generated text response

        Raises:
            LLMError: If generation fails
        """
        response = self.generate_with_metadata(prompt, system_prompt=system_prompt, **kwargs)
        return response.content

    @abstractmethod
    def generate_with_metadata(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> LLMResponse:
        """
        Generate text response with metadata.

        Raises:
            LLMError: If generation fails
        """
        pass

    @abstractmethod
    def generate_structured(self, prompt: str, schema: Dict[str, Any], schema_name: str = "response",
                            system_prompt: Optional[str] = None, **kwargs) -> str:
        """
        Generate a response constrained to a declared shape.

        Args:
            prompt: User turn text
            schema: JSON Schema the response must conform to
            schema_name: Name of the shape, used by providers that require one
            system_prompt: Optional system instruction
            **kwargs: Additional parameters to override config

        Returns:
            Raw JSON text as produced by the provider. Decoding and checking it
            against the shape is the caller's job.

        Raises:
            LLMError: If the call fails
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the LLM provider is available.

        Returns:
            True if provider is available, False otherwise
        """
        pass

    def close(self) -> None:
        """Release the underlying client"""
        client = getattr(self, "client", None)
        if client is not None and hasattr(client, "close"):
            client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _validate_config(self):
        """Validate the configuration"""
        if not self.config.model_name:
            raise ValueError("model_name is required")

        if not 0 <= self.config.temperature <= 2:
            raise ValueError("temperature must be between 0 and 2")

        if not 0 <= self.config.top_p <= 1:
            raise ValueError("top_p must be between 0 and 1")

        if self.config.max_tokens is not None and self.config.max_tokens <= 0:
            raise ValueError("max_tokens must be positive")

    def _merge_params(self, **kwargs) -> Dict[str, Any]:
        """
        Merge configuration with runtime parameters.

        Args:
            **kwargs: Runtime parameters

        Returns:
            Merged parameters dictionary
        """
        params = {
            'model': self.config.model_name,
            'temperature': self.config.temperature,
            'top_p': self.config.top_p,
            'frequency_penalty': self.config.frequency_penalty,
            'presence_penalty': self.config.presence_penalty,
        }

        if self.config.max_tokens:
            params['max_tokens'] = self.config.max_tokens

        # Add extra params from config
        params.update(self.config.extra_params)

        # Override with runtime kwargs
        params.update(kwargs)

        return params

    def _build_messages(self, prompt: str, system_prompt: Optional[str] = None) -> List[Dict[str, str]]:
        """Chat messages for providers that take the system turn inline"""
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    def _handle_error(self, error: Exception, operation: str = "generation") -> None:
        """
        Handle and re-raise errors with appropriate types.

        Args:
            error: Original exception
            operation: Operation that failed

        Raises:
            Appropriate LLMError subclass
        """
        error_msg = f"LLM {operation} failed: {str(error)}"
        self.logger.error(error_msg)

        # Convert common errors to specific types
        if "timeout" in str(error).lower() or "timed out" in str(error).lower():
            raise LLMTimeoutError(error_msg) from error
        elif "rate limit" in str(error).lower() or "quota" in str(error).lower():
            raise LLMRateLimitError(error_msg) from error
        elif "connection" in str(error).lower() or "network" in str(error).lower():
            raise LLMConnectionError(error_msg) from error
        elif "invalid" in str(error).lower() or "bad request" in str(error).lower():
            raise LLMInvalidRequestError(error_msg) from error
        else:
            raise LLMError(error_msg) from error

    def get_model_info(self) -> Dict[str, Any]:
        """
        Get information about the model.

        Returns:
            Dictionary with model information
        """
        return {
            'provider': self.__class__.__name__,
            'model': self.config.model_name,
            'temperature': self.config.temperature,
            'max_tokens': self.config.max_tokens,
        }

    def __str__(self) -> str:
        """String representation"""
        return f"{self.__class__.__name__}(model={self.config.model_name})"

    def __repr__(self) -> str:
        """Detailed representation"""
        return (f"{self.__class__.__name__}(model={self.config.model_name}, "
                f"temperature={self.config.temperature}, "
                f"max_tokens={self.config.max_tokens})")


class MockLLM(BaseLLM):
    """
    Mock LLM implementation for testing.

    Returns predefined responses in order, cycling when they run out. A
    response that is an Exception instance is raised instead of returned.
    Structured calls serialize dict responses to JSON.
    """

    def __init__(self, config: LLMConfig, responses: Optional[List[Any]] = None):
        super().__init__(config)
        self.responses = list(responses or [])
        self.call_count = 0
        self.last_prompt = None
        self.last_system_prompt = None
        self.last_schema = None
        self.last_kwargs: Dict[str, Any] = {}
        self.calls: List[Dict[str, Any]] = []

    def _next_response(self, prompt: str, system_prompt: Optional[str], schema: Optional[Dict[str, Any]],
                       **kwargs) -> Any:
        self.last_prompt = prompt
        self.last_system_prompt = system_prompt
        self.last_schema = schema
        self.last_kwargs = kwargs
        self.call_count += 1
        self.calls.append({
            'prompt': prompt,
            'system_prompt': system_prompt,
            'schema': schema,
            'kwargs': kwargs,
        })

        self.logger.debug(f"MockLLM call {self.call_count}: {prompt[:200]}...")

        if not self.responses:
            return f"Mock response for: {prompt[:50]}..."

        response = self.responses[(self.call_count - 1) % len(self.responses)]
        if isinstance(response, Exception):
            raise response
        return response

    def generate_with_metadata(self, prompt: str, system_prompt: Optional[str] = None, **kwargs) -> LLMResponse:
        """Generate mock response with metadata"""
        content = self._next_response(prompt, system_prompt, None, **kwargs)
        if not isinstance(content, str):
            content = json.dumps(content)

        return LLMResponse(
            content=content,
            model=self.config.model_name,
            usage={'prompt_tokens': len(prompt.split()), 'completion_tokens': len(content.split())},
            finish_reason='stop',
            metadata={'mock': True, 'call_count': self.call_count}
        )

    def generate_structured(self, prompt: str, schema: Dict[str, Any], schema_name: str = "response",
                            system_prompt: Optional[str] = None, **kwargs) -> str:
        """Generate mock structured response"""
        content = self._next_response(prompt, system_prompt, schema, **kwargs)
        if isinstance(content, str):
            return content
        return json.dumps(content)

    def is_available(self) -> bool:
        """Mock is always available"""
        return True
