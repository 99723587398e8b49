# octave_poet/llm/__init__.py

from .base_llm import (
    BaseLLM,
    MockLLM,
    LLMConfig,
    LLMResponse,
    LLMError,
    LLMConnectionError,
    LLMTimeoutError,
    LLMRateLimitError,
    LLMInvalidRequestError
)
from .openai_adapter import OpenAIAdapter
from .anthropic_adapter import AnthropicAdapter
from .groq_adapter import GroqAdapter
from .llm_factory import CollaboratorPair, create_llm, create_collaborators, get_real_llm_from_env

__all__ = [
    "BaseLLM",
    "MockLLM",
    "LLMConfig",
    "LLMResponse",
    "LLMError",
    "LLMConnectionError",
    "LLMTimeoutError",
    "LLMRateLimitError",
    "LLMInvalidRequestError",
    "OpenAIAdapter",
    "AnthropicAdapter",
    "GroqAdapter",
    "CollaboratorPair",
    "create_llm",
    "create_collaborators",
    "get_real_llm_from_env"
]
