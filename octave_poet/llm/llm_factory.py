# octave_poet/llm/llm_factory.py

import os
import logging
from typing import Optional
from .base_llm import BaseLLM, LLMConfig, LLMError
from .openai_adapter import OpenAIAdapter
from .anthropic_adapter import AnthropicAdapter
from .groq_adapter import GroqAdapter

logger = logging.getLogger(__name__)

PROVIDERS = {
    "openai": OpenAIAdapter,
    "anthropic": AnthropicAdapter,
    "groq": GroqAdapter,
}

API_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "groq": "GROQ_API_KEY",
}

DEFAULT_MODELS = {
    "openai": "gpt-4.1-nano",
    "anthropic": "claude-3-5-haiku-20241022",
    "groq": "llama-3.1-8b-instant",
}


class CollaboratorPair:
    """
    The two text-generation clients the pipeline needs.

    `creative` is tuned for high output variance (generation and repair),
    `deterministic` for zero variance (validation). The pair owns both
    clients; close it, or use it as a context manager, when the run is over.
    """

    def __init__(self, creative: BaseLLM, deterministic: BaseLLM):
        self.creative = creative
        self.deterministic = deterministic

    def close(self) -> None:
        self.creative.close()
        if self.deterministic is not self.creative:
            self.deterministic.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"CollaboratorPair(creative={self.creative!r}, deterministic={self.deterministic!r})"


def create_llm(provider: str, config: LLMConfig) -> BaseLLM:
    """
    Create an LLM adapter for a provider.

    Raises:
        LLMError: If the provider is unknown
    """
    adapter_class = PROVIDERS.get(provider.lower())
    if adapter_class is None:
        raise LLMError(f"Unknown LLM provider: {provider}")
    return adapter_class(config)


def create_collaborators(settings) -> CollaboratorPair:
    """
    Build the creative and deterministic clients from LLM settings.

    Args:
        settings: LLMSettings from the configuration manager

    Returns:
        CollaboratorPair sharing provider and model, differing in temperature
    """
    def _config(temperature: float) -> LLMConfig:
        return LLMConfig(
            model_name=settings.model,
            temperature=temperature,
            max_tokens=settings.max_tokens,
            timeout=settings.timeout,
            api_key=settings.api_key,
            base_url=settings.base_url
        )

    creative = create_llm(settings.provider, _config(settings.creative_temperature))
    try:
        deterministic = create_llm(settings.provider, _config(settings.deterministic_temperature))
    except Exception:
        creative.close()
        raise

    logger.info(f"Created collaborators: provider={settings.provider}, model={settings.model}, "
                f"creative_temperature={settings.creative_temperature}, "
                f"deterministic_temperature={settings.deterministic_temperature}")
    return CollaboratorPair(creative=creative, deterministic=deterministic)


def get_real_llm_from_env(temperature: float = 0.0) -> Optional[BaseLLM]:
    """
    Get real LLM instance from environment variables.

    Returns:
        BaseLLM instance if configured, None otherwise

    Environment Variables:
        TEST_REAL_LLMS: Must be set to enable real LLM loading
        REAL_LLM_PROVIDER: Specify which provider to use (default: openai)
        REAL_LLM_MODEL: Override the provider's default model
    """
    if not os.getenv("TEST_REAL_LLMS"):
        return None

    provider = os.getenv("REAL_LLM_PROVIDER", "openai").lower()
    if provider not in PROVIDERS:
        raise LLMError(f"Unknown LLM provider: {provider}")

    api_key = os.getenv(API_KEY_ENV_VARS[provider])
    if not api_key:
        return None

    config = LLMConfig(
        model_name=os.getenv("REAL_LLM_MODEL", DEFAULT_MODELS[provider]),
        temperature=temperature,
        api_key=api_key,
        timeout=30
    )
    return create_llm(provider, config)
