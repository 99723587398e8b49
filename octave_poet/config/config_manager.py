# octave_poet/config/config_manager.py

import os
import re
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

SUPPORTED_PROVIDERS = ("openai", "anthropic", "groq")

_PLACEHOLDER = re.compile(r'\$\{([^}]+)\}')

@dataclass
class LLMSettings:
    """Settings shared by the creative and deterministic collaborators"""
    provider: str = "openai"
    model: str = "gpt-4.1-nano"
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    timeout: int = 320
    max_tokens: Optional[int] = None
    creative_temperature: float = 1.0
    deterministic_temperature: float = 0.0

@dataclass
class PipelineConfig:
    """Repair loop configuration"""
    max_repair_attempts: int = 5

@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

def load_env_file(env_path: str = ".env") -> None:
    """Load KEY=VALUE lines from a .env file; variables already set win."""
    if not os.path.exists(env_path):
        return
    with open(env_path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#') and '=' in line:
                key, value = line.split('=', 1)
                os.environ.setdefault(key.strip(), value.strip().strip('"').strip("'"))

def replace_env_placeholders(text: str) -> str:
    """Replace ${VARIABLE_NAME} placeholders with environment values."""
    logger = logging.getLogger(__name__)

    def replace_placeholder(match):
        placeholder = match.group(1)
        env_value = os.getenv(placeholder)
        if env_value is None:
            logger.debug(f"Environment variable {placeholder} not set; keeping placeholder")
            return match.group(0)  # Keep original placeholder
        return env_value

    return _PLACEHOLDER.sub(replace_placeholder, text)

class ConfigManager:
    """
    Manages configuration loading and access.

    Loads a .env file, reads YAML with ${VAR} placeholders substituted,
    applies environment variable overrides and provides typed access to
    configuration sections.
    """

    def __init__(self, config_path: Optional[str] = None, env_path: Optional[str] = ".env"):
        self.config_path = Path(config_path) if config_path else self._get_default_config_path()
        self.env_path = env_path
        self.logger = logging.getLogger(__name__)

        self._config: Dict[str, Any] = {}
        self._load_config()

    def _get_default_config_path(self) -> Path:
        """Get default configuration file path"""
        return Path(__file__).parent / "default_config.yaml"

    def _load_config(self):
        """Load configuration from YAML file"""
        if self.env_path:
            load_env_file(self.env_path)

        with open(self.config_path, 'r', encoding='utf-8') as f:
            content = replace_env_placeholders(f.read())

        self._config = yaml.safe_load(content) or {}
        if not isinstance(self._config, dict):
            raise ValueError(f"Configuration root must be a mapping: {self.config_path}")

        # Apply environment variable overrides
        self._apply_env_overrides()

        self.logger.info(f"Loaded configuration from {self.config_path}")

    def _apply_env_overrides(self):
        """Apply environment variable overrides"""
        llm = self._config.setdefault("llm", {})

        if os.getenv("OCTAVE_LLM_PROVIDER"):
            llm["provider"] = os.getenv("OCTAVE_LLM_PROVIDER")

        if os.getenv("OCTAVE_LLM_MODEL"):
            llm["model"] = os.getenv("OCTAVE_LLM_MODEL")

        # LLM API keys
        if os.getenv("OPENAI_API_KEY"):
            llm.setdefault("openai", {})["api_key"] = os.getenv("OPENAI_API_KEY")

        if os.getenv("ANTHROPIC_API_KEY"):
            llm.setdefault("anthropic", {})["api_key"] = os.getenv("ANTHROPIC_API_KEY")

        if os.getenv("GROQ_API_KEY"):
            llm.setdefault("groq", {})["api_key"] = os.getenv("GROQ_API_KEY")

        if os.getenv("OCTAVE_MAX_REPAIR_ATTEMPTS"):
            self._config.setdefault("pipeline", {})["max_repair_attempts"] = int(os.getenv("OCTAVE_MAX_REPAIR_ATTEMPTS"))

        if os.getenv("OCTAVE_LOG_LEVEL"):
            self._config.setdefault("logging", {})["level"] = os.getenv("OCTAVE_LOG_LEVEL")

    def get_llm_settings(self) -> LLMSettings:
        """Get settings for the configured provider"""
        llm_config = self._config.get("llm", {})
        provider = str(llm_config.get("provider", "openai")).lower()
        provider_config = llm_config.get(provider) or {}

        api_key = provider_config.get("api_key")
        if api_key and _PLACEHOLDER.search(str(api_key)):
            # Unresolved placeholder counts as missing
            api_key = None

        return LLMSettings(
            provider=provider,
            model=llm_config.get("model", "gpt-4.1-nano"),
            api_key=api_key,
            base_url=provider_config.get("base_url"),
            timeout=llm_config.get("timeout", 320),
            max_tokens=llm_config.get("max_tokens"),
            creative_temperature=float(llm_config.get("creative_temperature", 1.0)),
            deterministic_temperature=float(llm_config.get("deterministic_temperature", 0.0))
        )

    def get_pipeline_config(self) -> PipelineConfig:
        """Get repair loop configuration"""
        pipeline_config = self._config.get("pipeline", {})

        return PipelineConfig(
            max_repair_attempts=pipeline_config.get("max_repair_attempts", 5)
        )

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration"""
        log_config = self._config.get("logging", {})

        return LoggingConfig(
            level=log_config.get("level", "INFO"),
            format=log_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    def get_config_errors(self) -> List[str]:
        """List problems that would stop a pipeline run"""
        errors = []
        settings = self.get_llm_settings()

        if settings.provider not in SUPPORTED_PROVIDERS:
            errors.append(f"Unsupported LLM provider: {settings.provider}")
        if not settings.model:
            errors.append("llm.model is required")
        if not settings.api_key:
            errors.append(f"No API key configured for provider {settings.provider}")
        if not 0 <= settings.creative_temperature <= 2:
            errors.append("llm.creative_temperature must be between 0 and 2")
        if settings.deterministic_temperature != 0:
            errors.append("llm.deterministic_temperature must be 0")

        max_repairs = self.get_pipeline_config().max_repair_attempts
        if isinstance(max_repairs, bool) or not isinstance(max_repairs, int) or max_repairs < 0:
            errors.append("pipeline.max_repair_attempts must be a non-negative integer")

        return errors

    def validate_config(self) -> bool:
        """Validate configuration completeness"""
        errors = self.get_config_errors()
        for error in errors:
            self.logger.warning(error)
        return not errors

    def get_raw_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary"""
        return self._config.copy()
