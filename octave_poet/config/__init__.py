# octave_poet/config/__init__.py

from .config_manager import ConfigManager, LLMSettings, PipelineConfig, LoggingConfig

__all__ = [
    'ConfigManager',
    'LLMSettings',
    'PipelineConfig',
    'LoggingConfig'
]
