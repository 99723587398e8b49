# octave_poet/core/__init__.py

from .orchestrator import PoemOrchestrator, DEFAULT_MAX_REPAIR_ATTEMPTS

__all__ = ['PoemOrchestrator', 'DEFAULT_MAX_REPAIR_ATTEMPTS']
