# octave_poet/evaluation/__init__.py

from .poem_validator import PoemValidator

__all__ = ['PoemValidator']
