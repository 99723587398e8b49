# octave_poet/generation/__init__.py

from .poem_generator import BasePoemGenerator, PoemGenerator

__all__ = ['BasePoemGenerator', 'PoemGenerator']
