# octave_poet/refinement/__init__.py

from .base_refiner import BaseRefiner
from .poem_repairer import PoemRepairer, summarize_failures

__all__ = [
    'BaseRefiner',
    'PoemRepairer',
    'summarize_failures'
]
