# octave_poet/__init__.py
"""
Octave Poet - 8-line English poems on romance or world peace.

Generate, validate and repair poems with two LLM collaborators.
"""

__version__ = "1.0.0"
