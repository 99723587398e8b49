# octave_poet/interface/__init__.py

from .cli_interface import main, build_pipeline, format_outcome

__all__ = ['main', 'build_pipeline', 'format_outcome']
