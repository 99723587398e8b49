# octave_poet/models/__init__.py

from .topic import AllowedTopic, FreeformRequest, Topic, parse_topic, is_allowed_topic
from .poem import Poem, split_lines
from .validation import (
    EXPECTED_LINE_COUNT,
    EXPECTED_LANGUAGE,
    EXPECTED_THEMES,
    DetectedTheme,
    LineCountCheck,
    LanguageCheck,
    ThemeCheck,
    ValidationResult,
    ValidationReport,
    decode_validation_result,
    validation_result_schema,
)
from .clarification import (
    REFUSAL_RESPONSE,
    DISAMBIGUATION_RESPONSE,
    ClarificationKind,
    Clarification,
    GenerationResult,
    detect_clarification,
)
from .outcome import PipelineState, RunStatus, RepairStep, PipelineOutcome

__all__ = [
    'AllowedTopic',
    'FreeformRequest',
    'Topic',
    'parse_topic',
    'is_allowed_topic',
    'Poem',
    'split_lines',
    'EXPECTED_LINE_COUNT',
    'EXPECTED_LANGUAGE',
    'EXPECTED_THEMES',
    'DetectedTheme',
    'LineCountCheck',
    'LanguageCheck',
    'ThemeCheck',
    'ValidationResult',
    'ValidationReport',
    'decode_validation_result',
    'validation_result_schema',
    'REFUSAL_RESPONSE',
    'DISAMBIGUATION_RESPONSE',
    'ClarificationKind',
    'Clarification',
    'GenerationResult',
    'detect_clarification',
    'PipelineState',
    'RunStatus',
    'RepairStep',
    'PipelineOutcome',
]
