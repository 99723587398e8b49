# octave_poet/errors.py

from typing import Any, Dict, Optional


class PipelineError(Exception):
    """
    Base exception for pipeline failures.

    Carries the context the caller needs to act on the failure: the last
    poem seen, the last validation result, how many repairs were attempted
    and the state the pipeline had reached.
    """

    def __init__(self, message: str, poem=None, validation=None,
                 repair_attempts: int = 0, state=None):
        super().__init__(message)
        self.message = message
        self.poem = poem
        self.validation = validation
        self.repair_attempts = repair_attempts
        self.state = state

    def attach_context(self, poem=None, validation=None, repair_attempts: int = 0, state=None) -> "PipelineError":
        """Fill in pipeline context, keeping values that are already set"""
        if self.poem is None:
            self.poem = poem
        if self.validation is None:
            self.validation = validation
        self.repair_attempts = max(self.repair_attempts, repair_attempts)
        if self.state is None:
            self.state = state
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "poem": self.poem.to_dict() if self.poem is not None else None,
            "validation": self.validation.to_dict() if self.validation is not None else None,
            "repair_attempts": self.repair_attempts,
            "state": self.state.value if self.state is not None else None,
        }


class UpstreamFailure(PipelineError):
    """Raised when a text-generation collaborator call fails"""
    pass


class SchemaViolation(PipelineError):
    """Raised when a validator response cannot be decoded into a ValidationResult"""

    def __init__(self, message: str, raw_response: Optional[str] = None, **context):
        super().__init__(message, **context)
        self.raw_response = raw_response


class ExhaustedRetries(PipelineError):
    """Raised on request when the repair budget ran out without a passing poem"""
    pass


class GenerationError(PipelineError):
    """Raised when the generator is given something it cannot work with"""
    pass
