# octave_poet/models/outcome.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from octave_poet.errors import ExhaustedRetries
from .clarification import Clarification
from .poem import Poem
from .validation import ValidationResult


class PipelineState(Enum):
    """States of the generate → validate → repair loop"""
    START = "start"
    GENERATED = "generated"
    VALIDATED = "validated"
    REPAIRING = "repairing"
    DONE = "done"
    EXHAUSTED = "exhausted"
    CLARIFICATION = "clarification"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.DONE, PipelineState.EXHAUSTED, PipelineState.CLARIFICATION)


class RunStatus(Enum):
    """How a pipeline run ended"""
    DONE = "done"
    EXHAUSTED = "exhausted"
    CLARIFICATION = "clarification"


@dataclass(frozen=True)
class RepairStep:
    """One repair in the loop"""
    attempt: int
    before: Poem
    validation: ValidationResult
    after: Poem

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attempt": self.attempt,
            "failed_checks": list(self.validation.failed_checks),
            "before": self.before.get_text(),
            "after": self.after.get_text(),
        }


@dataclass
class PipelineOutcome:
    """Result of one pipeline run"""

    status: RunStatus
    poem: Optional[Poem] = None
    validation: Optional[ValidationResult] = None
    repair_attempts: int = 0
    max_repair_attempts: int = 0
    history: List[RepairStep] = field(default_factory=list)
    transitions: List[PipelineState] = field(default_factory=list)
    clarification: Optional[Clarification] = None

    @property
    def succeeded(self) -> bool:
        return self.status is RunStatus.DONE

    def raise_for_status(self) -> "PipelineOutcome":
        """Raise ExhaustedRetries when the poem never passed validation"""
        if self.status is RunStatus.EXHAUSTED:
            raise ExhaustedRetries(
                f"No conforming poem after {self.repair_attempts} repair attempts",
                poem=self.poem,
                validation=self.validation,
                repair_attempts=self.repair_attempts,
                state=PipelineState.EXHAUSTED,
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "status": self.status.value,
            "succeeded": self.succeeded,
            "poem": self.poem.to_dict() if self.poem else None,
            "validation": self.validation.to_dict() if self.validation else None,
            "repair_attempts": self.repair_attempts,
            "max_repair_attempts": self.max_repair_attempts,
            "history": [step.to_dict() for step in self.history],
            "transitions": [state.value for state in self.transitions],
            "clarification": self.clarification.to_dict() if self.clarification else None,
        }
