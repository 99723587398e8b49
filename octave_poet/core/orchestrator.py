# octave_poet/core/orchestrator.py

import logging
from typing import List, Optional

from octave_poet.errors import PipelineError, UpstreamFailure
from octave_poet.evaluation.poem_validator import PoemValidator
from octave_poet.generation.poem_generator import BasePoemGenerator
from octave_poet.llm.base_llm import LLMError
from octave_poet.models.outcome import PipelineOutcome, PipelineState, RepairStep, RunStatus
from octave_poet.models.poem import Poem
from octave_poet.models.topic import Topic
from octave_poet.models.validation import ValidationResult
from octave_poet.refinement.base_refiner import BaseRefiner

DEFAULT_MAX_REPAIR_ATTEMPTS = 5


class PoemOrchestrator:
    """
    Drives the generate → validate → repair loop.

    The generator runs once. Every poem it or the repairer produces is
    validated before anything else happens, and the loop stops on the first
    passing validation (DONE) or when the repair budget is spent (EXHAUSTED).
    The budget counts repair calls, so a run makes at most
    max_repair_attempts + 1 validation calls.

    Collaborator failures are raised as UpstreamFailure and undecodable
    validator replies as SchemaViolation, both carrying the last poem, the
    last validation and the number of repairs made.
    """

    def __init__(self, generator: BasePoemGenerator, validator: PoemValidator, repairer: BaseRefiner,
                 max_repair_attempts: int = DEFAULT_MAX_REPAIR_ATTEMPTS):
        if isinstance(max_repair_attempts, bool) or not isinstance(max_repair_attempts, int):
            raise TypeError("max_repair_attempts must be an integer")
        if max_repair_attempts < 0:
            raise ValueError("max_repair_attempts must be non-negative")

        self.generator = generator
        self.validator = validator
        self.repairer = repairer
        self.max_repair_attempts = max_repair_attempts
        self.logger = logging.getLogger(self.__class__.__name__)

        # Per-run state, owned by the orchestrator
        self._state = PipelineState.START
        self._transitions: List[PipelineState] = []
        self._poem: Optional[Poem] = None
        self._validation: Optional[ValidationResult] = None
        self._repair_attempts = 0

    @property
    def state(self) -> PipelineState:
        return self._state

    def run(self, topic: Topic) -> PipelineOutcome:
        """
        Run the pipeline for a topic.

        Args:
            topic: AllowedTopic or FreeformRequest

        Returns:
            PipelineOutcome with status DONE, EXHAUSTED or CLARIFICATION

        Raises:
            UpstreamFailure: If any collaborator call fails
            SchemaViolation: If a validator reply cannot be decoded
        """
        self._reset()
        self.logger.info(f"🚀 Starting pipeline (repair budget: {self.max_repair_attempts})")

        try:
            return self._run(topic)
        except LLMError as e:
            self.logger.error(f"💀 Collaborator call failed in state {self._state.value}: {e}")
            raise UpstreamFailure(
                f"Collaborator call failed: {e}",
                poem=self._poem,
                validation=self._validation,
                repair_attempts=self._repair_attempts,
                state=self._state
            ) from e
        except PipelineError as e:
            self.logger.error(f"💀 Pipeline failed in state {self._state.value}: {e}")
            e.attach_context(
                poem=self._poem,
                validation=self._validation,
                repair_attempts=self._repair_attempts,
                state=self._state
            )
            raise

    def _run(self, topic: Topic) -> PipelineOutcome:
        generation = self.generator.generate(topic)
        if not generation.is_poem:
            self._transition(PipelineState.CLARIFICATION)
            return self._outcome(RunStatus.CLARIFICATION, [], clarification=generation.clarification)

        self._poem = generation.poem
        self._transition(PipelineState.GENERATED)

        history: List[RepairStep] = []
        while True:
            self._validation = self.validator.validate(self._poem)
            self._transition(PipelineState.VALIDATED)

            if not self._validation.is_consistent_with_report:
                self.logger.warning(
                    f"⚠️ Validator claimed overall_result={self._validation.reported_overall_result} "
                    f"but its checks give {self._validation.overall_result}; using the checks"
                )

            if self._validation.overall_result:
                self._transition(PipelineState.DONE)
                self.logger.info(f"🎉 Poem passed after {self._repair_attempts} repair attempts")
                return self._outcome(RunStatus.DONE, history)

            if self._repair_attempts >= self.max_repair_attempts:
                self._transition(PipelineState.EXHAUSTED)
                self.logger.warning(f"⏹️ Repair budget of {self.max_repair_attempts} exhausted; "
                                    f"still failing: {', '.join(self._validation.failed_checks)}")
                return self._outcome(RunStatus.EXHAUSTED, history)

            self._transition(PipelineState.REPAIRING)
            self._repair_attempts += 1
            self.logger.info(f"🔄 Repair attempt {self._repair_attempts}/{self.max_repair_attempts}")

            before = self._poem
            self._poem = self.repairer.refine(before, self._validation)
            history.append(RepairStep(
                attempt=self._repair_attempts,
                before=before,
                validation=self._validation,
                after=self._poem
            ))

    def _transition(self, state: PipelineState) -> None:
        self.logger.info(f"State {self._state.value} → {state.value}")
        self._state = state
        self._transitions.append(state)

    def _outcome(self, status: RunStatus, history: List[RepairStep], clarification=None) -> PipelineOutcome:
        return PipelineOutcome(
            status=status,
            poem=self._poem,
            validation=self._validation,
            repair_attempts=self._repair_attempts,
            max_repair_attempts=self.max_repair_attempts,
            history=history,
            transitions=list(self._transitions),
            clarification=clarification
        )

    def _reset(self) -> None:
        self._state = PipelineState.START
        self._transitions = [PipelineState.START]
        self._poem = None
        self._validation = None
        self._repair_attempts = 0
