# octave_poet/refinement/poem_repairer.py

import logging
from datetime import datetime
from typing import Optional

from octave_poet.llm.base_llm import BaseLLM
from octave_poet.models.poem import Poem
from octave_poet.models.validation import EXPECTED_LINE_COUNT, ValidationResult
from octave_poet.prompts import PromptManager, get_global_prompt_manager
from octave_poet.refinement.base_refiner import BaseRefiner


def summarize_failures(validation: ValidationResult) -> str:
    """
    Human-readable summary of the failing checks, followed by the explanation.

    Only checks whose pass flag is false are listed.
    """
    summary = ""

    if not validation.line_count.passed:
        summary += (f"- Line count: Expected {validation.line_count.expected} lines, "
                    f"but found {validation.line_count.actual} lines.\n")

    if not validation.language.passed:
        summary += (f"- Language issues: Contains non-English words/phrases: "
                    f"{', '.join(validation.language.issues)}.\n")

    if not validation.theme.passed:
        summary += (f"- Theme issue: Expected exclusively \"romance\" OR \"world peace\", "
                    f"but detected \"{validation.theme.detected.value}\".\n")

    summary += f"\nExplanation: {validation.explanation}"
    return summary


class PoemRepairer(BaseRefiner):
    """Revises a failing poem with one call to the creative collaborator"""

    def __init__(self, llm: BaseLLM, prompt_manager: Optional[PromptManager] = None):
        self.llm = llm
        self.prompt_manager = prompt_manager or get_global_prompt_manager()
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def name(self) -> str:
        return "poem_repairer"

    def should_refine(self, validation: ValidationResult) -> bool:
        return not validation.overall_result

    def refine(self, poem: Poem, validation: ValidationResult) -> Poem:
        return self.repair(poem, validation)

    def repair(self, poem: Poem, validation: ValidationResult) -> Poem:
        """
        Repair a poem that failed validation.

        Args:
            poem: The poem that was validated
            validation: Its failing ValidationResult

        Returns:
            A new Poem; the input poem is left untouched

        Raises:
            ValueError: If the validation passed
            LLMError: If the collaborator call fails
        """
        if not self.should_refine(validation):
            raise ValueError("Cannot repair a poem that passed validation")

        self.logger.info(f"🔧 Repairing poem, failed checks: {', '.join(validation.failed_checks)}")

        system_prompt = self.prompt_manager.format_prompt(
            'octave_fixer_system',
            line_count=EXPECTED_LINE_COUNT
        )
        request = self.prompt_manager.format_prompt(
            'octave_fixer_request',
            poem=poem.get_text(),
            validation_issues=summarize_failures(validation)
        )

        response = self.llm.generate(request, system_prompt=system_prompt)

        repaired = Poem.from_text(
            response,
            llm_provider=self.llm.__class__.__name__,
            model_name=getattr(self.llm, 'model_name', 'unknown'),
            generation_timestamp=datetime.now()
        )
        self.logger.info(f"✅ Repair produced {repaired.line_count} non-blank lines")
        return repaired
