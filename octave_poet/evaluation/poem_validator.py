# octave_poet/evaluation/poem_validator.py

import json
import logging
from typing import Optional, Union

from octave_poet.errors import SchemaViolation
from octave_poet.llm.base_llm import BaseLLM
from octave_poet.models.poem import Poem
from octave_poet.models.validation import (
    EXPECTED_LANGUAGE,
    EXPECTED_LINE_COUNT,
    EXPECTED_THEMES,
    DetectedTheme,
    ValidationResult,
    decode_validation_result,
    validation_result_schema,
)
from octave_poet.prompts import PromptManager, get_global_prompt_manager


class PoemValidator:
    """
    Checks a poem against the octave contract.

    Each call makes exactly one request to the deterministic collaborator,
    constrained to the ValidationResult shape and run at temperature 0, and
    decodes the reply. Undecodable replies raise SchemaViolation; they are
    never turned into a default pass or fail.
    """

    SCHEMA_NAME = "poem_validation"

    def __init__(self, llm: BaseLLM, prompt_manager: Optional[PromptManager] = None):
        self.llm = llm
        self.prompt_manager = prompt_manager or get_global_prompt_manager()
        self.logger = logging.getLogger(self.__class__.__name__)
        self.schema = validation_result_schema()

        temperature = getattr(getattr(llm, 'config', None), 'temperature', 0)
        if temperature != 0:
            self.logger.warning(f"Validator collaborator configured with temperature={temperature}; "
                                f"requests will override it to 0")

    def _system_prompt(self) -> str:
        return self.prompt_manager.format_prompt(
            'octave_inspector_system',
            line_count=EXPECTED_LINE_COUNT,
            language=EXPECTED_LANGUAGE,
            themes=" OR ".join(f'"{theme.value}"' for theme in EXPECTED_THEMES),
            theme_values=json.dumps([theme.value for theme in EXPECTED_THEMES]),
            detected_values=", ".join(f'"{theme.value}"' for theme in DetectedTheme)
        )

    def validate(self, poem: Union[Poem, str]) -> ValidationResult:
        """
        Validate a poem, or any text claiming to be one.

        Args:
            poem: Poem or raw text

        Returns:
            ValidationResult decoded from the collaborator's reply

        Raises:
            SchemaViolation: If the reply does not match the ValidationResult shape
            LLMError: If the collaborator call fails
        """
        text = poem.get_text() if isinstance(poem, Poem) else str(poem)

        self.logger.info("🔍 Validating poem")
        raw = self.llm.generate_structured(
            text,
            schema=self.schema,
            schema_name=self.SCHEMA_NAME,
            system_prompt=self._system_prompt(),
            temperature=0.0
        )

        try:
            result = decode_validation_result(raw)
        except SchemaViolation as e:
            self.logger.error(f"Validator response rejected: {e}")
            raise

        if result.overall_result:
            self.logger.info("✅ Poem passed validation")
        else:
            self.logger.info(f"❌ Poem failed validation: {', '.join(result.failed_checks)}")
        return result
