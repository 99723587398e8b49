# octave_poet/generation/poem_generator.py

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
import logging

from octave_poet.errors import GenerationError
from octave_poet.llm.base_llm import BaseLLM
from octave_poet.models.clarification import (
    REFUSAL_RESPONSE,
    DISAMBIGUATION_RESPONSE,
    GenerationResult,
    detect_clarification,
)
from octave_poet.models.poem import Poem
from octave_poet.models.topic import AllowedTopic, FreeformRequest, Topic
from octave_poet.models.validation import EXPECTED_LINE_COUNT
from octave_poet.prompts import PromptManager, get_global_prompt_manager


class BasePoemGenerator(ABC):
    """
    Abstract base class for poem generators.

    Defines the interface that all poem generators must implement.
    """

    def __init__(self, llm: BaseLLM, prompt_manager: Optional[PromptManager] = None):
        self.llm = llm
        self.prompt_manager = prompt_manager or get_global_prompt_manager()
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def generate(self, topic: Topic) -> GenerationResult:
        """
        Produce a poem, or a clarification, for a topic.

        Args:
            topic: AllowedTopic or FreeformRequest

        Returns:
            GenerationResult holding either a Poem or a Clarification

        Raises:
            GenerationError: If the topic is not a Topic
            LLMError: If the collaborator call fails
        """
        pass


class PoemGenerator(BasePoemGenerator):
    """
    Writes the initial poem with one call to the creative collaborator.

    The collaborator is instructed to answer off-topic requests with one of
    two fixed clarification sentences; such replies, and reworded versions of
    them, come back as a Clarification so callers never mistake them for a
    poem. No validation is done here.
    """

    def generate(self, topic: Topic) -> GenerationResult:
        if not isinstance(topic, (AllowedTopic, FreeformRequest)):
            raise GenerationError(f"Unsupported topic type: {type(topic).__name__}")

        system_prompt = self.prompt_manager.format_prompt(
            'octave_poet_system',
            line_count=EXPECTED_LINE_COUNT,
            refusal_response=REFUSAL_RESPONSE,
            disambiguation_response=DISAMBIGUATION_RESPONSE
        )

        self.logger.info(f"✍️ Generating poem for topic: {topic.display_name}")
        response = self.llm.generate(topic.display_name, system_prompt=system_prompt)

        clarification = detect_clarification(response)
        if clarification is not None:
            self.logger.info(f"❓ Poet asked for clarification ({clarification.kind.value})")
            return GenerationResult(clarification=clarification, raw_text=response)

        poem = Poem.from_text(
            response,
            llm_provider=self.llm.__class__.__name__,
            model_name=getattr(self.llm, 'model_name', 'unknown'),
            generation_timestamp=datetime.now()
        )
        self.logger.info(f"📝 Generated poem with {poem.line_count} non-blank lines")
        return GenerationResult(poem=poem, raw_text=response)
