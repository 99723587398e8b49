# octave_poet/models/topic.py

from dataclasses import dataclass
from enum import Enum
from typing import Union


class AllowedTopic(Enum):
    """Topics the poet is willing to write about"""
    ROMANCE = "romance"
    WORLD_PEACE = "world_peace"

    @property
    def display_name(self) -> str:
        """Human-readable form used in prompts"""
        return self.value.replace("_", " ")


@dataclass(frozen=True)
class FreeformRequest:
    """Any request that is not one of the allowed topics"""
    text: str

    @property
    def display_name(self) -> str:
        return self.text


Topic = Union[AllowedTopic, FreeformRequest]

_TOPIC_ALIASES = {
    "romance": AllowedTopic.ROMANCE,
    "world peace": AllowedTopic.WORLD_PEACE,
    "world_peace": AllowedTopic.WORLD_PEACE,
    "world-peace": AllowedTopic.WORLD_PEACE,
}


def parse_topic(text: str) -> Topic:
    """
    Turn user text into a Topic.

    Known topic names (case-insensitive) become an AllowedTopic, anything
    else is kept verbatim as a FreeformRequest.

    Raises:
        ValueError: If the text is empty
    """
    if text is None or not text.strip():
        raise ValueError("topic must not be empty")

    normalized = " ".join(text.strip().lower().split())
    if normalized in _TOPIC_ALIASES:
        return _TOPIC_ALIASES[normalized]
    return FreeformRequest(text=text.strip())


def is_allowed_topic(topic: Topic) -> bool:
    return isinstance(topic, AllowedTopic)
