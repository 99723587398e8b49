# octave_poet/models/clarification.py

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .poem import Poem, split_lines

REFUSAL_RESPONSE = "I can only create 8-line poems about romance or world peace. Which would you prefer?"
DISAMBIGUATION_RESPONSE = "Would you like a poem about romance or world peace?"

_ROMANCE = re.compile(r"\bromance\b")
_WORLD_PEACE = re.compile(r"\bworld[\s_-]+peace\b")
_RESTRICTION = re.compile(r"\b(only|cannot|can.t|unable|not able)\b.*\b(poems?|octaves?|write|create|compose)\b")


class ClarificationKind(Enum):
    """The two fixed non-poem replies the poet may give"""
    REFUSAL = "refusal"
    DISAMBIGUATION = "disambiguation"

    @property
    def message(self) -> str:
        if self is ClarificationKind.REFUSAL:
            return REFUSAL_RESPONSE
        return DISAMBIGUATION_RESPONSE


@dataclass(frozen=True)
class Clarification:
    """A reply asking the user to pick an allowed topic instead of a poem"""
    kind: ClarificationKind
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "text": self.text}


def detect_clarification(text: str) -> Optional[Clarification]:
    """
    Recognise a clarification reply instead of a poem.

    A reply counts as a clarification when it has at most two non-blank
    lines and either contains one of the fixed sentences (case-insensitive)
    or is a reworded version of one: it names both allowed topics and
    either restricts itself to them or ends with a question.
    """
    lines = split_lines(text)
    if not lines or len(lines) > 2:
        return None

    normalized = " ".join(" ".join(lines).lower().split())
    for kind in (ClarificationKind.REFUSAL, ClarificationKind.DISAMBIGUATION):
        if kind.message.lower() in normalized:
            return Clarification(kind=kind, text=text.strip())

    if not (_ROMANCE.search(normalized) and _WORLD_PEACE.search(normalized)):
        return None
    if _RESTRICTION.search(normalized):
        return Clarification(kind=ClarificationKind.REFUSAL, text=text.strip())
    if normalized.endswith("?"):
        return Clarification(kind=ClarificationKind.DISAMBIGUATION, text=text.strip())
    return None


@dataclass(frozen=True)
class GenerationResult:
    """What the generator produced: either a poem or a clarification"""
    poem: Optional[Poem] = None
    clarification: Optional[Clarification] = None
    raw_text: str = ""

    def __post_init__(self):
        if (self.poem is None) == (self.clarification is None):
            raise ValueError("GenerationResult needs exactly one of poem or clarification")

    @property
    def is_poem(self) -> bool:
        return self.poem is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "poem": self.poem.to_dict() if self.poem else None,
            "clarification": self.clarification.to_dict() if self.clarification else None,
        }
