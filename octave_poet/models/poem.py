# octave_poet/models/poem.py

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Tuple


def split_lines(text: str) -> Tuple[str, ...]:
    """Split text into stripped lines, dropping blank and whitespace-only ones"""
    if not text:
        return ()
    return tuple(line.strip() for line in text.splitlines() if line.strip())


@dataclass(frozen=True)
class Poem:
    """
    A poem as an immutable, ordered sequence of non-blank lines.

    Blank lines carry no meaning and are never stored. A repaired poem is a
    new Poem value; nothing mutates an existing one.
    """

    lines: Tuple[str, ...]
    llm_provider: Optional[str] = None
    model_name: Optional[str] = None
    generation_timestamp: Optional[datetime] = field(default=None, compare=False)

    def __post_init__(self):
        cleaned = tuple(str(line).strip() for line in self.lines if line and str(line).strip())
        object.__setattr__(self, "lines", cleaned)

    @classmethod
    def from_text(cls, text: str, llm_provider: Optional[str] = None,
                  model_name: Optional[str] = None,
                  generation_timestamp: Optional[datetime] = None) -> "Poem":
        """Build a poem from raw line-delimited text"""
        return cls(
            lines=split_lines(text),
            llm_provider=llm_provider,
            model_name=model_name,
            generation_timestamp=generation_timestamp,
        )

    @classmethod
    def from_lines(cls, lines: Iterable[str], **metadata) -> "Poem":
        return cls(lines=tuple(lines), **metadata)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def get_text(self) -> str:
        """Lines joined with newlines"""
        return "\n".join(self.lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "lines": list(self.lines),
            "line_count": self.line_count,
            "llm_provider": self.llm_provider,
            "model_name": self.model_name,
            "generation_timestamp": self.generation_timestamp.isoformat() if self.generation_timestamp else None,
        }

    def __str__(self) -> str:
        return self.get_text()
