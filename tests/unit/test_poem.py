# tests/unit/test_poem.py

import dataclasses
from datetime import datetime

import pytest
from octave_poet.models.poem import Poem, split_lines


class TestPoem:
    """Test Poem construction and serialization"""

    def test_from_text_drops_blank_lines(self, romance_poem_text):
        spaced = romance_poem_text.replace("\n", "\n\n   \n")
        poem = Poem.from_text(spaced)

        assert poem.line_count == 8
        assert poem.get_text() == romance_poem_text

    def test_lines_are_stripped(self):
        poem = Poem.from_lines(["  first  ", "", "second\t"])

        assert poem.lines == ("first", "second")

    def test_poem_is_immutable(self, romance_poem_text):
        poem = Poem.from_text(romance_poem_text)

        with pytest.raises(dataclasses.FrozenInstanceError):
            poem.lines = ()

    def test_equality_ignores_timestamp(self):
        a = Poem.from_text("one\ntwo", generation_timestamp=datetime(2024, 1, 1))
        b = Poem.from_text("one\ntwo", generation_timestamp=datetime(2025, 1, 1))

        assert a == b

    def test_to_dict(self):
        timestamp = datetime(2024, 5, 17, 12, 30)
        poem = Poem.from_text("one\ntwo", llm_provider="MockLLM", model_name="test-model",
                              generation_timestamp=timestamp)

        data = poem.to_dict()

        assert data == {
            "lines": ["one", "two"],
            "line_count": 2,
            "llm_provider": "MockLLM",
            "model_name": "test-model",
            "generation_timestamp": timestamp.isoformat(),
        }

    def test_str_is_text(self):
        assert str(Poem.from_text("one\ntwo")) == "one\ntwo"


def test_split_lines_empty():
    assert split_lines("") == ()
    assert split_lines(None) == ()
    assert split_lines("\n  \n") == ()
