# tests/unit/test_topic.py

import pytest
from octave_poet.models.topic import AllowedTopic, FreeformRequest, parse_topic, is_allowed_topic


class TestParseTopic:
    """Test mapping user text onto topics"""

    @pytest.mark.parametrize("text", ["romance", "Romance", "  ROMANCE  "])
    def test_romance_aliases(self, text):
        assert parse_topic(text) is AllowedTopic.ROMANCE

    @pytest.mark.parametrize("text", ["world peace", "World  Peace", "world_peace", "world-peace"])
    def test_world_peace_aliases(self, text):
        assert parse_topic(text) is AllowedTopic.WORLD_PEACE

    def test_unknown_text_becomes_freeform(self):
        topic = parse_topic("  the ocean at dawn ")

        assert isinstance(topic, FreeformRequest)
        assert topic.text == "the ocean at dawn"
        assert not is_allowed_topic(topic)

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_topic_rejected(self, text):
        with pytest.raises(ValueError):
            parse_topic(text)


def test_display_names():
    assert AllowedTopic.ROMANCE.display_name == "romance"
    assert AllowedTopic.WORLD_PEACE.display_name == "world peace"
    assert FreeformRequest("cats").display_name == "cats"
    assert is_allowed_topic(AllowedTopic.WORLD_PEACE)
