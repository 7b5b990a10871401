"""
Unit Tests for the Casual-Utterance Filter
"""

import pytest

from factfind.services.casual_filter import CORE_QUESTIONS, casual_result, is_casual_utterance


class TestCasualFilter:

    @pytest.mark.parametrize("message", [
        "Hello",
        "hey",
        "Good morning",
        "I'm fine",
        "I’m fine",
        "ok",
        "how are you",
        "  Thanks  ",
        "thank you",
        "bye",
        "talk soon",
    ])
    def test_small_talk(self, message):
        assert is_casual_utterance(message) is True

    @pytest.mark.parametrize("message", [
        "hello, I'm married",
        "fine thanks, I don't smoke",
        "good afternoon, I'm 5ft 8in",
        "yes",
        "",
    ])
    def test_substantive_or_partial(self, message):
        assert is_casual_utterance(message) is False

    def test_casual_result(self):
        result = casual_result()
        assert result.extracted == {}
        assert result.confidence == 0.0
        assert result.needs_clarification is True
        assert result.clarification_questions == list(CORE_QUESTIONS)
        assert result.validation_errors == []

    def test_core_questions_order(self):
        assert CORE_QUESTIONS[0] == "Are you UK domiciled and a UK tax resident?"
        assert CORE_QUESTIONS[-1] == "What is your weight?"
        assert len(CORE_QUESTIONS) == 7
