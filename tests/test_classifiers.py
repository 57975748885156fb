"""
Tests for sentence heuristics.
"""
import pytest

from malarkey.services.classifiers import is_end_of_sentence, is_word_lower_case


class TestIsEndOfSentence:
    """Test suite for is_end_of_sentence."""

    @pytest.mark.parametrize("token", ["I'd", "buy", "that", "for", "a", "", " ", "Mr", "e.g", "dollar,"])
    def test_not_end_of_sentence(self, token):
        assert is_end_of_sentence(token) is False

    @pytest.mark.parametrize("token", [
        "dollar!",
        "dollar?",
        "dollar.",
        "dollar.\"",
        "dollar.”",
        "dollar!'",
        "dollar?’",
        "dollar.)",
        "dollar!»",
        "...",
        "?!",
    ])
    def test_end_of_sentence(self, token):
        assert is_end_of_sentence(token) is True

    def test_punctuation_must_be_trailing(self):
        """Closing characters other than quotes and brackets hide the punctuation."""
        assert is_end_of_sentence("dollar.,") is False
        assert is_end_of_sentence("a.b") is False


class TestIsWordLowerCase:
    """Test suite for is_word_lower_case."""

    @pytest.mark.parametrize("token", ["buy", "a", "zebra", "x1", "i'd"])
    def test_lower_case(self, token):
        assert is_word_lower_case(token) is True

    @pytest.mark.parametrize("token", ["I'd", "Buy", "", " ", "'quoted", "123", "...", "élan", "(aside"])
    def test_not_lower_case(self, token):
        """Tokens without a leading a-z letter are not lowercase."""
        assert is_word_lower_case(token) is False
