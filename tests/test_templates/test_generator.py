"""Tests for the expression value generator."""

import random
import re
import string

import pytest

from pipetemplate.errors import ConfigurationError
from pipetemplate.templates import ExpressionValueGenerator


@pytest.fixture
def generator():
    return ExpressionValueGenerator(random.Random(42))


class TestExpressionValueGenerator:
    """Tests for ExpressionValueGenerator."""

    def test_range_and_count(self, generator):
        """[a-z]{8} yields eight lowercase letters."""
        value = generator.generate("[a-z]{8}")
        assert re.fullmatch(r"[a-z]{8}", value)

    def test_multiple_ranges(self, generator):
        """Ranges combine within one class."""
        value = generator.generate("[a-zA-Z0-9]{32}")
        assert re.fullmatch(r"[a-zA-Z0-9]{32}", value)

    def test_literal_text_kept(self, generator):
        """Text outside classes is copied."""
        value = generator.generate("admin[A-Z0-9]{4}")
        assert re.fullmatch(r"admin[A-Z0-9]{4}", value)

    def test_word_escape(self, generator):
        """\\w covers letters, digits and underscore."""
        value = generator.generate("[\\w]{20}")
        assert re.fullmatch(r"\w{20}", value)

    def test_digit_escape(self, generator):
        value = generator.generate("[\\d]{6}")
        assert value.isdigit() and len(value) == 6

    def test_symbol_escape(self, generator):
        value = generator.generate("[\\A]{5}")
        assert all(c in string.punctuation for c in value)

    def test_no_expression(self, generator):
        """Plain text passes through."""
        assert generator.generate("static") == "static"

    def test_count_limit(self, generator):
        """Counts above the maximum are rejected."""
        with pytest.raises(ConfigurationError):
            generator.generate("[a-z]{256}")

    def test_inverted_range(self, generator):
        with pytest.raises(ConfigurationError):
            generator.generate("[z-a]{3}")
