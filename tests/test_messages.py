"""Tests for message formatting."""

import pytest

from formguard.validation.messages import MessageFormatter, field_error_message
from formguard.validation.rules import RuleName


class TestFieldErrorMessage:
    """Tests for the default sentences."""

    @pytest.mark.parametrize(
        "rule, param, expected",
        [
            ("required", None, "The Email is required"),
            ("email", None, "The Email must a valid email address."),
            ("numeric", None, "The Email must be a valid number."),
            ("max_length", 10, "The Email cannot have more than 10 characters."),
            ("min_length", 3, "The Email must have 3 or more characters."),
            ("phone", None, "The Email is invalid"),
            ("custom", None, "The Email is invalid"),
        ],
    )
    def test_sentences(self, rule, param, expected):
        assert field_error_message("Email", rule, param) == expected

    def test_camel_case_names(self):
        assert field_error_message("Name", "maxLength", 5) == "The Name cannot have more than 5 characters."
        assert field_error_message("Name", RuleName.MIN_LENGTH, 2) == "The Name must have 2 or more characters."

    @pytest.mark.parametrize("label", [None, ""])
    def test_label_fallback(self, label):
        assert field_error_message(label, "required") == "The field is required"


class TestMessageFormatter:
    """Tests for custom formatters."""

    def test_template_override(self):
        formatter = MessageFormatter(templates={"email": "{label} looks wrong"})

        assert formatter.format("Email", "email") == "Email looks wrong"
        assert formatter.format("Email", "required") == "The Email is required"

    def test_custom_fallback_label(self):
        formatter = MessageFormatter(fallback_label="value")

        assert formatter.format(None, "numeric") == "The value must be a valid number."
