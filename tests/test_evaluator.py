"""Tests for per-field rule evaluation."""

import pytest

from formguard.validation.evaluator import EvaluationMode, FieldVerdict, RuleEvaluator, is_blank
from formguard.validation.rules import email, max_length, min_length, numeric


@pytest.fixture
def strict(library, logger):
    return RuleEvaluator(library=library, mode="strict", logger=logger)


@pytest.fixture
def legacy(library, logger):
    return RuleEvaluator(library=library, mode=EvaluationMode.LEGACY, logger=logger)


def _counting(result):
    calls = []

    def predicate(value):
        calls.append(value)
        return result

    return predicate, calls


class TestEffectiveRequired:
    """Tests for the required/required_if decision."""

    def test_required_flag(self, strict):
        assert strict.effective_required({"required": True}, "") is True
        assert strict.effective_required({"required": False}, "") is False
        assert strict.effective_required({"email": email}, "") is False

    def test_required_if_overrides_flag(self, strict):
        assert strict.effective_required({"required": True, "required_if": lambda v: False}, "") is False
        assert strict.effective_required({"required": False, "requiredIf": lambda v: True}, "") is True

    def test_non_callable_required_if_falls_back(self, strict):
        assert strict.effective_required({"required": True, "required_if": True}, "") is True
        assert strict.effective_required({"required_if": True}, "") is False

    def test_required_if_receives_value(self, strict):
        predicate, calls = _counting(True)

        strict.effective_required({"required_if": predicate}, "abc")

        assert calls == ["abc"]


class TestBlank:
    """Tests for the falsiness used by the presence check."""

    @pytest.mark.parametrize("value", [None, "", 0, 0.0, False, []])
    def test_blank(self, value):
        assert is_blank(value)

    @pytest.mark.parametrize("value", ["x", 1, True, ["a"]])
    def test_not_blank(self, value):
        assert not is_blank(value)


class TestStrictMode:
    """Tests for the default evaluation."""

    def test_no_rules_is_valid(self, strict):
        assert strict.evaluate("name", "", None) == FieldVerdict("name", True)
        assert strict.evaluate("name", "", {}) == FieldVerdict("name", True)

    @pytest.mark.parametrize("value", [None, "", 0, False, []])
    def test_required_preempts_other_rules(self, strict, value):
        rules = {"numeric": numeric, "email": email, "required": True}

        verdict = strict.evaluate("email", value, rules, label="Email")

        assert verdict.valid is False
        assert verdict.message == "The Email is required"

    def test_required_if_true_and_blank(self, strict):
        verdict = strict.evaluate("vat", "", {"required_if": lambda v: True, "numeric": numeric})

        assert verdict.message == "The field is required"

    def test_required_if_false_runs_other_rules(self, strict):
        verdict = strict.evaluate("vat", "", {"required": True, "required_if": lambda v: False})

        assert verdict.valid is True

    def test_format_failure_reports_own_message(self, strict):
        verdict = strict.evaluate("age", "abc", {"numeric": numeric}, label="Age")

        assert verdict == FieldVerdict("age", False, "The Age must be a valid number.")

    def test_first_failure_wins(self, strict):
        rules = {"required": True, "min_length": min_length(5), "email": email}

        verdict = strict.evaluate("email", "ab", rules, label="Email")

        assert verdict.message == "The Email must have 5 or more characters."

    def test_later_rules_checked_when_earlier_pass(self, strict):
        rules = {"max_length": max_length(20), "email": email}

        verdict = strict.evaluate("email", "not-an-email", rules)

        assert verdict.message == "The field must a valid email address."

    def test_all_rules_pass(self, strict):
        rules = {"required": True, "email": email, "maxLength": max_length(40)}

        assert strict.evaluate("email", "jane@example.com", rules).valid is True

    def test_flag_resolved_through_library(self, strict):
        verdict = strict.evaluate("email", "bad", {"email": True}, label="Email")

        assert verdict.message == "The Email must a valid email address."

    def test_injected_library_is_used(self, fake_library, logger):
        evaluator = RuleEvaluator(library=fake_library, logger=logger)

        assert evaluator.evaluate("email", "ok@test", {"email": True}).valid is True
        assert evaluator.evaluate("email", "jane@example.com", {"email": True}).valid is False

    def test_false_flag_and_unknown_flag_are_ignored(self, strict):
        assert strict.evaluate("email", "bad", {"email": False}).valid is True
        assert strict.evaluate("email", "bad", {"custom": True}).valid is True

    def test_unusable_rules_are_logged(self, strict, log_handler):
        assert strict.evaluate("name", "abcdef", {"max_length": True, "min_length": 3}).valid is True

        skipped = [r.context for r in log_handler.records if r.message == "Rule skipped"]
        assert skipped == [
            {"field": "name", "rule": "max_length"},
            {"field": "name", "rule": "min_length"},
        ]

    def test_custom_rule_uses_generic_message(self, strict):
        verdict = strict.evaluate("code", "x", {"starts_with_a": lambda v: v.startswith("a")}, label="Code")

        assert verdict.message == "The Code is invalid"

    def test_raising_predicate_fails_and_logs(self, strict, log_handler):
        def broken(value):
            raise RuntimeError("boom")

        verdict = strict.evaluate("code", "x", {"broken": broken})

        assert verdict.valid is False
        assert verdict.message == "The field is invalid"
        assert log_handler.records[-1].message == "Rule predicate raised"
        assert log_handler.records[-1].context == {"field": "code", "rule": "broken"}

    def test_required_if_called_once(self, strict):
        predicate, calls = _counting(False)

        strict.evaluate("x", "v", {"required_if": predicate, "a": lambda v: True, "b": lambda v: True})

        assert len(calls) == 1


class TestLegacyMode:
    """Tests pinning the historical loop."""

    def test_last_visited_rule_message_wins_after_required(self, legacy):
        rules = {"required": True, "email": email}

        verdict = legacy.evaluate("email", "", rules, label="Email")

        assert verdict.valid is False
        assert verdict.message == "The Email must a valid email address."

    def test_required_last_reports_required(self, legacy):
        rules = {"numeric": numeric, "required": True}

        verdict = legacy.evaluate("age", "", rules, label="Age")

        assert verdict.message == "The Age is required"

    def test_only_required(self, legacy):
        verdict = legacy.evaluate("email", "", {"required": True}, label="Email")

        assert verdict == FieldVerdict("email", False, "The Email is required")

    def test_first_format_failure_has_no_message(self, legacy):
        verdict = legacy.evaluate("age", "abc", {"numeric": numeric}, label="Age")

        assert verdict.valid is False
        assert verdict.message is None

    def test_flags_are_not_resolved(self, legacy):
        assert legacy.evaluate("email", "bad", {"email": True}).valid is True

    def test_valid_value(self, legacy):
        rules = {"required": True, "email": email}

        assert legacy.evaluate("email", "jane@example.com", rules).valid is True

    def test_required_if_called_per_rule(self, legacy):
        predicate, calls = _counting(False)

        legacy.evaluate("x", "v", {"required_if": predicate, "a": lambda v: True, "b": lambda v: True})

        assert len(calls) == 3


class TestMode:
    """Tests for mode parsing."""

    def test_parse(self):
        assert EvaluationMode.parse("LEGACY") is EvaluationMode.LEGACY
        assert EvaluationMode.parse(EvaluationMode.STRICT) is EvaluationMode.STRICT

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown evaluation mode"):
            RuleEvaluator(mode="lenient")
