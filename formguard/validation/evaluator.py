"""
Formguard Rule Evaluator
========================

Decides the single verdict of one field from its value and rule set.

Presence always comes first: when a field is required (through its
`required` flag, or the result of a callable `required_if`) and its
value is falsy, the field is reported as required and no other rule is
consulted. Otherwise the remaining rules run in declaration order and
the first failure wins.

Two modes are available:

- STRICT (default): the first failing rule reports its own message.
- LEGACY: reproduces the historical loop exactly. Once a message is
  pending every later rule overwrites it with that rule's text, and a
  first non-presence failure marks the field invalid with no text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from formguard.utils.logger import Logger, get_logger
from formguard.validation.library import PredicateLibrary, default_library
from formguard.validation.messages import MessageFormatter
from formguard.validation.rules import (
    PRESENCE_RULES,
    FieldRuleSet,
    FormValue,
    RuleName,
    normalize_rule_name,
    rule_param,
)


class EvaluationMode(str, Enum):
    """How failures after the presence check are reported."""

    STRICT = "strict"
    LEGACY = "legacy"

    @classmethod
    def parse(cls, value: Union[str, "EvaluationMode"]) -> "EvaluationMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown evaluation mode '{value}', expected 'strict' or 'legacy'"
            ) from None


@dataclass(frozen=True)
class FieldVerdict:
    """Outcome for one field. `message` may be None only in legacy mode."""

    field: str
    valid: bool
    message: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid


def is_blank(value: FormValue) -> bool:
    """Falsiness used by the presence short-circuit."""
    return not value


class RuleEvaluator:
    """
    Per-field rule evaluation.

    Example:
        evaluator = RuleEvaluator()
        verdict = evaluator.evaluate(
            "email", "", {"required": True, "email": True}, label="Email",
        )
        verdict.message  # "The Email is required"
    """

    def __init__(
        self,
        library: Optional[PredicateLibrary] = None,
        formatter: Optional[MessageFormatter] = None,
        mode: Union[str, EvaluationMode] = EvaluationMode.STRICT,
        logger: Optional[Logger] = None,
    ) -> None:
        self.library = library if library is not None else default_library()
        self.formatter = formatter or MessageFormatter()
        self.mode = EvaluationMode.parse(mode)
        self.logger = logger or get_logger("formguard.validation")

    def effective_required(self, rules: FieldRuleSet, value: FormValue) -> bool:
        """
        Whether the field must have a value.

        A callable `required_if` decides; otherwise the truthiness of
        the `required` flag does.
        """
        required_if = self._lookup(rules, RuleName.REQUIRED_IF.value)
        if callable(required_if):
            return self._apply(RuleName.REQUIRED_IF.value, required_if, value)
        return bool(self._lookup(rules, RuleName.REQUIRED.value))

    def evaluate(
        self,
        field: str,
        value: FormValue,
        rules: Optional[FieldRuleSet],
        label: Optional[str] = None,
    ) -> FieldVerdict:
        """Compute the verdict for one field."""
        if not rules:
            return FieldVerdict(field=field, valid=True)

        if self.mode is EvaluationMode.LEGACY:
            return self._evaluate_legacy(field, value, rules, label)
        return self._evaluate_strict(field, value, rules, label)

    def _evaluate_strict(
        self,
        field: str,
        value: FormValue,
        rules: FieldRuleSet,
        label: Optional[str],
    ) -> FieldVerdict:
        if self.effective_required(rules, value) and is_blank(value):
            return FieldVerdict(
                field=field,
                valid=False,
                message=self.formatter.format(label, RuleName.REQUIRED),
            )

        for raw_name, rule in rules.items():
            name = normalize_rule_name(raw_name)
            if name in PRESENCE_RULES or rule is False:
                continue

            predicate = rule
            if rule is True:
                predicate = self.library.resolve(name)
            if not callable(predicate):
                self.logger.warning("Rule skipped", field=field, rule=name)
                continue

            if not self._apply(name, predicate, value, field=field):
                return FieldVerdict(
                    field=field,
                    valid=False,
                    message=self.formatter.format(label, name, rule_param(predicate)),
                )

        return FieldVerdict(field=field, valid=True)

    def _evaluate_legacy(
        self,
        field: str,
        value: FormValue,
        rules: FieldRuleSet,
        label: Optional[str],
    ) -> FieldVerdict:
        pending: Optional[str] = None
        marked = False
        reported: Optional[str] = None

        for raw_name, rule in rules.items():
            name = normalize_rule_name(raw_name)
            # Re-evaluated for every visited rule, as the historical loop did
            is_required = self.effective_required(rules, value)
            message = self.formatter.format(label, name)

            if (is_required and is_blank(value)) or pending:
                pending = message
                reported = message
                marked = True
                continue

            if name in PRESENCE_RULES:
                continue

            if callable(rule) and not self._apply(name, rule, value, field=field):
                reported = pending
                marked = True

        return FieldVerdict(field=field, valid=not marked, message=reported)

    @staticmethod
    def _lookup(rules: FieldRuleSet, name: str) -> Any:
        if name in rules:
            return rules[name]
        for raw_name, rule in rules.items():
            if normalize_rule_name(raw_name) == name:
                return rule
        return None

    def _apply(self, name: str, predicate: Any, value: FormValue, field: str = "") -> bool:
        """Run a predicate; one that raises counts as failed."""
        try:
            return bool(predicate(value))
        except Exception as e:
            self.logger.error(
                "Rule predicate raised",
                exception=e,
                field=field,
                rule=name,
            )
            return False
