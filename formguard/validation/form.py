"""
Formguard Form Controller
=========================

Validation state for one form.

The controller reads its inputs (values, rules, labels) on every pass,
each of which may be a plain mapping or an observable cell holding one,
and publishes its results through observable cells:

- errors: field name -> message
- generic_error: one form-level message
- is_valid: outcome of the last pass

Example:
    values = State({"email": ""})

    form = FormController(
        values,
        rules={"email": {"required": True, "email": True}},
        labels={"email": "Email"},
    )

    form.trigger_validation()  # False
    form.errors.value  # {"email": "The Email is required"}

    values.value = {"email": "jane@example.com"}
    form.trigger_validation()  # True
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from formguard.core.config import Config, get_config
from formguard.engine.reactive import State, unref
from formguard.utils.logger import Logger, LogLevel, get_logger
from formguard.validation.evaluator import EvaluationMode, FieldVerdict, RuleEvaluator
from formguard.validation.library import PredicateLibrary, default_library
from formguard.validation.messages import MessageFormatter
from formguard.validation.rules import FieldRuleSet, FormValue

ErrorMap = Dict[str, Optional[str]]


@dataclass(frozen=True)
class FormSnapshot:
    """Point-in-time read of the controller inputs."""

    values: Mapping[str, FormValue] = field(default_factory=dict)
    rules: Mapping[str, FieldRuleSet] = field(default_factory=dict)
    labels: Mapping[str, str] = field(default_factory=dict)

    def rules_for(self, name: str) -> Optional[FieldRuleSet]:
        return self.rules.get(name) or None

    def label_for(self, name: str) -> Optional[str]:
        return self.labels.get(name) or None


class FormController:
    """
    Validates a form and owns its error state.

    Args:
        values: Field values, or a cell holding them
        rules: Rule table, or a cell holding it
        labels: Display labels, or a cell holding them
        library: Predicate catalog for flag rules
        formatter: Message formatter
        mode: "strict" or "legacy"; defaults to `validation.mode`
        config: Configuration; defaults to the global one
        logger: Logger; defaults to "formguard.validation"
    """

    def __init__(
        self,
        values: Any = None,
        rules: Any = None,
        labels: Any = None,
        *,
        library: Optional[PredicateLibrary] = None,
        formatter: Optional[MessageFormatter] = None,
        mode: Optional[Union[str, EvaluationMode]] = None,
        config: Optional[Config] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self.config = config or get_config()
        self.logger = logger or get_logger(
            "formguard.validation",
            LogLevel.parse(self.config.get_str("logging.level", "INFO")),
        )

        self._values = values
        self._rules = rules
        self._labels = labels

        self.evaluator = RuleEvaluator(
            library=library if library is not None else default_library(self.config),
            formatter=formatter or MessageFormatter(
                fallback_label=self.config.get_str("messages.fallback_label", "field"),
            ),
            mode=mode or self.config.get_str("validation.mode", "strict"),
            logger=self.logger,
        )

        self.errors: State[ErrorMap] = State({}, name="errors")
        self.generic_error: State[str] = State("", name="generic_error")
        self.is_valid: State[bool] = State(False, name="is_valid")

    @property
    def mode(self) -> EvaluationMode:
        return self.evaluator.mode

    def snapshot(self) -> FormSnapshot:
        """Read values, rules and labels through one level of indirection."""
        return FormSnapshot(
            values=dict(unref(self._values) or {}),
            rules=dict(unref(self._rules) or {}),
            labels=dict(unref(self._labels) or {}),
        )

    def verdicts(self, snapshot: Optional[FormSnapshot] = None) -> List[FieldVerdict]:
        """Per-field verdicts for every field that has rules."""
        snapshot = snapshot or self.snapshot()
        results: List[FieldVerdict] = []

        for name, value in snapshot.values.items():
            rules = snapshot.rules_for(name)
            if rules is None:
                continue
            results.append(
                self.evaluator.evaluate(name, value, rules, snapshot.label_for(name))
            )

        return results

    def trigger_validation(self) -> bool:
        """
        Run one validation pass.

        The error map is built locally and published in a single write,
        and only when the form is invalid, unless
        `validation.clear_on_valid` is set.

        Returns:
            True if every field passed
        """
        snapshot = self.snapshot()
        messages: ErrorMap = {}

        for verdict in self.verdicts(snapshot):
            if not verdict.valid:
                messages[verdict.field] = verdict.message

        valid = not messages
        self.is_valid.value = valid

        if not valid or self.config.get_bool("validation.clear_on_valid"):
            self.errors.value = messages

        self.logger.debug(
            "Validation pass",
            fields=len(snapshot.values),
            invalid=sorted(messages),
            mode=self.mode.value,
        )
        return valid

    def set_errors(self, errors: Mapping[str, Union[str, Sequence[str]]]) -> None:
        """
        Publish externally produced errors, e.g. from a server response.

        Several messages for one field are joined with
        `messages.separator`.
        """
        separator = self.config.get_str("messages.separator", ", ")
        result: ErrorMap = {}

        for name, messages in errors.items():
            if isinstance(messages, str):
                result[name] = messages
            else:
                result[name] = separator.join(str(m) for m in messages)

        self.errors.value = result
        self.logger.debug("Errors injected", fields=sorted(result))

    def set_generic_error(self, message: Optional[str] = None) -> None:
        """Set the form-level message."""
        if message is None:
            message = self.config.get_str("messages.generic_error", "Error")
        self.generic_error.value = message

    def reset_errors(self) -> None:
        """Clear field errors and the form-level message."""
        self.errors.value = {}
        self.generic_error.value = ""

    def has_error(self, name: str) -> bool:
        return name in self.errors.peek()

    def get_error(self, name: str) -> Optional[str]:
        return self.errors.peek().get(name)
