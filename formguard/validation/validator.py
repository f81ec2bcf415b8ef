"""
Formguard Validator
===================

Rule specifications and one-shot validation.

Rule sets can be written as pipe-separated strings, which is how the
command line reads them from JSON:

    "required|email|max_length:255"

or as mappings:

    {"required": True, "numeric": True, "min_length": 3, "even": is_even}
"""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from formguard.core.config import get_config
from formguard.engine.reactive import is_ref
from formguard.validation.form import ErrorMap, FormController
from formguard.validation.library import PredicateLibrary, RuleSpecError, default_library
from formguard.validation.rules import PRESENCE_RULES, RuleName, normalize_rule_name

RuleSpec = Union[str, Sequence[str], Mapping[str, Any]]


class ValidationError(Exception):
    """
    Validation failed exception.

    Carries the error map of the failed pass.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[ErrorMap] = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or {}

    def __str__(self) -> str:
        if self.errors:
            lines = [f"  - {name}: {msg}" for name, msg in self.errors.items()]
            return "Validation failed:\n" + "\n".join(lines)
        return "Validation failed"


@dataclass
class ValidationResult:
    """Outcome of a one-shot validation."""

    valid: bool
    errors: ErrorMap = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.valid

    def failed(self) -> bool:
        return not self.valid

    def first_error(self, field_name: Optional[str] = None) -> Optional[str]:
        """Message for `field_name`, or the first message of any field."""
        if field_name is not None:
            return self.errors.get(field_name)
        for message in self.errors.values():
            if message:
                return message
        return None

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise ValidationError(errors=self.errors)


def parse_field_rules(
    spec: RuleSpec,
    library: Optional[PredicateLibrary] = None,
) -> Dict[str, Any]:
    """
    Turn a rule specification into a field rule set.

    Raises:
        RuleSpecError: Unknown rule or bad parameters
    """
    library = library if library is not None else default_library()

    if isinstance(spec, str):
        return _parse_string_rules(spec, library)

    if isinstance(spec, MappingABC):
        return _parse_mapping_rules(spec, library)

    if isinstance(spec, SequenceABC):
        rules: Dict[str, Any] = {}
        for part in spec:
            if not isinstance(part, str):
                raise RuleSpecError(f"Rule list entries must be strings, got {part!r}")
            rules.update(_parse_string_rules(part, library))
        return rules

    raise RuleSpecError(f"Unsupported rule specification: {spec!r}")


def parse_rules(
    table: Mapping[str, RuleSpec],
    library: Optional[PredicateLibrary] = None,
) -> Dict[str, Dict[str, Any]]:
    """Parse a whole rule table."""
    library = library if library is not None else default_library()
    return {name: parse_field_rules(spec, library) for name, spec in table.items()}


def _parse_string_rules(rule_string: str, library: PredicateLibrary) -> Dict[str, Any]:
    """
    Parse pipe-separated rule string.

    Example: "required|email|max_length:255"
    """
    rules: Dict[str, Any] = {}

    for part in rule_string.split("|"):
        part = part.strip()
        if not part:
            continue

        if ":" in part:
            name, params_str = part.split(":", 1)
            params = [p.strip() for p in params_str.split(",")]
        else:
            name, params = part, []

        rules.update(_build_rule(name.strip(), params, library))

    return rules


def _parse_mapping_rules(spec: Mapping[str, Any], library: PredicateLibrary) -> Dict[str, Any]:
    rules: Dict[str, Any] = {}

    for raw_name, value in spec.items():
        name = normalize_rule_name(raw_name)

        if callable(value) or isinstance(value, bool):
            if name == RuleName.REQUIRED_IF.value and not callable(value):
                raise RuleSpecError("Rule 'required_if' needs a callable")
            if value is True and name not in PRESENCE_RULES:
                rules[name] = library.create(name)
            else:
                rules[name] = value
            continue

        params = list(value) if isinstance(value, (list, tuple)) else [value]
        rules.update(_build_rule(name, params, library))

    return rules


def _build_rule(name: str, params: List[Any], library: PredicateLibrary) -> Dict[str, Any]:
    key = normalize_rule_name(name)

    if key == RuleName.REQUIRED.value:
        if params:
            raise RuleSpecError("Rule 'required' takes no parameters")
        return {key: True}

    if key == RuleName.REQUIRED_IF.value:
        raise RuleSpecError("Rule 'required_if' needs a callable")

    return {key: library.create(key, *params)}


def validate(
    values: Mapping[str, Any],
    rules: Optional[Mapping[str, RuleSpec]] = None,
    labels: Optional[Mapping[str, str]] = None,
    **controller_kwargs: Any,
) -> ValidationResult:
    """
    Validate values in one pass.

    Rules may be given in any form `parse_field_rules` accepts.

    Example:
        result = validate(
            {"email": "nope"},
            {"email": {"required": True, "email": True}},
        )
        result.errors  # {"email": "The field must a valid email address."}
    """
    library = controller_kwargs.get("library")
    if library is None:
        library = default_library(controller_kwargs.get("config") or get_config())
        controller_kwargs["library"] = library

    if rules is not None and not is_ref(rules):
        rules = parse_rules(rules, library)

    controller = FormController(values, rules, labels, **controller_kwargs)
    valid = controller.trigger_validation()
    return ValidationResult(valid=valid, errors=dict(controller.errors.peek()) if not valid else {})


def validate_or_fail(
    values: Mapping[str, Any],
    rules: Optional[Mapping[str, RuleSpec]] = None,
    labels: Optional[Mapping[str, str]] = None,
    **controller_kwargs: Any,
) -> Mapping[str, Any]:
    """
    Validate and raise on failure.

    Returns the values when valid.

    Raises:
        ValidationError: If any field failed
    """
    validate(values, rules, labels, **controller_kwargs).raise_if_invalid()
    return values
