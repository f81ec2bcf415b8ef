"""
Formguard Validation System
===========================

Declarative field validation for forms.

Features:
- Named rules with required-first precedence
- Injectable predicate catalog
- One message per invalid field
- Observable error state for UI layers
"""

from formguard.validation.evaluator import (
    EvaluationMode,
    FieldVerdict,
    RuleEvaluator,
)
from formguard.validation.form import ErrorMap, FormController, FormSnapshot
from formguard.validation.library import (
    PredicateLibrary,
    RuleSpecError,
    default_library,
)
from formguard.validation.messages import MessageFormatter, field_error_message
from formguard.validation.rules import (
    LengthBound,
    PhoneNumber,
    RuleName,
    email,
    max_length,
    min_length,
    numeric,
    phone,
    required,
)
from formguard.validation.validator import (
    ValidationError,
    ValidationResult,
    parse_field_rules,
    parse_rules,
    validate,
    validate_or_fail,
)

__all__ = [
    # Controller
    "FormController",
    "FormSnapshot",
    "ErrorMap",
    # Evaluator
    "RuleEvaluator",
    "EvaluationMode",
    "FieldVerdict",
    # Predicates
    "PredicateLibrary",
    "RuleSpecError",
    "default_library",
    "RuleName",
    "LengthBound",
    "PhoneNumber",
    "required",
    "email",
    "numeric",
    "max_length",
    "min_length",
    "phone",
    # Messages
    "MessageFormatter",
    "field_error_message",
    # One-shot
    "ValidationError",
    "ValidationResult",
    "parse_field_rules",
    "parse_rules",
    "validate",
    "validate_or_fail",
]
