"""
Formguard - Declarative Form Validation
=======================================

Validates a record of field values against per-field named rules and
produces a single error message per invalid field. UI-agnostic: results
are published through observable cells that any UI layer can read.

Features:
---------
- Required-first rule precedence
- Built-in email, numeric, length and phone checks
- Custom predicates and an injectable predicate catalog
- Observable error, form-level message and validity state
- Rule strings ("required|email|max_length:255") and a CLI

Quick Start:
    from formguard import FormController

    form = FormController(
        {"email": ""},
        rules={"email": {"required": True, "email": True}},
        labels={"email": "Email"},
    )
    form.trigger_validation()
    form.errors.value  # {"email": "The Email is required"}
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

from formguard.engine.reactive import Computed, Effect, State, unref
from formguard.validation.form import FormController, FormSnapshot


def __getattr__(name: str):
    """Lazy loading of the remaining public names."""
    _imports = {
        "Config": "formguard.core.config",
        "get_config": "formguard.core.config",
        "RuleEvaluator": "formguard.validation.evaluator",
        "EvaluationMode": "formguard.validation.evaluator",
        "FieldVerdict": "formguard.validation.evaluator",
        "PredicateLibrary": "formguard.validation.library",
        "RuleSpecError": "formguard.validation.library",
        "default_library": "formguard.validation.library",
        "MessageFormatter": "formguard.validation.messages",
        "ValidationError": "formguard.validation.validator",
        "ValidationResult": "formguard.validation.validator",
        "validate": "formguard.validation.validator",
        "validate_or_fail": "formguard.validation.validator",
        "get_logger": "formguard.utils.logger",
        "configure_logging": "formguard.utils.logger",
    }

    if name in _imports:
        import importlib
        module = importlib.import_module(_imports[name])
        return getattr(module, name)

    raise AttributeError(f"module 'formguard' has no attribute '{name}'")


__all__ = [
    "__version__",
    "__license__",
    # Loaded eagerly
    "FormController",
    "FormSnapshot",
    "State",
    "Computed",
    "Effect",
    "unref",
    # Lazy
    "Config",
    "get_config",
    "RuleEvaluator",
    "EvaluationMode",
    "FieldVerdict",
    "PredicateLibrary",
    "RuleSpecError",
    "default_library",
    "MessageFormatter",
    "ValidationError",
    "ValidationResult",
    "validate",
    "validate_or_fail",
    "get_logger",
    "configure_logging",
]
