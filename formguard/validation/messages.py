"""
Formguard Messages
==================

Human-readable error text for a failed rule.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union

from formguard.validation.rules import RuleName, normalize_rule_name

DEFAULT_TEMPLATES: Dict[str, str] = {
    RuleName.REQUIRED.value: "The {label} is required",
    RuleName.EMAIL.value: "The {label} must a valid email address.",
    RuleName.NUMERIC.value: "The {label} must be a valid number.",
    RuleName.MAX_LENGTH.value: "The {label} cannot have more than {param} characters.",
    RuleName.MIN_LENGTH.value: "The {label} must have {param} or more characters.",
}

FALLBACK_TEMPLATE = "The {label} is invalid"


class MessageFormatter:
    """
    Maps a rule name, label and parameter to one sentence.

    Templates use `{label}` and `{param}` placeholders. A missing or
    empty label falls back to `fallback_label`.

    Example:
        formatter = MessageFormatter(templates={"email": "{label} looks wrong"})
        formatter.format("Email", "email")  # "Email looks wrong"
    """

    def __init__(
        self,
        templates: Optional[Mapping[str, str]] = None,
        fallback_label: str = "field",
    ) -> None:
        self.templates: Dict[str, str] = dict(DEFAULT_TEMPLATES)
        for name, template in (templates or {}).items():
            self.templates[normalize_rule_name(name)] = template
        self.fallback_label = fallback_label

    def format(
        self,
        label: Optional[str],
        rule_name: Union[str, RuleName],
        param: Optional[Any] = None,
    ) -> str:
        template = self.templates.get(normalize_rule_name(rule_name), FALLBACK_TEMPLATE)
        return template.format(label=label or self.fallback_label, param=param)


_default_formatter = MessageFormatter()


def field_error_message(
    label: Optional[str],
    rule_name: Union[str, RuleName],
    param: Optional[Any] = None,
) -> str:
    """Format with the default templates."""
    return _default_formatter.format(label, rule_name, param)
