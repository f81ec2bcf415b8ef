"""
Formguard Validation Rules
==========================

Rule names, rule types and the built-in predicates.

A rule attached to a field is either a boolean flag (used for
`required`) or a predicate taking the field value and returning a bool.
Every built-in predicate is total: it returns False instead of raising
for any form value, including None.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import phonenumbers
from phonenumbers import NumberParseException

FormValue = Union[date, str, int, float, bool, List[str], None]
Predicate = Callable[[FormValue], bool]
Rule = Union[bool, Predicate]
FieldRuleSet = Mapping[str, Rule]
RuleTable = Mapping[str, FieldRuleSet]
LabelTable = Mapping[str, str]


class RuleName(str, Enum):
    """Built-in rule names."""

    REQUIRED = "required"
    REQUIRED_IF = "required_if"
    EMAIL = "email"
    NUMERIC = "numeric"
    MAX_LENGTH = "max_length"
    MIN_LENGTH = "min_length"
    PHONE = "phone"


# camelCase spellings accepted for built-in names
RULE_ALIASES: Dict[str, str] = {
    "requiredIf": RuleName.REQUIRED_IF.value,
    "maxLength": RuleName.MAX_LENGTH.value,
    "minLength": RuleName.MIN_LENGTH.value,
}

PRESENCE_RULES = frozenset({RuleName.REQUIRED.value, RuleName.REQUIRED_IF.value})


def normalize_rule_name(name: Union[str, RuleName]) -> str:
    """Map a rule name or alias to its canonical spelling."""
    if isinstance(name, RuleName):
        return name.value
    return RULE_ALIASES.get(name, name)


def required(value: FormValue) -> bool:
    """
    Presence check.

    None is absent, booleans are always present, sequences and mappings
    must be non-empty, anything stringable must have a non-empty string
    form, other objects need at least one instance attribute.
    """
    if value is None:
        return False

    if isinstance(value, bool):
        return True

    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) > 0

    if isinstance(value, date):
        return True

    if isinstance(value, MappingABC):
        return len(value) > 0

    if isinstance(value, (str, int, float)):
        return len(str(value)) > 0

    if hasattr(value, "__dict__"):
        return len(vars(value)) > 0

    return len(str(value)) > 0


_EMAIL_LOCAL = (
    r"(?:[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r'|"(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21\x23-\x5b\x5d-\x7f]'
    r'|[\x01-\x09\x0b\x0c\x0e-\x7f])*")'
)
_EMAIL_DOMAIN = (
    r"(?:(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z0-9]{2,}(?:[a-z0-9-]*[a-z0-9])?"
    r"|\[(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?"
    r"|[a-z0-9-]*[a-z0-9]:(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21-\x5a\x53-\x7f]"
    r"|\\[\x01-\x09\x0b\x0c\x0e-\x7f])+)\])"
)
EMAIL_PATTERN: re.Pattern = re.compile(_EMAIL_LOCAL + "@" + _EMAIL_DOMAIN, re.IGNORECASE)


def email(value: FormValue) -> bool:
    """Email address format check."""
    if not value or not isinstance(value, str):
        return False
    return EMAIL_PATTERN.fullmatch(value) is not None


def numeric(value: FormValue) -> bool:
    """Finite number, or a string that parses as one."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        try:
            return math.isfinite(float(value))
        except ValueError:
            return False
    return False


def _length(value: FormValue) -> int:
    if value is None:
        return 0
    if isinstance(value, (str, list, tuple, set, frozenset)):
        return len(value)
    return len(str(value))


@dataclass(frozen=True)
class LengthBound:
    """
    Length bound predicate.

    The bound is exposed as `param` so messages can mention it.
    """

    limit: int
    maximum: bool = True

    @property
    def param(self) -> int:
        return self.limit

    def __call__(self, value: FormValue) -> bool:
        if self.maximum:
            return _length(value) <= self.limit
        return _length(value) >= self.limit


def max_length(limit: int) -> LengthBound:
    """Create a predicate accepting at most `limit` characters or items."""
    return LengthBound(limit=int(limit), maximum=True)


def min_length(limit: int) -> LengthBound:
    """Create a predicate accepting at least `limit` characters or items."""
    return LengthBound(limit=int(limit), maximum=False)


@dataclass(frozen=True)
class PhoneNumber:
    """Phone number predicate for a default region."""

    region: Optional[str] = "US"

    def __call__(self, value: FormValue) -> bool:
        if not value or not isinstance(value, str):
            return False
        try:
            parsed = phonenumbers.parse(value, self.region)
        except NumberParseException:
            return False
        return phonenumbers.is_valid_number(parsed)


def phone(region: Optional[str] = "US") -> PhoneNumber:
    """Create a phone number predicate; `region` is an ISO country code."""
    return PhoneNumber(region=region.upper() if region else None)


def rule_param(rule: Any) -> Optional[Any]:
    """Message parameter carried by a predicate, if any."""
    return getattr(rule, "param", None)
