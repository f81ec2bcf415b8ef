"""
Formguard Predicate Library
===========================

Injectable catalog mapping rule names to predicate factories.

A controller receives a library at construction and resolves flag rules
(`{"email": True}`) and rule strings (`"max_length:255"`) through it, so
tests can substitute deterministic fakes.

Example:
    library = default_library()
    library.register("even", lambda v: int(v) % 2 == 0)

    library.create("max_length", "10")("short")  # True
    library.resolve("email")("a@b.co")  # True
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from formguard.core.config import Config, get_config
from formguard.validation import rules as builtin
from formguard.validation.rules import (
    PRESENCE_RULES,
    Predicate,
    RuleName,
    normalize_rule_name,
)


class RuleSpecError(ValueError):
    """Unknown rule name or bad rule parameters."""


PredicateFactory = Callable[..., Predicate]


class PredicateLibrary:
    """
    Catalog of named predicates.

    Entries are factories: parameterless rules register a factory that
    returns the same predicate every time.
    """

    def __init__(self) -> None:
        self._factories: Dict[str, PredicateFactory] = {}

    def register(self, name: str, predicate: Predicate) -> PredicateLibrary:
        """Register a ready-made predicate under `name`."""
        if not callable(predicate):
            raise RuleSpecError(f"Rule '{name}' must be callable")
        return self.register_factory(name, lambda: predicate)

    def register_factory(self, name: str, factory: PredicateFactory) -> PredicateLibrary:
        """Register a factory building a predicate from parameters."""
        key = normalize_rule_name(name)
        if key in PRESENCE_RULES:
            raise RuleSpecError(f"Rule '{key}' is handled by the evaluator and cannot be replaced")
        self._factories[key] = factory
        return self

    def create(self, name: str, *params: Any) -> Predicate:
        """
        Build a predicate.

        Raises:
            RuleSpecError: Unknown name or parameters the factory rejects
        """
        key = normalize_rule_name(name)
        factory = self._factories.get(key)
        if factory is None:
            raise RuleSpecError(f"Unknown rule '{name}'")

        try:
            return factory(*params)
        except (TypeError, ValueError) as e:
            raise RuleSpecError(f"Invalid parameters for rule '{name}': {params!r}") from e

    def resolve(self, name: str) -> Optional[Predicate]:
        """Parameterless predicate for `name`, or None if unavailable."""
        try:
            return self.create(name)
        except RuleSpecError:
            return None

    def names(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_rule_name(name) in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def default_library(config: Optional[Config] = None) -> PredicateLibrary:
    """Build the catalog of built-in predicates."""
    config = config or get_config()
    region = config.get_str("phone.region", "US") or None

    library = PredicateLibrary()
    library.register(RuleName.EMAIL.value, builtin.email)
    library.register(RuleName.NUMERIC.value, builtin.numeric)
    library.register_factory(RuleName.MAX_LENGTH.value, builtin.max_length)
    library.register_factory(RuleName.MIN_LENGTH.value, builtin.min_length)
    library.register_factory(
        RuleName.PHONE.value,
        lambda default_region=region: builtin.phone(default_region),
    )
    return library
