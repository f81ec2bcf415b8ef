"""
Formguard Engine Module
=======================

Observable cells that carry form inputs and validation results.
"""

from formguard.engine.reactive import (
    Computed,
    Effect,
    State,
    batch,
    is_ref,
    unref,
)

__all__ = [
    "State",
    "Computed",
    "Effect",
    "batch",
    "is_ref",
    "unref",
]
