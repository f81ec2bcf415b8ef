"""
Formguard CLI
=============

Command-line interface.

Commands:
- validate: Validate a JSON record against a rules file
- rules: List built-in rules
"""

from formguard.cli.main import cli, main

__all__ = ["main", "cli"]
