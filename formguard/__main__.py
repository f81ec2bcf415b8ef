"""
Formguard CLI Entry Point
=========================

Allows running formguard as a module: python -m formguard
"""

import sys

from formguard.cli.main import cli

if __name__ == "__main__":
    sys.exit(cli())
