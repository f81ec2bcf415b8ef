"""
Formguard CLI Main Module
=========================

Validate JSON records from the command line.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from formguard import __version__
from formguard.core.config import get_config
from formguard.utils.logger import configure_logging
from formguard.validation.evaluator import EvaluationMode
from formguard.validation.library import default_library
from formguard.validation.validator import validate

try:
    import orjson

    _json_loads = orjson.loads

    def _json_dumps(obj: Any) -> str:
        return orjson.dumps(obj, option=orjson.OPT_INDENT_2).decode("utf-8")
except ImportError:
    _json_loads = json.loads

    def _json_dumps(obj: Any) -> str:
        return json.dumps(obj, indent=2, ensure_ascii=False)


EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="formguard",
        description="Declarative form validation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  formguard validate values.json --rules rules.json
  formguard validate values.json -r rules.json -l labels.json --format json
  formguard rules                          List built-in rules

Rules file:
  {"email": "required|email", "name": {"required": true, "max_length": 40}}
        """,
    )

    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"formguard {__version__}",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a JSON record",
    )
    validate_parser.add_argument(
        "values",
        help="JSON file with field values",
    )
    validate_parser.add_argument(
        "-r", "--rules",
        required=True,
        help="JSON file with rule specifications",
    )
    validate_parser.add_argument(
        "-l", "--labels",
        default=None,
        help="JSON file with field labels",
    )
    validate_parser.add_argument(
        "--mode",
        choices=[m.value for m in EvaluationMode],
        default=None,
        help="Evaluation mode (default from configuration)",
    )
    validate_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format",
    )

    subparsers.add_parser(
        "rules",
        help="List built-in rules",
    )

    return parser


def cli(args: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.log_level:
        configure_logging(parsed.log_level)

    if not parsed.command:
        parser.print_help()
        return EXIT_VALID

    handlers = {
        "validate": handle_validate,
        "rules": handle_rules,
    }

    handler = handlers.get(parsed.command)
    if handler is None:
        parser.print_help()
        return EXIT_ERROR

    try:
        return handler(parsed)
    except KeyboardInterrupt:
        print("\nAborted.")
        return 130
    except (OSError, ValueError) as e:
        # RuleSpecError and JSON decode errors are ValueErrors
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


def _load_json(path: str) -> Dict[str, Any]:
    data = _json_loads(Path(path).read_bytes())
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return data


def handle_validate(args: argparse.Namespace) -> int:
    """Handle validate command."""
    config = get_config()
    library = default_library(config)

    values = _load_json(args.values)
    rules = _load_json(args.rules)
    labels = _load_json(args.labels) if args.labels else None

    result = validate(
        values,
        rules,
        labels,
        library=library,
        mode=args.mode,
        config=config,
    )

    if args.format == "json":
        print(_json_dumps({"valid": result.valid, "errors": result.errors}))
    elif result.valid:
        print("Valid")
    else:
        for name, message in result.errors.items():
            print(f"{name}: {message if message is not None else 'invalid'}")

    return EXIT_VALID if result.valid else EXIT_INVALID


def handle_rules(args: argparse.Namespace) -> int:
    """Handle rules command."""
    library = default_library(get_config())
    print("required")
    print("required_if (callable only)")
    for name in library.names():
        print(name)
    return EXIT_VALID


def main() -> None:
    """Main entry point."""
    sys.exit(cli())


if __name__ == "__main__":
    main()
