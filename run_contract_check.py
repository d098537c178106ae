#!/usr/bin/env python
"""Check a generated Swagger document against its hand-written reference."""

import argparse
import json
import logging
import sys
from pathlib import Path

from swaggerdiff import ContractCheckRunner, SwaggerDiffError


def main():
    parser = argparse.ArgumentParser(
        description="Validate an actual Swagger document against the expected one",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_contract_check.py generated.yaml documented.yaml
  python run_contract_check.py generated.yaml documented.yaml -c assertions.yaml -r report.json
  python run_contract_check.py --actual generated.yaml --expected documented.yaml
        """
    )

    parser.add_argument(
        "actual",
        nargs="?",
        help="Path to the Swagger document produced by the implementation"
    )
    parser.add_argument(
        "expected",
        nargs="?",
        help="Path to the reference Swagger document"
    )

    # Also support named arguments
    parser.add_argument("-a", "--actual", dest="actual_named", help="Path to the actual document")
    parser.add_argument("-e", "--expected", dest="expected_named", help="Path to the expected document")
    parser.add_argument("-c", "--config", help="Path to an assertion config file (YAML/JSON)")
    parser.add_argument("-r", "--report", help="Path to output JSON report file")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress console output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    # Use named args if positional not provided
    actual_path = args.actual or args.actual_named
    expected_path = args.expected or args.expected_named

    if not actual_path:
        parser.error("Actual document path is required")
    if not expected_path:
        parser.error("Expected document path is required")

    for label, path in (("Actual document", actual_path), ("Expected document", expected_path),
                        ("Config file", args.config)):
        if path and not Path(path).exists():
            print(f"Error: {label} not found: {path}", file=sys.stderr)
            return 2

    runner = ContractCheckRunner(actual_path, expected_path, args.config)
    try:
        report = runner.run()
    except (SwaggerDiffError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if not args.quiet:
        runner.print_summary()

    if args.report:
        with open(args.report, 'w') as f:
            json.dump(report.to_dict(), indent=2, fp=f)
        if not args.quiet:
            print(f"\nReport saved to: {args.report}")

    return 0 if report.is_match else 1


if __name__ == "__main__":
    sys.exit(main())
