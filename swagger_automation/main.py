#!/usr/bin/env python3
"""
Main entry points for the Swagger automation CLI.
"""

import sys
import json
import logging
import argparse

from swagger_automation.config import Config
from swagger_automation.converter import ConversionError, convert_source
from swagger_automation.exporter import EXPORTERS
from swagger_automation.jsonpath import evaluate_jsonpath, get_keys_from_json, parse_json_input
from swagger_automation.utils import setup_logging


def print_statistics(result):
    """Print summary stats for generated test cases."""
    if not result.test_cases:
        print("   No test cases generated")
        return

    print("\n   By scenario:")
    for scenario, count in sorted(result.scenario_counts().items()):
        print(f"   - {scenario}: {count}")

    method_counts = {}
    for op in result.operations:
        method_counts[op.method] = method_counts.get(op.method, 0) + 1

    print("\n   Endpoints by method:")
    for method, count in sorted(method_counts.items()):
        print(f"   - {method}: {count}")


def run(args) -> int:
    """Convert the document and write the requested exports."""
    setup_logging(args.log_file, getattr(logging, args.log_level))

    config = Config(args.config) if args.config else Config()
    if args.base_url:
        config.set("python.base_url", args.base_url)
    if args.collection_name:
        config.set("postman.collection_name", args.collection_name)
    output_dir = args.output_dir or config.output_dir

    print("📋 Swagger Automation Suite")
    print(f"{'='*60}")
    print(f"Source: {args.source if len(args.source) < 120 else 'inline JSON document'}")
    print(f"Output directory: {output_dir}")
    print(f"Format: {args.format}")
    print(f"{'='*60}\n")

    print("1️⃣  Parsing specification and generating test cases...")
    try:
        converter = convert_source(args.source, config)
    except ConversionError as e:
        print(f"✗ {e}")
        return 1

    result = converter.result
    print(f"   {result.summary()}")
    print_statistics(result)

    if not result.operations:
        print("⚠️  No endpoints were found; nothing to export")
        return 0

    formats = list(EXPORTERS) if args.format == "all" else [args.format]
    print(f"\n2️⃣  Exporting {', '.join(f.upper() for f in formats)}...")
    for fmt in formats:
        try:
            path = converter.export(fmt, output_dir)
            print(f"✓ {fmt} export saved to: {path}")
        except Exception as e:
            print(f"✗ Export error ({fmt}): {e}")
            return 1

    print(f"\n{'='*60}")
    print("✓ Conversion finished successfully!")
    if args.log_file:
        print(f"📝 Log saved to: {args.log_file}")
    print(f"{'='*60}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Swagger/OpenAPI to test cases, Postman, SoapUI and Python scripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s swagger.json
  %(prog)s swagger.yaml --format postman -o exports
  %(prog)s https://petstore.swagger.io/v2/swagger.json --format all
  %(prog)s openapi.json --format python --base-url http://staging:8080
        """
    )

    parser.add_argument(
        "source",
        help="Path or URL to the Swagger/OpenAPI spec (.json, .yaml, .yml, http://...) or inline JSON"
    )
    parser.add_argument(
        "-o", "--output-dir",
        help="Directory for exported files (default: export.output_dir from config, else current dir)"
    )
    parser.add_argument(
        "--format",
        choices=list(EXPORTERS) + ["all"],
        default="excel",
        help="Export format (default: excel)"
    )
    parser.add_argument(
        "--config",
        help="Path to a YAML config file"
    )
    parser.add_argument(
        "--base-url",
        help="Base URL for the generated Python script (overrides config)"
    )
    parser.add_argument(
        "--collection-name",
        help="Postman collection name (overrides config)"
    )
    parser.add_argument(
        "--log-file",
        default="swagger_automation.log",
        help="Path to log file (default: swagger_automation.log)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Log level (default: INFO)"
    )
    return parser


def main(argv=None):
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user")
        sys.exit(1)


def jsonpath_main(argv=None):
    """Evaluate a JSONPath expression against a JSON file."""
    parser = argparse.ArgumentParser(description="Evaluate JSONPath expressions against a JSON document")
    parser.add_argument("json_file", help="Path to a JSON file ('-' reads stdin)")
    parser.add_argument("expression", nargs="?", default="", help="JSONPath expression (empty prints the document)")
    parser.add_argument("--keys", action="store_true", help="List every available path instead of evaluating")
    args = parser.parse_args(argv)

    try:
        if args.json_file == "-":
            text = sys.stdin.read()
        else:
            with open(args.json_file, 'r', encoding='utf-8') as f:
                text = f.read()
        data = parse_json_input(text)

        if args.keys:
            for key in get_keys_from_json(data):
                print(key["value"])
        else:
            print(json.dumps(evaluate_jsonpath(data, args.expression), indent=2, ensure_ascii=False))
    except (OSError, ValueError) as e:
        print(f"✗ {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
