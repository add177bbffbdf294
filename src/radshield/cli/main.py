"""
CLI to redact, validate and rewrite reports from the command line.
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from radshield import (
    DEFAULT_MODEL,
    PIIRedactor,
    RadshieldError,
    ReportRewriter,
    RewriteOptions,
    list_models,
)
from radshield.logging import configure_logging


def build_parser():
    parser = argparse.ArgumentParser(
        prog="radshield",
        description="Reversible PII redaction for radiology reports",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty print JSON output",
    )
    parser.add_argument(
        "--log-level",
        help="Log level (default: RADSHIELD_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--list-patterns",
        action="store_true",
        help="Show detector registry statistics and exit",
    )
    parser.add_argument(
        "--list-models",
        action="store_true",
        help="List available models and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    redact_parser = subparsers.add_parser("redact", help="Redact PII from a report")
    redact_parser.add_argument("file", help="Report file, or - for stdin")

    validate_parser = subparsers.add_parser(
        "validate", help="Score a reinserted report against the original"
    )
    validate_parser.add_argument("original", help="Original report file")
    validate_parser.add_argument("final", help="Final (reinserted) report file")
    validate_parser.add_argument(
        "--placeholders",
        required=True,
        type=Path,
        help="JSON file with the placeholder list (or the output of 'redact')",
    )

    rewrite_parser = subparsers.add_parser(
        "rewrite", help="Rewrite a report through a language model"
    )
    rewrite_parser.add_argument("file", help="Report file, or - for stdin")
    rewrite_parser.add_argument(
        "-m",
        "--model",
        help=f"Model to use (default: RADSHIELD_MODEL or {DEFAULT_MODEL})",
    )
    rewrite_parser.add_argument(
        "--mode",
        default="1",
        choices=["1", "2", "3", "4", "5"],
        help="Rewrite depth, 1 = proofreading only (default: 1)",
    )
    rewrite_parser.add_argument(
        "--style",
        default="neutral",
        choices=["knapp", "neutral", "ausführlicher"],
    )
    rewrite_parser.add_argument("--layout", help="Layout name or custom template")
    rewrite_parser.add_argument(
        "--recommendations",
        action="store_true",
        help="Ask for structured output with recommendations",
    )
    rewrite_parser.add_argument("--request-id", help="Request id for audit logs")

    return parser


def read_text(source: str) -> str:
    """Read a report from a path, or from stdin for '-'."""
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {source}")
    return path.read_text(encoding="utf-8")


def load_placeholders(path: Path) -> list:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("placeholders", [])
    return data


def print_patterns(redactor: PIIRedactor):
    """Print detector registry statistics."""
    stats = redactor.get_pattern_stats()

    print("\nDetectors:")
    print("=" * 50)
    for detector in redactor.registry.list_detectors():
        print(f"  {detector.name:<20} {detector.semantic_type:<18} {detector.confidence:.2f}")

    print(f"\nTotal patterns: {stats['total_patterns']}")
    print(f"Types: {stats['types']}")
    print(f"Average confidence: {stats['average_confidence']:.2f}")
    print(f"High confidence patterns: {stats['high_confidence_patterns']}")
    print()


def print_models():
    """Print available models grouped by provider."""
    providers = {}
    for name, info in list_models().items():
        providers.setdefault(info.get("provider", "unknown"), []).append((name, info))

    print("\nAvailable models:")
    print("=" * 50)

    for provider, model_list in sorted(providers.items()):
        print(f"\n{provider.upper()}:")
        for name, info in sorted(model_list):
            cost = info.get("input_cost", 0)
            cost_str = "local" if cost == 0 else f"${cost}/M tokens"
            print(f"  {name:<20} {cost_str}")

    print(f"\nDefault: {DEFAULT_MODEL}")
    print()


def run_command(args) -> dict:
    if args.command == "redact":
        result = PIIRedactor().redact(read_text(args.file))
        return result.model_dump(mode="json")

    if args.command == "validate":
        report = PIIRedactor().validate(
            read_text(args.original),
            read_text(args.final),
            load_placeholders(args.placeholders),
        )
        return report.model_dump(mode="json")

    rewriter = ReportRewriter(model=args.model)
    options = RewriteOptions(
        mode=args.mode,
        style=args.style,
        layout=args.layout,
        include_recommendations=args.recommendations,
    )
    result = rewriter.rewrite(read_text(args.file), options, request_id=args.request_id)
    return result.model_dump(mode="json")


def main():
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args()

    configure_logging(level=args.log_level)

    if args.list_patterns:
        print_patterns(PIIRedactor())
        sys.exit(0)

    if args.list_models:
        print_models()
        sys.exit(0)

    if not args.command:
        parser.error("a command is required (redact, validate, rewrite)")

    try:
        output = run_command(args)
    except (RadshieldError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    indent = 2 if args.pretty else None
    print(json.dumps(output, indent=indent, ensure_ascii=False, default=str))


if __name__ == "__main__":
    main()
