"""
Mythline CLI - Command-line interface for the skill line engine.

Usage:
    mythline decode <line>            Print the structured line as JSON
    mythline encode <json_file|->     Print canonical line(s) from JSON
    mythline format <file>            Canonicalize a file of skill lines
    mythline validate <file>          Validate a file of skill lines

Files hold one skill line per row; blank rows and '#' comments are skipped.
Exit codes: 0 ok, 1 usage or I/O error, 2 decode/validation failure.
"""

import argparse
import json
import os
import sys

from .line import (
    DecodeError,
    DecodeOptions,
    InvalidSkillLine,
    LineContext,
    decode,
    encode,
    extract_modifiers,
    format_lines,
    validate_lines,
)
from .logging_utils import get_logger, setup_logging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Mythline - MythicMobs skill line engine",
        prog="mythline",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("MYTHLINE_LOG_LEVEL", "WARNING"),
        help="Log level for diagnostics on stderr",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    def add_decode_options(sub):
        sub.add_argument("--allow-chance", action="store_true", help="Accept a trailing chance (0.5, 25%%)")
        sub.add_argument(
            "--allow-health-modifier", action="store_true", help="Accept a trailing health modifier (<50%%)"
        )

    # Decode command
    decode_parser = subparsers.add_parser("decode", help="Decode a skill line to JSON")
    decode_parser.add_argument("line", help="Skill line text")
    decode_parser.add_argument(
        "--extract-modifiers", action="store_true", help="Promote repeat/repeatInterval/delay params"
    )
    add_decode_options(decode_parser)

    # Encode command
    encode_parser = subparsers.add_parser("encode", help="Encode JSON line(s) to text")
    encode_parser.add_argument("json_file", help="JSON file with one line object or a list, '-' for stdin")
    encode_parser.add_argument("--list-item", action="store_true", help="Prefix '- '")

    # Format command
    format_parser = subparsers.add_parser("format", help="Canonicalize a file of skill lines")
    format_parser.add_argument("file", help="Path to skill lines file, '-' for stdin")
    format_parser.add_argument("--sort-params", action="store_true", help="Sort params by key")
    format_parser.add_argument("--list-item", action="store_true", help="Prefix '- '")
    add_decode_options(format_parser)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a file of skill lines")
    validate_parser.add_argument("file", help="Path to skill lines file, '-' for stdin")
    validate_parser.add_argument(
        "--context",
        choices=[c.value for c in LineContext],
        default=LineContext.MOB.value,
        help="mob: triggers required, skill: triggers not allowed",
    )
    add_decode_options(validate_parser)

    return parser


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _options(args) -> DecodeOptions:
    return DecodeOptions(
        allow_chance=args.allow_chance,
        allow_health_modifier=args.allow_health_modifier,
    )


def cmd_decode(args) -> int:
    """Decode one line and print it as JSON."""
    from .api.schemas import SkillLineInfo

    try:
        line = decode(args.line, _options(args))
    except DecodeError as err:
        print(str(err))
        return EXIT_FAILED

    if args.extract_modifiers:
        line = extract_modifiers(line)
    print(json.dumps(SkillLineInfo.from_line(line).model_dump(mode="json"), indent=2))
    return EXIT_OK


def cmd_encode(args) -> int:
    """Encode JSON line objects into canonical text, one per row."""
    from pydantic import ValidationError
    from .api.schemas import SkillLineInfo

    try:
        data = json.loads(_read_text(args.json_file))
    except OSError as exc:
        print(f"Failed to read input: {exc}")
        return EXIT_USAGE
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON: {exc}")
        return EXIT_USAGE

    items = data if isinstance(data, list) else [data]
    for index, item in enumerate(items, start=1):
        try:
            line = SkillLineInfo.model_validate(item).to_line()
        except (ValidationError, InvalidSkillLine) as exc:
            print(f"Line object {index} is invalid: {exc}")
            return EXIT_FAILED
        text = encode(line)
        print(f"- {text}" if args.list_item else text)
    return EXIT_OK


def cmd_format(args) -> int:
    """Canonicalize every line of a file."""
    try:
        text = _read_text(args.file)
    except OSError as exc:
        print(f"Failed to read input: {exc}")
        return EXIT_USAGE

    try:
        lines = format_lines(
            text.splitlines(),
            sort_params=args.sort_params,
            list_item=args.list_item,
            options=_options(args),
        )
    except DecodeError as err:
        print(str(err))
        return EXIT_FAILED

    logger.info("Formatted %d line(s) from %s", len(lines), args.file)
    for line in lines:
        print(line)
    return EXIT_OK


def cmd_validate(args) -> int:
    """Validate every line of a file and print a report."""
    try:
        text = _read_text(args.file)
    except OSError as exc:
        print(f"Failed to read input: {exc}")
        return EXIT_USAGE

    report = validate_lines(text.splitlines(), LineContext(args.context), _options(args))

    for detail in report.details:
        status = "ok" if detail.result.valid else "FAIL"
        print(f"{detail.index}: [{status}] {detail.line.strip()}")
        for error in detail.result.errors:
            print(f"    error: {error}")
        for warning in detail.result.warnings:
            print(f"    warning: {warning}")

    print(f"\n{report.total} line(s): {report.valid} valid, {report.invalid} invalid")
    return EXIT_OK if report.invalid == 0 else EXIT_FAILED


COMMANDS = {
    "decode": cmd_decode,
    "encode": cmd_encode,
    "format": cmd_format,
    "validate": cmd_validate,
}


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return EXIT_USAGE
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
