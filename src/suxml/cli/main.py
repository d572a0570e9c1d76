"""Main CLI entry point for the suxml command-line tool.

Provides checking, canonical reformatting and a text rendering of the line
projection used by interactive front-ends.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from suxml import __version__
from suxml.api import ParseResult, parse_file
from suxml.shared.config import ConfigError, EditorConfig
from suxml.shared.logging import configure_logging, get_logger
from suxml.tree import DisplayLine, XMLTag

EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_USAGE_ERROR = 2

TREE_INDENT = "  "

logger = get_logger(__name__, component="cli")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="suxml",
        description="Check, reformat and inspect XML files with suxml"
    )

    parser.add_argument("--version", action="version", version=__version__)

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Check command
    check_parser = subparsers.add_parser("check", help="Report the first error in XML files")
    check_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to check"
    )
    check_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)"
    )

    # Format command
    format_parser = subparsers.add_parser("format", help="Rewrite an XML file canonically")
    format_parser.add_argument(
        "path",
        type=Path,
        help="XML file to format"
    )
    output_group = format_parser.add_mutually_exclusive_group()
    output_group.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    output_group.add_argument(
        "--in-place", "-i",
        action="store_true",
        help="Overwrite the input file"
    )
    format_parser.add_argument(
        "--indent-spaces",
        type=int,
        help="Indent with this many spaces instead of a tab"
    )
    format_parser.add_argument(
        "--allow-partial",
        action="store_true",
        help="Write the partial tree even if parsing failed"
    )

    # Tree command
    tree_parser = subparsers.add_parser("tree", help="Print the line projection of an XML file")
    tree_parser.add_argument(
        "path",
        type=Path,
        help="XML file to show"
    )
    tree_parser.add_argument(
        "--find",
        metavar="NAME",
        help="Highlight tags named NAME and expand the path to them"
    )
    tree_parser.add_argument(
        "--expand-all",
        action="store_true",
        help="Expand every tag that has children"
    )
    tree_parser.add_argument(
        "--collapse-root",
        action="store_true",
        help="Leave the root collapsed after parsing"
    )

    return parser


def load_config(args: argparse.Namespace) -> EditorConfig:
    """Build the editor configuration from ``--config`` and command options.

    Raises:
        ConfigError: If the file cannot be read or a value is invalid
    """
    config = EditorConfig.from_file(args.config) if args.config else EditorConfig.default()
    if getattr(args, "indent_spaces", None) is not None:
        config = config.override(serializer__indent=" " * args.indent_spaces)
    if getattr(args, "collapse_root", False):
        config = config.override(projection__expand_root_on_parse=False)
    return config


def format_error(path: Path, result: ParseResult) -> str:
    """``path:line: message`` for the diagnostic that stopped the parse."""
    if result.error is not None:
        error = result.error
        detail = f" ({error.detail})" if error.detail else ""
        return f"{path}:{error.line}: {error.kind.message}{detail}"
    messages = [d.message for d in result.diagnostics]
    return f"{path}: {messages[-1] if messages else 'parse failed'}"


def format_tree_line(line: DisplayLine) -> str:
    """One projection row as text.

    The first column is ``*`` for search hits, ``+`` for collapsed tags that
    can be expanded, and a space otherwise.
    """
    node = line.node
    if line.highlighted:
        marker = "*"
    elif line.selectable and isinstance(node, XMLTag) and node.children and not node.expanded:
        marker = "+"
    else:
        marker = " "
    return f"{marker} {TREE_INDENT * line.depth}{line.text}"


def cmd_check(args: argparse.Namespace, config: EditorConfig) -> int:
    """Handle check command."""
    results: List[Dict[str, Any]] = []
    for path in args.paths:
        result = parse_file(path, config=config)
        entry = result.summary()
        entry["file"] = str(path)
        results.append(entry)

        if args.format == "text":
            if result.success:
                print(f"✓ {path}")
            else:
                print(f"✗ {format_error(path, result)}")

    valid_count = sum(1 for r in results if r["success"])
    if args.format == "json":
        print(json.dumps(results, indent=2))
    elif not args.quiet:
        print(f"Checked {len(results)} files, {valid_count} valid")

    return EXIT_OK if valid_count == len(results) else EXIT_PARSE_ERROR


def cmd_format(args: argparse.Namespace, config: EditorConfig) -> int:
    """Handle format command."""
    result = parse_file(args.path, config=config)
    if not result.success:
        print(format_error(args.path, result), file=sys.stderr)
        if not args.allow_partial or not result.document.root.element:
            return EXIT_PARSE_ERROR

    document = result.document
    if args.output or args.in_place:
        target = args.output or args.path
        if not document.write(target):
            print(f"Error writing output: {target}", file=sys.stderr)
            return EXIT_PARSE_ERROR
        if not args.quiet:
            print(f"Formatted {args.path} -> {target}", file=sys.stderr)
    else:
        text = document.serialize()
        print(text, end="" if text.endswith("\n") else "\n")

    return EXIT_OK if result.success else EXIT_PARSE_ERROR


def cmd_tree(args: argparse.Namespace, config: EditorConfig) -> int:
    """Handle tree command."""
    result = parse_file(args.path, config=config)
    if not result.success:
        print(format_error(args.path, result), file=sys.stderr)
        if not result.document.root.element:
            return EXIT_PARSE_ERROR

    document = result.document
    found = True
    if args.expand_all:
        document.expand_all()
    if args.find:
        found = document.find(args.find)
        if not found:
            print(f"No tag named {args.find!r}", file=sys.stderr)

    for line in document.render_lines():
        print(format_tree_line(line))

    return EXIT_OK if result.success and found else EXIT_PARSE_ERROR


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_USAGE_ERROR

    try:
        config = load_config(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    # Set up logging verbosity
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.global_.logging_level)

    logger.debug("Running command", extra={"command": args.command})

    # Route to appropriate command handler
    try:
        if args.command == "check":
            return cmd_check(args, config)
        elif args.command == "format":
            return cmd_format(args, config)
        elif args.command == "tree":
            return cmd_tree(args, config)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return EXIT_USAGE_ERROR

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
