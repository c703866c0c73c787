"""Main CLI entry point for the markup-tree command-line tool.

Provides the ``parse`` command, which prints the item trees of XML files,
and the ``check`` command, which reports whether files build cleanly.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from markup_tree import __version__
from markup_tree.api import MarkupTreeParser
from markup_tree.shared import (
    ConfigError,
    MarkupTreeError,
    ParserConfig,
    configure_logging,
    get_logger,
)
from markup_tree.tree import XMLItem

XML_SUFFIXES = {".xml", ".xhtml", ".svg"}
PRESETS = ["default", "legacy", "hardened"]
OUTPUT_FORMATS = ["json", "text"]
TEXT_PREVIEW_LENGTH = 60


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.parser_config = ParserConfig.default()
        self.output_format = "json"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        Recognised keys: ``preset``, ``output_format`` and ``config`` (a
        ParserConfig dictionary applied instead of the preset).
        """
        config = cls()
        if not config_path.exists():
            return config

        try:
            with config_path.open() as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("configuration file must contain a JSON object")
            parser_config = config.parser_config
            if "preset" in data:
                parser_config = ParserConfig.preset(data["preset"])
            if "config" in data:
                parser_config = ParserConfig.from_dict(data["config"])
            output_format = data.get("output_format", config.output_format)
            if output_format not in OUTPUT_FORMATS:
                raise ValueError(f"output_format must be one of {OUTPUT_FORMATS}")
            config.parser_config = parser_config
            config.output_format = output_format
        except (OSError, TypeError, ValueError, ConfigError) as e:
            print(f"Warning: Could not load config file: {e}", file=sys.stderr)

        return config


class FileProcessor:
    """Runs the parser over files and turns outcomes into report records."""

    def __init__(self, config: CLIConfig, include_tree: bool = True):
        self.config = config
        self.include_tree = include_tree
        self.parser = MarkupTreeParser(config.parser_config)
        self.logger = get_logger(__name__, None, "cli_processor")

    def process_single_file(self, file_path: Path) -> Dict[str, Any]:
        """Parse one file and return its report record."""
        try:
            result = self.parser.parse_file(file_path)
        except MarkupTreeError as e:
            return {"file": str(file_path), "success": False, "error": e.to_dict()}
        except OSError as e:
            self.logger.warning(
                "Could not read file", extra={"file": str(file_path), "error": str(e)}
            )
            return {
                "file": str(file_path),
                "success": False,
                "error": {"kind": "IO_ERROR", "message": str(e)},
            }

        record = {
            "file": str(file_path),
            "success": True,
            "element_count": result.element_count,
            "max_depth": result.max_depth,
            "processing_time_ms": result.metrics.processing_time_ms,
        }
        if self.include_tree:
            record["roots"] = [root.to_dict() for root in result.roots]
        return record

    def find_xml_files(self, path: Path, recursive: bool = False) -> Iterator[Path]:
        """Find XML files in path; explicitly named files are always kept."""
        if path.is_dir():
            pattern = "**/*" if recursive else "*"
            for candidate in sorted(path.glob(pattern)):
                if candidate.is_file() and candidate.suffix.lower() in XML_SUFFIXES:
                    yield candidate
        else:
            yield path

    def batch_process(
        self, paths: List[Path], recursive: bool = False
    ) -> List[Dict[str, Any]]:
        """Process every file named by ``paths``."""
        results = []
        for path in paths:
            for file_path in self.find_xml_files(path, recursive):
                results.append(self.process_single_file(file_path))
        return results


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="markup-tree",
        description="Build element trees from XML files and report structural errors"
    )

    parser.add_argument("--version", action="version", version=__version__)
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

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Print the trees of XML files")
    parse_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files or directories to parse"
    )
    parse_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=OUTPUT_FORMATS,
        help="Output format (default: json)"
    )
    parse_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    _add_config_arguments(parse_parser)

    check_parser = subparsers.add_parser("check", help="Check that XML files build cleanly")
    check_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files or directories to check"
    )
    check_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    check_parser.add_argument(
        "--format", "-f",
        choices=OUTPUT_FORMATS,
        default="text",
        help="Output format (default: text)"
    )
    _add_config_arguments(check_parser)

    return parser


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    parser.add_argument(
        "--preset",
        choices=PRESETS,
        help="Parser configuration preset"
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        help="Maximum element nesting depth"
    )


def _load_config(args: argparse.Namespace) -> CLIConfig:
    config = CLIConfig()
    if args.config:
        config = CLIConfig.from_file(args.config)
    if args.preset:
        config.parser_config = ParserConfig.preset(args.preset)
    if args.max_depth is not None:
        config.parser_config = config.parser_config.override(
            tree__max_depth=args.max_depth
        )
    return config


def _configure_logging(args: argparse.Namespace, config: CLIConfig) -> None:
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.parser_config.global_.logging_level)


def format_outline(item: XMLItem, indent: int = 0) -> List[str]:
    """Render an item and its children as indented outline lines."""
    lines = []
    pending = [(item, indent)]
    while pending:
        current, level = pending.pop()
        line = "  " * level + current.name
        if current.attributes:
            attrs = " ".join(
                f'{name}="{value}"' for name, value in current.attributes.items()
            )
            line += f" [{attrs}]"
        text = current.text.strip()
        if text:
            if len(text) > TEXT_PREVIEW_LENGTH:
                text = text[:TEXT_PREVIEW_LENGTH] + "..."
            line += f": {text!r}"
        lines.append(line)
        pending.extend((child, level + 1) for child in reversed(current.children))
    return lines


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format parse results for output."""
    if format_type == "text":
        if not results:
            return "No results to display."

        lines = []
        for result in results:
            lines.append(f"== {result['file']}")
            if result["success"]:
                for root in result["roots"]:
                    lines.extend(format_outline(_item_from_dict(root)))
            else:
                error = result["error"]
                lines.append(f"   Error ({error['kind']}): {error['message']}")
            lines.append("")
        return "\n".join(lines)

    return json.dumps(results, indent=2)


def format_check_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format check results for output."""
    records = []
    for result in results:
        record = {"file": result["file"], "ok": result["success"]}
        if result["success"]:
            record["element_count"] = result["element_count"]
        else:
            record["error"] = result["error"]
        records.append(record)

    if format_type == "json":
        return json.dumps(records, indent=2)

    ok_count = sum(1 for r in records if r["ok"])
    lines = [f"Checked {len(records)} files, {ok_count} ok", "-" * 50]
    for record in records:
        if record["ok"]:
            lines.append(f"ok    {record['file']} ({record['element_count']} elements)")
        else:
            error = record["error"]
            lines.append(f"FAIL  {record['file']}")
            lines.append(f"      {error['kind']}: {error['message']}")
    return "\n".join(lines)


def _item_from_dict(data: Dict[str, Any]) -> XMLItem:
    def shallow(entry: Dict[str, Any]) -> XMLItem:
        return XMLItem(
            name=entry["name"], text=entry["text"], attributes=dict(entry["attributes"])
        )

    root = shallow(data)
    pending = [(data, root)]
    while pending:
        entry, item = pending.pop()
        for child_entry in entry["children"]:
            child = shallow(child_entry)
            item.children.append(child)
            pending.append((child_entry, child))
    return root


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    config = _load_config(args)
    _configure_logging(args, config)
    output_format = args.format or config.output_format

    processor = FileProcessor(config)
    results = processor.batch_process(args.paths, args.recursive)
    try:
        formatted_output = format_results(results, output_format)
    except RecursionError:
        # json.dumps recurses once per nesting level
        print(
            "Error: tree too deeply nested for JSON output; use --format text",
            file=sys.stderr,
        )
        return 1

    if args.output:
        try:
            args.output.write_text(formatted_output)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        print(f"Results written to {args.output}", file=sys.stderr)
    else:
        print(formatted_output)

    if not results:
        return 1
    return 0 if all(r["success"] for r in results) else 1


def cmd_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    config = _load_config(args)
    _configure_logging(args, config)

    processor = FileProcessor(config, include_tree=False)
    results = processor.batch_process(args.paths, args.recursive)
    print(format_check_results(results, args.format))

    if not results:
        return 1
    return 0 if all(r["success"] for r in results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "parse":
            return cmd_parse(args)
        if args.command == "check":
            return cmd_check(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
