"""Quick CLI for converting documents by hand."""

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from blockpress.common.utils.config import get_config
from blockpress.common.utils.logger import logger, setup_logging


def _read_source(path: Path) -> Any:
    """Block JSON for `.json` files, markdown text for everything else."""
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(raw)
    return raw


def main(argv: list[str] | None = None):
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(description="Blockpress CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging on the console")
    subparsers = parser.add_subparsers(dest="action", help="Action to perform")

    parse_parser = subparsers.add_parser("parse", help="Parse markdown into block JSON")
    parse_parser.add_argument("--input", required=True, type=Path, help="Markdown file to parse")
    parse_parser.add_argument("--output", type=Path, default=Path("output.json"), help="Where to write block JSON")

    render_parser = subparsers.add_parser("render", help="Render markdown or block JSON to HTML")
    render_parser.add_argument("--input", required=True, type=Path, help="Markdown or .json block file")
    render_parser.add_argument(
        "--layout",
        type=str,
        choices=["fragment", "document", "blog"],
        default="fragment",
        help="Output shape: bare fragment, full document with sidebar, or blog post article",
    )
    render_parser.add_argument("--title", type=str, default=None, help="Title for the document and blog layouts")
    render_parser.add_argument("--output", type=Path, default=Path("output.html"), help="Where to write HTML")

    subparsers.add_parser("config", help="Print configuration")

    args = parser.parse_args(argv)

    if args.verbose:
        setup_logging(console_level=logging.DEBUG)

    match args.action:
        case "parse":
            from blockpress.blocks import dump_blocks
            from blockpress.parser import parse_markdown

            logger.info("Parsing %s...", args.input)
            blocks = parse_markdown(args.input.read_text(encoding="utf-8"))
            with open(args.output, "w", encoding="utf-8") as f:
                json.dump(dump_blocks(blocks), f, ensure_ascii=False, indent=2)
            logger.info("Wrote %d blocks to %s", len(blocks), args.output)

        case "render":
            from blockpress.processor import convert

            logger.info("Rendering %s as %s...", args.input, args.layout)
            metadata = {"title": args.title} if args.title else None
            result = convert(_read_source(args.input), layout=args.layout, metadata=metadata)
            for issue in result.validation.errors:
                logger.warning("Dropped block: %s", issue.message)
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(result.html)
            logger.info("HTML output written to %s (%d fixes applied)", args.output, len(result.validation.fixes))

        case "config":
            logger.info("Configuration:\n")
            for key, value in sorted(get_config().model_dump().items()):
                print(f"{key}={value}")

        case _:
            parser.print_help()


if __name__ == "__main__":
    main()
