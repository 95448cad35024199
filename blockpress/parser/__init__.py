"""Markdown-ish text to block tree."""

from blockpress.parser.core import feed_line, finish, parse_document, parse_inline, parse_markdown
from blockpress.parser.models import ParserState

__all__ = ["feed_line", "finish", "parse_document", "parse_inline", "parse_markdown", "ParserState"]
