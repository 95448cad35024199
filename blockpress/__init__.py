"""Main entrypoint. Exposes the public API."""

from blockpress.blocks import Block, BlockType, Document, DocumentMetadata, dump_blocks, load_blocks
from blockpress.common.models import RenderOptions, RichTextRun, extract_plain_text, render_rich_text_html
from blockpress.parser import parse_document, parse_markdown
from blockpress.processor import ConversionResult, convert
from blockpress.renderer import (
    render_blocks,
    render_blog_post,
    render_collection,
    render_document,
    render_fragment,
)
from blockpress.validator import validate_and_fix, validate_and_fix_json

__all__ = [
    "Block",
    "BlockType",
    "Document",
    "DocumentMetadata",
    "dump_blocks",
    "load_blocks",
    "RenderOptions",
    "RichTextRun",
    "extract_plain_text",
    "render_rich_text_html",
    "parse_document",
    "parse_markdown",
    "ConversionResult",
    "convert",
    "render_blocks",
    "render_blog_post",
    "render_collection",
    "render_document",
    "render_fragment",
    "validate_and_fix",
    "validate_and_fix_json",
]
