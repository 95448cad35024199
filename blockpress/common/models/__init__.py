"""Shared models: rich text and render settings."""

from blockpress.common.models.rich_text import (
    Annotations,
    Color,
    RichTextRun,
    extract_plain_text,
    render_rich_text_html,
)
from blockpress.common.models.settings import RenderOptions

__all__ = [
    "Annotations",
    "Color",
    "RichTextRun",
    "extract_plain_text",
    "render_rich_text_html",
    "RenderOptions",
]
