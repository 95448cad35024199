"""Block tree models and block JSON ingestion."""

from blockpress.blocks.core import (
    build_tree,
    dump_blocks,
    is_flat,
    load_block,
    load_blocks,
    load_rich_text,
    resolve_block_list,
)
from blockpress.blocks.models import (
    Block,
    BlockType,
    CalloutBlock,
    CodeBlock,
    ColumnBlock,
    ColumnListBlock,
    DividerBlock,
    Document,
    DocumentMetadata,
    HeadingBlock,
    ListItemBlock,
    MediaBlock,
    ParagraphBlock,
    QuoteBlock,
    TableBlock,
    TextBlock,
    ToDoBlock,
    ToggleBlock,
)

__all__ = [
    "build_tree",
    "dump_blocks",
    "is_flat",
    "load_block",
    "load_blocks",
    "load_rich_text",
    "resolve_block_list",
    "Block",
    "BlockType",
    "CalloutBlock",
    "CodeBlock",
    "ColumnBlock",
    "ColumnListBlock",
    "DividerBlock",
    "Document",
    "DocumentMetadata",
    "HeadingBlock",
    "ListItemBlock",
    "MediaBlock",
    "ParagraphBlock",
    "QuoteBlock",
    "TableBlock",
    "TextBlock",
    "ToDoBlock",
    "ToggleBlock",
]
