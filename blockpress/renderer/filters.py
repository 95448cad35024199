"""Filters applied to the block tree before rendering."""

from typing import Callable

from blockpress.blocks.models import Block, BlockType, ColumnListBlock
from blockpress.common.utils.logger import logger


def _walk(blocks: list[Block], visit: Callable[[list[Block]], None]) -> None:
    visit(blocks)
    for block in blocks:
        _walk(block.children, visit)
        if isinstance(block, ColumnListBlock):
            for column in block.columns:
                _walk(column.children, visit)


def remove_archived(blocks: list[Block]) -> None:
    """Remove archived or trashed blocks, along with their subtrees."""

    def visit(level: list[Block]) -> None:
        kept = [block for block in level if not block.archived]
        if len(kept) != len(level):
            logger.debug("Removing %d archived blocks", len(level) - len(kept))
        level[:] = kept
        for block in kept:
            if isinstance(block, ColumnListBlock):
                block.columns = [column for column in block.columns if not column.archived]

    _walk(blocks, visit)


def remove_stray_columns(blocks: list[Block]) -> None:
    """Drop `column` blocks that are not inside a column list; they have no layout of their own."""

    def visit(level: list[Block]) -> None:
        level[:] = [block for block in level if block.type != BlockType.COLUMN]

    # Columns owned by a column list live in `.columns`, which is never a visited level.
    _walk(blocks, visit)


filters: list[Callable[[list[Block]], None]] = [remove_archived, remove_stray_columns]


def filter_blocks(blocks: list[Block]) -> None:
    """Apply pre-render filters to the block tree, in place."""
    for ffilter in filters:
        ffilter(blocks)
