"""Recursive block tree to HTML fragment renderer."""

import html
import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Sequence

from blockpress.blocks.models import (
    Block,
    BlockType,
    CalloutBlock,
    CodeBlock,
    ColumnBlock,
    ColumnListBlock,
    DividerBlock,
    HeadingBlock,
    ListItemBlock,
    MediaBlock,
    ParagraphBlock,
    QuoteBlock,
    TableBlock,
    ToDoBlock,
    ToggleBlock,
)
from blockpress.common.models import RenderOptions, RichTextRun, extract_plain_text, render_rich_text_html
from blockpress.common.utils.config import get_config
from blockpress.common.utils.logger import logger
from blockpress.renderer.filters import filter_blocks
from blockpress.renderer.models import ListGroup, NavEntry, RenderResult

CENT = Decimal("0.01")
HUNDRED = Decimal(100)


def slugify(text: str) -> str:
    """Lowercase, drop non-word characters, hyphenate whitespace."""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def _valid_ratio(ratio: Any) -> bool:
    return (
        isinstance(ratio, (int, float))
        and not isinstance(ratio, bool)
        and math.isfinite(ratio)
        and ratio > 0
    )


def compute_column_widths(ratios: Sequence[Any]) -> list[Decimal]:
    """Turn relative column weights into percentages that sum to exactly 100.

    Missing or non-positive ratios count as 1. The last column absorbs the rounding remainder.
    If rounding would push the last column below zero, it is clamped to 0 and the
    overshoot comes out of the widest column.
    """
    if not ratios:
        return []

    weights = [Decimal(str(r)) if _valid_ratio(r) else Decimal(1) for r in ratios]
    total = sum(weights, Decimal(0))

    widths = [(w / total * HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP) for w in weights[:-1]]
    last = HUNDRED - sum(widths, Decimal(0))
    if last < 0:
        widest = widths.index(max(widths))
        widths[widest] += last
        last = Decimal(0)
    widths.append(last)
    return widths


def format_width(width: Decimal) -> str:
    text = format(width, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def group_list_items(blocks: Sequence[Block]) -> list[Block | ListGroup]:
    """Collapse runs of consecutive same-kind list items into groups."""
    result: list[Block | ListGroup] = []
    current: ListGroup | None = None

    for block in blocks:
        if isinstance(block, ListItemBlock):
            if current is not None and current.ordered == block.ordered:
                current.items.append(block)
                continue
            current = ListGroup(ordered=block.ordered, items=[block])
            result.append(current)
        else:
            current = None
            result.append(block)

    return result


class _RenderState:
    """Per-call bookkeeping: options, heading slugs and counters."""

    def __init__(self, options: RenderOptions):
        self.options = options
        self.max_depth = options.max_depth or get_config().max_depth
        self.counts: dict[str, int] = {}
        self.skipped = 0
        self.slugs: dict[str, int] = {}
        self.sections: list[NavEntry] = []

    def count(self, block: Block) -> None:
        key = block.type.value
        self.counts[key] = self.counts.get(key, 0) + 1

    def unique_slug(self, text: str) -> str:
        base = slugify(text) or "section"
        seen = self.slugs.get(base, 0) + 1
        self.slugs[base] = seen
        return base if seen == 1 else f"{base}-{seen}"


def _text(runs: list[RichTextRun]) -> str:
    return render_rich_text_html(runs)


def _render_heading(block: HeadingBlock, state: _RenderState, depth: int) -> str:
    tag = f"h{block.level}"
    id_attr = ""
    if state.options.heading_ids:
        slug = state.unique_slug(block.text)
        id_attr = f' id="{html.escape(slug)}"'
        if depth == 0:
            state.sections.append(NavEntry(id=slug, title=block.text, level=block.level))
    return f"<{tag}{id_attr}>{_text(block.rich_text)}</{tag}>"


def _render_list_group(group: ListGroup, state: _RenderState, depth: int) -> str:
    items: list[str] = []
    for item in group.items:
        nested = _render_sequence(item.children, state, depth + 1)
        items.append(f"<li>{_text(item.rich_text)}{nested}</li>")
        state.count(item)
    return f"<{group.tag}>\n" + "\n".join(items) + f"\n</{group.tag}>"


def _render_code(block: CodeBlock) -> str:
    code = html.escape(extract_plain_text(block.rich_text))
    class_attr = f' class="language-{html.escape(block.language)}"' if block.language else ""
    return f"<pre><code{class_attr}>{code}</code></pre>"


def _render_callout(block: CalloutBlock, state: _RenderState, depth: int, in_callout: bool) -> str:
    text = _text(block.rich_text)
    content = f"{html.escape(block.icon)} {text}" if block.icon else text
    flatten = state.options.flatten_callouts
    content += _render_sequence(block.children, state, depth + 1, in_callout=flatten)

    if in_callout:
        return content

    classes = "callout"
    if block.color.value != "default":
        classes += f" callout-{block.color.value}"
    return f'<div class="{classes}">{content}</div>'


def _render_media(block: MediaBlock) -> str:
    caption = _text(block.caption)
    if block.source:
        src = html.escape(block.source)
        if block.type == BlockType.VIDEO:
            media = f'<video controls src="{src}"></video>'
        else:
            alt = html.escape(extract_plain_text(block.caption))
            media = f'<img src="{src}" alt="{alt}">'
        figcaption = f"<figcaption>{caption}</figcaption>" if caption else ""
        return f"<figure>{media}{figcaption}</figure>"

    if block.placeholder:
        return f'<p class="media-placeholder">{html.escape(block.placeholder)}</p>'

    return ""


def _render_table(block: TableBlock) -> str:
    if not block.rows:
        return ""

    width = max(block.column_count, max(len(row) for row in block.rows))
    rows: list[str] = []
    for index, row in enumerate(block.rows):
        # Pad short rows so every row has the same number of cells
        cells = list(row) + [[] for _ in range(width - len(row))]
        rendered: list[str] = []
        for position, cell in enumerate(cells):
            header = (index == 0 and block.has_header_row) or (position == 0 and block.has_row_header)
            tag = "th" if header else "td"
            rendered.append(f"<{tag}>{_text(cell)}</{tag}>")
        rows.append("<tr>" + "".join(rendered) + "</tr>")

    return "<table>\n" + "\n".join(rows) + "\n</table>"


def _render_column_list(block: ColumnListBlock, state: _RenderState, depth: int) -> str:
    columns: list[ColumnBlock] = block.columns
    if not columns:
        return ""

    widths = compute_column_widths([column.width_ratio for column in columns])
    colgroup = "".join(f'<col style="width: {format_width(width)}%;">' for width in widths)

    cells: list[str] = []
    for column in columns:
        content = _render_sequence(column.children, state, depth + 1)
        cells.append(f"<td>{content if content.strip() else '&nbsp;'}</td>")
        state.count(column)

    return f'<table class="column-list"><colgroup>{colgroup}</colgroup><tr>{"".join(cells)}</tr></table>'


def _render_block(block: Block, state: _RenderState, depth: int, in_callout: bool = False) -> str:
    """Render one block. Unsupported types render as an empty string."""
    children = ""

    match block:
        case HeadingBlock():
            body = _render_heading(block, state, depth)
            children = _render_sequence(block.children, state, depth + 1)
        case ParagraphBlock():
            has_text = bool(extract_plain_text(block.rich_text).strip())
            body = f"<p>{_text(block.rich_text)}</p>" if has_text else ""
            children = _render_sequence(block.children, state, depth + 1)
        case QuoteBlock():
            nested = _render_sequence(block.children, state, depth + 1)
            body = f"<blockquote>{_text(block.rich_text)}{nested}</blockquote>"
        case CodeBlock():
            body = _render_code(block)
        case CalloutBlock():
            body = _render_callout(block, state, depth, in_callout)
        case ToggleBlock():
            nested = _render_sequence(block.children, state, depth + 1)
            body = f"<details><summary>{_text(block.rich_text)}</summary>{nested}</details>"
        case ToDoBlock():
            checked = " checked" if block.checked else ""
            body = f'<div class="to-do"><input type="checkbox" disabled{checked}> {_text(block.rich_text)}</div>'
            children = _render_sequence(block.children, state, depth + 1)
        case MediaBlock():
            body = _render_media(block)
        case DividerBlock():
            body = "<hr>"
        case TableBlock():
            body = _render_table(block)
        case ColumnListBlock():
            body = _render_column_list(block, state, depth)
        case _:
            logger.debug("Skipping unsupported block type: %s", block.type.value)
            state.skipped += 1
            return ""

    if body:
        state.count(block)
    return body + children


def _render_sequence(blocks: Sequence[Block], state: _RenderState, depth: int, in_callout: bool = False) -> str:
    if not blocks:
        return ""
    if depth > state.max_depth:
        logger.warning("Render depth exceeds %d; dropping nested content", state.max_depth)
        return ""

    parts: list[str] = []
    for item in group_list_items(blocks):
        if isinstance(item, ListGroup):
            rendered = _render_list_group(item, state, depth)
        else:
            rendered = _render_block(item, state, depth, in_callout)
        if rendered:
            parts.append(rendered)
    return "\n".join(parts)


def render_tree(blocks: Sequence[Block], options: RenderOptions | None = None) -> RenderResult:
    """Render block models to an HTML fragment with bookkeeping."""
    state = _RenderState(options or RenderOptions())

    tree = [block.model_copy(deep=True) for block in blocks]
    filter_blocks(tree)

    fragment = _render_sequence(tree, state, 0)
    return RenderResult(
        html=fragment,
        block_count=len(blocks),
        counts=state.counts,
        skipped=state.skipped,
        sections=state.sections,
    )


def render_blocks(blocks: Sequence[Block], options: RenderOptions | None = None) -> str:
    """Render block models to an HTML fragment."""
    return render_tree(blocks, options).html
