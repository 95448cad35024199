"""Line-oriented markdown-ish parser producing a flat list of blocks."""

import re
from typing import Any

from blockpress.blocks.models import (
    HEADING_TYPES,
    Block,
    BlockType,
    CalloutBlock,
    CodeBlock,
    DividerBlock,
    Document,
    DocumentMetadata,
    HeadingBlock,
    ListItemBlock,
    ParagraphBlock,
    QuoteBlock,
)
from blockpress.common.models import Annotations, RichTextRun
from blockpress.common.utils.config import get_config
from blockpress.common.utils.logger import logger
from blockpress.parser.models import ParserState

FENCE = "```"

HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")
BULLET_RE = re.compile(r"^[-*]\s+(.*)$")
NUMBERED_RE = re.compile(r"^\d+\.\s+(.*)$")
QUOTE_RE = re.compile(r"^>\s+(.*)$")
DIVIDERS = ("---", "***")

# Alternation order breaks ties at the same position: ** before *.
INLINE_RE = re.compile(
    r"\*\*(?P<bold>.+?)\*\*"
    r"|\*(?P<italic>.+?)\*"
    r"|`(?P<code>.+?)`"
    r"|(?<!\w)_(?P<underline>.+?)_(?!\w)"
    r"|\[(?P<link_text>[^\]]+)\]\((?P<link_url>[^)\s]+)\)"
)


def parse_inline(text: str) -> list[RichTextRun]:
    """Split a line into runs for **bold**, *italic*, `code`, _underline_ and [links](url).

    Spans do not nest; the earliest match in the line wins.
    """
    runs: list[RichTextRun] = []
    position = 0

    for match in INLINE_RE.finditer(text):
        if match.start() > position:
            runs.append(RichTextRun(content=text[position : match.start()]))

        groups = match.groupdict()
        if groups["link_text"] is not None:
            runs.append(RichTextRun(content=groups["link_text"], link=groups["link_url"]))
        else:
            for flag in ("bold", "italic", "code", "underline"):
                if groups[flag] is not None:
                    runs.append(RichTextRun(content=groups[flag], annotations=Annotations(**{flag: True})))
                    break

        position = match.end()

    if position < len(text):
        runs.append(RichTextRun(content=text[position:]))

    return runs


def _is_callout(stripped: str) -> bool:
    cfg = get_config()
    if not cfg.detect_callouts or not stripped.startswith("**"):
        return False
    lowered = stripped.lower()
    return any(keyword in lowered for keyword in cfg.callout_keywords)


def _flush_code(state: ParserState) -> CodeBlock:
    body = "".join(f"{line}\n" for line in state.code_lines)
    return CodeBlock(
        rich_text=[RichTextRun(content=body)],
        language=state.code_language or "plain_text",
    )


def _list_item(state: ParserState, block_type: BlockType, text: str) -> tuple[ParserState, list[Block]]:
    if state.open_list not in (None, block_type):
        logger.debug("List kind switched from %s to %s", state.open_list.value, block_type.value)
    item = ListItemBlock(type=block_type, rich_text=parse_inline(text))
    return state.model_copy(update={"open_list": block_type}), [item]


def feed_line(state: ParserState, line: str) -> tuple[ParserState, list[Block]]:
    """Consume one line and return the next state plus any blocks it completes."""
    stripped = line.strip()

    if stripped.startswith(FENCE):
        if state.in_code_block:
            return ParserState(), [_flush_code(state)]
        return ParserState(in_code_block=True, code_language=stripped[len(FENCE) :].strip()), []

    if state.in_code_block:
        return state.model_copy(update={"code_lines": [*state.code_lines, line]}), []

    if not stripped:
        return state.close_list(), []

    if match := HEADING_RE.match(stripped):
        level = min(len(match.group(1)), 3)
        block: Block = HeadingBlock(type=HEADING_TYPES[level - 1], rich_text=parse_inline(match.group(2).strip()))
        return state.close_list(), [block]

    if match := BULLET_RE.match(stripped):
        return _list_item(state, BlockType.BULLETED_LIST_ITEM, match.group(1))

    if match := NUMBERED_RE.match(stripped):
        return _list_item(state, BlockType.NUMBERED_LIST_ITEM, match.group(1))

    if match := QUOTE_RE.match(stripped):
        return state.close_list(), [QuoteBlock(rich_text=parse_inline(match.group(1)))]

    if stripped in DIVIDERS:
        return state.close_list(), [DividerBlock()]

    if stripped.startswith("|"):
        cells = [cell.strip() for cell in stripped.split("|") if cell.strip()]
        text = " | ".join(cells) or stripped
        return state.close_list(), [ParagraphBlock(rich_text=parse_inline(text))]

    if _is_callout(stripped):
        callout = CalloutBlock(rich_text=parse_inline(stripped), icon=get_config().default_callout_icon)
        return state.close_list(), [callout]

    return state.close_list(), [ParagraphBlock(rich_text=parse_inline(stripped))]


def finish(state: ParserState) -> list[Block]:
    """Flush whatever is pending at end of input (an unterminated fence)."""
    if state.in_code_block:
        logger.debug("Unterminated code fence at end of input; flushing %d lines", len(state.code_lines))
        return [_flush_code(state)]
    return []


def parse_markdown(text: Any) -> list[Block]:
    """Parse markdown-ish text into top-level blocks. Never raises."""
    if not isinstance(text, str):
        return []

    state = ParserState()
    blocks: list[Block] = []
    for line in text.splitlines():
        state, emitted = feed_line(state, line)
        blocks.extend(emitted)
    blocks.extend(finish(state))

    logger.debug("Parsed %d top-level blocks", len(blocks))
    return blocks


def parse_document(text: Any, metadata: DocumentMetadata | dict[str, Any] | None = None) -> Document:
    if isinstance(metadata, dict):
        metadata = DocumentMetadata(**metadata)
    return Document(metadata=metadata, blocks=parse_markdown(text))
