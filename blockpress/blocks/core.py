"""Block JSON ingestion: unwrap input shapes, normalize legacy field names, rebuild nesting."""

from typing import Any

from blockpress.blocks.models import (
    HEADING_TYPES,
    LEGACY_HEADING_TYPES,
    LIST_ITEM_TYPES,
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
from blockpress.common.models import Annotations, Color, RichTextRun
from blockpress.common.utils.config import get_config
from blockpress.common.utils.logger import logger

RawBlock = dict[str, Any]

ANNOTATION_FLAGS = ("bold", "italic", "underline", "strikethrough", "code")


def resolve_block_list(data: Any) -> list[RawBlock]:
    """Find the block array in any of the accepted input shapes.

    Accepts a bare list, a single block, `{children}`, `{data: {children}}`,
    `{content: [...]}`, items wrapped as `{json: ...}`, or an object whose first
    list-valued property holds the blocks. Anything else yields an empty list.
    """
    if isinstance(data, list):
        blocks: list[RawBlock] = []
        for item in data:
            if isinstance(item, dict) and "json" in item and "type" not in item:
                item = item["json"]
            if isinstance(item, dict) and "type" in item:
                blocks.append(item)
            elif isinstance(item, (dict, list)):
                blocks.extend(resolve_block_list(item))
        return blocks

    if not isinstance(data, dict):
        return []

    if "type" in data:
        return [data]

    if isinstance(data.get("json"), (dict, list)):
        return resolve_block_list(data["json"])

    nested = data.get("data")
    if isinstance(nested, dict) and isinstance(nested.get("children"), list):
        return resolve_block_list(nested["children"])

    for key in ("children", "content", "blocks"):
        if isinstance(data.get(key), list):
            return resolve_block_list(data[key])

    for value in data.values():
        if isinstance(value, list):
            return resolve_block_list(value)

    return []


def _parent_pointer(raw: RawBlock) -> str | None:
    parent = raw.get("parentId") or raw.get("parent_id")
    if parent is None and isinstance(raw.get("parent"), dict):
        parent = raw["parent"].get("block_id")
    return str(parent) if parent is not None else None


def is_flat(raw_blocks: list[RawBlock]) -> bool:
    """True when blocks reference each other by parent pointer rather than nesting."""
    ids = {str(b["id"]) for b in raw_blocks if b.get("id") is not None}
    return any(_parent_pointer(b) in ids for b in raw_blocks)


def build_tree(raw_blocks: list[RawBlock]) -> list[RawBlock]:
    """Nest a flat list of blocks under their parents, preserving input order.

    Roots are blocks whose parent pointer matches no block in the list.
    """
    ids = {str(b["id"]) for b in raw_blocks if b.get("id") is not None}
    by_parent: dict[str, list[RawBlock]] = {}
    roots: list[RawBlock] = []

    for raw in raw_blocks:
        parent = _parent_pointer(raw)
        if parent is not None and parent in ids and parent != str(raw.get("id")):
            by_parent.setdefault(parent, []).append(raw)
        else:
            roots.append(raw)

    max_depth = get_config().max_depth
    visited: set[str] = set()

    def attach(raw: RawBlock, depth: int) -> RawBlock:
        node = {k: v for k, v in raw.items() if k != "children"}
        block_id = raw.get("id")
        key = str(block_id) if block_id is not None else None
        if key is None or key in visited:
            node["children"] = list(raw.get("children") or [])
            return node
        visited.add(key)
        if depth >= max_depth:
            logger.warning("Flat block list exceeds max depth %d; truncating below %s", max_depth, key)
            node["children"] = []
            return node
        node["children"] = [attach(child, depth + 1) for child in by_parent.get(key, [])]
        return node

    return [attach(raw, 0) for raw in roots]


def _load_annotations(raw: Any) -> Annotations:
    if not isinstance(raw, dict):
        return Annotations()
    values: dict[str, Any] = {flag: bool(raw.get(flag, False)) for flag in ANNOTATION_FLAGS}
    color = Color.parse(raw.get("color", "default"))
    if color is not None:
        values["color"] = color
    return Annotations(**values)


def load_rich_text(items: Any) -> list[RichTextRun]:
    """Normalize a rich text array, tolerating every historical field layout."""
    if not isinstance(items, list):
        return []

    runs: list[RichTextRun] = []
    for item in items:
        if isinstance(item, str):
            runs.append(RichTextRun(content=item))
            continue
        if not isinstance(item, dict):
            continue

        text = item.get("text") if isinstance(item.get("text"), dict) else {}
        content = item.get("plain_text") or text.get("content") or item.get("content") or ""
        if not content and isinstance(item.get("text"), str):
            content = item["text"]

        link = item.get("href") or item.get("link") or text.get("link")
        if isinstance(link, dict):
            link = link.get("url")

        runs.append(
            RichTextRun(
                content=str(content),
                annotations=_load_annotations(item.get("annotations") or text.get("annotations")),
                link=str(link) if link and isinstance(link, str) else None,
            )
        )
    return runs


def _rich_text_of(raw: RawBlock, payload: dict[str, Any]) -> list[RichTextRun]:
    for source in (payload.get("rich_text"), payload.get("text"), raw.get("rich_text"), raw.get("text")):
        if isinstance(source, list):
            return load_rich_text(source)
    return []


def _color_of(payload: dict[str, Any]) -> Color:
    return Color.parse(payload.get("color", "default")) or Color.DEFAULT


def _raw_children(raw: RawBlock, payload: dict[str, Any]) -> list[Any]:
    children = raw.get("children")
    if not isinstance(children, list) or not children:
        children = payload.get("children")
    return children if isinstance(children, list) else []


def _icon_of(payload: dict[str, Any]) -> str | None:
    icon = payload.get("icon")
    if isinstance(icon, dict):
        return icon.get("emoji") or None
    if isinstance(icon, str):
        return icon or None
    return None


def _media_source(payload: dict[str, Any]) -> tuple[str | None, str]:
    # External takes precedence over hosted files.
    for kind in ("external", "file"):
        ref = payload.get(kind)
        if isinstance(ref, dict) and ref.get("url"):
            return str(ref["url"]), kind
        if isinstance(ref, str) and ref:
            return ref, kind
    if isinstance(payload.get("url"), str) and payload["url"]:
        return payload["url"], "external"
    return None, "external"


def _width_ratio(payload: dict[str, Any]) -> float:
    ratio = payload.get("width_ratio")
    if isinstance(ratio, (int, float)) and not isinstance(ratio, bool) and ratio > 0:
        return float(ratio)
    return 1.0


def _table_rows(raw: RawBlock, payload: dict[str, Any]) -> list[list[list[RichTextRun]]]:
    rows: list[list[list[RichTextRun]]] = []
    if isinstance(payload.get("rows"), list):
        for row in payload["rows"]:
            if isinstance(row, list):
                rows.append([load_rich_text(cell) for cell in row])
        return rows

    for child in _raw_children(raw, payload):
        if not isinstance(child, dict):
            continue
        row_payload = child.get("table_row")
        if isinstance(row_payload, dict) and isinstance(row_payload.get("cells"), list):
            rows.append([load_rich_text(cell) for cell in row_payload["cells"]])
    return rows


def load_block(raw: Any, depth: int = 0) -> Block | None:
    """Convert one block-JSON object (and its subtree) into a model.

    Returns None for anything that is not a recognizable block.
    """
    if not isinstance(raw, dict):
        return None

    raw_type = raw.get("type") or raw.get("object")
    payload_key = raw_type
    if raw_type in LEGACY_HEADING_TYPES:
        raw_type = BlockType.HEADING_3.value

    block_type = BlockType.parse(raw_type)
    if block_type is None:
        logger.debug("Skipping block with unknown type: %r", raw_type)
        return None

    payload = raw.get(payload_key)
    if not isinstance(payload, dict):
        payload = {}

    max_depth = get_config().max_depth
    children: list[Block] = []
    raw_children = _raw_children(raw, payload)
    if raw_children and block_type != BlockType.TABLE:
        if depth >= max_depth:
            logger.warning("Block nesting exceeds max depth %d; dropping children", max_depth)
        else:
            children = load_blocks(raw_children, depth + 1)

    common: dict[str, Any] = {
        "type": block_type,
        "id": str(raw["id"]) if raw.get("id") is not None else None,
        "parent_id": _parent_pointer(raw),
        "archived": bool(raw.get("archived") or raw.get("in_trash")),
    }

    if block_type in HEADING_TYPES:
        return HeadingBlock(
            **common, rich_text=_rich_text_of(raw, payload), color=_color_of(payload), children=children
        )

    if block_type in LIST_ITEM_TYPES:
        return ListItemBlock(
            **common, rich_text=_rich_text_of(raw, payload), color=_color_of(payload), children=children
        )

    match block_type:
        case BlockType.PARAGRAPH:
            return ParagraphBlock(
                **common, rich_text=_rich_text_of(raw, payload), color=_color_of(payload), children=children
            )
        case BlockType.QUOTE:
            return QuoteBlock(
                **common, rich_text=_rich_text_of(raw, payload), color=_color_of(payload), children=children
            )
        case BlockType.TOGGLE:
            return ToggleBlock(
                **common, rich_text=_rich_text_of(raw, payload), color=_color_of(payload), children=children
            )
        case BlockType.TO_DO:
            return ToDoBlock(
                **common,
                rich_text=_rich_text_of(raw, payload),
                color=_color_of(payload),
                checked=bool(payload.get("checked", False)),
                children=children,
            )
        case BlockType.CALLOUT:
            return CalloutBlock(
                **common,
                rich_text=_rich_text_of(raw, payload),
                color=_color_of(payload),
                icon=_icon_of(payload),
                children=children,
            )
        case BlockType.CODE:
            language = payload.get("language")
            return CodeBlock(
                **common,
                rich_text=_rich_text_of(raw, payload),
                language=str(language) if language else None,
            )
        case BlockType.IMAGE | BlockType.VIDEO:
            source, kind = _media_source(payload)
            placeholder = payload.get("placeholder")
            return MediaBlock(
                **common,
                source=source,
                source_kind=kind,
                caption=load_rich_text(payload.get("caption")),
                placeholder=str(placeholder) if placeholder else None,
            )
        case BlockType.DIVIDER:
            return DividerBlock(**common)
        case BlockType.TABLE:
            return TableBlock(
                **common,
                column_count=int(payload.get("table_width") or payload.get("column_count") or 0),
                has_header_row=bool(payload.get("has_column_header") or payload.get("has_header_row")),
                has_row_header=bool(payload.get("has_row_header")),
                rows=_table_rows(raw, payload),
            )
        case BlockType.COLUMN:
            return ColumnBlock(**common, width_ratio=_width_ratio(payload), children=children)
        case BlockType.COLUMN_LIST:
            columns = [child for child in children if isinstance(child, ColumnBlock)]
            return ColumnListBlock(**common, columns=columns)
        case _:
            # Schema-valid but without a dedicated model (embeds, bookmarks, ...).
            return Block(**common, children=children)


def load_blocks(data: Any, depth: int = 0) -> list[Block]:
    """Load blocks from any accepted input shape, nested or flat."""
    raw_blocks = resolve_block_list(data)
    if depth == 0 and is_flat(raw_blocks):
        raw_blocks = build_tree(raw_blocks)

    blocks: list[Block] = []
    for raw in raw_blocks:
        block = load_block(raw, depth)
        if block is not None:
            blocks.append(block)
    return blocks


def dump_blocks(blocks: list[Block]) -> list[RawBlock]:
    """Serialize models back to block JSON."""
    return [block.to_json() for block in blocks]
