"""Unit tests for block JSON ingestion: input shapes, legacy aliases, flat lists."""

from blockpress.blocks import (
    BlockType,
    CodeBlock,
    ColumnListBlock,
    HeadingBlock,
    MediaBlock,
    ParagraphBlock,
    TableBlock,
    ToggleBlock,
    build_tree,
    dump_blocks,
    is_flat,
    load_blocks,
    load_rich_text,
    resolve_block_list,
)


def _para(text):
    return {"type": "paragraph", "paragraph": {"rich_text": [{"type": "text", "text": {"content": text}}]}}


# ─── Input Shapes ────────────────────────────────────────────────────────────


def test_resolve_bare_list():
    assert resolve_block_list([_para("a"), _para("b")]) == [_para("a"), _para("b")]


def test_resolve_single_block():
    assert resolve_block_list(_para("a")) == [_para("a")]


def test_resolve_children_wrapper():
    assert resolve_block_list({"children": [_para("a")]}) == [_para("a")]


def test_resolve_data_children_wrapper():
    assert resolve_block_list({"data": {"children": [_para("a")]}}) == [_para("a")]


def test_resolve_json_items():
    assert resolve_block_list([{"json": _para("a")}, {"json": _para("b")}]) == [_para("a"), _para("b")]


def test_resolve_first_list_property():
    assert resolve_block_list({"object": "list", "results": [_para("a")]}) == [_para("a")]


def test_resolve_unusable_input():
    assert resolve_block_list("text") == []
    assert resolve_block_list(42) == []
    assert resolve_block_list(None) == []
    assert resolve_block_list({"title": "no blocks"}) == []


# ─── Rich Text Aliases ───────────────────────────────────────────────────────


def test_load_rich_text_aliases():
    runs = load_rich_text(
        [
            {"plain_text": "a"},
            {"text": {"content": "b", "link": {"url": "https://b.test"}}},
            "c",
            {"content": "d", "href": "https://d.test"},
        ]
    )
    assert [run.content for run in runs] == ["a", "b", "c", "d"]
    assert [run.link for run in runs] == [None, "https://b.test", None, "https://d.test"]


def test_load_rich_text_annotations_and_invalid_color():
    runs = load_rich_text([{"plain_text": "x", "annotations": {"bold": True, "color": "neon"}}])
    assert runs[0].annotations.bold is True
    assert runs[0].annotations.color.value == "default"


def test_load_rich_text_non_list():
    assert load_rich_text(None) == []
    assert load_rich_text("text") == []


def test_legacy_text_field():
    blocks = load_blocks([{"type": "paragraph", "paragraph": {"text": [{"plain_text": "legacy"}]}}])
    assert isinstance(blocks[0], ParagraphBlock)
    assert blocks[0].text == "legacy"


# ─── Block Loading ───────────────────────────────────────────────────────────


def test_legacy_heading_becomes_heading_3():
    blocks = load_blocks([{"type": "heading_5", "heading_5": {"rich_text": [{"plain_text": "Deep"}]}}])
    assert isinstance(blocks[0], HeadingBlock)
    assert blocks[0].type == BlockType.HEADING_3
    assert blocks[0].level == 3
    assert blocks[0].text == "Deep"


def test_unknown_type_dropped():
    blocks = load_blocks([{"type": "hologram"}, _para("kept")])
    assert len(blocks) == 1
    assert blocks[0].text == "kept"


def test_archived_and_trashed_flags():
    blocks = load_blocks([{**_para("a"), "archived": True}, {**_para("b"), "in_trash": True}, _para("c")])
    assert [block.archived for block in blocks] == [True, True, False]


def test_children_from_payload():
    raw = {"type": "toggle", "toggle": {"rich_text": [{"plain_text": "More"}], "children": [_para("inside")]}}
    block = load_blocks([raw])[0]
    assert isinstance(block, ToggleBlock)
    assert [child.text for child in block.children] == ["inside"]


def test_code_language():
    raw = {"type": "code", "code": {"rich_text": [{"plain_text": "x = 1"}], "language": "python"}}
    block = load_blocks([raw])[0]
    assert isinstance(block, CodeBlock)
    assert block.language == "python"


def test_column_list_columns_and_ratios():
    raw = {
        "type": "column_list",
        "column_list": {},
        "children": [
            {"type": "column", "column": {"width_ratio": 2}, "children": [_para("left")]},
            {"type": "column", "column": {}},
        ],
    }
    block = load_blocks([raw])[0]
    assert isinstance(block, ColumnListBlock)
    assert [column.width_ratio for column in block.columns] == [2.0, 1.0]
    assert block.columns[0].children[0].text == "left"


def test_media_prefers_external_source():
    raw = {
        "type": "image",
        "image": {"external": {"url": "https://cdn.test/a.png"}, "file": {"url": "https://files.test/a.png"}},
    }
    block = load_blocks([raw])[0]
    assert isinstance(block, MediaBlock)
    assert block.source == "https://cdn.test/a.png"
    assert block.source_kind == "external"


def test_media_file_source():
    block = load_blocks([{"type": "image", "image": {"file": {"url": "https://files.test/a.png"}}}])[0]
    assert block.source == "https://files.test/a.png"
    assert block.source_kind == "file"


def test_table_rows_from_table_row_children():
    raw = {
        "type": "table",
        "table": {"table_width": 2, "has_column_header": True},
        "children": [
            {"type": "table_row", "table_row": {"cells": [[{"plain_text": "h1"}], [{"plain_text": "h2"}]]}},
            {"type": "table_row", "table_row": {"cells": [[{"plain_text": "v1"}], [{"plain_text": "v2"}]]}},
        ],
    }
    block = load_blocks([raw])[0]
    assert isinstance(block, TableBlock)
    assert block.column_count == 2
    assert block.has_header_row is True
    assert [[cell[0].content for cell in row] for row in block.rows] == [["h1", "h2"], ["v1", "v2"]]
    assert block.children == []


def test_depth_cap_truncates(override_config):
    override_config(max_depth=2)

    raw = _para("level 4")
    for level in range(3, -1, -1):
        raw = {"type": "toggle", "toggle": {"rich_text": [{"plain_text": f"level {level}"}]}, "children": [raw]}

    block = load_blocks([raw])[0]
    depth = 0
    while block.children:
        block = block.children[0]
        depth += 1
    assert depth == 2


# ─── Flat Lists ──────────────────────────────────────────────────────────────


def test_is_flat(flat_blocks):
    assert is_flat(flat_blocks) is True
    assert is_flat([_para("a"), _para("b")]) is False


def test_build_tree_nests_children(flat_blocks):
    tree = build_tree(flat_blocks)
    assert [node["id"] for node in tree] == ["a", "c"]
    assert [child["id"] for child in tree[0]["children"]] == ["b"]


def test_load_blocks_rebuilds_flat_list(flat_blocks):
    blocks = load_blocks(flat_blocks)
    assert [block.text for block in blocks] == ["Parent", "Sibling"]
    assert blocks[0].children[0].text == "Child"


def test_parent_pointer_aliases():
    flat = [
        {"id": "root", "type": "toggle", "toggle": {"rich_text": [{"plain_text": "R"}]}},
        {**_para("one"), "id": "1", "parent_id": "root"},
        {**_para("two"), "id": "2", "parent": {"type": "block_id", "block_id": "root"}},
    ]
    blocks = load_blocks(flat)
    assert len(blocks) == 1
    assert [child.text for child in blocks[0].children] == ["one", "two"]


def test_build_tree_survives_cycles():
    flat = [
        {**_para("a"), "id": "a", "parentId": "b"},
        {**_para("b"), "id": "b", "parentId": "a"},
        {**_para("c"), "id": "c"},
    ]
    tree = build_tree(flat)
    assert [node["id"] for node in tree] == ["c"]


# ─── Serialization ───────────────────────────────────────────────────────────


def test_dump_blocks_wire_format():
    dumped = dump_blocks(load_blocks([_para("hello")]))
    assert dumped[0]["type"] == "paragraph"
    assert dumped[0]["paragraph"]["rich_text"][0]["text"]["content"] == "hello"
    assert load_blocks(dumped)[0].text == "hello"
