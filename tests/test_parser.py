"""Unit tests for the markdown-ish parser: line classification, inline runs, state threading."""

from blockpress.blocks import (
    BlockType,
    CalloutBlock,
    CodeBlock,
    DividerBlock,
    HeadingBlock,
    ListItemBlock,
    ParagraphBlock,
    QuoteBlock,
)
from blockpress.parser import ParserState, feed_line, finish, parse_document, parse_inline, parse_markdown


def _runs(runs):
    """Summarize runs as (content, active annotation flags) pairs."""
    summary = []
    for run in runs:
        flags = tuple(
            flag
            for flag in ("bold", "italic", "code", "underline", "strikethrough")
            if getattr(run.annotations, flag)
        )
        summary.append((run.content, flags))
    return summary


# ─── Whole Documents ─────────────────────────────────────────────────────────


def test_parse_sample_document(sample_markdown):
    blocks = parse_markdown(sample_markdown)

    assert [block.type for block in blocks] == [
        BlockType.HEADING_1,
        BlockType.PARAGRAPH,
        BlockType.BULLETED_LIST_ITEM,
        BlockType.BULLETED_LIST_ITEM,
    ]
    assert blocks[0].text == "Title"
    assert _runs(blocks[1].rich_text) == [
        ("Some ", ()),
        ("italic", ("italic",)),
        (" and ", ()),
        ("bold", ("bold",)),
        (" text.", ()),
    ]
    assert [blocks[2].text, blocks[3].text] == ["item one", "item two"]


def test_fenced_code_keeps_trailing_newline():
    blocks = parse_markdown("```python\nprint(1)\n```")
    assert len(blocks) == 1
    assert isinstance(blocks[0], CodeBlock)
    assert blocks[0].language == "python"
    assert blocks[0].text == "print(1)\n"


def test_fence_body_is_not_classified():
    blocks = parse_markdown("```\n# not a heading\n- not a list\n\n```")
    assert len(blocks) == 1
    assert blocks[0].text == "# not a heading\n- not a list\n\n"
    assert blocks[0].language == "plain_text"


def test_unterminated_fence_flushes_at_end():
    blocks = parse_markdown("intro\n```js\nlet x = 1;")
    assert isinstance(blocks[-1], CodeBlock)
    assert blocks[-1].language == "js"
    assert blocks[-1].text == "let x = 1;\n"


def test_non_string_input():
    assert parse_markdown(None) == []
    assert parse_markdown(42) == []
    assert parse_markdown("") == []


# ─── Line Classification ─────────────────────────────────────────────────────


def test_heading_levels():
    blocks = parse_markdown("# one\n## two\n### three\n#### four\n###### six")
    assert [block.type for block in blocks] == [
        BlockType.HEADING_1,
        BlockType.HEADING_2,
        BlockType.HEADING_3,
        BlockType.HEADING_3,
        BlockType.HEADING_3,
    ]
    assert all(isinstance(block, HeadingBlock) for block in blocks)


def test_bullets_and_numbers():
    blocks = parse_markdown("* star\n- dash\n7. seventh\n12. twelfth")
    assert [block.type for block in blocks] == [
        BlockType.BULLETED_LIST_ITEM,
        BlockType.BULLETED_LIST_ITEM,
        BlockType.NUMBERED_LIST_ITEM,
        BlockType.NUMBERED_LIST_ITEM,
    ]
    assert [block.text for block in blocks] == ["star", "dash", "seventh", "twelfth"]


def test_quote_and_dividers():
    blocks = parse_markdown("> wise words\n---\n***")
    assert isinstance(blocks[0], QuoteBlock)
    assert blocks[0].text == "wise words"
    assert isinstance(blocks[1], DividerBlock)
    assert isinstance(blocks[2], DividerBlock)


def test_table_line_degrades_to_paragraph():
    blocks = parse_markdown("| a | b |")
    assert isinstance(blocks[0], ParagraphBlock)
    assert blocks[0].text == "a | b"


def test_everything_else_is_paragraph():
    blocks = parse_markdown("just text\n#nospace\n>nospace")
    assert all(isinstance(block, ParagraphBlock) for block in blocks)
    assert [block.text for block in blocks] == ["just text", "#nospace", ">nospace"]


# ─── List Lines ──────────────────────────────────────────────────────────────


def test_indented_items_stay_top_level():
    blocks = parse_markdown("- parent\n  - child\n    - grandchild\n- sibling")
    assert [block.text for block in blocks] == ["parent", "child", "grandchild", "sibling"]
    assert all(isinstance(block, ListItemBlock) and block.children == [] for block in blocks)


def test_blank_line_closes_list():
    state, _ = feed_line(ParserState(), "- one")
    assert state.open_list == BlockType.BULLETED_LIST_ITEM
    state, emitted = feed_line(state, "")
    assert emitted == []
    assert state.open_list is None


def test_mixed_list_kinds_emit_one_block_per_line():
    blocks = parse_markdown("1. step\n   - detail")
    assert [block.type for block in blocks] == [BlockType.NUMBERED_LIST_ITEM, BlockType.BULLETED_LIST_ITEM]
    assert blocks[0].children == []


# ─── Inline Formatting ───────────────────────────────────────────────────────


def test_inline_code_and_link():
    runs = parse_inline("run `make` or see [docs](https://docs.test)")
    assert _runs(runs) == [("run ", ()), ("make", ("code",)), (" or see ", ()), ("docs", ())]
    assert runs[3].link == "https://docs.test"


def test_inline_underline_needs_word_boundaries():
    assert _runs(parse_inline("an _under_ word")) == [("an ", ()), ("under", ("underline",)), (" word", ())]
    assert _runs(parse_inline("call snake_case_name here")) == [("call snake_case_name here", ())]


def test_inline_spans_do_not_nest():
    assert _runs(parse_inline("**bold *not italic***")) == [("bold *not italic", ("bold",)), ("*", ())]


def test_inline_plain_text():
    assert _runs(parse_inline("nothing special")) == [("nothing special", ())]


# ─── Callout Heuristic ───────────────────────────────────────────────────────


def test_callout_detection_off_by_default():
    blocks = parse_markdown("**Note:** remember this")
    assert isinstance(blocks[0], ParagraphBlock)


def test_callout_detection_when_enabled(override_config):
    override_config(detect_callouts=True)
    blocks = parse_markdown("**Note:** remember this\n**Bold** statement")
    assert isinstance(blocks[0], CalloutBlock)
    assert blocks[0].icon == "💡"
    assert blocks[0].text == "Note: remember this"
    assert isinstance(blocks[1], ParagraphBlock)


# ─── State Threading ─────────────────────────────────────────────────────────


def test_feed_line_threads_state():
    state = ParserState()

    state, emitted = feed_line(state, "```sql")
    assert emitted == []
    assert state.in_code_block is True
    assert state.code_language == "sql"

    state, emitted = feed_line(state, "SELECT 1;")
    assert emitted == []
    assert state.code_lines == ["SELECT 1;"]

    state, emitted = feed_line(state, "```")
    assert state.in_code_block is False
    assert emitted[0].text == "SELECT 1;\n"


def test_finish_without_open_fence():
    assert finish(ParserState()) == []


def test_parse_document_metadata():
    document = parse_document("# Hi", {"title": "Greeting", "author": "Ann"})
    assert document.metadata.title == "Greeting"
    assert document.metadata.authors == ["Ann"]
    assert len(document) == 1
