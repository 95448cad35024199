"""Unit tests for the end-to-end pipeline: text or block JSON in, HTML out."""

import json

import pytest

from blockpress.parser import parse_document
from blockpress.processor import ConversionResult, convert


def _para(text):
    return {"type": "paragraph", "paragraph": {"rich_text": [{"type": "text", "text": {"content": text}}]}}


# ─── Text Input ──────────────────────────────────────────────────────────────


def test_convert_markdown():
    result = convert("# Title\n\nHello **world**")
    assert isinstance(result, ConversionResult)
    assert result.html == "<h1>Title</h1>\n<p>Hello <strong>world</strong></p>"
    assert result.validation.is_valid is True
    assert result.validation.fixes == []
    assert len(result) == 2


def test_convert_markdown_lists(sample_markdown):
    html = convert(sample_markdown).html
    assert html.endswith("<ul>\n<li>item one</li>\n<li>item two</li>\n</ul>")


def test_convert_repairs_unknown_code_language():
    result = convert("```py\nx < 1\n```")
    assert result.html == '<pre><code class="language-plain_text">x &lt; 1\n</code></pre>'
    assert [issue.message for issue in result.validation.fixes] == ["Fixed invalid language in code block"]


def test_convert_text_keyword():
    assert convert(text="plain").html == "<p>plain</p>"


# ─── Block JSON Input ────────────────────────────────────────────────────────


def test_convert_block_json_drops_invalid():
    result = convert([_para("kept"), {"type": "hologram"}, {"no": "type"}])
    assert result.html == "<p>kept</p>"
    assert len(result.validation.errors) == 2
    assert result.validation.summary.is_fully_valid is False


def test_convert_data_keyword_wrapper():
    result = convert(data={"data": {"children": [_para("wrapped")]}})
    assert result.html == "<p>wrapped</p>"


def test_convert_flat_json(flat_blocks):
    result = convert(flat_blocks)
    assert result.html == "<details><summary>Parent</summary><p>Child</p></details>\n<p>Sibling</p>"


def test_result_json_is_fixed_data():
    result = convert([{"type": "divider", "divider": {"x": 1}}])
    assert json.loads(result.json) == [{"type": "divider", "divider": {}}]
    assert [block.type.value for block in result] == ["divider"]


def test_convert_nothing():
    result = convert(None)
    assert result.html == ""
    assert len(result) == 0


# ─── Layouts ─────────────────────────────────────────────────────────────────


def test_convert_document_layout():
    result = convert("# Intro\n\ntext", layout="document", metadata={"title": "Manual"})
    assert result.html.startswith("<!DOCTYPE html>")
    assert "<title>Manual</title>" in result.html
    assert '<a href="#intro">Intro</a>' in result.html


def test_convert_blog_layout():
    result = convert("Body", layout="blog", metadata={"title": "Post", "date": "2023-07-04", "authors": ["Ann"]})
    assert result.html.startswith("<article>")
    assert "<h1>Post</h1>" in result.html
    assert "July 4, 2023" in result.html


def test_convert_collection_layout():
    entries = [{"title": "First", "slug": "first", "date": "2024-01-01"}]
    result = convert("Intro text", layout="collection", entries=entries)
    assert result.html.startswith("<p>Intro text</p>\n")
    assert 'href="/blog-post/first"' in result.html


# ─── Argument Errors ─────────────────────────────────────────────────────────


def test_unknown_layout():
    with pytest.raises(ValueError):
        convert("x", layout="poster")


def test_conflicting_arguments():
    with pytest.raises(TypeError):
        convert("x", text="y")
    with pytest.raises(TypeError):
        convert(text="x", data=[])


def test_convert_document_model():
    document = parse_document("# Hello", {"title": "From Document"})
    result = convert(document, layout="document")
    assert "<title>From Document</title>" in result.html


# ─── Input Shapes ────────────────────────────────────────────────────────────


def test_convert_flat_column_list():
    blocks = [
        {"id": "L", "type": "column_list", "column_list": {}},
        {"id": "c1", "parentId": "L", "type": "column", "column": {}},
        {"id": "c2", "parentId": "L", "type": "column", "column": {}},
        {"id": "p1", "parentId": "c1", **_para("Left")},
        {"id": "p2", "parentId": "c2", **_para("Right")},
    ]
    result = convert(blocks)
    assert result.html == (
        '<table class="column-list"><colgroup>'
        '<col style="width: 50%;"><col style="width: 50%;">'
        "</colgroup><tr><td><p>Left</p></td><td><p>Right</p></td></tr></table>"
    )
    assert result.validation.fixes == []


def test_convert_workflow_json_items():
    result = convert([{"json": _para("hi")}, {"json": _para("there")}])
    assert result.html == "<p>hi</p>\n<p>there</p>"
    assert result.validation.errors == []


def test_convert_content_and_blocks_wrappers():
    assert convert({"content": [_para("hi")]}).html == "<p>hi</p>"
    assert convert(data={"blocks": [_para("hi")]}).html == "<p>hi</p>"
    assert convert({"object": "list", "results": [_para("hi")]}).html == "<p>hi</p>"


def test_convert_reports_items_without_blocks():
    result = convert([_para("kept"), "junk"])
    assert result.html == "<p>kept</p>"
    assert len(result.validation.errors) == 1
