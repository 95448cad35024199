"""Output-shape variants wrapping the fragment renderer."""

import html
from datetime import date, datetime
from typing import Any, Sequence

from blockpress.blocks.core import load_blocks
from blockpress.blocks.models import Block, Document, DocumentMetadata
from blockpress.common.models import RenderOptions
from blockpress.common.utils.config import get_config
from blockpress.renderer.core import render_tree
from blockpress.renderer.models import CollectionEntry, NavEntry, RenderResult

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def _coerce(source: Any) -> tuple[list[Block], DocumentMetadata | None]:
    """Accept a Document, a list of Block models, or raw block JSON."""
    if isinstance(source, Document):
        return list(source.blocks), source.metadata
    if isinstance(source, list) and source and all(isinstance(item, Block) for item in source):
        return list(source), None
    if isinstance(source, Block):
        return [source], None
    return load_blocks(source), None


def _metadata(value: DocumentMetadata | dict[str, Any] | None) -> DocumentMetadata | None:
    if isinstance(value, dict):
        return DocumentMetadata(**value)
    return value


def _parse_date(value: str) -> date | None:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def format_date(value: str | None) -> str:
    """Format an ISO-8601 date as `Month D, YYYY`; unparsable strings pass through."""
    if not value:
        return ""
    parsed = _parse_date(value)
    if parsed is None:
        return value
    return f"{MONTHS[parsed.month - 1]} {parsed.day}, {parsed.year}"


def render_fragment(source: Any, options: RenderOptions | None = None) -> RenderResult:
    blocks, _ = _coerce(source)
    return render_tree(blocks, options)


def _render_nav(sections: list[NavEntry]) -> str:
    links = "\n".join(
        f'<li class="nav-h{entry.level}"><a href="#{html.escape(entry.id)}">{html.escape(entry.title)}</a></li>'
        for entry in sections
    )
    return f'<nav class="sidebar">\n<ul>\n{links}\n</ul>\n</nav>' if links else '<nav class="sidebar"></nav>'


def render_document(source: Any, title: str | None = None) -> RenderResult:
    """Wrap the fragment in a full HTML page with a sidebar of top-level headings."""
    blocks, metadata = _coerce(source)
    result = render_tree(blocks, RenderOptions(heading_ids=True))

    page_title = title or (metadata.title if metadata else None) or get_config().document_title
    page = (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{html.escape(page_title)}</title>\n"
        "</head>\n"
        "<body>\n"
        f"{_render_nav(result.sections)}\n"
        f"<main>\n{result.html}\n</main>\n"
        "</body>\n"
        "</html>\n"
    )
    return result.model_copy(update={"html": page})


def _render_post_header(metadata: DocumentMetadata) -> str:
    parts: list[str] = []
    if metadata.title:
        parts.append(f"<h1>{html.escape(metadata.title)}</h1>")

    meta: list[str] = []
    if metadata.date:
        meta.append(f'<time datetime="{html.escape(metadata.date)}">{html.escape(format_date(metadata.date))}</time>')
    if metadata.authors:
        meta.append(f"By {html.escape(', '.join(metadata.authors))}")
    if meta:
        parts.append(f'<p class="post-meta">{" • ".join(meta)}</p>')

    return "<header>\n" + "\n".join(parts) + "\n</header>" if parts else ""


def render_blog_post(source: Any, metadata: DocumentMetadata | dict[str, Any] | None = None) -> RenderResult:
    """Wrap the fragment in an <article> headed by title, date and authors."""
    blocks, own_metadata = _coerce(source)
    result = render_tree(blocks)
    metadata = _metadata(metadata) or own_metadata or DocumentMetadata()

    parts: list[str] = []
    index_url = get_config().blog_index_url
    if index_url:
        parts.append(f'<a class="back-link" href="{html.escape(index_url)}">&larr; Back</a>')
    header = _render_post_header(metadata)
    if header:
        parts.append(header)
    parts.append(f"<main>\n{result.html}\n</main>")

    article = "<article>\n" + "\n".join(parts) + "\n</article>"
    return result.model_copy(update={"html": article})


def _sort_key(entry: CollectionEntry) -> tuple[int, int, str]:
    parsed = _parse_date(entry.date) if entry.date else None
    # Dated entries first, newest first; ties broken by title.
    ordinal = -parsed.toordinal() if parsed else 0
    return (0 if parsed else 1, ordinal, (entry.title or "").lower())


def render_collection(entries: Sequence[CollectionEntry | dict[str, Any]]) -> str:
    """Render a list of post summaries, newest first."""
    items: list[CollectionEntry] = []
    for entry in entries:
        if isinstance(entry, dict):
            entry = CollectionEntry(**entry)
        if entry.title and entry.slug:
            items.append(entry)

    url_template = get_config().collection_post_url
    articles: list[str] = []
    for entry in sorted(items, key=_sort_key):
        url = html.escape(url_template.replace("{slug}", entry.slug or ""))
        lines = [f'<h2><a href="{url}">{html.escape(entry.title or "")}</a></h2>']
        if entry.date:
            lines.append(f'<time datetime="{html.escape(entry.date)}">{html.escape(format_date(entry.date))}</time>')
        if entry.authors:
            lines.append(f'<p class="authors">By {html.escape(", ".join(entry.authors))}</p>')
        if entry.summary:
            lines.append(f"<p>{html.escape(entry.summary)}</p>")
        if entry.tags:
            tags = "".join(f"<li>{html.escape(tag)}</li>" for tag in entry.tags)
            lines.append(f'<ul class="tags">{tags}</ul>')
        articles.append("<article>\n" + "\n".join(lines) + "\n</article>")

    return '<section class="collection-section">\n' + "\n".join(articles) + "\n</section>"
