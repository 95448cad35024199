from blockpress.renderer.core import (
    compute_column_widths,
    format_width,
    group_list_items,
    render_blocks,
    render_tree,
    slugify,
)
from blockpress.renderer.filters import filter_blocks
from blockpress.renderer.layouts import (
    format_date,
    render_blog_post,
    render_collection,
    render_document,
    render_fragment,
)
from blockpress.renderer.models import CollectionEntry, ListGroup, NavEntry, RenderResult

__all__ = [
    "compute_column_widths",
    "format_width",
    "group_list_items",
    "render_blocks",
    "render_tree",
    "slugify",
    "filter_blocks",
    "format_date",
    "render_blog_post",
    "render_collection",
    "render_document",
    "render_fragment",
    "CollectionEntry",
    "ListGroup",
    "NavEntry",
    "RenderResult",
]
