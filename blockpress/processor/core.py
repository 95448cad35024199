"""Core."""

from typing import Any, Sequence, overload

from blockpress.blocks.core import build_tree, dump_blocks, is_flat, load_blocks, resolve_block_list
from blockpress.blocks.models import Document, DocumentMetadata
from blockpress.common.utils.logger import logger
from blockpress.parser import parse_document
from blockpress.processor.models import LAYOUTS, ConversionResult
from blockpress.renderer import (
    CollectionEntry,
    render_blog_post,
    render_collection,
    render_document,
    render_fragment,
)
from blockpress.renderer.models import RenderResult
from blockpress.validator import validate_and_fix_json

MetadataInput = DocumentMetadata | dict[str, Any] | None


def _to_metadata(metadata: MetadataInput) -> DocumentMetadata | None:
    if isinstance(metadata, dict):
        return DocumentMetadata(**metadata)
    return metadata


def _prepare(data: Any) -> Any:
    """Unwrap the accepted input shapes and nest flat parent-pointer lists.

    Items that resolve to no block are passed through so the validator reports them.
    """
    if isinstance(data, list):
        raw_blocks = []
        for item in data:
            raw_blocks.extend(resolve_block_list([item]) or [item])
    else:
        raw_blocks = resolve_block_list(data)
        if not raw_blocks:
            return data

    blocks = [raw for raw in raw_blocks if isinstance(raw, dict)]
    if is_flat(blocks):
        rejected = [raw for raw in raw_blocks if not isinstance(raw, dict)]
        return build_tree(blocks) + rejected
    return raw_blocks


def _render(
    blocks: list[Any],
    layout: str,
    metadata: DocumentMetadata | None,
    entries: Sequence[CollectionEntry | dict[str, Any]] | None,
) -> RenderResult:
    match layout:
        case "fragment":
            return render_fragment(blocks)
        case "document":
            return render_document(blocks, title=metadata.title if metadata else None)
        case "blog":
            return render_blog_post(blocks, metadata)
        case "collection":
            result = render_fragment(blocks)
            listing = render_collection(entries or [])
            page = f"{result.html}\n{listing}" if result.html else listing
            return result.model_copy(update={"html": page})
        case _:
            raise ValueError(f"Unknown layout: {layout!r}. Expected one of {', '.join(LAYOUTS)}.")


@overload
def convert(source: str, /, **kwargs: Any) -> ConversionResult: ...


@overload
def convert(*, text: str, **kwargs: Any) -> ConversionResult: ...


@overload
def convert(*, data: Any, **kwargs: Any) -> ConversionResult: ...


def convert(
    source: Any = None,
    *,
    text: str | None = None,
    data: Any = None,
    layout: str = "fragment",
    metadata: MetadataInput = None,
    entries: Sequence[CollectionEntry | dict[str, Any]] | None = None,
) -> ConversionResult:
    """Run text or block JSON through parse, validate and render.

    Can be called as:
    - convert('# Title')
    - convert([{"type": "paragraph", ...}])
    - convert(text='# Title')
    - convert(data={"children": [...]})
    - convert(document)
    """
    if layout not in LAYOUTS:
        raise ValueError(f"Unknown layout: {layout!r}. Expected one of {', '.join(LAYOUTS)}.")

    # Resolve input arguments
    if source is not None:
        if text is not None or data is not None:
            raise TypeError("Cannot provide both a positional source and keyword text/data")
        if isinstance(source, str):
            text = source
        else:
            data = source
    elif text is not None and data is not None:
        raise TypeError("Cannot provide both text and data")

    meta = _to_metadata(metadata)

    if isinstance(data, Document):
        meta = meta or data.metadata
        data = dump_blocks(data.blocks)

    if text is not None:
        logger.debug("Parsing %d characters of text", len(text))
        document = parse_document(text, meta)
        data = dump_blocks(document.blocks)

    validation = validate_and_fix_json(_prepare(data))
    if not validation.is_valid:
        logger.debug("Validation dropped %d blocks", len(validation.errors))

    blocks = load_blocks(validation.fixed_data)
    render = _render(blocks, layout, meta, entries)

    return ConversionResult(html=render.html, layout=layout, blocks=blocks, validation=validation, render=render)
