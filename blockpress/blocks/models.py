"""Block tree models: one model per block variant, tagged by `type`."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from blockpress.common.models import Color, RichTextRun, extract_plain_text


class BlockType(Enum):
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    TOGGLE = "toggle"
    CODE = "code"
    QUOTE = "quote"
    CALLOUT = "callout"
    IMAGE = "image"
    VIDEO = "video"
    FILE = "file"
    BOOKMARK = "bookmark"
    EQUATION = "equation"
    DIVIDER = "divider"
    TABLE_OF_CONTENTS = "table_of_contents"
    BREADCRUMB = "breadcrumb"
    COLUMN_LIST = "column_list"
    COLUMN = "column"
    LINK_PREVIEW = "link_preview"
    SYNCED_BLOCK = "synced_block"
    TEMPLATE = "template"
    LINK_TO_PAGE = "link_to_page"
    TABLE = "table"
    TABLE_ROW = "table_row"
    EMBED = "embed"
    PDF = "pdf"
    AUDIO = "audio"

    @classmethod
    def parse(cls, value: Any) -> "BlockType | None":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


HEADING_TYPES = (BlockType.HEADING_1, BlockType.HEADING_2, BlockType.HEADING_3)
LIST_ITEM_TYPES = (BlockType.BULLETED_LIST_ITEM, BlockType.NUMBERED_LIST_ITEM)

# heading_4..6 are not part of the schema; they collapse to heading_3.
LEGACY_HEADING_TYPES = ("heading_4", "heading_5", "heading_6")


class Block(BaseModel):
    type: BlockType
    id: str | None = None
    parent_id: str | None = None  # only set on flat lists
    children: list["Block"] = Field(default_factory=list)
    archived: bool = False

    def payload(self) -> dict[str, Any]:
        """Type-specific fields in block-JSON form."""
        return {}

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value, self.type.value: self.payload()}
        if self.id:
            data["id"] = self.id
        if self.children:
            data["children"] = [child.to_json() for child in self.children]
        return data


class TextBlock(Block):
    rich_text: list[RichTextRun] = Field(default_factory=list)
    color: Color = Color.DEFAULT

    @property
    def text(self) -> str:
        """Get concatenated text from all runs."""
        return extract_plain_text(self.rich_text)

    def payload(self) -> dict[str, Any]:
        return {
            "rich_text": [run.to_json() for run in self.rich_text],
            "color": self.color.value,
        }


class ParagraphBlock(TextBlock):
    type: BlockType = BlockType.PARAGRAPH


class HeadingBlock(TextBlock):
    type: BlockType = BlockType.HEADING_1

    @property
    def level(self) -> int:
        return HEADING_TYPES.index(self.type) + 1


class ListItemBlock(TextBlock):
    type: BlockType = BlockType.BULLETED_LIST_ITEM

    @property
    def ordered(self) -> bool:
        return self.type == BlockType.NUMBERED_LIST_ITEM


class QuoteBlock(TextBlock):
    type: BlockType = BlockType.QUOTE


class ToggleBlock(TextBlock):
    type: BlockType = BlockType.TOGGLE


class ToDoBlock(TextBlock):
    type: BlockType = BlockType.TO_DO
    checked: bool = False

    def payload(self) -> dict[str, Any]:
        return {**super().payload(), "checked": self.checked}


class CalloutBlock(TextBlock):
    type: BlockType = BlockType.CALLOUT
    icon: str | None = None  # emoji

    def payload(self) -> dict[str, Any]:
        data = super().payload()
        if self.icon:
            data["icon"] = {"type": "emoji", "emoji": self.icon}
        return data


class CodeBlock(TextBlock):
    type: BlockType = BlockType.CODE
    language: str | None = None

    def payload(self) -> dict[str, Any]:
        data: dict[str, Any] = {"rich_text": [run.to_json() for run in self.rich_text]}
        if self.language:
            data["language"] = self.language
        return data


class MediaBlock(Block):
    """Image or video: external URL, hosted file URL, or just a placeholder hint."""

    type: BlockType = BlockType.IMAGE
    source: str | None = None
    source_kind: str = "external"  # "external" or "file"
    caption: list[RichTextRun] = Field(default_factory=list)
    placeholder: str | None = None

    def payload(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.source_kind}
        if self.source:
            data[self.source_kind] = {"url": self.source}
        if self.caption:
            data["caption"] = [run.to_json() for run in self.caption]
        if self.placeholder:
            data["placeholder"] = self.placeholder
        return data


class DividerBlock(Block):
    type: BlockType = BlockType.DIVIDER


class TableBlock(Block):
    type: BlockType = BlockType.TABLE
    column_count: int = 0
    has_header_row: bool = False
    has_row_header: bool = False
    rows: list[list[list[RichTextRun]]] = Field(default_factory=list)  # rows -> cells -> runs

    @model_validator(mode="after")
    def infer_column_count(self) -> "TableBlock":
        if not self.column_count and self.rows:
            self.column_count = max(len(row) for row in self.rows)
        return self

    def payload(self) -> dict[str, Any]:
        return {
            "table_width": self.column_count,
            "has_column_header": self.has_header_row,
            "has_row_header": self.has_row_header,
        }

    def to_json(self) -> dict[str, Any]:
        data = super().to_json()
        data["children"] = [
            {
                "type": "table_row",
                "table_row": {"cells": [[run.to_json() for run in cell] for cell in row]},
            }
            for row in self.rows
        ]
        return data


class ColumnBlock(Block):
    type: BlockType = BlockType.COLUMN
    width_ratio: float = Field(default=1.0, gt=0)

    def payload(self) -> dict[str, Any]:
        return {"width_ratio": self.width_ratio}


class ColumnListBlock(Block):
    type: BlockType = BlockType.COLUMN_LIST
    columns: list[ColumnBlock] = Field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        data = super().to_json()
        data["children"] = [column.to_json() for column in self.columns]
        return data


class DocumentMetadata(BaseModel):
    title: str | None = None
    authors: list[str] = Field(default_factory=list)
    date: str | None = None  # ISO-8601
    tags: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def fold_single_author(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("author") and not data.get("authors"):
            data = {**data, "authors": [data["author"]]}
        return data


class Document(BaseModel):
    metadata: DocumentMetadata | None = None
    blocks: list[Block] = Field(default_factory=list)

    def __iter__(self):  # pyright: ignore[reportIncompatibleMethodOverride]
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)


Block.model_rebuild()
