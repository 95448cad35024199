"""Renderer input/output models."""

from pydantic import BaseModel, Field

from blockpress.blocks.models import ListItemBlock


class ListGroup(BaseModel):
    """Consecutive list items of one kind, rendered as a single <ul>/<ol>."""

    ordered: bool
    items: list[ListItemBlock] = Field(default_factory=list)

    @property
    def tag(self) -> str:
        return "ol" if self.ordered else "ul"


class NavEntry(BaseModel):
    id: str
    title: str
    level: int


class RenderResult(BaseModel):
    html: str
    block_count: int = 0  # top-level blocks received
    counts: dict[str, int] = Field(default_factory=dict)  # rendered blocks per type
    skipped: int = 0  # unsupported blocks dropped
    sections: list[NavEntry] = Field(default_factory=list)  # top-level headings


class CollectionEntry(BaseModel):
    title: str | None = None
    slug: str | None = None
    date: str | None = None  # ISO-8601
    authors: list[str] = Field(default_factory=list)
    summary: str | None = None
    tags: list[str] = Field(default_factory=list)
