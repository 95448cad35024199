"""Pipeline result models."""

import json
from collections.abc import Iterator
from functools import cached_property

from pydantic import BaseModel, Field

from blockpress.blocks.models import Block
from blockpress.renderer.models import RenderResult
from blockpress.validator.models import ValidationReport

LAYOUTS: tuple[str, ...] = ("fragment", "document", "blog", "collection")


class ConversionResult(BaseModel):
    """Outcome of one end-to-end conversion.

    A: Iterate directly over the rendered blocks

    B: access the repaired block JSON via the .json property

    C: inspect `validation` and `render` for the bookkeeping of each stage
    """

    html: str
    layout: str = "fragment"
    blocks: list[Block] = Field(default_factory=list)
    validation: ValidationReport
    render: RenderResult

    def __getitem__(self, index: int) -> Block:
        return self.blocks[index]

    def __iter__(self) -> Iterator[Block]:  # pyright: ignore[reportIncompatibleMethodOverride]
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    @cached_property
    def json(self) -> str:  # pyright: ignore[reportIncompatibleMethodOverride]
        return json.dumps(self.validation.fixed_data, ensure_ascii=False, indent=2)
