"""Parser state threaded through the line reducer."""

from pydantic import BaseModel, Field

from blockpress.blocks.models import BlockType


class ParserState(BaseModel):
    in_code_block: bool = False
    code_language: str = ""
    code_lines: list[str] = Field(default_factory=list)
    # Kind of the list currently open (bulleted or numbered), None when no list is open.
    open_list: BlockType | None = None

    def close_list(self) -> "ParserState":
        return self.model_copy(update={"open_list": None})
