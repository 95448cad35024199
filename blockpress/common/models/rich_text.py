"""Rich text runs shared by every text-bearing block."""

import html
from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel, Field


class Color(Enum):
    DEFAULT = "default"
    GRAY = "gray"
    BROWN = "brown"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    PINK = "pink"
    RED = "red"
    GRAY_BACKGROUND = "gray_background"
    BROWN_BACKGROUND = "brown_background"
    ORANGE_BACKGROUND = "orange_background"
    YELLOW_BACKGROUND = "yellow_background"
    GREEN_BACKGROUND = "green_background"
    BLUE_BACKGROUND = "blue_background"
    PURPLE_BACKGROUND = "purple_background"
    PINK_BACKGROUND = "pink_background"
    RED_BACKGROUND = "red_background"

    @classmethod
    def parse(cls, value: Any) -> "Color | None":
        """Return the matching color, or None for anything outside the enum."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


COLOR_STYLES: dict[Color, str] = {
    Color.GRAY: "color: gray",
    Color.BROWN: "color: #8B4513",
    Color.ORANGE: "color: #FF8C00",
    Color.YELLOW: "color: #DAA520",
    Color.GREEN: "color: #228B22",
    Color.BLUE: "color: #0000CD",
    Color.PURPLE: "color: #800080",
    Color.PINK: "color: #FF69B4",
    Color.RED: "color: #DC143C",
    Color.GRAY_BACKGROUND: "background-color: #f1f1f1",
    Color.BROWN_BACKGROUND: "background-color: #f4f1e8",
    Color.ORANGE_BACKGROUND: "background-color: #fff4e6",
    Color.YELLOW_BACKGROUND: "background-color: #fffbf0",
    Color.GREEN_BACKGROUND: "background-color: #f0f9f0",
    Color.BLUE_BACKGROUND: "background-color: #f0f8ff",
    Color.PURPLE_BACKGROUND: "background-color: #f8f0ff",
    Color.PINK_BACKGROUND: "background-color: #fff0f8",
    Color.RED_BACKGROUND: "background-color: #fff0f0",
}


class Annotations(BaseModel):
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    code: bool = False
    color: Color = Color.DEFAULT


class RichTextRun(BaseModel):
    """A run of text with consistent styling."""

    content: str = ""
    annotations: Annotations = Field(default_factory=Annotations)
    link: str | None = None  # URL

    def to_json(self) -> dict[str, Any]:
        """Block-JSON representation of this run."""
        annotations = self.annotations.model_dump()
        annotations["color"] = self.annotations.color.value
        return {
            "type": "text",
            "text": {
                "content": self.content,
                "link": {"url": self.link} if self.link else None,
            },
            "annotations": annotations,
            "plain_text": self.content,
            "href": self.link,
        }


def extract_plain_text(runs: Iterable[RichTextRun]) -> str:
    """Concatenate run contents, ignoring formatting and links."""
    return "".join(run.content for run in runs)


def _render_run(run: RichTextRun) -> str:
    text = html.escape(run.content)
    if not text:
        return ""

    ann = run.annotations
    # Order matters: each wrapper encloses the previous ones, the link encloses all.
    if ann.bold:
        text = f"<strong>{text}</strong>"
    if ann.italic:
        text = f"<em>{text}</em>"
    if ann.code:
        text = f"<code>{text}</code>"
    if ann.underline:
        text = f"<u>{text}</u>"
    if ann.strikethrough:
        text = f"<s>{text}</s>"

    style = COLOR_STYLES.get(ann.color)
    if style:
        text = f'<span style="{style}">{text}</span>'

    if run.link:
        text = f'<a href="{html.escape(run.link)}">{text}</a>'

    return text


def render_rich_text_html(runs: Iterable[RichTextRun]) -> str:
    """Render runs to inline HTML, preserving their order."""
    return "".join(_render_run(run) for run in runs)
