"""Settings models for the renderer."""

from pydantic import BaseModel


class RenderOptions(BaseModel):
    """Per-call rendering options."""

    heading_ids: bool = False  # add slug ids to headings (full document navigation)
    flatten_callouts: bool = True  # nested callouts share their parent's container
    max_depth: int | None = None  # None = use config.max_depth
