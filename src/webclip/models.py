"""Data models for webclip."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

LINK_TEXT_LIMIT = 120


class LinkDescriptor(BaseModel):
    """Hyperlink found in or around the selection."""

    href: str
    text: str = Field(max_length=LINK_TEXT_LIMIT)


class SelectionContext(BaseModel):
    """Everything the persistence layer needs to write one clip entry.

    Serialises with camelCase keys (``selectionText``, ``createdAt``, ...) so the
    record can be handed to the browser side unchanged.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    selection_text: str
    markdown: str
    base_url: str
    title: str
    created_at: str
    text_fragment_url: str
    link: LinkDescriptor | None = None


class SelectionResult(BaseModel):
    """Outcome of building a selection context.

    An empty selection is a normal outcome (``success=False``), not an error.
    """

    success: bool
    context: SelectionContext | None = None
    error: str | None = None
