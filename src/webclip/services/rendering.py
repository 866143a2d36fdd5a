"""Shared rendering types: render state, table alignment and the renderer protocol."""

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Protocol, TypeAlias

from webclip.dom import Element, Node


@dataclass(frozen=True)
class RenderState:
    """Nesting depth threaded by value through one render pass."""

    list_depth: int = 0
    blockquote_depth: int = 0

    def descend_list(self) -> "RenderState":
        return replace(self, list_depth=self.list_depth + 1)

    def descend_quote(self) -> "RenderState":
        return replace(self, blockquote_depth=self.blockquote_depth + 1)


class Alignment(StrEnum):
    """Table column alignment, valued by its delimiter-row marker."""

    NONE = "---"
    LEFT = ":---"
    CENTER = ":---:"
    RIGHT = "---:"


AlignmentResolver: TypeAlias = Callable[[Mapping[str, str]], Alignment]

ALIGNMENT_KEYWORDS: dict[str, Alignment] = {
    "left": Alignment.LEFT,
    "start": Alignment.LEFT,
    "center": Alignment.CENTER,
    "centre": Alignment.CENTER,
    "right": Alignment.RIGHT,
    "end": Alignment.RIGHT,
}

_TEXT_ALIGN_RE = re.compile(r"(?:^|;)\s*text-align\s*:\s*([a-z-]+)", re.IGNORECASE)


def resolve_alignment_from_attributes(attrs: Mapping[str, str]) -> Alignment:
    """Derive a cell's alignment from its ``align`` attribute or inline ``text-align``.

    Stands in for computed style when no rendering engine is attached.
    """
    align = (attrs.get("align") or "").strip().lower()
    if align in ALIGNMENT_KEYWORDS:
        return ALIGNMENT_KEYWORDS[align]

    match = _TEXT_ALIGN_RE.search(attrs.get("style") or "")
    if match:
        return ALIGNMENT_KEYWORDS.get(match.group(1).lower(), Alignment.NONE)
    return Alignment.NONE


def null_alignment_resolver(attrs: Mapping[str, str]) -> Alignment:
    return Alignment.NONE


class Renderer(Protocol):
    """What block, inline and layout handlers may call back into."""

    max_data_uri_length: int | None

    def render_inline(self, node: Node, state: RenderState) -> str: ...

    def render_block(self, node: Node, state: RenderState) -> str: ...

    def render_flow(self, children: Iterable[Node], state: RenderState, tight: bool = False) -> str: ...

    def inline_children(self, element: Element, state: RenderState) -> str: ...

    def render_label(self, element: Element, state: RenderState) -> str: ...

    def resolve_alignment(self, attrs: Mapping[str, str]) -> Alignment: ...
