"""HTML fragment to Markdown converter.

Turns a detached selection fragment into self-contained Markdown:
1. ``sanitize`` removes non-content nodes and makes URLs absolute
2. a flat dispatch table maps every tag to a ``TagCategory`` handler
3. block output is joined, trailing whitespace trimmed and blank lines collapsed

Handler Registry
================
Handlers live in ``inline``, ``blocks`` and ``layout`` and share one shape:
``handler(renderer, element, state) -> str``. Tags absent from
``TAG_CATEGORIES`` are transparent wrappers: their children are rendered in
place without extra syntax.

To support a new element:
1. Add a ``TagCategory`` member (or reuse one)
2. Map the tag in ``TAG_CATEGORIES``
3. Register the handler in ``HANDLERS``
"""

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from enum import Enum, auto
from typing import TypeAlias

from webclip.config import WebclipSettings
from webclip.dom import FRAGMENT_TAG, Element, Node, Text, parse_fragment
from webclip.services import blocks, inline, layout
from webclip.services.rendering import (
    Alignment,
    AlignmentResolver,
    RenderState,
    null_alignment_resolver,
    resolve_alignment_from_attributes,
)
from webclip.services.sanitizer import sanitize, visible_text
from webclip.utils import collapse_whitespace

LOGGER = logging.getLogger(__name__)


class TagCategory(Enum):
    """Element categories, one handler each."""

    CONTAINER = auto()
    HEADING = auto()
    CODE_BLOCK = auto()
    BLOCKQUOTE = auto()
    DETAILS = auto()
    FIGURE = auto()
    TABLE = auto()
    LIST = auto()
    LIST_ITEM = auto()
    RULE = auto()
    STRUCTURAL = auto()
    EMPHASIS = auto()
    INLINE_CODE = auto()
    LINK = auto()
    IMAGE = auto()
    LINE_BREAK = auto()
    FORM_CONTROL = auto()


def _categorise(category: TagCategory, *tags: str) -> dict[str, TagCategory]:
    return dict.fromkeys(tags, category)


TAG_CATEGORIES: dict[str, TagCategory] = {
    FRAGMENT_TAG: TagCategory.CONTAINER,
    **_categorise(
        TagCategory.CONTAINER,
        "p",
        "div",
        "section",
        "article",
        "header",
        "footer",
        "main",
        "aside",
        "nav",
        "figcaption",
        "address",
        "dl",
        "dt",
        "dd",
        "hgroup",
        "summary",
    ),
    **_categorise(TagCategory.HEADING, "h1", "h2", "h3", "h4", "h5", "h6"),
    "pre": TagCategory.CODE_BLOCK,
    "blockquote": TagCategory.BLOCKQUOTE,
    "details": TagCategory.DETAILS,
    "figure": TagCategory.FIGURE,
    "table": TagCategory.TABLE,
    **_categorise(TagCategory.LIST, "ul", "ol"),
    "li": TagCategory.LIST_ITEM,
    "hr": TagCategory.RULE,
    **_categorise(TagCategory.STRUCTURAL, "thead", "tbody", "tfoot", "tr", "td", "th", "caption"),
    **_categorise(TagCategory.EMPHASIS, *inline.INLINE_MARKERS),
    **_categorise(TagCategory.INLINE_CODE, "code", "kbd", "samp", "tt"),
    "a": TagCategory.LINK,
    "img": TagCategory.IMAGE,
    "br": TagCategory.LINE_BREAK,
    **_categorise(TagCategory.FORM_CONTROL, "input", "button", "select", "textarea"),
}

# Categories whose output is a block; everything else flows inline
BLOCK_CATEGORIES = frozenset(
    [
        TagCategory.CONTAINER,
        TagCategory.HEADING,
        TagCategory.CODE_BLOCK,
        TagCategory.BLOCKQUOTE,
        TagCategory.DETAILS,
        TagCategory.FIGURE,
        TagCategory.TABLE,
        TagCategory.LIST,
        TagCategory.LIST_ITEM,
        TagCategory.RULE,
        TagCategory.STRUCTURAL,
    ]
)

Handler: TypeAlias = Callable[["MarkdownConverter", Element, RenderState], str]


def _render_structural(renderer: "MarkdownConverter", element: Element, state: RenderState) -> str:
    # Table parts outside a table: keep the text, drop the structure
    return blocks.as_block(renderer.render_flow(element.children, state))


HANDLERS: dict[TagCategory, Handler] = {
    TagCategory.CONTAINER: blocks.render_container,
    TagCategory.HEADING: blocks.render_heading,
    TagCategory.CODE_BLOCK: blocks.render_code_block,
    TagCategory.BLOCKQUOTE: blocks.render_blockquote,
    TagCategory.DETAILS: blocks.render_details,
    TagCategory.FIGURE: blocks.render_figure,
    TagCategory.TABLE: layout.render_table,
    TagCategory.LIST: layout.render_list,
    TagCategory.LIST_ITEM: layout.render_list_item,
    TagCategory.RULE: blocks.render_rule,
    TagCategory.STRUCTURAL: _render_structural,
    TagCategory.EMPHASIS: inline.render_emphasis,
    TagCategory.INLINE_CODE: inline.render_inline_code,
    TagCategory.LINK: inline.render_link,
    TagCategory.IMAGE: inline.render_image,
    TagCategory.LINE_BREAK: inline.render_line_break,
    TagCategory.FORM_CONTROL: inline.render_nothing,
}

_SPACES_AROUND_BREAK_RE = re.compile(r"[ \t]*\n(?: (?=\S))?")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")


def category_of(element: Element) -> TagCategory | None:
    return TAG_CATEGORIES.get(element.tag)


def is_block(node: Node) -> bool:
    return isinstance(node, Element) and category_of(node) in BLOCK_CATEGORIES


def is_transparent(node: Node) -> bool:
    return isinstance(node, Element) and category_of(node) is None


def collapse_blank_lines(markdown: str) -> str:
    return _EXCESS_NEWLINES_RE.sub("\n\n", markdown)


def clean_whitespace(markdown: str) -> str:
    """Strip trailing whitespace per line, keep at most one blank line, trim the ends."""
    lines = []
    prev_empty = False

    for line in markdown.splitlines():
        stripped = line.rstrip()
        is_empty = not stripped

        if is_empty:
            if not prev_empty:
                lines.append("")
            prev_empty = True
        else:
            lines.append(stripped)
            prev_empty = False

    return "\n".join(lines).strip()


class MarkdownConverter:
    """Convert a selected HTML fragment to Markdown.

    Usage:
        converter = MarkdownConverter()
        markdown = converter.convert("<p>Hello <b>World</b></p>", base_url="https://example.com")
    """

    def __init__(
        self,
        alignment_resolver: AlignmentResolver = resolve_alignment_from_attributes,
        max_data_uri_length: int | None = None,
    ) -> None:
        """
        Initialise the converter.

        Args:
            alignment_resolver: Maps a table cell's attributes to its column alignment.
            max_data_uri_length: Longest ``data:`` image source accepted; None means unbounded.
        """
        self.alignment_resolver = alignment_resolver
        self.max_data_uri_length = max_data_uri_length

    @classmethod
    def from_settings(cls, settings: WebclipSettings) -> "MarkdownConverter":
        """Build a converter from ``WebclipSettings``."""
        resolver = null_alignment_resolver if settings.table_alignment == "none" else resolve_alignment_from_attributes
        return cls(alignment_resolver=resolver, max_data_uri_length=settings.max_data_uri_length)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def convert(self, html: str, base_url: str | None = None) -> str:
        """Parse an HTML snippet and convert it to Markdown.

        Args:
            html: HTML of the selected range (a full document also works).
            base_url: Base URI for resolving relative links and image sources.

        Returns:
            Markdown string, empty when the snippet has no content.
        """
        if not html or not html.strip():
            return ""
        return self.convert_fragment(parse_fragment(html), base_url=base_url)

    def convert_fragment(self, fragment: Element, base_url: str | None = None) -> str:
        """Sanitise and render a detached fragment.

        Args:
            fragment: Fragment root from ``parse_fragment`` or ``Selection``.
            base_url: Base URI for resolving relative links and image sources.

        Returns:
            Trimmed Markdown with at most one blank line between blocks.
        """
        try:
            markdown = self.render_block(sanitize(fragment, base_url), RenderState())
        except RecursionError:
            LOGGER.warning("Selection is nested too deeply to convert structurally, falling back to plain text")
            return inline.render_text(visible_text(fragment)).strip()
        return clean_whitespace(markdown)

    # -------------------------------------------------------------------------
    # Renderer protocol
    # -------------------------------------------------------------------------

    def render_block(self, node: Node, state: RenderState) -> str:
        """Render a node in block context."""
        if not isinstance(node, Element):
            return inline.render_text(node.data) if isinstance(node, Text) else ""
        handler = self._handler_for(node)
        if handler is None:
            return self.render_flow(node.children, state)
        return handler(self, node, state)

    def render_inline(self, node: Node, state: RenderState) -> str:
        """Render a node in inline context."""
        if not isinstance(node, Element):
            return inline.render_text(node.data) if isinstance(node, Text) else ""
        handler = self._handler_for(node)
        if handler is None:
            return self.inline_children(node, state)
        return handler(self, node, state)

    def inline_children(self, element: Element, state: RenderState) -> str:
        return "".join(self.render_inline(child, state) for child in element.children)

    def render_label(self, element: Element, state: RenderState) -> str:
        """Render an element's content on a single line.

        Blocks inside the element give up their syntax (heading markers,
        list markers, blank lines) and are joined with spaces, so the result
        can sit between link brackets.
        """
        parts: list[str] = []
        for child in element.children:
            if is_block(child):
                parts.append(f" {self.render_label(child, state)} ")
            elif is_transparent(child):
                parts.append(self.render_label(child, state))
            else:
                parts.append(self.render_inline(child, state))
        return collapse_whitespace("".join(parts))

    def render_flow(self, children: Iterable[Node], state: RenderState, tight: bool = False) -> str:
        """Render mixed children, grouping inline runs between blocks.

        A run is followed by a blank line, except in ``tight`` mode (list
        items) where a run directly followed by a nested list keeps a single
        newline so the item stays compact.

        Args:
            children: Nodes in document order.
            state: Current render state.
            tight: Keep a run attached to a following nested list.

        Returns:
            Concatenated block text with blank lines collapsed.
        """
        parts: list[str] = []
        run: list[str] = []

        def flush(before: Element | None = None) -> None:
            text = _SPACES_AROUND_BREAK_RE.sub("\n", "".join(run)).strip()
            run.clear()
            if text:
                attached = tight and before is not None and category_of(before) is TagCategory.LIST
                parts.append(text + ("\n" if attached else "\n\n"))

        pending = list(children)
        pending.reverse()
        while pending:
            child = pending.pop()
            if is_block(child):
                flush(child)
                parts.append(self.render_block(child, state))
            elif is_transparent(child):
                # Handler-less wrappers are spliced in, so a block inside one still ends the run
                pending.extend(reversed(child.children))
            else:
                run.append(self.render_inline(child, state))
        flush()
        return collapse_blank_lines("".join(parts))

    def resolve_alignment(self, attrs: Mapping[str, str]) -> Alignment:
        return self.alignment_resolver(attrs)

    def _handler_for(self, element: Element) -> Handler | None:
        category = category_of(element)
        if category is None:
            LOGGER.debug(f"No handler for <{element.tag}>, rendering children in place")
            return None
        return HANDLERS[category]
