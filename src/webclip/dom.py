"""Immutable node tree used by the conversion engine.

HTML is parsed once with BeautifulSoup and frozen into plain value objects.
Nothing downstream touches the parser tree again, so sanitising and rendering
are pure functions over these values.
"""

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from typing import TypeAlias

from bs4 import BeautifulSoup
from bs4.element import Comment as SoupComment
from bs4.element import NavigableString, PreformattedString, Tag

LOGGER = logging.getLogger(__name__)

FRAGMENT_TAG = "#document-fragment"


@dataclass(frozen=True)
class Text:
    """A run of character data."""

    data: str


@dataclass(frozen=True)
class Comment:
    """An HTML comment. Kept so the sanitiser can drop it explicitly."""

    data: str


@dataclass(frozen=True)
class Element:
    """An element with a lower-case tag name, attributes and ordered children."""

    tag: str
    attrs: Mapping[str, str] = field(default_factory=dict)
    children: tuple["Node", ...] = ()

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return an attribute value, or ``default`` when absent."""
        return self.attrs.get(name, default)

    def has(self, name: str) -> bool:
        return name in self.attrs

    @property
    def element_children(self) -> tuple["Element", ...]:
        return tuple(child for child in self.children if isinstance(child, Element))

    @property
    def classes(self) -> list[str]:
        return (self.attrs.get("class") or "").split()

    def with_children(self, children: "Iterable[Node]") -> "Element":
        return replace(self, children=tuple(children))

    def with_attrs(self, attrs: Mapping[str, str]) -> "Element":
        return replace(self, attrs=dict(attrs))


Node: TypeAlias = Element | Text | Comment


def fragment(*children: Node) -> Element:
    """Build a detached fragment root holding ``children``."""
    return Element(FRAGMENT_TAG, {}, tuple(children))


def text_content(node: Node) -> str:
    """Concatenate all character data below ``node`` (comments excluded)."""
    parts: list[str] = []
    stack: list[Node] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, Text):
            parts.append(current.data)
        elif isinstance(current, Element):
            stack.extend(reversed(current.children))
    return "".join(parts)


def iter_elements(node: Node) -> Iterator[Element]:
    """Yield ``node`` (if an element) and every descendant element in document order."""
    stack: list[Node] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, Element):
            yield current
            stack.extend(reversed(current.children))


def find_first(node: Node, predicate: Callable[[Element], bool]) -> Element | None:
    """Return the first element at or below ``node`` matching ``predicate``."""
    for element in iter_elements(node):
        if predicate(element):
            return element
    return None


def is_link(element: Element) -> bool:
    """Match ``a[href]`` with a non-blank href."""
    return element.tag == "a" and bool((element.get("href") or "").strip())


# =============================================================================
# BeautifulSoup bridge
# =============================================================================


def _attribute_value(value: str | list[str]) -> str:
    # bs4 splits multi-valued attributes such as class and rel into lists
    if isinstance(value, list):
        return " ".join(value)
    return value


def _freeze_leaf(node: NavigableString) -> Node | None:
    if isinstance(node, SoupComment):
        return Comment(str(node))
    if isinstance(node, PreformattedString):
        return None
    return Text(str(node))


def _freeze_tag(tag: Tag, children: list[Node]) -> Element:
    attrs = {name.lower(): _attribute_value(value) for name, value in tag.attrs.items()}
    return Element(tag.name.lower(), attrs, tuple(children))


def from_soup(node: Tag | NavigableString) -> Node | None:
    """Freeze a BeautifulSoup node into the immutable tree.

    Doctypes, processing instructions and CDATA sections have no content
    meaning for a selection and are dropped here. The walk keeps its own
    stack, so arbitrarily deep markup never hits the interpreter's
    recursion limit.
    """
    if isinstance(node, NavigableString):
        return _freeze_leaf(node)
    if not isinstance(node, Tag):
        return None

    # Each frame: the tag, its unvisited children, its frozen children so far
    stack: list[tuple[Tag, Iterator[Tag | NavigableString], list[Node]]] = [(node, iter(node.children), [])]
    while True:
        tag, pending, frozen = stack[-1]
        child = next(pending, None)
        if child is None:
            stack.pop()
            element = _freeze_tag(tag, frozen)
            if not stack:
                return element
            stack[-1][2].append(element)
        elif isinstance(child, Tag):
            stack.append((child, iter(child.children), []))
        elif isinstance(child, NavigableString):
            leaf = _freeze_leaf(child)
            if leaf is not None:
                frozen.append(leaf)


def parse_fragment(html: str) -> Element:
    """Parse an HTML snippet into a detached fragment root.

    A full document is accepted too; only the children of ``<body>`` are kept
    in that case so head metadata never leaks into the output.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    container: Tag | BeautifulSoup = soup.body if soup.body is not None else soup
    children = [child for child in (from_soup(c) for c in container.children) if child is not None]
    LOGGER.debug(f"Parsed fragment with {len(children)} top-level nodes")
    return fragment(*children)
