"""Fragment sanitiser.

Runs before any rendering. Produces a new tree in which:
- scripts, styles and other non-content elements are gone
- comments and hidden elements are gone
- ``<picture>`` wrappers are reduced to their ``<img>``
- link targets and every image source attribute are absolute URLs
"""

import logging
import re

from webclip.dom import Comment, Element, Node, Text, find_first
from webclip.utils import resolve_srcset, resolve_url

LOGGER = logging.getLogger(__name__)

# Tags removed together with their content
REMOVE_TAGS = frozenset(
    [
        "script",
        "style",
        "noscript",
        "template",
        "head",
        "iframe",
        "svg",
        "canvas",
        "video",
        "audio",
        "embed",
        "object",
    ]
)

# Image attributes holding a single URL, in the order the renderer prefers them
IMAGE_SOURCE_ATTRIBUTES = ("src", "data-src", "data-original", "data-lazy-src", "data-lazy")

# Image attributes holding a srcset-style candidate list
IMAGE_SRCSET_ATTRIBUTES = ("srcset", "data-srcset", "data-lazy-srcset")

_HIDDEN_STYLE_RE = re.compile(r"(?:^|;)\s*(?:display\s*:\s*none|visibility\s*:\s*hidden)", re.IGNORECASE)


def is_hidden(element: Element) -> bool:
    """Check the ``hidden`` attribute and inline styles that hide an element."""
    if element.has("hidden"):
        return True
    return bool(_HIDDEN_STYLE_RE.search(element.get("style") or ""))


def _resolve_attributes(element: Element, base_url: str | None) -> Element:
    if not base_url:
        return element

    attrs = dict(element.attrs)
    if element.tag == "a" and attrs.get("href"):
        attrs["href"] = resolve_url(attrs["href"], base_url)
    elif element.tag in ("img", "source"):
        for name in IMAGE_SOURCE_ATTRIBUTES:
            if attrs.get(name):
                attrs[name] = resolve_url(attrs[name], base_url)
        for name in IMAGE_SRCSET_ATTRIBUTES:
            if attrs.get(name):
                attrs[name] = resolve_srcset(attrs[name], base_url)
    else:
        return element
    return element.with_attrs(attrs)


def _has_image_source(img: Element) -> bool:
    names = IMAGE_SOURCE_ATTRIBUTES + IMAGE_SRCSET_ATTRIBUTES
    return any((img.get(name) or "").strip() for name in names)


def _unwrap_picture(picture: Element) -> Element | None:
    """Reduce ``<picture>`` to its ``<img>``.

    An image without any source of its own borrows the first ``<source>``
    candidate list, which is where lazy-loading pictures keep their URLs.
    """
    img = find_first(picture, lambda el: el.tag == "img")
    if img is None:
        LOGGER.debug("Dropping <picture> without an <img>")
        return None
    if _has_image_source(img):
        return img

    source = find_first(picture, lambda el: el.tag == "source" and _has_image_source(el))
    if source is None:
        return img
    attrs = dict(img.attrs)
    for name in IMAGE_SRCSET_ATTRIBUTES + IMAGE_SOURCE_ATTRIBUTES:
        value = (source.get(name) or "").strip()
        if value:
            attrs["srcset" if name in IMAGE_SRCSET_ATTRIBUTES else "src"] = value
            break
    return img.with_attrs(attrs)


def _sanitize_node(node: Node, base_url: str | None) -> Node | None:
    if isinstance(node, Comment):
        return None
    if isinstance(node, Text):
        return node

    if node.tag in REMOVE_TAGS or is_hidden(node):
        return None
    if node.tag == "picture":
        img = _unwrap_picture(node)
        return _sanitize_node(img, base_url) if img is not None else None

    children = (_sanitize_node(child, base_url) for child in node.children)
    element = node.with_children(child for child in children if child is not None)
    return _resolve_attributes(element, base_url)


def sanitize(root: Element, base_url: str | None = None) -> Element:
    """
    Return a cleaned copy of a detached fragment.

    The input tree is never modified. The root itself is always kept, even if
    every child is removed.

    Args:
        root: Fragment root (usually ``#document-fragment``).
        base_url: Base URI used to make ``href``/``src`` values absolute.

    Returns:
        Sanitised fragment root.
    """
    children = (_sanitize_node(child, base_url) for child in root.children)
    return root.with_children(child for child in children if child is not None)


def visible_text(root: Element) -> str:
    """
    Collect the text a reader would see, without recursion.

    Used when a tree is nested too deeply for the recursive passes. Removed
    tags, hidden elements and comments contribute nothing.

    Args:
        root: Fragment root.

    Returns:
        Concatenated character data in document order.
    """
    parts: list[str] = []
    stack: list[Node] = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, Text):
            parts.append(node.data)
        elif isinstance(node, Element) and node.tag not in REMOVE_TAGS and not is_hidden(node):
            stack.extend(reversed(node.children))
    return "".join(parts)
