"""Block renderer handlers.

Every handler returns either an empty string or text ending in exactly one
blank line, so sibling blocks can simply be concatenated.
"""

import re

from webclip.dom import Element, Node, Text
from webclip.services.inline import longest_backtick_run
from webclip.services.rendering import Renderer, RenderState

_LANGUAGE_CLASS_RE = re.compile(r"(?:^|\s)(?:language|lang)-([\w+#.-]+)", re.IGNORECASE)
_LINE_BREAKS_RE = re.compile(r"\s*\n\s*")


def as_block(content: str) -> str:
    content = content.strip()
    return f"{content}\n\n" if content else ""


def quote_lines(content: str) -> str:
    """Prefix every line with one quote level; blank lines get a bare ``>``."""
    return "\n".join(f"> {line}" if line.strip() else ">" for line in content.split("\n"))


def render_container(renderer: Renderer, element: Element, state: RenderState) -> str:
    return as_block(renderer.render_flow(element.children, state))


def render_heading(renderer: Renderer, element: Element, state: RenderState) -> str:
    level = min(int(element.tag[1]), 6)
    content = _LINE_BREAKS_RE.sub(" ", renderer.inline_children(element, state).strip())
    if not content:
        return ""
    return f"{'#' * level} {content}\n\n"


def code_language(*elements: Element | None) -> str:
    """Find a language hint on the ``code`` element first, then on ``pre``."""
    for element in elements:
        if element is None:
            continue
        match = _LANGUAGE_CLASS_RE.search(element.get("class") or "")
        if match:
            return match.group(1)
        hint = (element.get("data-language") or element.get("data-lang") or "").strip()
        if hint:
            return hint
    return ""


def raw_code_text(element: Element) -> str:
    """Character data below ``element`` with every ``<br>`` read as a newline."""
    parts: list[str] = []
    stack: list[Node] = [element]
    while stack:
        node = stack.pop()
        if isinstance(node, Text):
            parts.append(node.data)
        elif isinstance(node, Element):
            if node.tag == "br":
                parts.append("\n")
            else:
                stack.extend(reversed(node.children))
    return "".join(parts)


def render_code_block(renderer: Renderer, element: Element, state: RenderState) -> str:
    code_element = next((child for child in element.element_children if child.tag == "code"), None)
    raw = raw_code_text(code_element if code_element is not None else element)
    code = raw.replace("\u00a0", " ").replace("\r\n", "\n").replace("\r", "\n").rstrip()
    # HTML ignores a newline directly after <pre>
    code = code.removeprefix("\n")
    if not code.strip():
        return ""

    fence = "`" * max(3, longest_backtick_run(code) + 1)
    language = code_language(code_element, element)
    return f"{fence}{language}\n{code}\n{fence}\n\n"


def render_blockquote(renderer: Renderer, element: Element, state: RenderState) -> str:
    content = renderer.render_flow(element.children, state.descend_quote()).strip()
    if not content:
        return ""
    return f"{quote_lines(content)}\n\n"


def render_details(renderer: Renderer, element: Element, state: RenderState) -> str:
    summary = next((child for child in element.element_children if child.tag == "summary"), None)
    title = ""
    if summary is not None:
        title = _LINE_BREAKS_RE.sub(" ", renderer.inline_children(summary, state).strip())

    body_nodes: list[Node] = [child for child in element.children if child is not summary]
    body = renderer.render_flow(body_nodes, state.descend_quote()).strip()
    if not title and not body:
        return ""

    header = f"> [!details] {title}" if title else "> [!details]"
    if not body:
        return f"{header}\n\n"
    return f"{header}\n{quote_lines(body)}\n\n"


def render_figure(renderer: Renderer, element: Element, state: RenderState) -> str:
    caption_element = next((child for child in element.element_children if child.tag == "figcaption"), None)
    caption = ""
    if caption_element is not None:
        caption = renderer.inline_children(caption_element, state).strip()

    body_nodes = [child for child in element.children if child is not caption_element]
    body = renderer.render_flow(body_nodes, state).strip()
    return as_block(body) + as_block(caption)


def render_rule(renderer: Renderer, element: Element, state: RenderState) -> str:
    return "---\n\n"
