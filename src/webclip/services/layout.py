"""List and table layout.

Lists:
- ``- `` markers for unordered items, ``n. `` for ordered ones counting from ``start``
- a leading checkbox turns an item into a task item (``[x] `` / ``[ ] ``)
- continuation lines are indented by the marker width

Tables:
- header row is the first row holding a ``<th>``, else the first row
- ``colspan`` repeats the rendered cell across the spanned columns
- every row is padded to the widest row with single-space cells
- line breaks inside cells become ``<br>``
"""

import logging
import re

from webclip.dom import Element, Node, Text
from webclip.services.rendering import Alignment, Renderer, RenderState

LOGGER = logging.getLogger(__name__)

TABLE_SECTIONS = {"thead": 0, "tbody": 1, "tfoot": 2}
CELL_TAGS = ("td", "th")
PLACEHOLDER_CELL = " "

_CELL_BREAKS_RE = re.compile(r"\n+")
_UNESCAPED_PIPE_RE = re.compile(r"(?<!\\)\|")


# =============================================================================
# Lists
# =============================================================================


def _is_checkbox(element: Element) -> bool:
    return element.tag == "input" and (element.get("type") or "").strip().lower() == "checkbox"


def take_task_checkbox(item: Element) -> tuple[bool | None, Element]:
    """Detect and remove a leading checkbox from a list item.

    The checkbox only counts when no visible text precedes it; nested lists
    are not searched.

    Returns:
        ``(checked, item)`` where ``checked`` is None when the item is not a
        task item, and ``item`` is the item without its checkbox.
    """
    found, _, item = _take_leading_checkbox(item)
    return found, item


def _take_leading_checkbox(element: Element) -> tuple[bool | None, bool, Element]:
    # Returns (checked, blocked, element); "blocked" means visible content came first.
    children: list[Node] = list(element.children)
    for index, child in enumerate(children):
        if isinstance(child, Text):
            if child.data.strip():
                return None, True, element
            continue
        if not isinstance(child, Element):
            continue
        if _is_checkbox(child):
            del children[index]
            return child.has("checked"), False, element.with_children(children)
        if child.tag in ("ul", "ol"):
            return None, True, element
        checked, blocked, replacement = _take_leading_checkbox(child)
        if checked is not None:
            children[index] = replacement
            return checked, False, element.with_children(children)
        if blocked:
            return None, True, element
    return None, False, element


def parse_start(element: Element) -> int:
    try:
        return max(0, int((element.get("start") or "1").strip()))
    except ValueError:
        return 1


def indent_continuation(content: str, width: int) -> list[str]:
    """Split item content into lines, indenting all but the first by ``width``."""
    lines = content.split("\n")
    indent = " " * width
    return lines[:1] + [f"{indent}{line}" if line.strip() else "" for line in lines[1:]]


def render_list(renderer: Renderer, element: Element, state: RenderState) -> str:
    items = [child for child in element.element_children if child.tag == "li"]
    if not items:
        return ""

    ordered = element.tag == "ol"
    number = parse_start(element)
    item_state = state.descend_list()
    lines: list[str] = []
    has_content = False

    for item in items:
        marker = f"{number}. " if ordered else "- "
        number += 1

        checked, item = take_task_checkbox(item)
        content = renderer.render_flow(item.children, item_state, tight=True).strip()
        if checked is not None:
            content = f"{'[x]' if checked else '[ ]'} {content}".rstrip()
        if not content:
            lines.append(marker.rstrip())
            continue

        has_content = True
        item_lines = indent_continuation(content, len(marker))
        lines.append(f"{marker}{item_lines[0]}")
        lines.extend(item_lines[1:])

    if not has_content:
        LOGGER.debug(f"Dropping <{element.tag}> without item content")
        return ""
    return "\n".join(lines) + "\n\n"


def render_list_item(renderer: Renderer, element: Element, state: RenderState) -> str:
    """Render an ``<li>`` found outside any list as a one-item unordered list."""
    return render_list(renderer, Element("ul", {}, (element,)), state)


# =============================================================================
# Tables
# =============================================================================


def collect_rows(table: Element) -> list[Element]:
    """Rows with at least one cell, ``thead`` first and ``tfoot`` last."""
    ranked: list[tuple[int, Element]] = []
    for child in table.element_children:
        if child.tag == "tr":
            ranked.append((TABLE_SECTIONS["tbody"], child))
        elif child.tag in TABLE_SECTIONS:
            ranked.extend((TABLE_SECTIONS[child.tag], row) for row in child.element_children if row.tag == "tr")
    ranked.sort(key=lambda entry: entry[0])
    return [row for _, row in ranked if any(cell.tag in CELL_TAGS for cell in row.element_children)]


def parse_colspan(cell: Element) -> int:
    try:
        return max(1, int((cell.get("colspan") or "1").strip()))
    except ValueError:
        return 1


def render_cell(renderer: Renderer, cell: Element, state: RenderState) -> str:
    content = renderer.render_flow(cell.children, state).strip()
    content = _CELL_BREAKS_RE.sub("<br>", content)
    return _UNESCAPED_PIPE_RE.sub(r"\\|", content)


def expand_row(renderer: Renderer, row: Element, state: RenderState) -> tuple[list[str], list[Alignment]]:
    """Render a row's cells, repeating spanned cells, with each column's alignment."""
    cells: list[str] = []
    alignments: list[Alignment] = []
    for cell in row.element_children:
        if cell.tag not in CELL_TAGS:
            continue
        content = render_cell(renderer, cell, state)
        alignment = renderer.resolve_alignment(cell.attrs)
        span = parse_colspan(cell)
        cells.extend([content] * span)
        alignments.extend([alignment] * span)
    return cells, alignments


def format_row(cells: list[str]) -> str:
    return f"| {' | '.join(cells)} |"


def render_table(renderer: Renderer, element: Element, state: RenderState) -> str:
    rows = collect_rows(element)
    if not rows:
        return ""

    header_index = next(
        (index for index, row in enumerate(rows) if any(cell.tag == "th" for cell in row.element_children)),
        0,
    )
    header, alignments = expand_row(renderer, rows[header_index], state)
    body = [expand_row(renderer, row, state)[0] for index, row in enumerate(rows) if index != header_index]

    width = max([len(header)] + [len(cells) for cells in body])
    header += [PLACEHOLDER_CELL] * (width - len(header))
    alignments += [Alignment.NONE] * (width - len(alignments))

    lines = [format_row(header), format_row([alignment.value for alignment in alignments])]
    for cells in body:
        lines.append(format_row(cells + [PLACEHOLDER_CELL] * (width - len(cells))))

    caption_element = next((child for child in element.element_children if child.tag == "caption"), None)
    caption = renderer.inline_children(caption_element, state).strip() if caption_element is not None else ""
    table = "\n".join(lines) + "\n\n"
    return f"{caption}\n\n{table}" if caption else table
