"""Inline renderer: text, emphasis, code spans, links and images."""

import logging
import re

from markdownify import chomp

from webclip.dom import Element, text_content
from webclip.services.rendering import Renderer, RenderState
from webclip.services.sanitizer import IMAGE_SOURCE_ATTRIBUTES, IMAGE_SRCSET_ATTRIBUTES
from webclip.utils import collapse_whitespace, first_srcset_url, is_data_uri, safe_markdown_url

LOGGER = logging.getLogger(__name__)

_ESCAPE_RE = re.compile(r"([\\`*_{}\[\]()#+!|<>])")
_BACKTICK_RUN_RE = re.compile(r"`+")

# Wrapper markers for inline formatting tags
INLINE_MARKERS: dict[str, str] = {
    "strong": "**",
    "b": "**",
    "em": "*",
    "i": "*",
    "del": "~~",
    "s": "~~",
    "strike": "~~",
    "mark": "==",
    "u": "++",
    "ins": "++",
    "sup": "^",
    "sub": "~",
}


def escape_markdown(text: str) -> str:
    """Backslash-escape every Markdown-significant character."""
    return _ESCAPE_RE.sub(r"\\\1", text)


def escape_title(title: str) -> str:
    return escape_markdown(title).replace('"', '\\"')


def render_text(data: str) -> str:
    """Render a text node in inline context: collapse whitespace, then escape once."""
    if not data:
        return ""
    return escape_markdown(collapse_whitespace(data))


def longest_backtick_run(text: str) -> int:
    return max((len(run) for run in _BACKTICK_RUN_RE.findall(text)), default=0)


def code_span(code: str) -> str:
    """Wrap ``code`` in a backtick fence longer than any backtick run inside it."""
    fence = "`" * (longest_backtick_run(code) + 1)
    if code.startswith("`") or code.endswith("`"):
        code = f" {code} "
    return f"{fence}{code}{fence}"


def render_emphasis(renderer: Renderer, element: Element, state: RenderState) -> str:
    marker = INLINE_MARKERS[element.tag]
    prefix, suffix, content = chomp(renderer.inline_children(element, state))
    if not content:
        return prefix or suffix
    return f"{prefix}{marker}{content}{marker}{suffix}"


def render_inline_code(renderer: Renderer, element: Element, state: RenderState) -> str:
    # Raw text: code content is never escaped
    code = collapse_whitespace(text_content(element))
    if not code.strip():
        return ""
    return code_span(code)


def render_link(renderer: Renderer, element: Element, state: RenderState) -> str:
    href = (element.get("href") or "").strip()
    prefix, suffix, label = chomp(renderer.render_label(element, state))
    if not label:
        return prefix or suffix
    if not href:
        return f"{prefix}{label}{suffix}"
    if href.lower().startswith("javascript:"):
        # Page controls (print, share) keep their text but lose the target
        return f"{prefix}{label}{suffix}"

    title = element.get("title")
    title_part = f' "{escape_title(title)}"' if title is not None else ""
    return f"{prefix}[{label}]({safe_markdown_url(href)}{title_part}){suffix}"


def image_source(element: Element, max_data_uri_length: int | None = None) -> str:
    """Pick the first usable source among direct, lazy-load and srcset attributes."""
    candidates = [element.get(name) or "" for name in IMAGE_SOURCE_ATTRIBUTES]
    candidates += [first_srcset_url(element.get(name) or "") for name in IMAGE_SRCSET_ATTRIBUTES]
    for candidate in candidates:
        candidate = candidate.strip()
        if not candidate:
            continue
        if max_data_uri_length is not None and is_data_uri(candidate) and len(candidate) > max_data_uri_length:
            LOGGER.debug(f"Skipping data URI of {len(candidate)} characters")
            continue
        return candidate
    return ""


def render_image(renderer: Renderer, element: Element, state: RenderState) -> str:
    src = image_source(element, renderer.max_data_uri_length)
    if not src:
        return ""
    # An explicit alt="" marks a decorative image and stays empty
    if element.has("alt"):
        alt = element.get("alt") or ""
    else:
        alt = element.get("title") or element.get("aria-label") or ""
    title = element.get("title")
    title_part = f' "{escape_title(title)}"' if title is not None else ""
    return f"![{render_text(alt).strip()}]({safe_markdown_url(src)}{title_part})"


def render_line_break(renderer: Renderer, element: Element, state: RenderState) -> str:
    return "\n"


def render_nothing(renderer: Renderer, element: Element, state: RenderState) -> str:
    return ""
