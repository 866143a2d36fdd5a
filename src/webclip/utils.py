"""Utility functions for webclip."""

import logging
import re
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

LOGGER = logging.getLogger(__name__)

TEXT_FRAGMENT_DIRECTIVE = ":~:text="

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """
    Collapse runs of whitespace (non-breaking spaces included) to single spaces.

    Args:
        text: Text to normalise.

    Returns:
        Text with every whitespace run replaced by one ASCII space.
    """
    return _WHITESPACE_RE.sub(" ", text)


def is_data_uri(url: str) -> bool:
    return url.strip().lower().startswith("data:")


def resolve_url(url: str, base_url: str | None) -> str:
    """
    Resolve a possibly relative URL against a base URL.

    Resolution is best effort: data URIs are passed through untouched and a
    value that cannot be joined is returned as given.

    Args:
        url: Attribute value from the markup.
        base_url: Base URI of the page the markup came from.

    Returns:
        Absolute URL, or the original value when resolution is not possible.
    """
    value = url.strip()
    if not value or not base_url or is_data_uri(value):
        return value
    try:
        return urljoin(base_url, value)
    except ValueError as e:
        LOGGER.debug(f"Could not resolve URL {value!r} against {base_url!r}: {e}")
        return value


def parse_srcset(srcset: str) -> list[tuple[str, str]]:
    """
    Split a ``srcset`` style candidate list into ``(url, descriptor)`` pairs.

    Commas inside a URL are kept; a candidate only ends at a comma that
    follows whitespace or trails the URL itself.

    Args:
        srcset: Raw attribute value, e.g. ``"a.jpg 1x, b.jpg 2x"``.

    Returns:
        Candidates in source order.
    """
    candidates: list[tuple[str, str]] = []
    position = 0
    length = len(srcset)
    while position < length:
        while position < length and (srcset[position].isspace() or srcset[position] == ","):
            position += 1
        if position >= length:
            break
        start = position
        while position < length and not srcset[position].isspace():
            position += 1
        url = srcset[start:position]
        descriptor = ""
        if url.endswith(","):
            url = url.rstrip(",")
        else:
            start = position
            while position < length and srcset[position] != ",":
                position += 1
            descriptor = srcset[start:position].strip()
        if url:
            candidates.append((url, descriptor))
    return candidates


def first_srcset_url(srcset: str) -> str:
    candidates = parse_srcset(srcset)
    return candidates[0][0] if candidates else ""


def resolve_srcset(srcset: str, base_url: str | None) -> str:
    """Resolve every candidate URL of a ``srcset`` value."""
    candidates = parse_srcset(srcset)
    if not candidates:
        return srcset
    parts = []
    for url, descriptor in candidates:
        resolved = resolve_url(url, base_url)
        parts.append(f"{resolved} {descriptor}" if descriptor else resolved)
    return ", ".join(parts)


def safe_markdown_url(url: str) -> str:
    """
    Encode the characters that would terminate a Markdown link destination.

    Args:
        url: Absolute or relative URL.

    Returns:
        URL with spaces and parentheses percent-encoded.
    """
    if not url:
        return ""
    return url.replace(" ", "%20").replace("(", "%28").replace(")", "%29")


def is_absolute_url(url: str) -> bool:
    parts = urlsplit(url)
    return bool(parts.scheme) and (bool(parts.netloc) or parts.scheme in ("file", "about", "data"))


def strip_text_fragment(url: str) -> str:
    """
    Remove a ``:~:text=`` fragment directive from a URL.

    An element anchor that preceded the directive (``#section:~:text=...``) is
    kept; a trailing ``&`` separator is dropped with the directive.

    Args:
        url: Page location.

    Returns:
        URL without any text-fragment directive.
    """
    parts = urlsplit(url)
    fragment = parts.fragment
    if TEXT_FRAGMENT_DIRECTIVE not in fragment:
        return url
    anchor = fragment[: fragment.index(TEXT_FRAGMENT_DIRECTIVE)]
    anchor = anchor.rstrip("&")
    return urlunsplit(parts._replace(fragment=anchor))


def _encode_fragment_text(text: str) -> str:
    # "-", "," and "&" carry syntax inside a text directive
    return quote(text, safe="").replace("-", "%2D")


def build_text_fragment_url(url: str, text: str, max_exact_length: int = 80, edge_words: int = 3) -> str:
    """
    Build a URL that highlights ``text`` through a text-fragment directive.

    Short single-line selections are matched exactly; longer or multi-line
    ones use a ``start,end`` range built from their first and last words.

    Args:
        url: Page location (any existing directive is replaced).
        text: Selected plain text.
        max_exact_length: Longest selection matched verbatim.
        edge_words: Words taken from each end for range matching.

    Returns:
        URL carrying a ``#:~:text=`` directive, or the stripped URL when the
        selection has no text.
    """
    base = strip_text_fragment(url)
    lines = [collapse_whitespace(line).strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return base

    if len(lines) == 1 and len(lines[0]) <= max_exact_length:
        directive = _encode_fragment_text(lines[0])
    else:
        start = " ".join(lines[0].split()[:edge_words])
        end = " ".join(lines[-1].split()[-edge_words:])
        directive = f"{_encode_fragment_text(start)},{_encode_fragment_text(end)}"

    parts = urlsplit(base)
    anchor = parts.fragment
    return urlunsplit(parts._replace(fragment=f"{anchor}{TEXT_FRAGMENT_DIRECTIVE}{directive}"))
