"""Selection context builder.

Turns what the host page hands over (the cloned selection, the location and
the document title) into the record a clip entry is written from.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from urllib.parse import urlsplit

from webclip.config import WebclipSettings, get_settings
from webclip.dom import Element, find_first, is_link, parse_fragment, text_content
from webclip.exceptions import ValidationError
from webclip.models import LinkDescriptor, SelectionContext, SelectionResult
from webclip.services.converter import MarkdownConverter
from webclip.services.sanitizer import visible_text
from webclip.utils import (
    build_text_fragment_url,
    collapse_whitespace,
    is_absolute_url,
    resolve_url,
    strip_text_fragment,
)

LOGGER = logging.getLogger(__name__)

NO_SELECTION_MESSAGE = "No text selected"


@dataclass(frozen=True)
class Selection:
    """A detached copy of the user's selection.

    Attributes:
        fragment: Cloned contents of the selected range.
        text: The host's plain-text rendering of the selection.
        ancestors: Detached elements enclosing the range, innermost (the
            common container) first.
    """

    fragment: Element
    text: str = ""
    ancestors: tuple[Element, ...] = ()

    @classmethod
    def from_html(cls, html: str, text: str | None = None, context_html: str | None = None) -> "Selection":
        """
        Build a selection from markup.

        Args:
            html: Markup of the selected range.
            text: Plain-text rendering; derived from the markup when omitted.
            context_html: Outer markup of the element that contains the range.

        Returns:
            Selection whose only ancestor is the parsed context element, if any.
        """
        selected = parse_fragment(html)
        if text is None:
            text = collapse_whitespace(visible_text(selected)).strip()

        ancestors: tuple[Element, ...] = ()
        if context_html:
            context = parse_fragment(context_html)
            container = context.element_children[0] if len(context.element_children) == 1 else context
            ancestors = (container,)
        return cls(fragment=selected, text=text, ancestors=ancestors)


def format_created_at(moment: datetime) -> str:
    """Format a timestamp as UTC ISO-8601 with milliseconds and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def find_link_element(selection: Selection) -> Element | None:
    """
    Locate the hyperlink nearest to the selection.

    Order: an enclosing link, a link inside the selection, a link in the
    common container, then a link in the container's parent.
    """
    for ancestor in selection.ancestors:
        if is_link(ancestor):
            return ancestor

    inside = find_first(selection.fragment, is_link)
    if inside is not None:
        return inside

    for scope in selection.ancestors[:2]:
        found = find_first(scope, is_link)
        if found is not None:
            return found
    return None


def describe_link(element: Element, base_url: str | None, limit: int) -> LinkDescriptor:
    href = resolve_url(element.get("href") or "", base_url)
    text = collapse_whitespace(text_content(element)).strip() or href
    return LinkDescriptor(href=href, text=text[:limit])


class SelectionContextBuilder:
    """Build clip contexts from selections.

    Usage:
        builder = SelectionContextBuilder()
        result = builder.build(Selection.from_html("<p>Hi</p>"), "https://example.com/a", "Example")
    """

    def __init__(
        self,
        converter: MarkdownConverter | None = None,
        settings: WebclipSettings | None = None,
    ) -> None:
        """
        Initialise the builder.

        Args:
            converter: Converter to render the selection; built from settings when omitted.
            settings: Settings to use; the process-wide settings when omitted.
        """
        self.settings = settings or get_settings()
        self.converter = converter or MarkdownConverter.from_settings(self.settings)

    def build(
        self,
        selection: Selection,
        location: str,
        title: str,
        base_uri: str | None = None,
        now: datetime | None = None,
    ) -> SelectionResult:
        """
        Build the context record for one clip.

        Args:
            selection: The detached selection.
            location: Current page URL (may carry a text-fragment directive).
            title: Document title.
            base_uri: Base URI for relative URLs; defaults to ``location``.
            now: Clip time; defaults to the current time.

        Returns:
            ``SelectionResult`` with ``success=False`` when nothing usable was selected.

        Raises:
            ValidationError: If ``location`` is not an absolute URL.
        """
        if not location or not is_absolute_url(location):
            raise ValidationError("Page location must be an absolute URL", field="location", value=location)

        text = selection.text.strip()
        if not selection.fragment.children and not text:
            LOGGER.debug("Selection fragment and text are both empty")
            return SelectionResult(success=False, error=NO_SELECTION_MESSAGE)

        base_url = strip_text_fragment(location)
        resolve_base = base_uri or base_url
        markdown = self.converter.convert_fragment(selection.fragment, base_url=resolve_base).strip()
        if not markdown:
            if not text:
                LOGGER.debug("Selection rendered no Markdown and carries no text")
                return SelectionResult(success=False, error=NO_SELECTION_MESSAGE)
            LOGGER.debug("Structural rendering was empty, using the selected text")
            markdown = text

        # Only selected text becomes a directive; Markdown never appears on the page
        if self.settings.text_fragment_links and text:
            text_fragment_url = build_text_fragment_url(base_url, text)
        else:
            text_fragment_url = base_url

        link_element = find_link_element(selection)
        link = None
        if link_element is not None:
            link = describe_link(link_element, resolve_base, self.settings.link_text_limit)

        context = SelectionContext(
            selection_text=text or markdown,
            markdown=markdown,
            base_url=base_url,
            title=title.strip() or urlsplit(base_url).hostname or base_url,
            created_at=format_created_at(now or datetime.now(UTC)),
            text_fragment_url=text_fragment_url,
            link=link,
        )
        LOGGER.info(f"Built clip context for {base_url} ({len(markdown)} chars)")
        return SelectionResult(success=True, context=context)
