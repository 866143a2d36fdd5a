"""Entry template rendering.

Templates use ``{{ name }}`` placeholders filled from a clip context. Unknown
names render as empty strings.
"""

import re
from datetime import datetime

from webclip.models import SelectionContext

DEFAULT_ENTRY_TEMPLATE = "### {{time}}\n{{content}}\n\n- source: [{{title}}]({{url}})"

_PLACEHOLDER_RE = re.compile(r"\{\{\s*([a-zA-Z0-9_]+)\s*\}\}")


def format_timestamp(moment: datetime) -> str:
    """Format a timestamp in local time as ``YYYY-MM-DD HH:MM``."""
    return moment.astimezone().strftime("%Y-%m-%d %H:%M")


def parse_created_at(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def create_template_variables(context: SelectionContext, folder: str = "") -> dict[str, str]:
    """
    Build the placeholder values for one entry.

    Args:
        context: Clip context from the selection builder.
        folder: Name of the folder the entry is filed under.

    Returns:
        Mapping of placeholder name to value.
    """
    created = parse_created_at(context.created_at)
    formatted = format_timestamp(created)
    return {
        "time": formatted,
        "createdAt": formatted,
        "updatedAt": formatted,
        "isoTime": context.created_at,
        "isoCreatedAt": context.created_at,
        "isoUpdatedAt": context.created_at,
        "title": context.title,
        "url": context.text_fragment_url or context.base_url,
        "baseUrl": context.base_url,
        "content": context.markdown.strip(),
        "folder": folder,
    }


def render_template(template: str, variables: dict[str, str]) -> str:
    return _PLACEHOLDER_RE.sub(lambda match: variables.get(match.group(1), ""), template)


def render_entry(context: SelectionContext, template: str = DEFAULT_ENTRY_TEMPLATE, folder: str = "") -> str:
    """
    Render one Markdown entry for a clip.

    A ``- link:`` line is appended when the context carries a link.

    Args:
        context: Clip context from the selection builder.
        template: Entry template.
        folder: Name of the folder the entry is filed under.

    Returns:
        Entry text without trailing whitespace.
    """
    entry = render_template(template, create_template_variables(context, folder)).rstrip()
    if context.link is not None:
        link_text = context.link.text.strip() or context.link.href
        entry += f"\n- link: [{link_text}]({context.link.href})"
    return entry
