"""Service layer for webclip.

This module provides the core services:
- sanitize: Fragment cleanup and URL resolution
- MarkdownConverter: Selection HTML to Markdown conversion
- SelectionContextBuilder: Clip context records from selections
- render_entry: Entry template rendering
"""

from webclip.services.converter import MarkdownConverter
from webclip.services.sanitizer import sanitize
from webclip.services.selection import Selection, SelectionContextBuilder
from webclip.services.template import DEFAULT_ENTRY_TEMPLATE, render_entry, render_template

__all__ = [
    "DEFAULT_ENTRY_TEMPLATE",
    "MarkdownConverter",
    "Selection",
    "SelectionContextBuilder",
    "render_entry",
    "render_template",
    "sanitize",
]
