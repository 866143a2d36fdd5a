"""Command-line interface for webclip.

Commands are organized into modules by functionality:

- convert: HTML fragment to Markdown
- clip: Selection context and entry rendering
"""

# Import all command modules to register them with the app
from webclip.cli import (
    clip,  # noqa: F401
    convert,  # noqa: F401
)
from webclip.cli._common import app

__all__ = ["app"]
