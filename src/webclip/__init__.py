"""Convert web page selections into self-contained Markdown clips."""

from webclip.services.converter import MarkdownConverter
from webclip.services.selection import Selection, SelectionContextBuilder

__version__ = "0.1.0"

__all__ = [
    "MarkdownConverter",
    "Selection",
    "SelectionContextBuilder",
    "__version__",
]
