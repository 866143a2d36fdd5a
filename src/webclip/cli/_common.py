"""Common CLI utilities and the main app group."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)
_configured = False


def configure_logging(*, verbose: bool = False, level: str = "WARNING") -> None:
    """Configure logging with Rich handler. Call once at startup."""
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=logging.DEBUG if verbose else level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                tracebacks_show_locals=verbose,
            )
        ],
        force=True,
    )

    _configured = True


def read_input(source: str) -> str:
    """Read HTML from a file path, or from stdin when ``source`` is ``-``."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def write_output(text: str, output: Path | None) -> None:
    """Write text to ``output``, or echo it to stdout."""
    if output is None:
        click.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    click.echo(f"Wrote {output}", err=True)


@click.group(help="Convert web page selections to Markdown clips.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def app(verbose: bool) -> None:
    """
    Entry point for the webclip CLI.

    Provides commands for converting HTML fragments and building clip entries.
    """
    from webclip.config import get_settings
    from webclip.exceptions import ConfigurationError

    try:
        level = get_settings().log_level
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from e
    configure_logging(verbose=verbose, level=level)
