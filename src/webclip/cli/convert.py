"""Conversion commands."""

from pathlib import Path

import click

from webclip.cli._common import app, read_input, write_output


@app.command("convert", help="Convert an HTML fragment to Markdown.")
@click.argument("source", default="-", required=False)
@click.option(
    "--base-url",
    "-b",
    type=str,
    default=None,
    help="Base URL for resolving relative links and image sources",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    help="Output file. Prints to stdout when omitted.",
)
def convert_html(source: str, base_url: str | None, output: Path | None) -> None:
    """Convert an HTML fragment (file or stdin) to Markdown.

    Examples:
        webclip convert selection.html
        webclip convert selection.html --base-url https://example.com/post
        cat selection.html | webclip convert - --output clip.md
    """
    from webclip.config import get_settings
    from webclip.exceptions import WebclipError
    from webclip.services.converter import MarkdownConverter

    try:
        html = read_input(source)
    except OSError as e:
        click.echo(f"Error: cannot read {source}: {e}", err=True)
        raise SystemExit(1) from e

    try:
        converter = MarkdownConverter.from_settings(get_settings())
    except WebclipError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from e

    write_output(converter.convert(html, base_url=base_url), output)
