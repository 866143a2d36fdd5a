"""Clip commands."""

from pathlib import Path

import click

from webclip.cli._common import app, read_input, write_output


@app.command("clip", help="Build a clip entry from a selected HTML fragment.")
@click.argument("source", default="-", required=False)
@click.option("--url", "-u", type=str, required=True, help="Location of the page the selection came from")
@click.option("--title", "-t", type=str, default="", help="Document title (defaults to the host name)")
@click.option("--text", type=str, default=None, help="Plain-text selection (derived from the HTML when omitted)")
@click.option(
    "--context",
    "context_file",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    help="File holding the outer HTML of the element that contains the selection",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["json", "markdown", "entry"], case_sensitive=False),
    default="entry",
    show_default=True,
    help="Output format",
)
@click.option(
    "--template",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    help="Entry template file (for entry format)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    help="Output file. Prints to stdout when omitted.",
)
def clip_selection(
    source: str,
    url: str,
    title: str,
    text: str | None,
    context_file: Path | None,
    output_format: str,
    template: Path | None,
    output: Path | None,
) -> None:
    """Build the clip context for a selection and print it.

    Exits with status 1 when the selection holds no usable content.

    Examples:
        webclip clip selection.html --url https://example.com/post --title "Post"
        webclip clip selection.html --url https://example.com/post --format json
        webclip clip selection.html --url https://example.com/post --template entry.md
    """
    from webclip.config import load_settings
    from webclip.exceptions import WebclipError
    from webclip.services.selection import Selection, SelectionContextBuilder
    from webclip.services.template import render_entry

    try:
        html = read_input(source)
        context_html = context_file.read_text(encoding="utf-8") if context_file else None
    except OSError as e:
        click.echo(f"Error: cannot read input: {e}", err=True)
        raise SystemExit(1) from e

    try:
        settings = load_settings(entry_template=None, entry_template_file=template) if template else load_settings()
        builder = SelectionContextBuilder(settings=settings)
        result = builder.build(Selection.from_html(html, text=text, context_html=context_html), url, title)
        entry_template = settings.get_entry_template()
    except WebclipError as e:
        click.echo(f"Error: {e.message} [correlation_id={e.correlation_id}]", err=True)
        raise SystemExit(1) from e

    if not result.success or result.context is None:
        click.echo(f"Error: {result.error}", err=True)
        raise SystemExit(1)

    context = result.context
    if output_format == "json":
        write_output(context.model_dump_json(by_alias=True, exclude_none=True, indent=2), output)
    elif output_format == "markdown":
        write_output(context.markdown, output)
    else:
        write_output(render_entry(context, entry_template), output)
