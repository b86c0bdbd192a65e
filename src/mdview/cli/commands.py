"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdview.config import RenderOptions, load_config
from mdview.contexts.html import HtmlContext
from mdview.contexts.tree import TreeContext
from mdview.core.events import iter_events
from mdview.core.frontmatter import extract_frontmatter, load_frontmatter
from mdview.core.render import render_markdown
from mdview.errors import MarkdownRenderError


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _options(overrides: dict = None) -> RenderOptions:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding='utf-8')
    except OSError as e:
        _fail(f"Cannot read {path}", e)


def _echo_debug(context, options: RenderOptions) -> None:
    if options.debug:
        for line in context.debug_info:
            typer.echo(line, err=True)


def render_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown file to render")],
    fmt: Annotated[str, typer.Option("--format", help="tree (JSON nodes) or html")] = "tree",
    maths: Annotated[Optional[bool], typer.Option("--maths/--no-maths", help="Enable $math$ rendering")] = None,
    debug: Annotated[Optional[bool], typer.Option("--debug/--no-debug", help="Print the event stream to stderr")] = None,
    raw_html: Annotated[Optional[str], typer.Option("--raw-html", help="passthrough, escape or drop")] = None,
    wikilinks: Annotated[Optional[bool], typer.Option("--wikilinks/--no-wikilinks", help="Parse [[wiki links]]")] = None,
    theme: Annotated[Optional[str], typer.Option("--theme", help="Pygments style for fenced code")] = None,
    ):
    """Render a markdown file and print the node tree or HTML."""
    if fmt not in ("tree", "html"):
        _fail(f"Unknown format {fmt!r}; expected tree or html")
    options = _options(overrides={
        "maths": maths, "debug": debug, "raw_html": raw_html, "wikilinks": wikilinks, "theme": theme,
    })
    source = _read(path)
    context = TreeContext() if fmt == "tree" else HtmlContext()
    try:
        root = render_markdown(source, context, options)
    except MarkdownRenderError as e:
        _echo_debug(context, options)
        _fail(f"Failed to render {path}", e)

    _echo_debug(context, options)
    typer.echo(root.model_dump_json(indent=2) if fmt == "tree" else root)


def events_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown file to tokenize")],
    wikilinks: Annotated[Optional[bool], typer.Option("--wikilinks/--no-wikilinks", help="Parse [[wiki links]]")] = None,
    ):
    """Print the event stream, one event per line."""
    options = _options(overrides={"wikilinks": wikilinks})
    document = extract_frontmatter(_read(path))
    for event in iter_events(document.body, offset=document.body_offset, wikilinks=options.wikilinks):
        typer.echo(event.describe())


def frontmatter_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown file to inspect")],
    ):
    """Print the parsed frontmatter as JSON."""
    document = extract_frontmatter(_read(path))
    try:
        data = load_frontmatter(document.frontmatter)
    except ValueError as e:
        _fail(str(e))
    typer.echo(json.dumps(data, indent=2, default=str))
