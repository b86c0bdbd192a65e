"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdview.cli.commands import events_cmd, frontmatter_cmd, render_cmd


app = typer.Typer(name="mdview", no_args_is_help=True, help="Render markdown with custom components into a node tree")

app.command(name="render")(render_cmd)
app.command(name="events")(events_cmd)
app.command(name="frontmatter")(frontmatter_cmd)
