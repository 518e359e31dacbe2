"""CLI entrypoint: Typer app definition and command registration"""

from typing import Annotated

import typer

from mdarticle.cli.commands import (
    export_cmd, import_cmd, init_cmd, pack_cmd, render_cmd, show_cmd,
)
from mdarticle.config import load_config
from mdarticle.log import configure_logging


app = typer.Typer(name="mdarticle", no_args_is_help=True, help="Markdown article rendering, frontmatter export, and archiving")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    log_json: Annotated[bool, typer.Option("--log-json", help="Emit JSON log lines")] = False,
    ):
    """Configure logging before any command runs."""
    try:
        settings = load_config()
    except ValueError:
        settings = None     # reported by the command itself
    configure_logging(
        verbose=verbose or bool(settings and settings.verbose),
        log_json=log_json or bool(settings and settings.log_json),
    )


app.command(name="render")(render_cmd)
app.command(name="pack")(pack_cmd)
app.command(name="init")(init_cmd)
app.command(name="import")(import_cmd)
app.command(name="show")(show_cmd)
app.command(name="export")(export_cmd)
