"""CLI entrypoint: Typer app definition and command registration"""

import typer

from univault.cli.commands import build_cmd, check_cmd, list_cmd, main_callback, show_cmd


app = typer.Typer(name="univault", no_args_is_help=True, help="Static content site builder")

app.callback()(main_callback)
app.command(name="build")(build_cmd)
app.command(name="list")(list_cmd)
app.command(name="show")(show_cmd)
app.command(name="check")(check_cmd)
