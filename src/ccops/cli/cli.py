"""CLI application for the ConfigClient controller."""

import typer

from ccops.cli.commands.configclients import app as configclients_app
from ccops.cli.commands.controller import app as controller_app

app = typer.Typer(
    help="ccops-cli - ConfigClient controller tooling",
    no_args_is_help=True,
)

app.add_typer(controller_app, name="controller", help="Run the ConfigClient controller.")
app.add_typer(
    configclients_app,
    name="configclients",
    help="Inspect / reconcile single ConfigClients.",
)


if __name__ == "__main__":
    app()
