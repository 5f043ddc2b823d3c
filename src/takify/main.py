"""Main entry point for Takify CLI."""

import typer
from rich.console import Console

from takify import __version__
from takify.commands import auth_command, config_command, tasks_command
from takify.utils.typer_helpers import SuggestingGroup

app = typer.Typer(
    name="takify",
    cls=SuggestingGroup,
    help="Personal task manager: add, filter, sort and track your tasks",
    no_args_is_help=True,
)

console = Console()

app.add_typer(auth_command.app)
app.add_typer(tasks_command.app)
app.add_typer(config_command.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Takify[/bold] version [cyan]{__version__}[/cyan]")


if __name__ == "__main__":
    app()
