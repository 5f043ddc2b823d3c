"""Configuration management commands."""

import json
from typing import Optional

import typer
from pydantic import ValidationError as PydanticValidationError

from takify.models import ValidationError
from takify.services.config_service import get_config_service
from takify.utils.ui.console import get_console
from takify.utils.ui.formatters import format_success

from .decorators import command_wrapper

app = typer.Typer(help="Configuration management commands")
console = get_console()


def _lookup(key: str):
    try:
        return get_config_service().get(key)
    except KeyError as e:
        raise ValidationError(f"Configuration key '{key}' not found") from e


@app.command("show")
@command_wrapper(auth_required=False)
def show_config() -> None:
    """Show the current configuration."""
    print(json.dumps(get_config_service().config.model_dump(), indent=2))


@app.command("get")
@command_wrapper(auth_required=False)
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., api.endpoint)"),
) -> None:
    """Get a configuration value."""
    value = _lookup(key)
    if hasattr(value, "model_dump"):
        value = value.model_dump()
    console.print(value)


@app.command("set")
@command_wrapper(auth_required=False)
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., api.endpoint)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    _lookup(key)
    try:
        get_config_service().set(key, value)
    except PydanticValidationError as e:
        errors = "; ".join(err["msg"] for err in e.errors())
        raise ValidationError(f"Invalid value for '{key}': {errors}") from e
    format_success(f"Configuration '{key}' set to '{value}'")


@app.command("reset")
@command_wrapper(auth_required=False)
def reset_config(
    key: Optional[str] = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if key is not None:
        _lookup(key)
    if not yes and not typer.confirm(f"Reset {key or 'all configuration'} to defaults?"):
        console.print("[yellow]Cancelled[/yellow]")
        return
    get_config_service().reset(key)
    if key:
        format_success(f"Configuration '{key}' reset to defaults")
    else:
        format_success("Configuration reset to defaults")
