"""Settings commands."""

from typing import Optional

import typer
from pydantic import ValidationError
from rich.prompt import Confirm

from intervalpro_cli.config import get_config_manager
from intervalpro_cli.ui.console import get_console
from intervalpro_cli.ui.formatters import format_error, format_output, format_success
from intervalpro_cli.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND

app = typer.Typer(help="Settings commands")
console = get_console()


def _parse_value(value: str) -> str | int | float | bool:
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit():
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


@app.command("show")
def show_settings(
    profile: str = typer.Option("default", "--profile", help="Profile name"),
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """Show current settings."""
    config_manager = get_config_manager(profile)
    settings = config_manager.config.model_dump()
    if output in ("json", "yaml"):
        format_output(settings, output)
        return

    flat = {
        f"{section}.{key}": value
        for section, values in settings.items()
        for key, value in values.items()
    }
    format_output(flat, output)


@app.command("get")
def get_setting(
    key: str = typer.Argument(..., help="Setting key (e.g., sound.effect_volume)"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Get a setting value."""
    value = get_config_manager(profile).get(key)
    if value is None:
        format_error(f"Setting '{key}' not found")
        raise typer.Exit(ERROR_NOT_FOUND)
    console.print(value)


@app.command("set")
def set_setting(
    key: str = typer.Argument(..., help="Setting key (e.g., timer.fullscreen)"),
    value: str = typer.Argument(..., help="Setting value"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Set a setting value."""
    parsed_value = _parse_value(value)
    try:
        get_config_manager(profile).set(key, parsed_value)
    except KeyError:
        format_error(f"Setting '{key}' not found")
        raise typer.Exit(ERROR_NOT_FOUND)
    except ValidationError as e:
        format_error(f"Invalid value for '{key}': {e.errors()[0]['msg']}")
        raise typer.Exit(ERROR_INVALID_ARGS)

    format_success(f"Setting '{key}' set to '{parsed_value}'")


@app.command("reset")
def reset_settings(
    key: Optional[str] = typer.Argument(None, help="Setting key to reset"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset settings to defaults."""
    if not yes:
        msg = "all settings" if not key else f"'{key}'"
        if not Confirm.ask(f"Are you sure you want to reset {msg}?", default=False):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    config_manager = get_config_manager(profile)
    if key and config_manager.get(key) is None:
        format_error(f"Setting '{key}' not found")
        raise typer.Exit(ERROR_NOT_FOUND)

    config_manager.reset(key)
    if key:
        format_success(f"Setting '{key}' reset to default")
    else:
        format_success("Settings reset to defaults")


@app.command("volume")
def volume(
    level: Optional[float] = typer.Argument(
        None, min=0.0, max=1.0, help="Effect volume between 0.0 and 1.0"
    ),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Show or set the cue effect volume."""
    config_manager = get_config_manager(profile)
    if level is None:
        console.print(f"Effect volume: {config_manager.effect_volume:.2f}")
        return

    config_manager.set("sound.effect_volume", level)
    format_success(f"Effect volume set to {level:.2f}")
