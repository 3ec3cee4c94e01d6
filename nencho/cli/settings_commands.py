"""Settings CLI commands for Nencho.

Manages settings.json - output format and log level preferences.
"""

import click

from nencho.sdk import (
    KNOWN_SETTINGS,
    SettingsError,
    get_settings_path,
    load_settings,
    set_setting,
    unset_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - default_output_format: text or json
    - log_level: DEBUG, INFO, WARNING, ERROR, CRITICAL
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
        return

    click.echo("Current settings:")
    for key, value in current.items():
        click.echo(f"  {key}: {value}")


@settings.command("set")
@click.argument("key", type=click.Choice(sorted(KNOWN_SETTINGS)))
@click.argument("value")
def settings_set(key, value):
    """Set KEY to VALUE.

    Examples:
        nencho settings set default_output_format json
        nencho settings set log_level debug
    """
    try:
        path = set_setting(key, value)
    except SettingsError as e:
        raise click.ClickException(str(e))
    click.echo(f"Set {key}: {load_settings()[key]}")
    click.echo(f"Saved to: {path}")


@settings.command("unset")
@click.argument("key")
def settings_unset(key):
    """Remove KEY, reverting to its default."""
    if unset_setting(key):
        click.echo(f"Cleared {key} setting.")
    else:
        click.echo(f"{key} was not set.")
