"""Main CLI entry point for cdns."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import pydantic
import typer
import yaml
from rich.markup import escape

from cdns.cli.commands.common import ExitCode, console, err_console
from cdns.config import (
    LogFormat,
    LogLevel,
    Scope,
    Settings,
    default_config_path,
    ensure_config_file,
    load_settings,
)
from cdns.core.errors import CdnsError, PartialWriteError, ValidationError
from cdns.logging import setup_logging

logger = logging.getLogger(__name__)

# Create the main app
app = typer.Typer(
    name="cdns",
    help="Switch the DNS servers of a Linux host through NetworkManager, systemd-resolved or resolv.conf",
    no_args_is_help=True,
)


# Global options stored in context
class GlobalOptions:
    def __init__(self):
        self.settings: Optional[Settings] = None
        self.config_file: Optional[Path] = None
        self.verbose: bool = False


def _execute(action):
    """Run a command body and turn failures into exit codes."""
    from cdns.cli.commands.dns import InsufficientPrivileges, UserCancelled

    try:
        if asyncio.iscoroutine(action):
            asyncio.run(action)
        else:
            action()
    except ValidationError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise typer.Exit(ExitCode.VALIDATION_ERROR)
    except InsufficientPrivileges:
        err_console.print("[red]Error:[/] insufficient privileges. Try running with sudo.")
        raise typer.Exit(ExitCode.PERMISSION_ERROR)
    except PartialWriteError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise typer.Exit(ExitCode.PARTIAL_FAILURE)
    except UserCancelled:
        err_console.print("[yellow]Operation cancelled.[/]")
        raise typer.Exit(ExitCode.ERROR)
    except (CdnsError, TimeoutError) as e:
        logger.debug("Command failed", exc_info=True)
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise typer.Exit(ExitCode.ERROR)


# ============================================================================
# Status Commands
# ============================================================================


@app.command("status")
def status(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Print the status as JSON"),
):
    """Show the detected backend and the DNS servers per interface."""
    from cdns.cli.commands.status import status

    _execute(status(ctx.obj, json_output))


@app.command("detect")
def detect(ctx: typer.Context):
    """Show which DNS backend is in charge and why."""
    from cdns.cli.commands.status import detect

    _execute(detect(ctx.obj))


@app.command("list")
def list_presets(ctx: typer.Context):
    """List built-in and custom DNS presets."""
    from cdns.cli.commands.presets import list_presets

    _execute(lambda: list_presets(ctx.obj))


# ============================================================================
# DNS Commands
# ============================================================================


@app.command("set")
def set_dns(
    ctx: typer.Context,
    servers: list[str] = typer.Argument(..., help="Preset name or DNS server addresses"),
    interface: Optional[list[str]] = typer.Option(
        None, "--interface", "-i", help="Interface to change (repeatable)"
    ),
    scope: Optional[Scope] = typer.Option(
        None, "--scope", help="Interfaces to target when none are named (default from config)"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the plan without applying it"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Set DNS servers from a preset or a list of addresses."""
    from cdns.cli.commands.dns import set_dns

    options = ctx.obj
    scope = scope or options.settings.dns.default_scope
    _execute(set_dns(options, servers, interface or [], scope, dry_run, yes))


@app.command("reset")
def reset(
    ctx: typer.Context,
    interface: Optional[list[str]] = typer.Option(
        None, "--interface", "-i", help="Interface to reset (repeatable)"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Return DNS to automatic (DHCP) configuration."""
    from cdns.cli.commands.dns import reset

    _execute(reset(ctx.obj, interface or [], yes))


# ============================================================================
# Version Command
# ============================================================================


@app.command("version")
def version():
    """Show version information."""
    from cdns import __version__

    console.print(f"cdns version {__version__}")


# ============================================================================
# Main Callback (Global Options)
# ============================================================================


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_level: Optional[LogLevel] = typer.Option(None, "--log-level", help="Log level"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Write logs as JSON lines"),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Config file (default ~/.config/cdns/config.yaml)"
    ),
):
    """Linux-first DNS management."""
    ctx.ensure_object(GlobalOptions)

    overrides: dict = {}
    if verbose:
        overrides["logging"] = {"level": LogLevel.DEBUG}
    elif log_level is not None:
        overrides["logging"] = {"level": log_level}
    if json_logs:
        overrides.setdefault("logging", {})["format"] = LogFormat.JSON

    try:
        settings = load_settings(config, **overrides)
    except pydantic.ValidationError as e:
        err_console.print(f"[red]Invalid configuration:[/] {escape(str(e))}")
        raise typer.Exit(ExitCode.VALIDATION_ERROR)
    except (OSError, yaml.YAMLError) as e:
        err_console.print(f"[red]Failed to load configuration:[/] {escape(str(e))}")
        raise typer.Exit(ExitCode.ERROR)

    setup_logging(settings.logging.level, settings.logging.format)

    if config is None:
        path = default_config_path()
        try:
            if ensure_config_file(path):
                logger.info(f"Created default config at {path}")
        except OSError as e:
            logger.debug(f"Could not create default config at {path}: {e}")

    ctx.obj.settings = settings
    ctx.obj.config_file = config
    ctx.obj.verbose = verbose


if __name__ == "__main__":
    app()
